from concurrent.futures import ThreadPoolExecutor

import pytest

from rpcmux.params import (
    LogOnlyParam,
    Param,
    SafeParam,
    context_with_params,
    params_from_context,
)


def test_empty_outside_any_context():
    assert params_from_context() == []


def test_params_visible_inside_block():
    with context_with_params(LogOnlyParam("method", "POST")):
        assert params_from_context() == [LogOnlyParam("method", "POST")]
    assert params_from_context() == []


def test_yields_current_params():
    with context_with_params(SafeParam("a", 1), SafeParam("b", 2)) as current:
        assert current == params_from_context()
        assert {p.key for p in current} == {"a", "b"}


def test_nested_blocks_merge_and_override():
    with context_with_params(SafeParam("a", 1), SafeParam("b", 2)):
        with context_with_params(LogOnlyParam("a", 3)):
            by_key = {p.key: p for p in params_from_context()}
            assert by_key["a"] == LogOnlyParam("a", 3)
            assert by_key["b"] == SafeParam("b", 2)
        by_key = {p.key: p for p in params_from_context()}
        assert by_key["a"] == SafeParam("a", 1)


def test_duplicate_keys_in_one_call_last_wins():
    with context_with_params(SafeParam("k", "first"), SafeParam("k", "second")):
        assert params_from_context() == [SafeParam("k", "second")]


def test_reset_after_exception():
    with pytest.raises(RuntimeError):
        with context_with_params(SafeParam("x", 1)):
            raise RuntimeError("fail")
    assert params_from_context() == []


def test_kinds_are_distinguished():
    safe = SafeParam("k", 1)
    log_only = LogOnlyParam("k", 1)
    assert isinstance(safe, Param) and isinstance(log_only, Param)
    assert safe != log_only


def test_other_thread_does_not_see_params():
    with context_with_params(SafeParam("x", 1)):
        assert params_from_context() == [SafeParam("x", 1)]
        with ThreadPoolExecutor(max_workers=1) as pool:
            other_thread_params = pool.submit(params_from_context).result()
    assert other_thread_params == []