"""Key/value parameters carried through the current execution context."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, List, Mapping


@dataclass(frozen=True)
class Param:
    """A named value attached to the current context."""

    key: str
    value: Any


class SafeParam(Param):
    """A parameter that may be shown to callers."""


class LogOnlyParam(Param):
    """A parameter meant only for logs, never for responses."""


_PARAMS: ContextVar[Mapping[str, Param]] = ContextVar(
    "rpcmux_params", default=MappingProxyType({})
)


@contextmanager
def context_with_params(*params: Param) -> Iterator[List[Param]]:
    """Attach params for the duration of the block; a later key replaces an earlier one."""
    merged = dict(_PARAMS.get())
    merged.update((param.key, param) for param in params)
    token = _PARAMS.set(MappingProxyType(merged))
    try:
        yield list(merged.values())
    finally:
        _PARAMS.reset(token)


def params_from_context() -> List[Param]:
    """Return the params attached to the current context."""
    return list(_PARAMS.get().values())