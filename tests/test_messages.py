import json

import pytest

from rpcmux.messages import Request, Response


def test_request_from_full_object():
    req = Request.from_obj(
        json.loads('{"jsonrpc": "2.0", "method": "add", "id": "1", "params": [1, 2]}')
    )
    assert req == Request(jsonrpc="2.0", method="add", id="1", params=[1, 2])


def test_request_missing_members_default():
    req = Request.from_obj({})
    assert req.jsonrpc == ""
    assert req.method == ""
    assert req.id is None
    assert req.params is None


def test_request_from_null_is_empty():
    assert Request.from_obj(None) == Request()


def test_request_member_names_case_insensitive():
    req = Request.from_obj({"JSONRPC": "2.0", "Method": "add", "ID": "9"})
    assert (req.jsonrpc, req.method, req.id) == ("2.0", "add", "9")


def test_request_unknown_members_ignored():
    req = Request.from_obj({"jsonrpc": "2.0", "method": "add", "extra": True})
    assert req == Request(jsonrpc="2.0", method="add")


def test_request_null_members():
    req = Request.from_obj({"jsonrpc": None, "method": "add", "id": None, "params": None})
    assert req == Request(jsonrpc="", method="add", id=None, params=None)


@pytest.mark.parametrize("obj", [[1, 2], "text", 5, True])
def test_request_from_non_object_raises(obj):
    with pytest.raises(ValueError):
        Request.from_obj(obj)


@pytest.mark.parametrize(
    "obj",
    [
        {"jsonrpc": "2.0", "method": "add", "id": 1},
        {"jsonrpc": "2.0", "method": 3},
        {"jsonrpc": 2, "method": "add"},
    ],
)
def test_request_wrong_member_types_raise(obj):
    with pytest.raises(ValueError):
        Request.from_obj(obj)


def test_response_wire_bytes():
    assert Response("1", 3).to_json_bytes() == b'{"jsonrpc":"2.0","result":3,"id":"1"}'


def test_response_omits_missing_result_and_error():
    body = Response(None).to_dict()
    assert body == {"jsonrpc": "2.0", "id": None}


def test_response_keeps_falsy_result():
    body = Response("1", 0).to_dict()
    assert body["result"] == 0
    assert list(body) == ["jsonrpc", "result", "id"]


def test_response_with_error_member():
    body = Response("1", error={"code": 1}).to_dict()
    assert body["error"] == {"code": 1}
    assert "result" not in body


@pytest.mark.parametrize(
    "resp",
    [Response("a", [1, 2]), Response(None, {"x": "y"}), Response("b")],
)
def test_response_json_round_trip(resp):
    assert json.loads(resp.to_json_bytes()) == resp.to_dict()


def test_response_unserialisable_result_raises():
    with pytest.raises(TypeError):
        Response("1", object()).to_json_bytes()