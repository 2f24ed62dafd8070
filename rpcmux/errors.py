"""JSON-RPC 2.0 error objects that can be raised and serialised."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

JSONRPC_VERSION = "2.0"

PARSE_ERROR_CODE = -32700
INVALID_REQUEST_CODE = -32600
METHOD_NOT_FOUND_CODE = -32601


def _encode(obj: Any) -> bytes:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


@dataclass(frozen=True)
class Detail:
    """A key/value pair explaining an error; collected into the error's data."""

    key: str
    value: Any


def _details_to_map(details: Iterable[Detail]) -> Dict[str, Any]:
    return {detail.key: detail.value for detail in details}


@dataclass
class RPCError:
    """The ``error`` member of a JSON-RPC error response."""

    code: int
    message: str
    data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "data": self.data}


class JSONRPCError(Exception):
    """An exception that serialises to a complete JSON-RPC error response."""

    def __init__(self, error: RPCError, id: Optional[str] = None) -> None:
        super().__init__(error.message)
        self.error = error
        self.id = id

    def __str__(self) -> str:
        return self.error.message

    def to_dict(self) -> Dict[str, Any]:
        return {"jsonrpc": JSONRPC_VERSION, "error": self.error.to_dict(), "id": self.id}

    def to_json_bytes(self) -> bytes:
        """Encode the response as compact JSON; raises TypeError on unserialisable data."""
        return _encode(self.to_dict())


class ParseError(JSONRPCError):
    """The request body was not valid JSON."""

    def __init__(self, *details: Detail) -> None:
        super().__init__(
            RPCError(PARSE_ERROR_CODE, "Parse error", _details_to_map(details)), None
        )


class GeneralError(JSONRPCError):
    """An application error with a caller-chosen code and message."""

    def __init__(
        self, id: Optional[str], message: str, code: int, *details: Detail
    ) -> None:
        super().__init__(RPCError(code, message, _details_to_map(details)), id)

    @classmethod
    def from_exception(cls, id: Optional[str], exc: BaseException) -> "GeneralError":
        """Wrap an arbitrary exception as an error with code 0 and no data."""
        error = cls(id, str(exc), 0)
        error.error = RPCError(0, str(exc), None)
        return error


class InvalidRequestError(JSONRPCError):
    """The request was well-formed JSON but not an acceptable call."""

    def __init__(self, id: Optional[str], *details: Detail) -> None:
        super().__init__(
            RPCError(INVALID_REQUEST_CODE, "Invalid Request", _details_to_map(details)),
            id,
        )


class MethodNotFoundError(JSONRPCError):
    """The requested method is not registered."""

    def __init__(self, *details: Detail) -> None:
        super().__init__(
            RPCError(METHOD_NOT_FOUND_CODE, "Method not found", _details_to_map(details)),
            None,
        )