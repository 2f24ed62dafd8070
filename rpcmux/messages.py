"""JSON-RPC 2.0 request and response messages."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

JSONRPC_VERSION = "2.0"

_FIELDS = ("jsonrpc", "method", "id", "params")


def _encode(obj: Any) -> bytes:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _field_for(key: str) -> Optional[str]:
    if key in _FIELDS:
        return key
    folded = key.lower()
    return folded if folded in _FIELDS else None


@dataclass
class Request:
    """A single JSON-RPC call; ``id`` is None for notifications."""

    jsonrpc: str = ""
    method: str = ""
    id: Optional[str] = None
    params: Any = None

    @classmethod
    def from_obj(cls, obj: Any) -> "Request":
        """Build a request from decoded JSON, raising ValueError on a wrong shape.

        Member names match case-insensitively and unknown members are ignored.
        """
        request = cls()
        if obj is None:
            return request
        if not isinstance(obj, dict):
            raise ValueError(f"cannot decode {type(obj).__name__} into a request")
        problems = []
        for key, value in obj.items():
            name = _field_for(key)
            if name is None:
                continue
            if name in ("jsonrpc", "method"):
                if value is None:
                    continue
                if not isinstance(value, str):
                    problems.append(f"{name} must be a string")
                    continue
                setattr(request, name, value)
            elif name == "id":
                if value is not None and not isinstance(value, str):
                    problems.append("id must be a string or null")
                    continue
                request.id = value
            else:
                request.params = value
        if problems:
            raise ValueError("; ".join(problems))
        return request


@dataclass
class Response:
    """A successful JSON-RPC response; empty result and error are omitted."""

    id: Optional[str]
    result: Any = None
    error: Any = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.result is not None:
            body["result"] = self.result
        if self.error is not None:
            body["error"] = self.error
        body["id"] = self.id
        return body

    def to_json_bytes(self) -> bytes:
        """Encode as compact JSON; raises TypeError on unserialisable values."""
        return _encode(self.to_dict())