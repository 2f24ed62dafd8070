"""A JSON-RPC 2.0 server exposed as a WSGI application."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from contextvars import copy_context
from http import HTTPStatus
from socketserver import ThreadingMixIn
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from wsgiref.headers import Headers
from wsgiref.simple_server import WSGIServer, make_server

from .errors import (
    Detail,
    GeneralError,
    InvalidRequestError,
    JSONRPCError,
    MethodNotFoundError,
    ParseError,
)
from .messages import Request, Response
from .options import ServerOptions
from .params import LogOnlyParam, context_with_params

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"

_PROBE_PATHS = frozenset({"/health", "/readiness", "/liveliness"})
_NOT_FOUND_BODY = b"404 page not found\n"


def _encode(obj: Any) -> bytes:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _decode(raw: bytes) -> Union[List[Request], Request]:
    """Decode a body into a batch or a single request; raises ValueError."""
    document = json.loads(
        raw.decode("utf-8", errors="replace"), parse_constant=_reject_constant
    )
    if document is None:
        return []
    if isinstance(document, list):
        return [Request.from_obj(item) for item in document]
    return Request.from_obj(document)


class RPCHandler(ABC):
    """One callable method of the server."""

    @abstractmethod
    def method_name(self) -> str:
        """The name callers use to reach this method."""

    @abstractmethod
    def execute(self, headers: Mapping[str, str], id: Optional[str], params: Any) -> Any:
        """Compute the call's result; raising turns into an error response."""

    @abstractmethod
    def parameters_valid(self, params: Any) -> Optional[Iterable[Detail]]:
        """Return None if params are acceptable, otherwise details explaining why not."""


class _BoundedInput:
    """A readable that stops after a fixed number of bytes."""

    def __init__(self, stream: Any, length: int) -> None:
        self._stream = stream
        self._remaining = max(length, 0)

    def read(self, size: int = -1) -> bytes:
        wanted = self._remaining if size < 0 else min(size, self._remaining)
        if wanted <= 0:
            return b""
        data = self._stream.read(wanted)
        self._remaining -= len(data)
        return data


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


def _headers_from_environ(environ: Mapping[str, Any]) -> Headers:
    pairs = []
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            name = key[5:]
        elif key in ("CONTENT_TYPE", "CONTENT_LENGTH") and value:
            name = key
        else:
            continue
        pairs.append(("-".join(part.capitalize() for part in name.split("_")), str(value)))
    return Headers(pairs)


class Server:
    """Routes JSON-RPC calls over HTTP to registered handlers."""

    def __init__(self, options: Optional[ServerOptions] = None) -> None:
        self.options = options if options is not None else ServerOptions()
        self._methods: Dict[str, RPCHandler] = {}

    def register(self, handler: RPCHandler) -> None:
        """Add a handler; registering the same method name twice is an error."""
        name = handler.method_name()
        if name in self._methods:
            raise ValueError(f"method {name!r} already registered")
        self._methods[name] = handler

    def handle(
        self,
        method: str,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = b"",
    ) -> Tuple[int, bytes]:
        """Serve one HTTP request, returning the status code and body.

        ``body`` is either bytes or a binary readable.
        """
        if path in _PROBE_PATHS:
            return HTTPStatus.OK, b""
        if path != "/rpc" and not path.startswith("/rpc/"):
            return HTTPStatus.NOT_FOUND, _NOT_FOUND_BODY
        with context_with_params(LogOnlyParam("method", method)):
            return self._serve_rpc(method, headers if headers is not None else {}, body)

    def __call__(
        self, environ: Mapping[str, Any], start_response: Callable[..., Any]
    ) -> List[bytes]:
        method = environ.get("REQUEST_METHOD", "GET")
        path = environ.get("PATH_INFO", "") or "/"
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        stream = environ.get("wsgi.input")
        body = _BoundedInput(stream, length) if stream is not None else b""
        status, payload = self.handle(method, path, _headers_from_environ(environ), body)
        response_headers = [("Content-Length", str(len(payload)))]
        if payload:
            content_type = (
                "text/plain; charset=utf-8"
                if status == HTTPStatus.NOT_FOUND
                else "application/json"
            )
            response_headers.append(("Content-Type", content_type))
        start_response(f"{int(status)} {HTTPStatus(status).phrase}", response_headers)
        return [payload]

    def start(self, port: int) -> None:
        """Listen on all interfaces at ``port`` and serve until interrupted."""
        with make_server("", port, self, server_class=_ThreadingWSGIServer) as httpd:
            httpd.serve_forever()

    def _read_body(self, body: Any) -> bytes:
        limit = max(self.options.max_request_size, 0)
        if hasattr(body, "read"):
            return body.read(limit)
        return bytes(body[:limit])

    def _serve_rpc(
        self, method: str, headers: Mapping[str, str], body: Any
    ) -> Tuple[int, bytes]:
        if method != "POST":
            error = MethodNotFoundError(
                Detail("rationale", "All RPC request should be made with a POST method.")
            )
            return HTTPStatus.METHOD_NOT_ALLOWED, error.to_json_bytes()
        try:
            raw = self._read_body(body)
        except OSError:
            error = ParseError(Detail("rationale", "Failed to read request body"))
            return HTTPStatus.BAD_REQUEST, error.to_json_bytes()
        try:
            decoded = _decode(raw)
        except ValueError:
            error = ParseError(
                Detail("rationale", "Failed to parse valid json from request body")
            )
            return HTTPStatus.BAD_REQUEST, error.to_json_bytes()
        if isinstance(decoded, list):
            return self._handle_batch(headers, decoded)
        return self._handle_single(headers, decoded)

    def _handle_single(
        self, headers: Mapping[str, str], request: Request
    ) -> Tuple[int, bytes]:
        try:
            response = self._route(headers, request)
        except JSONRPCError as error:
            return HTTPStatus.BAD_REQUEST, error.to_json_bytes()
        return HTTPStatus.OK, response.to_json_bytes()

    def _handle_batch(
        self, headers: Mapping[str, str], batch: List[Request]
    ) -> Tuple[int, bytes]:
        options = self.options
        if len(batch) > options.max_batch_size:
            error = InvalidRequestError(
                None,
                Detail("rationale", "Too many requests"),
                Detail("maxBatchSize", options.max_batch_size),
            )
            return HTTPStatus.BAD_REQUEST, error.to_json_bytes()
        workers = options.batch_request_parallelism
        if workers <= 0:
            workers = max(len(batch), 1)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(copy_context().run, self._route_to_dict, headers, request)
                for request in batch
            ]
            outcomes = [future.result() for future in futures]
        replies = [
            outcome
            for request, outcome in zip(batch, outcomes)
            if request.id is not None
        ]
        try:
            payload = _encode(replies if replies else None)
        except (TypeError, ValueError):
            payload = b""
        return HTTPStatus.OK, payload

    def _route_to_dict(self, headers: Mapping[str, str], request: Request) -> Dict[str, Any]:
        try:
            return self._route(headers, request).to_dict()
        except JSONRPCError as error:
            return error.to_dict()

    def _route(self, headers: Mapping[str, str], request: Request) -> Response:
        if request.jsonrpc != JSONRPC_VERSION:
            raise InvalidRequestError(
                request.id, Detail("rationale", "Only JSONRPC version 2 is supported")
            )
        handler = self._methods.get(request.method)
        if handler is None:
            raise MethodNotFoundError()
        logger.info(
            "Received request method=%s",
            request.method,
            extra={"log_type": "request.v1", "rpc_method": request.method},
        )
        problems = handler.parameters_valid(request.params)
        if problems is not None:
            raise InvalidRequestError(request.id, *problems)
        try:
            result = handler.execute(headers, request.id, request.params)
        except JSONRPCError:
            raise
        except Exception as exc:
            raise GeneralError.from_exception(request.id, exc) from exc
        return Response(request.id, result)