"""Tunable limits for the JSON-RPC server."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ServerOptions:
    """Request size, batch size and batch parallelism limits."""

    max_request_size: int = 1024 * 1024 * 1024
    batch_request_parallelism: int = 8
    max_batch_size: int = 25

    def with_max_request_size(self, max_size: int) -> "ServerOptions":
        return replace(self, max_request_size=max_size)

    def with_batch_request_parallelism(self, parallelism: int) -> "ServerOptions":
        return replace(self, batch_request_parallelism=parallelism)

    def with_max_batch_size(self, batch_size: int) -> "ServerOptions":
        return replace(self, max_batch_size=batch_size)