"""An example server exposing an ``add`` method that sums integers."""

from __future__ import annotations

import argparse
import logging
from typing import Any, List, Mapping, Optional, Sequence

from .errors import Detail
from .options import ServerOptions
from .server import RPCHandler, Server

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_RATIONALE = "parameters MUST be an int64 array"

DEFAULT_PORT = 1234


def _as_int64(item: Any) -> int:
    if item is None:
        return 0
    if isinstance(item, bool):
        raise ValueError(_RATIONALE)
    if isinstance(item, float):
        if not item.is_integer():
            raise ValueError(_RATIONALE)
        item = int(item)
    if not isinstance(item, int) or not _INT64_MIN <= item <= _INT64_MAX:
        raise ValueError(_RATIONALE)
    return item


def _as_int64_array(params: Any) -> List[int]:
    if params is None:
        return []
    if not isinstance(params, (list, tuple)):
        raise ValueError(_RATIONALE)
    return [_as_int64(item) for item in params]


def _wrap_int64(value: int) -> int:
    return (value - _INT64_MIN) % (1 << 64) + _INT64_MIN


class Adder(RPCHandler):
    """Sums an array of 64-bit integers, wrapping on overflow."""

    def method_name(self) -> str:
        return "add"

    def execute(self, headers: Mapping[str, str], id: Optional[str], params: Any) -> int:
        return _wrap_int64(sum(_as_int64_array(params)))

    def parameters_valid(self, params: Any) -> Optional[List[Detail]]:
        try:
            _as_int64_array(params)
        except ValueError:
            return [Detail("rationale", _RATIONALE)]
        return None


def build_adder_server() -> Server:
    """A server with the adder registered and its own limits."""
    server = Server(
        ServerOptions(
            max_batch_size=15,
            max_request_size=2 * 1024 * 1024,
            batch_request_parallelism=16,
        )
    )
    server.register(Adder())
    return server


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="rpcmux-adder", description="Serve the add method over JSON-RPC."
    )
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    try:
        build_adder_server().start(args.port)
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        parser.exit(1, f"{exc}\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())