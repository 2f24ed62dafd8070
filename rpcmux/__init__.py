"""A JSON-RPC 2.0 server as a WSGI application, with an example adder."""

__version__ = "0.1.0"
__all__ = ["adder", "errors", "messages", "options", "params", "server"]