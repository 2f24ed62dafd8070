# rpcmux

A small JSON-RPC 2.0 server. A `rpcmux.server.Server` is a plain WSGI
application, so it can be mounted under any WSGI server, or started directly
with `Server.start(port)`, which serves on all interfaces using the standard
library's threaded WSGI server until interrupted.

It answers:

- `/rpc` and any path under `/rpc/`: JSON-RPC calls, which must use `POST`
- `/health`, `/readiness` and `/liveliness`: `200` with an empty body, for any
  HTTP method
- any other path: `404` with the body `404 page not found`

A request to `/rpc` with a method other than `POST` is answered with `405` and
a "Method not found" error object whose `data` explains that `POST` is
required.

## Installing

```
pip install .
```

No third-party packages are needed. For the tests, install the `test` extra
(`pip install .[test]`) and run `pytest`.

## Writing a method

Subclass `RPCHandler` and register it with a `Server`:

```python
from rpcmux.errors import Detail
from rpcmux.options import ServerOptions
from rpcmux.server import RPCHandler, Server


class Echo(RPCHandler):
    def method_name(self):
        return "echo"

    def parameters_valid(self, params):
        if isinstance(params, list):
            return None
        return [Detail("rationale", "params must be a list")]

    def execute(self, headers, id, params):
        return params


options = ServerOptions().with_max_batch_size(10).with_batch_request_parallelism(4)
server = Server(options)
server.register(Echo())
server.start(8080)
```

`Server.register` raises `ValueError` if a handler with the same method name is
already registered.

For each call the server:

1. answers "Invalid Request" (`-32600`) if `jsonrpc` is not `"2.0"`;
2. answers "Method not found" (`-32601`) if no handler has that name;
3. calls `parameters_valid(params)`; if it returns anything other than `None`,
   answers "Invalid Request" with the returned `Detail` objects gathered into
   the error's `data`;
4. calls `execute(headers, id, params)`. `headers` is a case-insensitive
   mapping of the HTTP request headers. A `JSONRPCError` raised here is sent
   back as it is; any other exception is wrapped by
   `GeneralError.from_exception`, giving code `0`, the exception's message and
   `data` of `null`.

A successful call is answered with `200` and
`{"jsonrpc":"2.0","result":...,"id":...}`. The `result` member is left out
when the result is `None`.

## Single and batch requests

A body holding a JSON array is a batch; any other JSON value is a single
request. A body that is not valid JSON, or whose members have the wrong types
(`jsonrpc` and `method` must be strings, `id` a string or `null`), is answered
with `400` and a "Parse error" (`-32700`). Member names match
case-insensitively and unknown members are ignored. A request without an `id`
is a notification.

- A failing single request is answered with `400` and its error object.
- A batch longer than `max_batch_size` is answered with `400` and an "Invalid
  Request" error whose `data` holds a rationale and `maxBatchSize`.
- Otherwise every batch entry is run, up to `batch_request_parallelism` at a
  time, and the answer is `200` with a JSON array holding the response or error
  object of each entry that has an `id`, in the order of the batch.
  Notifications get no entry; if no entry has an `id` the body is `null`.

## Options

`rpcmux.options.ServerOptions` is a frozen dataclass with three limits. Its
`with_max_request_size`, `with_batch_request_parallelism` and
`with_max_batch_size` methods return a changed copy.

| option                      | default            |
|-----------------------------|--------------------|
| `max_request_size` (bytes)  | 1024 * 1024 * 1024 |
| `batch_request_parallelism` | 8                  |
| `max_batch_size`            | 25                 |

A request body is read only up to `max_request_size` bytes; anything beyond
is ignored, which usually leaves invalid JSON. A `batch_request_parallelism`
of zero or less runs the whole batch at once.

## Errors

`rpcmux.errors` holds the error types. All derive from `JSONRPCError`, which is
an `Exception` carrying an `RPCError` (`code`, `message`, `data`) and an `id`.

| class                 | code    | message            |
|-----------------------|---------|--------------------|
| `ParseError`          | -32700  | Parse error        |
| `InvalidRequestError` | -32600  | Invalid Request    |
| `MethodNotFoundError` | -32601  | Method not found   |
| `GeneralError`        | chosen  | chosen             |

Each takes `Detail(key, value)` objects, which become its `data` mapping, and
has `to_dict()` and `to_json_bytes()` (compact UTF-8 JSON).

## Context parameters

`rpcmux.params` keeps `Param` values (`SafeParam`, `LogOnlyParam`) in a
context variable. `context_with_params(*params)` is a context manager that
attaches them for the duration of a block, a later key replacing an earlier
one; `params_from_context()` lists what is attached. While a call to `/rpc` is
served, a `LogOnlyParam("method", <HTTP method>)` is attached, and batch
entries run with a copy of that context.

## Calling without a network

`Server.handle(method, path, headers=None, body=b"")` runs one HTTP request
through the server and returns `(status, body)`. `body` may be bytes or a
binary readable. This is convenient in tests.

## The adder example

`rpcmux.adder` defines `Adder`, an `add` method that sums a list of 64-bit
integers (wrapping on overflow; `null` params or items count as empty or zero,
and floats with integer values are accepted). `build_adder_server()` returns a
server with it registered, a batch limit of 15, a 2 MiB request limit and a
parallelism of 16. Run it on port 1234 with:

```
rpcmux-adder
```

or choose another port with `rpcmux-adder --port 8080`. Then call it:

```
curl -X POST localhost:1234/rpc \
  -d '{"jsonrpc": "2.0", "method": "add", "params": [1, 2, 3], "id": "1"}'
```

which answers `{"jsonrpc":"2.0","result":6,"id":"1"}`.

## What it does not do

There is no client, no HTTPS, and no authentication; `id` values must be
strings or `null`, so numeric ids are refused as a parse error. Serving
through `Server.start` uses the standard library's development-grade WSGI
server; for production, mount the `Server` under a WSGI server of your choice.