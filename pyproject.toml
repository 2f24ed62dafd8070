[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rpcmux"
version = "0.1.0"
description = "A small JSON-RPC 2.0 server exposed as a WSGI application, with batching and health endpoints."
requires-python = ">=3.10"
dependencies = []
keywords = ["json-rpc", "jsonrpc", "rpc", "wsgi", "server", "batch"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rpcmux-adder = "rpcmux.adder:main"

[tool.hatch.build.targets.wheel]
packages = ["rpcmux"]

[tool.pytest.ini_options]
addopts = "-ra"
