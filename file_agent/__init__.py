"""Local file agent: filesystem operations over a token-gated loopback HTTP API."""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("file-agent")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
