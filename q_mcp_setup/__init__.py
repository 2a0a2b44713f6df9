"""q-mcp-setup - provision MCP server definitions for Amazon Q Developer."""

from importlib.metadata import PackageNotFoundError, version as _pkg_version

try:
    __version__ = _pkg_version("q-mcp-setup")
except PackageNotFoundError:
    __version__ = "0.4.0"  # fallback for editable installs / dev
