"""Writes the merged document to disk and verifies it.

The document is rendered by the run's codec, written through
``atomic_write()`` (temp file in the same directory, then rename) with
owner-only permissions, and parsed back. A failed round-trip is reported
but does not fail the run: the file is already in place.
"""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple, Optional

from q_mcp_setup.atomic_io import atomic_write
from q_mcp_setup.codec import DocumentCodec, parse_document
from q_mcp_setup.constants import MCP_SERVERS_KEY, SECRET_FILE_MODE
from q_mcp_setup.errors import ConfigWriteError
from q_mcp_setup.models import ConfigurationDocument
from q_mcp_setup.utils import log_info, log_success, log_warn


class WriteResult(NamedTuple):
    """Outcome of writing the document.

    Attributes:
        path: Final location of the document
        valid: Whether the written file parsed back with the expected
            provider names
    """

    path: Path
    valid: bool


def verify(path: Path, expected_names: Optional[list[str]] = None) -> bool:
    """Parse *path* back and compare provider names with *expected_names*."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        return False
    data = parse_document(text)
    if data is None or not isinstance(data.get(MCP_SERVERS_KEY), dict):
        return False
    if expected_names is not None:
        return set(data[MCP_SERVERS_KEY]) == set(expected_names)
    return True


def write(document: ConfigurationDocument, path: Path, codec: DocumentCodec) -> WriteResult:
    """Render *document* with *codec* and replace *path* atomically.

    Raises:
        ConfigWriteError: The file could not be written or renamed into place.
    """
    log_info(f"Creating MCP configuration at {path}")
    text = codec.encode(document)
    try:
        atomic_write(path, text, mode=SECRET_FILE_MODE)
    except OSError as exc:
        raise ConfigWriteError(f"MCP configuration file was not created: {exc}") from exc
    log_success("MCP configuration created successfully.")

    log_info("Verifying MCP configuration...")
    valid = verify(path, document.provider_names())
    if valid:
        log_success("MCP configuration is valid JSON.")
    else:
        log_warn("MCP configuration may not be valid JSON. Please check the file manually.")
    return WriteResult(path, valid)
