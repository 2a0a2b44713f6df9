"""Document codecs for reading and writing mcp.json.

Two interchangeable implementations of the same capability:

``StructuredCodec``
    Parses the whole document with the ``json`` module. Used whenever the
    prior document is strict JSON.

``PatternCodec``
    Works line by line on consistently indented text: provider keys are
    the ``"name": {`` lines one level below ``"mcpServers": {`` and a
    provider block ends at the first ``}`` line at the key's indentation.
    Used for hand-edited files the strict parser rejects. Extracted blocks
    are kept verbatim and spliced back unchanged on encode. It needs
    multi-line, indented input: a compact document with ``"mcpServers": {``
    and its entries on one line yields no providers and a warning.

Both yield the same provider names for well-formed, consistently indented,
multi-line input. Entries that parse as JSON objects but do not fit
``ProviderDefinition`` are kept as ``RawProviderEntry`` values and written
back unchanged. The reconciliation engine only sees the ``DocumentCodec``
protocol; ``select_codec()`` picks the implementation once per run.
"""

from __future__ import annotations

import json
import re
from typing import Any, Optional, Protocol

from pydantic import ValidationError as PydanticValidationError

from q_mcp_setup.constants import MCP_SERVERS_KEY
from q_mcp_setup.models import (
    ConfigurationDocument,
    ProviderDefinition,
    ProviderEntry,
    RawProviderEntry,
)
from q_mcp_setup.utils import log_debug, log_warn

INDENT = "\t"


class DocumentCodec(Protocol):
    """Encode/decode/extract capability over mcp.json text."""

    name: str

    def provider_names(self, text: str) -> list[str]:
        """Return provider names in document order."""
        ...

    def extract(self, text: str, name: str) -> Optional[ProviderEntry]:
        """Return the definition stored under *name*, or None if it cannot be read."""
        ...

    def encode(self, document: ConfigurationDocument) -> str:
        """Render *document* as JSON text."""
        ...


def _to_definition(name: str, value: Any) -> Optional[ProviderEntry]:
    """Validate *value* as a provider, keeping it as written when it does not fit.

    Returns None only when *value* is not a JSON object.
    """
    if not isinstance(value, dict):
        log_debug(f"Provider {name!r} is not a JSON object")
        return None
    try:
        return ProviderDefinition.model_validate(value)
    except PydanticValidationError as exc:
        fields = sorted(
            {".".join(str(part) for part in err["loc"]) or "<entry>" for err in exc.errors()}
        )
        reason = f"failed validation on {', '.join(fields)}"
        log_warn(f"Provider {name!r} {reason}; keeping it as written")
        return RawProviderEntry(value=value, reason=reason)


def parse_document(text: str) -> Optional[dict[str, Any]]:
    """Parse *text* as a JSON object, returning None if it is not one."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    return data if isinstance(data, dict) else None


# ============================================================================
# Structured codec
# ============================================================================


class StructuredCodec:
    """Codec backed by the ``json`` module."""

    name = "structured"

    def _servers(self, text: str) -> dict[str, Any]:
        data = parse_document(text)
        if data is None:
            log_warn("Existing configuration is not valid JSON; no providers could be read.")
            return {}
        servers = data.get(MCP_SERVERS_KEY)
        return servers if isinstance(servers, dict) else {}

    def provider_names(self, text: str) -> list[str]:
        return list(self._servers(text))

    def extract(self, text: str, name: str) -> Optional[ProviderEntry]:
        servers = self._servers(text)
        if name not in servers:
            return None
        return _to_definition(name, servers[name])

    def encode(self, document: ConfigurationDocument) -> str:
        return json.dumps(document.to_json_dict(), indent=INDENT, ensure_ascii=False) + "\n"


# ============================================================================
# Pattern codec
# ============================================================================

_SERVERS_LINE = re.compile(r'^(?P<indent>[ \t]*)"' + MCP_SERVERS_KEY + r'"\s*:\s*\{\s*$')
_KEY_LINE = re.compile(r'^(?P<indent>[ \t]+)"(?P<name>[^"\\]+)"\s*:\s*(?P<rest>\{.*)$')


class _Layout:
    """Line positions of the provider section in a document."""

    def __init__(self, lines: list[str]) -> None:
        self.lines = lines
        self.start = -1
        self.end = len(lines)
        self.key_indent: Optional[str] = None

        for i, line in enumerate(lines):
            m = _SERVERS_LINE.match(line)
            if m:
                self.start = i
                servers_indent = m.group("indent")
                break
        else:
            return

        closing = re.compile("^" + re.escape(servers_indent) + r"\}")
        for i in range(self.start + 1, len(lines)):
            if closing.match(lines[i]):
                self.end = i
                break
            if self.key_indent is None:
                m = _KEY_LINE.match(lines[i])
                if m and len(m.group("indent")) > len(servers_indent):
                    self.key_indent = m.group("indent")

    def key_lines(self) -> list[tuple[int, str, str]]:
        """Return (line index, name, rest) for each provider key line."""
        found: list[tuple[int, str, str]] = []
        if self.key_indent is None:
            return found
        for i in range(self.start + 1, self.end):
            m = _KEY_LINE.match(self.lines[i])
            if m and m.group("indent") == self.key_indent:
                found.append((i, m.group("name"), m.group("rest")))
        return found


def _strip_trailing_comma(text: str) -> str:
    stripped = text.rstrip()
    return stripped[:-1] if stripped.endswith(",") else stripped


class PatternCodec:
    """Codec working on indented key lines and verbatim block splicing."""

    name = "pattern"

    def provider_names(self, text: str) -> list[str]:
        layout = _Layout(text.splitlines())
        if layout.start < 0:
            if f'"{MCP_SERVERS_KEY}"' in text:
                log_warn(
                    f'The "{MCP_SERVERS_KEY}" section is not laid out one key per line; '
                    "the line-pattern reader cannot read its providers."
                )
            else:
                log_warn(f'No "{MCP_SERVERS_KEY}" section found in the existing configuration.')
        names: list[str] = []
        for _, name, _ in layout.key_lines():
            if name not in names:
                names.append(name)
        return names

    def _block_text(self, text: str, name: str) -> Optional[str]:
        layout = _Layout(text.splitlines())
        for index, key_name, rest in layout.key_lines():
            if key_name != name:
                continue
            single = _strip_trailing_comma(rest)
            if parse_document(single) is not None:
                return single
            closing = re.compile("^" + re.escape(layout.key_indent or "") + r"\}")
            for j in range(index + 1, layout.end):
                if closing.match(layout.lines[j]):
                    body = [rest, *layout.lines[index + 1:j], _strip_trailing_comma(layout.lines[j])]
                    return "\n".join(body)
            log_debug(f"No closing line found for provider {name!r}")
            return None
        return None

    def extract(self, text: str, name: str) -> Optional[ProviderEntry]:
        block = self._block_text(text, name)
        if block is None:
            return None
        value = parse_document(block)
        if value is None:
            log_debug(f"Block for provider {name!r} is not a self-contained JSON object")
            return None
        definition = _to_definition(name, value)
        if definition is None:
            return None
        return definition.with_source_text(block)

    def _render_definition(self, definition: ProviderEntry) -> str:
        field_indent = INDENT * 3
        fields: list[str] = []
        for key, value in definition.to_json_dict().items():
            if isinstance(value, dict) and value:
                items = [
                    f"{field_indent}{INDENT}{json.dumps(k, ensure_ascii=False)}: "
                    f"{json.dumps(v, ensure_ascii=False)}"
                    for k, v in value.items()
                ]
                rendered = "{\n" + ",\n".join(items) + f"\n{field_indent}}}"
            else:
                rendered = json.dumps(value, ensure_ascii=False)
            fields.append(f"{field_indent}{json.dumps(key, ensure_ascii=False)}: {rendered}")
        return "{\n" + ",\n".join(fields) + f"\n{INDENT * 2}}}"

    def encode(self, document: ConfigurationDocument) -> str:
        blocks: list[str] = []
        for name, definition in document.providers.items():
            body = definition.source_text or self._render_definition(definition)
            blocks.append(f"{INDENT * 2}{json.dumps(name, ensure_ascii=False)}: {body}")
        if not blocks:
            return f'{{\n{INDENT}"{MCP_SERVERS_KEY}": {{}}\n}}\n'
        return (
            f'{{\n{INDENT}"{MCP_SERVERS_KEY}": {{\n'
            + ",\n".join(blocks)
            + f"\n{INDENT}}}\n}}\n"
        )


# ============================================================================
# Selection
# ============================================================================


def select_codec(prior_text: Optional[str], forced: str = "auto") -> DocumentCodec:
    """Pick the codec for this run.

    Args:
        prior_text: Contents of the existing mcp.json, or None.
        forced: ``structured`` or ``pattern`` to override detection.

    Returns:
        StructuredCodec unless the prior document is not strict JSON (or
        the pattern codec is forced).
    """
    if forced == "structured":
        return StructuredCodec()
    if forced == "pattern":
        log_debug("Using line-pattern codec (forced by Q_MCP_JSON_CODEC)")
        return PatternCodec()
    if prior_text is None or parse_document(prior_text) is not None:
        return StructuredCodec()
    log_warn("Existing mcp.json is not strict JSON. Using line-pattern fallback to read it.")
    return PatternCodec()
