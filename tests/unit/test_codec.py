"""Unit tests for the structured and line-pattern document codecs."""

from __future__ import annotations

import json

import pytest

from q_mcp_setup import catalog
from q_mcp_setup.codec import PatternCodec, StructuredCodec, parse_document, select_codec
from q_mcp_setup.models import ConfigurationDocument, ProviderDefinition, RawProviderEntry

TOKEN = "ghp_" + "b" * 36

# Hand-edited layout as written by older installers: tab indentation,
# inline arrays, fields in arbitrary order.
HAND_EDITED = """{
\t"mcpServers": {
\t\t"duckduckgo": {
\t\t\t"command": "uvx",
\t\t\t"args": ["ddg-mcp-server"]
\t\t},
\t\t"custom.widget": {
\t\t\t"command": "/opt/widget/bin/serve",
\t\t\t"args": ["--port", "9000"],
\t\t\t"env": {
\t\t\t\t"WIDGET_MODE": "fast"
\t\t\t},
\t\t\t"disabled": false
\t\t},
\t\t"inline.one": {"command": "node", "args": ["index.js"]},
\t\t"last.one": {
\t\t\t"command": "python3",
\t\t\t"args": []
\t\t}
\t}
}
"""


def _document(secret=None) -> ConfigurationDocument:
    return ConfigurationDocument(providers=catalog.build(secret))


@pytest.fixture(params=[StructuredCodec, PatternCodec], ids=["structured", "pattern"])
def codec(request):
    return request.param()


class TestProviderNames:
    def test_both_codecs_agree_on_hand_edited_file(self) -> None:
        expected = ["duckduckgo", "custom.widget", "inline.one", "last.one"]
        assert StructuredCodec().provider_names(HAND_EDITED) == expected
        assert PatternCodec().provider_names(HAND_EDITED) == expected

    def test_both_codecs_agree_on_encoded_document(self, codec) -> None:
        text = codec.encode(_document(TOKEN))
        names = list(catalog.build(TOKEN))
        assert StructuredCodec().provider_names(text) == names
        assert PatternCodec().provider_names(text) == names

    def test_nested_objects_are_not_provider_names(self) -> None:
        names = PatternCodec().provider_names(HAND_EDITED)
        assert "env" not in names

    def test_structured_rejects_invalid_json(self) -> None:
        assert StructuredCodec().provider_names("{ not json") == []

    def test_pattern_reports_compact_layout(self, caplog) -> None:
        text = json.dumps({"mcpServers": {"a": {"command": "x"}}})
        assert StructuredCodec().provider_names(text) == ["a"]
        assert PatternCodec().provider_names(text) == []
        assert any("not laid out one key per line" in m for m in caplog.messages)

    def test_pattern_without_servers_section(self) -> None:
        assert PatternCodec().provider_names('{"mcpServers": {"a": {"command": "x"}}}') == []


class TestExtract:
    def test_extract_preserves_fields(self, codec) -> None:
        d = codec.extract(HAND_EDITED, "custom.widget")
        assert d is not None
        assert d.command == "/opt/widget/bin/serve"
        assert d.args == ["--port", "9000"]
        assert d.env == {"WIDGET_MODE": "fast"}
        assert "autoApprove" not in d.to_json_dict()

    def test_extract_single_line_block(self, codec) -> None:
        d = codec.extract(HAND_EDITED, "inline.one")
        assert d is not None
        assert d.args == ["index.js"]

    def test_extract_last_block(self, codec) -> None:
        d = codec.extract(HAND_EDITED, "last.one")
        assert d is not None
        assert d.command == "python3"

    def test_missing_name(self, codec) -> None:
        assert codec.extract(HAND_EDITED, "nope") is None

    def test_pattern_keeps_source_text(self) -> None:
        d = PatternCodec().extract(HAND_EDITED, "custom.widget")
        assert d is not None
        assert d.source_text is not None
        assert '"WIDGET_MODE": "fast"' in d.source_text
        assert json.loads(d.source_text)["disabled"] is False

    def test_pattern_fails_closed_on_misaligned_block(self) -> None:
        # closing brace indented with spaces instead of two tabs
        text = HAND_EDITED.replace('\t\t\t"disabled": false\n\t\t},', '\t\t\t"disabled": false\n    },')
        assert PatternCodec().extract(text, "custom.widget") is None

    def test_pattern_fails_closed_on_trailing_comma(self) -> None:
        text = HAND_EDITED.replace('"args": []\n', '"args": [],\n')
        assert PatternCodec().extract(text, "last.one") is None

    def test_pattern_reads_non_strict_document(self) -> None:
        # a trailing comma elsewhere breaks strict parsing of the whole file
        text = HAND_EDITED.replace('"args": []\n', '"args": [],\n')
        assert parse_document(text) is None
        d = PatternCodec().extract(text, "custom.widget")
        assert d is not None
        assert d.env == {"WIDGET_MODE": "fast"}

    def test_non_conforming_entry_kept_as_written(self, codec) -> None:
        entry = {"url": "https://mcp.example.com/sse", "headers": {"X-Key": "k"}}
        text = json.dumps({"mcpServers": {"remote": entry}}, indent="\t")
        d = codec.extract(text, "remote")
        assert isinstance(d, RawProviderEntry)
        assert d.to_json_dict() == entry
        assert "command" in d.reason

    def test_numeric_env_value_kept_as_written(self, codec) -> None:
        entry = {"command": "w", "args": ["serve"], "env": {"PORT": 9000}}
        text = json.dumps({"mcpServers": {"custom.widget": entry}}, indent="\t")
        d = codec.extract(text, "custom.widget")
        assert isinstance(d, RawProviderEntry)
        assert d.to_json_dict() == entry
        assert "env.PORT" in d.reason

    def test_non_object_entry_skipped(self, codec) -> None:
        text = json.dumps({"mcpServers": {"odd": {"command": "x"}, "list": ["a"]}}, indent="\t")
        assert codec.extract(text, "list") is None


class TestEncode:
    def test_round_trip_values(self, codec) -> None:
        doc = _document(TOKEN)
        doc.add("custom.widget", ProviderDefinition(command="w", args=["a"], env={"K": "V"}))
        parsed = json.loads(codec.encode(doc))
        assert parsed == doc.to_json_dict()

    def test_output_uses_tab_indentation(self, codec) -> None:
        text = codec.encode(_document())
        assert '\n\t"mcpServers": {' in text
        assert '\n\t\t"duckduckgo": {' in text

    def test_empty_document(self, codec) -> None:
        assert json.loads(codec.encode(ConfigurationDocument())) == {"mcpServers": {}}

    def test_pattern_splices_source_verbatim(self) -> None:
        d = PatternCodec().extract(HAND_EDITED, "custom.widget")
        doc = _document()
        doc.add("custom.widget", d)
        text = PatternCodec().encode(doc)
        assert '\t\t"custom.widget": ' + d.source_text in text
        assert json.loads(text)["mcpServers"]["custom.widget"]["disabled"] is False

    def test_strings_are_escaped(self, codec) -> None:
        doc = ConfigurationDocument(
            providers={"q": ProviderDefinition(command='a "quoted"\\path', env={"K": "line\nbreak"})}
        )
        parsed = json.loads(codec.encode(doc))
        assert parsed["mcpServers"]["q"]["command"] == 'a "quoted"\\path'
        assert parsed["mcpServers"]["q"]["env"]["K"] == "line\nbreak"


class TestSelectCodec:
    def test_no_prior_uses_structured(self) -> None:
        assert select_codec(None).name == "structured"

    def test_valid_prior_uses_structured(self) -> None:
        assert select_codec(HAND_EDITED).name == "structured"

    def test_invalid_prior_uses_pattern(self) -> None:
        assert select_codec(HAND_EDITED + ",").name == "pattern"

    def test_forced(self) -> None:
        assert select_codec(HAND_EDITED, "pattern").name == "pattern"
        assert select_codec("{oops", "structured").name == "structured"
