from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, PrivateAttr, field_validator

from q_mcp_setup.constants import MCP_SERVERS_KEY

APPROVE_ALL = "*"


class ProviderDefinition(BaseModel):
    """One MCP server entry in mcp.json.

    Field presence is tracked: only fields that were explicitly given
    (by the catalog template or by the source document) are serialized,
    except ``command`` and ``args`` which are always written. Unknown keys
    from hand-edited entries are kept as extras.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    command: str = Field(min_length=1)
    """Executable name or path."""

    args: list[str] = Field(default_factory=list)
    """Ordered command-line arguments."""

    env: dict[str, str] = Field(default_factory=dict)
    """Environment variables for the launched process."""

    auto_approve: list[str] = Field(default_factory=list, alias="autoApprove")
    """Tool names approved without prompting, or ["*"] for all."""

    disabled: bool = False
    """Whether the host should skip launching this provider."""

    timeout: Optional[PositiveInt] = None
    """Per-provider timeout in seconds; None means host default."""

    _source_text: Optional[str] = PrivateAttr(default=None)

    @property
    def approves_all(self) -> bool:
        return APPROVE_ALL in self.auto_approve

    @property
    def source_text(self) -> Optional[str]:
        """Verbatim JSON text of this entry when it was read from a file."""
        return self._source_text

    def with_source_text(self, text: str) -> ProviderDefinition:
        self._source_text = text
        return self

    def to_json_dict(self) -> dict[str, Any]:
        """Return the JSON-ready mapping, mirroring field presence."""
        data = self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
        data.setdefault("command", self.command)
        data.setdefault("args", list(self.args))
        if self.model_extra:
            data.update(self.model_extra)
        return data


class RawProviderEntry(BaseModel):
    """A provider entry kept exactly as read.

    Used for hand-edited entries that parse as JSON objects but do not fit
    ``ProviderDefinition`` (remote ``url`` servers, numeric env values).
    The value is written back unchanged.
    """

    value: dict[str, Any]
    """The entry's JSON object."""

    reason: str = ""
    """Why the entry did not validate as a ProviderDefinition."""

    _source_text: Optional[str] = PrivateAttr(default=None)

    @property
    def source_text(self) -> Optional[str]:
        return self._source_text

    def with_source_text(self, text: str) -> RawProviderEntry:
        self._source_text = text
        return self

    def to_json_dict(self) -> dict[str, Any]:
        return dict(self.value)


ProviderEntry = Union[ProviderDefinition, RawProviderEntry]


class ConfigurationDocument(BaseModel):
    """The provider configuration document: name -> provider entry."""

    model_config = ConfigDict(populate_by_name=True)

    providers: dict[str, ProviderEntry] = Field(
        default_factory=dict, alias=MCP_SERVERS_KEY
    )

    @field_validator("providers")
    @classmethod
    def _names_non_empty(
        cls, value: dict[str, ProviderEntry]
    ) -> dict[str, ProviderEntry]:
        for name in value:
            if not name or not name.strip():
                raise ValueError("provider names must be non-empty")
        return value

    def provider_names(self) -> list[str]:
        return list(self.providers)

    def add(self, name: str, definition: ProviderEntry) -> bool:
        """Add *definition* unless *name* is already present.

        Existing entries always win; returns True if the entry was added.
        """
        if name in self.providers:
            return False
        self.providers[name] = definition
        return True

    def to_json_dict(self) -> dict[str, Any]:
        return {
            MCP_SERVERS_KEY: {
                name: definition.to_json_dict()
                for name, definition in self.providers.items()
            }
        }

    @classmethod
    def from_json_dict(cls, data: dict[str, Any]) -> ConfigurationDocument:
        return cls.model_validate({MCP_SERVERS_KEY: data.get(MCP_SERVERS_KEY) or {}})
