from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from q_mcp_setup.constants import (
    env_assume_yes,
    env_codec,
    env_colors_enabled,
    env_noninteractive,
    get_config_dir,
)


class InstallOptions(BaseModel):
    """Immutable options for one installer run.

    Built once by the CLI layer from flags and environment, then passed
    read-only to every component.
    """

    model_config = ConfigDict(frozen=True)

    debug: bool = False
    """Echo every external command with its raw output and exit code."""

    verbose: bool = False
    """Show expanded progress and failure detail."""

    reinstall: bool = False
    """Clear history/log state and reinstall the Q CLI."""

    github_token: Optional[str] = None
    """Token supplied with -g; validated and persisted when set."""

    use_colors: bool = True
    """Whether log output carries ANSI color codes."""

    config_dir: Path
    """Base directory holding mcp.json, backups and the token file."""

    assume_yes: bool = False
    """Answer yes to every confirmation."""

    noninteractive: bool = False
    """Never prompt; every confirmation takes its default."""

    codec: Literal["auto", "structured", "pattern"] = "auto"
    """Document codec selection for reading the prior mcp.json."""

    @property
    def show_debug(self) -> bool:
        return self.debug or self.verbose

    @classmethod
    def from_environment(cls, **flags: object) -> InstallOptions:
        """Build options from CLI flags layered over environment defaults."""
        values: dict[str, object] = {
            "config_dir": get_config_dir(),
            "assume_yes": env_assume_yes(),
            "noninteractive": env_noninteractive(),
            "codec": env_codec(),
            "use_colors": env_colors_enabled(),
        }
        if flags.pop("no_color", False):
            values["use_colors"] = False
        values.update(flags)
        return cls(**values)
