"""Path resolution for the files q-mcp-setup manages.

All managed state lives under one base directory (``~/.aws/amazonq`` by
default): the provider document, its timestamped backups, the saved
GitHub token, and the history/log state cleared by ``--reinstall``.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import NamedTuple

from q_mcp_setup.constants import (
    BACKUP_TIMESTAMP_FORMAT,
    HISTORY_DIRNAME,
    LSP_LOG_FILENAME,
    MCP_CONFIG_FILENAME,
    TOKEN_FILENAME,
)
from q_mcp_setup.errors import ConfigWriteError
from q_mcp_setup.utils import log_info


class ConfigPaths(NamedTuple):
    """Container for all paths derived from the config directory.

    Attributes:
        config_dir: Base directory
        mcp_config: Provider document (mcp.json)
        token_file: Saved GitHub token
        history_dir: Chat history directory
        lsp_log: Language server log file
    """

    config_dir: Path
    mcp_config: Path
    token_file: Path
    history_dir: Path
    lsp_log: Path


def derive_paths(config_dir: Path) -> ConfigPaths:
    """Derive every managed path from *config_dir*."""
    return ConfigPaths(
        config_dir=config_dir,
        mcp_config=config_dir / MCP_CONFIG_FILENAME,
        token_file=config_dir / TOKEN_FILENAME,
        history_dir=config_dir / HISTORY_DIRNAME,
        lsp_log=config_dir / LSP_LOG_FILENAME,
    )


def backup_path_for(config_path: Path, now: datetime, attempt: int = 0) -> Path:
    """Return ``<stem>-backup-<timestamp>.json`` next to *config_path*.

    Args:
        config_path: The document being backed up.
        now: Timestamp to embed.
        attempt: Collision counter; values above zero add a ``-N`` suffix.
    """
    stamp = now.strftime(BACKUP_TIMESTAMP_FORMAT)
    suffix = f"-{attempt}" if attempt else ""
    return config_path.with_name(f"{config_path.stem}-backup-{stamp}{suffix}.json")


def list_backups(config_path: Path) -> list[Path]:
    """Return existing backups of *config_path*, oldest name first."""
    return sorted(config_path.parent.glob(f"{config_path.stem}-backup-*.json"))


def ensure_config_dir(config_dir: Path) -> None:
    """Create the config directory if needed.

    Raises:
        ConfigWriteError: The directory could not be created.
    """
    if config_dir.is_dir():
        return
    log_info(f"Creating Amazon Q config directory at {config_dir}")
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigWriteError(f"Failed to create directory: {config_dir}: {exc}") from exc
