"""Configuration defaults for q-mcp-setup.

Fixed file names, environment overrides and the small set of constants
shared by the installer components.
"""

from __future__ import annotations

import os
import re
from pathlib import Path


# ============================================================================
# Directory & Path Constants
# ============================================================================


def get_config_dir() -> Path:
    """Get the Amazon Q configuration directory.

    Respects Q_CONFIG_DIR environment variable override.
    Defaults to ~/.aws/amazonq if not set.

    Returns:
        Path to the configuration directory
    """
    dir_str = os.environ.get("Q_CONFIG_DIR")
    if dir_str:
        return Path(dir_str).expanduser()
    return Path.home() / ".aws" / "amazonq"


MCP_CONFIG_FILENAME: str = "mcp.json"
"""Provider configuration document consumed by the Q CLI."""

TOKEN_FILENAME: str = "github_token.txt"
"""Persisted GitHub token (raw text, mode 600)."""

HISTORY_DIRNAME: str = "history"
"""Chat history directory, cleared under --reinstall."""

LSP_LOG_FILENAME: str = "lspLog.log"
"""Language server log, removed under --reinstall."""

BACKUP_TIMESTAMP_FORMAT: str = "%Y-%m-%d-%H:%M:%S"
"""strftime format used in mcp-backup-<timestamp>.json names."""

Q_APP_PATH: Path = Path("/Applications/Amazon Q.app")
"""macOS application bundle removed before a cask reinstall."""

AWS_CLI_INSTALL_URL = "https://aws.amazon.com/cli/"
Q_CLI_INSTALL_URL = "https://aws.amazon.com/q/developer/"
HOMEBREW_URL = "https://brew.sh/"


# ============================================================================
# Environment Flags
# ============================================================================


def _env_flag(key: str) -> bool:
    return os.environ.get(key, "") in ("1", "true", "yes")


def env_assume_yes() -> bool:
    """Return True when Q_MCP_ASSUME_YES=1 (answer yes to every prompt)."""
    return _env_flag("Q_MCP_ASSUME_YES")


def env_noninteractive() -> bool:
    """Return True when Q_MCP_NONINTERACTIVE=1 (take every prompt default)."""
    return _env_flag("Q_MCP_NONINTERACTIVE")


def env_codec() -> str:
    """Return the forced document codec name, or ``auto``."""
    value = os.environ.get("Q_MCP_JSON_CODEC", "auto").strip().lower()
    return value if value in VALID_CODECS else "auto"


def env_colors_enabled() -> bool:
    """Check if colors should be used based on NO_COLOR and TERM."""
    if "NO_COLOR" in os.environ:
        return False
    term = os.environ.get("TERM", "")
    if not term or term == "dumb":
        return False
    return True


VALID_CODECS = frozenset({"auto", "structured", "pattern"})


# ============================================================================
# Provider Catalog Constants
# ============================================================================

MCP_SERVERS_KEY: str = "mcpServers"
"""Top-level key holding the provider mapping in mcp.json."""

GIT_RESEARCH_PROVIDER: str = "awslabs.git-repo-research-mcp-server"
"""Provider included only when a GitHub token is available."""

GIT_RESEARCH_TOKEN_ENV: str = "GITHUB_TOKEN"
"""Env key the token is injected under for the git research provider."""

ALWAYS_MERGED_PROVIDERS = frozenset({"duckduckgo", "strands"})
"""Utility providers the catalog always ships; never reported as extras."""


# ============================================================================
# Secret Validation
# ============================================================================

GITHUB_TOKEN_PATTERN = re.compile(r"^(ghp_|gho_|ghu_|ghs_)[a-zA-Z0-9]{36,40}$")
"""Advisory shape check for GitHub tokens."""

SECRET_FILE_MODE = 0o600
