"""Exception hierarchy for q-mcp-setup.

Provides a structured exception tree so callers can catch broad
categories (``McpSetupError``) or specific failure modes.

This module is a base-layer module: it must NOT import from any
other ``q_mcp_setup`` submodule.
"""

from __future__ import annotations


class McpSetupError(Exception):
    """Base exception for all q-mcp-setup errors."""


class ValidationError(McpSetupError):
    """Input validation failures (bad tokens, invalid arguments, etc.)."""


class ValidationAborted(ValidationError):
    """The user declined to continue with input that failed validation."""


class DependencyError(McpSetupError):
    """A mandatory external tool is missing or unusable."""


class BackupError(McpSetupError):
    """An existing configuration could not be backed up before overwrite."""


class ConfigWriteError(McpSetupError):
    """The configuration directory or final output file could not be written."""
