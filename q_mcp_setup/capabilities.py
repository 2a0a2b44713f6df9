"""Capability probing for the external tools the installer relies on.

``probe()`` checks for a tool on PATH, makes one best-effort install
attempt when it is missing, re-checks, and reports the version. It never
raises for an absent tool: the caller decides whether absence is fatal.
"""

from __future__ import annotations

from typing import Optional, Sequence

from pydantic import BaseModel

from q_mcp_setup.constants import HOMEBREW_URL
from q_mcp_setup.host import HostPlatform
from q_mcp_setup.runner import CommandRunner, command_exists
from q_mcp_setup.utils import log_error, log_info, log_success


class CapabilityRecord(BaseModel):
    """Result of probing one external tool. Not persisted."""

    name: str
    """Display name of the tool."""

    present: bool
    """Whether the tool is on PATH after any install attempt."""

    version: str = "Unknown"
    """Version string reported by the tool, or "Unknown"."""

    install_attempted: bool = False
    """Whether an install command was run during this probe."""


def probe(
    runner: CommandRunner,
    command: str,
    name: str,
    install_commands: Sequence[Sequence[str]] = (),
    version_command: Optional[Sequence[str]] = None,
    host: Optional[HostPlatform] = None,
) -> CapabilityRecord:
    """Check for *command*, installing it once if missing.

    Args:
        runner: Command runner used for install and version calls.
        command: Executable to look up on PATH.
        name: Display name used in log lines.
        install_commands: Alternative install argvs, tried in order.
        version_command: Version query argv (default ``<command> --version``).
        host: Detected platform; brew installs are skipped on a macOS host
            without Homebrew.

    Returns:
        CapabilityRecord describing the final state.
    """
    log_info(f"Checking if {name} is installed...")
    attempted = False

    if not command_exists(command):
        log_error(f"{name} is not installed. Attempting to install...")

        needs_brew = any(argv and argv[0] == "brew" for argv in install_commands)
        if host is not None and host.is_macos and needs_brew and not command_exists("brew"):
            log_error("Homebrew is not installed. Please install Homebrew first.")
            log_info(f"Visit {HOMEBREW_URL} for installation instructions.")
            return CapabilityRecord(name=name, present=False)

        if install_commands:
            attempted = True
            runner.run_first(install_commands, f"Installing {name}")

        if not command_exists(command):
            log_error(f"Failed to install {name}. Please install it manually.")
            return CapabilityRecord(name=name, present=False, install_attempted=attempted)

    version = runner.output_of(list(version_command or [command, "--version"]))
    log_success(f"{name} is installed: {version}")
    return CapabilityRecord(
        name=name, present=True, version=version, install_attempted=attempted
    )
