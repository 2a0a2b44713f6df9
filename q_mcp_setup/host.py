"""Host platform detection and per-platform install recipes."""

from __future__ import annotations

import platform
from typing import NamedTuple, Optional

from q_mcp_setup.runner import command_exists
from q_mcp_setup.utils import log_info, log_warn


class HostPlatform(NamedTuple):
    """Detected platform family.

    Attributes:
        system: ``uname -s`` style name (Darwin, Linux, ...)
        package_manager: brew, apt, yum, dnf or unknown
    """

    system: str
    package_manager: str

    @property
    def is_macos(self) -> bool:
        return self.system == "Darwin"

    @property
    def is_linux(self) -> bool:
        return self.system == "Linux"


def detect_platform(system: Optional[str] = None) -> HostPlatform:
    """Detect the platform family and its package manager, logging the result."""
    system = system or platform.system()
    log_info(f"Detected platform: {system}")

    if system == "Darwin":
        log_info("Running on macOS")
        return HostPlatform(system, "brew")

    if system == "Linux":
        log_info("Running on Linux")
        for binary, manager in (("apt-get", "apt"), ("yum", "yum"), ("dnf", "dnf")):
            if command_exists(binary):
                return HostPlatform(system, manager)
        log_warn("Unsupported Linux distribution. Package installation may fail.")
        return HostPlatform(system, "unknown")

    log_warn(
        f"Unsupported platform: {system}. This installer is optimized for macOS and Linux."
    )
    return HostPlatform(system, "unknown")


def uv_install_commands(host: HostPlatform) -> list[list[str]]:
    if host.is_macos:
        return [["brew", "install", "uv"]]
    return [["pip", "install", "uv"]]


def q_cli_install_commands(host: HostPlatform) -> list[list[str]]:
    """Return install recipes for the Q CLI; empty where only manual install exists."""
    if host.is_macos:
        return [["brew", "install", "amazon-q"]]
    return []
