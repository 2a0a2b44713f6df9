"""Reinstall mode: clear Q CLI history/log state and reinstall the app."""

from __future__ import annotations

import shutil

from q_mcp_setup.constants import Q_APP_PATH, Q_CLI_INSTALL_URL
from q_mcp_setup.host import HostPlatform
from q_mcp_setup.paths import ConfigPaths
from q_mcp_setup.runner import CommandRunner, command_exists
from q_mcp_setup.utils import log_info, log_success, log_warn


def clear_state(paths: ConfigPaths) -> None:
    """Recreate an empty history directory and remove the LSP log."""
    log_info("Reinstall requested. Cleaning up history and logs...")

    if paths.history_dir.is_dir():
        log_info(f"Removing history directory: {paths.history_dir}")
        shutil.rmtree(paths.history_dir)
    paths.history_dir.mkdir(parents=True, exist_ok=True)

    if paths.lsp_log.is_file():
        log_info(f"Removing log file: {paths.lsp_log}")
        paths.lsp_log.unlink()

    log_success("Cleanup completed.")


def reinstall_q_cli(runner: CommandRunner, host: HostPlatform) -> None:
    """Reinstall the Q CLI cask on macOS; warn elsewhere.

    Every step is best-effort.
    """
    if not command_exists("q"):
        return
    log_info("Reinstall requested for Amazon Q CLI...")

    if not (host.is_macos and command_exists("brew")):
        log_warn("Automatic reinstallation is only supported on macOS with Homebrew.")
        log_info(f"Please reinstall Amazon Q CLI manually from: {Q_CLI_INSTALL_URL}")
        return

    log_info("Attempting to reinstall Amazon Q with Homebrew...")
    # a missing cask is not an error here
    runner.run(["brew", "uninstall", "--cask", "amazon-q"])

    if Q_APP_PATH.is_dir():
        log_info("Removing existing Amazon Q application...")
        try:
            shutil.rmtree(Q_APP_PATH)
            log_success("Removing Amazon Q application")
        except OSError as exc:
            log_warn(f"Removing Amazon Q application failed: {exc}")

    runner.run(["brew", "install", "--cask", "amazon-q"], "Reinstalling Amazon Q CLI")
