"""End-to-end installer run.

Order of operations:
  1. Banner, platform detection, config directory
  2. Reset of history/log state (``--reinstall``)
  3. Dependency gate: AWS CLI (mandatory, must be configured), uv and the
     Q CLI (advisory)
  4. GitHub token resolution
  5. Canonical set + reconciliation with any existing mcp.json
  6. Atomic write and verification, then a summary
"""

from __future__ import annotations

import shutil
from typing import Callable, Optional

from q_mcp_setup import catalog
from q_mcp_setup.capabilities import probe
from q_mcp_setup.codec import select_codec
from q_mcp_setup.constants import AWS_CLI_INSTALL_URL, Q_CLI_INSTALL_URL
from q_mcp_setup.errors import DependencyError
from q_mcp_setup.host import HostPlatform, detect_platform, q_cli_install_commands, uv_install_commands
from q_mcp_setup.options import InstallOptions
from q_mcp_setup.paths import ConfigPaths, derive_paths, ensure_config_dir
from q_mcp_setup.reconcile import Reconciler, ReconcileResult, read_prior
from q_mcp_setup.reset import clear_state, reinstall_q_cli
from q_mcp_setup.runner import CommandRunner, command_exists
from q_mcp_setup.secret_store import SecretStore
from q_mcp_setup.serializer import WriteResult, write
from q_mcp_setup.utils import log_info, log_plain, log_step, log_success, log_warn

ConfirmFn = Callable[[str], bool]

BANNER_RULE = "=" * 63


def print_banner(options: InstallOptions) -> None:
    log_plain(BANNER_RULE)
    log_plain("Amazon Q Developer MCP Installer")
    log_plain(BANNER_RULE)
    log_plain()
    log_plain("This installer will:")
    log_plain("1. Check if AWS CLI is installed and configured")
    log_plain("2. Check if uv is installed (and install it if needed)")
    log_plain("3. Install MCP servers for Amazon Q Developer")
    if options.reinstall:
        log_plain("4. Reinstall Amazon Q Developer and clear history/logs")
    log_plain()

    if options.debug:
        log_info("Debug mode enabled. Commands and their outputs will be displayed.")
        log_plain()
    if options.verbose:
        log_info("Verbose mode enabled. Additional information will be displayed.")
        log_plain()


def check_dependencies(runner: CommandRunner, host: HostPlatform) -> None:
    """Run the dependency gate.

    Raises:
        DependencyError: The AWS CLI is missing or not configured.
    """
    aws = probe(runner, "aws", "AWS CLI", host=host)
    if not aws.present:
        log_info(f"Please install AWS CLI manually from {AWS_CLI_INSTALL_URL}")
        raise DependencyError("AWS CLI is required")

    identity = runner.run(["aws", "sts", "get-caller-identity"], "AWS CLI is configured")
    if not identity.ok:
        raise DependencyError("AWS CLI is not configured (aws sts get-caller-identity failed)")

    probe(runner, "uv", "uv", uv_install_commands(host), host=host)

    q_installs = q_cli_install_commands(host)
    if q_installs:
        probe(runner, "q", "Amazon Q CLI", q_installs, host=host)
        return

    log_warn(f"For Linux, please install Amazon Q CLI manually from: {Q_CLI_INSTALL_URL}")
    if command_exists("q"):
        log_success(f"Amazon Q CLI is installed at: {shutil.which('q')}")
    else:
        log_warn("Amazon Q CLI is not installed. Please install it manually.")


def reconcile_and_write(
    options: InstallOptions,
    paths: ConfigPaths,
    secret: Optional[str],
    confirm: ConfirmFn,
) -> tuple[ReconcileResult, WriteResult]:
    """Merge the canonical set with any prior document and write the result."""
    canonical = catalog.build(secret)
    if secret:
        log_info("Adding git-repo-research-mcp-server with GitHub token")

    prior_text = read_prior(paths.mcp_config)
    codec = select_codec(prior_text, options.codec)
    reconciler = Reconciler(paths.mcp_config, codec, confirm)
    result = reconciler.reconcile(canonical, prior_text)
    written = write(result.document, paths.mcp_config, codec)
    return result, written


def print_summary(runner: CommandRunner, host: HostPlatform, paths: ConfigPaths) -> None:
    log_plain()
    log_success(
        "MCP installation completed. You can now use Amazon Q with the installed MCP servers."
    )
    log_info("To verify the installation, run: q mcp list")
    log_plain()
    log_info("Installation Summary:")
    log_step(f"Platform: {host.system}")
    if command_exists("q"):
        log_step(f"Amazon Q CLI Version: {runner.output_of(['q', '--version'])}")
    if command_exists("uv"):
        log_step(f"uv Version: {runner.output_of(['uv', '--version'])}")
    log_step(f"Configuration Directory: {paths.config_dir}")
    log_plain()


def run_install(options: InstallOptions, confirm: ConfirmFn) -> ReconcileResult:
    """Run the whole installer.

    Raises:
        McpSetupError: Any fatal condition (dependency, backup, write).
    """
    runner = CommandRunner(debug=options.debug, verbose=options.verbose)
    paths = derive_paths(options.config_dir)

    print_banner(options)
    host = detect_platform()
    ensure_config_dir(paths.config_dir)

    if options.reinstall:
        clear_state(paths)

    check_dependencies(runner, host)

    if options.reinstall:
        reinstall_q_cli(runner, host)

    secret = SecretStore(paths.token_file).resolve(options.github_token, confirm)

    result, _ = reconcile_and_write(options, paths, secret, confirm)

    print_summary(runner, host, paths)
    return result
