"""Click-based CLI entrypoint for q-mcp-setup.

Flags are parsed once into an immutable ``InstallOptions`` which every
component reads; nothing downstream inspects ``sys.argv`` again.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from q_mcp_setup import __version__
from q_mcp_setup.atomic_io import install_signal_cleanup
from q_mcp_setup.errors import McpSetupError
from q_mcp_setup.installer import run_install
from q_mcp_setup.options import InstallOptions
from q_mcp_setup.tui import make_confirm
from q_mcp_setup.utils import configure_logging, log_error, log_info

PROG_NAME = "q-mcp-setup"

EPILOG = f"""\b
Examples:
  {PROG_NAME}                        # Standard installation
  {PROG_NAME} -g ghp_abc123def456    # Install with GitHub token
  {PROG_NAME} -d -r                  # Reinstall with debug output
  {PROG_NAME} --reinstall --debug    # Same as above with long options
"""


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EPILOG,
)
@click.option("-d", "--debug", is_flag=True, help="Enable debug mode (show detailed command output)")
@click.option(
    "-g",
    "github_token",
    metavar="<token>",
    default=None,
    help="Set GitHub token for git-repo-research-mcp-server. Token will be saved for future use",
)
@click.option("-r", "--reinstall", is_flag=True, help="Reinstall Amazon Q Developer and clear history/logs")
@click.option("-v", "--verbose", is_flag=True, help="Show more detailed progress information")
@click.option("--no-color", "no_color", is_flag=True, help="Disable colored output")
@click.version_option(__version__, "--version", prog_name=PROG_NAME)
def cli(
    debug: bool,
    github_token: Optional[str],
    reinstall: bool,
    verbose: bool,
    no_color: bool,
) -> int:
    """Install MCP servers for Amazon Q Developer."""
    options = InstallOptions.from_environment(
        debug=debug,
        verbose=verbose,
        reinstall=reinstall,
        github_token=github_token,
        no_color=no_color,
    )
    configure_logging(options)

    try:
        run_install(options, make_confirm(options))
    except McpSetupError as exc:
        log_error(str(exc))
        sys.exit(1)

    log_info(f"For help with this installer, run: {PROG_NAME} --help")
    return 0


def main() -> None:
    """Entry point for the CLI.

    Uses ``standalone_mode=False`` so exit codes are managed here.
    Usage errors (bad flags, missing option arguments) exit 1 rather
    than Click's default of 2.
    """
    install_signal_cleanup()
    try:
        result = cli(standalone_mode=False, prog_name=PROG_NAME)
    except click.UsageError as exc:
        click.echo(f"Error: {exc.format_message()}", err=True)
        click.echo(f"Try '{PROG_NAME} --help' for more information.", err=True)
        sys.exit(1)
    except click.Abort:
        click.echo("Aborted.", err=True)
        sys.exit(130)
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 1
        sys.exit(1 if code == 2 else code)
    if isinstance(result, int):
        sys.exit(result)


if __name__ == "__main__":
    main()
