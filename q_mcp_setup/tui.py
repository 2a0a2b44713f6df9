"""Interactive yes/no prompts.

Uses gum when it is on PATH, with a Click fallback. Assume-yes and
non-interactive modes answer without prompting.
"""

from __future__ import annotations

import shutil
import subprocess
from functools import lru_cache
from typing import Callable

import click

from q_mcp_setup.options import InstallOptions


@lru_cache(maxsize=1)
def _has_gum() -> bool:
    """Check if gum is available on PATH (cached)."""
    return shutil.which("gum") is not None


def tui_confirm(prompt: str, default_yes: bool = False) -> bool:
    """Prompt for yes/no confirmation.

    Args:
        prompt: The confirmation message to display.
        default_yes: Whether an empty answer means yes.

    Returns:
        True only on an explicit (or defaulted) yes.
    """
    if _has_gum():
        gum_args = ["gum", "confirm", prompt]
        if default_yes:
            gum_args.append("--default=yes")
        try:
            result = subprocess.run(gum_args, check=False, timeout=300)
        except (FileNotFoundError, subprocess.TimeoutExpired):
            pass
        else:
            ok = result.returncode == 0
            click.echo(f"  > {'Yes' if ok else 'No'}")
            return ok

    return click.confirm(prompt, default=default_yes)


def make_confirm(options: InstallOptions) -> Callable[[str], bool]:
    """Return the confirm function for this run's options."""

    def confirm(prompt: str) -> bool:
        if options.assume_yes:
            return True
        if options.noninteractive:
            return False
        return tui_confirm(prompt)

    return confirm
