"""Typed external command invocation.

Every external program the installer touches (package managers, the AWS
CLI, version queries) is run through ``CommandRunner.run()`` with an
explicit argument vector, never an interpolated shell string. The result
carries exit status and combined output; whether a failure is fatal is
decided by the caller.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import NamedTuple, Sequence

from q_mcp_setup.utils import log_debug, log_error, log_plain, log_success


class CommandResult(NamedTuple):
    """Outcome of one external command.

    Attributes:
        returncode: Process exit code (127 when the executable is missing)
        output: Combined stdout/stderr text, stripped
    """

    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def command_exists(name: str) -> bool:
    """Return True if *name* resolves to an executable on PATH."""
    return shutil.which(name) is not None


class CommandRunner:
    """Runs external commands with debug echo and leveled reporting."""

    def __init__(self, debug: bool = False, verbose: bool = False) -> None:
        self.debug = debug
        self.verbose = verbose

    def run(self, argv: Sequence[str], description: str = "") -> CommandResult:
        """Run *argv* and report the outcome.

        Args:
            argv: Program and arguments.
            description: Human label; on success it is logged as a success
                line, on failure as "<description> failed.".

        Returns:
            CommandResult with exit code and combined output.
        """
        argv = list(argv)
        if self.debug:
            log_debug(f"Running command: {' '.join(argv)}")

        try:
            proc = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
            result = CommandResult(proc.returncode, (proc.stdout or "").strip())
        except FileNotFoundError:
            result = CommandResult(127, f"{argv[0]}: command not found")
        except OSError as exc:
            result = CommandResult(126, f"{argv[0]}: {exc}")

        if self.debug:
            log_debug("Command output:")
            log_plain(result.output)
            log_debug(f"Exit code: {result.returncode}")
            log_plain()

        if not result.ok:
            if description:
                log_error(f"{description} failed.")
            # debug mode has already echoed the output
            if self.verbose and not self.debug and result.output:
                log_plain(result.output)
        elif description:
            log_success(description)
        return result

    def run_first(
        self, alternatives: Sequence[Sequence[str]], description: str = ""
    ) -> CommandResult:
        """Try each argv in turn until one succeeds.

        Mirrors a ``a || b || c`` chain. Only the final failure is reported
        under *description*.
        """
        result = CommandResult(1, "")
        for i, argv in enumerate(alternatives):
            last = i == len(alternatives) - 1
            result = self.run(argv, description if last else "")
            if result.ok:
                if description and not last:
                    log_success(description)
                return result
        return result

    def output_of(self, argv: Sequence[str]) -> str:
        """Return the stripped output of *argv*, or "Unknown" on failure."""
        result = self.run(argv)
        if not result.ok or not result.output:
            return "Unknown"
        return result.output
