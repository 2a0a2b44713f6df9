"""GitHub token persistence.

The token enabling the git repository research provider lives in a single
owner-only file under the config directory. Its shape is checked against
the known GitHub token prefixes, but the check is advisory: a mismatch
asks the user whether to keep the token anyway.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from q_mcp_setup.atomic_io import atomic_write
from q_mcp_setup.constants import GITHUB_TOKEN_PATTERN, SECRET_FILE_MODE
from q_mcp_setup.errors import ValidationAborted
from q_mcp_setup.utils import log_error, log_info, log_warn, mask_secret

ConfirmFn = Callable[[str], bool]


def is_valid_token(token: str) -> bool:
    """Return True if *token* looks like a GitHub token."""
    return GITHUB_TOKEN_PATTERN.match(token) is not None


class SecretStore:
    """Reads and writes the persisted token file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> Optional[str]:
        """Return the saved token, or None when no non-empty token is saved."""
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            log_warn(f"Could not read saved GitHub token from {self.path}: {exc}")
            return None
        if not token:
            return None
        log_info(f"Using saved GitHub token from {self.path}")
        return token

    def validate(self, token: str, confirm: ConfirmFn) -> None:
        """Check the token shape, asking to continue on a mismatch.

        Raises:
            ValidationAborted: The token looks malformed and the user
                declined to continue with it.
        """
        if is_valid_token(token):
            return
        log_warn("The GitHub token format appears to be invalid.")
        log_info(
            "GitHub tokens typically start with 'ghp_', 'gho_', 'ghu_', or 'ghs_' "
            "followed by 36-40 alphanumeric characters."
        )
        if not confirm("Do you want to continue with this token anyway?"):
            log_error("GitHub token validation failed.")
            raise ValidationAborted(
                f"GitHub token {mask_secret(token)} rejected by user"
            )

    def save(self, token: str, confirm: ConfirmFn) -> None:
        """Validate *token* and persist it with owner-only permissions.

        Any previously saved token is overwritten.
        """
        self.validate(token, confirm)
        log_info(f"Saving GitHub token to {self.path}")
        atomic_write(self.path, token, mode=SECRET_FILE_MODE)

    def resolve(self, supplied: Optional[str], confirm: ConfirmFn) -> Optional[str]:
        """Return the token for this run.

        A supplied token is validated and saved; otherwise the saved token
        (if any) is used.
        """
        if supplied:
            self.save(supplied, confirm)
            return supplied
        return self.load()
