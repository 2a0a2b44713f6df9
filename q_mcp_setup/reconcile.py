"""Reconciliation of the canonical provider set with an existing mcp.json.

One run moves through three states:

``NO_PRIOR_CONFIG``
    No document at the target path; the merged document is the canonical
    set verbatim.

``PRIOR_CONFIG_PRESENT``
    The existing document is copied to a timestamped backup (failure is
    fatal), its provider names are read through the run's codec, and the
    names unknown to the canonical set become *extras*. If there are any,
    the user is asked once whether to keep all of them; kept extras are
    read back from the backup and appended after the canonical entries.
    An extra whose block cannot be read is skipped with a warning.

``MERGED``
    The merged document is ready for the serializer.

Canonical entries always win: extras are additive only.
"""

from __future__ import annotations

import enum
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional

from pydantic import BaseModel, Field

from q_mcp_setup.codec import DocumentCodec
from q_mcp_setup.constants import ALWAYS_MERGED_PROVIDERS
from q_mcp_setup.errors import BackupError
from q_mcp_setup.models import ConfigurationDocument, ProviderDefinition
from q_mcp_setup.paths import backup_path_for
from q_mcp_setup.utils import log_info, log_plain, log_step, log_success, log_warn

ConfirmFn = Callable[[str], bool]
Clock = Callable[[], datetime]

INCLUDE_EXTRAS_PROMPT = "Would you like to include these additional MCP servers?"


class ReconcileState(str, enum.Enum):
    NO_PRIOR_CONFIG = "no_prior_config"
    PRIOR_CONFIG_PRESENT = "prior_config_present"
    MERGED = "merged"


class ReconcileResult(BaseModel):
    """Outcome of one reconciliation."""

    document: ConfigurationDocument
    """The merged document, canonical entries first."""

    prior_found: bool = False
    """Whether an existing document was present."""

    backup_path: Optional[Path] = None
    """Backup of the prior document, when one was made."""

    extras: list[str] = Field(default_factory=list)
    """Prior provider names unknown to the canonical set."""

    included: bool = False
    """Whether the user chose to keep the extras."""

    added: list[str] = Field(default_factory=list)
    """Extras merged into the document."""

    skipped: list[str] = Field(default_factory=list)
    """Extras that could not be read from the backup."""


def compute_extras(
    prior_names: Iterable[str],
    canonical_names: Iterable[str],
    always_merged: Iterable[str] = ALWAYS_MERGED_PROVIDERS,
) -> list[str]:
    """Return prior names absent from the canonical set and exceptions.

    Order follows *prior_names*; duplicates are dropped.
    """
    excluded = set(canonical_names) | set(always_merged)
    extras: list[str] = []
    for name in prior_names:
        if name not in excluded and name not in extras:
            extras.append(name)
    return extras


def read_prior(config_path: Path) -> Optional[str]:
    """Return the existing document text, or None if there is none."""
    try:
        return config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError:
        # unreadable as text: keep it for the backup, read no providers
        return ""


def create_backup(config_path: Path, now: datetime) -> Path:
    """Copy *config_path* verbatim to a new timestamped backup file.

    An existing backup with the same timestamp is never overwritten; a
    numeric suffix is added instead.

    Raises:
        BackupError: The copy could not be made.
    """
    attempt = 0
    while True:
        backup = backup_path_for(config_path, now, attempt)
        try:
            with open(config_path, "rb") as src, open(backup, "xb") as dst:
                shutil.copyfileobj(src, dst)
            shutil.copymode(config_path, backup)
            return backup
        except FileExistsError:
            attempt += 1
        except OSError as exc:
            raise BackupError(f"Failed to back up {config_path} to {backup}: {exc}") from exc


class Reconciler:
    """Merges the canonical provider set with the document at *config_path*."""

    def __init__(
        self,
        config_path: Path,
        codec: DocumentCodec,
        confirm: ConfirmFn,
        clock: Clock = datetime.now,
    ) -> None:
        self.config_path = config_path
        self.codec = codec
        self.confirm = confirm
        self.clock = clock
        self.state = ReconcileState.NO_PRIOR_CONFIG

    def load_prior(self) -> Optional[str]:
        return read_prior(self.config_path)

    def reconcile(
        self,
        canonical: dict[str, ProviderDefinition],
        prior_text: Optional[str] = None,
    ) -> ReconcileResult:
        """Produce the merged document for this run.

        Args:
            canonical: Canonical provider set for this run.
            prior_text: Existing document text if already loaded; read from
                ``config_path`` otherwise.

        Raises:
            BackupError: An existing document could not be backed up.
        """
        if prior_text is None:
            prior_text = self.load_prior()

        document = ConfigurationDocument(providers=dict(canonical))

        if prior_text is None:
            self.state = ReconcileState.MERGED
            return ReconcileResult(document=document)

        self.state = ReconcileState.PRIOR_CONFIG_PRESENT
        backup = create_backup(self.config_path, self.clock())
        log_info(f"Created backup of existing mcp.json at {backup}")

        # read from the backup so merged content matches the preserved snapshot
        backup_text = backup.read_text(encoding="utf-8", errors="replace")

        log_info("Scanning existing mcp.json for additional MCP servers...")
        extras = compute_extras(self.codec.provider_names(backup_text), canonical)
        result = ReconcileResult(
            document=document, prior_found=True, backup_path=backup, extras=extras
        )

        if extras and self._ask_include(extras):
            result.included = True
            self._merge_extras(result, backup_text)

        self.state = ReconcileState.MERGED
        return result

    def _ask_include(self, extras: list[str]) -> bool:
        log_plain()
        log_info("Found additional MCP servers in your existing configuration:")
        for name in extras:
            log_step(f"- {name}")
        log_plain()
        return self.confirm(INCLUDE_EXTRAS_PROMPT)

    def _merge_extras(self, result: ReconcileResult, backup_text: str) -> None:
        log_info("Adding additional MCP servers from your existing configuration...")
        for name in result.extras:
            definition = self.codec.extract(backup_text, name)
            if definition is None:
                log_warn(f"  - Could not find configuration for {name}, skipping")
                result.skipped.append(name)
                continue
            if not result.document.add(name, definition):
                log_info(f"  - Skipping {name} (already included in default configuration)")
                continue
            log_success(f"  - Added {name}")
            result.added.append(name)
        if result.added:
            log_success("Additional MCP servers added successfully.")
