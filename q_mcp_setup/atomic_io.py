"""Atomic I/O primitives for crash-safe file writes.

Content is written to a temp file in the destination directory and moved
into place with ``os.replace()``, so a crash mid-write never truncates the
live file. Temp files that have not been renamed yet are tracked and
removed on interpreter exit and on SIGINT/SIGTERM.

No locks are taken: two concurrent writers race on the final rename and
the last one wins.
"""

from __future__ import annotations

import atexit
import os
import signal
import tempfile
from pathlib import Path
from types import FrameType
from typing import Optional

from q_mcp_setup.constants import SECRET_FILE_MODE

_pending: set[str] = set()


def pending_temp_files() -> frozenset[str]:
    """Return temp files written but not yet renamed into place."""
    return frozenset(_pending)


def cleanup_temp_files() -> None:
    """Remove every temp file that has not been renamed yet."""
    for tmp_path in list(_pending):
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        _pending.discard(tmp_path)


atexit.register(cleanup_temp_files)


def _terminate(signum: int, frame: Optional[FrameType]) -> None:
    cleanup_temp_files()
    raise SystemExit(128 + signum)


def install_signal_cleanup() -> None:
    """Route SIGTERM through SystemExit so pending temp files get removed.

    SIGINT already surfaces as KeyboardInterrupt and unwinds through
    ``atomic_write()``.
    """
    signal.signal(signal.SIGTERM, _terminate)


def atomic_write(path: Path, content: str, mode: int = SECRET_FILE_MODE) -> None:
    """Write content to *path* atomically with the given permissions.

    Uses write-to-temp + os.replace() to avoid corrupted files on crash.
    The temp file is created in the destination directory so the rename
    stays on one filesystem.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
    )
    _pending.add(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
        _pending.discard(tmp_path)
        os.chmod(path, mode)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        _pending.discard(tmp_path)
        raise
