"""Environment-first configuration: tracking dir, board size, git provenance.

Works when installed as a package or executed from arbitrary CWDs.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

from .errors import ConfigurationError


def _git(*args: str) -> str | None:
    """Output of a git command run from the CWD, or None outside a repo."""
    try:
        return subprocess.check_output(
            ["git", *args],
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=2.0,
        )
    except (OSError, subprocess.SubprocessError):
        return None


def runs_dir() -> Path:
    """Order: env var TTTC_LOG_DIR -> <git toplevel>/runs -> <CWD>/runs."""
    p = os.getenv("TTTC_LOG_DIR")
    if p:
        return Path(p)
    top = (_git("rev-parse", "--show-toplevel") or "").strip()
    return (Path(top) if top else Path.cwd()) / "runs"


def default_board_size() -> int:
    raw = os.getenv("TTTC_BOARD_SIZE")
    if not raw:
        return 3
    try:
        size = int(raw)
    except ValueError:
        raise ConfigurationError("TTTC_BOARD_SIZE must be an integer", context={"value": raw}) from None
    if size < 1:
        raise ConfigurationError("TTTC_BOARD_SIZE must be positive", context={"value": raw})
    return size


def get_git_commit() -> str | None:
    out = _git("rev-parse", "HEAD")
    if out is None:
        return None
    return out.strip() or None


def get_git_is_dirty() -> bool | None:
    """True with uncommitted changes, False if clean, None if unknown."""
    out = _git("status", "--porcelain")
    return None if out is None else len(out.strip()) > 0
