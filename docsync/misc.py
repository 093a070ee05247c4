"""Miscellaneous helpers for docsync."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path


def tz_now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(UTC)


def timestamped_log_path(logs_dir: Path, name: str) -> Path:
    """Return ``logs_dir/<YYYY-mm-dd_HH-MM-SS>_<name>.log`` for the current time.

    The directory is created if needed.
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = tz_now().strftime("%Y-%m-%d_%H-%M-%S")
    return logs_dir / f"{timestamp}_{name}.log"
