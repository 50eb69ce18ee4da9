"""Shared utility functions."""

from __future__ import annotations

import os
import platform
import subprocess
from pathlib import Path

ILLEGAL_FILENAME_CHARS = '<>:"/\\|?*'

_SIZE_UNITS = (("GB", 1024**3, 2), ("MB", 1024**2, 1), ("KB", 1024, 1))


def format_size(size_bytes: int | None) -> str:
    """Format byte count to human-readable string."""
    size_bytes = max(int(size_bytes or 0), 0)
    for unit, factor, digits in _SIZE_UNITS:
        if size_bytes >= factor:
            return f"{size_bytes / factor:.{digits}f} {unit}"
    return f"{size_bytes} B"


def parse_count(text: str | int | None, default: int = 1) -> int:
    """Parse a positive count from user input, falling back to *default*."""
    try:
        value = int(str(text).strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def open_folder(path: str | Path) -> None:
    """Open a folder in the system file manager."""
    path = Path(path)
    target = path if path.is_dir() else path.parent

    system = platform.system()
    if system == "Windows":
        os.startfile(str(target))  # noqa: S606
    elif system == "Darwin":
        subprocess.Popen(["open", str(target)])  # noqa: S603, S607
    else:
        subprocess.Popen(["xdg-open", str(target)])  # noqa: S603, S607


def sanitize_filename(name: str) -> str:
    """Remove or replace illegal filename characters."""
    for ch in ILLEGAL_FILENAME_CHARS:
        name = name.replace(ch, "_")
    name = name.replace("\n", " ").replace("\r", "").strip()
    while "  " in name:
        name = name.replace("  ", " ")
    while "__" in name:
        name = name.replace("__", "_")
    return name.strip(". ")
