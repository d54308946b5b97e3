"""
Path Utilities
==============

Placement of recovered files.

The filename inside an envelope is neither encrypted nor authenticated,
so it is treated as untrusted input: reduced to a single safe path
component and confined to the chosen output directory.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

# Path separators, reserved Windows characters and control codes
_FORBIDDEN: Final[re.Pattern[str]] = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

MAX_FILENAME_LENGTH: Final[int] = 200


def sanitize_filename(filename: str, replacement: str = "_") -> str:
    """
    Reduce an envelope's recorded filename to one safe path component.

    "../../etc/passwd" becomes "_.._etc_passwd": every separator is
    replaced, so the result can never name a parent directory.

    Raises:
        ValueError: If nothing usable is left
    """
    if not filename:
        raise ValueError("Filename cannot be empty")

    cleaned = _FORBIDDEN.sub(replacement, filename).strip(". ")
    if not cleaned:
        raise ValueError("Filename becomes empty after sanitization")

    return cleaned[:MAX_FILENAME_LENGTH]


def is_path_within_directory(path: Path, directory: Path) -> bool:
    """True if path resolves to a location inside directory."""
    try:
        return path.resolve().is_relative_to(directory.resolve())
    except (OSError, RuntimeError, ValueError):
        return False


def recovered_file_path(directory: Path, filename: str) -> Path:
    """
    Where a recovered file named filename should be written in directory.

    Raises:
        ValueError: If the name is unusable or would land outside directory
    """
    target = directory / sanitize_filename(filename)
    if not is_path_within_directory(target, directory):
        raise ValueError("Recovered filename escapes the output directory")
    return target
