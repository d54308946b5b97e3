"""Utility helpers for SealVault."""

from sealvault.utils.paths import (
    is_path_within_directory,
    recovered_file_path,
    sanitize_filename,
)

__all__ = ["sanitize_filename", "is_path_within_directory", "recovered_file_path"]
