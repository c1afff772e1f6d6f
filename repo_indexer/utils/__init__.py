"""Utility functions for repo-indexer."""

from .file_utils import (
    file_size,
    is_binary_file,
)

__all__ = [
    "file_size",
    "is_binary_file",
]
