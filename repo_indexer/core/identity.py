"""Content hashing and stable point identities."""

from __future__ import annotations

import hashlib


def sha1_hex(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


def sha1_to_uuid(text: str) -> str:
    """Render the SHA1 of ``text`` in UUID shape (8-4-4-4-12)."""
    h = sha1_hex(text)
    return f"{h[0:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:32]}"


def stable_point_id(path: str, start_line: int, end_line: int) -> str:
    """Point id for a chunk; identical ranges of a path always map to the same id."""
    return sha1_to_uuid(f"{path}:{start_line}:{end_line}")
