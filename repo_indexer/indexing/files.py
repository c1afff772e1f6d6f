"""Default selection of project files to index."""

from __future__ import annotations

import dataclasses
import fnmatch
import os
from pathlib import Path
from typing import Iterator, List, Optional

from ..config import IndexerSettings
from ..utils import is_binary_file

TO_INDEX_PATH = Path(".indexer") / "to-index"

# Never indexed, whatever the allowlist says
ALWAYS_SKIPPED_EXTS = (".lock",)

_GLOB_CHARS = ("*", "?", "[")


@dataclasses.dataclass
class ToIndexConfig:
    """Allowlist read from ``.indexer/to-index``.

    An empty config (no dirs, no exts) means nothing is indexed.
    """

    dirs: List[str] = dataclasses.field(default_factory=list)
    exts: List[str] = dataclasses.field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.dirs and not self.exts

    def dir_globs(self) -> List[str]:
        globs: List[str] = []
        for d in self.dirs:
            if any(c in d for c in _GLOB_CHARS):
                globs.append(d)
            else:
                # A bare entry may name a directory or a single file
                globs.extend([d, f"{d}/*"])
        return globs


def parse_to_index_config(text: str) -> ToIndexConfig:
    """Parse ``dir:`` / ``ext:`` lines.

    Lines without a prefix are guessed: ``.ext`` is an extension, anything
    else is a directory. ``#`` starts a comment line.
    """
    config = ToIndexConfig()
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        kind, value = "", ""
        head, sep, tail = line.partition(":")
        if sep and head.strip().lower() in ("dir", "ext"):
            kind, value = head.strip().lower(), tail.strip()
        if not kind:
            if line.startswith("./") or line.startswith("/"):
                kind, value = "dir", line
            elif line.startswith("."):
                kind, value = "ext", line
            else:
                kind, value = "dir", line

        if kind == "dir":
            d = value.replace("\\", "/")
            if d.startswith("./"):
                d = d[2:]
            d = d.strip("/")
            if d:
                config.dirs.append(d)
        else:
            ext = value.lower()
            if not ext.startswith("."):
                ext = "." + ext
            config.exts.append(ext)
    return config


def load_to_index_config(root: Path) -> Optional[ToIndexConfig]:
    """Read the project allowlist; None when the project has none."""
    path = Path(root) / TO_INDEX_PATH
    if not path.is_file():
        return None
    return parse_to_index_config(path.read_text(encoding="utf-8", errors="replace"))


def _match_any(path: str, globs: List[str]) -> bool:
    return any(fnmatch.fnmatch(path, g) for g in globs)


def load_gitignore_globs(root: Path) -> List[str]:
    """Translate simple .gitignore lines into fnmatch globs (negations are ignored)."""
    gitignore = root / ".gitignore"
    if not gitignore.is_file():
        return []

    globs: List[str] = []
    for raw in gitignore.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or line.startswith("!"):
            continue
        anchored = line.startswith("/")
        line = line.strip("/")
        if not line:
            continue
        for p in (line, line + "/**"):
            candidates = [p] if anchored else [p, "**/" + p]
            for g in candidates:
                if g not in globs:
                    globs.append(g)
    return globs


@dataclasses.dataclass
class _SelectionRules:
    include_globs: List[str]
    exclude_globs: List[str]
    to_index: Optional[ToIndexConfig]

    @classmethod
    def load(cls, root: Path, settings: IndexerSettings) -> "_SelectionRules":
        return cls(
            include_globs=list(settings.include_globs),
            exclude_globs=list(settings.exclude_globs) + load_gitignore_globs(root),
            to_index=load_to_index_config(root),
        )

    def excludes_dir(self, rel_dir: str) -> bool:
        return _match_any(f"{rel_dir}/", self.exclude_globs)

    def accepts(self, rel: str) -> bool:
        """Path-only checks; binary sniffing is left to the caller."""
        if _match_any(rel, self.exclude_globs):
            return False
        # Any excluded ancestor directory excludes the file
        parts = rel.split("/")[:-1]
        for i in range(1, len(parts) + 1):
            if self.excludes_dir("/".join(parts[:i])):
                return False

        ext = os.path.splitext(rel)[1].lower()
        if ext in ALWAYS_SKIPPED_EXTS:
            return False

        cfg = self.to_index
        if cfg is not None:
            if cfg.is_empty:
                return False
            if cfg.dirs and not _match_any(rel, cfg.dir_globs()):
                return False
            if cfg.exts:
                # An extension allowlist replaces the default include globs
                return ext in cfg.exts
        return _match_any(rel, self.include_globs)


def should_index_file(root: Path, rel_path: str, settings: IndexerSettings) -> bool:
    """Whether a single project file is an indexing candidate.

    Applies the same rules as ``iter_files``; used before incremental updates.
    """
    root = Path(root)
    rel = rel_path.replace("\\", "/").lstrip("/")
    if not _SelectionRules.load(root, settings).accepts(rel):
        return False
    abs_path = root / rel
    return not (abs_path.is_file() and is_binary_file(abs_path))


def iter_files(root: Path, settings: IndexerSettings) -> Iterator[str]:
    """Yield project-relative POSIX paths of candidate files, sorted.

    The byte-size cap is left to the indexer so oversized files are reported.
    """
    root = Path(root)
    rules = _SelectionRules.load(root, settings)
    if rules.to_index is not None and rules.to_index.is_empty:
        return

    found: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        rel_dir = "" if rel_dir == "." else rel_dir
        dirnames[:] = [
            d for d in dirnames
            if not rules.excludes_dir(f"{rel_dir}/{d}" if rel_dir else d)
        ]
        for name in filenames:
            rel = f"{rel_dir}/{name}" if rel_dir else name
            if not rules.accepts(rel):
                continue
            if is_binary_file(Path(dirpath) / name):
                continue
            found.append(rel)

    yield from sorted(found)


def list_project_files(root: Path, settings: IndexerSettings) -> List[str]:
    return list(iter_files(root, settings))
