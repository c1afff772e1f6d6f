"""Configuration management for repo-indexer."""

from __future__ import annotations

import dataclasses
import os
from typing import Dict, List, Mapping, Optional


DEFAULT_INCLUDE_PATTERNS: List[str] = [
    "*.py", "*.js", "*.ts", "*.tsx", "*.jsx", "*.mjs", "*.cjs",
    "*.go", "*.java", "*.kt", "*.cs",
    "*.rb", "*.php", "*.rs", "*.lua",
    "*.c", "*.h", "*.cpp", "*.hpp",
    "*.swift",
    "*.md", "*.txt", "*.sh",
]

DEFAULT_EXCLUDE_PATTERNS: List[str] = [
    ".git/**",
    "node_modules/**",
    "dist/**",
    "build/**",
    ".venv/**",
    "venv/**",
    "__pycache__/**",
    ".indexer/**",
    ".cache/**",
    "coverage/**",
    "target/**",
    ".next/**",
    ".idea/**",
    ".vscode/**",
    "*.lock",
    "*.map",
    "*.min.js",
    ".env",
    ".env.*",
    # Media, archives and native binaries
    "*.png", "*.jpg", "*.jpeg", "*.gif", "*.webp", "*.ico", "*.svg",
    "*.pdf", "*.zip", "*.tar", "*.gz", "*.7z",
    "*.bin", "*.exe", "*.dll", "*.dylib", "*.so",
    "*.mp3", "*.wav", "*.ogg", "*.mp4", "*.mov", "*.avi",
    "*.ttf", "*.otf", "*.woff", "*.woff2",
    # Data, manifests and styling
    "*.csv", "*.log",
    "*.json", "*.yaml", "*.yml", "*.toml", "*.xml",
    "*.css", "*.scss", "*.less", "*.html", "*.htm",
]

DEFAULT_CONFIG: Dict = {
    "embedding_url": "http://127.0.0.1:11434",
    "embed_model": "unclemusclez/jina-embeddings-v2-base-code",
    "max_chunk_lines": 500,
    "overlap_lines": 50,
    "max_file_bytes": 2 * 1024 * 1024,
    "vector_store_url": "http://localhost:6333",
    "vector_size": 768,
    "collection_name": "project_index",
    "request_timeout": 60.0,
}

# Environment variable -> (settings field, converter)
ENV_OVERRIDES = {
    "OLLAMA_URL": ("embedding_url", str),
    "EMBED_MODEL": ("embed_model", str),
    "MAX_CHUNK_LINES": ("max_chunk_lines", int),
    "OVERLAP_LINES": ("overlap_lines", int),
    "MAX_FILE_BYTES": ("max_file_bytes", int),
    "QDRANT_URL": ("vector_store_url", str),
    "VECTOR_SIZE": ("vector_size", int),
    "QDRANT_COLLECTION": ("collection_name", str),
}


def expand_pattern(pattern: str) -> List[str]:
    """Expand pattern to include both root and nested versions.

    Examples:
        '*.py' -> ['*.py', '**/*.py']
        'venv/**' -> ['venv/**', '**/venv/**']
    """
    pattern = pattern.strip()
    if not pattern or pattern.startswith("#"):
        return []

    if pattern.startswith("**/"):
        return [pattern]

    if pattern.startswith("*."):
        return [pattern, "**/" + pattern]

    if "/**" in pattern:
        return [pattern, "**/" + pattern]

    return [pattern]


def _expand_patterns(patterns: List[str]) -> List[str]:
    """Expand and deduplicate patterns while preserving order."""
    out: List[str] = []
    seen: set[str] = set()
    for p in patterns:
        for ep in expand_pattern(p):
            if ep not in seen:
                seen.add(ep)
                out.append(ep)
    return out


@dataclasses.dataclass(frozen=True)
class IndexerSettings:
    """Everything the indexing pipeline needs, resolved once at the boundary."""

    embedding_url: str = DEFAULT_CONFIG["embedding_url"]
    embed_model: str = DEFAULT_CONFIG["embed_model"]
    max_chunk_lines: int = DEFAULT_CONFIG["max_chunk_lines"]
    overlap_lines: int = DEFAULT_CONFIG["overlap_lines"]
    max_file_bytes: int = DEFAULT_CONFIG["max_file_bytes"]
    vector_store_url: str = DEFAULT_CONFIG["vector_store_url"]
    vector_size: int = DEFAULT_CONFIG["vector_size"]
    collection_name: str = DEFAULT_CONFIG["collection_name"]
    request_timeout: float = DEFAULT_CONFIG["request_timeout"]
    include_globs: tuple = tuple(_expand_patterns(DEFAULT_INCLUDE_PATTERNS))
    exclude_globs: tuple = tuple(_expand_patterns(DEFAULT_EXCLUDE_PATTERNS))

    def __post_init__(self) -> None:
        if self.max_chunk_lines < 1:
            raise ValueError(f"max_chunk_lines must be >= 1, got {self.max_chunk_lines}")
        if self.overlap_lines < 0:
            raise ValueError(f"overlap_lines must be >= 0, got {self.overlap_lines}")
        if self.max_file_bytes < 0:
            raise ValueError(f"max_file_bytes must be >= 0, got {self.max_file_bytes}")
        if self.vector_size < 1:
            raise ValueError(f"vector_size must be >= 1, got {self.vector_size}")

    def with_overrides(self, **overrides) -> "IndexerSettings":
        """Return a copy with per-call overrides applied (None values are ignored)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)


def load_config(environ: Optional[Mapping[str, str]] = None, **overrides) -> IndexerSettings:
    """Build settings from defaults, environment variables and explicit overrides.

    This is the only place the process environment is consulted.
    """
    env = os.environ if environ is None else environ
    values: Dict = {}
    for var, (field, convert) in ENV_OVERRIDES.items():
        raw = env.get(var)
        if raw is None or raw.strip() == "":
            continue
        try:
            values[field] = convert(raw.strip())
        except ValueError as e:
            raise ValueError(f"Invalid value for {var}: {raw!r}") from e

    values.update({k: v for k, v in overrides.items() if v is not None})
    return IndexerSettings(**values)
