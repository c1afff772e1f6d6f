"""Flattening of extracted symbols into searchable payload fields."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List

# (text, lang) -> list of {"name": ..., "kind": ..., ...}
SymbolExtractor = Callable[[str, str], List[Dict]]

UNITY_KIND_TAGS = {
    "unity_lifecycle": "lifecycle",
    "serialized_field": "serialized_field",
    "scriptable_object": "scriptable_object",
}


def _dedupe(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def flatten_symbols(symbols: List[Dict]) -> Dict[str, List[str]]:
    """Collapse symbols into the payload lists used for filtering.

    Symbols of kind ``reference`` only contribute to ``symbol_references``.
    """
    names: List[str] = []
    references: List[str] = []
    kinds: List[str] = []
    unity: List[str] = []

    for s in symbols:
        name = s.get("name")
        kind = s.get("kind")
        if kind == "reference":
            if name:
                references.append(name)
            continue
        if name:
            names.append(name)
        if kind:
            kinds.append(kind)
            if kind in UNITY_KIND_TAGS:
                unity.append(UNITY_KIND_TAGS[kind])

    return {
        "symbol_names": _dedupe(names),
        "symbol_references": _dedupe(references),
        "symbol_kinds": _dedupe(kinds),
        "unity_tags": _dedupe(unity),
    }
