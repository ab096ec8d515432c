"""
Per-resource projections from a PokeAPI detail document to a snapshot record.

Each extractor is a pure ``(key, document) -> record`` function.  Missing
nested fields become ``None`` rather than errors; only a document that is not
an object at all is rejected (by the fetcher, before we get here).
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from configs.constants import Constants

Record = Dict[str, Any]
Extractor = Callable[[str, Dict[str, Any]], Record]


# ---------------------------------------------------------------------------
# Parse helpers
# ---------------------------------------------------------------------------


def _ref_name(document: Dict[str, Any], key: str) -> Optional[str]:
    """Return ``document[key]["name"]`` for a nested named reference, else ``None``."""
    ref = document.get(key)
    if isinstance(ref, dict) and ref.get("name"):
        return str(ref["name"])
    return None


def localized_name(document: Dict[str, Any], language: str) -> Optional[str]:
    """Return the first entry of ``document["names"]`` written in *language*."""
    names = document.get("names")
    if not isinstance(names, list):
        return None
    for entry in names:
        if not isinstance(entry, dict) or not entry.get("name"):
            continue
        if _ref_name(entry, "language") == language:
            return str(entry["name"])
    return None


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------


def extract_pokemon(key: str, document: Dict[str, Any]) -> Record:
    """``{"id", "types"}``; types keep the API's slot order."""
    types: List[str] = []
    for slot in document.get("types") or []:
        if isinstance(slot, dict):
            type_name = _ref_name(slot, "type")
            if type_name:
                types.append(type_name)
    return {"id": document.get("id"), "types": types}


def extract_ability(key: str, document: Dict[str, Any]) -> Record:
    """
    ``{"id", "gen", "display"}``.

    ``display`` falls back from the primary locale to the secondary one, then
    to the document's own name, then to the catalog key.
    """
    display = (
        localized_name(document, Constants.PRIMARY_LANGUAGE)
        or localized_name(document, Constants.FALLBACK_LANGUAGE)
        or (str(document["name"]) if document.get("name") else None)
        or key
    )
    return {
        "id": document.get("id"),
        "gen": _ref_name(document, "generation"),
        "display": display,
    }


def extract_move(key: str, document: Dict[str, Any]) -> Record:
    """``{"display", "type", "damage_class"}``. ``display`` is primary-locale only."""
    return {
        "display": localized_name(document, Constants.PRIMARY_LANGUAGE),
        "type": _ref_name(document, "type"),
        "damage_class": _ref_name(document, "damage_class"),
    }


EXTRACTORS: Dict[str, Extractor] = {
    "pokemon": extract_pokemon,
    "abilities": extract_ability,
    "moves": extract_move,
}
