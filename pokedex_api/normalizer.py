"""
Turns raw PokeAPI documents into the stable public models.

PokeAPI payloads are treated as loosely-typed documents: every field is read
through ``_dig`` so a missing or oddly-shaped key degrades to ``None`` instead
of raising.
"""
import logging
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import ValidationError

from pokedex_api.models import AbilityInfo, CatalogEntry

logger = logging.getLogger(__name__)

ENGLISH = "en"


def _dig(doc: Any, *path: str) -> Any:
    """Walks nested mappings, returning None as soon as a key is missing."""
    for key in path:
        if not isinstance(doc, Mapping):
            return None
        doc = doc.get(key)
    return doc


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_list(value: Any) -> list:
    return list(value) if isinstance(value, list) else []


def _capitalize_first(name: str) -> str:
    # Only the first character is forced, the rest is kept as PokeAPI sent it
    return name[:1].upper() + name[1:]


def normalize_entry(raw: Any) -> Optional[CatalogEntry]:
    """Maps a raw ``/pokemon/{id}`` record to a CatalogEntry, or None if there is no record."""
    if not raw or not isinstance(raw, Mapping):
        return None

    name = _optional_str(raw.get("name"))

    types = []
    for wrapper in _as_list(raw.get("types")):
        type_name = _dig(wrapper, "type", "name")
        if isinstance(type_name, str):
            types.append(type_name)

    try:
        return CatalogEntry(
            name=_capitalize_first(name or ""),
            number=raw.get("id"),
            sprite_animated=_optional_str(_dig(raw, "sprites", "other", "showdown", "front_default")),
            sprite_static=_optional_str(_dig(raw, "sprites", "front_default")),
            types=types,
            cry=_optional_str(_dig(raw, "cries", "legacy")),
            stats=_as_list(raw.get("stats")),
            abilities=_as_list(raw.get("abilities")),
            moves=_as_list(raw.get("moves")),
        )
    except ValidationError as e:
        # No usable name or id: nothing we can identify the record by
        logger.warning(f"Discarding malformed Pokemon record: {e.error_count()} invalid field(s)")
        return None


def normalize_ability(raw: Any) -> Optional[AbilityInfo]:
    """Picks the first English effect entry of a raw ``/ability/{name}`` record."""
    if not raw or not isinstance(raw, Mapping):
        return None

    english_entry = next(
        (
            entry
            for entry in _as_list(raw.get("effect_entries"))
            if _dig(entry, "language", "name") == ENGLISH
        ),
        None,
    )
    if english_entry is None:
        return None

    return AbilityInfo(
        effect=_optional_str(english_entry.get("effect")) or "",
        short_effect=_optional_str(english_entry.get("short_effect")) or "",
    )
