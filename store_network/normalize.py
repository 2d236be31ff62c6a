"""Name normalization helpers shared by every feed."""

from __future__ import annotations

import re
import unicodedata
from typing import Any, FrozenSet, Iterable, Tuple


def clean_string(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_key(value: Any) -> str:
    """Canonical form used for cross-source name matching."""
    return clean_string(value).casefold()


def normalize_names(values: Iterable[Any]) -> FrozenSet[str]:
    keys = (normalize_key(value) for value in values)
    return frozenset(key for key in keys if key)


def name_sort_key(name: Any) -> Tuple[str, str]:
    """Ordering key that ignores case and diacritics ("Ferizaj" before "Fushë Kosovë")."""
    text = clean_string(name)
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return folded, text


def slugify(value: Any) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", normalize_key(value))
    return slug.strip("-")


def normalize_category(value: Any) -> str:
    category = normalize_key(value)
    return category or "other"


def humanize_category(value: Any) -> str:
    words = [word for word in re.split(r"[_-]", clean_string(value)) if word]
    label = " ".join(word[:1].upper() + word[1:] for word in words)
    return label or "Other"


def strip_area_prefix(name: Any) -> str:
    """Drop the numbering prefix of upstream area names ("03 - Center" -> "Center")."""
    text = clean_string(name)
    if "-" in text:
        return text.split("-", 1)[1].strip()
    return text
