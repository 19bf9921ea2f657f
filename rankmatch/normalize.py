from __future__ import annotations

"""
Identity normalisation for songs and albums.

Two ranked lists are built independently (different users, different
metadata sources), so items cannot be matched by id. Instead each item gets
an identity key derived from its title and artist text.

Public helpers:

* normalize(text) -> str
    Lower-case, trim, and drop everything except a-z, 0-9 and spaces.

* identity_key(item) -> str
    normalize(title) + "|" + normalize(artist).

* loose_key(text) -> str / is_same_entry(a, b) -> bool
    Lighter matching (case and outer whitespace only, album aware) used
    when seeding a re-rank session with an existing list.

Distinct items that happen to normalise identically are treated as the same
entity. Remix vs. original titles only match if their text does.
"""

import re
from typing import Any, Mapping, Optional, Union

from .config import IDENTITY_SEPARATOR, Item

_DISALLOWED_RE = re.compile(r"[^a-z0-9 ]")

ItemLike = Union[Item, Mapping[str, Any]]

# ---------------------------------------------------------------------------
# Low-level helpers
# ---------------------------------------------------------------------------


def _field(item: ItemLike, name: str) -> Optional[str]:
    if isinstance(item, Mapping):
        val = item.get(name)
    else:
        val = getattr(item, name, None)
    return None if val is None else str(val)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize(text: str | None) -> str:
    """Canonical matching form of a title or artist.

    Internal runs of whitespace are kept as-is; only the ends are trimmed.
    Accented letters are removed rather than folded, so "Beyoncé" becomes
    "beyonc".
    """
    if text is None:
        return ""
    out = _DISALLOWED_RE.sub("", str(text).lower().strip())
    # stripping punctuation can expose a trailing space ("hi !" -> "hi ")
    return out.strip(" ")


def identity_key(item: ItemLike) -> str:
    return (
        normalize(_field(item, "title"))
        + IDENTITY_SEPARATOR
        + normalize(_field(item, "artist"))
    )


def loose_key(text: str | None) -> str:
    if text is None:
        return ""
    return str(text).lower().strip()


def is_same_entry(a: ItemLike, b: ItemLike) -> bool:
    """
    True when ``a`` and ``b`` share title and artist (case-insensitive) and
    either both lack an album title or the album titles match too.
    """
    if loose_key(_field(a, "title")) != loose_key(_field(b, "title")):
        return False
    if loose_key(_field(a, "artist")) != loose_key(_field(b, "artist")):
        return False
    album_a = _field(a, "album_title")
    album_b = _field(b, "album_title")
    if not album_a and not album_b:
        return True
    if album_a and album_b:
        return loose_key(album_a) == loose_key(album_b)
    return False
