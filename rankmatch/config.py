from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]


# ---------------------------
# Scoring
# ---------------------------

WIN_POINTS = 1.0
TIE_POINTS = 0.5


# ---------------------------
# List comparison
# ---------------------------

SIMILARITY_MIN = 0
SIMILARITY_MAX = 100

# joins normalized title and artist into an identity key
IDENTITY_SEPARATOR = "|"


# ---------------------------
# Session size policy
# ---------------------------

# Soft cap only: generating pairs for more items logs a warning, nothing is cut.
DEFAULT_MAX_SESSION_ITEMS = 200
MAX_SESSION_ITEMS = int(
    os.getenv("RANKMATCH_MAX_SESSION_ITEMS", str(DEFAULT_MAX_SESSION_ITEMS))
)


# ---------------------------
# Logging / observability
# ---------------------------

LOG_LEVEL = os.getenv("RANKMATCH_LOG_LEVEL", "INFO").upper()
LOG_DIR = PROJECT_ROOT / "logs"
DEFAULT_LOG_FILE = LOG_DIR / "rankmatch.log"


# ---------------------------
# Enums
# ---------------------------

class Outcome(str, Enum):
    """Resolved answer to a single comparison."""

    PREFERRED_A = "preferred_a"
    PREFERRED_B = "preferred_b"
    TIE = "tie"
    SKIP = "skip"
    HAVENT_HEARD = "havent_heard"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    SAME = "same"


# ---------------------------
# Pydantic models shared around the package
# ---------------------------

class Item(BaseModel):
    """
    A rankable song or album as supplied by the caller.
    ``id`` is assigned by the caller and must stay stable for a session.
    """

    id: str
    title: str
    artist: str
    album_title: Optional[str] = None
    cover_art_url: Optional[str] = None


class Comparison(BaseModel):
    """
    One A-vs-B judgment. ``outcome`` stays ``None`` until the user answers.
    """

    item_a: Item
    item_b: Item
    outcome: Optional[Outcome] = None

    @property
    def is_resolved(self) -> bool:
        return self.outcome is not None


class ScoredItem(BaseModel):
    item: Item
    score: float = Field(ge=0)
    rank: int = Field(ge=1)


class SharedItemComparison(BaseModel):
    """
    Where a shared item sits in both lists once each list is restricted to
    the shared items only. A positive ``position_delta`` means the item is
    ranked lower in their list than in yours.
    """

    item: Item
    your_rank: int = Field(ge=1)
    their_rank: int = Field(ge=1)
    position_delta: int
    direction: Direction
    delta_magnitude: int = Field(ge=0)


class ListComparisonResult(BaseModel):
    similarity: int = Field(ge=SIMILARITY_MIN, le=SIMILARITY_MAX)
    shared_items: List[SharedItemComparison] = Field(default_factory=list)
    only_in_your_list: List[Item] = Field(default_factory=list)
    only_in_their_list: List[Item] = Field(default_factory=list)


class PendingComparison(BaseModel):
    """
    The question the insertion ranker is waiting on: where does
    ``new_item`` go relative to ``compared_item`` (at ``position`` in the
    ranked list), with the binary search currently bounded by
    ``[search_left, search_right]``.
    """

    new_item: Item
    compared_item: Item
    position: int = Field(ge=0)
    total_ranked: int = Field(ge=0)
    search_left: int = 0
    search_right: int = 0


class RankingState(BaseModel):
    """Snapshot of an insertion ranking session."""

    ranked: List[Item] = Field(default_factory=list)
    remaining: List[Item] = Field(default_factory=list)
    current_comparison: Optional[PendingComparison] = None
    is_complete: bool = False
    total_comparisons: int = Field(default=0, ge=0)
    estimated_remaining: int = Field(default=0, ge=0)
