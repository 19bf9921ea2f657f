from __future__ import annotations

"""
Agreement between two independently ranked lists.

Both inputs are in rank order (index 0 = best). Items are matched across
lists by :func:`rankmatch.normalize.identity_key`, never by id. Ranks are
recomputed over the shared items only, so a list padded with items the other
list lacks is not penalised for it.

Similarity is Spearman's rank correlation over the shared items, rescaled
from [-1, 1] to an integer percentage:

    rho = 1 - 6 * sum(d^2) / (k * (k^2 - 1))
    similarity = round(((rho + 1) / 2) * 100)

with k = 0 giving 0 and k = 1 giving 100.
"""

import math
from typing import Dict, List, Sequence, Set

import numpy as np
from loguru import logger

from .config import (
    SIMILARITY_MAX,
    SIMILARITY_MIN,
    Direction,
    Item,
    ListComparisonResult,
    SharedItemComparison,
)
from .normalize import identity_key


def _keys(items: Sequence[Item]) -> Set[str]:
    return {identity_key(it) for it in items}


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def find_shared_items(yours: Sequence[Item], theirs: Sequence[Item]) -> List[Item]:
    """Items of ``yours`` (in its order) whose identity also appears in ``theirs``."""
    shared = _keys(yours) & _keys(theirs)
    return [it for it in yours if identity_key(it) in shared]


def restricted_ranks(items: Sequence[Item], shared_keys: Set[str]) -> Dict[str, int]:
    """
    identity key -> 1-based rank among the shared items of ``items``.

    A key repeated within one list keeps the rank of its last occurrence.
    """
    ranks: Dict[str, int] = {}
    rank = 1
    for it in items:
        key = identity_key(it)
        if key in shared_keys:
            ranks[key] = rank
            rank += 1
    return ranks


def _direction(delta: int) -> Direction:
    if delta > 0:
        return Direction.DOWN
    if delta < 0:
        return Direction.UP
    return Direction.SAME


def position_differences(
    yours: Sequence[Item], theirs: Sequence[Item]
) -> List[SharedItemComparison]:
    """
    One entry per shared item, in your restricted order.

    ``position_delta = their_rank - your_rank``: positive means they rank the
    item lower than you do.
    """
    shared_items = find_shared_items(yours, theirs)
    shared_keys = {identity_key(it) for it in shared_items}
    your_ranks = restricted_ranks(yours, shared_keys)
    their_ranks = restricted_ranks(theirs, shared_keys)

    out: List[SharedItemComparison] = []
    for it in shared_items:
        key = identity_key(it)
        your_rank = your_ranks[key]
        their_rank = their_ranks[key]
        delta = their_rank - your_rank
        out.append(
            SharedItemComparison(
                item=it,
                your_rank=your_rank,
                their_rank=their_rank,
                position_delta=delta,
                direction=_direction(delta),
                delta_magnitude=abs(delta),
            )
        )
    return out


def similarity_score(yours: Sequence[Item], theirs: Sequence[Item]) -> int:
    """Spearman agreement over the shared items, as an integer 0..100."""
    shared_items = find_shared_items(yours, theirs)
    k = len(shared_items)
    if k == 0:
        return SIMILARITY_MIN
    if k == 1:
        return SIMILARITY_MAX

    shared_keys = {identity_key(it) for it in shared_items}
    your_ranks = restricted_ranks(yours, shared_keys)
    their_ranks = restricted_ranks(theirs, shared_keys)

    keys = [identity_key(it) for it in shared_items]
    d = np.array([your_ranks[key] - their_ranks[key] for key in keys], dtype=np.int64)
    sum_sq = int(np.dot(d, d))

    rho = 1.0 - (6.0 * sum_sq) / (k * (k * k - 1))
    pct = _round_half_up(((rho + 1.0) / 2.0) * 100.0)
    return max(SIMILARITY_MIN, min(SIMILARITY_MAX, pct))


def only_in_first(first: Sequence[Item], second: Sequence[Item]) -> List[Item]:
    """Items of ``first`` (original order) with no identity match in ``second``."""
    second_keys = _keys(second)
    return [it for it in first if identity_key(it) not in second_keys]


def compare_lists(yours: Sequence[Item], theirs: Sequence[Item]) -> ListComparisonResult:
    """
    Full comparison of two ranked lists: similarity, per-item deltas for
    the shared items, and what each list has that the other lacks.
    """
    result = ListComparisonResult(
        similarity=similarity_score(yours, theirs),
        shared_items=position_differences(yours, theirs),
        only_in_your_list=only_in_first(yours, theirs),
        only_in_their_list=only_in_first(theirs, yours),
    )
    logger.debug(
        "Compared lists of {} and {} items: {} shared, similarity={}",
        len(yours),
        len(theirs),
        len(result.shared_items),
        result.similarity,
    )
    return result
