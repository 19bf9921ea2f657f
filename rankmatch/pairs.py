from __future__ import annotations

"""
Comparison generation for a ranking session.

Every unordered pair of items is emitted exactly once (a full round-robin),
so the scoring step can produce a total order even when the user's answers
are intransitive (A > B, B > C, C > A). The cheaper binary-insertion mode
lives in :mod:`rankmatch.insertion` and assumes transitivity.
"""

from typing import Iterator, List, Sequence

from loguru import logger

from . import config
from .config import Comparison, Item


def comparison_count(n: int) -> int:
    """Number of comparisons a full round-robin over ``n`` items needs."""
    if n < 2:
        return 0
    return n * (n - 1) // 2


def iter_comparisons(items: Sequence[Item]) -> Iterator[Comparison]:
    """
    Yield unresolved comparisons in canonical order: each item in input
    order is paired with every item after it.
    """
    n = len(items)
    for i in range(n):
        for j in range(i + 1, n):
            yield Comparison(item_a=items[i], item_b=items[j])


def generate_comparisons(items: Sequence[Item]) -> List[Comparison]:
    """
    Build the complete set of N*(N-1)/2 comparisons for ``items``.

    Returns an empty list for fewer than two items. Outcomes are left unset;
    the caller fills them in as the user answers and hands the list to
    :func:`rankmatch.scoring.score`.
    """
    n = len(items)
    if n < 2:
        return []

    if n > config.MAX_SESSION_ITEMS:
        logger.warning(
            "Generating {} comparisons for {} items (session cap is {} items); "
            "consider splitting the session.",
            comparison_count(n),
            n,
            config.MAX_SESSION_ITEMS,
        )

    comparisons = list(iter_comparisons(items))
    logger.debug("Generated {} comparisons for {} items", len(comparisons), n)
    return comparisons
