from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from loguru import logger

from .config import (
    TIE_POINTS,
    WIN_POINTS,
    Comparison,
    Item,
    Outcome,
    ScoredItem,
)

_SCORING_OUTCOMES = (Outcome.PREFERRED_A, Outcome.PREFERRED_B, Outcome.TIE)


def count_resolved(comparisons: Iterable[Comparison]) -> int:
    """Comparisons the user has answered, skips and "haven't heard" included."""
    return sum(1 for c in comparisons if c.outcome is not None)


def score(items: Sequence[Item], comparisons: Iterable[Comparison]) -> List[ScoredItem]:
    """
    Turn answered comparisons into a ranking.

    A win is worth WIN_POINTS, a tie TIE_POINTS to each side; skips and
    "haven't heard" answers score nothing. Comparisons naming an item id not
    present in ``items`` are dropped without error. Equal scores keep the
    order of ``items``.
    """
    scores: Dict[str, float] = {item.id: 0.0 for item in items}

    applied = 0
    unknown = 0
    for comp in comparisons:
        outcome = comp.outcome
        if outcome is None or outcome not in _SCORING_OUTCOMES:
            continue

        a_id, b_id = comp.item_a.id, comp.item_b.id
        if outcome == Outcome.PREFERRED_A:
            awards = [(a_id, WIN_POINTS)]
        elif outcome == Outcome.PREFERRED_B:
            awards = [(b_id, WIN_POINTS)]
        else:
            awards = [(a_id, TIE_POINTS), (b_id, TIE_POINTS)]

        for item_id, points in awards:
            if item_id in scores:
                scores[item_id] += points
                applied += 1
            else:
                unknown += 1

    if unknown:
        logger.debug("Ignored {} score awards for item ids outside the session", unknown)

    # sorted() is stable, so equal scores stay in input order
    ordered = sorted(items, key=lambda it: -scores[it.id])
    ranked = [
        ScoredItem(item=item, score=scores[item.id], rank=pos)
        for pos, item in enumerate(ordered, start=1)
    ]
    logger.debug("Scored {} items ({} awards applied)", len(ranked), applied)
    return ranked


def ranked_items(scored: Sequence[ScoredItem]) -> List[Item]:
    """Items of a scored ranking in rank order, best first."""
    return [s.item for s in sorted(scored, key=lambda s: s.rank)]
