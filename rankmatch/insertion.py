from __future__ import annotations

"""
Reduced-comparison ranking by binary insertion.

Unlike :func:`rankmatch.pairs.generate_comparisons`, which asks about every
pair, this ranker inserts items one at a time into an already-ordered list
and binary-searches for the insertion point. That needs roughly
``log2(n)`` answers per item instead of ``n - 1``, but it **assumes the
user's preferences are transitive**: if A beats B and B beats C, A is never
compared with C. Intransitive answers silently produce an order that
contradicts some of them.

Answer semantics for the pending comparison (``item_a`` is the item being
inserted, ``item_b`` the already-ranked one it is measured against):

* ``preferred_a``   the new item goes above ``item_b``
* ``preferred_b``   the new item goes below ``item_b``
* ``tie``           treated as ``preferred_b``; the item already ranked
                    keeps its place ahead
* ``skip`` / ``havent_heard``
                    the new item is dropped from the session unranked

A session is single-user state; instances are not meant to be shared
between threads.
"""

import math
from typing import Callable, List, Optional, Sequence

from loguru import logger

from .config import Comparison, Item, Outcome, PendingComparison, RankingState
from .normalize import is_same_entry

_DROP_OUTCOMES = (Outcome.SKIP, Outcome.HAVENT_HEARD)


class BinaryInsertionRanker:
    """
    Interactive binary insertion sort driven by user answers.

    ``on_state_change``, when given, receives a fresh :class:`RankingState`
    each time the ranked list changes: the first pair settles, an item is
    inserted, or an item is dropped. Callers use it to persist drafts
    without polling :meth:`state`.
    """

    def __init__(
        self,
        items: Sequence[Item],
        existing_ranked: Optional[Sequence[Item]] = None,
        on_state_change: Optional[Callable[[RankingState], None]] = None,
    ) -> None:
        if existing_ranked:
            self._ranked: List[Item] = list(existing_ranked)
            self._remaining: List[Item] = [
                it for it in items
                if not any(is_same_entry(it, r) for r in existing_ranked)
            ]
            dropped = len(items) - len(self._remaining)
            if dropped:
                logger.debug("Skipping {} items already present in the existing ranking", dropped)
        else:
            self._ranked = []
            self._remaining = list(items)

        self._pending: Optional[PendingComparison] = None
        self._initial_pair = False
        self._comparisons = 0
        self._on_state_change = on_state_change

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self) -> RankingState:
        """Set up the first question (or finish immediately if none is needed)."""
        if not self._remaining:
            return self.state()

        if self._ranked:
            return self._begin_next()

        if len(self._remaining) == 1:
            self._ranked = [self._remaining.pop(0)]
            return self.state()

        self._pending = PendingComparison(
            new_item=self._remaining[0],
            compared_item=self._remaining[1],
            position=0,
            total_ranked=0,
            search_left=0,
            search_right=0,
        )
        self._initial_pair = True
        return self.state()

    def current_comparison(self) -> Optional[Comparison]:
        if self._pending is None:
            return None
        return Comparison(item_a=self._pending.new_item, item_b=self._pending.compared_item)

    def answer(self, outcome: Outcome | str) -> RankingState:
        """Apply the user's answer to the pending comparison and advance."""
        outcome = Outcome(outcome)
        if self._pending is None:
            logger.debug("Ignoring answer {} with no pending comparison", outcome.value)
            return self.state()

        if self._initial_pair:
            return self._answer_initial(outcome)

        pending = self._pending
        new_item = pending.new_item
        self._pending = None

        if outcome in _DROP_OUTCOMES:
            self._remove_remaining(new_item)
            logger.debug("Dropped item {} from the session ({})", new_item.id, outcome.value)
            self._notify()
            return self._begin_next()

        self._comparisons += 1
        mid = pending.position
        if outcome == Outcome.PREFERRED_A:
            left, right = pending.search_left, mid - 1
        else:
            left, right = mid + 1, pending.search_right
        return self._search(new_item, left, right)

    def run(self, judge: Callable[[Item, Item], Outcome | str]) -> List[Item]:
        """
        Drive the whole session with ``judge(new_item, ranked_item)`` and
        return the final order. Handy for batch use and tests.
        """
        state = self.start()
        while state.current_comparison is not None:
            pending = state.current_comparison
            state = self.answer(judge(pending.new_item, pending.compared_item))
        return state.ranked

    def state(self) -> RankingState:
        return RankingState(
            ranked=list(self._ranked),
            remaining=list(self._remaining),
            current_comparison=self._pending,
            is_complete=not self._remaining and bool(self._ranked),
            total_comparisons=self._comparisons,
            estimated_remaining=self._estimate_remaining(),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _answer_initial(self, outcome: Outcome) -> RankingState:
        first = self._remaining.pop(0)
        second = self._remaining.pop(0)
        self._pending = None
        self._initial_pair = False
        self._comparisons += 1

        if outcome in _DROP_OUTCOMES:
            logger.debug("Dropped item {} from the session ({})", first.id, outcome.value)
            self._ranked = [second]
        elif outcome == Outcome.PREFERRED_B:
            self._ranked = [second, first]
        else:
            self._ranked = [first, second]
        self._notify()
        return self._begin_next()

    def _begin_next(self) -> RankingState:
        if not self._remaining:
            return self.state()
        return self._search(self._remaining[0], 0, len(self._ranked) - 1)

    def _search(self, new_item: Item, left: int, right: int) -> RankingState:
        if left > right:
            self._insert(new_item, left)
            return self._begin_next()

        mid = (left + right) // 2
        self._pending = PendingComparison(
            new_item=new_item,
            compared_item=self._ranked[mid],
            position=mid,
            total_ranked=len(self._ranked),
            search_left=left,
            search_right=right,
        )
        return self.state()

    def _insert(self, new_item: Item, position: int) -> None:
        self._ranked.insert(position, new_item)
        self._remove_remaining(new_item)
        logger.debug("Inserted item {} at position {}", new_item.id, position)
        self._notify()

    def _remove_remaining(self, item: Item) -> None:
        for idx, it in enumerate(self._remaining):
            if it.id == item.id:
                del self._remaining[idx]
                return

    def _notify(self) -> None:
        if self._on_state_change is not None:
            self._on_state_change(self.state())

    def _estimate_remaining(self) -> int:
        if not self._remaining or not self._ranked:
            return 0
        per_item = math.ceil(math.log2(len(self._ranked) + 1))
        return len(self._remaining) * per_item
