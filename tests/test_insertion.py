import math

from rankmatch.config import Item, Outcome
from rankmatch.insertion import BinaryInsertionRanker


def _items(*ids):
    return [Item(id=i, title=f"Song {i}", artist="Band") for i in ids]


def _by_strength(order):
    """Judge that prefers items earlier in ``order`` (a transitive oracle)."""
    pos = {item_id: n for n, item_id in enumerate(order)}

    def judge(new_item, ranked_item):
        if pos[new_item.id] < pos[ranked_item.id]:
            return Outcome.PREFERRED_A
        return Outcome.PREFERRED_B

    return judge


def test_run_recovers_transitive_order():
    truth = ["e", "b", "g", "a", "d", "f", "c"]
    ranker = BinaryInsertionRanker(_items("a", "b", "c", "d", "e", "f", "g"))
    final = ranker.run(_by_strength(truth))
    assert [it.id for it in final] == truth
    state = ranker.state()
    assert state.is_complete
    assert state.remaining == []
    assert state.estimated_remaining == 0


def test_uses_fewer_comparisons_than_round_robin():
    ids = [str(i) for i in range(16)]
    ranker = BinaryInsertionRanker(_items(*ids))
    ranker.run(_by_strength(list(reversed(ids))))
    assert ranker.state().total_comparisons < 16 * 15 // 2


def test_first_question_is_initial_pair():
    ranker = BinaryInsertionRanker(_items("a", "b", "c"))
    state = ranker.start()
    pending = state.current_comparison
    assert (pending.new_item.id, pending.compared_item.id) == ("a", "b")
    comp = ranker.current_comparison()
    assert (comp.item_a.id, comp.item_b.id) == ("a", "b")
    assert comp.outcome is None


def test_initial_answer_orders_pair():
    ranker = BinaryInsertionRanker(_items("a", "b"))
    ranker.start()
    state = ranker.answer("preferred_b")
    assert [it.id for it in state.ranked] == ["b", "a"]
    assert state.is_complete
    assert state.total_comparisons == 1


def test_initial_tie_keeps_input_order():
    ranker = BinaryInsertionRanker(_items("a", "b"))
    ranker.start()
    assert [it.id for it in ranker.answer(Outcome.TIE).ranked] == ["a", "b"]


def test_initial_skip_drops_first_item():
    ranker = BinaryInsertionRanker(_items("a", "b", "c"))
    ranker.start()
    state = ranker.answer(Outcome.HAVENT_HEARD)
    assert [it.id for it in state.ranked] == ["b"]
    assert state.current_comparison.new_item.id == "c"
    assert state.current_comparison.compared_item.id == "b"


def test_skip_during_insertion_drops_new_item():
    ranker = BinaryInsertionRanker(_items("a", "b", "c", "d"))
    ranker.start()
    ranker.answer(Outcome.PREFERRED_A)  # a > b
    state = ranker.answer(Outcome.SKIP)  # c dropped
    assert state.current_comparison.new_item.id == "d"
    state = ranker.run(lambda new, old: Outcome.PREFERRED_A)
    assert [it.id for it in state] == ["d", "a", "b"]


def test_tie_places_new_item_below():
    ranker = BinaryInsertionRanker(_items("a", "b"), existing_ranked=_items("x"))
    state = ranker.start()
    assert state.current_comparison.compared_item.id == "x"
    state = ranker.answer(Outcome.TIE)
    assert [it.id for it in state.ranked][:2] == ["x", "a"]


def test_single_item_is_ranked_without_questions():
    ranker = BinaryInsertionRanker(_items("solo"))
    state = ranker.start()
    assert state.current_comparison is None
    assert [it.id for it in state.ranked] == ["solo"]
    assert state.is_complete


def test_empty_session_is_not_complete():
    state = BinaryInsertionRanker([]).start()
    assert state.ranked == []
    assert not state.is_complete


def test_existing_ranking_filters_already_ranked_items():
    existing = [
        Item(id="old-1", title="Song A", artist="Band", album_title="LP"),
        Item(id="old-2", title="Song B", artist="Band"),
    ]
    new = [
        Item(id="new-1", title="song a", artist="BAND", album_title="lp"),
        Item(id="new-2", title="Song A", artist="Band", album_title="Live"),
        Item(id="new-3", title="Song C", artist="Band"),
    ]
    ranker = BinaryInsertionRanker(new, existing_ranked=existing)
    state = ranker.start()
    assert [it.id for it in state.remaining] == ["new-2", "new-3"]
    assert state.current_comparison.new_item.id == "new-2"
    expected_per_item = math.ceil(math.log2(len(existing) + 1))
    assert state.estimated_remaining == 2 * expected_per_item


def test_state_change_callback_fires_on_settle_insert_and_drop():
    seen = []
    ranker = BinaryInsertionRanker(_items("a", "b", "c", "d"), on_state_change=seen.append)
    ranker.start()
    assert seen == []

    ranker.answer(Outcome.PREFERRED_A)  # a > b settles the first pair
    assert [it.id for it in seen[-1].ranked] == ["a", "b"]
    assert seen[-1].current_comparison is None

    ranker.answer(Outcome.SKIP)  # c dropped
    assert [it.id for it in seen[-1].remaining] == ["d"]
    assert [it.id for it in seen[-1].ranked] == ["a", "b"]

    ranker.answer(Outcome.PREFERRED_A)  # d > a: inserted at the top
    assert [it.id for it in seen[-1].ranked] == ["d", "a", "b"]
    assert seen[-1].is_complete
    assert len(seen) == 3


def test_skip_only_removes_the_item_being_inserted():
    ranker = BinaryInsertionRanker(_items("a", "b", "c", "d", "e"))
    ranker.start()
    ranker.answer(Outcome.PREFERRED_A)
    state = ranker.answer(Outcome.HAVENT_HEARD)  # drops c
    assert [it.id for it in state.remaining] == ["d", "e"]


def test_answer_without_pending_comparison_is_noop():
    ranker = BinaryInsertionRanker(_items("a"))
    ranker.start()
    before = ranker.state()
    after = ranker.answer(Outcome.PREFERRED_A)
    assert after == before
