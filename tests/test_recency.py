from __future__ import annotations

import pytest

from lruhash.errors import LRUHashStructureError
from lruhash.recency import Entry, RecencyList


def _filled(*keys: str) -> tuple[RecencyList[str, int], dict[str, int]]:
    rl: RecencyList[str, int] = RecencyList()
    handles = {key: rl.append_tail(Entry(key, i)) for i, key in enumerate(keys)}
    return rl, handles


def _lru_keys(rl: RecencyList[str, int]) -> list[str]:
    return [e.key for e in rl.iter_lru()]


def _mru_keys(rl: RecencyList[str, int]) -> list[str]:
    return [e.key for e in rl.iter_mru()]


def test_empty_list_has_no_head_or_tail() -> None:
    rl: RecencyList[str, int] = RecencyList()
    assert len(rl) == 0
    assert rl.head is None
    assert rl.tail is None
    assert rl.pop_head() is None
    assert _lru_keys(rl) == []
    assert _mru_keys(rl) == []


def test_append_tail_orders_lru_to_mru() -> None:
    rl, handles = _filled("a", "b", "c")
    assert len(rl) == 3
    assert rl.head == handles["a"]
    assert rl.tail == handles["c"]
    assert _lru_keys(rl) == ["a", "b", "c"]
    assert _mru_keys(rl) == ["c", "b", "a"]


def test_single_element_is_both_head_and_tail() -> None:
    rl, handles = _filled("only")
    assert rl.head == rl.tail == handles["only"]
    entry = rl.entry(handles["only"])
    assert entry.prev is None
    assert entry.next is None


def test_unlink_sole_entry_resets_head_and_tail() -> None:
    rl, handles = _filled("only")
    entry = rl.unlink(handles["only"])
    assert entry.key == "only"
    assert len(rl) == 0
    assert rl.head is None
    assert rl.tail is None


def test_unlink_head_advances_head() -> None:
    rl, handles = _filled("a", "b", "c")
    rl.unlink(handles["a"])
    assert rl.head == handles["b"]
    assert rl.entry(handles["b"]).prev is None
    assert _lru_keys(rl) == ["b", "c"]
    assert _mru_keys(rl) == ["c", "b"]


def test_unlink_tail_retreats_tail() -> None:
    rl, handles = _filled("a", "b", "c")
    rl.unlink(handles["c"])
    assert rl.tail == handles["b"]
    assert rl.entry(handles["b"]).next is None
    assert _lru_keys(rl) == ["a", "b"]
    assert _mru_keys(rl) == ["b", "a"]


def test_unlink_interior_relinks_neighbours() -> None:
    rl, handles = _filled("a", "b", "c")
    removed = rl.unlink(handles["b"])
    assert removed.prev is None and removed.next is None
    assert rl.entry(handles["a"]).next == handles["c"]
    assert rl.entry(handles["c"]).prev == handles["a"]
    assert _lru_keys(rl) == ["a", "c"]
    assert _mru_keys(rl) == ["c", "a"]


@pytest.mark.parametrize(
    ("moved", "expected"),
    [
        ("a", ["b", "c", "a"]),
        ("b", ["a", "c", "b"]),
        ("c", ["a", "b", "c"]),
    ],
)
def test_move_to_tail_from_any_position(moved: str, expected: list[str]) -> None:
    rl, handles = _filled("a", "b", "c")
    rl.move_to_tail(handles[moved])
    assert _lru_keys(rl) == expected
    assert _mru_keys(rl) == list(reversed(expected))
    assert rl.tail == handles[moved]
    assert rl.head == handles[expected[0]]
    assert len(rl) == 3


def test_move_to_tail_on_single_entry_is_a_noop() -> None:
    rl, handles = _filled("only")
    rl.move_to_tail(handles["only"])
    assert rl.head == rl.tail == handles["only"]
    assert _lru_keys(rl) == ["only"]


def test_move_to_tail_twice_keeps_links_consistent() -> None:
    rl, handles = _filled("a", "b")
    rl.move_to_tail(handles["a"])
    rl.move_to_tail(handles["b"])
    rl.move_to_tail(handles["b"])
    assert _lru_keys(rl) == ["a", "b"]
    assert _mru_keys(rl) == ["b", "a"]


def test_pop_head_returns_entries_in_lru_order() -> None:
    rl, _handles = _filled("a", "b", "c")
    popped = []
    while (entry := rl.pop_head()) is not None:
        popped.append(entry.key)
    assert popped == ["a", "b", "c"]
    assert len(rl) == 0
    assert rl.head is None and rl.tail is None


def test_freed_handles_are_reused() -> None:
    rl, handles = _filled("a", "b")
    rl.unlink(handles["a"])
    new_handle = rl.append_tail(Entry("c", 2))
    assert new_handle == handles["a"]
    assert _lru_keys(rl) == ["b", "c"]


def test_stale_handle_raises_structure_error() -> None:
    rl, handles = _filled("a")
    rl.unlink(handles["a"])
    with pytest.raises(LRUHashStructureError):
        rl.entry(handles["a"])
    with pytest.raises(LRUHashStructureError):
        rl.entry(99)


def test_clear_drops_everything() -> None:
    rl, _handles = _filled("a", "b", "c")
    rl.clear()
    assert len(rl) == 0
    assert rl.head is None and rl.tail is None
    assert rl.append_tail(Entry("d", 3)) == 0
    assert _lru_keys(rl) == ["d"]
