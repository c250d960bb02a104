import pytest

from cmdpanel.core.history import (
    EMPTY_ENTRY,
    HISTORY_SIZE_DEFAULT,
    CommandHistory,
    HistoryEntry,
    clamp_history_size,
)


def _names(history: CommandHistory) -> list[str]:
    return [e.name for e in history.read()]


def test_new_history_is_filled_with_empty_entries() -> None:
    history = CommandHistory()
    assert history.size == HISTORY_SIZE_DEFAULT
    assert history.read() == (EMPTY_ENTRY,) * HISTORY_SIZE_DEFAULT
    assert history.latest == HistoryEntry("None", 0.0)


def test_push_keeps_newest_first() -> None:
    history = CommandHistory(4)
    history.push("a", 1.0)
    history.push("b", 2.0)
    assert _names(history) == ["b", "a", "None", "None"]
    assert history.latest == HistoryEntry("b", 2.0)
    assert len(history) == 4


def test_push_at_capacity_drops_oldest() -> None:
    history = CommandHistory(3)
    for name in ["a", "b", "c", "d", "e"]:
        history.push(name, 0.5)
    assert _names(history) == ["e", "d", "c"]


def test_shrink_keeps_newest_entries() -> None:
    history = CommandHistory(5)
    for name in ["a", "b", "c", "d"]:
        history.push(name, 0.0)
    history.resize(2)
    assert _names(history) == ["d", "c"]


def test_grow_pads_with_empty_entries() -> None:
    history = CommandHistory(2)
    history.push("a", 1.5)
    history.resize(4)
    assert history.read() == (HistoryEntry("a", 1.5), EMPTY_ENTRY, EMPTY_ENTRY, EMPTY_ENTRY)


def test_resize_below_one_is_rejected() -> None:
    history = CommandHistory(2)
    with pytest.raises(ValueError):
        history.resize(0)
    assert history.size == 2


@pytest.mark.parametrize(("size", "expected"), [(-5, 1), (0, 1), (1, 1), (42, 42), (100, 100), (500, 100)])
def test_clamp_history_size(size: int, expected: int) -> None:
    assert clamp_history_size(size) == expected
