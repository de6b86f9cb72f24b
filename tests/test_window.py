from __future__ import annotations

import pytest

from tickerdash.series.window import RollingWindow


def test_window_never_exceeds_capacity_and_keeps_most_recent_in_order() -> None:
    window: RollingWindow[int] = RollingWindow(20)
    for value in range(25):
        window = window.append(value)
        assert len(window) <= 20

    assert list(window) == list(range(5, 25))
    assert window.latest == 24


def test_append_returns_new_window_and_leaves_snapshot_untouched() -> None:
    first = RollingWindow(3, [1, 2, 3])
    second = first.append(4)

    assert first.items == (1, 2, 3)
    assert second.items == (2, 3, 4)


def test_replace_last_swaps_newest_item_or_appends_when_empty() -> None:
    window = RollingWindow(3, [1, 2])
    assert window.replace_last(9).items == (1, 9)
    assert RollingWindow(3).replace_last(7).items == (7,)


def test_empty_window_has_no_latest() -> None:
    window: RollingWindow[int] = RollingWindow(5)
    assert window.is_empty()
    assert window.latest is None
    assert len(window) == 0


def test_initial_items_are_trimmed_to_capacity() -> None:
    assert RollingWindow(2, [1, 2, 3]).items == (2, 3)


@pytest.mark.parametrize("capacity", [0, -1, True, 2.5])
def test_invalid_capacity_is_rejected(capacity: object) -> None:
    with pytest.raises(ValueError):
        RollingWindow(capacity)  # type: ignore[arg-type]
