"""Fixed-capacity rolling window with snapshot semantics."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class RollingWindow(Generic[T]):
    """Keeps the N most recent items in arrival order.

    Mutating operations return a new window, so a consumer holding a
    previous window never observes a partial update. Items are kept in
    insertion order; timestamps are not inspected.
    """

    __slots__ = ("_capacity", "_items")

    def __init__(self, capacity: int, items: Iterable[T] = ()) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ValueError("capacity must be a positive integer")
        self._capacity = capacity
        values = tuple(items)
        self._items: tuple[T, ...] = values[-capacity:]

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def items(self) -> tuple[T, ...]:
        return self._items

    @property
    def latest(self) -> T | None:
        return self._items[-1] if self._items else None

    def is_empty(self) -> bool:
        return not self._items

    def append(self, item: T) -> RollingWindow[T]:
        """Push at the tail, evicting from the head once over capacity."""
        return RollingWindow(self._capacity, (*self._items, item))

    def replace_last(self, item: T) -> RollingWindow[T]:
        """Swap the newest item, or append when the window is empty."""
        if not self._items:
            return self.append(item)
        return RollingWindow(self._capacity, (*self._items[:-1], item))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RollingWindow):
            return NotImplemented
        return self._capacity == other._capacity and self._items == other._items

    def __hash__(self) -> int:
        return hash((self._capacity, self._items))

    def __repr__(self) -> str:
        return f"RollingWindow(capacity={self._capacity}, size={len(self._items)})"
