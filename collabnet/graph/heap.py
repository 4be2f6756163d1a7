"""Binary min-heap keyed by priority.

Entries with equal priority come out in heap-internal order, which is not
stable. Callers that need reproducible output pass a tuple priority with a
secondary key, e.g. ``(distance, node_id)``.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

T = TypeVar("T")


class MinHeap(Generic[T]):
    """Array-backed binary min-heap over ``(item, priority)`` pairs.

    Priorities only need to support ``<``.

    Usage::

        heap = MinHeap[str]()
        heap.push("a", 2.0)
        heap.push("b", 1.0)
        heap.pop()  # ("b", 1.0)
    """

    def __init__(self) -> None:
        self._items: list[tuple[Any, T]] = []

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def push(self, item: T, priority: Any) -> None:
        self._items.append((priority, item))
        self._sift_up(len(self._items) - 1)

    def pop(self) -> tuple[T, Any] | None:
        """Remove and return the minimum ``(item, priority)``, or None if empty."""
        if not self._items:
            return None
        top = self._items[0]
        last = self._items.pop()
        if self._items:
            self._items[0] = last
            self._sift_down(0)
        return top[1], top[0]

    def peek(self) -> tuple[T, Any] | None:
        if not self._items:
            return None
        priority, item = self._items[0]
        return item, priority

    def _sift_up(self, i: int) -> None:
        items = self._items
        while i > 0:
            parent = (i - 1) >> 1
            if not items[i][0] < items[parent][0]:
                break
            items[parent], items[i] = items[i], items[parent]
            i = parent

    def _sift_down(self, i: int) -> None:
        items = self._items
        n = len(items)
        while True:
            smallest = i
            left = 2 * i + 1
            right = left + 1
            if left < n and items[left][0] < items[smallest][0]:
                smallest = left
            if right < n and items[right][0] < items[smallest][0]:
                smallest = right
            if smallest == i:
                return
            items[smallest], items[i] = items[i], items[smallest]
            i = smallest
