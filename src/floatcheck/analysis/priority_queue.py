"""Binary heap keyed by a numeric priority."""

from __future__ import annotations

import heapq
import itertools
from typing import Generic, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    """Min-heap (or max-heap) of items keyed by a numeric priority.

    Items with equal priority come out in insertion order, which keeps
    traversal order deterministic. Items themselves are never compared.
    """

    def __init__(self, *, max_heap: bool = False) -> None:
        self._heap: list[tuple[float, int, T]] = []
        self._counter = itertools.count()
        self._sign = -1.0 if max_heap else 1.0

    def push(self, item: T, priority: float) -> None:
        """Add an item with the given priority."""
        heapq.heappush(self._heap, (self._sign * priority, next(self._counter), item))

    def pop(self) -> T:
        """Remove and return the item with the lowest (highest for max-heap) priority.

        Raises:
            IndexError: If the queue is empty
        """
        if not self._heap:
            raise IndexError("pop from an empty priority queue")
        return heapq.heappop(self._heap)[2]

    def peek(self) -> T:
        """Return the next item without removing it.

        Raises:
            IndexError: If the queue is empty
        """
        if not self._heap:
            raise IndexError("peek into an empty priority queue")
        return self._heap[0][2]

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
