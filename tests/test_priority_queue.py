"""Tests for the binary-heap priority queue."""

import pytest

from floatcheck.analysis.priority_queue import PriorityQueue


class TestPriorityQueue:
    """Test min-heap and max-heap ordering."""

    def test_min_heap_order(self) -> None:
        """Items pop in ascending priority."""
        queue: PriorityQueue[str] = PriorityQueue()
        for item, priority in [("c", 3.0), ("a", 1.0), ("b", 2.0)]:
            queue.push(item, priority)

        assert [queue.pop() for _ in range(3)] == ["a", "b", "c"]

    def test_max_heap_order(self) -> None:
        """With max_heap, items pop in descending priority."""
        queue: PriorityQueue[str] = PriorityQueue(max_heap=True)
        for item, priority in [("c", 3.0), ("a", 1.0), ("b", 2.0)]:
            queue.push(item, priority)

        assert [queue.pop() for _ in range(3)] == ["c", "b", "a"]

    def test_equal_priorities_keep_insertion_order(self) -> None:
        """Ties are released in insertion order."""
        queue: PriorityQueue[str] = PriorityQueue()
        for item in ["x", "y", "z"]:
            queue.push(item, 0.0)

        assert [queue.pop() for _ in range(3)] == ["x", "y", "z"]

    def test_peek_does_not_remove(self) -> None:
        """Peek returns the head without removing it."""
        queue: PriorityQueue[str] = PriorityQueue()
        queue.push("a", 1.0)

        assert queue.peek() == "a"
        assert len(queue) == 1

    def test_len_and_bool(self) -> None:
        """Length and truthiness track the number of items."""
        queue: PriorityQueue[int] = PriorityQueue()
        assert not queue
        queue.push(1, 1.0)
        queue.push(2, 2.0)

        assert queue
        assert len(queue) == 2

    def test_empty_pop_and_peek_raise(self) -> None:
        """Popping or peeking an empty queue raises IndexError."""
        queue: PriorityQueue[str] = PriorityQueue()

        with pytest.raises(IndexError):
            queue.pop()
        with pytest.raises(IndexError):
            queue.peek()
