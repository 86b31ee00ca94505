"""
Fixed-capacity ring buffer for per-ticker history.

Writes go to a preallocated arena at the head index; once full, the oldest
entry is overwritten. Appends are O(1) regardless of capacity.
"""

from typing import Generic, Iterator, Optional, TypeVar

from .models import Sample

T = TypeVar('T')


class RingBuffer(Generic[T]):
    """
    Insertion-ordered buffer holding at most ``capacity`` items.

    Example:
        buf = RingBuffer[int](capacity=3)
        for i in range(5):
            buf.push(i)
        list(buf)  # [2, 3, 4]
    """

    __slots__ = ('_arena', '_capacity', '_head', '_size')

    def __init__(self, capacity: int):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ValueError(f"capacity must be a positive integer, got {capacity!r}")
        self._arena: list[Optional[T]] = [None] * capacity
        self._capacity = capacity
        self._head = 0  # Next write position
        self._size = 0

    def push(self, item: T) -> None:
        """Append item, evicting the oldest entry when full."""
        self._arena[self._head] = item
        self._head = (self._head + 1) % self._capacity
        if self._size < self._capacity:
            self._size += 1

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def __getitem__(self, index: int) -> T:
        """buf[0] is the oldest item, buf[-1] the newest."""
        if index < 0:
            index += self._size
        if index < 0 or index >= self._size:
            raise IndexError(f"index {index} out of range for size {self._size}")

        tail = (self._head - self._size) % self._capacity
        return self._arena[(tail + index) % self._capacity]  # type: ignore[return-value]

    def __iter__(self) -> Iterator[T]:
        """Iterate from oldest to newest."""
        for i in range(self._size):
            yield self[i]

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return self._size == self._capacity

    def last(self, n: int) -> tuple[T, ...]:
        """Most recent ``min(n, len)`` items, oldest first."""
        if n <= 0:
            return ()
        n = min(n, self._size)
        return tuple(self[i] for i in range(self._size - n, self._size))

    def latest(self) -> Optional[T]:
        return self[-1] if self._size else None

    def snapshot(self) -> tuple[T, ...]:
        return tuple(self)

    def copy(self) -> "RingBuffer[T]":
        clone: RingBuffer[T] = RingBuffer(self._capacity)
        for item in self:
            clone.push(item)
        return clone


class HistoryBuffer(RingBuffer[Sample]):
    """Ring buffer of price samples with price-window accessors."""

    def window(self, n: int) -> tuple[float, ...]:
        """
        Most recent ``min(n, len)`` prices, oldest first.

        Each call returns a fresh immutable snapshot, so callers can iterate
        it as often as they like while the buffer keeps moving.
        """
        return tuple(sample.price for sample in self.last(n))

    def prior_window(self, n: int) -> tuple[float, ...]:
        """Up to ``n`` prices preceding the newest sample, oldest first."""
        return self.window(n + 1)[:-1]

    def copy(self) -> "HistoryBuffer":
        clone = HistoryBuffer(self.capacity)
        for sample in self:
            clone.push(sample)
        return clone
