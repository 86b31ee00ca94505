"""Tests for the ring buffer and price history buffer."""

import pytest
from datetime import datetime, timedelta, timezone

from tickwatch.data.buffer import HistoryBuffer, RingBuffer
from tickwatch.data.models import Sample


T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_buffer(prices, capacity=5) -> HistoryBuffer:
    buf = HistoryBuffer(capacity)
    for i, price in enumerate(prices):
        buf.push(Sample(price=price, timestamp=T0 + timedelta(minutes=i)))
    return buf


class TestRingBuffer:
    """Test generic ring buffer behaviour."""

    def test_rejects_non_positive_capacity(self):
        """Test that capacity must be positive."""
        with pytest.raises(ValueError):
            RingBuffer(0)
        with pytest.raises(ValueError):
            RingBuffer(-3)
        with pytest.raises(ValueError):
            RingBuffer(True)

    def test_push_below_capacity(self):
        """Test pushing before the buffer is full."""
        buf = RingBuffer[int](3)
        buf.push(1)
        buf.push(2)

        assert len(buf) == 2
        assert list(buf) == [1, 2]
        assert not buf.is_full

    def test_evicts_oldest_on_overflow(self):
        """Test that the oldest item is dropped when full."""
        buf = RingBuffer[int](3)
        for i in range(7):
            buf.push(i)

        assert len(buf) == 3
        assert list(buf) == [4, 5, 6]
        assert buf.is_full
        assert buf[0] == 4
        assert buf[-1] == 6

    def test_index_out_of_range(self):
        """Test indexing past the stored items."""
        buf = RingBuffer[int](3)
        with pytest.raises(IndexError):
            buf[0]
        buf.push(1)
        with pytest.raises(IndexError):
            buf[1]
        with pytest.raises(IndexError):
            buf[-2]

    def test_last_returns_oldest_first(self):
        """Test that the last n items come back oldest first."""
        buf = RingBuffer[int](4)
        for i in range(6):
            buf.push(i)

        assert buf.last(2) == (4, 5)
        assert buf.last(10) == (2, 3, 4, 5)
        assert buf.last(0) == ()

    def test_latest_on_empty_buffer(self):
        """Test that an empty buffer has no latest item."""
        assert RingBuffer[int](2).latest() is None

    def test_copy_is_independent(self):
        """Test that a copy does not share storage."""
        buf = RingBuffer[int](3)
        buf.push(1)
        clone = buf.copy()
        clone.push(2)

        assert list(buf) == [1]
        assert list(clone) == [1, 2]


class TestHistoryBuffer:
    """Test price window accessors."""

    def test_length_never_exceeds_capacity(self):
        """Test that history length is capped at capacity."""
        buf = HistoryBuffer(5)
        for i in range(23):
            buf.push(Sample(price=float(i + 1), timestamp=T0 + timedelta(minutes=i)))
            assert len(buf) <= 5

    def test_window_returns_last_n_in_arrival_order(self):
        """Test that windows keep arrival order."""
        buf = make_buffer([1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0], capacity=5)

        assert buf.window(3) == (5.0, 6.0, 7.0)
        assert buf.window(5) == (3.0, 4.0, 5.0, 6.0, 7.0)

    def test_window_larger_than_length(self):
        """Test a window larger than the stored history."""
        buf = make_buffer([1.0, 2.0])

        assert buf.window(10) == (1.0, 2.0)

    def test_window_on_empty_buffer(self):
        """Test a window on an empty buffer."""
        assert HistoryBuffer(3).window(10) == ()

    def test_window_is_restartable_snapshot(self):
        """Test that a window can be iterated more than once."""
        buf = make_buffer([1.0, 2.0, 3.0])
        window = buf.window(3)

        buf.push(Sample(price=4.0, timestamp=T0 + timedelta(hours=1)))

        assert list(window) == [1.0, 2.0, 3.0]
        assert list(window) == [1.0, 2.0, 3.0]

    def test_prior_window_excludes_newest(self):
        """Test that the prior window leaves out the newest price."""
        buf = make_buffer([1.0, 2.0, 3.0, 4.0])

        assert buf.prior_window(2) == (2.0, 3.0)
        assert buf.prior_window(10) == (1.0, 2.0, 3.0)

    def test_prior_window_single_sample(self):
        """Test that one sample has an empty prior window."""
        assert make_buffer([1.0]).prior_window(10) == ()

    def test_copy_keeps_type_and_contents(self):
        """Test that a history copy keeps its type and prices."""
        buf = make_buffer([1.0, 2.0])
        clone = buf.copy()

        assert isinstance(clone, HistoryBuffer)
        assert clone.window(5) == (1.0, 2.0)
        assert clone.capacity == buf.capacity
