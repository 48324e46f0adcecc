"""Integer average over a sliding window of the most recent values."""

from __future__ import annotations


class MovingAverage:
    """Keeps the last ``size`` values and their integer-truncated average."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"window size must be positive, got {size}")
        self._buffer: list[float] = [0] * size
        self._size = size
        self._offset = 0
        self._sum = 0
        self._count = 0

    def add_value(self, x: float) -> None:
        """Push a value, evicting the oldest once the window is full."""
        self._sum = int(self._sum + x)
        self._sum = int(self._sum - self._buffer[self._offset])
        if self._count < self._size:
            self._count += 1
        self._buffer[self._offset] = x
        self._offset = (self._offset + 1) % self._size

    @property
    def average(self) -> int:
        """Average of the window, truncated towards zero; 0 when empty."""
        if not self._count:
            return 0
        quotient = abs(self._sum) // self._count
        return quotient if self._sum >= 0 else -quotient