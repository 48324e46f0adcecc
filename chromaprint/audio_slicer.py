"""Cuts a stream of samples into overlapping fixed-size windows."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

T = TypeVar("T")

SliceConsumer = Callable[[Sequence[T], Sequence[T]], None]


class AudioSlicer(Generic[T]):
    """Emits windows of ``size`` samples, advancing by ``increment`` each time.

    Input may arrive in blocks of any length. Each window is handed to the
    consumer as two parts: samples kept from earlier calls, then samples
    from the current block. Together they always hold ``size`` samples.
    """

    def __init__(self, size: int, increment: int) -> None:
        if increment < 1:
            raise ValueError(f"increment must be positive, got {increment}")
        if size < increment:
            raise ValueError(f"window size {size} is smaller than increment {increment}")
        self._size = size
        self._increment = increment
        self._buffer: list[T] = []

    @property
    def size(self) -> int:
        return self._size

    @property
    def increment(self) -> int:
        return self._increment

    def reset(self) -> None:
        """Drop any samples held back from earlier calls."""
        self._buffer = []

    def process(self, data: Sequence[T], consumer: SliceConsumer) -> None:
        """Feed a block of samples, calling ``consumer`` for every full window."""
        data = list(data)
        pos = 0
        remaining = len(data)

        while self._buffer and len(self._buffer) + remaining >= self._size:
            buffered = len(self._buffer)
            consumer(list(self._buffer), data[pos:pos + self._size - buffered])
            if buffered >= self._increment:
                del self._buffer[:self._increment]
            else:
                skip = self._increment - buffered
                self._buffer = []
                pos += skip
                remaining -= skip

        if not self._buffer:
            while remaining >= self._size:
                consumer(data[pos:pos + self._size], [])
                pos += self._increment
                remaining -= self._increment

        self._buffer.extend(data[pos:])