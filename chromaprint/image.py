"""A growable two-dimensional grid of floats stored row by row."""

from __future__ import annotations

from collections.abc import Iterable, Sequence


class ImageRow:
    """A writable view of one row of an :class:`Image`."""

    def __init__(self, data: list[float], offset: int, columns: int) -> None:
        self._data = data
        self._offset = offset
        self._columns = columns

    def __len__(self) -> int:
        return self._columns

    def _index(self, i: int) -> int:
        if not 0 <= i < self._columns:
            raise IndexError(f"column {i} out of range 0..{self._columns - 1}")
        return self._offset + i

    def __getitem__(self, i: int) -> float:
        return self._data[self._index(i)]

    def __setitem__(self, i: int, value: float) -> None:
        self._data[self._index(i)] = value

    def __iter__(self):
        return iter(self._data[self._offset:self._offset + self._columns])


class Image:
    """Rows of a fixed number of columns, appended one at a time."""

    def __init__(self, columns: int, rows: int = 0, data: Iterable[float] | None = None) -> None:
        if columns < 1:
            raise ValueError(f"an image needs at least one column, got {columns}")
        self._columns = columns
        if data is not None:
            self._data = [float(v) for v in data]
        else:
            self._data = [0.0] * (columns * rows)

    @property
    def num_columns(self) -> int:
        return self._columns

    @property
    def num_rows(self) -> int:
        return len(self._data) // self._columns

    def add_row(self, row: Sequence[float]) -> None:
        """Append a row; a short row is padded with zeros."""
        if len(row) > self._columns:
            raise ValueError(f"row has {len(row)} values, image has {self._columns} columns")
        self._data.extend(float(v) for v in row)
        self._data.extend([0.0] * (self._columns - len(row)))

    def row(self, i: int) -> ImageRow:
        if not 0 <= i < self.num_rows:
            raise IndexError(f"row {i} out of range 0..{self.num_rows - 1}")
        return ImageRow(self._data, self._columns * i, self._columns)

    def __getitem__(self, i: int) -> ImageRow:
        return self.row(i)

    def __len__(self) -> int:
        return self.num_rows