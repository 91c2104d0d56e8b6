"""A table backed by a list."""

from __future__ import annotations

from typing import Any

from .errors import SerializationError
from .logger import Logger
from .table import Table, decode


class ListTable(Table):
    """A table holding an ordered list of values."""

    def __init__(self, table_id: int, logger: Logger) -> None:
        super().__init__(table_id, logger)
        self._items: list[Any] = []

    def handle_event(self, data: bytes) -> None:
        match decode(data):
            case ("push", value):
                self._items.append(value)
            case ("insert", index, value):
                self._items.insert(index, value)
            case ("remove", index):
                del self._items[index]
            case ("clear",):
                self._items.clear()
            case unknown:
                raise SerializationError(ValueError(f"unknown list entry: {unknown!r}"))

    def compact_repr(self) -> bytes:
        return b"".join(self._compact_entry(("push", value)) for value in self._items)

    def push(self, value: Any) -> None:
        """Append ``value`` to the end of the list."""
        self._write(("push", value))
        self._items.append(value)

    def pop(self) -> Any:
        """Remove and return the last value; IndexError when empty."""
        if not self._items:
            raise IndexError("pop from empty list")
        return self.remove(-1)

    def remove(self, index: int) -> Any:
        """Remove and return the value at ``index``."""
        position = range(len(self._items))[index]
        self._write(("remove", position))
        return self._items.pop(position)

    def get(self) -> list[Any]:
        """A copy of the values in order."""
        return list(self._items)