"""A table holding zero or one value."""

from __future__ import annotations

from typing import Any

from .errors import SerializationError
from .table import Table, decode


class Single(Table):
    """A table that stores at most one value."""

    # None when empty; otherwise a one-element tuple, so a stored None stays distinct.
    _slot: tuple[Any] | None = None

    def _store(self, entry: Any) -> Any:
        previous = self.get()
        match entry:
            case ("set", value):
                self._slot = (value,)
            case ("clear",):
                self._slot = None
            case _:
                raise SerializationError(ValueError(f"unknown single entry: {entry!r}"))
        return previous

    def handle_event(self, data: bytes) -> None:
        self._store(decode(data))

    def compact_repr(self) -> bytes:
        if self._slot is None:
            return b""
        return self._compact_entry(("set", *self._slot))

    def insert(self, value: Any) -> Any:
        """Store ``value``; return the value it replaced, or None."""
        entry = ("set", value)
        self._write(entry)
        return self._store(entry)

    def get(self) -> Any:
        """The stored value, or None when the table is empty."""
        return None if self._slot is None else self._slot[0]

    def clear(self) -> Any:
        """Empty the table; return the value it held, or None."""
        self._write(("clear",))
        return self._store(("clear",))