"""A table backed by a dictionary."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Hashable, Mapping

from .errors import SerializationError
from .logger import Logger
from .table import Table, decode


class LookupTable(Table):
    """A table mapping keys to values."""

    def __init__(self, table_id: int, logger: Logger) -> None:
        super().__init__(table_id, logger)
        self._mapping: dict[Hashable, Any] = {}

    def handle_event(self, data: bytes) -> None:
        match decode(data):
            case ("insert", key, value):
                self._mapping[key] = value
            case ("remove", key):
                self._mapping.pop(key, None)
            case ("clear",):
                self._mapping.clear()
            case unknown:
                raise SerializationError(ValueError(f"unknown lookup entry: {unknown!r}"))

    def compact_repr(self) -> bytes:
        return b"".join(
            self._compact_entry(("insert", key, value)) for key, value in self._mapping.items()
        )

    def insert(self, key: Hashable, value: Any) -> Any:
        """Map ``key`` to ``value``; return the value it replaced, or None."""
        self._write(("insert", key, value))
        previous = self._mapping.get(key)
        self._mapping[key] = value
        return previous

    def remove(self, key: Hashable) -> Any:
        """Remove ``key``; return its value, or None if it was absent."""
        self._write(("remove", key))
        return self._mapping.pop(key, None)

    def get(self) -> Mapping[Hashable, Any]:
        """Read-only view of the keys and their values."""
        return MappingProxyType(self._mapping)

    def clear(self) -> None:
        """Drop all entries."""
        self._write(("clear",))
        self._mapping.clear()