"""A lookup table whose values are sets."""

from __future__ import annotations

from types import MappingProxyType
from typing import Hashable, Mapping

from .errors import SerializationError
from .logger import Logger
from .table import Table, decode, encode


class LookupSet(Table):
    """A table mapping keys to sets, logging single-element changes."""

    def __init__(self, table_id: int, logger: Logger) -> None:
        super().__init__(table_id, logger)
        self._inner: dict[Hashable, set[Hashable]] = {}

    def handle_event(self, data: bytes) -> None:
        match decode(data):
            case ("insert", key, value):
                self._insert_inner(key, value)
            case ("remove", key, value):
                values = self._inner.get(key)
                if values is not None:
                    values.discard(value)
            case ("create_key", key):
                self._inner[key] = set()
            case ("clear_key", key):
                self._inner.pop(key, None)
            case ("clear",):
                self._inner.clear()
            case other:
                raise SerializationError(
                    ValueError(f"unknown lookup set entry: {other!r}")
                )

    def compact_repr(self) -> bytes:
        parts = []
        for key, values in self._inner.items():
            if not values:
                parts.append(self._compact_entry(("create_key", key)))
            parts.extend(self._compact_entry(("insert", key, value)) for value in values)
        return b"".join(parts)

    def _insert_inner(self, key: Hashable, value: Hashable) -> bool:
        values = self._inner.get(key)
        if values is None:
            self._inner[key] = {value}
            return False
        if value in values:
            return False
        values.add(value)
        return True

    def insert(self, key: Hashable, value: Hashable) -> bool:
        """Add ``value`` under ``key``.

        Returns True only when the key already existed and the value was new.
        """
        data = encode(("insert", key, value))
        added = self._insert_inner(key, value)
        self.logger.write(self.table_id, data)
        return added

    def create_key(self, key: Hashable) -> set[Hashable] | None:
        """Set ``key`` to an empty set; return the set it replaced, or None."""
        data = encode(("create_key", key))
        previous = self._inner.get(key)
        self._inner[key] = set()
        self.logger.write(self.table_id, data)
        return previous

    def remove(self, key: Hashable, value: Hashable) -> bool:
        """Remove ``value`` under ``key``; True if it was present."""
        values = self._inner.get(key)
        if values is None:
            return False
        data = encode(("remove", key, value))
        self.logger.write(self.table_id, data)
        present = value in values
        values.discard(value)
        return present

    def get(self) -> Mapping[Hashable, set[Hashable]]:
        """A read-only view of the table."""
        return MappingProxyType(self._inner)

    def clear(self) -> None:
        """Remove every key."""
        self._inner.clear()
        self.logger.write(self.table_id, encode(("clear",)))

    def clear_key(self, key: Hashable) -> set[Hashable] | None:
        """Remove ``key``; return its set, or None if it was absent."""
        data = encode(("clear_key", key))
        previous = self._inner.pop(key, None)
        self.logger.write(self.table_id, data)
        return previous