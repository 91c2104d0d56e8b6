"""The contract every table kind fulfils, and value encoding for log entries."""

from __future__ import annotations

import pickle
from abc import ABC, abstractmethod
from typing import Any

from .errors import SerializationError
from .logger import Logger

_PROTOCOL = 4


def encode(value: Any) -> bytes:
    """Encode a value for storage in the log."""
    try:
        return pickle.dumps(value, protocol=_PROTOCOL)
    except (pickle.PicklingError, TypeError, AttributeError) as exc:
        raise SerializationError(exc) from exc


def decode(data: bytes) -> Any:
    """Decode a value previously produced by :func:`encode`."""
    try:
        return pickle.loads(data)
    except Exception as exc:
        raise SerializationError(exc) from exc


class Table(ABC):
    """A table holds in-memory state and replays log entries to rebuild it."""

    def __init__(self, table_id: int, logger: Logger) -> None:
        self.table_id = table_id
        self.logger = logger

    @abstractmethod
    def handle_event(self, data: bytes) -> None:
        """Apply one log entry of this table to the in-memory state."""

    @abstractmethod
    def compact_repr(self) -> bytes:
        """Log entries that rebuild the current state from nothing."""

    def _write(self, entry: Any) -> None:
        self.logger.write(self.table_id, encode(entry))

    def _compact_entry(self, entry: Any) -> bytes:
        return Logger.log_entry(self.table_id, encode(entry))