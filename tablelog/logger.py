"""The append-only log file shared by every table of a database."""

from __future__ import annotations

import logging
import os
import struct
import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from pathlib import Path
from typing import BinaryIO, Iterator

import portalocker

from .config import Config
from .errors import DbIoError, UnexpectedError

_HEADER = struct.Struct(">BI")
_log = logging.getLogger(__name__)


@contextmanager
def _io_errors() -> Iterator[None]:
    try:
        yield
    except OSError as exc:
        raise DbIoError(exc) from exc


@dataclass(frozen=True)
class LogFormat:
    """One entry of the log: the table it belongs to and its payload."""

    table_id: int
    data: bytes


@dataclass(frozen=True)
class LogMetadata:
    """The two-byte stamp at the start of every log file."""

    log_version: int = 1
    compaction_count: int = 0

    def to_bytes(self) -> bytes:
        return bytes((self.log_version, self.compaction_count))

    @classmethod
    def from_bytes(cls, data: bytes) -> LogMetadata:
        if len(data) != 2:
            raise UnexpectedError("log metadata must be exactly 2 bytes")
        return cls(log_version=data[0], compaction_count=data[1])


class Logger:
    """Writes table entries to the log, buffering them during transactions."""

    def __init__(self, config: Config) -> None:
        self._lock = threading.RLock()
        self._config = config
        self._incomplete_write = False
        self._current_txs = 0
        self._tx_data: bytearray | None = None

        if config.create_path:
            with _io_errors():
                config.path.mkdir(parents=True, exist_ok=True)

        if config.no_io:
            self._file: BinaryIO | None = None
        else:
            self._handle_migration(config)
            self._file = self._open_file(config, config.db_location_v2())

        try:
            self._log_metadata = self._read_or_stamp_metadata(config, self._file)
        except BaseException:
            self._release(self._file)
            raise

    def get_bytes(self) -> bytes:
        """Everything in the log after its metadata stamp."""
        with self._lock:
            if self._file is None:
                return b""
            with _io_errors():
                return self._file.read() or b""

    def get_entries(self, buffer: bytes) -> list[LogFormat]:
        """Split raw log bytes into entries, stopping at a torn write."""
        entries: list[LogFormat] = []
        total = len(buffer)
        index = 0
        while index < total:
            if total < index + _HEADER.size:
                self._mark_incomplete()
                return entries
            table_id, size = _HEADER.unpack_from(buffer, index)
            index += _HEADER.size
            if total < index + size:
                self._mark_incomplete()
                return entries
            if table_id == 0:
                # A transaction or compaction wrapper: its body holds ordinary entries.
                continue
            entries.append(LogFormat(table_id, bytes(buffer[index:index + size])))
            index += size
        return entries

    def _mark_incomplete(self) -> None:
        with self._lock:
            self._incomplete_write = True

    def begin_tx(self) -> TxHandle:
        """Start buffering writes until every open transaction has ended."""
        with self._lock:
            if self._tx_data is None:
                self._tx_data = bytearray()
            self._current_txs += 1
        return TxHandle(self)

    def end_tx(self) -> None:
        """End one transaction; the last one to end flushes the buffer."""
        with self._lock:
            if self._current_txs == 0:
                return
            self._current_txs -= 1
            if self._current_txs == 0:
                data, self._tx_data = self._tx_data, None
                if data is not None:
                    self._write_to_file(self.log_entry(0, bytes(data)))

    def write(self, table_id: int, data: bytes) -> None:
        """Record one entry for ``table_id``."""
        with self._lock:
            if self._config.no_io:
                return
            if self._tx_data is not None:
                self._tx_data += self.header(table_id, data)
                self._tx_data += data
                return
            self._write_to_file(self.log_entry(table_id, data))

    def _write_to_file(self, data: bytes) -> None:
        with self._lock:
            if self._file is None:
                return
            view = memoryview(data)
            with _io_errors():
                while view:
                    view = view[self._file.write(view):]

    @staticmethod
    def header(table_id: int, data: bytes) -> bytes:
        """The five-byte prefix of an entry: table id and big-endian length."""
        try:
            return _HEADER.pack(table_id, len(data))
        except struct.error as exc:
            raise ValueError(f"cannot build entry header: {exc}") from exc

    @staticmethod
    def log_entry(table_id: int, data: bytes) -> bytes:
        """An entry as it is stored: header followed by payload."""
        return Logger.header(table_id, data) + bytes(data)

    def compact_log(self, data: bytes) -> None:
        """Atomically replace the log with the given compacted entries."""
        with self._lock:
            config = self._config
            if config.no_io:
                return
            temp_path = config.compaction_location()
            final_path = config.db_location_v2()

            new_file = self._open_file(config, temp_path)
            try:
                if self._log_metadata is None:
                    raise UnexpectedError("log meta missing -- no_io == false")
                meta = replace(
                    self._log_metadata,
                    compaction_count=(self._log_metadata.compaction_count + 1) % 256,
                )
                with _io_errors():
                    new_file.write(meta.to_bytes())
                    new_file.write(self.log_entry(0, data))
                    os.replace(temp_path, final_path)
            except BaseException:
                self._release(new_file)
                raise

            old_file, self._file = self._file, new_file
            self._log_metadata = meta
            self._release(old_file)

    def config(self) -> Config:
        """A copy of the configuration this log was opened with."""
        with self._lock:
            return replace(self._config)

    def incomplete_write(self) -> bool:
        """Whether a torn entry was found while reading the log."""
        with self._lock:
            return self._incomplete_write

    def close(self) -> None:
        """Release the file lock and close the log file."""
        with self._lock:
            file, self._file = self._file, None
            self._release(file)

    def _release(self, file: BinaryIO | None) -> None:
        if file is None:
            return
        if self._config.fs_locks:
            try:
                portalocker.unlock(file)
            except (portalocker.exceptions.LockException, OSError) as exc:
                _log.warning("failed to unlock log lock: %r", exc)
        file.close()

    @staticmethod
    def _handle_migration(config: Config) -> None:
        v1 = config.db_location_v1()
        v2 = config.db_location_v2()
        v2_temp = Path(f"{v2}.migration")

        if not v1.exists():
            return
        with _io_errors():
            if v2_temp.exists():
                v2_temp.unlink()
            if v2.exists():
                return
            v2_temp.write_bytes(LogMetadata().to_bytes() + v1.read_bytes())
            os.replace(v2_temp, v2)
            v1.unlink()

    @staticmethod
    def _open_file(config: Config, location: Path) -> BinaryIO:
        flags = os.O_RDONLY if config.read_only else os.O_RDWR | os.O_APPEND
        if config.create_db or config.read_only:
            flags |= os.O_CREAT
        flags |= getattr(os, "O_BINARY", 0)
        with _io_errors():
            fd = os.open(location, flags, 0o666)
            file = os.fdopen(fd, "rb" if config.read_only else "rb+", buffering=0)

        if config.fs_locks:
            lock_flags = portalocker.LockFlags.EXCLUSIVE
            if not config.fs_locks_block:
                lock_flags |= portalocker.LockFlags.NON_BLOCKING
            try:
                portalocker.lock(file, lock_flags)
            except (portalocker.exceptions.LockException, OSError) as exc:
                file.close()
                raise DbIoError(exc) from exc
        return file

    @staticmethod
    def _read_or_stamp_metadata(
        config: Config, file: BinaryIO | None
    ) -> LogMetadata | None:
        if file is None:
            return None
        with _io_errors():
            stamp = file.read(2) or b""
        needs_stamp = False
        if not stamp:
            needs_stamp = True
            stamp = LogMetadata().to_bytes()
        elif len(stamp) != 2:
            raise UnexpectedError("Unexpected amount of bytes read from log stamp")

        if needs_stamp and not config.read_only:
            with _io_errors():
                file.write(stamp)
        meta = LogMetadata.from_bytes(stamp)
        if meta.log_version != 1:
            raise UnexpectedError("unexpected log format version found")
        return meta


class TxHandle:
    """An open transaction; ending it flushes buffered writes once all end."""

    def __init__(self, logger: Logger) -> None:
        self._logger = logger
        self._ended = False

    def drop_safely(self) -> None:
        """End this transaction; later calls do nothing."""
        if self._ended:
            return
        self._ended = True
        self._logger.end_tx()

    def __enter__(self) -> TxHandle:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.drop_safely()