import struct
import threading

import pytest

from tablelog.config import Config
from tablelog.errors import SerializationError
from tablelog.list_table import ListTable
from tablelog.logger import Logger
from tablelog.table import encode


class Disk:
    """Hands out loggers over one on-disk log, closing them all at the end."""

    def __init__(self, folder):
        self.folder = folder
        self.handles = []

    def logger(self):
        log = Logger(Config(path=self.folder, schema_name="Schema", fs_locks=False))
        self.handles.append(log)
        return log

    def close(self):
        for log in self.handles:
            log.close()


def replay(table, table_id=1):
    """Feed a table every entry of its log that belongs to table_id."""
    log = table.logger
    for entry in log.get_entries(log.get_bytes()):
        if entry.table_id == table_id:
            table.handle_event(entry.data)
    return table


def in_memory(blob=b"", table_id=1):
    table = ListTable(table_id, Logger(Config.without_io()))
    for entry in table.logger.get_entries(blob):
        table.handle_event(entry.data)
    return table


@pytest.fixture
def disk(tmp_path):
    store = Disk(tmp_path)
    yield store
    store.close()


@pytest.fixture
def filled(disk):
    tables = {
        table_id: replay(ListTable(table_id, disk.logger()), table_id)
        for table_id in (1, 2, 3)
    }
    for table_id, letters in {1: "a", 2: "bcd", 3: "efghij"}.items():
        for letter in letters:
            tables[table_id].push(letter)
    return tables


def test_push_and_reopen(disk):
    table = replay(ListTable(1, disk.logger()))
    table.push("a")
    assert table.get() == ["a"]
    assert replay(ListTable(1, disk.logger())).get() == ["a"]


def test_several_lists(disk, filled):
    expected = {1: ["a"], 2: ["b", "c", "d"], 3: ["e", "f", "g", "h", "i", "j"]}
    for table_id, values in expected.items():
        assert filled[table_id].get() == values
        reopened = replay(ListTable(table_id, disk.logger()), table_id)
        assert reopened.get() == values


def test_remove_and_pop(disk, filled):
    assert filled[2].remove(1) == "c"
    assert [filled[3].pop(), filled[3].pop()] == ["j", "i"]
    expected = {1: ["a"], 2: ["b", "d"], 3: ["e", "f", "g", "h"]}
    for table_id, values in expected.items():
        assert filled[table_id].get() == values
        reopened = replay(ListTable(table_id, disk.logger()), table_id)
        assert reopened.get() == values


def test_negative_index_persists(disk):
    table = replay(ListTable(1, disk.logger()))
    for value in "xyz":
        table.push(value)
    assert table.remove(-3) == "x"
    assert replay(ListTable(1, disk.logger())).get() == ["y", "z"]


def test_pop_empty_raises():
    with pytest.raises(IndexError):
        in_memory().pop()


def test_remove_out_of_range_writes_nothing(disk):
    table = replay(ListTable(1, disk.logger()))
    table.push("only")
    with pytest.raises(IndexError):
        table.remove(5)
    assert table.get() == ["only"]
    assert replay(ListTable(1, disk.logger())).get() == ["only"]


def test_get_returns_copy():
    table = in_memory()
    table.push(1)
    table.get().append(2)
    assert table.get() == [1]


def test_insert_and_clear_events():
    table = in_memory()
    table.push("b")
    table.handle_event(encode(("insert", 0, "a")))
    assert table.get() == ["a", "b"]
    table.handle_event(encode(("clear",)))
    assert table.get() == []


def test_compact_round_trip():
    table = in_memory()
    for value in [3, 1, 2]:
        table.push(value)
    table.remove(0)
    assert in_memory(table.compact_repr()).get() == [1, 2]


def test_empty_compact_repr():
    assert in_memory().compact_repr() == b""


def test_compact_entries_framed():
    table = in_memory(table_id=4)
    table.push("a")
    table.push("b")
    blob = table.compact_repr()
    entries = table.logger.get_entries(blob)
    assert [entry.table_id for entry in entries] == [4, 4]
    assert struct.unpack(">I", blob[1:5])[0] == len(entries[0].data)


@pytest.mark.parametrize("entry", [("shuffle",), ("push",), ("remove", 0, 1)])
def test_unknown_entry_raises(entry):
    with pytest.raises(SerializationError):
        in_memory().handle_event(encode(entry))


def test_unencodable_push_leaves_state():
    table = in_memory()
    with pytest.raises(SerializationError):
        table.push(threading.Lock())
    assert table.get() == []