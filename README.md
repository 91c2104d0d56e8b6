# tablelog

An embedded, single-process database whose tables are ordinary Python
containers. Every change is appended to a log file on disk. Opening the
database replays the log to rebuild the tables.

## Installing

```
pip install tablelog
```

## Defining a schema

A schema is a subclass of `tablelog.db.Schema` that declares its tables as
annotations. The annotations must be the table classes themselves, not
strings. Tables are numbered from 1 in declaration order, and at most 254 are
allowed. The class name gives the log file its name: `<Name>.db` in the chosen
folder.

```python
from tablelog.config import Config
from tablelog.db import Schema
from tablelog.list_table import ListTable
from tablelog.lookup import LookupTable
from tablelog.single import Single


class Accounts(Schema):
    owner: Single
    admins: ListTable
    users: LookupTable


with Accounts(Config.in_folder("/tmp/accounts")) as db:
    db.owner.insert("alice")
    db.admins.push("bob")
    db.users.insert("alice", {"plan": "pro"})
    print(db.owner.get())
```

Leaving the `with` block, or calling `close()`, closes the log file and
releases its lock.

Values and keys are stored with `pickle`. They must be picklable, and a log
file should only be opened if it comes from a source you trust.

## Table types

- `Single` (`tablelog.single`) holds zero or one value. `insert(value)` and
  `clear()` return the value that was there before, or `None`.
- `ListTable` (`tablelog.list_table`) is a list. It has `push(value)`,
  `pop()` and `remove(index)`. `pop()` raises `IndexError` when the list is
  empty.
- `LookupTable` (`tablelog.lookup`) is a dict. It has `insert(key, value)`,
  `remove(key)` and `clear()`.
- `LookupList` (`tablelog.lookup_list`) is a dict of lists. It has
  `push(key, value)`, `create_key(key)`, `remove(key, index)`,
  `clear_key(key)` and `clear()`.
- `LookupSet` (`tablelog.lookup_set`) is a dict of sets. It has
  `insert(key, value)`, `create_key(key)`, `remove(key, value)`,
  `clear_key(key)` and `clear()`. `insert` returns `True` only when the key
  already existed and the value was new.

Calling `get()` on a table returns its contents:

- `ListTable` gives a copy of the list.
- `Single` gives the value, or `None`.
- The lookup tables give a read-only mapping view.

## Transactions

Writes made while a transaction is open are kept in memory. When the last
open transaction ends, they are written to the log as a single entry. If the
program stops before then, none of them are kept. A transaction cannot be
aborted.

```python
with db.begin_transaction():
    db.users.insert("carol", {"plan": "free"})
    db.admins.push("carol")
```

You can also end a handle explicitly with `drop_safely()`.

## Log compaction

`db.compact_log()` rewrites the log so that it holds only the current state
of every table. It writes to `<Name>.db.tmp` and then renames that file over
the log, so the change is atomic.

To compact periodically from a background thread, use `tablelog.compacter`:

```python
import threading
from tablelog.compacter import CancelSig, begin_compacter

lock = threading.Lock()
cancel = CancelSig()
handle = begin_compacter(db, lock, 60.0, cancel)
...
cancel.cancel()
count = handle.join(None)
```

- The frequency may be given in seconds or as a `datetime.timedelta`.
- `join` returns how many compactions ran.
- If a compaction failed, `join` raises that error.

## Torn writes

When the log ends in a partly written entry, that entry is ignored on
opening and `db.incomplete_write()` returns `True`. A transaction or
compaction that was cut short is dropped as a whole.

## Configuration

`Config.in_folder(path)` (`tablelog.config`) sets the following:

- it creates the folder and the log as needed;
- it takes an exclusive file lock on the log, which makes a second opening
  fail with `DbIoError`.

The fields of the `Config` dataclass can be changed before opening:

- `fs_locks = False` turns off the file lock.
- `fs_locks_block = True` waits for the lock instead of failing.
- `read_only = True` never writes to the log.
- `create_path` and `create_db` control whether the folder and the log are
  created.

`Config.without_io()` keeps everything in memory, which suits tests.

An older log named `<Name>` with no extension and no version stamp is
converted to `<Name>.db` the first time it is opened.

## Errors

Errors are raised as subclasses of `DbError` from `tablelog.errors`:

- `UnexpectedError`: an unknown log version, a bad stamp or an unknown table id.
- `DbIoError`: file and lock failures.
- `SerializationError`: values that cannot be encoded or decoded.

## Example

```
tablelog-example [folder]
```

This opens the sample schema `SampleSchemaV1` from `tablelog.example` and
clears its `names` table. The folder defaults to `test` in the system's
temporary directory.

## Limits

`tablelog` is a library used from within a single process. It does not have:

- a server or a network protocol;
- a query language;
- integrity constraints beyond what your own code checks.