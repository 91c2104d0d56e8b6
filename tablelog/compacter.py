"""Periodic log compaction on a background thread."""

from __future__ import annotations

import contextlib
import threading
from datetime import timedelta
from typing import Any, ContextManager


class CancelSig:
    """A shareable flag telling a background compacter to stop."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Ask the compacter to stop."""
        self._event.set()

    def is_canceled(self) -> bool:
        """Whether :meth:`cancel` has been called."""
        return self._event.is_set()

    def _wait(self, seconds: float) -> bool:
        return self._event.wait(seconds)


class CompacterHandle:
    """A running compacter; :meth:`join` yields how many compactions ran."""

    def __init__(self, cancel: CancelSig) -> None:
        self.cancel_sig = cancel
        self._count = 0
        self._error: BaseException | None = None
        self._thread: threading.Thread | None = None

    def _start(self, db: Any, lock: ContextManager[Any], seconds: float) -> None:
        self._thread = threading.Thread(
            target=self._run, args=(db, lock, seconds), daemon=True, name="log-compacter"
        )
        self._thread.start()

    def _run(self, db: Any, lock: ContextManager[Any], seconds: float) -> None:
        try:
            while True:
                self.cancel_sig._wait(seconds)
                if self.cancel_sig.is_canceled():
                    return
                with lock:
                    db.compact_log()
                self._count += 1
        except BaseException as exc:
            self._error = exc

    def join(self, timeout: float | None = None) -> int:
        """Wait for the thread; return the compaction count or raise its error."""
        assert self._thread is not None
        self._thread.join(timeout)
        if self._thread.is_alive():
            raise TimeoutError("compacter is still running")
        if self._error is not None:
            raise self._error
        return self._count


def begin_compacter(
    db: Any,
    lock: ContextManager[Any] | None,
    freq: float | timedelta,
    cancel: CancelSig | None = None,
) -> CompacterHandle:
    """Call ``db.compact_log()`` every ``freq`` seconds while holding ``lock``.

    Runs until ``cancel`` is signalled; the handle's :meth:`CompacterHandle.join`
    returns how many compactions took place.
    """
    seconds = freq.total_seconds() if isinstance(freq, timedelta) else float(freq)
    if seconds < 0:
        raise ValueError("compaction frequency must not be negative")
    if cancel is None:
        cancel = CancelSig()
    handle = CompacterHandle(cancel)
    handle._start(db, lock if lock is not None else contextlib.nullcontext(), seconds)
    return handle