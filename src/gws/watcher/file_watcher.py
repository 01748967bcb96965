"""
Todo file watcher (polling).

The interactive loop is single threaded, so instead of a background observer
the loop asks ``has_changed()`` once per iteration. The check compares the
file's (mtime, size) against the last snapshot and is throttled to one stat
per poll interval.

A stat error is treated as "no file".
"""

import logging
import time
from pathlib import Path
from typing import Optional, Tuple

log = logging.getLogger(__name__)

_DEFAULT_POLL_INTERVAL = 0.5

# (mtime_ns, size), or None when the file does not exist.
Snapshot = Optional[Tuple[int, int]]


class FileWatcher:
    """
    Non-blocking change check for a single file.

    Usage:
        watcher = FileWatcher(path)
        ...
        if watcher.has_changed():
            reload()
        ...
        save()
        watcher.mark_synced()
    """

    def __init__(self, path: Path, poll_interval: Optional[float] = None) -> None:
        self._path = path
        self._poll_interval = _DEFAULT_POLL_INTERVAL if poll_interval is None else poll_interval
        self._snapshot: Snapshot = self._take_snapshot()
        self._last_check = time.monotonic()

    @property
    def path(self) -> Path:
        return self._path

    def has_changed(self) -> bool:
        """True if the file changed since the last check or mark_synced()."""
        now = time.monotonic()
        if now - self._last_check < self._poll_interval:
            return False
        self._last_check = now

        current = self._take_snapshot()
        if current == self._snapshot:
            return False

        if current is None:
            log.debug("Watched file disappeared: %s", self._path)
        else:
            log.debug("Watched file modified: %s", self._path)
        self._snapshot = current
        return True

    def mark_synced(self) -> None:
        """Re-baseline after our own write so it isn't reported as external."""
        self._snapshot = self._take_snapshot()
        self._last_check = time.monotonic()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _take_snapshot(self) -> Snapshot:
        try:
            st = self._path.stat()
        except OSError:
            return None
        return st.st_mtime_ns, st.st_size
