"""A snapshot store that accepts snapshots and throws them away.

Useful when the log should be truncated but no snapshot retained; meant for
testing only.
"""

from __future__ import annotations

import io
from typing import Any

from raftcore.configuration import Configuration


class DiscardSnapshotSink:
    """A snapshot sink that discards everything written to it."""

    def __init__(self) -> None:
        self._discarded = 0
        self._closed = False
        self._cancelled = False

    @property
    def discarded(self) -> int:
        """Number of bytes written to and dropped by this sink."""
        return self._discarded

    @property
    def closed(self) -> bool:
        """Whether the snapshot has been finished."""
        return self._closed

    @property
    def cancelled(self) -> bool:
        """Whether the snapshot has been abandoned."""
        return self._cancelled

    def write(self, data: bytes) -> int:
        """Accept and drop ``data``, reporting it as fully written."""
        size = len(data)
        self._discarded += size
        return size

    def close(self) -> None:
        """Mark the snapshot as finished; nothing is kept."""
        self._closed = True

    def id(self) -> str:
        """Return the identifier of this sink."""
        return "discard"

    def cancel(self) -> None:
        """Mark the snapshot as abandoned; nothing needs cleaning up."""
        self._cancelled = True
        self._closed = True

    def __enter__(self) -> DiscardSnapshotSink:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self.cancel()


class DiscardSnapshotStore:
    """A snapshot store that never retains a snapshot."""

    def create(
        self,
        version: int,
        index: int,
        term: int,
        configuration: Configuration,
        configuration_index: int,
        trans: Any,
    ) -> DiscardSnapshotSink:
        """Return a sink that discards the snapshot."""
        return DiscardSnapshotSink()

    def list(self) -> list:
        """Return the stored snapshots, of which there are never any."""
        return []

    def open(self, snapshot_id: str):
        """Refuse to open a snapshot, since none are kept."""
        if not isinstance(snapshot_id, str):
            raise TypeError(
                f"snapshot id must be a string, not {type(snapshot_id).__name__}"
            )
        raise io.UnsupportedOperation("open is not supported")