"""Tracking of the leader's commit index from the match indexes of voters."""

from __future__ import annotations

import threading

from raftcore.configuration import Configuration, ServerSuffrage


def _voter_ids(configuration: Configuration) -> list[str]:
    return [
        server.id
        for server in configuration.servers
        if server.suffrage == ServerSuffrage.VOTER
    ]


class Commitment:
    """Advances the leader's commit index as servers report what they have stored.

    A new instance is created each time a server becomes leader for a term.
    ``commit_event`` is set whenever the commit index advances. No entry is
    considered committed until ``start_index``, the first index of the
    leader's term, has been replicated to a quorum.
    """

    def __init__(
        self,
        commit_event: threading.Event,
        configuration: Configuration,
        start_index: int,
    ) -> None:
        self._lock = threading.Lock()
        self._commit_event = commit_event
        self._match_indexes: dict[str, int] = dict.fromkeys(
            _voter_ids(configuration), 0
        )
        self._commit_index = 0
        self._start_index = start_index

    def set_configuration(self, configuration: Configuration) -> None:
        """Use a new cluster membership from now on, keeping known match indexes."""
        with self._lock:
            old = self._match_indexes
            self._match_indexes = {
                server_id: old.get(server_id, 0)
                for server_id in _voter_ids(configuration)
            }
            self._recalculate()

    def commit_index(self) -> int:
        """Return the highest index stored by a quorum."""
        with self._lock:
            return self._commit_index

    def match(self, server: str, match_index: int) -> None:
        """Record that ``server`` agrees with this log up through ``match_index``.

        Reports from non-voters and reports lower than before are ignored.
        """
        with self._lock:
            previous = self._match_indexes.get(server)
            if previous is not None and match_index > previous:
                self._match_indexes[server] = match_index
                self._recalculate()

    def _recalculate(self) -> None:
        if not self._match_indexes:
            return
        matched = sorted(self._match_indexes.values())
        quorum_match_index = matched[(len(matched) - 1) // 2]
        if (
            quorum_match_index > self._commit_index
            and quorum_match_index >= self._start_index
        ):
            self._commit_index = quorum_match_index
            self._commit_event.set()