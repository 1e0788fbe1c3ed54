"""RPC messages exchanged between Raft servers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RPCHeader:
    """Information common to every RPC, such as the sender's protocol version.

    Messages from servers that predate versioning carry a zero-valued header.
    """

    protocol_version: int = 0


@dataclass
class AppendEntriesRequest:
    """Asks a follower to append entries to its replicated log."""

    header: RPCHeader = field(default_factory=RPCHeader)
    # Current term and leader.
    term: int = 0
    leader: bytes = b""
    # Previous entry, used for the integrity check.
    prev_log_entry: int = 0
    prev_log_term: int = 0
    # New entries to commit.
    entries: list[Any] = field(default_factory=list)
    # Commit index on the leader.
    leader_commit_index: int = 0


@dataclass
class AppendEntriesResponse:
    """The reply to an AppendEntriesRequest."""

    header: RPCHeader = field(default_factory=RPCHeader)
    # Newer term if the leader is out of date.
    term: int = 0
    # Hint that helps the leader catch up a slow follower.
    last_log: int = 0
    # False if there was a conflicting entry.
    success: bool = False
    # The request failed, but the next attempt need not back off.
    no_retry_backoff: bool = False


@dataclass
class RequestVoteRequest:
    """Sent by a candidate to ask a peer for its vote."""

    header: RPCHeader = field(default_factory=RPCHeader)
    term: int = 0
    candidate: bytes = b""
    # Used to ensure safety.
    last_log_index: int = 0
    last_log_term: int = 0
    # Set when the election was started by a leadership transfer; peers that
    # know of a leader would otherwise refuse their vote.
    leadership_transfer: bool = False


@dataclass
class RequestVoteResponse:
    """The reply to a RequestVoteRequest."""

    header: RPCHeader = field(default_factory=RPCHeader)
    # Newer term if the candidate is out of date.
    term: int = 0
    # Deprecated peer set, only populated for protocol version 0 servers.
    peers: bytes = b""
    granted: bool = False


@dataclass
class InstallSnapshotRequest:
    """Sent to a peer to bootstrap its log and state machine from a snapshot."""

    header: RPCHeader = field(default_factory=RPCHeader)
    snapshot_version: int = 0
    term: int = 0
    leader: bytes = b""
    # Last index and term included in the snapshot.
    last_log_index: int = 0
    last_log_term: int = 0
    # Deprecated peer set, kept for leaders running old code.
    peers: bytes = b""
    # Cluster membership and the log index where it was originally written.
    configuration: bytes = b""
    configuration_index: int = 0
    # Size of the snapshot in bytes.
    size: int = 0


@dataclass
class InstallSnapshotResponse:
    """The reply to an InstallSnapshotRequest."""

    header: RPCHeader = field(default_factory=RPCHeader)
    term: int = 0
    success: bool = False


@dataclass
class TimeoutNowRequest:
    """Sent by a leader to tell another server to start an election."""

    header: RPCHeader = field(default_factory=RPCHeader)


@dataclass
class TimeoutNowResponse:
    """The reply to a TimeoutNowRequest."""

    header: RPCHeader = field(default_factory=RPCHeader)