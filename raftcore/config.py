"""Settings for a Raft server and their validation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional, TextIO

# The range of protocol versions this server can understand. Version 0 is
# understood but can no longer be spoken.
PROTOCOL_VERSION_MIN = 0
PROTOCOL_VERSION_MAX = 3

# The range of snapshot versions this server can understand.
SNAPSHOT_VERSION_MIN = 0
SNAPSHOT_VERSION_MAX = 1

# Suggested upper bound for the data in a single log entry. Larger entries
# risk slow RPCs that delay heartbeats.
SUGGESTED_MAX_DATA_SIZE = 512 * 1024

_MILLISECOND = 0.001


class ConfigError(ValueError):
    """Raised when a Config holds values a Raft server cannot run with."""


@dataclass
class Config:
    """Settings for a Raft server. Durations are in seconds.

    Fields left at their defaults hold zero values; use ``default_config``
    for a usable starting point.
    """

    # Protocol version spoken to other servers.
    protocol_version: int = 0
    # Time as a follower without a leader before starting an election.
    heartbeat_timeout: float = 0.0
    # Time as a candidate without a leader before starting an election.
    election_timeout: float = 0.0
    # Time without an apply before heartbeating to ensure a timely commit.
    commit_timeout: float = 0.0
    # Maximum number of entries sent in one append.
    max_append_entries: int = 0
    # Buffer applies up to max_append_entries; enables batching but weakens
    # the apply timeout guarantee.
    batch_apply_ch: bool = False
    # Shut down when this server is removed from the cluster.
    shutdown_on_remove: bool = False
    # Number of log entries kept after a snapshot.
    trailing_logs: int = 0
    # How often to check whether a snapshot is due, staggered up to twice this.
    snapshot_interval: float = 0.0
    # Number of outstanding entries required before taking a snapshot.
    snapshot_threshold: int = 0
    # How long a leader stays leader without contact with a quorum.
    leader_lease_timeout: float = 0.0
    # Unique identifier of this server for all time.
    local_id: str = ""
    # Notified of leadership changes.
    notify_ch: Any = None
    # Where log output goes unless a logger is given.
    log_output: Optional[TextIO] = None
    # Name of the log level.
    log_level: str = ""
    # A logger supplied by the application.
    logger: Any = None
    # Skip restoring the latest snapshot into the state machine on start.
    no_snapshot_restore_on_start: bool = False
    # Construct the server without starting its background work.
    skip_startup: bool = False


@dataclass(frozen=True)
class ReloadableConfig:
    """The part of Config that may be changed while the server runs."""

    trailing_logs: int = 0
    snapshot_interval: float = 0.0
    snapshot_threshold: int = 0

    def apply(self, to: Config) -> Config:
        """Return a copy of ``to`` with the reloadable fields taken from this one."""
        return replace(
            to,
            trailing_logs=self.trailing_logs,
            snapshot_interval=self.snapshot_interval,
            snapshot_threshold=self.snapshot_threshold,
        )

    @classmethod
    def from_config(cls, config: Config) -> ReloadableConfig:
        """Return the reloadable fields of ``config``."""
        return cls(
            trailing_logs=config.trailing_logs,
            snapshot_interval=config.snapshot_interval,
            snapshot_threshold=config.snapshot_threshold,
        )


def default_config() -> Config:
    """Return a Config with usable defaults; ``local_id`` must still be set."""
    return Config(
        protocol_version=PROTOCOL_VERSION_MAX,
        heartbeat_timeout=1000 * _MILLISECOND,
        election_timeout=1000 * _MILLISECOND,
        commit_timeout=50 * _MILLISECOND,
        max_append_entries=64,
        shutdown_on_remove=True,
        trailing_logs=10240,
        snapshot_interval=120.0,
        snapshot_threshold=8192,
        leader_lease_timeout=500 * _MILLISECOND,
        log_level="DEBUG",
    )


def validate_config(config: Config) -> None:
    """Raise ConfigError if ``config`` is not a sane configuration."""
    # Version 0 is understood but no longer supported for running.
    protocol_min = PROTOCOL_VERSION_MIN or 1
    if not protocol_min <= config.protocol_version <= PROTOCOL_VERSION_MAX:
        raise ConfigError(
            f"ProtocolVersion {config.protocol_version} must be >= {protocol_min} "
            f"and <= {PROTOCOL_VERSION_MAX}"
        )
    if not config.local_id:
        raise ConfigError("LocalID cannot be empty")
    if config.heartbeat_timeout < 5 * _MILLISECOND:
        raise ConfigError("HeartbeatTimeout is too low")
    if config.election_timeout < 5 * _MILLISECOND:
        raise ConfigError("ElectionTimeout is too low")
    if config.commit_timeout < _MILLISECOND:
        raise ConfigError("CommitTimeout is too low")
    if config.max_append_entries <= 0:
        raise ConfigError("MaxAppendEntries must be positive")
    if config.max_append_entries > 1024:
        raise ConfigError("MaxAppendEntries is too large")
    if config.snapshot_interval < 5 * _MILLISECOND:
        raise ConfigError("SnapshotInterval is too low")
    if config.leader_lease_timeout < 5 * _MILLISECOND:
        raise ConfigError("LeaderLeaseTimeout is too low")
    if config.leader_lease_timeout > config.heartbeat_timeout:
        raise ConfigError("LeaderLeaseTimeout cannot be larger than heartbeat timeout")
    if config.election_timeout < config.heartbeat_timeout:
        raise ConfigError(
            "ElectionTimeout must be equal or greater than Heartbeat Timeout"
        )