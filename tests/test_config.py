from dataclasses import replace

import pytest

from raftcore.config import (
    PROTOCOL_VERSION_MAX,
    Config,
    ConfigError,
    ReloadableConfig,
    default_config,
    validate_config,
)


def _valid() -> Config:
    return replace(default_config(), local_id="node1")


def test_default_config_values():
    cfg = default_config()
    assert cfg.protocol_version == PROTOCOL_VERSION_MAX
    assert cfg.max_append_entries == 64
    assert cfg.trailing_logs == 10240
    assert cfg.snapshot_threshold == 8192
    assert cfg.log_level == "DEBUG"
    assert cfg.shutdown_on_remove is True
    assert cfg.batch_apply_ch is False
    assert cfg.local_id == ""


def test_default_config_timing_invariants():
    cfg = default_config()
    assert cfg.leader_lease_timeout <= cfg.heartbeat_timeout
    assert cfg.election_timeout >= cfg.heartbeat_timeout
    assert cfg.commit_timeout < cfg.heartbeat_timeout
    assert cfg.snapshot_interval > cfg.heartbeat_timeout


def test_default_config_needs_local_id():
    with pytest.raises(ConfigError, match="LocalID cannot be empty"):
        validate_config(default_config())


def test_default_config_returns_fresh_instances():
    first = default_config()
    first.trailing_logs = 1
    assert default_config().trailing_logs == 10240


def test_valid_config_accepted_then_broken():
    cfg = _valid()
    assert validate_config(cfg) is None
    cfg.max_append_entries = 0
    with pytest.raises(ConfigError, match="must be positive"):
        validate_config(cfg)


@pytest.mark.parametrize(
    ("changes", "message"),
    [
        ({"protocol_version": 0}, "ProtocolVersion 0 must be >= 1 and <= 3"),
        ({"protocol_version": 4}, "ProtocolVersion 4 must be >= 1 and <= 3"),
        ({"heartbeat_timeout": 0.001}, "HeartbeatTimeout is too low"),
        ({"election_timeout": 0.001}, "ElectionTimeout is too low"),
        ({"commit_timeout": 0.0}, "CommitTimeout is too low"),
        ({"max_append_entries": -1}, "MaxAppendEntries must be positive"),
        ({"max_append_entries": 1025}, "MaxAppendEntries is too large"),
        ({"snapshot_interval": 0.001}, "SnapshotInterval is too low"),
        ({"leader_lease_timeout": 0.001}, "LeaderLeaseTimeout is too low"),
        (
            {"leader_lease_timeout": 2.0},
            "LeaderLeaseTimeout cannot be larger than heartbeat timeout",
        ),
        (
            {"election_timeout": 0.5},
            "ElectionTimeout must be equal or greater than Heartbeat Timeout",
        ),
    ],
)
def test_validate_config_errors(changes, message):
    cfg = replace(_valid(), **changes)
    with pytest.raises(ConfigError) as info:
        validate_config(cfg)
    assert str(info.value) == message


@pytest.mark.parametrize("version", [1, 2, 3])
def test_supported_protocol_versions(version):
    cfg = replace(_valid(), protocol_version=version)
    assert validate_config(cfg) is None
    assert cfg.protocol_version == version


def test_max_append_entries_upper_bound_inclusive():
    cfg = replace(_valid(), max_append_entries=1024)
    assert validate_config(cfg) is None
    cfg.max_append_entries += 1
    with pytest.raises(ConfigError, match="too large"):
        validate_config(cfg)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        validate_config(Config())


def test_reloadable_from_config():
    cfg = _valid()
    rc = ReloadableConfig.from_config(cfg)
    assert rc.trailing_logs == cfg.trailing_logs
    assert rc.snapshot_interval == cfg.snapshot_interval
    assert rc.snapshot_threshold == cfg.snapshot_threshold


def test_reloadable_apply_returns_copy():
    cfg = _valid()
    rc = ReloadableConfig(trailing_logs=10, snapshot_interval=2.5, snapshot_threshold=6)
    updated = rc.apply(cfg)
    assert updated.trailing_logs == 10
    assert updated.snapshot_interval == 2.5
    assert updated.snapshot_threshold == 6
    assert updated.local_id == cfg.local_id
    assert updated.max_append_entries == cfg.max_append_entries
    assert cfg.trailing_logs == 10240


def test_reloadable_apply_copies_zero_values():
    updated = ReloadableConfig().apply(_valid())
    assert updated.trailing_logs == 0
    assert updated.snapshot_threshold == 0
    with pytest.raises(ConfigError, match="SnapshotInterval is too low"):
        validate_config(updated)


def test_reloadable_round_trip():
    rc = ReloadableConfig(trailing_logs=7, snapshot_interval=3.0, snapshot_threshold=9)
    assert ReloadableConfig.from_config(rc.apply(_valid())) == rc