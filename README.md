# raftcore

Building blocks for a Raft consensus implementation:

- **Cluster membership** (`raftcore.configuration`): `Server`, `Configuration`,
  `Configurations`, `ServerSuffrage`, `ConfigurationChangeCommand` and
  `ConfigurationChangeRequest`, with `has_vote`, `check_configuration`,
  `next_configuration`, and MessagePack encoding through
  `encode_configuration` / `decode_configuration` and the legacy peers format
  through `encode_peers` / `decode_peers`.
- **Commitment tracking** (`raftcore.commitment`): `Commitment` advances a
  leader's commit index once a quorum of voters has stored an entry.
- **RPC messages** (`raftcore.commands`): dataclasses for the AppendEntries,
  RequestVote, InstallSnapshot and TimeoutNow requests and responses, each
  carrying an `RPCHeader`.
- **Server settings** (`raftcore.config`): `Config`, `ReloadableConfig`,
  `default_config()` and `validate_config()`, plus the protocol and snapshot
  version ranges.
- **Discarding snapshot store** (`raftcore.discard_snapshot`):
  `DiscardSnapshotStore` and `DiscardSnapshotSink`, for tests that need a
  snapshot store which keeps nothing.

## Installation

```
pip install raftcore
```

## Membership changes

```python
from raftcore.configuration import (
    Configuration,
    ConfigurationChangeCommand,
    ConfigurationChangeRequest,
    Server,
    ServerSuffrage,
    next_configuration,
)

current = Configuration([Server(ServerSuffrage.VOTER, "id1", "addr1")])
change = ConfigurationChangeRequest(
    command=ConfigurationChangeCommand.ADD_NONVOTER,
    server_id="id2",
    server_address="addr2",
)
updated = next_configuration(current, 1, change)
print(updated)  # {[{Voter id1 addr1} {Nonvoter id2 addr2}]}
```

`next_configuration` never changes `current`; it works on a copy. It raises
`ConfigurationError` when the request's nonzero `prev_index` differs from the
current index, or when the result would have no voter, an empty ID or address,
a duplicate ID or a duplicate address. `ADD_STAGING` gives the server a vote
straight away.

`encode_configuration` and `decode_configuration` turn a configuration into
MessagePack bytes and back; bytes that cannot be decoded raise
`ConfigurationError`. `encode_peers` and `decode_peers` take any object with
`encode_peer(server_id, address)` and `decode_peer(buf)` methods.

## Tracking commitment

```python
import threading
from raftcore.commitment import Commitment

notify = threading.Event()
commitment = Commitment(notify, current, start_index=0)
commitment.match("id1", 5)
assert commitment.commit_index() == 5
assert notify.is_set()
```

Only voters count. Reports from unknown servers and reports lower than a
server's previous one are ignored, and nothing is committed until the start
index has reached a quorum. `set_configuration` switches to a new membership
while keeping the match indexes of servers that remain.

## Validating settings

```python
from raftcore.config import ReloadableConfig, default_config, validate_config

config = default_config()
config.local_id = "id1"
validate_config(config)  # raises ConfigError if a setting is out of range

reloaded = ReloadableConfig(trailing_logs=100, snapshot_interval=60.0,
                            snapshot_threshold=1000).apply(config)
```

Durations in `Config` are in seconds.

## The discarding snapshot store

`DiscardSnapshotStore.create` returns a `DiscardSnapshotSink` that accepts
writes and drops them, `list` always returns an empty list, and `open` raises
`io.UnsupportedOperation`. The sink can be used as a context manager: it is
closed on a clean exit and cancelled when an exception escapes.

## What this package does not do

It provides data types and the pure logic around them, not a running Raft
node. There is no election or replication loop, no network transport, no log
or stable storage, no snapshot store that keeps data, and no command-line
tool. The RPC message classes are plain data; nothing here sends or serializes
them.

## Running the tests

```
pip install -e ".[test]"
pytest
```