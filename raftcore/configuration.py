"""Cluster membership: servers, configurations and membership changes."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Optional, Protocol

import msgpack


class ConfigurationError(ValueError):
    """Raised when a configuration is invalid or cannot be changed or decoded."""


class ServerSuffrage(IntEnum):
    """Whether a server in a configuration gets a vote.

    The numbers are written into the log and must not change.
    """

    VOTER = 0
    NONVOTER = 1
    STAGING = 2

    def __str__(self) -> str:
        return _SUFFRAGE_NAMES[self]


_SUFFRAGE_NAMES = {
    ServerSuffrage.VOTER: "Voter",
    ServerSuffrage.NONVOTER: "Nonvoter",
    ServerSuffrage.STAGING: "Staging",
}


@dataclass
class Server:
    """A single server in a configuration."""

    suffrage: ServerSuffrage
    id: str
    address: str

    def __str__(self) -> str:
        return f"{{{self.suffrage} {self.id} {self.address}}}"


@dataclass
class Configuration:
    """The servers in the cluster; each server should appear only once."""

    servers: list[Server] = field(default_factory=list)

    def clone(self) -> Configuration:
        """Return a deep copy that shares no servers with this one."""
        return Configuration([replace(server) for server in self.servers])

    def __str__(self) -> str:
        return "{[" + " ".join(str(server) for server in self.servers) + "]}"


class ConfigurationChangeCommand(IntEnum):
    """The ways a cluster configuration can be changed."""

    ADD_STAGING = 0
    ADD_NONVOTER = 1
    DEMOTE_VOTER = 2
    REMOVE_SERVER = 3
    PROMOTE = 4

    def __str__(self) -> str:
        return _COMMAND_NAMES[self]


_COMMAND_NAMES = {
    ConfigurationChangeCommand.ADD_STAGING: "AddStaging",
    ConfigurationChangeCommand.ADD_NONVOTER: "AddNonvoter",
    ConfigurationChangeCommand.DEMOTE_VOTER: "DemoteVoter",
    ConfigurationChangeCommand.REMOVE_SERVER: "RemoveServer",
    ConfigurationChangeCommand.PROMOTE: "Promote",
}


@dataclass(frozen=True)
class ConfigurationChangeRequest:
    """A change a leader would like to make to its current configuration.

    ``prev_index``, if nonzero, is the index of the only configuration upon
    which this change may be applied.
    """

    command: ConfigurationChangeCommand
    server_id: str
    server_address: str = ""
    prev_index: int = 0


@dataclass
class Configurations:
    """The latest and the latest committed configuration with their log indexes."""

    committed: Configuration = field(default_factory=Configuration)
    committed_index: int = 0
    latest: Configuration = field(default_factory=Configuration)
    latest_index: int = 0

    def clone(self) -> Configurations:
        """Return a deep copy."""
        return Configurations(
            committed=self.committed.clone(),
            committed_index=self.committed_index,
            latest=self.latest.clone(),
            latest_index=self.latest_index,
        )


class PeerCodec(Protocol):
    """The part of a transport that encodes peers in the legacy format."""

    def encode_peer(self, server_id: str, address: str) -> bytes: ...

    def decode_peer(self, buf: bytes) -> str: ...


def has_vote(configuration: Configuration, server_id: str) -> bool:
    """Return True if the server with ``server_id`` is a voter in ``configuration``."""
    server = _find(configuration, server_id)
    return server is not None and configuration.servers[server].suffrage == ServerSuffrage.VOTER


def check_configuration(configuration: Configuration) -> None:
    """Raise ConfigurationError if the configuration has a common mistake."""
    ids: set[str] = set()
    addresses: set[str] = set()
    voters = 0
    for server in configuration.servers:
        if not server.id:
            raise ConfigurationError(f"empty ID in configuration: {configuration}")
        if not server.address:
            raise ConfigurationError(f"empty address in configuration: {server}")
        if server.id in ids:
            raise ConfigurationError(f"found duplicate ID in configuration: {server.id}")
        ids.add(server.id)
        if server.address in addresses:
            raise ConfigurationError(
                f"found duplicate address in configuration: {server.address}"
            )
        addresses.add(server.address)
        if server.suffrage == ServerSuffrage.VOTER:
            voters += 1
    if voters == 0:
        raise ConfigurationError(f"need at least one voter in configuration: {configuration}")


def _find(configuration: Configuration, server_id: str) -> Optional[int]:
    return next(
        (i for i, server in enumerate(configuration.servers) if server.id == server_id),
        None,
    )


def next_configuration(
    current: Configuration,
    current_index: int,
    change: ConfigurationChangeRequest,
) -> Configuration:
    """Return the configuration that results from applying ``change`` to ``current``."""
    if change.prev_index > 0 and change.prev_index != current_index:
        raise ConfigurationError(
            f"configuration changed since {change.prev_index} (latest is {current_index})"
        )

    configuration = current.clone()
    servers = configuration.servers
    position = _find(configuration, change.server_id)
    command = change.command

    if command == ConfigurationChangeCommand.ADD_STAGING:
        # Promotion of staging servers is not driven automatically, so the
        # server is given a vote right away.
        new_server = Server(ServerSuffrage.VOTER, change.server_id, change.server_address)
        if position is None:
            servers.append(new_server)
        elif servers[position].suffrage == ServerSuffrage.VOTER:
            servers[position].address = change.server_address
        else:
            servers[position] = new_server
    elif command == ConfigurationChangeCommand.ADD_NONVOTER:
        new_server = Server(ServerSuffrage.NONVOTER, change.server_id, change.server_address)
        if position is None:
            servers.append(new_server)
        elif servers[position].suffrage != ServerSuffrage.NONVOTER:
            servers[position].address = change.server_address
        else:
            servers[position] = new_server
    elif command == ConfigurationChangeCommand.DEMOTE_VOTER:
        if position is not None:
            servers[position].suffrage = ServerSuffrage.NONVOTER
    elif command == ConfigurationChangeCommand.REMOVE_SERVER:
        if position is not None:
            del servers[position]
    elif command == ConfigurationChangeCommand.PROMOTE:
        if position is not None and servers[position].suffrage == ServerSuffrage.STAGING:
            servers[position].suffrage = ServerSuffrage.VOTER

    # Make sure nothing bad happened, such as removing the last voter.
    check_configuration(configuration)
    return configuration


def encode_peers(configuration: Configuration, trans: PeerCodec) -> bytes:
    """Serialize the voters of a configuration into the legacy peers format."""
    peers = [
        trans.encode_peer(server.id, server.address)
        for server in configuration.servers
        if server.suffrage == ServerSuffrage.VOTER
    ]
    return msgpack.packb(peers, use_bin_type=True)


def decode_peers(buf: bytes, trans: PeerCodec) -> Configuration:
    """Deserialize a legacy peers list into a configuration of voters."""
    try:
        peers = msgpack.unpackb(buf, raw=True)
    except (ValueError, msgpack.UnpackException) as exc:
        raise ConfigurationError(f"failed to decode peers: {exc}") from exc
    if peers is None:
        peers = []
    if not isinstance(peers, list) or not all(isinstance(p, bytes) for p in peers):
        raise ConfigurationError("failed to decode peers: expected a list of byte strings")

    servers = []
    for encoded in peers:
        address = trans.decode_peer(encoded)
        servers.append(Server(ServerSuffrage.VOTER, address, address))
    return Configuration(servers)


def encode_configuration(configuration: Configuration) -> bytes:
    """Serialize a configuration with MessagePack."""
    document = {
        "Servers": [
            {"Suffrage": int(s.suffrage), "ID": s.id, "Address": s.address}
            for s in configuration.servers
        ]
    }
    return msgpack.packb(document, use_bin_type=True)


def decode_configuration(buf: bytes) -> Configuration:
    """Deserialize a configuration written by ``encode_configuration``."""
    try:
        document = msgpack.unpackb(buf, raw=False)
        entries = document["Servers"] or []
        servers = [
            Server(ServerSuffrage(entry["Suffrage"]), str(entry["ID"]), str(entry["Address"]))
            for entry in entries
        ]
    except (ValueError, TypeError, KeyError, msgpack.UnpackException) as exc:
        raise ConfigurationError(f"failed to decode configuration: {exc}") from exc
    return Configuration(servers)