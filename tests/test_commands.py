import pytest

from raftcore.commands import (
    AppendEntriesRequest,
    AppendEntriesResponse,
    InstallSnapshotRequest,
    InstallSnapshotResponse,
    RequestVoteRequest,
    RequestVoteResponse,
    RPCHeader,
    TimeoutNowRequest,
    TimeoutNowResponse,
)

ALL_MESSAGES = [
    AppendEntriesRequest,
    AppendEntriesResponse,
    RequestVoteRequest,
    RequestVoteResponse,
    InstallSnapshotRequest,
    InstallSnapshotResponse,
    TimeoutNowRequest,
    TimeoutNowResponse,
]


@pytest.mark.parametrize("message_type", ALL_MESSAGES)
def test_default_header_is_zero_valued(message_type):
    message = message_type()
    assert message.header == RPCHeader()
    assert message.header.protocol_version == 0


@pytest.mark.parametrize("message_type", ALL_MESSAGES)
def test_header_is_carried(message_type):
    message = message_type(header=RPCHeader(protocol_version=3))
    assert message.header.protocol_version == 3


@pytest.mark.parametrize("message_type", ALL_MESSAGES)
def test_default_headers_are_not_shared(message_type):
    first = message_type()
    second = message_type()
    first.header.protocol_version = 2
    assert first.header == RPCHeader(protocol_version=2)
    assert second.header == RPCHeader(protocol_version=0)


def test_append_entries_entries_not_shared():
    first = AppendEntriesRequest()
    second = AppendEntriesRequest()
    first.entries.append("entry")
    assert second.entries == []
    assert first.entries == ["entry"]


def test_append_entries_request_fields():
    request = AppendEntriesRequest(
        term=5,
        leader=b"leader",
        prev_log_entry=9,
        prev_log_term=4,
        entries=["a", "b"],
        leader_commit_index=8,
    )
    assert request.term == 5
    assert request.leader == b"leader"
    assert request.prev_log_entry == 9
    assert request.prev_log_term == 4
    assert request.entries == ["a", "b"]
    assert request.leader_commit_index == 8


def test_append_entries_response_defaults_to_failure():
    response = AppendEntriesResponse(term=3, last_log=7)
    assert response.success is False
    assert response.no_retry_backoff is False
    assert response.last_log == 7


def test_request_vote_equality():
    one = RequestVoteRequest(term=2, candidate=b"c", last_log_index=4, last_log_term=1)
    two = RequestVoteRequest(term=2, candidate=b"c", last_log_index=4, last_log_term=1)
    three = RequestVoteRequest(
        term=2, candidate=b"c", last_log_index=4, last_log_term=1, leadership_transfer=True
    )
    assert one == two
    assert not (one == three)


def test_request_vote_response_fields():
    response = RequestVoteResponse(term=6, granted=True)
    assert response.granted is True
    assert response.peers == b""
    assert response.term == 6


def test_install_snapshot_request_fields():
    request = InstallSnapshotRequest(
        snapshot_version=1,
        term=4,
        leader=b"l",
        last_log_index=100,
        last_log_term=3,
        configuration=b"conf",
        configuration_index=50,
        size=2048,
    )
    assert request.snapshot_version == 1
    assert request.last_log_index == 100
    assert request.configuration == b"conf"
    assert request.configuration_index == 50
    assert request.size == 2048
    assert request.peers == b""


def test_install_snapshot_response_fields():
    response = InstallSnapshotResponse(term=9, success=True)
    assert response.term == 9
    assert response.success is True