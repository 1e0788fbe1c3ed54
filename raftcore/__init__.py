"""Core data types for the Raft consensus protocol: membership, commitment, RPC messages and settings."""

__version__ = "0.1.0"
__all__ = ["commands", "commitment", "config", "configuration", "discard_snapshot"]