"""
zkattest.types
==============

Typed records shared across the package, defined with **msgspec**.

- `MerkleProof`: a transient inclusion claim (leaf, sibling path, leaf count,
  index). Supplied per call, never stored.
- `PostRequest` / `IncomingPostRequest`: the inbound cross-chain message shape
  delivered by the dispatcher (see `zkattest.ismp`).
- `RegistryEvent`: one entry of a registry's append-only event log.
- `RegistrySnapshot`: the persisted layout of a registry (id → root mapping,
  sequential flag, latest accepted id) with hex-encoded roots so the JSON form
  stays readable.

Conventions
-----------
- Digests are 32 raw bytes in memory; JSON uses msgspec's default base64 for
  `bytes` fields except in `RegistrySnapshot`, which keeps 0x-hex strings.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import msgspec

__all__ = [
    "MerkleProof",
    "PostRequest",
    "IncomingPostRequest",
    "RegistryEvent",
    "RegistrySnapshot",
]


class MerkleProof(msgspec.Struct, frozen=True):
    """
    Inclusion claim for one leaf.

    Fields:
        leaf: 32-byte leaf value (a statement hash).
        path: ordered sibling digests, bottom level first.
        leaf_count: number of leaves in the tree (>= 1).
        index: position of the leaf, in [0, leaf_count).
    """

    leaf: bytes
    path: List[bytes]
    leaf_count: int
    index: int


class PostRequest(msgspec.Struct, frozen=True):
    """Cross-chain POST request as delivered by the dispatcher."""

    source: bytes
    dest: bytes
    nonce: int
    from_: bytes = msgspec.field(name="from")
    to: bytes = b""
    timeout_timestamp: int = 0
    body: bytes = b""


class IncomingPostRequest(msgspec.Struct, frozen=True):
    """A `PostRequest` plus the relayer that carried it."""

    request: PostRequest
    relayer: bytes = b""


class RegistryEvent(msgspec.Struct, frozen=True):
    """
    Event log entry.

    Names in use: "AttestationPosted", "AggregationPosted",
    "SequentialEnforcementFlipped", "RoleGranted", "RoleRevoked",
    "RoleAdminChanged".
    """

    name: str
    fields: Dict[str, Any] = msgspec.field(default_factory=dict)


class RegistrySnapshot(msgspec.Struct, frozen=True):
    """Persisted registry state: roots by id (0x-hex), flag and latest id."""

    roots: Dict[int, str] = msgspec.field(default_factory=dict)
    enforce_sequential: bool = False
    latest_id: Optional[int] = None
    start_id: int = 1

    def to_json(self) -> bytes:
        return msgspec.json.encode(self)

    @classmethod
    def from_json(cls, data: bytes) -> "RegistrySnapshot":
        return msgspec.json.decode(data, type=cls)
