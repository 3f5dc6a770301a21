"""
zkattest.merkle
===============

Binary Merkle inclusion over a variable-size (not necessarily power-of-two)
leaf set, plus the reference tree construction that produces the roots.

Tree shape
----------
- Level 0 holds one node per leaf: ``node = keccak256(leaf)``.
- Each higher level pairs nodes left to right: ``parent = keccak256(left || right)``.
- When a level has an odd number of nodes, the last node is **promoted**
  unchanged to the next level (it is neither hashed nor duplicated).
- The root is the single node of the top level. A one-leaf tree's root is
  therefore ``keccak256(leaf)``.

Because of promotion, a proof's length depends on where the index falls
relative to the odd-sized levels: in a 7-leaf tree indices 0..5 carry three
siblings while index 6 carries two.

API
---
Verification:
    - verify_inclusion(root, leaf, path, leaf_count, index) -> bool
    - compute_root(leaf, path, leaf_count, index) -> bytes | None

Reference construction (tooling & differential tests):
    - leaf_node(leaf) -> bytes
    - build_tree(leaves) -> list[list[bytes]]
    - merkle_root(leaves) -> bytes
    - merkle_proof(leaves, index) -> MerkleProof
    - proof_length(leaf_count, index) -> int

Errors
------
``index >= leaf_count`` (or ``leaf_count < 1``) raises `IndexOutOfBounds`:
that is a malformed request, not a failed proof. Every other mismatch
(wrong leaf, wrong siblings, short or over-long path) returns False.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from zkattest.errors import IndexOutOfBounds, InvalidInput
from zkattest.hashing import keccak256, keccak256_concat, to_bytes32
from zkattest.types import MerkleProof

Digest = Union[bytes, str]


# -----------------------------------------------------------------------------
# Node helpers
# -----------------------------------------------------------------------------


def leaf_node(leaf: Digest) -> bytes:
    """Level-0 node for a 32-byte leaf."""
    return keccak256(to_bytes32(leaf))


def _combine(left: bytes, right: bytes) -> bytes:
    return keccak256_concat((left, right))


def _check_bounds(leaf_count: int, index: int) -> None:
    if leaf_count < 1 or index < 0 or index >= leaf_count:
        raise IndexOutOfBounds(ctx={"index": index, "leaf_count": leaf_count})


def _coerce_sibling(sib: Digest) -> Optional[bytes]:
    if isinstance(sib, (bytes, bytearray, memoryview)):
        sib = bytes(sib)
        return sib if len(sib) == 32 else None
    if not isinstance(sib, str):
        return None
    try:
        return to_bytes32(sib)
    except InvalidInput:
        return None


# -----------------------------------------------------------------------------
# Verification
# -----------------------------------------------------------------------------


def compute_root(
    leaf: Digest,
    path: Sequence[Digest],
    leaf_count: int,
    index: int,
) -> Optional[bytes]:
    """
    Walk from `leaf` up to the root using `path`.

    Returns the reconstructed root, or None when the path cannot describe a
    tree of `leaf_count` leaves (too short, too long, or a bad sibling).
    Raises IndexOutOfBounds when `index` does not address a leaf.
    """
    leaf_count = int(leaf_count)
    index = int(index)
    _check_bounds(leaf_count, index)

    node = leaf_node(leaf)
    position = index
    width = leaf_count
    consumed = 0

    while width > 1:
        if position == width - 1 and width % 2 == 1:
            # odd tail: promoted without consuming a sibling
            pass
        else:
            if consumed >= len(path):
                return None
            sib = _coerce_sibling(path[consumed])
            if sib is None:
                return None
            consumed += 1
            if position % 2 == 1:
                node = _combine(sib, node)
            else:
                node = _combine(node, sib)
        position >>= 1
        width = (width + 1) >> 1

    if consumed != len(path):
        return None
    return node


def verify_inclusion(
    root: Digest,
    leaf: Digest,
    path: Sequence[Digest],
    leaf_count: int,
    index: int,
) -> bool:
    """
    True iff `leaf` sits at `index` of a `leaf_count`-leaf tree whose root is `root`.

    For ``leaf_count == 1`` the path must be empty and the leaf's node must
    equal the root; no pair hashing takes place.
    """
    computed = compute_root(leaf, path, leaf_count, index)
    if computed is None:
        return False
    return computed == to_bytes32(root)


# -----------------------------------------------------------------------------
# Reference construction
# -----------------------------------------------------------------------------


def build_tree(leaves: Sequence[Digest]) -> List[List[bytes]]:
    """
    Build every level: [level0 nodes, level1, ..., [root]].
    An empty leaf set has no tree.
    """
    if not leaves:
        raise ValueError("cannot build a tree without leaves")
    levels: List[List[bytes]] = [[leaf_node(leaf) for leaf in leaves]]
    while len(levels[-1]) > 1:
        cur = levels[-1]
        nxt: List[bytes] = []
        for i in range(0, len(cur) - 1, 2):
            nxt.append(_combine(cur[i], cur[i + 1]))
        if len(cur) % 2 == 1:
            nxt.append(cur[-1])
        levels.append(nxt)
    return levels


def merkle_root(leaves: Sequence[Digest]) -> bytes:
    """Root of the tree over `leaves`."""
    return build_tree(leaves)[-1][0]


def merkle_proof(leaves: Sequence[Digest], index: int) -> MerkleProof:
    """Sibling path for `leaves[index]`, matching `verify_inclusion`."""
    _check_bounds(len(leaves), index)
    levels = build_tree(leaves)
    path: List[bytes] = []
    position = index
    for level in levels[:-1]:
        sibling = position ^ 1
        if sibling < len(level):
            path.append(level[sibling])
        position >>= 1
    return MerkleProof(
        leaf=to_bytes32(leaves[index]),
        path=path,
        leaf_count=len(leaves),
        index=index,
    )


def proof_length(leaf_count: int, index: int) -> int:
    """Number of siblings a valid proof for (`leaf_count`, `index`) carries."""
    _check_bounds(leaf_count, index)
    n = 0
    position, width = index, leaf_count
    while width > 1:
        if not (position == width - 1 and width % 2 == 1):
            n += 1
        position >>= 1
        width = (width + 1) >> 1
    return n


__all__ = [
    "leaf_node",
    "compute_root",
    "verify_inclusion",
    "build_tree",
    "merkle_root",
    "merkle_proof",
    "proof_length",
]
