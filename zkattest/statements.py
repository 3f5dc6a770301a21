"""
zkattest.statements
===================

Statement hash adapters: turn proof-system-specific public data into the
32-byte leaf that is checked against a registered aggregation root.

Combination rule
----------------
All three proof systems share one shape and stay namespace-distinct through
their proving-system tag::

    leaf = keccak256(PROVING_SYSTEM_ID || vk || VERSION_HASH || keccak256(pubs))

where ``PROVING_SYSTEM_ID = keccak256(<system name>)``.

The word systems carry no version segment, so for them the rule reduces to
``keccak256(PROVING_SYSTEM_ID || vk || keccak256(pubs))``.

+-------------+----------------------------------------+----------------------------+
| system      | pubs                                   | VERSION_HASH               |
+=============+========================================+============================+
| groth16     | each input as a 32-byte word, reversed | (none)                     |
| ultraplonk  | each input as a 32-byte big-endian word| (none)                     |
| risc0       | journal bytes, unchanged               | sha256(<version tag>)      |
+-------------+----------------------------------------+----------------------------+

Groth16 public inputs are field elements serialized little-endian by the
prover, hence the per-word byte reversal. RISC Zero versions ("risc0:v1.0",
"risc0:v1.1", "risc0:v1.2") are not interchangeable: the same image id and
journal give a different leaf under each tag.

Usage
-----
>>> from zkattest.statements import hasher_for, ProvingSystem
>>> h = hasher_for(ProvingSystem.GROTH16)
>>> leaf = h.statement_hash(vk_hash, ["42", "24"])
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Final, Mapping, Optional, Sequence, Union

from zkattest.errors import InvalidInput, UnsupportedVersion
from zkattest.hashing import (
    WordLike,
    from_hex,
    keccak256,
    keccak256_concat,
    sha256,
    to_bytes32,
    to_uint256,
    u256_be,
)

Journal = Union[bytes, bytearray, str]
Digest = Union[bytes, str]


class ProvingSystem(str, Enum):
    """Proof systems with a statement hash adapter."""

    GROTH16 = "groth16"
    ULTRAPLONK = "ultraplonk"
    RISC0 = "risc0"


NO_VERSION_HASH: Final[bytes] = b""


def proving_system_id(system: ProvingSystem) -> bytes:
    """keccak256 of the system name, e.g. keccak256(b"groth16")."""
    return keccak256(system.value.encode("ascii"))


# -----------------------------------------------------------------------------
# Interface
# -----------------------------------------------------------------------------


class StatementHasher(ABC):
    """
    One proof system's canonicalization.

    Subclasses fix `system` and implement `encode_public_inputs` plus
    `version_hash`; the combination rule lives here so it cannot drift
    between systems.
    """

    system: ProvingSystem

    @property
    def proving_system_id(self) -> bytes:
        return proving_system_id(self.system)

    @abstractmethod
    def encode_public_inputs(self, inputs) -> bytes:
        """Canonical public-input bytes (the `pubs` of the combination rule)."""

    @abstractmethod
    def version_hash(self, version: Optional[str]) -> bytes:
        """Version segment for `version`; empty for unversioned systems."""

    def combine(self, vk: Digest, version_hash: bytes, pubs: bytes) -> bytes:
        return keccak256_concat(
            (self.proving_system_id, to_bytes32(vk), version_hash, keccak256(pubs))
        )


# -----------------------------------------------------------------------------
# Word-oriented systems (Groth16, UltraPlonk)
# -----------------------------------------------------------------------------


class _WordStatement(StatementHasher):
    reverse_words: bool = False

    def encode_public_inputs(self, inputs: Sequence[WordLike]) -> bytes:
        if isinstance(inputs, (str, bytes, bytearray)):
            raise InvalidInput("public inputs must be a sequence of words")
        out = bytearray()
        for value in inputs:
            word = u256_be(to_uint256(value))
            out += word[::-1] if self.reverse_words else word
        return bytes(out)

    def version_hash(self, version: Optional[str] = None) -> bytes:
        if version not in (None, ""):
            raise UnsupportedVersion(
                f"{self.system.value} statements are not versioned",
                ctx={"version": version},
            )
        return NO_VERSION_HASH

    def statement_hash(self, vk_hash: Digest, inputs: Sequence[WordLike]) -> bytes:
        return self.combine(vk_hash, NO_VERSION_HASH, self.encode_public_inputs(inputs))


class Groth16Statement(_WordStatement):
    """Groth16: 32-byte words with their byte order reversed."""

    system = ProvingSystem.GROTH16
    reverse_words = True


class UltraplonkStatement(_WordStatement):
    """UltraPlonk: 32-byte big-endian words, concatenated as-is."""

    system = ProvingSystem.ULTRAPLONK
    reverse_words = False


# -----------------------------------------------------------------------------
# RISC Zero
# -----------------------------------------------------------------------------

RISC0_VERSIONS: Final[tuple[str, ...]] = ("risc0:v1.0", "risc0:v1.1", "risc0:v1.2")


class Risc0Statement(StatementHasher):
    """RISC Zero: journal bytes under a version-selected version hash."""

    system = ProvingSystem.RISC0

    def __init__(self, versions: Sequence[str] = RISC0_VERSIONS) -> None:
        self._version_hashes: Dict[str, bytes] = {
            v: sha256(v.encode("ascii")) for v in versions
        }

    @property
    def versions(self) -> tuple[str, ...]:
        return tuple(self._version_hashes)

    def encode_public_inputs(self, journal: Journal) -> bytes:
        if isinstance(journal, str):
            return from_hex(journal)
        if isinstance(journal, (bytes, bytearray)):
            return bytes(journal)
        raise InvalidInput("journal must be bytes or a hex string")

    def version_hash(self, version: Optional[str]) -> bytes:
        try:
            return self._version_hashes[str(version)]
        except KeyError:
            raise UnsupportedVersion(
                f"unknown RISC Zero version {version!r}",
                ctx={"supported": list(self._version_hashes)},
            ) from None

    def statement_hash(self, vk: Digest, version: str, journal: Journal) -> bytes:
        return self.combine(vk, self.version_hash(version), self.encode_public_inputs(journal))


# -----------------------------------------------------------------------------
# Lookup
# -----------------------------------------------------------------------------

_HASHERS: Final[Mapping[ProvingSystem, StatementHasher]] = {
    ProvingSystem.GROTH16: Groth16Statement(),
    ProvingSystem.ULTRAPLONK: UltraplonkStatement(),
    ProvingSystem.RISC0: Risc0Statement(),
}


def normalize_system(name: Union[str, ProvingSystem]) -> ProvingSystem:
    """Accept common aliases and return the canonical `ProvingSystem`."""
    if isinstance(name, ProvingSystem):
        return name
    key = str(name).strip().lower().replace("-", "_")
    if key in ("groth16", "g16"):
        return ProvingSystem.GROTH16
    if key in ("ultraplonk", "ultra_plonk", "plonk"):
        return ProvingSystem.ULTRAPLONK
    if key in ("risc0", "risczero", "risc_zero"):
        return ProvingSystem.RISC0
    raise InvalidInput(
        f"unsupported proving system {name!r}",
        ctx={"supported": [p.value for p in ProvingSystem]},
    )


def hasher_for(system: Union[str, ProvingSystem]) -> StatementHasher:
    """Statement hasher for `system` (aliases accepted)."""
    return _HASHERS[normalize_system(system)]


__all__ = [
    "ProvingSystem",
    "NO_VERSION_HASH",
    "RISC0_VERSIONS",
    "proving_system_id",
    "StatementHasher",
    "Groth16Statement",
    "UltraplonkStatement",
    "Risc0Statement",
    "normalize_system",
    "hasher_for",
]
