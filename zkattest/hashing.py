"""
zkattest.hashing: hash and word helpers
=======================================

Byte-exact helpers shared by the Merkle verifier, the statement hashers and
the cross-chain body codec:

- Keccak-256 (pre-standard SHA-3, Ethereum flavour) via pycryptodome
- SHA-256 (stdlib `hashlib`)
- Hex helpers (`to_hex`, `from_hex`) with 0x-prefix handling
- 32-byte word helpers (`to_bytes32`, `to_uint256`, `u256_be`)

All digests are raw 32-byte `bytes`.
"""

from __future__ import annotations

import binascii
import hashlib
from typing import Iterable, Union

from Crypto.Hash import keccak as _keccak

from zkattest.errors import InvalidInput

BytesLike = Union[bytes, bytearray, memoryview]
WordLike = Union[int, str, bytes, bytearray]

U256_MAX: int = (1 << 256) - 1
ZERO_ROOT: bytes = b"\x00" * 32


# ---------------------------------------------------------------------------
# Digests
# ---------------------------------------------------------------------------


def _as_bytes(name: str, b: BytesLike) -> bytes:
    if isinstance(b, bytes):
        return b
    if isinstance(b, (bytearray, memoryview)):
        return bytes(b)
    raise TypeError(f"{name} must be bytes-like, got {type(b).__name__}")


def keccak256(data: BytesLike) -> bytes:
    """Return Keccak-256 digest of data as raw bytes (length 32)."""
    h = _keccak.new(digest_bits=256)
    h.update(_as_bytes("data", data))
    return h.digest()


def keccak256_concat(parts: Iterable[BytesLike]) -> bytes:
    """Keccak-256 over the concatenation of `parts` (abi.encodePacked style)."""
    h = _keccak.new(digest_bits=256)
    for p in parts:
        h.update(_as_bytes("part", p))
    return h.digest()


def sha256(data: BytesLike) -> bytes:
    """Return SHA-256 digest of data as raw bytes (length 32)."""
    return hashlib.sha256(_as_bytes("data", data)).digest()


# ---------------------------------------------------------------------------
# Hex helpers
# ---------------------------------------------------------------------------


def to_hex(b: BytesLike, prefix: str = "0x") -> str:
    """Lower-case hex string with optional prefix (default `0x`)."""
    return (prefix or "") + binascii.hexlify(_as_bytes("value", b)).decode("ascii")


def from_hex(s: Union[str, BytesLike]) -> bytes:
    """
    Parse hex into bytes. Accepts strings with/without 0x prefix; odd-length
    input is left-padded with a zero nybble.
    """
    if isinstance(s, (bytes, bytearray, memoryview)):
        s = bytes(s).decode("ascii")
    if not isinstance(s, str):
        raise InvalidInput(f"expected hex string, got {type(s).__name__}")
    s = s.strip().lower()
    if s.startswith("0x"):
        s = s[2:]
    if len(s) % 2:
        s = "0" + s
    try:
        return binascii.unhexlify(s)
    except binascii.Error as e:
        raise InvalidInput(f"invalid hex string: {e}") from e


# ---------------------------------------------------------------------------
# 32-byte words
# ---------------------------------------------------------------------------


def u256_be(x: int) -> bytes:
    """Encode an unsigned 256-bit integer as a 32-byte big-endian word."""
    if not isinstance(x, int) or isinstance(x, bool) or x < 0 or x > U256_MAX:
        raise InvalidInput("value does not fit in uint256", ctx={"value": repr(x)})
    return x.to_bytes(32, "big")


def to_bytes32(value: Union[str, BytesLike]) -> bytes:
    """
    Normalize a digest given as raw bytes or hex string to exactly 32 bytes.
    Other lengths are rejected rather than padded.
    """
    b = from_hex(value) if isinstance(value, str) else _as_bytes("digest", value)
    if len(b) != 32:
        raise InvalidInput("expected a 32-byte digest", ctx={"length": len(b)})
    return b


def to_uint256(value: WordLike) -> int:
    """
    Parse a public-input word.

    Accepts an int, a decimal string ("42"), a 0x-prefixed hex string, or
    exactly 32 raw bytes (big-endian). Values must lie in [0, 2^256).
    """
    if isinstance(value, bool):
        raise InvalidInput("booleans are not uint256 values")
    if isinstance(value, int):
        x = value
    elif isinstance(value, str):
        s = value.strip()
        try:
            x = int(s, 16) if s.lower().startswith("0x") else int(s, 10)
        except ValueError as e:
            raise InvalidInput(f"not an integer: {value!r}") from e
    elif isinstance(value, (bytes, bytearray)):
        if len(value) != 32:
            raise InvalidInput("raw words must be 32 bytes", ctx={"length": len(value)})
        x = int.from_bytes(bytes(value), "big")
    else:
        raise InvalidInput(f"unsupported word type {type(value).__name__}")
    if x < 0 or x > U256_MAX:
        raise InvalidInput("value does not fit in uint256", ctx={"value": str(value)})
    return x


__all__ = [
    "U256_MAX",
    "ZERO_ROOT",
    "keccak256",
    "keccak256_concat",
    "sha256",
    "to_hex",
    "from_hex",
    "u256_be",
    "to_bytes32",
    "to_uint256",
]
