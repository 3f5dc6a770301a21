"""
Typed exceptions for zkattest.

Design goals
- Structured: machine-readable code + human message + contextual fields.
- Grouped by kind so callers can react to a whole family at once:
    * authorization   → AuthorizationError  (MissingRole, UnauthorizedCall)
    * malformed input → InputError          (IndexOutOfBounds, InvalidBatchCounts,
                                             MalformedRequest, InvalidInput,
                                             UnsupportedVersion)
    * ordering        → OrderingError       (InvalidAttestation, InvalidAggregation)
- A failed inclusion check is *not* an error: verifiers return False.

Every mutation that raises one of these leaves registry state untouched.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorCode(str, Enum):
    """Canonical error codes."""

    UNKNOWN = "UNKNOWN"

    # Authorization
    MISSING_ROLE = "MISSING_ROLE"
    UNAUTHORIZED_CALL = "UNAUTHORIZED_CALL"

    # Malformed input
    INDEX_OUT_OF_BOUNDS = "INDEX_OUT_OF_BOUNDS"
    INVALID_BATCH_COUNTS = "INVALID_BATCH_COUNTS"
    MALFORMED_REQUEST = "MALFORMED_REQUEST"
    INVALID_INPUT = "INVALID_INPUT"
    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"

    # Ordering / duplicates
    INVALID_ATTESTATION = "INVALID_ATTESTATION"
    INVALID_AGGREGATION = "INVALID_AGGREGATION"


class ZkAttestError(Exception):
    """
    Base structured error.

    Fields:
      code:    stable machine code (ErrorCode)
      message: human-readable summary
      ctx:     small dict of contextual fields (ids, hex strings, counts)
    """

    code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "zkattest error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        ctx: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.ctx: Dict[str, Any] = dict(ctx or {})
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.ctx:
            return f"[{self.code.value}] {self.message} ctx={self.ctx}"
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code.value, "msg": self.message, "ctx": self.ctx}


# -----------------------------------------------------------------------------
# Kinds
# -----------------------------------------------------------------------------


class AuthorizationError(ZkAttestError):
    """Caller lacks the capability or identity required for the call."""


class InputError(ZkAttestError):
    """Malformed request; indicates a caller bug."""


class OrderingError(ZkAttestError):
    """Sequential-mode violation or resubmission of an existing id."""


# -----------------------------------------------------------------------------
# Authorization
# -----------------------------------------------------------------------------


class MissingRole(AuthorizationError):
    code = ErrorCode.MISSING_ROLE
    default_message = "caller is missing a required role"

    def __init__(self, account: bytes, role: bytes) -> None:
        self.account = bytes(account)
        self.role = bytes(role)
        super().__init__(
            f"AccessControl: account 0x{self.account.hex()} is missing role 0x{self.role.hex()}",
            ctx={"account": "0x" + self.account.hex(), "role": "0x" + self.role.hex()},
        )


class UnauthorizedCall(AuthorizationError):
    code = ErrorCode.UNAUTHORIZED_CALL
    default_message = "caller is not the configured dispatcher"


# -----------------------------------------------------------------------------
# Malformed input
# -----------------------------------------------------------------------------


class IndexOutOfBounds(InputError):
    code = ErrorCode.INDEX_OUT_OF_BOUNDS
    default_message = "leaf index is out of bounds"


class InvalidBatchCounts(InputError):
    code = ErrorCode.INVALID_BATCH_COUNTS
    default_message = "batch ids and roots differ in length"


class MalformedRequest(InputError):
    code = ErrorCode.MALFORMED_REQUEST
    default_message = "inbound request body could not be decoded"


class InvalidInput(InputError):
    code = ErrorCode.INVALID_INPUT
    default_message = "invalid input value"


class UnsupportedVersion(InputError):
    code = ErrorCode.UNSUPPORTED_VERSION
    default_message = "unsupported proof system version"


# -----------------------------------------------------------------------------
# Ordering / duplicates
# -----------------------------------------------------------------------------


class InvalidAttestation(OrderingError):
    code = ErrorCode.INVALID_ATTESTATION
    default_message = "attestation id rejected"


class InvalidAggregation(OrderingError):
    code = ErrorCode.INVALID_AGGREGATION
    default_message = "aggregation id rejected"


__all__ = [
    "ErrorCode",
    "ZkAttestError",
    "AuthorizationError",
    "InputError",
    "OrderingError",
    "MissingRole",
    "UnauthorizedCall",
    "IndexOutOfBounds",
    "InvalidBatchCounts",
    "MalformedRequest",
    "InvalidInput",
    "UnsupportedVersion",
    "InvalidAttestation",
    "InvalidAggregation",
]
