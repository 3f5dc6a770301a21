"""
zkattest.access
===============

Capability checks consulted by the registries before any state change.

The registries never inherit access-control behaviour; they are handed a
`CapabilityChecker` and ask ``has_capability(caller, action)``. This module
ships the default checker, `RoleTable`: a minimal role-based access control
table with bytes32 role identifiers.

Roles
-----
- ``DEFAULT_ADMIN_ROLE`` (32 zero bytes): the owner; admin of every role
  unless `set_role_admin` says otherwise.
- ``OPERATOR_ROLE = keccak256(b"OPERATOR")``: may submit roots and flip
  sequential enforcement.

Operations
----------
- Queries: `has_role`, `get_role_admin`, `has_capability`, `require_role`.
- Mutations (admin of the target role only): `grant_role`, `revoke_role`,
  `set_role_admin`; `renounce_role` needs no admin.
- Granting an existing member or revoking a non-member is a no-op; events are
  recorded only on state change. `events` keeps the most recent
  `Settings.event_log_limit` entries.

Failures raise `MissingRole` with the message
``AccessControl: account 0x<account> is missing role 0x<role>``.
"""

from __future__ import annotations

from collections import deque
from enum import Enum
from threading import RLock
from typing import Deque, Dict, Optional, Protocol, Set, Union, runtime_checkable

from zkattest.config import get_settings
from zkattest.errors import InvalidInput, MissingRole
from zkattest.hashing import from_hex, keccak256
from zkattest.logging import get_logger
from zkattest.types import RegistryEvent

log = get_logger(__name__)

AddressLike = Union[bytes, bytearray, str]

DEFAULT_ADMIN_ROLE: bytes = b"\x00" * 32
OPERATOR_ROLE: bytes = keccak256(b"OPERATOR")


class Capability(str, Enum):
    """Actions the core asks permission for."""

    OPERATOR = "operator"
    ADMIN = "admin"


@runtime_checkable
class CapabilityChecker(Protocol):
    """Authorization collaborator consulted before every mutation."""

    def has_capability(self, caller: bytes, action: Capability) -> bool: ...


def to_address(value: AddressLike) -> bytes:
    """Normalize an account given as bytes or 0x-hex to non-empty bytes."""
    b = from_hex(value) if isinstance(value, str) else bytes(value)
    if not b:
        raise InvalidInput("account address must not be empty")
    return b


def normalize_role(role: Union[bytes, str]) -> bytes:
    """Ensure `role` is exactly 32 bytes."""
    b = from_hex(role) if isinstance(role, str) else bytes(role)
    if len(b) != 32:
        raise InvalidInput("role ids are 32 bytes", ctx={"length": len(b)})
    return b


def derive_role_id(name: Union[str, bytes]) -> bytes:
    """Role id for a role name: keccak256(name)."""
    raw = name.encode("utf-8") if isinstance(name, str) else bytes(name)
    return keccak256(raw)


_CAPABILITY_ROLES: Dict[Capability, bytes] = {
    Capability.OPERATOR: OPERATOR_ROLE,
    Capability.ADMIN: DEFAULT_ADMIN_ROLE,
}


def capability_role(action: Capability) -> bytes:
    """Role id that grants `action`."""
    return _CAPABILITY_ROLES[Capability(action)]


class RoleTable:
    """
    In-memory role membership table.

    ``RoleTable(owner=deployer, operator=op)`` mirrors deployment: the owner
    receives the admin role and `op` the operator role.
    """

    def __init__(
        self,
        *,
        owner: AddressLike,
        operator: Optional[AddressLike] = None,
    ) -> None:
        self._members: Dict[bytes, Set[bytes]] = {}
        self._admins: Dict[bytes, bytes] = {}
        self._lock = RLock()
        self.events: Deque[RegistryEvent] = deque(maxlen=get_settings().event_log_limit)

        owner_b = to_address(owner)
        self._add(DEFAULT_ADMIN_ROLE, owner_b, sender=owner_b)
        if operator is not None:
            self._add(OPERATOR_ROLE, to_address(operator), sender=owner_b)

    # ---- queries ----------------------------------------------------------

    def has_role(self, role: Union[bytes, str], account: AddressLike) -> bool:
        role_b = normalize_role(role)
        with self._lock:
            return to_address(account) in self._members.get(role_b, set())

    def get_role_admin(self, role: Union[bytes, str]) -> bytes:
        with self._lock:
            return self._admins.get(normalize_role(role), DEFAULT_ADMIN_ROLE)

    def has_capability(self, caller: bytes, action: Capability) -> bool:
        return self.has_role(capability_role(action), caller)

    def require_role(self, role: Union[bytes, str], account: AddressLike) -> None:
        if not self.has_role(role, account):
            raise MissingRole(to_address(account), normalize_role(role))

    # ---- mutations --------------------------------------------------------

    def grant_role(self, caller: AddressLike, role: Union[bytes, str], account: AddressLike) -> None:
        role_b = normalize_role(role)
        with self._lock:
            self.require_role(self.get_role_admin(role_b), caller)
            self._add(role_b, to_address(account), sender=to_address(caller))

    def revoke_role(self, caller: AddressLike, role: Union[bytes, str], account: AddressLike) -> None:
        role_b = normalize_role(role)
        with self._lock:
            self.require_role(self.get_role_admin(role_b), caller)
            self._remove(role_b, to_address(account), sender=to_address(caller))

    def renounce_role(self, caller: AddressLike, role: Union[bytes, str]) -> None:
        caller_b = to_address(caller)
        with self._lock:
            self._remove(normalize_role(role), caller_b, sender=caller_b)

    def set_role_admin(
        self, caller: AddressLike, role: Union[bytes, str], admin_role: Union[bytes, str]
    ) -> None:
        role_b = normalize_role(role)
        admin_b = normalize_role(admin_role)
        with self._lock:
            self.require_role(self.get_role_admin(role_b), caller)
            prev = self.get_role_admin(role_b)
            if prev == admin_b:
                return
            self._admins[role_b] = admin_b
            self.events.append(
                RegistryEvent(
                    "RoleAdminChanged",
                    {"role": role_b.hex(), "previousAdminRole": prev.hex(), "newAdminRole": admin_b.hex()},
                )
            )

    # ---- internals --------------------------------------------------------

    def _add(self, role: bytes, account: bytes, *, sender: bytes) -> None:
        members = self._members.setdefault(role, set())
        if account in members:
            return
        members.add(account)
        self.events.append(
            RegistryEvent("RoleGranted", {"role": role.hex(), "account": account.hex(), "sender": sender.hex()})
        )
        log.info("role_granted", role="0x" + role.hex(), account="0x" + account.hex())

    def _remove(self, role: bytes, account: bytes, *, sender: bytes) -> None:
        members = self._members.get(role)
        if not members or account not in members:
            return
        members.discard(account)
        self.events.append(
            RegistryEvent("RoleRevoked", {"role": role.hex(), "account": account.hex(), "sender": sender.hex()})
        )
        log.info("role_revoked", role="0x" + role.hex(), account="0x" + account.hex())


__all__ = [
    "DEFAULT_ADMIN_ROLE",
    "OPERATOR_ROLE",
    "Capability",
    "CapabilityChecker",
    "RoleTable",
    "to_address",
    "normalize_role",
    "derive_role_id",
    "capability_role",
]
