"""
zkattest.registry
=================

Attestation / aggregation registry: stores the Merkle root registered for
each id and answers "is leaf X included under the root for id Y".

Layers
------
- `AggregationStore` is the single owner of the id → root mapping, the
  latest accepted id and the sequential-enforcement flag. It is the only
  place the duplicate and ordering rules live.
- `AggregationFront` is the shared read/verify/flip surface used by every
  entry point (capability-gated flip, `get`, `verify_proof_aggregation`,
  a bounded event log, snapshots and admin-only restore).
- `AttestationRegistry` adds the direct operator path (`submit`,
  `submit_batch`). The cross-chain path lives in `zkattest.ismp` and commits
  through the same store.

Rules
-----
- Once set, a root is immutable: resubmitting an id fails whatever the root.
- With sequential enforcement on, the first id ever accepted must equal the
  configured start id (default 1) and each later id must be exactly
  ``latest + 1``; ``latest`` is the highest id accepted, tracked in both modes.
- A batch is validated as a whole (including against its own earlier pairs)
  before anything is written: all pairs commit or none do.
- Unset ids read as `ZERO_ROOT`.

Thread-safety: mutations run under a re-entrant lock so readers never see a
partially applied batch or flag flip.
"""

from __future__ import annotations

from collections import deque
from threading import RLock
from typing import Deque, Dict, Optional, Sequence, Tuple, Type, Union

from zkattest.access import AddressLike, Capability, CapabilityChecker, capability_role, to_address
from zkattest.config import get_settings
from zkattest.errors import (
    IndexOutOfBounds,
    InvalidAttestation,
    InvalidBatchCounts,
    InvalidInput,
    MissingRole,
    OrderingError,
)
from zkattest.hashing import U256_MAX, ZERO_ROOT, to_bytes32, to_hex
from zkattest.logging import event_fields, get_logger
from zkattest.merkle import Digest, verify_inclusion
from zkattest.metrics import AttestationMetrics, get_metrics
from zkattest.types import RegistryEvent, RegistrySnapshot

log = get_logger(__name__)

Pair = Tuple[int, bytes]


def _to_id(value: Union[int, str]) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise InvalidInput("ids are unsigned integers", ctx={"type": type(value).__name__})
    try:
        x = int(value, 0) if isinstance(value, str) else int(value)
    except ValueError as e:
        raise InvalidInput(f"invalid id {value!r}") from e
    if x < 0 or x > U256_MAX:
        raise InvalidInput("id does not fit in uint256", ctx={"id": str(value)})
    return x


# =============================================================================
# Store
# =============================================================================


class AggregationStore:
    """
    id → root mapping with duplicate and sequential-ordering rules.

    Parameters default to `zkattest.config.Settings` (`sequential_start_id`,
    `enforce_sequential`).
    """

    def __init__(
        self,
        *,
        start_id: Optional[int] = None,
        enforce_sequential: Optional[bool] = None,
    ) -> None:
        settings = get_settings()
        self.start_id = settings.sequential_start_id if start_id is None else int(start_id)
        self._enforce = settings.enforce_sequential if enforce_sequential is None else bool(enforce_sequential)
        self._roots: Dict[int, bytes] = {}
        self._latest: Optional[int] = None
        self._lock = RLock()

    # ---- reads ------------------------------------------------------------

    def get(self, id_: int) -> bytes:
        with self._lock:
            return self._roots.get(id_, ZERO_ROOT)

    def has(self, id_: int) -> bool:
        with self._lock:
            return id_ in self._roots

    @property
    def enforce_sequential(self) -> bool:
        return self._enforce

    @property
    def latest_id(self) -> Optional[int]:
        """Highest id accepted so far, or None when nothing was accepted."""
        return self._latest

    def __len__(self) -> int:
        return len(self._roots)

    # ---- validation -------------------------------------------------------

    def plan(self, pairs: Sequence[Pair]) -> Optional[Tuple[int, str]]:
        """
        Check `pairs` in order against the current state plus the pairs
        before them. Returns (offending id, reason) or None if all pass.
        """
        with self._lock:
            seen = set()
            latest = self._latest
            for id_, _root in pairs:
                if id_ in self._roots or id_ in seen:
                    return id_, "duplicate id"
                if self._enforce:
                    expected = self.start_id if latest is None else latest + 1
                    if id_ != expected:
                        return id_, f"expected id {expected}"
                seen.add(id_)
                latest = id_ if latest is None else max(latest, id_)
            return None

    # ---- mutations --------------------------------------------------------

    def commit(self, pairs: Sequence[Pair], *, error: Type[OrderingError]) -> None:
        """Validate then apply every pair, or raise `error` and apply none."""
        with self._lock:
            violation = self.plan(pairs)
            if violation is not None:
                id_, reason = violation
                raise error(
                    f"id {id_} rejected: {reason}",
                    ctx={"id": id_, "reason": reason, "latest": self._latest},
                )
            for id_, root in pairs:
                self._roots[id_] = root
                self._latest = id_ if self._latest is None else max(self._latest, id_)

    def flip(self) -> bool:
        with self._lock:
            self._enforce = not self._enforce
            return self._enforce

    # ---- persistence ------------------------------------------------------

    def snapshot(self) -> RegistrySnapshot:
        with self._lock:
            return RegistrySnapshot(
                roots={k: to_hex(v) for k, v in sorted(self._roots.items())},
                enforce_sequential=self._enforce,
                latest_id=self._latest,
                start_id=self.start_id,
            )

    def restore(self, snap: RegistrySnapshot) -> None:
        """
        Replace the whole state with `snap`.

        The snapshot must be self-consistent: when it holds roots, `latest_id`
        is at least the highest of their ids. Otherwise InvalidInput.
        """
        roots = {_to_id(k): to_bytes32(v) for k, v in snap.roots.items()}
        if roots and (snap.latest_id is None or snap.latest_id < max(roots)):
            raise InvalidInput(
                "snapshot latest id is below its highest root id",
                ctx={"latest_id": snap.latest_id, "max_id": max(roots)},
            )
        with self._lock:
            self.start_id = snap.start_id
            self._enforce = snap.enforce_sequential
            self._roots = roots
            self._latest = snap.latest_id

    @classmethod
    def from_snapshot(cls, snap: RegistrySnapshot) -> "AggregationStore":
        store = cls(start_id=snap.start_id, enforce_sequential=snap.enforce_sequential)
        store.restore(snap)
        return store


# =============================================================================
# Shared entry-point surface
# =============================================================================


class AggregationFront:
    """
    Read, verify and flip operations shared by every registry entry point.

    Subclasses set `channel` (metrics/log label), `rejection` (the ordering
    error raised by their submission path) and `posted_event`.
    """

    channel: str = "direct"
    rejection: Type[OrderingError] = InvalidAttestation
    posted_event: str = "AttestationPosted"

    def __init__(
        self,
        capabilities: CapabilityChecker,
        *,
        store: Optional[AggregationStore] = None,
        metrics: Optional[AttestationMetrics] = None,
    ) -> None:
        self.capabilities = capabilities
        self.store = store if store is not None else AggregationStore()
        self.metrics = metrics if metrics is not None else get_metrics()
        self.events: Deque[RegistryEvent] = deque(maxlen=get_settings().event_log_limit)

    # ---- capability -------------------------------------------------------

    def _require(self, caller: AddressLike, action: Capability) -> bytes:
        caller_b = to_address(caller)
        if not self.capabilities.has_capability(caller_b, action):
            log.warning("capability_denied", caller=to_hex(caller_b), action=action.value, channel=self.channel)
            raise MissingRole(caller_b, capability_role(action))
        return caller_b

    # ---- reads ------------------------------------------------------------

    def get(self, id_: Union[int, str]) -> bytes:
        """Root for `id_`, or ZERO_ROOT when unset."""
        return self.store.get(_to_id(id_))

    @property
    def is_enforcing_sequential(self) -> bool:
        return self.store.enforce_sequential

    @property
    def latest_id(self) -> Optional[int]:
        return self.store.latest_id

    def verify_proof_aggregation(
        self,
        id_: Union[int, str],
        leaf: Digest,
        path: Sequence[Digest],
        leaf_count: int,
        index: int,
    ) -> bool:
        """
        Inclusion of `leaf` under the root registered for `id_`.

        Raises IndexOutOfBounds for ``index >= leaf_count``.
        """
        root = self.get(id_)
        try:
            ok = verify_inclusion(root, leaf, path, leaf_count, index)
        except IndexOutOfBounds:
            self.metrics.verification("error")
            raise
        self.metrics.verification("included" if ok else "not_included")
        log.debug("inclusion_checked", id=_to_id(id_), index=index, leaf_count=leaf_count, included=ok)
        return ok

    # ---- mutations --------------------------------------------------------

    def flip_sequential_enforcement(self, caller: AddressLike) -> bool:
        """Toggle sequential enforcement (operator only). Returns the new flag."""
        caller_b = self._require(caller, Capability.OPERATOR)
        enabled = self.store.flip()
        self.events.append(RegistryEvent("SequentialEnforcementFlipped", {"enabled": enabled}))
        log.info("sequential_enforcement_flipped", enabled=enabled, caller=to_hex(caller_b), channel=self.channel)
        return enabled

    def _accept(self, pairs: Sequence[Pair], *, channel: Optional[str] = None) -> None:
        channel = channel or self.channel
        try:
            self.store.commit(pairs, error=self.rejection)
        except OrderingError as e:
            self.metrics.submission(channel, e.code.value, count=len(pairs))
            log.warning("submission_rejected", channel=channel, reason=e.message, count=len(pairs))
            raise
        for id_, root in pairs:
            self.events.append(RegistryEvent(self.posted_event, {"id": id_, "root": to_hex(root)}))
            log.info("root_posted", channel=channel, **event_fields(id=id_, root=root))
        self.metrics.submission(channel, "accepted", count=len(pairs))
        if self.store.latest_id is not None:
            self.metrics.set_latest(channel, self.store.latest_id)

    # ---- persistence ------------------------------------------------------

    def snapshot(self) -> RegistrySnapshot:
        return self.store.snapshot()

    def restore(self, caller: AddressLike, snap: RegistrySnapshot) -> None:
        """Replace the stored state with `snap` (admin only)."""
        caller_b = self._require(caller, Capability.ADMIN)
        self.store.restore(snap)
        log.info(
            "registry_restored",
            channel=self.channel,
            caller=to_hex(caller_b),
            roots=len(snap.roots),
            latest=snap.latest_id,
        )


# =============================================================================
# Direct operator registry
# =============================================================================


class AttestationRegistry(AggregationFront):
    """
    Registry fed by direct operator calls.

    >>> roles = RoleTable(owner=owner, operator=op)
    >>> reg = AttestationRegistry(roles)
    >>> reg.submit(op, 1, root)
    >>> reg.verify_proof_aggregation(1, leaf, path, leaf_count, index)
    """

    channel = "direct"
    rejection = InvalidAttestation
    posted_event = "AttestationPosted"

    def submit(self, caller: AddressLike, id_: Union[int, str], root: Digest) -> None:
        """Register `root` under `id_` (operator only)."""
        self._require(caller, Capability.OPERATOR)
        self._accept([(_to_id(id_), to_bytes32(root))])

    def submit_batch(
        self,
        caller: AddressLike,
        ids: Sequence[Union[int, str]],
        roots: Sequence[Digest],
    ) -> None:
        """Register several roots at once; all-or-nothing (operator only)."""
        self._require(caller, Capability.OPERATOR)
        if len(ids) != len(roots):
            self.metrics.submission("batch", InvalidBatchCounts.code.value)
            raise InvalidBatchCounts(ctx={"ids": len(ids), "roots": len(roots)})
        pairs = [(_to_id(i), to_bytes32(r)) for i, r in zip(ids, roots)]
        self._accept(pairs, channel="batch")

    @classmethod
    def from_snapshot(
        cls,
        snap: RegistrySnapshot,
        capabilities: CapabilityChecker,
        *,
        metrics: Optional[AttestationMetrics] = None,
    ) -> "AttestationRegistry":
        return cls(capabilities, store=AggregationStore.from_snapshot(snap), metrics=metrics)


__all__ = [
    "AggregationStore",
    "AggregationFront",
    "AttestationRegistry",
]
