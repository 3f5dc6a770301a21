"""
zkattest.ismp
=============

Cross-chain ingestion of aggregation roots.

A dispatcher ("host") delivers `IncomingPostRequest` messages; only the host
may call `on_accept`. The request body carries one (id, root) pair in ABI head
encoding::

    body = uint256(id) (32 bytes, big-endian) || bytes32(root)   # 64 bytes

Accepted roots go through the same `AggregationStore` rules as the direct
registry (immutable ids, optional sequential enforcement); ordering or
duplicate violations surface as `InvalidAggregation`. The receiver has no
operator submission path: operators can only flip sequential enforcement.
"""

from __future__ import annotations

from typing import Optional, Tuple, Union

from zkattest.access import AddressLike, CapabilityChecker, to_address
from zkattest.errors import InvalidAggregation, MalformedRequest, UnauthorizedCall
from zkattest.hashing import U256_MAX, to_bytes32, to_hex, u256_be
from zkattest.logging import get_logger
from zkattest.metrics import AttestationMetrics
from zkattest.registry import AggregationFront, AggregationStore
from zkattest.types import IncomingPostRequest

log = get_logger(__name__)

BODY_LENGTH = 64


def encode_body(id_: int, root: Union[bytes, str]) -> bytes:
    """ABI-encode ``(uint256 id, bytes32 root)``."""
    if isinstance(id_, bool) or not isinstance(id_, int) or not (0 <= id_ <= U256_MAX):
        raise MalformedRequest("id must be a uint256", ctx={"id": repr(id_)})
    return u256_be(id_) + to_bytes32(root)


def decode_body(body: bytes) -> Tuple[int, bytes]:
    """Inverse of `encode_body`; anything but exactly 64 bytes is malformed."""
    raw = bytes(body)
    if len(raw) != BODY_LENGTH:
        raise MalformedRequest(
            f"body must be {BODY_LENGTH} bytes", ctx={"length": len(raw)}
        )
    return int.from_bytes(raw[:32], "big"), raw[32:]


class IsmpAggregationReceiver(AggregationFront):
    """
    Registry fed by a cross-chain dispatcher.

    >>> receiver = IsmpAggregationReceiver(host=dispatcher, roles=roles)
    >>> receiver.on_accept(dispatcher, incoming)
    >>> receiver.get(1)
    """

    channel = "ismp"
    rejection = InvalidAggregation
    posted_event = "AggregationPosted"

    def __init__(
        self,
        *,
        host: AddressLike,
        roles: CapabilityChecker,
        store: Optional[AggregationStore] = None,
        metrics: Optional[AttestationMetrics] = None,
    ) -> None:
        super().__init__(roles, store=store, metrics=metrics)
        self.host = to_address(host)

    def on_accept(self, caller: AddressLike, incoming: IncomingPostRequest) -> Tuple[int, bytes]:
        """
        Handle a delivered POST request. Returns the committed (id, root).

        Raises UnauthorizedCall (caller is not the host), MalformedRequest
        (bad body) or InvalidAggregation (duplicate / out of sequence).
        """
        caller_b = to_address(caller)
        if caller_b != self.host:
            self.metrics.submission(self.channel, UnauthorizedCall.code.value)
            log.warning("unauthorized_on_accept", caller=to_hex(caller_b), host=to_hex(self.host))
            raise UnauthorizedCall(ctx={"caller": to_hex(caller_b)})

        try:
            id_, root = decode_body(incoming.request.body)
        except MalformedRequest:
            self.metrics.submission(self.channel, MalformedRequest.code.value)
            raise

        log.debug(
            "post_request_received",
            nonce=incoming.request.nonce,
            source=to_hex(incoming.request.source),
            relayer=to_hex(incoming.relayer),
        )
        self._accept([(id_, root)])
        return id_, root


__all__ = [
    "BODY_LENGTH",
    "encode_body",
    "decode_body",
    "IsmpAggregationReceiver",
]
