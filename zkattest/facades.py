"""
zkattest.facades
================

Per-proof-system verifiers for application code.

A facade turns proof-system data (vk + public inputs, or image id + version +
journal) into a statement hash and asks an aggregation collaborator whether
that leaf is included under the given domain and aggregation id. The facade
adds no logic of its own on top: `verify` returns exactly the collaborator's
answer and passes every other argument through unchanged.

Collaborator
------------
Anything implementing `ProofAggregationVerifier`; in-process deployments use
`DomainAggregations`, which routes a domain id to a registry.

    >>> domains = DomainAggregations({0: registry})
    >>> g16 = Groth16Verifier(domains)
    >>> g16.verify(vk_hash, ["42", "24"], 0, 1, path, leaf_count, index)
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Protocol, Sequence, Type, Union, runtime_checkable

from zkattest.errors import InvalidInput
from zkattest.hashing import ZERO_ROOT, WordLike
from zkattest.logging import get_logger
from zkattest.merkle import Digest, verify_inclusion
from zkattest.registry import AggregationFront
from zkattest.statements import (
    Groth16Statement,
    Journal,
    ProvingSystem,
    Risc0Statement,
    UltraplonkStatement,
    normalize_system,
)

log = get_logger(__name__)


@runtime_checkable
class ProofAggregationVerifier(Protocol):
    """Answers inclusion queries keyed by (domain id, aggregation id)."""

    def verify_proof_aggregation(
        self,
        domain_id: int,
        aggregation_id: int,
        leaf: Digest,
        path: Sequence[Digest],
        leaf_count: int,
        index: int,
    ) -> bool: ...


class DomainAggregations:
    """
    Domain id → registry router.

    An unknown domain behaves like an unset aggregation: inclusion is checked
    against the zero root (so the answer is False), and an out-of-bounds
    index still raises IndexOutOfBounds.
    """

    def __init__(self, domains: Optional[Mapping[int, AggregationFront]] = None) -> None:
        self._domains: Dict[int, AggregationFront] = dict(domains or {})

    def register(self, domain_id: int, registry: AggregationFront) -> None:
        if domain_id in self._domains:
            raise InvalidInput("domain already registered", ctx={"domain_id": domain_id})
        self._domains[domain_id] = registry
        log.info("domain_registered", domain_id=domain_id, channel=registry.channel)

    def unregister(self, domain_id: int) -> None:
        self._domains.pop(domain_id, None)

    def get(self, domain_id: int) -> Optional[AggregationFront]:
        return self._domains.get(domain_id)

    @property
    def domains(self) -> Sequence[int]:
        return sorted(self._domains)

    def verify_proof_aggregation(
        self,
        domain_id: int,
        aggregation_id: int,
        leaf: Digest,
        path: Sequence[Digest],
        leaf_count: int,
        index: int,
    ) -> bool:
        registry = self._domains.get(domain_id)
        if registry is None:
            log.debug("unknown_domain", domain_id=domain_id)
            return verify_inclusion(ZERO_ROOT, leaf, path, leaf_count, index)
        return registry.verify_proof_aggregation(aggregation_id, leaf, path, leaf_count, index)


class _Facade:
    def __init__(self, aggregation: ProofAggregationVerifier) -> None:
        self.aggregation = aggregation

    def _check(
        self,
        leaf: bytes,
        domain_id: int,
        aggregation_id: int,
        path: Sequence[Digest],
        leaf_count: int,
        index: int,
    ) -> bool:
        return self.aggregation.verify_proof_aggregation(
            domain_id, aggregation_id, leaf, path, leaf_count, index
        )


class _WordFacade(_Facade):
    """Shared call shape of the word-oriented systems (Groth16, UltraPlonk)."""

    statement_cls: Type[Union[Groth16Statement, UltraplonkStatement]]

    def __init__(self, aggregation: ProofAggregationVerifier) -> None:
        super().__init__(aggregation)
        self.hasher = self.statement_cls()

    def encode_public_inputs(self, inputs: Sequence[WordLike]) -> bytes:
        return self.hasher.encode_public_inputs(inputs)

    def statement_hash(self, vk_hash: Digest, inputs: Sequence[WordLike]) -> bytes:
        return self.hasher.statement_hash(vk_hash, inputs)

    def verify(
        self,
        vk_hash: Digest,
        inputs: Sequence[WordLike],
        domain_id: int,
        aggregation_id: int,
        path: Sequence[Digest],
        leaf_count: int,
        index: int,
    ) -> bool:
        leaf = self.statement_hash(vk_hash, inputs)
        return self._check(leaf, domain_id, aggregation_id, path, leaf_count, index)


class Groth16Verifier(_WordFacade):
    """Groth16 statements: vk hash + field-element public inputs."""

    system = ProvingSystem.GROTH16
    statement_cls = Groth16Statement


class UltraplonkVerifier(_WordFacade):
    """UltraPlonk statements: same call shape as Groth16, big-endian words."""

    system = ProvingSystem.ULTRAPLONK
    statement_cls = UltraplonkStatement


class Risc0Verifier(_Facade):
    """RISC Zero statements: image id + version tag + journal."""

    system = ProvingSystem.RISC0

    def __init__(self, aggregation: ProofAggregationVerifier) -> None:
        super().__init__(aggregation)
        self.hasher = Risc0Statement()

    def encode_public_inputs(self, journal: Journal) -> bytes:
        return self.hasher.encode_public_inputs(journal)

    def statement_hash(self, vk: Digest, version: str, journal: Journal) -> bytes:
        return self.hasher.statement_hash(vk, version, journal)

    def verify(
        self,
        vk: Digest,
        version: str,
        journal: Journal,
        domain_id: int,
        aggregation_id: int,
        path: Sequence[Digest],
        leaf_count: int,
        index: int,
    ) -> bool:
        leaf = self.statement_hash(vk, version, journal)
        return self._check(leaf, domain_id, aggregation_id, path, leaf_count, index)


_FACADES = {
    ProvingSystem.GROTH16: Groth16Verifier,
    ProvingSystem.ULTRAPLONK: UltraplonkVerifier,
    ProvingSystem.RISC0: Risc0Verifier,
}


def verifier_for(
    system: Union[str, ProvingSystem], aggregation: ProofAggregationVerifier
) -> Union[Groth16Verifier, UltraplonkVerifier, Risc0Verifier]:
    """Facade for `system` (aliases accepted) over `aggregation`."""
    return _FACADES[normalize_system(system)](aggregation)


__all__ = [
    "ProofAggregationVerifier",
    "DomainAggregations",
    "Groth16Verifier",
    "UltraplonkVerifier",
    "Risc0Verifier",
    "verifier_for",
]
