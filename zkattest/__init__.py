"""
zkattest
========

Verification layer for zkVerify attestations.

- `merkle`      : variable-size binary Merkle inclusion + reference tree builder
- `statements`  : Groth16 / UltraPlonk / RISC Zero statement hashes (leaves)
- `registry`    : id → aggregation root store with sequential/duplicate rules
- `ismp`        : cross-chain ingestion through a dispatcher
- `facades`     : per-proof-system verifiers over an aggregation collaborator
- `access`      : role table consulted before state changes
"""

from __future__ import annotations

from zkattest.access import DEFAULT_ADMIN_ROLE, OPERATOR_ROLE, Capability, CapabilityChecker, RoleTable
from zkattest.errors import (
    IndexOutOfBounds,
    InvalidAggregation,
    InvalidAttestation,
    InvalidBatchCounts,
    MalformedRequest,
    MissingRole,
    UnauthorizedCall,
    UnsupportedVersion,
    ZkAttestError,
)
from zkattest.facades import (
    DomainAggregations,
    Groth16Verifier,
    ProofAggregationVerifier,
    Risc0Verifier,
    UltraplonkVerifier,
    verifier_for,
)
from zkattest.ismp import IsmpAggregationReceiver, decode_body, encode_body
from zkattest.merkle import merkle_proof, merkle_root, verify_inclusion
from zkattest.registry import AggregationStore, AttestationRegistry
from zkattest.statements import ProvingSystem, hasher_for
from zkattest.version import __version__

__all__ = [
    "__version__",
    # access
    "DEFAULT_ADMIN_ROLE",
    "OPERATOR_ROLE",
    "Capability",
    "CapabilityChecker",
    "RoleTable",
    # errors
    "ZkAttestError",
    "MissingRole",
    "UnauthorizedCall",
    "IndexOutOfBounds",
    "InvalidBatchCounts",
    "MalformedRequest",
    "UnsupportedVersion",
    "InvalidAttestation",
    "InvalidAggregation",
    # merkle
    "verify_inclusion",
    "merkle_root",
    "merkle_proof",
    # statements
    "ProvingSystem",
    "hasher_for",
    # registries
    "AggregationStore",
    "AttestationRegistry",
    "IsmpAggregationReceiver",
    "encode_body",
    "decode_body",
    # facades
    "ProofAggregationVerifier",
    "DomainAggregations",
    "Groth16Verifier",
    "UltraplonkVerifier",
    "Risc0Verifier",
    "verifier_for",
]
