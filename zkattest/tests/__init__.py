"""
zkattest.tests helpers

Shared vectors and utilities for zkattest/* tests.

Exports:
- TEST_ROOT
- word(n) -> 32-byte big-endian word
- SUBSTRATE_TREE, MIN_TREE : reference trees (root, leaves, per-leaf proofs)
- BATCH_ROOTS : three roots accepted as a batch for ids 1..3
- OWNER, OPERATOR, OTHER, HOST, RELAYER : 20-byte accounts
- env_flag(name, default=False) -> bool
- configure_test_logging() -> None

Environment toggles:
- ZKATTEST_TEST_LOG=1     → enable DEBUG logging for zkattest.*
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List

TEST_ROOT: Path = Path(__file__).resolve().parent


def word(n: int) -> bytes:
    return n.to_bytes(32, "big")


def _h(s: str) -> bytes:
    return bytes.fromhex(s[2:] if s.startswith("0x") else s)


# --- Reference trees -----------------------------------------------------------

# Seven leaves 1..7; the last node of each odd level is promoted, so index 6
# carries a two-element path.
SUBSTRATE_TREE: Dict[str, object] = {
    "root": _h("0xd2297c32eeb9a5378d85368ed029315498d1b40d9b03e9ad93bee97a382b47c8"),
    "leaves": [word(i) for i in range(1, 8)],
    "proofs": [
        [
            _h("0x405787fa12a823e0f2b7631cc41b3ba8828b3321ca811111fa75cd3aa3bb5ace"),
            _h("0x4a008209643838d588e1e3949a8a49c2dc4dfb50ee6aab985a7cf6eccba95084"),
            _h("0xc7bd4d69c8648fe845b6e254ee355bdee759904dde840623da4d218300cb6e89"),
        ],
        [
            _h("0xb10e2d527612073b26eecdfd717e6a320cf44b4afac2b0732d9fcbe2b7fa0cf6"),
            _h("0x4a008209643838d588e1e3949a8a49c2dc4dfb50ee6aab985a7cf6eccba95084"),
            _h("0xc7bd4d69c8648fe845b6e254ee355bdee759904dde840623da4d218300cb6e89"),
        ],
        [
            _h("0x8a35acfbc15ff81a39ae7d344fd709f28e8600b4aa8c65c6b64bfe7fe36bd19b"),
            _h("0x50387073e2d4f7060a3c02c3c5268d8a72700a28b5cbd7e23314ae0e1ebda895"),
            _h("0xc7bd4d69c8648fe845b6e254ee355bdee759904dde840623da4d218300cb6e89"),
        ],
        [
            _h("0xc2575a0e9e593c00f959f8c92f12db2869c3395a3b0502d05e2516446f71f85b"),
            _h("0x50387073e2d4f7060a3c02c3c5268d8a72700a28b5cbd7e23314ae0e1ebda895"),
            _h("0xc7bd4d69c8648fe845b6e254ee355bdee759904dde840623da4d218300cb6e89"),
        ],
        [
            _h("0xf652222313e28459528d920b65115c16c04f3efc82aaedc97be59f3f377c0d3f"),
            _h("0xa66cc928b5edb82af9bd49922954155ab7b0942694bea4ce44661d9a8736c688"),
            _h("0x1e8cc8511a4954df48a80e5f5b8da3419a99ba3e7697574234e10893022167fc"),
        ],
        [
            _h("0x036b6384b5eca791c62761152d0c79bb0604c104a5fb6f4eb0703f3154bb3db0"),
            _h("0xa66cc928b5edb82af9bd49922954155ab7b0942694bea4ce44661d9a8736c688"),
            _h("0x1e8cc8511a4954df48a80e5f5b8da3419a99ba3e7697574234e10893022167fc"),
        ],
        [
            _h("0x75d78cae9ac952a6bdb1d50ff7497e0fc5986fff3e26261710f96f2e29ff6552"),
            _h("0x1e8cc8511a4954df48a80e5f5b8da3419a99ba3e7697574234e10893022167fc"),
        ],
    ],
}

MIN_TREE: Dict[str, object] = {
    "root": _h("0xb10e2d527612073b26eecdfd717e6a320cf44b4afac2b0732d9fcbe2b7fa0cf6"),
    "leaves": [word(1)],
    "proofs": [[]],
}

BATCH_ROOTS: List[bytes] = [
    _h("0xaa67a169b0bba217aa0aa88a65346920c84c42447c36ba5f7ea65f422c1fe5d8"),
    _h("0x2e6d31a5983a91251bfae5aefa1c0a19d8ba3cf601d0e8a706b4cfa9661a6b8a"),
    _h("0xd2297c32eeb9a5378d85368ed029315498d1b40d9b03e9ad93bee97a382b47c8"),
]

# --- Accounts ------------------------------------------------------------------

OWNER = bytes.fromhex("f39fd6e51aad88f6f4ce6ab8827279cfffb92266")
OPERATOR = bytes.fromhex("70997970c51812dc3a010c7d01b50e0d17dc79c8")
OTHER = bytes.fromhex("3c44cdddb6a900fa2b585dd299e03d12fa4293bc")
HOST = bytes.fromhex("5fbdb2315678afecb367f032d93f642f64180aa3")
RELAYER = bytes.fromhex("90f79bf6eb2c4f870365e785982e1f101e93b906")


# --- Env & logging -------------------------------------------------------------


def env_flag(name: str, default: bool = False) -> bool:
    """
    Read an environment flag in a truthy/falsey way: "1", "true", "yes" → True.
    """
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "on"}


def configure_test_logging() -> None:
    """
    Route zkattest.* structured logs to stderr at DEBUG when ZKATTEST_TEST_LOG is set.
    """
    if env_flag("ZKATTEST_TEST_LOG", False):
        from zkattest.logging import setup_logging

        setup_logging(level="DEBUG", log_format="console")


configure_test_logging()

__all__ = [
    "TEST_ROOT",
    "word",
    "SUBSTRATE_TREE",
    "MIN_TREE",
    "BATCH_ROOTS",
    "OWNER",
    "OPERATOR",
    "OTHER",
    "HOST",
    "RELAYER",
    "env_flag",
    "configure_test_logging",
]
