from __future__ import annotations

import json
import logging

import pytest
import structlog
from typer.testing import CliRunner

from zkattest.cli import app
from zkattest.tests import SUBSTRATE_TREE

runner = CliRunner()


@pytest.fixture(autouse=True)
def _detach_cli_logging():
    """The app callback installs a stderr handler bound to the runner's stream."""
    yield
    logger = logging.getLogger("zkattest")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True
    structlog.reset_defaults()

ROOT = "0x" + SUBSTRATE_TREE["root"].hex()
LEAVES = ["0x" + leaf.hex() for leaf in SUBSTRATE_TREE["leaves"]]
PROOF6 = ["0x" + p.hex() for p in SUBSTRATE_TREE["proofs"][6]]


def _json(result) -> dict:
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout.strip().splitlines()[-1])


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.startswith("zkattest ")


def test_statement_hash_groth16():
    out = _json(
        runner.invoke(
            app,
            [
                "statement-hash",
                "groth16",
                "--vk",
                "0x03cd0bc2734df75ba69a2328fa4bac1bc4981c6942a421826d36e6cb00318df7",
                "--json",
                "42",
                "24",
            ],
        )
    )
    assert out["leaf"] == "0xabb62e0715075b88517eaae0aee8671d38804ba75d1c133feec6836c443ab3a4"


def test_statement_hash_risc0():
    out = _json(
        runner.invoke(
            app,
            [
                "statement-hash",
                "risc0",
                "--vk",
                "0x2addbbeb4ddb2f2ec2b4a0a8a21c03f7d3bf42cfd2ee9f4a69d2ebd9974218b6",
                "--version",
                "risc0:v1.1",
                "--json",
                "0x8105000000000000",
            ],
        )
    )
    assert out["leaf"] == "0x1478ead484979edb8644274b3a0435b10bed35e0e5e0d1efa2732af3ac6e666c"
    assert out["version"] == "risc0:v1.1"


def test_statement_hash_unknown_version_exits_2():
    result = runner.invoke(
        app, ["statement-hash", "risc0", "--vk", "0x" + "00" * 32, "--version", "risc0:v7", "0x01"]
    )
    assert result.exit_code == 2


def test_encode_inputs():
    out = _json(runner.invoke(app, ["encode-inputs", "ultraplonk", "--json", "1", "2"]))
    assert out["encoded"] == "0x" + (1).to_bytes(32, "big").hex() + (2).to_bytes(32, "big").hex()
    out = _json(runner.invoke(app, ["encode-inputs", "groth16", "--json"]))
    assert out["encoded"] == "0x"


def test_unknown_system_exits_2():
    assert runner.invoke(app, ["encode-inputs", "stark", "1"]).exit_code == 2


def test_merkle_root():
    out = _json(runner.invoke(app, ["merkle-root", "--json", *LEAVES]))
    assert out == {"leaf_count": 7, "root": ROOT}


def test_merkle_root_table():
    result = runner.invoke(app, ["merkle-root", *LEAVES])
    assert result.exit_code == 0
    assert "Merkle root" in result.stdout


def test_merkle_proof():
    out = _json(runner.invoke(app, ["merkle-proof", "--index", "6", "--json", *LEAVES]))
    assert out["path"] == PROOF6
    assert out["root"] == ROOT


def test_merkle_proof_out_of_bounds_exits_2():
    assert runner.invoke(app, ["merkle-proof", "--index", "7", *LEAVES]).exit_code == 2


def test_verify_inclusion():
    args = ["verify-inclusion", "--root", ROOT, "--leaf", LEAVES[6], "--leaf-count", "7", "--index", "6", "--json"]
    out = _json(runner.invoke(app, [*args, *PROOF6]))
    assert out["included"] is True

    miss = runner.invoke(app, ["verify-inclusion", "--root", ROOT, "--leaf", LEAVES[0], "--leaf-count", "7", "--index", "6", "--json", *PROOF6])
    assert miss.exit_code == 1


def test_verify_inclusion_bad_input_exits_2():
    bad_leaf = runner.invoke(app, ["verify-inclusion", "--root", ROOT, "--leaf", "0x1234", "--leaf-count", "7", "--index", "6", *PROOF6])
    assert bad_leaf.exit_code == 2
    oob = runner.invoke(app, ["verify-inclusion", "--root", ROOT, "--leaf", LEAVES[0], "--leaf-count", "7", "--index", "8"])
    assert oob.exit_code == 2
