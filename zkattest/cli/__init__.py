"""
zkattest.cli
============

Command-line tools for building and checking attestation data offline.

Commands
--------
- encode-inputs     : canonical public-input bytes for a proof system
- statement-hash    : the leaf a proof system's statement maps to
- merkle-root       : root of the tree over the given leaves
- merkle-proof      : sibling path for one leaf
- verify-inclusion  : check a (leaf, path, leaf count, index) claim against a root

Every command prints a rich table by default, or JSON with ``--json``.
Malformed input (bad hex, unknown system or version, index out of bounds)
exits with status 2.

Usage
-----
    zkattest statement-hash groth16 --vk 0x03cd...8df7 42 24
    zkattest merkle-proof --index 6 0x..01 0x..02 0x..03
    python -m zkattest.cli verify-inclusion --root 0x.. --leaf 0x.. --leaf-count 7 --index 6 0x.. 0x..
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from zkattest.errors import ZkAttestError
from zkattest.hashing import to_hex
from zkattest.logging import setup_logging
from zkattest.merkle import merkle_proof, merkle_root, verify_inclusion
from zkattest.statements import ProvingSystem, Risc0Statement, hasher_for, normalize_system
from zkattest.version import __version__

app = typer.Typer(
    name="zkattest",
    help="Statement hashes and Merkle inclusion tools for zkVerify attestations",
    no_args_is_help=True,
    add_completion=False,
)


# ----------------- helpers -----------------


def _fail(err: ZkAttestError) -> None:
    typer.echo(f"error: {err.message}", err=True)
    raise typer.Exit(code=2)


def _emit(title: str, rows: Dict[str, Any], as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(rows, sort_keys=True))
        return
    t = Table(title=title, box=box.SIMPLE)
    t.add_column("Field")
    t.add_column("Value", overflow="fold")
    for k, v in rows.items():
        if isinstance(v, list):
            v = "\n".join(str(x) for x in v) or "(empty)"
        t.add_row(k, str(v))
    Console().print(t)


def _public_inputs(system: ProvingSystem, inputs: List[str]) -> Any:
    if system is ProvingSystem.RISC0:
        if len(inputs) > 1:
            raise typer.BadParameter("risc0 takes a single journal hex string")
        return inputs[0] if inputs else b""
    return inputs


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"zkattest {__version__}")
        raise typer.Exit(0)


# ----------------- CLI -----------------


@app.callback()
def _meta(
    version: bool = typer.Option(
        False, "--version", "-V", help="Print version and exit", is_eager=True, callback=_print_version
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override ZKATTEST_LOG_LEVEL"),
) -> None:
    setup_logging(level=log_level.upper() if log_level else None)


@app.command("encode-inputs")
def encode_inputs(
    system: str = typer.Argument(..., help="groth16 | ultraplonk | risc0"),
    inputs: Optional[List[str]] = typer.Argument(None, help="Public inputs (decimal or 0x-hex), or the risc0 journal"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
) -> None:
    """Print the canonical public-input encoding."""
    try:
        ps = normalize_system(system)
        encoded = hasher_for(ps).encode_public_inputs(_public_inputs(ps, inputs or []))
    except ZkAttestError as e:
        _fail(e)
    _emit("Public inputs", {"system": ps.value, "encoded": to_hex(encoded)}, as_json)


@app.command("statement-hash")
def statement_hash(
    system: str = typer.Argument(..., help="groth16 | ultraplonk | risc0"),
    inputs: Optional[List[str]] = typer.Argument(None, help="Public inputs, or the risc0 journal"),
    vk: str = typer.Option(..., "--vk", help="Verification key hash (risc0: image id), 0x-hex"),
    version: Optional[str] = typer.Option(None, "--version", help="Version tag, e.g. risc0:v1.0"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
) -> None:
    """Print the statement hash (leaf) for a proof system's statement."""
    try:
        ps = normalize_system(system)
        hasher = hasher_for(ps)
        pubs = _public_inputs(ps, inputs or [])
        if isinstance(hasher, Risc0Statement):
            leaf = hasher.statement_hash(vk, version or "", pubs)
        else:
            hasher.version_hash(version)
            leaf = hasher.statement_hash(vk, pubs)
    except ZkAttestError as e:
        _fail(e)
    rows: Dict[str, Any] = {"system": ps.value, "vk": vk, "leaf": to_hex(leaf)}
    if version:
        rows["version"] = version
    _emit("Statement hash", rows, as_json)


@app.command("merkle-root")
def root_cmd(
    leaves: List[str] = typer.Argument(..., help="32-byte leaves, 0x-hex"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
) -> None:
    """Print the root of the tree over LEAVES."""
    try:
        root = merkle_root(leaves)
    except ZkAttestError as e:
        _fail(e)
    _emit("Merkle root", {"leaf_count": len(leaves), "root": to_hex(root)}, as_json)


@app.command("merkle-proof")
def proof_cmd(
    leaves: List[str] = typer.Argument(..., help="32-byte leaves, 0x-hex"),
    index: int = typer.Option(..., "--index", "-i", help="Leaf index"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
) -> None:
    """Print the sibling path for the leaf at --index."""
    try:
        proof = merkle_proof(leaves, index)
        root = merkle_root(leaves)
    except ZkAttestError as e:
        _fail(e)
    _emit(
        "Merkle proof",
        {
            "root": to_hex(root),
            "leaf": to_hex(proof.leaf),
            "leaf_count": proof.leaf_count,
            "index": proof.index,
            "path": [to_hex(p) for p in proof.path],
        },
        as_json,
    )


@app.command("verify-inclusion")
def verify_cmd(
    path: Optional[List[str]] = typer.Argument(None, help="Sibling digests, bottom level first"),
    root: str = typer.Option(..., "--root", help="Aggregation root, 0x-hex"),
    leaf: str = typer.Option(..., "--leaf", help="Leaf (statement hash), 0x-hex"),
    leaf_count: int = typer.Option(..., "--leaf-count", help="Number of leaves in the tree"),
    index: int = typer.Option(..., "--index", "-i", help="Leaf index"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
) -> None:
    """Check inclusion; exits 1 when the leaf is not included."""
    try:
        ok = verify_inclusion(root, leaf, path or [], leaf_count, index)
    except ZkAttestError as e:
        _fail(e)
    _emit("Inclusion", {"root": root, "leaf": leaf, "index": index, "included": ok}, as_json)
    if not ok:
        raise typer.Exit(code=1)


def main() -> None:  # pragma: no cover
    app()


__all__ = ["app", "main", "__version__"]
