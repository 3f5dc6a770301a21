"""
Statement hash tests
- Golden leaves for Groth16, UltraPlonk and RISC Zero v1.0 / v1.1
- Public input encoding: reversed words, plain words, raw journal
- Version handling: word systems unversioned, closed RISC Zero tag set
- Proving-system aliases and namespace separation
"""

from __future__ import annotations

import pytest

from zkattest.errors import InvalidInput, UnsupportedVersion
from zkattest.hashing import keccak256, keccak256_concat, sha256
from zkattest.statements import (
    NO_VERSION_HASH,
    RISC0_VERSIONS,
    Groth16Statement,
    ProvingSystem,
    Risc0Statement,
    UltraplonkStatement,
    hasher_for,
    normalize_system,
    proving_system_id,
)

W0 = "0x000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f"
W1 = "0x00112233445566778899aabbccddeeff00112233445566778899aabbccddeeff"


def _h(s: str) -> bytes:
    return bytes.fromhex(s[2:])


# ----------------------------- golden statement hashes -----------------------------


def test_groth16_statement_hash():
    leaf = Groth16Statement().statement_hash(
        "0x03cd0bc2734df75ba69a2328fa4bac1bc4981c6942a421826d36e6cb00318df7", ["42", "24"]
    )
    assert leaf == _h("0xabb62e0715075b88517eaae0aee8671d38804ba75d1c133feec6836c443ab3a4")


def test_ultraplonk_statement_hash():
    leaf = UltraplonkStatement().statement_hash(
        "0x7488c9f50af6d975b9707036995772e1f8d0b68dcd46174413321e674bdf331f", ["1", "2"]
    )
    assert leaf == _h("0x4e2b5c9cbc025e50d5f117a70d479db60d7144ef728b43f307bc3606fdcdba4d")


@pytest.mark.parametrize(
    "version, vk, journal, expected",
    [
        (
            "risc0:v1.0",
            "0x32e1a33f3988c3cdf127e709cc0323a258b28df750b7a2d5ddc4c5e37f007d99",
            "0x01000078",
            "0x76082d85afb6dd62d982e672365143d9eee6e2640e60ef75e5cd1911748b4c1c",
        ),
        (
            "risc0:v1.1",
            "0x2addbbeb4ddb2f2ec2b4a0a8a21c03f7d3bf42cfd2ee9f4a69d2ebd9974218b6",
            "0x8105000000000000",
            "0x1478ead484979edb8644274b3a0435b10bed35e0e5e0d1efa2732af3ac6e666c",
        ),
    ],
)
def test_risc0_statement_hash(version, vk, journal, expected):
    assert Risc0Statement().statement_hash(vk, version, journal) == _h(expected)


def test_word_systems_hash_without_a_version_segment():
    vk = _h("0x03cd0bc2734df75ba69a2328fa4bac1bc4981c6942a421826d36e6cb00318df7")
    g = Groth16Statement()
    pubs = g.encode_public_inputs(["42", "24"])
    expected = keccak256_concat((keccak256(b"groth16"), vk, keccak256(pubs)))
    assert g.statement_hash(vk, ["42", "24"]) == expected
    padded = keccak256_concat((keccak256(b"groth16"), vk, sha256(b""), keccak256(pubs)))
    assert g.statement_hash(vk, ["42", "24"]) != padded


def test_integer_and_hex_inputs_agree():
    vk = "0x03cd0bc2734df75ba69a2328fa4bac1bc4981c6942a421826d36e6cb00318df7"
    g = Groth16Statement()
    assert g.statement_hash(vk, ["42", "24"]) == g.statement_hash(vk, [42, "0x18"])


# ----------------------------- public input encoding -----------------------------


def test_groth16_encoding_reverses_each_word():
    out = Groth16Statement().encode_public_inputs([W0, W1])
    assert out.hex() == (
        "1f1e1d1c1b1a191817161514131211100f0e0d0c0b0a09080706050403020100"
        "ffeeddccbbaa99887766554433221100ffeeddccbbaa99887766554433221100"
    )


def test_ultraplonk_encoding_is_concatenation():
    out = UltraplonkStatement().encode_public_inputs([W0, W1])
    assert out == _h(W0) + _h(W1)


@pytest.mark.parametrize("hasher", [Groth16Statement(), UltraplonkStatement()])
def test_empty_inputs_encode_to_nothing(hasher):
    assert hasher.encode_public_inputs([]) == b""


def test_risc0_journal_is_unchanged():
    assert Risc0Statement().encode_public_inputs("0x01000078") == b"\x01\x00\x00\x78"
    assert Risc0Statement().encode_public_inputs(b"\xff") == b"\xff"


def test_word_inputs_reject_a_bare_string():
    with pytest.raises(InvalidInput):
        Groth16Statement().encode_public_inputs("42")


def test_word_inputs_reject_oversized_values():
    with pytest.raises(InvalidInput):
        UltraplonkStatement().encode_public_inputs([1 << 256])


def test_word_inputs_reject_garbage():
    with pytest.raises(InvalidInput):
        UltraplonkStatement().encode_public_inputs(["forty-two"])


# ----------------------------- versions -----------------------------


def test_version_hashes():
    assert NO_VERSION_HASH == b""
    r = Risc0Statement()
    assert r.versions == RISC0_VERSIONS
    for v in RISC0_VERSIONS:
        assert r.version_hash(v) == sha256(v.encode())


def test_risc0_versions_are_not_interchangeable():
    r = Risc0Statement()
    vk = "0x32e1a33f3988c3cdf127e709cc0323a258b28df750b7a2d5ddc4c5e37f007d99"
    leaves = {r.statement_hash(vk, v, "0x01000078") for v in RISC0_VERSIONS}
    assert len(leaves) == len(RISC0_VERSIONS)


def test_unknown_risc0_version_fails():
    with pytest.raises(UnsupportedVersion):
        Risc0Statement().statement_hash(b"\x00" * 32, "risc0:v9.9", b"")


def test_word_systems_are_unversioned():
    assert Groth16Statement().version_hash(None) == NO_VERSION_HASH
    with pytest.raises(UnsupportedVersion):
        Groth16Statement().version_hash("v2")


# ----------------------------- lookup -----------------------------


@pytest.mark.parametrize(
    "alias, system",
    [
        ("groth16", ProvingSystem.GROTH16),
        ("G16", ProvingSystem.GROTH16),
        ("ultra-plonk", ProvingSystem.ULTRAPLONK),
        ("UltraPlonk", ProvingSystem.ULTRAPLONK),
        ("risc0", ProvingSystem.RISC0),
        ("risc_zero", ProvingSystem.RISC0),
    ],
)
def test_aliases(alias, system):
    assert normalize_system(alias) is system
    assert hasher_for(alias).system is system


def test_unknown_system():
    with pytest.raises(InvalidInput):
        hasher_for("stark")


def test_systems_are_namespace_distinct():
    ids = {proving_system_id(p) for p in ProvingSystem}
    assert len(ids) == 3
    assert proving_system_id(ProvingSystem.GROTH16) == keccak256(b"groth16")
    vk = b"\x07" * 32
    assert Groth16Statement().statement_hash(vk, []) != UltraplonkStatement().statement_hash(vk, [])
