from __future__ import annotations

import pytest

from locked_staking.state.canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex


def test_key_order_does_not_matter() -> None:
    assert canonical_json_bytes({"b": 1, "a": [2, 3]}) == canonical_json_bytes({"a": [2, 3], "b": 1})


def test_compact_utf8() -> None:
    assert canonical_json_bytes({"owner": "Ω", "n": 10**20}) == '{"n":100000000000000000000,"owner":"Ω"}'.encode("utf-8")


def test_floats_rejected() -> None:
    with pytest.raises(TypeError):
        canonical_json_bytes({"rate": 0.08})


def test_non_str_keys_rejected() -> None:
    with pytest.raises(TypeError):
        canonical_json_bytes({1: "x"})


def test_surrogates_rejected() -> None:
    with pytest.raises(TypeError):
        canonical_json_bytes({"owner": "\ud800"})


def test_sha256_hex_prefix() -> None:
    digest = sha256_hex(b"")
    assert digest == "0xe3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_domain_sep_bytes() -> None:
    assert domain_sep_bytes("pool_snapshot") == b"locked-staking:pool_snapshot:v1\x00"
    assert domain_sep_bytes("pool_snapshot", version=2) == b"locked-staking:pool_snapshot:v2\x00"


@pytest.mark.parametrize("label", ["", "bad\x00label", "ünicode"])
def test_domain_sep_rejects_bad_labels(label: str) -> None:
    with pytest.raises((TypeError, ValueError)):
        domain_sep_bytes(label)


def test_domain_sep_rejects_bad_version() -> None:
    with pytest.raises(ValueError):
        domain_sep_bytes("x", version=0)
