"""
Byte encoding behind pool snapshot commitments.

A snapshot commitment is

    sha256(b"locked-staking:<label>:v<version>\\x00" + canonical_json(data))

where ``data`` holds only ints, strings, None, lists and string-keyed dicts.
Equal pool states therefore commit to equal digests.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def _check_str(s: str) -> None:
    # Lone surrogates cannot be encoded as UTF-8.
    if any(0xD800 <= ord(ch) <= 0xDFFF for ch in s):
        raise TypeError("surrogate code points are not allowed in snapshot data")


def _check_value(value: Any) -> None:
    if isinstance(value, float):
        raise TypeError("floats are not allowed in snapshot data")
    if isinstance(value, str):
        _check_str(value)
    elif isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError(f"snapshot keys must be str, got {type(k).__name__}")
            _check_str(k)
            _check_value(v)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_value(item)


def canonical_json_bytes(value: Any) -> bytes:
    """UTF-8 JSON with sorted keys and no whitespace; amounts stay exact ints."""
    _check_value(value)
    text = json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    return text.encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """``0x``-prefixed hex digest, the form snapshot commitments are published in."""
    return "0x" + hashlib.sha256(data).hexdigest()


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """Prefix tying a digest to one snapshot kind and format version.

    Raises:
        TypeError: ``label`` is not a non-empty str.
        ValueError: ``label`` is not ASCII or contains NUL, or ``version`` is
            not a positive int.
    """
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if "\x00" in label or not label.isascii():
        raise ValueError(f"label must be ASCII without NUL: {label!r}")
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return b"locked-staking:" + label.encode("ascii") + b":v" + str(version).encode("ascii") + b"\x00"
