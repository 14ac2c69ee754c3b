"""
Deterministic encodings behind pool ids, order ids and the ledger root.

- Identifiers hash ``domain_sep_bytes(label) + canonical_json_bytes(payload)``.
- The ledger root frames its sections with LEB128 varints (zigzag for signed
  ticks and pending amounts) and length-prefixed byte strings.
"""

from __future__ import annotations

import hashlib
import json
import re
from typing import Any


_DOMAIN = b"takeprofit"
_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def _check_text(s: str) -> None:
    if any(0xD800 <= ord(ch) <= 0xDFFF for ch in s):
        raise TypeError("surrogate code points cannot be canonically encoded")


def _check_value(value: Any) -> None:
    """Walk a JSON payload, rejecting floats, non-str keys and surrogates."""
    if isinstance(value, float):
        raise TypeError("floats cannot be canonically encoded")
    if isinstance(value, str):
        _check_text(value)
    elif isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError("payload keys must be str")
            _check_text(key)
            _check_value(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_value(item)


def canonical_json_bytes(value: Any) -> bytes:
    """UTF-8 JSON with sorted keys and no whitespace; ints, strs, bools, None, lists and dicts only."""
    _check_value(value)
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    return "0x" + hashlib.sha256(data).hexdigest()


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """``b"takeprofit:<label>:v<version>\\x00"``; ASCII only, NUL-terminated."""
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if not label.isascii() or "\x00" in label:
        raise ValueError(f"label must be ASCII without NUL: {label!r}")
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError(f"version must be a positive int: {version!r}")
    return b"%s:%s:v%d\x00" % (_DOMAIN, label.encode("ascii"), version)


def encode_uvarint(value: int) -> bytes:
    """Unsigned LEB128."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"uvarint must be a non-negative int, got {value!r}")
    out = bytearray()
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def encode_svarint(value: int) -> bytes:
    """Zigzag then LEB128: 0, -1, 1, -2, ... map to 0, 1, 2, 3, ..."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"svarint must be an int, got {value!r}")
    return encode_uvarint(value * 2 if value >= 0 else -value * 2 - 1)


def encode_bytes(value: bytes) -> bytes:
    """Length-prefixed byte string."""
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError("value must be bytes")
    return encode_uvarint(len(value)) + bytes(value)


def encode_str(value: str) -> bytes:
    if not isinstance(value, str):
        raise TypeError("value must be a str")
    _check_text(value)
    return encode_bytes(value.encode("utf-8"))


def hex_to_bytes_fixed(hex_str: str, *, nbytes: int, name: str) -> bytes:
    """Decode a ``0x``-prefixed id of exactly `nbytes` bytes (pool and order ids)."""
    if not isinstance(hex_str, str):
        raise TypeError(f"{name} must be a str")
    body = hex_str[2:] if hex_str.startswith("0x") else None
    if body is None or len(body) != 2 * nbytes or not _HEX_RE.fullmatch(body):
        raise ValueError(f"{name} must be 0x followed by {2 * nbytes} hex digits: {hex_str!r}")
    return bytes.fromhex(body)
