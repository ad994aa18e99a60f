"""
GridCache — world/luck.py
Deterministic Value Source: seed sequence -> float in [0, 1).
==============================================================
Version:     0.1
Stack:       Python 3.11+ | stdlib only
Status:      Canonical. Pure functions, no module state.

Architecture notes
------------------
- A seed is an ordered sequence of primitives. It is encoded to a stable
  comma-joined string, hashed with MurmurHash3 (x86, 32-bit) and divided by
  HASH_RANGE (2**32) so the result is always strictly below 1.0.
- Identical sequences give bit-identical results on every platform and in
  every process. Python's builtin hash() is NOT used (PYTHONHASHSEED).
- Two seed compositions exist and must not be mixed up:
    value_seed(x, y)  -> (x, y, VALUE_SALT)   cell value selection
    spawn_seed(x, y)  -> (x, y)               spawn eligibility
"""

from __future__ import annotations

from typing import Iterable, Tuple, Union

SeedPart = Union[int, float, str, bool, None]

HASH_RANGE: int = 2 ** 32
VALUE_SALT: str = "initialValue"

_MASK32 = 0xFFFFFFFF
_C1 = 0xCC9E2D51
_C2 = 0x1B873593


def _rotl32(x: int, r: int) -> int:
    return ((x << r) | (x >> (32 - r))) & _MASK32


def _fmix32(h: int) -> int:
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & _MASK32
    h ^= h >> 16
    return h


def murmur3_32(data: bytes, seed: int = 0) -> int:
    """MurmurHash3 x86_32. Returns an unsigned 32-bit int."""
    length = len(data)
    h = seed & _MASK32
    block_end = length - (length % 4)

    for i in range(0, block_end, 4):
        k = data[i] | (data[i + 1] << 8) | (data[i + 2] << 16) | (data[i + 3] << 24)
        k = (k * _C1) & _MASK32
        k = _rotl32(k, 15)
        k = (k * _C2) & _MASK32
        h ^= k
        h = _rotl32(h, 13)
        h = (h * 5 + 0xE6546B64) & _MASK32

    tail = data[block_end:]
    k = 0
    if len(tail) >= 3:
        k ^= tail[2] << 16
    if len(tail) >= 2:
        k ^= tail[1] << 8
    if tail:
        k ^= tail[0]
        k = (k * _C1) & _MASK32
        k = _rotl32(k, 15)
        k = (k * _C2) & _MASK32
        h ^= k

    h ^= length
    return _fmix32(h)


def _encode_part(part: SeedPart) -> str:
    if part is None:
        return ""
    if isinstance(part, bool):
        return "true" if part else "false"
    if isinstance(part, float) and part.is_integer():
        # 3.0 and 3 must seed identically
        return str(int(part))
    return str(part)


def encode_seed(parts: Iterable[SeedPart]) -> str:
    """Stable textual form of a seed sequence, e.g. (3, -4, "x") -> "3,-4,x"."""
    return ",".join(_encode_part(p) for p in parts)


def luck(parts: Iterable[SeedPart]) -> float:
    """Pure hash of a seed sequence normalized into [0, 1)."""
    return murmur3_32(encode_seed(parts).encode("utf-8")) / HASH_RANGE


def value_seed(x: int, y: int) -> Tuple[SeedPart, ...]:
    """Salted seed used for initial cell value selection."""
    return (x, y, VALUE_SALT)


def spawn_seed(x: int, y: int) -> Tuple[SeedPart, ...]:
    """Unsalted, coordinate-only seed used for spawn eligibility."""
    return (x, y)
