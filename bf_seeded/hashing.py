"""Element signatures and base hash functions.

Every element is reduced to a deterministic byte *signature* which is then fed
to a single base hash (MurmurHash3 via mmh3 or xxHash64). Equal values must
produce equal signatures, so ``1``, ``1.0``, ``True`` and ``Decimal(1)`` all share one.

Types can opt in by defining ``__bloom_signature__()`` returning any value
this module already understands (bytes, str, int, tuple, ...).
"""
from __future__ import annotations

import numbers
import struct
from typing import Any, Callable, Dict, Optional

import mmh3
import xxhash

from .errors import UnhashableElementError

MAX_HASH_SEED = (1 << 32) - 1

_TAG_BYTES = b"b"
_TAG_STR = b"s"
_TAG_INT = b"i"
_TAG_FLOAT = b"f"
_TAG_TUPLE = b"t"
_TAG_FROZENSET = b"z"
_TAG_OBJECT = b"h"


def _encode_int(value: int) -> bytes:
    length = (value.bit_length() + 8) // 8
    return value.to_bytes(length, "little", signed=True)


def _length_prefixed(parts) -> bytes:
    out = bytearray()
    for part in parts:
        out += len(part).to_bytes(8, "little")
        out += part
    return bytes(out)


def _number_signature(item: numbers.Number) -> Optional[bytes]:
    # Decimal, Fraction, numpy scalars: reuse the int or float encoding when
    # the value equals one, so it matches the equal builtin number.
    if isinstance(item, numbers.Integral):
        return _TAG_INT + _encode_int(int(item))
    if isinstance(item, complex):
        return signature(item.real) if item.imag == 0 else None
    try:
        as_int = int(item)
    except (TypeError, ValueError, OverflowError):
        as_int = None
    if as_int is not None and as_int == item:
        return _TAG_INT + _encode_int(as_int)
    try:
        as_float = float(item)
    except (TypeError, ValueError, OverflowError):
        return None
    if as_float == item:
        return _TAG_FLOAT + struct.pack("<d", as_float)
    return None


def signature(item: Any) -> bytes:
    """Return the deterministic byte signature of ``item``.

    Raises:
        UnhashableElementError: If ``item`` is ``None`` or cannot be hashed.
    """
    if item is None:
        raise UnhashableElementError("cannot add or query None")

    if isinstance(item, (bytes, bytearray, memoryview)):
        return _TAG_BYTES + bytes(item)
    if isinstance(item, str):
        return _TAG_STR + item.encode("utf-8", errors="surrogatepass")
    if isinstance(item, int):
        return _TAG_INT + _encode_int(int(item))
    if isinstance(item, float):
        if item.is_integer():
            return _TAG_INT + _encode_int(int(item))
        return _TAG_FLOAT + struct.pack("<d", item)
    if isinstance(item, tuple):
        return _TAG_TUPLE + _length_prefixed(signature(member) for member in item)
    if isinstance(item, frozenset):
        members = sorted(signature(member) for member in item)
        return _TAG_FROZENSET + _length_prefixed(members)
    if isinstance(item, numbers.Number):
        encoded = _number_signature(item)
        if encoded is not None:
            return encoded

    hook = getattr(type(item), "__bloom_signature__", None)
    if hook is not None:
        return signature(hook(item))

    try:
        value = hash(item)
    except TypeError as exc:
        raise UnhashableElementError(
            f"unhashable element of type {type(item).__name__!r}"
        ) from exc
    return _TAG_OBJECT + _encode_int(value)


def _murmur3(data: bytes, seed: int) -> int:
    # Signed 32-bit output; negative base hashes are expected.
    return mmh3.hash(data, seed, signed=True)


def _xxh64(data: bytes, seed: int) -> int:
    return xxhash.xxh64(data, seed=seed).intdigest()


HASHERS: Dict[str, Callable[[bytes, int], int]] = {
    "murmur3": _murmur3,
    "xxh64": _xxh64,
}
DEFAULT_HASHER = "murmur3"


def base_hash(item: Any, hasher: str = DEFAULT_HASHER, seed: int = 0) -> int:
    """Hash ``item`` to a single integer with the named base hash."""
    return HASHERS[hasher](signature(item), seed)
