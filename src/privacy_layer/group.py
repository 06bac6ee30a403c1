"""Ristretto255 group arithmetic.

Thin layer over ``oblivious.ristretto``: points are kept in their canonical
32-byte encoding, scalars as 32-byte little-endian residues modulo the group
order. Decoding is done with ``ge25519`` so that untrusted bytes are rejected
before they reach any arithmetic (``oblivious`` maps invalid inputs to
all-zero outputs instead of failing).

The module keeps no state; every function is pure.
"""

from typing import Union

import ge25519
from oblivious.ristretto import point, scalar

from .config import POINT_BYTES, SCALAR_BYTES
from .errors import InvalidCurvePointError, SerializationError

ORDER = 2**252 + 27742317777372353535851937790883648493
_FIELD_PRIME = 2**255 - 19

BytesLike = Union[bytes, bytearray, memoryview]


def _is_canonical(bs: bytes) -> bool:
    # s must be a reduced field element and non-negative (even)
    s = int.from_bytes(bs, "little")
    return s < _FIELD_PRIME and s & 1 == 0


## --- scalars ---------------------------------------------------------------


def scalar_from_int(i: int) -> scalar:
    return scalar.from_int(i)


def scalar_from_bytes_mod_order(bs: BytesLike) -> scalar:
    """Interpret 32 little-endian bytes as an integer and reduce it mod ORDER.

    Never fails on 32-byte input; any other length is a SerializationError.
    """
    if not isinstance(bs, (bytes, bytearray, memoryview)) or len(bs) != SCALAR_BYTES:
        raise SerializationError(f"scalar must be {SCALAR_BYTES} bytes")
    return scalar.from_int(int.from_bytes(bytes(bs), "little"))


def scalar_is_zero(s: scalar) -> bool:
    return not any(s)


## --- points ----------------------------------------------------------------


IDENTITY = point(bytes(POINT_BYTES))


def decompress(bs: BytesLike) -> point:
    """Decode a compressed point, failing closed on anything that is not a
    canonical encoding of a group element."""
    if not isinstance(bs, (bytes, bytearray, memoryview)) or len(bs) != POINT_BYTES:
        raise InvalidCurvePointError(f"point must be {POINT_BYTES} bytes")
    raw = bytes(bs)
    if not _is_canonical(raw):
        raise InvalidCurvePointError("non-canonical encoding")
    if ge25519.ge25519_p3.from_bytes_ristretto255(raw) is None:
        raise InvalidCurvePointError("bytes do not encode a ristretto255 element")
    return point(raw)


def compress(p: point) -> bytes:
    return bytes(p)


def add(p: point, q: point) -> point:
    return p + q


def sub(p: point, q: point) -> point:
    return p - q


def mul(s: scalar, p: point) -> point:
    # libsodium refuses to emit the identity, so both degenerate cases are
    # answered here
    if scalar_is_zero(s) or p == IDENTITY:
        return IDENTITY
    return s * p


def base_mul(s: scalar) -> point:
    if scalar_is_zero(s):
        return IDENTITY
    return point.base(s)


GENERATOR = base_mul(scalar_from_int(1))
