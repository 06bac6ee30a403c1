"""Additively homomorphic (exponential) ElGamal over Ristretto255.

A message m is encoded as the group element m*G, so that adding ciphertexts
component-wise yields an encryption of the sum of the messages:

    Enc(m, r) = (r*G, m*G + r*Y)        with Y = x*G the public key

Decryption recovers m*G = c2 - x*c1 and then searches a bounded range for
m. This is only correct for small non-negative plaintexts (single votes and
their tallies); the bound has to exceed the largest sum that will be
decrypted, otherwise decryption fails with DecryptionFailedError.

Randomness is never drawn here: callers pass 32 fresh random bytes to every
encryption and must not reuse them under the same key.
"""

from dataclasses import dataclass
from math import isqrt
from typing import Dict, Iterable

from . import group
from .config import (
    CIPHERTEXT_BYTES,
    DECRYPTION_BOUND,
    LINEAR_SEARCH_LIMIT,
    POINT_BYTES,
    SCALAR_BYTES,
    U64_MAX,
)
from .errors import (
    CryptoArithmeticError,
    DecryptionFailedError,
    InvalidCiphertextError,
    InvalidCurvePointError,
    InvalidPublicKeyError,
    InvalidSecretKeyError,
    SerializationError,
)

DEFAULT_DECRYPTION_BOUND = DECRYPTION_BOUND


def _check_u64(value: int, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CryptoArithmeticError(f"{what} must be an integer")
    if not 0 <= value <= U64_MAX:
        raise CryptoArithmeticError(f"{what} must fit in an unsigned 64-bit integer")
    return value


## --- bounded discrete log -------------------------------------------------


def _discrete_log_small(target: group.point, bound: int) -> int:
    cur = group.IDENTITY
    for i in range(bound):
        if cur == target:
            return i
        cur = group.add(cur, group.GENERATOR)
    raise DecryptionFailedError(f"plaintext not in [0, {bound})")


def _discrete_log_bsgs(target: group.point, bound: int) -> int:
    """Baby-step giant-step: find k in [0, bound) with k*G == target."""
    m = isqrt(bound - 1) + 1

    # Baby steps: j*G -> j for j in [0, m)
    baby: Dict[bytes, int] = {}
    cur = group.IDENTITY
    for j in range(m):
        if cur == target:
            return j
        baby[group.compress(cur)] = j
        cur = group.add(cur, group.GENERATOR)

    # cur is now m*G; walk target - i*m*G looking for a baby step
    giant = cur
    gamma = target
    for i in range((bound + m - 1) // m):
        j = baby.get(group.compress(gamma))
        if j is not None:
            k = i * m + j
            if k < bound:
                return k
            break
        gamma = group.sub(gamma, giant)
    raise DecryptionFailedError(f"plaintext not in [0, {bound})")


def discrete_log(target: group.point, bound: int = DEFAULT_DECRYPTION_BOUND) -> int:
    """Return the unique k in [0, bound) with k*G == target.

    Small bounds are scanned linearly, larger ones use baby-step/giant-step.
    Raises DecryptionFailedError when no such k exists.
    """
    if isinstance(bound, bool) or not isinstance(bound, int) or bound < 1:
        raise CryptoArithmeticError("decryption bound must be a positive integer")
    if bound <= LINEAR_SEARCH_LIMIT:
        return _discrete_log_small(target, bound)
    return _discrete_log_bsgs(target, bound)


## --- ciphertexts ------------------------------------------------------------


@dataclass(frozen=True)
class Ciphertext:
    """ElGamal ciphertext as two compressed points, serialized as c1 || c2.

    The constructor stores bytes as given; components are validated whenever
    they are used (add, mul_scalar, decrypt) or when built via from_bytes /
    from_components.
    """

    c1: bytes
    c2: bytes

    @classmethod
    def from_components(cls, c1: bytes, c2: bytes) -> "Ciphertext":
        try:
            group.decompress(c1)
            group.decompress(c2)
        except InvalidCurvePointError as e:
            raise InvalidCiphertextError(e.detail) from e
        return cls(bytes(c1), bytes(c2))

    @classmethod
    def from_bytes(cls, data: bytes) -> "Ciphertext":
        if not isinstance(data, (bytes, bytearray, memoryview)) or len(data) != CIPHERTEXT_BYTES:
            raise SerializationError(f"ciphertext must be {CIPHERTEXT_BYTES} bytes")
        data = bytes(data)
        return cls.from_components(data[:POINT_BYTES], data[POINT_BYTES:])

    @classmethod
    def from_points(cls, c1: group.point, c2: group.point) -> "Ciphertext":
        return cls(group.compress(c1), group.compress(c2))

    @classmethod
    def zero(cls) -> "Ciphertext":
        """Neutral element of ciphertext addition (decrypts to 0)."""
        return cls.from_points(group.IDENTITY, group.IDENTITY)

    def to_bytes(self) -> bytes:
        return self.c1 + self.c2

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def as_points(self):
        try:
            return group.decompress(self.c1), group.decompress(self.c2)
        except InvalidCurvePointError as e:
            raise InvalidCiphertextError(e.detail) from e

    def add(self, other: "Ciphertext") -> "Ciphertext":
        """Homomorphic addition: Enc(m1) + Enc(m2) = Enc(m1 + m2)."""
        a1, a2 = self.as_points()
        b1, b2 = other.as_points()
        return Ciphertext.from_points(group.add(a1, b1), group.add(a2, b2))

    def mul_scalar(self, k: int) -> "Ciphertext":
        """Homomorphic scalar multiplication: k * Enc(m) = Enc(k * m)."""
        _check_u64(k, "scalar")
        c1, c2 = self.as_points()
        s = group.scalar_from_int(k)
        return Ciphertext.from_points(group.mul(s, c1), group.mul(s, c2))


def aggregate(ciphertexts: Iterable[Ciphertext]) -> Ciphertext:
    """Homomorphically sum ciphertexts; an empty iterable gives Ciphertext.zero()."""
    total = Ciphertext.zero()
    for ct in ciphertexts:
        total = total.add(ct)
    return total


## --- keys -------------------------------------------------------------------


@dataclass(frozen=True)
class PublicKey:
    point: bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> "PublicKey":
        try:
            p = group.decompress(data)
        except InvalidCurvePointError as e:
            raise InvalidPublicKeyError(e.detail) from e
        if p == group.IDENTITY:
            raise InvalidPublicKeyError("identity point")
        return cls(bytes(data))

    def to_bytes(self) -> bytes:
        return self.point

    def __bytes__(self) -> bytes:
        return self.point

    def as_point(self) -> group.point:
        try:
            return group.decompress(self.point)
        except InvalidCurvePointError as e:
            raise InvalidPublicKeyError(e.detail) from e

    def encrypt(self, message: int, randomness: bytes) -> Ciphertext:
        """Encrypt a small non-negative integer with caller-supplied randomness.

        c1 = r*G, c2 = m*G + r*Y where r is randomness reduced mod the group
        order. The same randomness must never be used twice under one key.
        """
        _check_u64(message, "message")
        y = self.as_point()
        r = group.scalar_from_bytes_mod_order(randomness)
        m = group.scalar_from_int(message)

        c1 = group.base_mul(r)
        c2 = group.add(group.base_mul(m), group.mul(r, y))
        return Ciphertext.from_points(c1, c2)


@dataclass(frozen=True, repr=False)
class SecretKey:
    scalar: bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> "SecretKey":
        if not isinstance(data, (bytes, bytearray, memoryview)) or len(data) != SCALAR_BYTES:
            raise InvalidSecretKeyError(f"secret key must be {SCALAR_BYTES} bytes")
        if group.scalar_is_zero(group.scalar_from_bytes_mod_order(data)):
            raise InvalidSecretKeyError("secret scalar is zero")
        return cls(bytes(data))

    def __repr__(self) -> str:
        return "SecretKey(<redacted>)"

    def to_bytes(self) -> bytes:
        return self.scalar

    def as_scalar(self) -> group.scalar:
        try:
            return group.scalar_from_bytes_mod_order(self.scalar)
        except SerializationError as e:
            raise InvalidSecretKeyError(e.detail) from e

    def decrypt(self, ciphertext: Ciphertext, bound: int = DEFAULT_DECRYPTION_BOUND) -> int:
        """Recover the plaintext of `ciphertext` if it lies in [0, bound).

        Raises InvalidCiphertextError for undecodable components and
        DecryptionFailedError when the plaintext is outside the bound.
        """
        c1, c2 = ciphertext.as_points()
        x = self.as_scalar()
        m_point = group.sub(c2, group.mul(x, c1))
        return discrete_log(m_point, bound)


@dataclass(frozen=True)
class Keypair:
    public: PublicKey
    secret: SecretKey

    @classmethod
    def from_secret(cls, secret: SecretKey) -> "Keypair":
        y = group.base_mul(secret.as_scalar())
        return cls(public=PublicKey(group.compress(y)), secret=secret)
