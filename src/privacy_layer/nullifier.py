"""Nullifiers: one deterministic tag per voter, election and nonce.

    nullifier = keccak256(voter_secret || election_id || nonce_le64)

The same voter voting twice in one election produces the same nullifier,
which the ledger detects. Different elections or different voters give
unrelated values, and the tag does not reveal the voter secret. The nonce is
normally 0; protocols that allow revoting can use it to mint distinct tags.
"""

import hmac
from typing import Union

from .config import DIGEST_BYTES, U64_MAX
from .errors import InvalidNullifierInputError
from .hashing import keccak256

BytesLike = Union[bytes, bytearray, memoryview]


def _check_32(value, what: str) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)) or len(value) != 32:
        raise InvalidNullifierInputError(f"{what} must be 32 bytes")
    return bytes(value)


def compute_nullifier(voter_secret: BytesLike, election_id: BytesLike, nonce: int = 0) -> bytes:
    if isinstance(nonce, bool) or not isinstance(nonce, int) or not 0 <= nonce <= U64_MAX:
        raise InvalidNullifierInputError("nonce must be an unsigned 64-bit integer")
    return keccak256(
        _check_32(voter_secret, "voter secret"),
        _check_32(election_id, "election id"),
        nonce.to_bytes(8, "little"),
    )


def compute_nullifier_with_pubkey(voter_secret: BytesLike, election_pubkey, nonce: int = 0) -> bytes:
    """Variant using the election's public key (bytes or PublicKey) as identifier."""
    if isinstance(election_pubkey, (int, str)):
        raise InvalidNullifierInputError("election public key must be bytes-like")
    if not isinstance(election_pubkey, (bytes, bytearray, memoryview)):
        try:
            election_pubkey = bytes(election_pubkey)
        except TypeError as e:
            raise InvalidNullifierInputError("election public key must be bytes-like") from e
    return compute_nullifier(voter_secret, election_pubkey, nonce)


def verify_nullifier(
    nullifier: BytesLike, voter_secret: BytesLike, election_id: BytesLike, nonce: int = 0
) -> bool:
    """True if `nullifier` was derived from these inputs; malformed tags never match."""
    expected = compute_nullifier(voter_secret, election_id, nonce)
    if not isinstance(nullifier, (bytes, bytearray, memoryview)) or len(nullifier) != DIGEST_BYTES:
        return False
    return hmac.compare_digest(expected, bytes(nullifier))
