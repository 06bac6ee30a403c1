"""Hash commitments to votes.

commit_vote binds a voter to a vote without revealing it:

    commitment = keccak256(vote || blinding)

The blinding factor must be 32 random bytes kept by the voter; without it
the commitment leaks nothing about the vote, and with it anyone can check the
opening. commit_encrypted_vote binds to an already encrypted vote instead.
"""

import hmac
from typing import Union

from .config import DIGEST_BYTES
from .errors import InvalidCommitmentInputError
from .hashing import keccak256

BytesLike = Union[bytes, bytearray, memoryview]


def _check_randomness(value: BytesLike, what: str) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)) or len(value) != 32:
        raise InvalidCommitmentInputError(f"{what} must be 32 bytes")
    return bytes(value)


def commit_vote(vote: int, blinding: BytesLike) -> bytes:
    if isinstance(vote, bool) or not isinstance(vote, int) or not 0 <= vote <= 255:
        raise InvalidCommitmentInputError("vote must be an integer in [0, 255]")
    return keccak256(bytes([vote]), _check_randomness(blinding, "blinding factor"))


def _is_digest(value) -> bool:
    return isinstance(value, (bytes, bytearray, memoryview)) and len(value) == DIGEST_BYTES


def verify_commitment(commitment: BytesLike, vote: int, blinding: BytesLike) -> bool:
    """Check that `commitment` opens to (vote, blinding).

    A commitment that is not a 32-byte string never verifies.
    """
    expected = commit_vote(vote, blinding)
    return _is_digest(commitment) and hmac.compare_digest(expected, bytes(commitment))


def commit_encrypted_vote(encrypted_vote, randomness: BytesLike) -> bytes:
    """Commit to the serialized ciphertext.

    `encrypted_vote` is raw bytes or anything with a bytes() form such as
    elgamal.Ciphertext (which serializes to c1 || c2).
    """
    if isinstance(encrypted_vote, (int, str)):
        raise InvalidCommitmentInputError("encrypted vote must be bytes-like")
    try:
        data = bytes(encrypted_vote)
    except TypeError as e:
        raise InvalidCommitmentInputError("encrypted vote must be bytes-like") from e
    return keccak256(data, _check_randomness(randomness, "randomness"))


def verify_encrypted_vote_commitment(
    commitment: BytesLike, encrypted_vote, randomness: BytesLike
) -> bool:
    expected = commit_encrypted_vote(encrypted_vote, randomness)
    return _is_digest(commitment) and hmac.compare_digest(expected, bytes(commitment))
