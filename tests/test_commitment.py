import pytest

from privacy_layer.commitment import (
    commit_encrypted_vote,
    commit_vote,
    verify_commitment,
    verify_encrypted_vote_commitment,
)
from privacy_layer.errors import InvalidCommitmentInputError
from privacy_layer.hashing import keccak256


def test_keccak256_empty_vector():
    # Keccak-256, not NIST SHA3-256
    assert keccak256().hex() == (
        "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    )


def test_commitment_deterministic():
    blinding = bytes([42] * 32)
    c1 = commit_vote(1, blinding)
    c2 = commit_vote(1, blinding)
    assert c1 == c2
    assert len(c1) == 32
    assert c1 == keccak256(bytes([1]) + blinding)


def test_commitment_different_votes():
    blinding = bytes([42] * 32)
    assert commit_vote(0, blinding) != commit_vote(1, blinding)


def test_commitment_different_blinding():
    assert commit_vote(1, bytes([1] * 32)) != commit_vote(1, bytes([2] * 32))


def test_verify_commitment():
    vote = 3
    blinding = bytes([123] * 32)
    commitment = commit_vote(vote, blinding)

    assert verify_commitment(commitment, vote, blinding) is True
    assert verify_commitment(commitment, vote + 1, blinding) is False
    assert verify_commitment(commitment, vote, bytes([124] * 32)) is False
    assert verify_commitment(commitment[:31], vote, blinding) is False


@pytest.mark.parametrize("vote", [-1, 256, True, "1"])
def test_commit_vote_rejects_bad_vote(vote):
    with pytest.raises(InvalidCommitmentInputError):
        commit_vote(vote, bytes(32))


def test_commit_vote_rejects_bad_blinding():
    with pytest.raises(InvalidCommitmentInputError):
        commit_vote(1, bytes(16))


def test_encrypted_vote_commitment():
    data = bytes([1, 2, 3, 4, 5])
    randomness = bytes([99] * 32)
    c1 = commit_encrypted_vote(data, randomness)
    assert c1 == commit_encrypted_vote(data, randomness)
    assert c1 != commit_encrypted_vote(bytes([1, 2, 3, 4, 6]), randomness)
    assert verify_encrypted_vote_commitment(c1, data, randomness) is True
    assert verify_encrypted_vote_commitment(c1, data, bytes([98] * 32)) is False


def test_encrypted_vote_commitment_accepts_ciphertext(keypair):
    ct = keypair.public.encrypt(1, bytes([5] * 32))
    randomness = bytes([7] * 32)
    assert commit_encrypted_vote(ct, randomness) == commit_encrypted_vote(
        ct.to_bytes(), randomness
    )


@pytest.mark.parametrize("bad", [32, "abc"])
def test_encrypted_vote_commitment_rejects_non_bytes(bad):
    with pytest.raises(InvalidCommitmentInputError):
        commit_encrypted_vote(bad, bytes(32))


@pytest.mark.parametrize("bad", ["ab" * 16, 5, None, bytes(31), bytes(33)])
def test_verify_rejects_malformed_commitment(bad):
    blinding = bytes([7] * 32)
    assert verify_commitment(bad, 1, blinding) is False
    assert verify_encrypted_vote_commitment(bad, bytes(64), blinding) is False
