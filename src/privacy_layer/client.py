"""Voter-side helper: build everything needed to cast one encrypted vote."""

from dataclasses import dataclass
from typing import Any, Dict

from .commitment import commit_encrypted_vote
from .elgamal import Ciphertext, PublicKey
from .nullifier import compute_nullifier


@dataclass(frozen=True)
class VoteSubmission:
    ciphertext: Ciphertext
    nullifier: bytes
    commitment: bytes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ciphertext": self.ciphertext.to_bytes().hex(),
            "nullifier": self.nullifier.hex(),
            "commitment": self.commitment.hex(),
        }


def prepare_vote(
    vote: int,
    public_key: PublicKey,
    voter_secret: bytes,
    election_id: bytes,
    encryption_randomness: bytes,
    commitment_randomness: bytes,
    nonce: int = 0,
) -> VoteSubmission:
    """Encrypt `vote`, derive the voter's nullifier and commit to the ciphertext.

    Both randomness arguments must be fresh 32-byte values from a CSPRNG;
    the voter keeps commitment_randomness to open the commitment later.
    """
    ciphertext = public_key.encrypt(vote, encryption_randomness)
    nullifier = compute_nullifier(voter_secret, election_id, nonce)
    commitment = commit_encrypted_vote(ciphertext, commitment_randomness)
    return VoteSubmission(ciphertext=ciphertext, nullifier=nullifier, commitment=commitment)
