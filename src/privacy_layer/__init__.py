"""privacy_layer - cryptographic core for private on-ledger voting.

- elgamal: additively homomorphic ElGamal on Ristretto255 with bounded decryption
- commitment: keccak-256 vote commitments
- nullifier: per-voter, per-election double-vote tags
- ledger / server: in-memory store and Flask API that consume the above
"""

from .commitment import commit_encrypted_vote, commit_vote, verify_commitment
from .elgamal import Ciphertext, Keypair, PublicKey, SecretKey, aggregate
from .errors import CryptoError, PrivacyError
from .nullifier import compute_nullifier, compute_nullifier_with_pubkey, verify_nullifier

__all__ = [
    "Ciphertext",
    "CryptoError",
    "Keypair",
    "PrivacyError",
    "PublicKey",
    "SecretKey",
    "aggregate",
    "commit_encrypted_vote",
    "commit_vote",
    "compute_nullifier",
    "compute_nullifier_with_pubkey",
    "verify_commitment",
    "verify_nullifier",
]
