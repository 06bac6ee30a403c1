"""Keccak-256, the hash behind commitments and nullifiers."""

from Crypto.Hash import keccak


def keccak256(*chunks: bytes) -> bytes:
    """Return the 32-byte Keccak-256 digest of the concatenated chunks."""
    h = keccak.new(digest_bits=256)
    for chunk in chunks:
        h.update(bytes(chunk))
    return h.digest()
