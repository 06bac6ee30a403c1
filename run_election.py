"""Reference runner that walks through one private election end to end.

Run this script from the repository root (with the package installed, or
with src/ on PYTHONPATH) to run a small simulated election demo.
"""

import hashlib
import secrets

from privacy_layer.client import prepare_vote
from privacy_layer.commitment import verify_encrypted_vote_commitment
from privacy_layer.elgamal import Keypair, SecretKey
from privacy_layer.errors import NullifierAlreadyUsedError
from privacy_layer.ledger import Ledger
from privacy_layer.nullifier import verify_nullifier


def _print_heading(msg: str):
    print()
    print(msg)


def _print_kv(key: str, value):
    print(f"  {key}: {value}")


def main():
    now = {"t": 0.0}
    ledger = Ledger(clock=lambda: now["t"])

    _print_heading("[Setup] tally authority keypair + election")
    keypair = Keypair.from_secret(SecretKey.from_bytes(secrets.token_bytes(32)))
    election_id = hashlib.sha256(b"demo-election").digest()
    ledger.initialize_private_election(
        election_id,
        keypair.public,
        voter_merkle_root=secrets.token_bytes(32),
        ends_at=100.0,
        num_options=2,
    )
    _print_kv("election_id", election_id.hex()[:16])
    _print_kv("public_key", keypair.public.to_bytes().hex()[:16])

    _print_heading("[Cast] voters encrypt and submit (1 = yes, 0 = no)")
    ballots = {"alice": 1, "bob": 0, "carol": 1, "dave": 1}
    voter_secrets = {name: secrets.token_bytes(32) for name in ballots}
    receipts = {}
    for name, vote in ballots.items():
        commit_r = secrets.token_bytes(32)
        sub = prepare_vote(
            vote, keypair.public, voter_secrets[name], election_id, secrets.token_bytes(32), commit_r
        )
        ledger.cast_encrypted_vote(election_id, sub.ciphertext, sub.nullifier, sub.commitment)
        receipts[name] = (sub, commit_r)
        _print_kv(name, f"nullifier {sub.nullifier.hex()[:16]}")

    _print_heading("[Cast] alice tries to vote again")
    again = prepare_vote(
        0, keypair.public, voter_secrets["alice"], election_id, secrets.token_bytes(32), secrets.token_bytes(32)
    )
    try:
        ledger.cast_encrypted_vote(election_id, again.ciphertext, again.nullifier, again.commitment)
        _print_kv("second vote", "ACCEPTED (unexpected)")
    except NullifierAlreadyUsedError:
        _print_kv("second vote", "rejected, nullifier already used")

    _print_heading("[Verify] voters check their receipts")
    for name, (sub, commit_r) in receipts.items():
        ok_c = verify_encrypted_vote_commitment(sub.commitment, sub.ciphertext, commit_r)
        ok_n = verify_nullifier(sub.nullifier, voter_secrets[name], election_id)
        _print_kv(name, "OK" if ok_c and ok_n else "FAIL")

    _print_heading("[Tally] homomorphic aggregation + decryption")
    now["t"] = 100.0
    agg = ledger.request_tally(election_id)
    _print_kv("aggregate", agg.to_bytes().hex()[:32] + "...")
    result = ledger.finalize_tally(election_id, keypair.secret)
    _print_kv("yes votes", result)
    _print_kv("expected", sum(ballots.values()))
    print("\nVerification result:", "OK" if result == sum(ballots.values()) else "MISMATCH")


if __name__ == "__main__":
    main()
