"""Small CLI for interacting with the privacy-layer Flask server.

Usage examples:
    python cli.py keygen
    python cli.py create --election-id <hex> --public-key <hex> --ends-at 1767225600
    python cli.py cast --election-id <hex> --public-key <hex> --voter-secret <hex> --vote 1
    python cli.py tally --election-id <hex>
    python cli.py finalize --election-id <hex> --secret-key <hex>
    python cli.py check-nullifier --election-id <hex> --voter-secret <hex>
"""

import argparse
import secrets

import requests

from privacy_layer.client import prepare_vote
from privacy_layer.elgamal import Keypair, PublicKey, SecretKey
from privacy_layer.nullifier import compute_nullifier


BASE = "http://127.0.0.1:5000"


def keygen():
    # test/demo keys only; production keys come from a threshold key ceremony
    kp = Keypair.from_secret(SecretKey.from_bytes(secrets.token_bytes(32)))
    print({"public_key": kp.public.to_bytes().hex(), "secret_key": kp.secret.to_bytes().hex()})


def create(base: str, election_id: str, public_key: str, ends_at: int, num_options: int, merkle_root: str):
    r = requests.post(
        f"{base}/elections",
        json={
            "election_id": election_id,
            "public_key": public_key,
            "voter_merkle_root": merkle_root,
            "ends_at": ends_at,
            "num_options": num_options,
        },
        timeout=2,
    )
    print(r.json())


def cast(base: str, election_id: str, public_key: str, voter_secret: str, vote: int, nonce: int):
    commitment_randomness = secrets.token_bytes(32)
    sub = prepare_vote(
        vote,
        PublicKey.from_bytes(bytes.fromhex(public_key)),
        bytes.fromhex(voter_secret),
        bytes.fromhex(election_id),
        secrets.token_bytes(32),
        commitment_randomness,
        nonce,
    )
    r = requests.post(f"{base}/elections/{election_id}/votes", json=sub.to_dict(), timeout=2)
    print(r.json())
    # the voter needs this to open the commitment later
    print({"commitment_randomness": commitment_randomness.hex()})


def tally(base: str, election_id: str):
    r = requests.post(f"{base}/elections/{election_id}/tally", timeout=2)
    print(r.json())


def finalize(base: str, election_id: str, secret_key: str):
    r = requests.post(
        f"{base}/elections/{election_id}/finalize", json={"secret_key": secret_key}, timeout=30
    )
    print(r.json())


def check_nullifier(base: str, election_id: str, voter_secret: str, nonce: int):
    n = compute_nullifier(bytes.fromhex(voter_secret), bytes.fromhex(election_id), nonce)
    r = requests.get(f"{base}/elections/{election_id}/nullifiers/{n.hex()}", timeout=2)
    print(r.json())


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--base-url", default=BASE)
    sub = p.add_subparsers(dest="cmd")
    sub.add_parser("keygen")
    c = sub.add_parser("create")
    c.add_argument("--election-id", required=True)
    c.add_argument("--public-key", required=True)
    c.add_argument("--ends-at", type=int, required=True)
    c.add_argument("--num-options", type=int, default=2)
    c.add_argument("--merkle-root", default="00" * 32)
    v = sub.add_parser("cast")
    v.add_argument("--election-id", required=True)
    v.add_argument("--public-key", required=True)
    v.add_argument("--voter-secret", required=True)
    v.add_argument("--vote", type=int, required=True)
    v.add_argument("--nonce", type=int, default=0)
    t = sub.add_parser("tally")
    t.add_argument("--election-id", required=True)
    f = sub.add_parser("finalize")
    f.add_argument("--election-id", required=True)
    f.add_argument("--secret-key", required=True)
    n = sub.add_parser("check-nullifier")
    n.add_argument("--election-id", required=True)
    n.add_argument("--voter-secret", required=True)
    n.add_argument("--nonce", type=int, default=0)
    args = p.parse_args()
    if args.cmd == "keygen":
        keygen()
    elif args.cmd == "create":
        create(args.base_url, args.election_id, args.public_key, args.ends_at, args.num_options, args.merkle_root)
    elif args.cmd == "cast":
        cast(args.base_url, args.election_id, args.public_key, args.voter_secret, args.vote, args.nonce)
    elif args.cmd == "tally":
        tally(args.base_url, args.election_id)
    elif args.cmd == "finalize":
        finalize(args.base_url, args.election_id, args.secret_key)
    elif args.cmd == "check-nullifier":
        check_nullifier(args.base_url, args.election_id, args.voter_secret, args.nonce)
    else:
        p.print_help()


if __name__ == "__main__":
    main()
