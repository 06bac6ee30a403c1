"""Minimal Flask API in front of an in-memory Ledger.

Endpoints (all bytes travel as hex strings):
- POST /elections -> create a private election
- GET /elections/<election_id> -> election summary
- POST /elections/<election_id>/votes -> cast {"ciphertext", "nullifier", "commitment"}
- GET /elections/<election_id>/nullifiers/<nullifier> -> {"used": bool}
- POST /elections/<election_id>/tally -> close the election, return the aggregate ciphertext
- POST /elections/<election_id>/finalize -> decrypt the aggregate with {"secret_key"}

DECRYPTION_BOUND can be overridden with the PRIVACY_LAYER_DECRYPTION_BOUND
environment variable.
"""

from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from . import config
from .elgamal import Ciphertext, SecretKey
from .errors import (
    CryptoError,
    DecryptionFailedError,
    ElectionEndedError,
    ElectionExistsError,
    ElectionNotActiveError,
    ElectionNotEndedError,
    ElectionNotFoundError,
    InvalidElectionConfigError,
    NullifierAlreadyUsedError,
    TallyAlreadyFinalizedError,
    TallyAlreadyRequestedError,
    TallyNotRequestedError,
)
from .ledger import Ledger


app = Flask(__name__)
app.config.update(DECRYPTION_BOUND=config.DECRYPTION_BOUND)
app.config.from_prefixed_env("PRIVACY_LAYER")

_LEDGER = Ledger(decryption_bound=int(app.config["DECRYPTION_BOUND"]))


def _json_body() -> Optional[Dict[str, Any]]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def _hex_field(data: Dict[str, Any], name: str) -> Optional[bytes]:
    value = data.get(name)
    if not isinstance(value, str):
        return None
    try:
        return bytes.fromhex(value)
    except ValueError:
        return None


def _hex_arg(value: str) -> Optional[bytes]:
    try:
        return bytes.fromhex(value)
    except ValueError:
        return None


@app.errorhandler(ElectionNotFoundError)
def _not_found(e):
    return jsonify({"error": "unknown election"}), 404


@app.route("/elections", methods=["POST"])
def create_election():
    data = _json_body()
    if data is None:
        return jsonify({"error": "request body must be a JSON object"}), 400
    election_id = _hex_field(data, "election_id")
    public_key = _hex_field(data, "public_key")
    merkle_root = _hex_field(data, "voter_merkle_root")
    ends_at = data.get("ends_at")
    num_options = data.get("num_options", 2)
    if None in (election_id, public_key, merkle_root) or not isinstance(ends_at, (int, float)):
        return jsonify({"error": "missing or invalid fields"}), 400
    try:
        election = _LEDGER.initialize_private_election(
            election_id,
            public_key,
            merkle_root,
            ends_at,
            num_options,
            authority=data.get("authority"),
        )
    except ElectionExistsError:
        return jsonify({"error": "election already exists"}), 409
    except (CryptoError, InvalidElectionConfigError) as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"status": "initialized", "election": election.summary()}), 201


@app.route("/elections/<election_id>", methods=["GET"])
def get_election(election_id: str):
    eid = _hex_arg(election_id)
    if eid is None:
        return jsonify({"error": "election id must be hex"}), 400
    return jsonify(_LEDGER.get(eid).summary())


@app.route("/elections/<election_id>/votes", methods=["POST"])
def cast_vote(election_id: str):
    """Cast an encrypted vote.

    Expects JSON with hex fields: {"ciphertext": c1||c2, "nullifier": ..., "commitment": ...}
    """
    eid = _hex_arg(election_id)
    data = _json_body()
    if data is None:
        return jsonify({"error": "request body must be a JSON object"}), 400
    raw_ct = _hex_field(data, "ciphertext")
    nullifier = _hex_field(data, "nullifier")
    commitment = _hex_field(data, "commitment")
    if None in (eid, raw_ct, nullifier, commitment):
        return jsonify({"error": "missing or invalid fields"}), 400
    try:
        ciphertext = Ciphertext.from_bytes(raw_ct)
        vote = _LEDGER.cast_encrypted_vote(eid, ciphertext, nullifier, commitment)
    except NullifierAlreadyUsedError as e:
        return jsonify({"error": str(e)}), 409
    except (ElectionNotActiveError, ElectionEndedError) as e:
        return jsonify({"error": "election is not accepting votes", "detail": str(e)}), 403
    except (CryptoError, InvalidElectionConfigError) as e:
        return jsonify({"error": str(e)}), 400
    return (
        jsonify(
            {
                "status": "cast",
                "nullifier": vote.nullifier.hex(),
                "total_encrypted_votes": _LEDGER.get(eid).total_encrypted_votes,
            }
        ),
        201,
    )


@app.route("/elections/<election_id>/nullifiers/<nullifier>", methods=["GET"])
def check_nullifier(election_id: str, nullifier: str):
    eid = _hex_arg(election_id)
    n = _hex_arg(nullifier)
    if eid is None or n is None:
        return jsonify({"error": "ids must be hex"}), 400
    return jsonify({"used": _LEDGER.is_nullifier_used(eid, n)})


@app.route("/elections/<election_id>/tally", methods=["POST"])
def request_tally(election_id: str):
    eid = _hex_arg(election_id)
    if eid is None:
        return jsonify({"error": "election id must be hex"}), 400
    try:
        agg = _LEDGER.request_tally(eid)
    except ElectionNotEndedError:
        return jsonify({"error": "election has not ended yet"}), 403
    except (TallyAlreadyRequestedError, TallyAlreadyFinalizedError) as e:
        return jsonify({"error": "tally already requested", "detail": str(e)}), 409
    return jsonify({"aggregate": agg.to_bytes().hex()})


@app.route("/elections/<election_id>/finalize", methods=["POST"])
def finalize_tally(election_id: str):
    eid = _hex_arg(election_id)
    data = _json_body()
    if data is None:
        return jsonify({"error": "request body must be a JSON object"}), 400
    secret = _hex_field(data, "secret_key")
    if eid is None or secret is None:
        return jsonify({"error": "missing or invalid fields"}), 400
    try:
        result = _LEDGER.finalize_tally(eid, SecretKey.from_bytes(secret))
    except TallyNotRequestedError:
        return jsonify({"error": "tally not requested yet"}), 409
    except TallyAlreadyFinalizedError:
        return jsonify({"error": "tally already finalized"}), 409
    except DecryptionFailedError as e:
        return jsonify({"error": "decryption failed", "detail": str(e)}), 422
    except CryptoError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"tally": result})


if __name__ == "__main__":
    app.run(debug=True)
