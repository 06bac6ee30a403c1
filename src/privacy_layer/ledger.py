"""In-memory ledger for private elections.

The cryptographic core only produces ciphertexts, nullifiers and commitments;
this module is the collaborator that stores them. It keeps, per election:
- the election configuration (public key, voter merkle root, end time),
- the set of spent nullifiers, which is what actually blocks double voting,
- the list of encrypted votes, summed homomorphically at tally time.

Eligibility proofs (merkle membership and nullifier correctness) are not
checked here; casting trusts the caller on those points.
"""

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set, Union

from .config import DECRYPTION_BOUND, DIGEST_BYTES
from .elgamal import Ciphertext, Keypair, PublicKey, SecretKey, aggregate
from .errors import (
    ElectionEndedError,
    ElectionExistsError,
    ElectionNotActiveError,
    ElectionNotEndedError,
    ElectionNotFoundError,
    InvalidCommitmentInputError,
    InvalidCiphertextError,
    InvalidElectionConfigError,
    InvalidNullifierInputError,
    InvalidSecretKeyError,
    NullifierAlreadyUsedError,
    TallyAlreadyFinalizedError,
    TallyAlreadyRequestedError,
    TallyNotRequestedError,
)

logger = logging.getLogger(__name__)


class ElectionStatus(enum.Enum):
    ACTIVE = "active"
    ENDED = "ended"
    FINALIZED = "finalized"


class NullifierSet:
    """Spent nullifiers of one election."""

    def __init__(self):
        self._nullifiers: Set[bytes] = set()

    def contains(self, nullifier: bytes) -> bool:
        return bytes(nullifier) in self._nullifiers

    def insert(self, nullifier: bytes) -> None:
        if self.contains(nullifier):
            raise NullifierAlreadyUsedError("nullifier already used - double voting not allowed")
        self._nullifiers.add(bytes(nullifier))

    def __contains__(self, nullifier: bytes) -> bool:
        return self.contains(nullifier)

    def __len__(self) -> int:
        return len(self._nullifiers)


@dataclass
class EncryptedVote:
    election_id: bytes
    ciphertext: Ciphertext
    nullifier: bytes
    commitment: bytes
    timestamp: float


@dataclass
class PrivateElection:
    election_id: bytes
    public_key: PublicKey
    voter_merkle_root: bytes
    ends_at: float
    num_options: int
    created_at: float
    authority: Optional[str] = None
    status: ElectionStatus = ElectionStatus.ACTIVE
    total_encrypted_votes: int = 0
    tally_requested: bool = False
    tally_finalized: bool = False
    result: Optional[int] = None
    nullifiers: NullifierSet = field(default_factory=NullifierSet, repr=False)
    votes: List[EncryptedVote] = field(default_factory=list, repr=False)

    def summary(self) -> Dict[str, object]:
        return {
            "election_id": self.election_id.hex(),
            "public_key": self.public_key.to_bytes().hex(),
            "voter_merkle_root": self.voter_merkle_root.hex(),
            "authority": self.authority,
            "created_at": self.created_at,
            "ends_at": self.ends_at,
            "num_options": self.num_options,
            "status": self.status.value,
            "total_encrypted_votes": self.total_encrypted_votes,
            "tally_requested": self.tally_requested,
            "tally_finalized": self.tally_finalized,
            "result": self.result,
        }


def _check_digest(value: bytes, what: str, error=InvalidElectionConfigError) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)) or len(value) != DIGEST_BYTES:
        raise error(f"{what} must be {DIGEST_BYTES} bytes")
    return bytes(value)


class Ledger:
    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        decryption_bound: int = DECRYPTION_BOUND,
    ):
        self.clock = clock
        self.decryption_bound = decryption_bound
        self._elections: Dict[bytes, PrivateElection] = {}

    def get(self, election_id: bytes) -> PrivateElection:
        try:
            return self._elections[bytes(election_id)]
        except KeyError:
            raise ElectionNotFoundError(bytes(election_id).hex()) from None

    def initialize_private_election(
        self,
        election_id: bytes,
        public_key: bytes,
        voter_merkle_root: bytes,
        ends_at: float,
        num_options: int,
        authority: Optional[str] = None,
    ) -> PrivateElection:
        election_id = _check_digest(election_id, "election id")
        voter_merkle_root = _check_digest(voter_merkle_root, "voter merkle root")
        if isinstance(public_key, PublicKey):
            public_key = public_key.to_bytes()
        pk = PublicKey.from_bytes(public_key)
        if isinstance(num_options, bool) or not isinstance(num_options, int) or not 1 <= num_options <= 255:
            raise InvalidElectionConfigError("num_options must be in [1, 255]")
        if election_id in self._elections:
            raise ElectionExistsError(election_id.hex())

        election = PrivateElection(
            election_id=election_id,
            public_key=pk,
            voter_merkle_root=voter_merkle_root,
            ends_at=ends_at,
            num_options=num_options,
            created_at=self.clock(),
            authority=authority,
        )
        self._elections[election_id] = election
        logger.info("private election initialized: %s", election_id.hex())
        return election

    def is_nullifier_used(self, election_id: bytes, nullifier: bytes) -> bool:
        return self.get(election_id).nullifiers.contains(nullifier)

    def cast_encrypted_vote(
        self,
        election_id: bytes,
        ciphertext: Union[Ciphertext, bytes],
        nullifier: bytes,
        commitment: bytes,
    ) -> EncryptedVote:
        """Store one encrypted vote after the status, deadline and nullifier checks."""
        election = self.get(election_id)
        if election.status is not ElectionStatus.ACTIVE:
            raise ElectionNotActiveError(election.status.value)
        now = self.clock()
        if now >= election.ends_at:
            raise ElectionEndedError(election.election_id.hex())

        # re-validate, the ciphertext may have been built from raw bytes
        if isinstance(ciphertext, (bytes, bytearray, memoryview)):
            ciphertext = Ciphertext.from_bytes(ciphertext)
        elif isinstance(ciphertext, Ciphertext):
            ciphertext = Ciphertext.from_components(ciphertext.c1, ciphertext.c2)
        else:
            raise InvalidCiphertextError("expected a Ciphertext or its 64-byte encoding")
        nullifier = _check_digest(nullifier, "nullifier", InvalidNullifierInputError)
        commitment = _check_digest(commitment, "commitment", InvalidCommitmentInputError)
        if election.nullifiers.contains(nullifier):
            raise NullifierAlreadyUsedError("nullifier already used - double voting not allowed")

        vote = EncryptedVote(
            election_id=election.election_id,
            ciphertext=ciphertext,
            nullifier=nullifier,
            commitment=commitment,
            timestamp=now,
        )
        election.votes.append(vote)
        election.nullifiers.insert(nullifier)
        election.total_encrypted_votes += 1
        logger.info(
            "encrypted vote cast: election=%s nullifier=%s total=%d",
            election.election_id.hex(),
            nullifier.hex(),
            election.total_encrypted_votes,
        )
        return vote

    def aggregate(self, election_id: bytes) -> Ciphertext:
        return aggregate(v.ciphertext for v in self.get(election_id).votes)

    def request_tally(self, election_id: bytes) -> Ciphertext:
        """Close the election and return the homomorphic sum of its votes."""
        election = self.get(election_id)
        if election.tally_finalized:
            raise TallyAlreadyFinalizedError(election.election_id.hex())
        if election.tally_requested:
            raise TallyAlreadyRequestedError(election.election_id.hex())
        if self.clock() < election.ends_at:
            raise ElectionNotEndedError(election.election_id.hex())

        election.tally_requested = True
        election.status = ElectionStatus.ENDED
        logger.info("tally requested: %s", election.election_id.hex())
        return self.aggregate(election_id)

    def finalize_tally(
        self, election_id: bytes, secret_key: SecretKey, bound: Optional[int] = None
    ) -> int:
        election = self.get(election_id)
        if election.tally_finalized:
            raise TallyAlreadyFinalizedError(election.election_id.hex())
        if not election.tally_requested:
            raise TallyNotRequestedError(election.election_id.hex())
        if Keypair.from_secret(secret_key).public != election.public_key:
            raise InvalidSecretKeyError("secret key does not match the election public key")

        result = secret_key.decrypt(
            self.aggregate(election_id),
            self.decryption_bound if bound is None else bound,
        )
        election.result = result
        election.tally_finalized = True
        election.status = ElectionStatus.FINALIZED
        logger.info("tally finalized: %s result=%d", election.election_id.hex(), result)
        return result
