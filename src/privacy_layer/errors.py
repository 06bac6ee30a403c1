"""Error types raised by the privacy layer.

Two families live here:
- CryptoError and subclasses: raised by the cryptographic core (group,
  elgamal, commitment, nullifier) when inputs are malformed or a bounded
  operation cannot complete. Malformed bytes are rejected before any curve
  arithmetic is attempted.
- PrivacyError and subclasses: raised by the in-memory ledger that stores
  encrypted votes and spent nullifiers.
"""


class CryptoError(ValueError):
    """Base class for failures of the cryptographic core."""

    message = "crypto error"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(f"{self.message}: {detail}" if detail else self.message)


class InvalidPublicKeyError(CryptoError):
    message = "Invalid public key"


class InvalidSecretKeyError(CryptoError):
    message = "Invalid secret key"


class InvalidCiphertextError(CryptoError):
    message = "Invalid ciphertext"


class DecryptionFailedError(CryptoError):
    """The plaintext is not within the decryption search bound."""

    message = "Decryption failed"


class InvalidCurvePointError(CryptoError):
    message = "Invalid point on curve"


class SerializationError(CryptoError):
    message = "Serialization error"


class InvalidNullifierInputError(CryptoError):
    message = "Invalid nullifier input"


class InvalidCommitmentInputError(CryptoError):
    message = "Invalid commitment input"


class CryptoArithmeticError(CryptoError, ArithmeticError):
    message = "Arithmetic error"


## --- ledger errors --------------------------------------------------------


class PrivacyError(Exception):
    """Base class for ledger-side rejections."""


class NullifierAlreadyUsedError(PrivacyError):
    pass


class ElectionNotFoundError(PrivacyError, KeyError):
    pass


class ElectionExistsError(PrivacyError):
    pass


class ElectionNotActiveError(PrivacyError):
    pass


class ElectionEndedError(PrivacyError):
    pass


class ElectionNotEndedError(PrivacyError):
    pass


class TallyAlreadyRequestedError(PrivacyError):
    pass


class TallyNotRequestedError(PrivacyError):
    pass


class TallyAlreadyFinalizedError(PrivacyError):
    pass


class InvalidElectionConfigError(PrivacyError, ValueError):
    pass
