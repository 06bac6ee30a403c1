"""Default parameters shared by the core and the host service."""

# Upper bound (exclusive) of the plaintext search performed by decryption.
# Must exceed the largest homomorphic sum that will ever be decrypted,
# e.g. number_of_voters * max_vote_weight.
DECRYPTION_BOUND = 10_000

# Bounds up to this size are searched linearly; larger ones use
# baby-step/giant-step.
LINEAR_SEARCH_LIMIT = 64

POINT_BYTES = 32
SCALAR_BYTES = 32
DIGEST_BYTES = 32
CIPHERTEXT_BYTES = 2 * POINT_BYTES

U64_MAX = 2**64 - 1
