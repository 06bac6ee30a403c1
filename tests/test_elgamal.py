import pytest

from privacy_layer import group
from privacy_layer.elgamal import (
    Ciphertext,
    Keypair,
    PublicKey,
    SecretKey,
    aggregate,
    discrete_log,
)
from privacy_layer.errors import (
    CryptoArithmeticError,
    DecryptionFailedError,
    InvalidCiphertextError,
    InvalidPublicKeyError,
    InvalidSecretKeyError,
    SerializationError,
)

NOT_A_POINT = bytes.fromhex("01" + "00" * 31)


def test_keypair_from_secret():
    secret = SecretKey.from_bytes(bytes([7] * 32))
    kp = Keypair.from_secret(secret)
    expected = group.base_mul(group.scalar_from_bytes_mod_order(bytes([7] * 32)))
    assert kp.public.to_bytes() == group.compress(expected)
    assert kp.public.as_point() == expected
    assert kp.secret is secret


def test_secret_key_validation():
    with pytest.raises(InvalidSecretKeyError):
        SecretKey.from_bytes(bytes(31))
    with pytest.raises(InvalidSecretKeyError):
        SecretKey.from_bytes(bytes(32))
    with pytest.raises(InvalidSecretKeyError):
        SecretKey.from_bytes(group.ORDER.to_bytes(32, "little"))
    assert "redacted" in repr(SecretKey.from_bytes(bytes([1] * 32)))


def test_encryption_decryption(keypair, rand):
    ct = keypair.public.encrypt(42, rand())
    assert keypair.secret.decrypt(ct) == 42


@pytest.mark.parametrize("message", [0, 1, 7])
def test_roundtrip_small_messages(keypair, rand, message):
    ct = keypair.public.encrypt(message, rand())
    assert keypair.secret.decrypt(ct, bound=16) == message


def test_encryption_is_randomized(keypair, rand):
    a = keypair.public.encrypt(1, rand())
    b = keypair.public.encrypt(1, rand())
    assert a != b
    assert keypair.secret.decrypt(a, 4) == keypair.secret.decrypt(b, 4) == 1


def test_encryption_is_deterministic_given_randomness(keypair):
    r = bytes([9] * 32)
    assert keypair.public.encrypt(3, r) == keypair.public.encrypt(3, r)


def test_homomorphic_addition(keypair, rand):
    c1 = keypair.public.encrypt(10, rand())
    c2 = keypair.public.encrypt(32, rand())
    assert keypair.secret.decrypt(c1.add(c2)) == 42
    # commutative
    assert c1.add(c2) == c2.add(c1)


def test_homomorphic_addition_is_associative(keypair, rand):
    a, b, c = (keypair.public.encrypt(m, rand()) for m in (3, 4, 5))
    left = a.add(b).add(c)
    assert left == a.add(b.add(c))
    assert keypair.secret.decrypt(left, bound=16) == 12


def test_scalar_multiplication(keypair, rand):
    ct = keypair.public.encrypt(5, rand())
    assert keypair.secret.decrypt(ct.mul_scalar(3)) == 15
    assert keypair.secret.decrypt(ct.mul_scalar(0), bound=2) == 0


def test_aggregate_tally(keypair, rand):
    votes = [1, 0, 1, 1, 0]
    cts = [keypair.public.encrypt(v, rand()) for v in votes]
    assert keypair.secret.decrypt(aggregate(cts), bound=len(votes) + 1) == 3
    assert keypair.secret.decrypt(aggregate([]), bound=1) == 0


def test_decryption_fails_at_bound(keypair, rand):
    ct = keypair.public.encrypt(50, rand())
    with pytest.raises(DecryptionFailedError):
        keypair.secret.decrypt(ct, bound=50)
    assert keypair.secret.decrypt(ct, bound=51) == 50


def test_decryption_fails_above_bound_bsgs(keypair, rand):
    ct = keypair.public.encrypt(300, rand())
    with pytest.raises(DecryptionFailedError):
        keypair.secret.decrypt(ct, bound=300)
    assert keypair.secret.decrypt(ct, bound=301) == 300


def test_wrong_key_does_not_decrypt(keypair, rand):
    other = Keypair.from_secret(SecretKey.from_bytes(rand()))
    ct = keypair.public.encrypt(3, rand())
    with pytest.raises(DecryptionFailedError):
        other.secret.decrypt(ct, bound=64)


@pytest.mark.parametrize("k", [0, 1, 63, 64, 65, 137, 999])
def test_discrete_log_search_strategies(k):
    target = group.base_mul(group.scalar_from_int(k))
    assert discrete_log(target, bound=1000) == k
    if k < 64:
        assert discrete_log(target, bound=64) == k


def test_discrete_log_bound_validation():
    with pytest.raises(CryptoArithmeticError):
        discrete_log(group.IDENTITY, bound=0)


def test_message_range(keypair, rand):
    with pytest.raises(CryptoArithmeticError):
        keypair.public.encrypt(-1, rand())
    with pytest.raises(CryptoArithmeticError):
        keypair.public.encrypt(2**64, rand())
    with pytest.raises(SerializationError):
        keypair.public.encrypt(1, bytes(16))


def test_public_key_serialization(keypair):
    raw = keypair.public.to_bytes()
    assert len(raw) == 32
    assert PublicKey.from_bytes(raw) == keypair.public
    assert bytes(keypair.public) == raw


def test_public_key_rejects_invalid_point():
    with pytest.raises(InvalidPublicKeyError):
        PublicKey.from_bytes(NOT_A_POINT)
    with pytest.raises(InvalidPublicKeyError):
        PublicKey.from_bytes(b"\xff" * 32)
    with pytest.raises(InvalidPublicKeyError):
        PublicKey.from_bytes(bytes(32))
    with pytest.raises(InvalidPublicKeyError):
        PublicKey(NOT_A_POINT).encrypt(1, bytes(32))


def test_ciphertext_serialization(keypair, rand):
    ct = keypair.public.encrypt(4, rand())
    raw = ct.to_bytes()
    assert len(raw) == 64
    assert raw[:32] == ct.c1 and raw[32:] == ct.c2
    assert Ciphertext.from_bytes(raw) == ct
    assert bytes(ct) == raw


def test_ciphertext_rejects_invalid_components(keypair, rand):
    good = keypair.public.encrypt(1, rand())
    with pytest.raises(InvalidCiphertextError):
        Ciphertext.from_bytes(good.c1 + NOT_A_POINT)
    with pytest.raises(SerializationError):
        Ciphertext.from_bytes(good.to_bytes()[:63])

    bad = Ciphertext(NOT_A_POINT, good.c2)
    with pytest.raises(InvalidCiphertextError):
        keypair.secret.decrypt(bad)
    with pytest.raises(InvalidCiphertextError):
        good.add(bad)
    with pytest.raises(InvalidCiphertextError):
        bad.mul_scalar(2)


def test_mul_scalar_range(keypair, rand):
    ct = keypair.public.encrypt(1, rand())
    with pytest.raises(CryptoArithmeticError):
        ct.mul_scalar(-2)


def test_zero_ciphertext_is_neutral(keypair, rand):
    ct = keypair.public.encrypt(6, rand())
    assert ct.add(Ciphertext.zero()) == ct
