import hashlib
import hmac

from payledger.utils.hashing import generate_signature, verify_signature

SECRET = b"s3cr3t"


def test_signature_is_hex_hmac_sha256_of_order_pipe_payment():
    expected = hmac.new(SECRET, b"order_1|pay_1", hashlib.sha256).hexdigest()

    assert generate_signature("order_1", "pay_1", SECRET) == expected
    assert verify_signature("order_1", "pay_1", expected, SECRET)


def test_wrong_signature_is_rejected():
    assert not verify_signature("order_1", "pay_1", "deadbeef", SECRET)


def test_signature_is_bound_to_order_payment_pair_and_secret():
    signature = generate_signature("order_1", "pay_1", SECRET)

    assert not verify_signature("order_2", "pay_1", signature, SECRET)
    assert not verify_signature("order_1", "pay_2", signature, SECRET)
    assert not verify_signature("order_1", "pay_1", signature, b"other-secret")
    assert not verify_signature("order_1", "pay_1", signature.upper(), SECRET)


def test_non_ascii_signature_does_not_raise():
    assert not verify_signature("order_1", "pay_1", "é" * 64, SECRET)
