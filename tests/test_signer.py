import hashlib
import hmac

from amritacare.services.auth import signer


def test_sign_is_hex_hmac_sha256():
    tag = signer.sign(b'{"a":1}', "S")
    assert tag == hmac.new(b"S", b'{"a":1}', hashlib.sha256).hexdigest()
    assert len(tag) == 64


def test_verify_accepts_matching_tag():
    tag = signer.sign(b"payload", "secret")
    assert signer.verify(b"payload", "secret", tag) is True


def test_verify_rejects_other_secret_or_payload():
    tag = signer.sign(b"payload", "secret")
    assert signer.verify(b"payload", "other", tag) is False
    assert signer.verify(b"payload!", "secret", tag) is False


def test_verify_rejects_wrong_length_and_non_ascii_candidates():
    tag = signer.sign(b"payload", "secret")
    assert signer.verify(b"payload", "secret", tag[:-1]) is False
    assert signer.verify(b"payload", "secret", tag + "0") is False
    assert signer.verify(b"payload", "secret", "") is False
    assert signer.verify(b"payload", "secret", "é" * 64) is False


def test_verify_is_case_sensitive_hex():
    tag = signer.sign(b"payload", "secret")
    assert signer.verify(b"payload", "secret", tag.upper()) is (tag == tag.upper())
