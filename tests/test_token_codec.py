import base64
import json

import pytest

from amritacare.exceptions import MalformedTokenError
from amritacare.services.auth import token_codec
from amritacare.services.auth.token_codec import OtpPayload


def test_encode_is_unpadded_base64url():
    payload = OtpPayload(email="a@bl.students.amrita.edu", code="482193", expiry=1700000600000)
    encoded = token_codec.encode(payload)
    assert "=" not in encoded
    assert "+" not in encoded and "/" not in encoded
    raw = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4))
    assert json.loads(raw) == {"email": "a@bl.students.amrita.edu", "code": "482193", "expiry": 1700000600000}


@pytest.mark.parametrize("payload", [
    OtpPayload(email="a@bl.students.amrita.edu", code="482193", expiry=1700000600000),
    OtpPayload(email="??>>~~@example.org", code="100000", expiry=0),
    OtpPayload(email="ünïcødé@example.org", code="999999", expiry=253402300799999),
])
def test_decode_inverts_encode(payload):
    assert token_codec.decode(token_codec.encode(payload)) == payload


def test_b64url_helpers_restore_alphabet_and_padding():
    raw = b"\xfb\xff\xfe>?"
    encoded = token_codec.b64url_encode(raw)
    assert encoded == "-__-Pj8"
    assert token_codec.b64url_decode(encoded) == raw


@pytest.mark.parametrize("encoded", ["", "!!!!", "abc$", "a"])
def test_decode_rejects_invalid_base64(encoded):
    with pytest.raises(MalformedTokenError):
        token_codec.decode(encoded)


@pytest.mark.parametrize("data", [
    b"not json",
    b"[1, 2, 3]",
    b'{"email": "a@b.c", "code": "123456"}',
    b'{"email": "a@b.c", "expiry": 1}',
    b'{"code": "123456", "expiry": 1}',
    b'{"email": "a@b.c", "code": "123456", "expiry": "soon"}',
    b'{"email": "a@b.c", "code": "123456", "expiry": true}',
    b'{"email": "a@b.c", "code": 123456, "expiry": 1}',
    b"\xff\xfe",
])
def test_decode_rejects_malformed_payloads(data):
    with pytest.raises(MalformedTokenError):
        token_codec.decode(token_codec.b64url_encode(data))


def test_split_token_requires_exactly_two_parts():
    assert token_codec.split_token("abc.def") == ("abc", "def")
    for bad in ["abc", "a.b.c", ""]:
        with pytest.raises(MalformedTokenError):
            token_codec.split_token(bad)


@pytest.mark.parametrize("expiry", ["NaN", "Infinity", "-Infinity"])
def test_decode_rejects_non_finite_expiry(expiry):
    raw = ('{"email": "a@b.c", "code": "123456", "expiry": %s}' % expiry).encode()
    with pytest.raises(MalformedTokenError):
        token_codec.decode(token_codec.b64url_encode(raw))


def test_lone_surrogates_round_trip():
    payload = OtpPayload(email="a\ud800@b.c", code="123456", expiry=1)
    assert token_codec.decode(token_codec.encode(payload)) == payload
