"""
Token payload codec.

A token is ``<payload>.<tag>`` where ``payload`` is the unpadded base64url
form of the JSON-serialized :class:`OtpPayload` and ``tag`` is the hex HMAC
over the serialized (not encoded) JSON bytes.
"""
import base64
import binascii
import json
import math
from dataclasses import dataclass
from typing import Tuple

from ...exceptions import MalformedTokenError

TOKEN_SEPARATOR = "."


@dataclass(frozen=True)
class OtpPayload:
    email: str
    code: str
    expiry: int

    def to_dict(self) -> dict:
        return {"email": self.email, "code": self.code, "expiry": self.expiry}


def serialize(payload: OtpPayload) -> bytes:
    return json.dumps(payload.to_dict(), separators=(",", ":")).encode("ascii")


def deserialize(raw: bytes) -> OtpPayload:
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedTokenError(f"payload is not JSON: {e}")
    if not isinstance(data, dict):
        raise MalformedTokenError("payload is not an object")
    missing = [k for k in ("email", "code", "expiry") if k not in data]
    if missing:
        raise MalformedTokenError(f"payload missing {', '.join(missing)}")

    email, code, expiry = data["email"], data["code"], data["expiry"]
    if not isinstance(email, str) or not isinstance(code, str):
        raise MalformedTokenError("email and code must be strings")
    # bool is an int subclass
    if isinstance(expiry, bool) or not isinstance(expiry, (int, float)) or not math.isfinite(expiry):
        raise MalformedTokenError("expiry must be a finite number")
    return OtpPayload(email=email, code=code, expiry=expiry)


def b64url_encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii").rstrip("=").replace("+", "-").replace("/", "_")


def b64url_decode(encoded: str) -> bytes:
    if not isinstance(encoded, str) or not encoded:
        raise MalformedTokenError("empty payload")
    std = encoded.replace("-", "+").replace("_", "/")
    std += "=" * (-len(std) % 4)
    try:
        return base64.b64decode(std, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedTokenError(f"payload is not base64url: {e}")


def encode(payload: OtpPayload) -> str:
    return b64url_encode(serialize(payload))


def decode(encoded: str) -> OtpPayload:
    return deserialize(b64url_decode(encoded))


def join_token(encoded_payload: str, tag: str) -> str:
    return f"{encoded_payload}{TOKEN_SEPARATOR}{tag}"


def split_token(token: str) -> Tuple[str, str]:
    parts = token.split(TOKEN_SEPARATOR)
    if len(parts) != 2:
        raise MalformedTokenError("token must have exactly two parts")
    return parts[0], parts[1]
