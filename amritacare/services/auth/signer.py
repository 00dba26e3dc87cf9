import hashlib
import hmac


def sign(serialized_payload: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 over the exact serialized payload bytes."""
    return hmac.new(secret.encode("utf-8"), serialized_payload, hashlib.sha256).hexdigest()


def verify(serialized_payload: bytes, secret: str, candidate_tag: str) -> bool:
    """
    Recompute the tag and compare in constant time.

    Both sides are hashed to a fixed 32-byte digest first so a candidate of
    the wrong length is rejected by the same fixed-time comparison.
    """
    expected = sign(serialized_payload, secret).encode("ascii")
    candidate = candidate_tag.encode("utf-8", "surrogatepass")
    return hmac.compare_digest(
        hashlib.sha256(expected).digest(),
        hashlib.sha256(candidate).digest(),
    )
