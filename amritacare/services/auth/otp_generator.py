import secrets
import time
from dataclasses import dataclass

OTP_TTL_MS = 10 * 60 * 1000  # 10 minutes
OTP_MIN = 100000
OTP_MAX = 999999


@dataclass(frozen=True)
class GeneratedOtp:
    code: str
    expiry: int


def now_ms() -> int:
    return int(time.time() * 1000)


def generate_otp(issued_at_ms: int) -> GeneratedOtp:
    """Draw a 6-digit code (no leading zero) expiring 10 minutes after issuance."""
    code = OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1)
    return GeneratedOtp(code=str(code), expiry=issued_at_ms + OTP_TTL_MS)
