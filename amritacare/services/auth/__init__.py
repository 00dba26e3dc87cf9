from .otp_generator import GeneratedOtp, generate_otp, now_ms, OTP_TTL_MS
from .signer import sign, verify
from .token_codec import OtpPayload, encode, decode, split_token, join_token

__all__ = [
    "GeneratedOtp",
    "generate_otp",
    "now_ms",
    "OTP_TTL_MS",
    "sign",
    "verify",
    "OtpPayload",
    "encode",
    "decode",
    "split_token",
    "join_token",
]
