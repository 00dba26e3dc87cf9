import hmac
import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from ..ports.attempt_store import AttemptStore
from ..ports.audit_logger import AuditLogger
from .delivery_chain import DeliveryChain
from ...exceptions import (
    AmritaCareError,
    ConfigurationError,
    ExpiredError,
    InvalidCodeError,
    InvalidSignatureError,
    MissingFieldsError,
    TokenAlreadyUsedError,
    TooManyAttemptsError,
)
from ...services.auth import signer
from ...services.auth import token_codec
from ...services.auth.otp_generator import GeneratedOtp, generate_otp, now_ms
from ...services.auth.token_codec import OtpPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedOtp:
    token: str
    via: str


@dataclass
class OtpService:
    """Stateless OTP issuance and verification; the token carries all state."""

    secret: Optional[str]
    delivery: DeliveryChain
    audit: Optional[AuditLogger] = None
    attempt_store: Optional[AttemptStore] = None
    max_attempts: int = 5
    clock: Callable[[], int] = now_ms
    generator: Callable[[int], GeneratedOtp] = generate_otp

    def _require_secret(self) -> str:
        if not self.secret:
            logger.error("OTP secret is not configured")
            raise ConfigurationError("otp secret not configured")
        return self.secret

    def _audit(self, action: str, email: str, success: bool, **details) -> None:
        if self.audit is not None:
            self.audit.log(action, email, success=success, details=details)

    def build_token(self, payload: OtpPayload) -> str:
        raw = token_codec.serialize(payload)
        tag = signer.sign(raw, self._require_secret())
        return token_codec.join_token(token_codec.b64url_encode(raw), tag)

    def issue(self, email: Optional[str], name: Optional[str] = None) -> IssuedOtp:
        if not email:
            raise MissingFieldsError("email is required", code="missing_email")
        self._require_secret()

        generated = self.generator(self.clock())
        payload = OtpPayload(email=email, code=generated.code, expiry=generated.expiry)
        token = self.build_token(payload)

        try:
            report = self.delivery.send_code(email, generated.code, name)
        except AmritaCareError as e:
            self._audit("otp_issue", email, success=False, reason=e.code)
            raise
        self._audit("otp_issue", email, success=True, via=report.provider)
        return IssuedOtp(token=token, via=report.provider)

    def verify(self, token: Optional[str], code: Optional[str]) -> str:
        """Return the authenticated email, or raise the matching AmritaCareError."""
        if not token or not code:
            raise MissingFieldsError("token and code are required", code="missing_params")
        secret = self._require_secret()

        email = ""
        try:
            payload = self._check(token, code, secret)
            email = payload.email
        except AmritaCareError as e:
            self._audit("otp_verify", email, success=False, reason=e.code)
            raise
        self._audit("otp_verify", email, success=True)
        return email

    def _check(self, token: str, code: str, secret: str) -> OtpPayload:
        encoded, tag = token_codec.split_token(token)
        raw = token_codec.b64url_decode(encoded)

        # Non-canonical encodings of the same bytes are treated as tampering
        if not signer.verify(raw, secret, tag) or token_codec.b64url_encode(raw) != encoded:
            raise InvalidSignatureError("token signature mismatch")

        payload = token_codec.deserialize(raw)
        now = self.clock()
        if now > payload.expiry:
            raise ExpiredError("token expired")

        ttl_seconds = max(1, math.ceil((payload.expiry - now) / 1000))
        if self.attempt_store is not None:
            attempts = self.attempt_store.register_attempt(tag, ttl_seconds)
            if attempts > self.max_attempts:
                raise TooManyAttemptsError("too many verification attempts")

        if not hmac.compare_digest(code.encode("utf-8", "surrogatepass"), payload.code.encode("utf-8", "surrogatepass")):
            raise InvalidCodeError("code mismatch")

        if self.attempt_store is not None and not self.attempt_store.consume(tag, ttl_seconds):
            raise TokenAlreadyUsedError("token already used")
        return payload
