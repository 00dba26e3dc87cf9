# amritacare/dependencies.py
import logging
from dataclasses import dataclass
from typing import List, Optional

from fastapi import Request

from .application.ports.attempt_store import AttemptStore
from .application.ports.audit_logger import AuditLogger
from .application.ports.deliverer import Deliverer
from .application.services.contact_service import ContactService
from .application.services.delivery_chain import DeliveryChain
from .application.services.otp_service import OtpService
from .core.config import Settings
from .infrastructure.attempts.memory_attempt_store import InMemoryAttemptStore
from .infrastructure.attempts.redis_attempt_store import RedisAttemptStore
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.delivery.sendgrid_deliverer import SendGridDeliverer
from .infrastructure.delivery.smtp_deliverer import SmtpDeliverer

logger = logging.getLogger(__name__)


@dataclass
class Services:
    settings: Settings
    delivery: DeliveryChain
    otp: OtpService
    contact: ContactService
    audit: AuditLogger


def build_deliverers(settings: Settings) -> List[Deliverer]:
    """Providers in priority order: SendGrid first, SMTP as fallback."""
    return [
        SendGridDeliverer(
            api_key=settings.SENDGRID_API_KEY,
            from_email=settings.SENDGRID_FROM,
            api_url=settings.SENDGRID_API_URL,
        ),
        SmtpDeliverer(
            user=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD.get_secret_value(),
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            use_tls=settings.SMTP_USE_TLS,
        ),
    ]


def build_attempt_store(settings: Settings) -> Optional[AttemptStore]:
    backend = (settings.OTP_GUARD_BACKEND or "none").strip().lower()
    if backend == "none":
        logger.info("OTP replay guard disabled; tokens are valid until expiry")
        return None
    if backend == "memory":
        logger.info("Using in-memory OTP replay guard")
        return InMemoryAttemptStore()
    if backend == "redis":
        if not settings.REDIS_URL:
            raise ValueError("OTP_GUARD_BACKEND=redis requires REDIS_URL")
        logger.info("Using Redis OTP replay guard")
        return RedisAttemptStore(settings.REDIS_URL)
    raise ValueError(f"Unknown OTP_GUARD_BACKEND: {settings.OTP_GUARD_BACKEND}")


def build_services(settings: Settings, deliverers: Optional[List[Deliverer]] = None,
                   attempt_store: Optional[AttemptStore] = None) -> Services:
    audit = StdAuditLogger()
    delivery = DeliveryChain(
        deliverers if deliverers is not None else build_deliverers(settings),
        attempt_timeout=settings.DELIVERY_ATTEMPT_TIMEOUT_SECONDS,
        deadline=settings.DELIVERY_DEADLINE_SECONDS,
    )
    if attempt_store is None:
        attempt_store = build_attempt_store(settings)
    otp = OtpService(
        secret=settings.otp_secret,
        delivery=delivery,
        audit=audit,
        attempt_store=attempt_store,
        max_attempts=settings.OTP_MAX_ATTEMPTS,
    )
    contact = ContactService(delivery=delivery, inbox=settings.contact_inbox, audit=audit)
    return Services(settings=settings, delivery=delivery, otp=otp, contact=contact, audit=audit)


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_otp_service(request: Request) -> OtpService:
    return request.app.state.services.otp


def get_contact_service(request: Request) -> ContactService:
    return request.app.state.services.contact
