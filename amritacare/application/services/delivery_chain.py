import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence

from ..ports.deliverer import Deliverer, OutgoingEmail
from ...exceptions import DeliveryError

logger = logging.getLogger(__name__)

OTP_SUBJECT = "Your AmritaCare OTP"


class AttemptState(str, Enum):
    NOT_TRIED = "not_tried"
    FAILED = "failed"
    SUCCEEDED = "succeeded"
    SKIPPED_UNCONFIGURED = "skipped_unconfigured"


@dataclass
class DeliveryAttempt:
    provider: str
    state: AttemptState = AttemptState.NOT_TRIED
    error: Optional[str] = None


@dataclass
class DeliveryReport:
    attempts: List[DeliveryAttempt] = field(default_factory=list)
    provider: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.provider is not None


def otp_email(to: str, code: str, name: Optional[str] = None) -> OutgoingEmail:
    body = (
        f"Hello {name or 'User'},\n\n"
        f"Your AmritaCare OTP is: {code}\n"
        "It expires in 10 minutes.\n\n"
        "If you didn't request this, please ignore this email."
    )
    return OutgoingEmail(to=to, subject=OTP_SUBJECT, body=body)


class DeliveryChain:
    """
    Try each deliverer in priority order until one succeeds.

    Unconfigured deliverers are skipped without a call. Each attempt gets
    at most ``attempt_timeout`` seconds and never more than what is left of
    ``deadline``; once the deadline passes, the remaining deliverers are
    marked failed without being called.
    """

    def __init__(self, deliverers: Sequence[Deliverer], attempt_timeout: float = 5.0,
                 deadline: float = 12.0, clock: Callable[[], float] = time.monotonic):
        self.deliverers = list(deliverers)
        self.attempt_timeout = attempt_timeout
        self.deadline = deadline
        self._clock = clock

    def attempt(self, message: OutgoingEmail) -> DeliveryReport:
        report = DeliveryReport(attempts=[DeliveryAttempt(d.name) for d in self.deliverers])
        started = self._clock()

        for deliverer, attempt in zip(self.deliverers, report.attempts):
            if not deliverer.is_configured():
                attempt.state = AttemptState.SKIPPED_UNCONFIGURED
                logger.info(f"Delivery provider {deliverer.name} not configured, skipping")
                continue

            remaining = self.deadline - (self._clock() - started)
            if remaining <= 0:
                attempt.state = AttemptState.FAILED
                attempt.error = "deadline_exceeded"
                logger.warning(f"Delivery deadline reached before trying {deliverer.name}")
                continue

            try:
                deliverer.send(message, timeout=min(self.attempt_timeout, remaining))
            except DeliveryError as e:
                attempt.state = AttemptState.FAILED
                attempt.error = str(e)
                logger.warning(f"Delivery via {deliverer.name} failed, trying next provider")
                continue

            attempt.state = AttemptState.SUCCEEDED
            report.provider = deliverer.name
            logger.info(f"Delivered via {deliverer.name}")
            return report

        return report

    def deliver(self, message: OutgoingEmail) -> DeliveryReport:
        """Like :meth:`attempt`, but raise DeliveryError when no provider succeeded."""
        report = self.attempt(message)
        if not report.succeeded:
            summary = ", ".join(f"{a.provider}={a.state.value}" for a in report.attempts) or "no providers"
            logger.error(f"All delivery providers exhausted: {summary}")
            raise DeliveryError(f"delivery failed: {summary}")
        return report

    def send_code(self, to: str, code: str, name: Optional[str] = None) -> DeliveryReport:
        return self.deliver(otp_email(to, code, name))
