import logging
from dataclasses import dataclass
from typing import Optional

from ..ports.audit_logger import AuditLogger
from ..ports.deliverer import OutgoingEmail
from .delivery_chain import DeliveryChain
from ...exceptions import DeliveryError, MissingFieldsError

logger = logging.getLogger(__name__)


@dataclass
class ContactService:
    delivery: DeliveryChain
    inbox: str
    audit: Optional[AuditLogger] = None

    def submit(self, email: Optional[str], message: Optional[str], name: Optional[str] = None) -> str:
        """Forward a contact-form message to the support inbox; returns the provider used."""
        if not email or not message:
            raise MissingFieldsError("email and message are required", code="missing_fields")
        if not self.inbox:
            logger.error("Contact inbox is not configured")
            raise DeliveryError("no contact inbox configured")

        outgoing = OutgoingEmail(
            to=self.inbox,
            subject=f"Contact form: {name or email}",
            body=f"From: {name or 'Anonymous'} <{email}>\n\n{message}",
            reply_to=email,
        )
        try:
            report = self.delivery.deliver(outgoing)
        except DeliveryError:
            if self.audit is not None:
                self.audit.log("contact", email, success=False)
            raise
        if self.audit is not None:
            self.audit.log("contact", email, success=True, details={"via": report.provider})
        return report.provider
