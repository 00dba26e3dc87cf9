import logging
from typing import Optional

import httpx

from ...application.ports.deliverer import Deliverer, OutgoingEmail
from ...exceptions import DeliveryError

logger = logging.getLogger(__name__)

SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"


class SendGridDeliverer(Deliverer):
    """Transactional email over the SendGrid v3 mail-send API."""

    name = "sendgrid"

    def __init__(self, api_key: str, from_email: str, api_url: str = SENDGRID_API_URL,
                 transport: Optional[httpx.BaseTransport] = None):
        self.api_key = (api_key or "").strip()
        self.from_email = (from_email or "").strip()
        self.api_url = api_url
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self.api_key and self.from_email)

    def _build_payload(self, message: OutgoingEmail) -> dict:
        payload = {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": {"email": self.from_email},
            "subject": message.subject,
            "content": [{"type": "text/plain", "value": message.body}],
        }
        if message.reply_to:
            payload["reply_to"] = {"email": message.reply_to}
        return payload

    def send(self, message: OutgoingEmail, timeout: float) -> None:
        try:
            with httpx.Client(timeout=timeout, transport=self._transport) as client:
                resp = client.post(
                    self.api_url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json=self._build_payload(message),
                )
        except httpx.HTTPError as e:
            logger.warning(f"SendGrid request failed: {e.__class__.__name__}")
            raise DeliveryError(f"sendgrid request failed: {e}") from e

        if not resp.is_success:
            logger.warning(f"SendGrid send failed status={resp.status_code} body={resp.text[:200]}")
            raise DeliveryError(f"sendgrid returned {resp.status_code}")
        logger.info("Email accepted by SendGrid")
