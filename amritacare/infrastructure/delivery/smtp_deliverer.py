import logging
import smtplib
import time
from email.message import EmailMessage
from typing import Callable, Optional

from ...application.ports.deliverer import Deliverer, OutgoingEmail
from ...exceptions import DeliveryError

logger = logging.getLogger(__name__)

SMTPS_PORT = 465


class SmtpDeliverer(Deliverer):
    """Authenticated SMTP submission, e.g. Gmail with an app password."""

    name = "smtp"

    def __init__(self, user: str, password: str, host: str = "smtp.gmail.com", port: int = 587,
                 use_tls: bool = True, smtp_factory: Optional[Callable[..., smtplib.SMTP]] = None,
                 smtp_ssl_factory: Optional[Callable[..., smtplib.SMTP]] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.user = (user or "").strip()
        # Gmail shows app passwords in groups of four
        self.password = (password or "").strip().replace(" ", "")
        self.host = host
        self.port = port
        self.use_tls = use_tls
        self._smtp_factory = smtp_factory or smtplib.SMTP
        self._smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL
        self._clock = clock

    def is_configured(self) -> bool:
        return bool(self.user and self.password)

    def _build_message(self, message: OutgoingEmail) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = message.subject
        msg["From"] = self.user
        msg["To"] = message.to
        if message.reply_to:
            msg["Reply-To"] = message.reply_to
        msg.set_content(message.body)
        return msg

    def send(self, message: OutgoingEmail, timeout: float) -> None:
        """
        Submit the message within ``timeout`` seconds in total.

        smtplib applies its timeout per socket operation, so the remaining
        budget is re-applied before each protocol step and the attempt
        fails once it is spent.
        """
        msg = self._build_message(message)
        started = self._clock()

        def step(server, action, *args):
            remaining = timeout - (self._clock() - started)
            if remaining <= 0:
                raise DeliveryError(f"smtp attempt exceeded {timeout:.1f}s")
            sock = getattr(server, "sock", None)
            if sock is not None:
                sock.settimeout(remaining)
            return action(*args)

        try:
            if self.port == SMTPS_PORT:
                with self._smtp_ssl_factory(self.host, self.port, timeout=timeout) as server:
                    step(server, server.login, self.user, self.password)
                    step(server, server.send_message, msg)
            else:
                with self._smtp_factory(self.host, self.port, timeout=timeout) as server:
                    step(server, server.ehlo)
                    if self.use_tls:
                        step(server, server.starttls)
                        step(server, server.ehlo)
                    step(server, server.login, self.user, self.password)
                    step(server, server.send_message, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"SMTP send failed via {self.host}:{self.port}: {e.__class__.__name__}")
            raise DeliveryError(f"smtp send failed: {e}") from e
        except DeliveryError:
            logger.warning(f"SMTP send via {self.host}:{self.port} ran out of time")
            raise
        logger.info(f"Email sent via SMTP host {self.host}")
