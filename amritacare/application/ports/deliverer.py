from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    body: str
    reply_to: Optional[str] = None


class Deliverer(Protocol):
    name: str

    def is_configured(self) -> bool:
        ...

    def send(self, message: OutgoingEmail, timeout: float) -> None:
        ...


