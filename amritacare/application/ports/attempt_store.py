from typing import Protocol


class AttemptStore(Protocol):
    def register_attempt(self, key: str, ttl_seconds: int) -> int:
        """Record one verification attempt and return the running count."""
        ...

    def consume(self, key: str, ttl_seconds: int) -> bool:
        """Mark the key used; False if it was already used."""
        ...


