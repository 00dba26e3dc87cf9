import threading
import time
from typing import Dict, Any

from ...application.ports.attempt_store import AttemptStore


class InMemoryAttemptStore(AttemptStore):
    def __init__(self) -> None:
        self._store: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def _prune(self, now: float) -> None:
        expired = [k for k, rec in self._store.items() if rec["expires_at"] <= now]
        for k in expired:
            del self._store[k]

    def _record(self, key: str, ttl_seconds: int, now: float) -> Dict[str, Any]:
        rec = self._store.get(key)
        if not rec:
            rec = {"attempts": 0, "used": False, "expires_at": now + ttl_seconds}
            self._store[key] = rec
        return rec

    def register_attempt(self, key: str, ttl_seconds: int) -> int:
        now = time.time()
        with self._lock:
            self._prune(now)
            rec = self._record(key, ttl_seconds, now)
            rec["attempts"] += 1
            return rec["attempts"]

    def consume(self, key: str, ttl_seconds: int) -> bool:
        now = time.time()
        with self._lock:
            self._prune(now)
            rec = self._record(key, ttl_seconds, now)
            if rec["used"]:
                return False
            rec["used"] = True
            return True


