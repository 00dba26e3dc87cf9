import redis

from ...application.ports.attempt_store import AttemptStore


class RedisAttemptStore(AttemptStore):
    def __init__(self, url: str, prefix: str = "otp:") -> None:
        self.client = redis.Redis.from_url(url)
        self.prefix = prefix

    def register_attempt(self, key: str, ttl_seconds: int) -> int:
        rk = f"{self.prefix}attempts:{key}"
        # Counter lives no longer than the token itself
        pipe = self.client.pipeline()
        pipe.incr(rk, 1)
        pipe.expire(rk, ttl_seconds)
        count, _ = pipe.execute()
        return int(count)

    def consume(self, key: str, ttl_seconds: int) -> bool:
        rk = f"{self.prefix}used:{key}"
        return bool(self.client.set(rk, 1, nx=True, ex=ttl_seconds))


