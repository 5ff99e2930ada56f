# flowershop/repos/session_repo.py
import redis

from flowershop.utils.retry import redis_retry


class SessionRepo:
    """Tokeny sesji, resetu hasla i licznik nieudanych logowan w redisie."""

    def __init__(self, client: redis.Redis):
        self.redis = client

    @redis_retry()
    def put_token(self, kind: str, token: str, user_id: str, ttl: int) -> None:
        self.redis.set(f"{kind}:{token}", user_id, ex=ttl)

    @redis_retry()
    def get_token(self, kind: str, token: str) -> str | None:
        return self.redis.get(f"{kind}:{token}")

    @redis_retry()
    def delete_token(self, kind: str, token: str) -> None:
        self.redis.delete(f"{kind}:{token}")

    @redis_retry()
    def failed_attempts(self, email: str) -> int:
        value = self.redis.get(f"login_failures:{email.lower()}")
        return int(value) if value else 0

    @redis_retry()
    def register_failure(self, email: str, window: int) -> int:
        key = f"login_failures:{email.lower()}"
        #INCR + EXPIRE w jednym round tripie, okno liczone od ostatniej porazki
        pipe = self.redis.pipeline()
        pipe.incr(key)
        pipe.expire(key, window)
        count, _ = pipe.execute()
        return int(count)

    @redis_retry()
    def reset_failures(self, email: str) -> None:
        self.redis.delete(f"login_failures:{email.lower()}")
