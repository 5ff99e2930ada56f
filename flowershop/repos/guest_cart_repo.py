# flowershop/repos/guest_cart_repo.py
import json
from typing import Any, Dict, List

import redis

from flowershop.utils.retry import redis_retry
from flowershop.utils.settings import GUEST_CART_TTL_SECONDS

GUEST_CART_KEY = "guest_cart"


class GuestCartRepo:
    """
    Koszyk goscia jako tekst JSON w redisie, klucz guest_cart:<guest_id>.
    Odpowiednik localStorage po stronie przegladarki.
    """

    def __init__(self, client: redis.Redis, ttl: int = GUEST_CART_TTL_SECONDS):
        self.redis = client
        self.ttl = ttl

    @staticmethod
    def key(guest_id: str) -> str:
        return f"{GUEST_CART_KEY}:{guest_id}"

    @redis_retry()
    def load(self, guest_id: str) -> List[Dict[str, Any]]:
        raw = self.redis.get(self.key(guest_id))
        if not raw:
            return []
        return json.loads(raw)

    @redis_retry()
    def save(self, guest_id: str, items: List[Dict[str, Any]]) -> None:
        #SET guest_cart:abc "[...]" EX ttl, kazdy zapis przedluza waznosc
        self.redis.set(self.key(guest_id), json.dumps(items), ex=self.ttl)

    @redis_retry()
    def take(self, guest_id: str) -> List[Dict[str, Any]]:
        """Odczyt i usuniecie wpisu w jednej transakcji (MULTI), koszyk goscia scalany raz."""
        with self.redis.pipeline() as pipe:
            pipe.get(self.key(guest_id))
            pipe.delete(self.key(guest_id))
            raw, _ = pipe.execute()
        if not raw:
            return []
        return json.loads(raw)
