# ecobazaar/services/checkout_ledger.py
import functools
import time
import uuid
from typing import List

import redis
from redis.exceptions import RedisError

from ecobazaar.domain.checkout import CheckoutPlan, CheckoutState
from ecobazaar.domain.errors import StoreError
from ecobazaar.utils.logging import get_logger
from ecobazaar.utils.retry import redis_retry
from ecobazaar.utils.settings import CHECKOUT_LOCK_SECONDS, CHECKOUT_TTL_SECONDS, REDIS_URL

logger = get_logger(__name__)

#compare-and-delete in one Lua call, so a worker never frees a claim taken over by another
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

PENDING_KEY = "checkout:pending"


def _as_store_error(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RedisError as e:
            logger.error(f"Checkout ledger {func.__name__} failed: {e}")
            raise StoreError(f"Checkout ledger unavailable: {e}") from e

    return wrapper


class RedisCheckoutLedger:
    """
    Durable record of checkouts keyed by idempotency key
    -plan: the computed checkout and the steps already applied
    -pending set: scored by last update, feeds the resume job
    -claim: short lock so one worker runs a key at a time
    """

    def __init__(
        self,
        url: str | None = None,
        ttl: int = CHECKOUT_TTL_SECONDS,
        lock_ttl: int = CHECKOUT_LOCK_SECONDS,
        client: redis.Redis | None = None,
    ):
        self.redis = client or redis.Redis.from_url(url or REDIS_URL, decode_responses=True)
        self.ttl = ttl
        self.lock_ttl = lock_ttl

    @staticmethod
    def _plan_key(key: str) -> str:
        return f"checkout:{key}:plan"

    @staticmethod
    def _lock_key(key: str) -> str:
        return f"checkout:{key}:lock"

    @_as_store_error
    @redis_retry()
    def claim(self, key: str) -> str | None:
        """Returns a release token, or None when another worker holds the key."""
        token = uuid.uuid4().hex
        logger.info(f"Claim checkout {key}")
        ok = self.redis.set(name=self._lock_key(key), value=token, nx=True, ex=self.lock_ttl)
        return token if ok else None

    @_as_store_error
    @redis_retry()
    def release(self, key: str, token: str) -> bool:
        logger.info(f"Release checkout {key}")
        return bool(self.redis.eval(_RELEASE_LUA, 1, self._lock_key(key), token))

    @_as_store_error
    @redis_retry()
    def load(self, key: str) -> CheckoutPlan | None:
        raw = self.redis.get(self._plan_key(key))
        return CheckoutPlan.model_validate_json(raw) if raw else None

    @_as_store_error
    @redis_retry()
    def save(self, plan: CheckoutPlan) -> None:
        pipe = self.redis.pipeline(transaction=True)
        pipe.set(self._plan_key(plan.key), plan.model_dump_json(), ex=self.ttl)
        if plan.state == CheckoutState.DONE:
            pipe.zrem(PENDING_KEY, plan.key)
        else:
            pipe.zadd(PENDING_KEY, {plan.key: plan.updated_at.timestamp()})
        pipe.execute()

    @_as_store_error
    @redis_retry()
    def discard(self, key: str) -> None:
        pipe = self.redis.pipeline(transaction=True)
        pipe.delete(self._plan_key(key))
        pipe.zrem(PENDING_KEY, key)
        pipe.execute()

    @_as_store_error
    @redis_retry()
    def stalled(self, older_than: int) -> List[str]:
        """Keys of pending checkouts not updated for ``older_than`` seconds."""
        return list(self.redis.zrangebyscore(PENDING_KEY, "-inf", time.time() - older_than))
