"""Redis-backed cart store: one hash, one field per user."""
import json
from typing import Optional

from core.db import get_redis, RedisKeys
from core.logging import cart_log_context, get_logger
from .models import Cart, LineItem, StorageUnavailable

logger = get_logger(__name__)


class CartStore:
    """
    Maps a user id to that user's Cart.

    Every cart lives under RedisKeys.CARTS as a JSON list; HSET replaces
    a user's whole list in one command.
    """

    def __init__(self, redis=None, key: str = RedisKeys.CARTS):
        self._redis = redis
        self.key = key

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            try:
                self._redis = get_redis()
            except ValueError as e:
                raise StorageUnavailable(f"Redis not available: {e}") from e
        return self._redis

    async def load(self, user_id: Optional[str]) -> Cart:
        """Return the stored cart, or an empty one if there is none."""
        if not user_id:
            return Cart(user_id="", items=[])

        try:
            data = await self.redis.hget(self.key, str(user_id))
        except StorageUnavailable:
            raise
        except Exception as e:
            logger.error(f"Failed to load cart [{cart_log_context(user_id)}]: {e}")
            raise StorageUnavailable(f"Cart service unavailable: {e}") from e

        if not data:
            return Cart(user_id=str(user_id), items=[])

        try:
            records = json.loads(data)
            if not isinstance(records, list):
                raise ValueError(f"expected a list, got {type(records).__name__}")
        except (TypeError, ValueError) as e:
            # Unreadable value - drop it and start over
            logger.warning(f"Corrupted cart data [{cart_log_context(user_id)}]: {e}")
            await self.delete(user_id)
            return Cart(user_id=str(user_id), items=[])

        items = []
        for record in records:
            try:
                items.append(LineItem.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                # Bad record is skipped; the next save writes the cart without it
                logger.warning(f"Skipping corrupted cart item [{cart_log_context(user_id)}]: {e!r}")
        return Cart(user_id=str(user_id), items=items)

    async def save(self, user_id: Optional[str], cart: Cart) -> None:
        """Replace the stored list for user_id. No-op for anonymous callers."""
        if not user_id:
            logger.debug("Skipping cart save for anonymous user")
            return

        try:
            await self.redis.hset(self.key, str(user_id), json.dumps(cart.to_list()))
        except StorageUnavailable:
            raise
        except Exception as e:
            logger.error(f"Failed to save cart [{cart_log_context(user_id)}]: {e}")
            raise StorageUnavailable(f"Cart service unavailable: {e}") from e

    async def delete(self, user_id: Optional[str]) -> None:
        """Remove the user's entry entirely."""
        if not user_id:
            return
        try:
            await self.redis.hdel(self.key, str(user_id))
        except StorageUnavailable:
            raise
        except Exception as e:
            logger.error(f"Failed to delete cart [{cart_log_context(user_id)}]: {e}")
            raise StorageUnavailable(f"Cart service unavailable: {e}") from e
