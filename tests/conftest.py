"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import Mock, AsyncMock
from typing import List, Optional, Sequence

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_key")
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")

from core.cart import CartManager, CartStore, CartEvents
from core.services.models import Product, Size, Topping


class StaticCatalog:
    """In-memory catalog with the shop's sample menu."""

    def __init__(self):
        self.products = {
            "p1": Product(id="p1", name="Black coffee", price=25000, image="☕", category_id="coffee"),
            "p2": Product(id="p2", name="Milk tea", price=30000, image="/img/milk-tea.png", category_id="tea"),
        }
        self.sizes = {
            "s1": Size(id="s1", name="Small", price_add=0),
            "s2": Size(id="s2", name="Medium", price_add=5000),
            "s3": Size(id="s3", name="Large", price_add=10000),
        }
        self.toppings = {
            "t1": Topping(id="t1", name="Black pearls", price=10000),
            "t2": Topping(id="t2", name="White pearls", price=10000),
            "t3": Topping(id="t3", name="Cheese foam", price=15000, category_ids=["tea"]),
        }
        self.product_lookups: List[str] = []

    async def get_product(self, product_id: str) -> Optional[Product]:
        self.product_lookups.append(product_id)
        return self.products.get(product_id)

    async def get_size(self, size_id: str) -> Optional[Size]:
        return self.sizes.get(size_id)

    async def get_toppings(self, topping_ids: Sequence[str]) -> List[Topping]:
        # Deliberately reversed to check the engine restores request order
        return [self.toppings[t] for t in reversed(list(topping_ids)) if t in self.toppings]

    async def list_sizes(self) -> List[Size]:
        return sorted(self.sizes.values(), key=lambda s: s.price_add)

    async def list_toppings(self, category_id: Optional[str] = None) -> List[Topping]:
        return [t for t in self.toppings.values() if t.applies_to(category_id)]


@pytest.fixture
def fake_redis():
    """Mock Upstash Redis client backed by a dict of hashes"""
    hashes = {}

    async def hget(key, field):
        return hashes.get(key, {}).get(field)

    async def hset(key, field, value):
        hashes.setdefault(key, {})[field] = value
        return 1

    async def hdel(key, *fields):
        removed = 0
        for field in fields:
            if hashes.get(key, {}).pop(field, None) is not None:
                removed += 1
        return removed

    redis = Mock()
    redis.hget = AsyncMock(side_effect=hget)
    redis.hset = AsyncMock(side_effect=hset)
    redis.hdel = AsyncMock(side_effect=hdel)
    redis.hashes = hashes
    return redis


@pytest.fixture
def catalog():
    return StaticCatalog()


@pytest.fixture
def cart_store(fake_redis):
    return CartStore(redis=fake_redis)


@pytest.fixture
def cart_events():
    return CartEvents()


@pytest.fixture
def cart_manager(cart_store, catalog, cart_events):
    """CartManager wired to the fake Redis and the static catalog"""
    return CartManager(store=cart_store, catalog=catalog, events=cart_events)


@pytest.fixture
def mock_supabase_client():
    """Mock async Supabase client"""
    client = Mock()

    table_mock = Mock()
    table_mock.select.return_value = table_mock
    table_mock.eq.return_value = table_mock
    table_mock.in_.return_value = table_mock
    table_mock.order.return_value = table_mock
    table_mock.execute = AsyncMock(return_value=Mock(data=[]))

    client.table.return_value = table_mock
    return client
