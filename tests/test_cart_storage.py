"""Tests for the Redis cart store"""
import json
from decimal import Decimal
import pytest
from unittest.mock import AsyncMock, patch

from core.cart import Cart, CartStore, LineItem, StorageUnavailable
from core.db import RedisKeys


def sample_cart(user_id="u1") -> Cart:
    return Cart(
        user_id=user_id,
        items=[LineItem(product_id="p1", product_name="Black coffee", base_price=25000, quantity=2)],
    )


@pytest.mark.asyncio
async def test_load_missing_cart_is_empty(cart_store):
    cart = await cart_store.load("u1")

    assert cart.user_id == "u1"
    assert cart.items == []


@pytest.mark.asyncio
async def test_save_then_load(cart_store, fake_redis):
    original = sample_cart()

    await cart_store.save("u1", original)
    loaded = await cart_store.load("u1")

    fake_redis.hset.assert_awaited_once()
    assert fake_redis.hset.await_args.args[0] == RedisKeys.CARTS
    assert [i.id for i in loaded.items] == [i.id for i in original.items]
    assert loaded.total == original.total


@pytest.mark.asyncio
async def test_save_replaces_whole_list(cart_store, fake_redis):
    await cart_store.save("u1", sample_cart())
    await cart_store.save("u1", Cart(user_id="u1", items=[]))

    assert json.loads(fake_redis.hashes[RedisKeys.CARTS]["u1"]) == []
    assert (await cart_store.load("u1")).items == []


@pytest.mark.asyncio
async def test_users_share_one_collection_key(cart_store, fake_redis):
    await cart_store.save("u1", sample_cart("u1"))
    await cart_store.save("u2", sample_cart("u2"))

    assert set(fake_redis.hashes[RedisKeys.CARTS]) == {"u1", "u2"}


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id", [None, ""])
async def test_save_without_user_is_noop(cart_store, fake_redis, user_id):
    await cart_store.save(user_id, sample_cart())

    fake_redis.hset.assert_not_called()


@pytest.mark.asyncio
async def test_load_without_user_is_empty(cart_store, fake_redis):
    cart = await cart_store.load(None)

    assert cart.items == []
    fake_redis.hget.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["{not json", json.dumps({"items": []}), json.dumps("p1")])
async def test_corrupted_cart_is_dropped(cart_store, fake_redis, raw):
    fake_redis.hashes[RedisKeys.CARTS] = {"u1": raw}

    cart = await cart_store.load("u1")

    assert cart.items == []
    fake_redis.hdel.assert_awaited_once_with(RedisKeys.CARTS, "u1")


def good_record() -> dict:
    return sample_cart().to_list()[0]


def bad_record(**changes) -> dict:
    record = good_record()
    record.update(changes)
    return record


def record_without(key) -> dict:
    record = good_record()
    del record[key]
    return record


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "record",
    [
        {"product_id": "p1"},
        record_without("base_price"),
        bad_record(base_price="abc"),
        bad_record(base_price=None),
        bad_record(base_price="-100"),
        bad_record(size_price_add="NaN"),
        bad_record(topping_price_total="x"),
        bad_record(quantity=0),
        bad_record(quantity=-3),
        bad_record(quantity="2"),
        bad_record(quantity=1.5),
        bad_record(topping_ids="t1"),
        "oops",
        None,
    ],
)
async def test_corrupted_items_are_skipped(cart_store, fake_redis, record):
    good = good_record()
    fake_redis.hashes[RedisKeys.CARTS] = {"u1": json.dumps([record, good])}

    cart = await cart_store.load("u1")

    assert [i.id for i in cart.items] == [good["id"]]
    assert all(i.quantity >= 1 for i in cart.items)
    assert cart.item_count == 2
    assert cart.total == Decimal("50000")
    fake_redis.hdel.assert_not_called()


@pytest.mark.asyncio
async def test_cart_with_only_bad_items_loads_empty(cart_store, fake_redis):
    fake_redis.hashes[RedisKeys.CARTS] = {
        "u1": json.dumps([bad_record(base_price="abc"), bad_record(quantity=0)])
    }

    cart = await cart_store.load("u1")

    assert cart.items == []
    assert cart.total == 0


@pytest.mark.asyncio
async def test_skipped_items_are_not_written_back(cart_store, fake_redis):
    good = good_record()
    fake_redis.hashes[RedisKeys.CARTS] = {"u1": json.dumps([bad_record(quantity=-1), good])}

    cart = await cart_store.load("u1")
    await cart_store.save("u1", cart)

    stored = json.loads(fake_redis.hashes[RedisKeys.CARTS]["u1"])
    assert [r["id"] for r in stored] == [good["id"]]


@pytest.mark.asyncio
async def test_delete(cart_store, fake_redis):
    await cart_store.save("u1", sample_cart())

    await cart_store.delete("u1")

    assert "u1" not in fake_redis.hashes[RedisKeys.CARTS]


@pytest.mark.asyncio
async def test_load_failure_raises_storage_unavailable():
    redis = AsyncMock()
    redis.hget.side_effect = TimeoutError("timeout")
    store = CartStore(redis=redis)

    with pytest.raises(StorageUnavailable):
        await store.load("u1")


@pytest.mark.asyncio
async def test_save_failure_raises_storage_unavailable():
    redis = AsyncMock()
    redis.hset.side_effect = OSError("disk full")
    store = CartStore(redis=redis)

    with pytest.raises(StorageUnavailable):
        await store.save("u1", sample_cart())


@pytest.mark.asyncio
async def test_missing_redis_config_raises_storage_unavailable():
    store = CartStore()

    with patch("core.cart.storage.get_redis", side_effect=ValueError("not configured")):
        with pytest.raises(StorageUnavailable):
            await store.load("u1")
