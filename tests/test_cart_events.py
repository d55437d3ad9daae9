"""Tests for cart-changed notifications"""
import pytest
from unittest.mock import AsyncMock, Mock

from core.cart import CartEvents


@pytest.mark.asyncio
async def test_emit_calls_sync_and_async_listeners():
    events = CartEvents()
    sync_listener = Mock()
    async_listener = AsyncMock()
    events.subscribe(sync_listener)
    events.subscribe(async_listener)

    await events.emit("u1")

    sync_listener.assert_called_once_with("u1")
    async_listener.assert_awaited_once_with("u1")


@pytest.mark.asyncio
async def test_unsubscribe():
    events = CartEvents()
    listener = Mock()
    unsubscribe = events.subscribe(listener)

    unsubscribe()
    unsubscribe()
    await events.emit("u1")

    listener.assert_not_called()


@pytest.mark.asyncio
async def test_failing_listener_does_not_block_others():
    events = CartEvents()
    events.subscribe(Mock(side_effect=RuntimeError("badge crashed")))
    survivor = Mock()
    events.subscribe(survivor)

    await events.emit("u1")

    survivor.assert_called_once_with("u1")
