from __future__ import annotations

import uuid

import pytest

from messenger_service.application.exceptions import NotFoundError
from messenger_service.infrastructure.ws.registry import ConnectionRegistry
from messenger_service.services.typing_service import TypingCoordinator
from tests.conftest import FakeConnection, FakeStore


@pytest.mark.asyncio
async def test_typing_twice_broadcasts_twice_and_stores_nothing(
    typing_coordinator: TypingCoordinator, registry: ConnectionRegistry, store: FakeStore,
):
    alice, bob = store.add_user("alice"), store.add_user("bob")
    conv = store.add_conversation([alice, bob])
    a1, b1 = FakeConnection(), FakeConnection()
    registry.register(alice.id, a1)
    registry.register(bob.id, b1)

    await typing_coordinator.set_typing(conv.id, alice.id, True)
    await typing_coordinator.set_typing(conv.id, alice.id, True)

    expected = {
        "type": "typing",
        "conversationId": str(conv.id),
        "senderId": str(alice.id),
        "isTyping": True,
    }
    assert b1.frames() == [expected, expected]
    assert a1.frames() == []
    assert store.messages == []
    assert store.commits == 0


@pytest.mark.asyncio
async def test_typing_stop_is_relayed(
    typing_coordinator: TypingCoordinator, registry: ConnectionRegistry, store: FakeStore,
):
    alice, bob = store.add_user("alice"), store.add_user("bob")
    conv = store.add_conversation([alice, bob])
    b1 = FakeConnection()
    registry.register(bob.id, b1)

    delivered = await typing_coordinator.set_typing(conv.id, alice.id, False)

    assert delivered == 1
    assert b1.frames()[0]["isTyping"] is False


@pytest.mark.asyncio
async def test_typing_in_unknown_conversation(typing_coordinator: TypingCoordinator):
    with pytest.raises(NotFoundError):
        await typing_coordinator.set_typing(uuid.uuid4(), uuid.uuid4(), True)
