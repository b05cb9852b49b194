from __future__ import annotations

import uuid

import pytest

from messenger_service.infrastructure.ws.protocol import PongEvent
from messenger_service.infrastructure.ws.registry import ConnectionRegistry
from tests.conftest import FakeConnection


def test_register_reports_first_connection(registry: ConnectionRegistry):
    user = uuid.uuid4()
    first, second = FakeConnection(), FakeConnection()

    assert registry.register(user, first) is True
    assert registry.register(user, second) is False
    assert registry.connections_for(user) == {first, second}
    assert registry.online_users() == {user}


def test_register_same_connection_twice_is_noop(registry: ConnectionRegistry):
    user = uuid.uuid4()
    conn = FakeConnection()

    registry.register(user, conn)
    registry.register(user, conn)

    assert registry.connections_for(user) == {conn}


def test_connection_cannot_move_to_another_user(registry: ConnectionRegistry):
    conn = FakeConnection()
    registry.register(uuid.uuid4(), conn)

    with pytest.raises(ValueError):
        registry.register(uuid.uuid4(), conn)


def test_unregister_reports_last_connection(registry: ConnectionRegistry):
    user = uuid.uuid4()
    first, second = FakeConnection(), FakeConnection()
    registry.register(user, first)
    registry.register(user, second)

    assert registry.unregister(first) == (user, False)
    assert registry.unregister(second) == (user, True)
    assert registry.connections_for(user) == frozenset()
    assert registry.online_users() == frozenset()


def test_unregister_unknown_connection(registry: ConnectionRegistry):
    assert registry.unregister(FakeConnection()) == (None, False)


@pytest.mark.asyncio
async def test_send_to_users_reaches_every_connection(registry: ConnectionRegistry):
    alice, bob, carol = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    a1, a2, b1, c1 = FakeConnection(), FakeConnection(), FakeConnection(), FakeConnection()
    registry.register(alice, a1)
    registry.register(alice, a2)
    registry.register(bob, b1)
    registry.register(carol, c1)

    delivered = await registry.send_to_users([alice, bob, alice], PongEvent())

    assert delivered == 3
    assert len(a1.sent) == len(a2.sent) == len(b1.sent) == 1
    assert c1.sent == []


@pytest.mark.asyncio
async def test_send_to_users_excludes_user(registry: ConnectionRegistry):
    alice, bob = uuid.uuid4(), uuid.uuid4()
    a1, b1 = FakeConnection(), FakeConnection()
    registry.register(alice, a1)
    registry.register(bob, b1)

    delivered = await registry.send_to_users([alice, bob], PongEvent(), exclude=alice)

    assert delivered == 1
    assert a1.sent == []


@pytest.mark.asyncio
async def test_failed_send_does_not_block_others(registry: ConnectionRegistry):
    alice, bob = uuid.uuid4(), uuid.uuid4()
    dead, alive = FakeConnection(fail=True), FakeConnection()
    registry.register(alice, dead)
    registry.register(bob, alive)

    delivered = await registry.send_to_users([alice, bob], PongEvent())

    assert delivered == 1
    assert alive.frames() == [{"type": "pong"}]
    # a failed push leaves cleanup to the connection's close handler
    assert registry.connections_for(alice) == {dead}
