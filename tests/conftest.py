"""Shared test fixtures."""
from __future__ import annotations

import asyncio
import itertools
import json
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Iterable, Iterator
from uuid import UUID

import pytest

from messenger_service.application.dto.principal import Principal
from messenger_service.application.dto.user import NewUserDTO
from messenger_service.application.exceptions import PersistenceError
from messenger_service.application.pagination import decode_cursor
from messenger_service.domain.entities.conversation import Conversation
from messenger_service.domain.entities.message import Message, NewMessage
from messenger_service.domain.entities.read_state import ReadState
from messenger_service.domain.entities.user import User
from messenger_service.domain.value_objects.ids import direct_key
from messenger_service.infrastructure.ws.gateway import RealtimeGateway
from messenger_service.infrastructure.ws.registry import ConnectionRegistry
from messenger_service.services.message_router import MessageRouter
from messenger_service.services.presence_service import PresenceTracker
from messenger_service.services.typing_service import TypingCoordinator

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


@dataclass
class FakeStore:
    """Shared in-memory state behind every FakeUoW opened by a test."""

    users: dict[UUID, User] = field(default_factory=dict)
    conversations: dict[UUID, Conversation] = field(default_factory=dict)
    messages: list[Message] = field(default_factory=list)
    read_states: dict[tuple[UUID, UUID], ReadState] = field(default_factory=dict)
    presence_writes: list[tuple[UUID, bool]] = field(default_factory=list)
    commits: int = 0
    fail_writes: bool = False
    # awaited inside every commit, lets a test hold a transaction open
    before_commit: Callable[[], Awaitable[None]] | None = None
    row_locks: dict[UUID, asyncio.Lock] = field(default_factory=dict)
    _ticks: Iterator[int] = field(default_factory=lambda: itertools.count(1))

    def now(self) -> datetime:
        # strictly increasing so ordering by created_at is deterministic
        return _EPOCH + timedelta(milliseconds=next(self._ticks))

    def check_writable(self) -> None:
        if self.fail_writes:
            raise PersistenceError("Store unavailable")

    def add_user(self, username: str, **overrides: Any) -> User:
        user = User(
            id=uuid.uuid4(),
            username=username,
            email=f"{username}@example.com",
            display_name=username.title(),
            avatar=None,
            department=None,
            status_message="Available",
            is_online=False,
            last_seen=None,
            created_at=self.now(),
        )
        user = replace(user, **overrides)
        self.users[user.id] = user
        return user

    def add_conversation(
        self,
        participants: list[User],
        *,
        name: str | None = None,
        is_group: bool | None = None,
    ) -> Conversation:
        now = self.now()
        conv = Conversation(
            id=uuid.uuid4(),
            name=name,
            is_group=len(participants) > 2 if is_group is None else is_group,
            participant_ids=tuple(u.id for u in participants),
            created_at=now,
            updated_at=now,
        )
        self.conversations[conv.id] = conv
        return conv

    def messages_in(self, conversation_id: UUID) -> list[Message]:
        return sorted(
            (m for m in self.messages if m.conversation_id == conversation_id),
            key=lambda m: (m.created_at, m.id),
        )


@dataclass
class FakeUserReader:
    _store: FakeStore

    async def get_by_id(self, user_id: UUID) -> User | None:
        return self._store.users.get(user_id)

    async def get_many(self, user_ids: Iterable[UUID]) -> list[User]:
        return [self._store.users[uid] for uid in set(user_ids) if uid in self._store.users]

    async def list_all(self) -> list[User]:
        return sorted(self._store.users.values(), key=lambda u: u.display_name)


@dataclass
class FakeUserWriter:
    _store: FakeStore

    async def create(self, user: NewUserDTO) -> User:
        self._store.check_writable()
        return self._store.add_user(
            user.username,
            email=user.email,
            display_name=user.display_name,
            avatar=user.avatar,
            department=user.department,
            status_message=user.status_message,
        )

    async def update_profile(self, user_id: UUID, changes: dict[str, str]) -> User | None:
        self._store.check_writable()
        user = self._store.users.get(user_id)
        if user is None:
            return None
        user = replace(user, **changes)
        self._store.users[user_id] = user
        return user

    async def set_online_status(self, user_id: UUID, is_online: bool, seen_at: datetime) -> None:
        self._store.check_writable()
        self._store.presence_writes.append((user_id, is_online))
        user = self._store.users.get(user_id)
        if user is not None:
            self._store.users[user_id] = replace(user, is_online=is_online, last_seen=seen_at)


@dataclass
class FakeConversationReader:
    _store: FakeStore

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        return self._store.conversations.get(conversation_id)

    async def get_direct(self, user_a: UUID, user_b: UUID) -> Conversation | None:
        key = direct_key(user_a, user_b)
        for conv in self._store.conversations.values():
            if not conv.is_group and direct_key(*conv.participant_ids) == key:
                return conv
        return None

    async def list_for_user(self, user_id: UUID) -> list[Conversation]:
        return sorted(
            (c for c in self._store.conversations.values() if c.has_participant(user_id)),
            key=lambda c: c.updated_at,
            reverse=True,
        )


@dataclass
class FakeConversationWriter:
    _store: FakeStore
    _reader: FakeConversationReader

    async def create_group(self, name: str, participant_ids: list[UUID]) -> Conversation:
        self._store.check_writable()
        participants = [self._store.users[uid] for uid in participant_ids]
        return self._store.add_conversation(participants, name=name, is_group=True)

    async def create_direct_if_not_exists(
        self, user_a: UUID, user_b: UUID
    ) -> tuple[Conversation, bool]:
        existing = await self._reader.get_direct(user_a, user_b)
        if existing is not None:
            return existing, False
        self._store.check_writable()
        conv = self._store.add_conversation(
            [self._store.users[user_a], self._store.users[user_b]], is_group=False,
        )
        return conv, True


@dataclass
class FakeMessageReader:
    _store: FakeStore

    async def get_by_id(self, message_id: UUID) -> Message | None:
        return next((m for m in self._store.messages if m.id == message_id), None)

    async def list_messages(
        self,
        conversation_id: UUID,
        *,
        cursor: str | None = None,
        limit: int = 50,
    ) -> list[Message]:
        items = self._store.messages_in(conversation_id)
        if cursor is None:
            return items[-limit:]
        position = decode_cursor(cursor)
        return [m for m in items if (m.created_at, m.id) > position][:limit]

    async def get_last(self, conversation_id: UUID) -> Message | None:
        items = self._store.messages_in(conversation_id)
        return items[-1] if items else None

    async def count_unread(
        self,
        conversation_id: UUID,
        user_id: UUID,
        after: datetime | None,
    ) -> int:
        return sum(
            1
            for m in self._store.messages_in(conversation_id)
            if m.sender_id != user_id and (after is None or m.created_at > after)
        )


@dataclass
class FakeMessageWriter:
    _store: FakeStore
    _held: list[asyncio.Lock]

    async def create(self, message: NewMessage) -> Message:
        self._store.check_writable()
        # stands in for the conversation row lock, held until commit or rollback
        lock = self._store.row_locks.setdefault(message.conversation_id, asyncio.Lock())
        if lock not in self._held:
            await lock.acquire()
            self._held.append(lock)
        created = Message(
            id=uuid.uuid4(),
            conversation_id=message.conversation_id,
            sender_id=message.sender_id,
            content=message.content,
            type=message.type,
            metadata=message.metadata,
            created_at=self._store.now(),
        )
        self._store.messages.append(created)
        conv = self._store.conversations[message.conversation_id]
        self._store.conversations[conv.id] = replace(conv, updated_at=created.created_at)
        return created


@dataclass
class FakeReadStateReader:
    _store: FakeStore

    async def get(self, conversation_id: UUID, user_id: UUID) -> ReadState | None:
        return self._store.read_states.get((conversation_id, user_id))


@dataclass
class FakeReadStateWriter:
    _store: FakeStore

    async def upsert_last_read(
        self,
        conversation_id: UUID,
        user_id: UUID,
        last_message_id: UUID,
        last_read_at: datetime,
    ) -> None:
        self._store.check_writable()
        current = self._store.read_states.get((conversation_id, user_id))
        if current is not None and current.last_read_at is not None and current.last_read_at >= last_read_at:
            return
        self._store.read_states[(conversation_id, user_id)] = ReadState(
            conversation_id=conversation_id,
            user_id=user_id,
            last_read_message_id=last_message_id,
            last_read_at=last_read_at,
        )


class FakeUoW:
    """In-memory UoW for unit tests."""

    def __init__(self, store: FakeStore | None = None) -> None:
        self.store = store or FakeStore()
        self.users = FakeUserReader(self.store)
        self.users_w = FakeUserWriter(self.store)
        self.conversations = FakeConversationReader(self.store)
        self.conversations_w = FakeConversationWriter(self.store, self.conversations)
        self.messages = FakeMessageReader(self.store)
        self._held: list[asyncio.Lock] = []
        self.messages_w = FakeMessageWriter(self.store, self._held)
        self.read_state = FakeReadStateReader(self.store)
        self.read_state_w = FakeReadStateWriter(self.store)
        self._committed = False

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        if self.store.before_commit is not None:
            await self.store.before_commit()
        self._committed = True
        self.store.commits += 1
        self._release()

    async def rollback(self) -> None:
        self._release()

    def _release(self) -> None:
        while self._held:
            self._held.pop().release()

    async def __aenter__(self) -> FakeUoW:
        return self

    async def __aexit__(self, *exc: object) -> None:
        self._release()


def fake_uow_factory(store: FakeStore) -> Callable[[], FakeUoW]:
    return lambda: FakeUoW(store)


class FakeConnection:
    """Records every frame pushed to it."""

    def __init__(self, *, fail: bool = False) -> None:
        self._id = uuid.uuid4().hex
        self.sent: list[str] = []
        self.fail = fail
        self.on_send: Callable[[dict[str, Any]], None] | None = None

    @property
    def id(self) -> str:
        return self._id

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise ConnectionResetError("socket closed")
        if self.on_send is not None:
            self.on_send(json.loads(data))
        self.sent.append(data)

    def frames(self, frame_type: str | None = None) -> list[dict[str, Any]]:
        frames = [json.loads(raw) for raw in self.sent]
        if frame_type is None:
            return frames
        return [f for f in frames if f["type"] == frame_type]


def principal_of(user: User) -> Principal:
    return Principal(user_id=user.id)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def uow(store: FakeStore) -> FakeUoW:
    return FakeUoW(store)


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture
def presence(registry: ConnectionRegistry, store: FakeStore) -> PresenceTracker:
    return PresenceTracker(registry, fake_uow_factory(store))


@pytest.fixture
def message_router(registry: ConnectionRegistry, store: FakeStore) -> MessageRouter:
    return MessageRouter(registry, fake_uow_factory(store))


@pytest.fixture
def typing_coordinator(registry: ConnectionRegistry, store: FakeStore) -> TypingCoordinator:
    return TypingCoordinator(registry, fake_uow_factory(store))


@pytest.fixture
def gateway(
    registry: ConnectionRegistry,
    presence: PresenceTracker,
    message_router: MessageRouter,
    typing_coordinator: TypingCoordinator,
) -> RealtimeGateway:
    return RealtimeGateway(registry, presence, message_router, typing_coordinator)


def text_message(conversation_id: UUID, sender_id: UUID, content: str) -> NewMessage:
    return NewMessage(
        conversation_id=conversation_id,
        sender_id=sender_id,
        content=content,
        type="text",
        metadata=None,
    )
