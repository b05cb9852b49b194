from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Callable, Protocol

from messenger_service.application.repositories.conversation import (
    ConversationReader,
    ConversationWriter,
)
from messenger_service.application.repositories.message import MessageReader, MessageWriter
from messenger_service.application.repositories.read_state import (
    ReadStateReader,
    ReadStateWriter,
)
from messenger_service.application.repositories.user import UserReader, UserWriter


class UnitOfWork(Protocol):
    users: UserReader
    users_w: UserWriter
    conversations: ConversationReader
    conversations_w: ConversationWriter
    messages: MessageReader
    messages_w: MessageWriter
    read_state: ReadStateReader
    read_state_w: ReadStateWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...


# Opens one Unit-of-Work per call; realtime components hold one of these
# instead of a long-lived session.
UoWFactory = Callable[[], AbstractAsyncContextManager[UnitOfWork]]
