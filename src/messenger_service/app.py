from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from messenger_service.api.middleware.correlation_id import CorrelationIdMiddleware
from messenger_service.api.v1.routers import (
    conversations,
    health,
    messages,
    users,
    ws,
)
from messenger_service.application.exceptions import (
    ForbiddenError,
    InvalidPayloadError,
    NotFoundError,
    PersistenceError,
)
from messenger_service.application.uow import UoWFactory
from messenger_service.config import settings
from messenger_service.infrastructure.auth.hs256_verifier import HS256Verifier
from messenger_service.infrastructure.db.session import engine
from messenger_service.infrastructure.db.uow import session_scope
from messenger_service.infrastructure.ws.gateway import RealtimeGateway
from messenger_service.infrastructure.ws.registry import ConnectionRegistry
from messenger_service.services.message_router import MessageRouter
from messenger_service.services.presence_service import PresenceTracker
from messenger_service.services.typing_service import TypingCoordinator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    logger.info("Messenger service starting")
    yield
    await engine.dispose()
    logger.info("Database pool disposed")


def create_app(uow_factory: UoWFactory | None = None) -> FastAPI:
    app = FastAPI(
        title="Messenger Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    uow_factory = uow_factory or session_scope
    registry = ConnectionRegistry()
    presence = PresenceTracker(registry, uow_factory)
    message_router = MessageRouter(registry, uow_factory)
    typing = TypingCoordinator(registry, uow_factory)

    app.state.uow_factory = uow_factory
    app.state.registry = registry
    app.state.presence = presence
    app.state.message_router = message_router
    app.state.gateway = RealtimeGateway(registry, presence, message_router, typing)
    app.state.verifier = HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(conversations.router)
    app.include_router(messages.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ForbiddenError)
    async def _forbidden(_req: Request, exc: ForbiddenError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.detail})

    @app.exception_handler(InvalidPayloadError)
    async def _invalid_payload(_req: Request, exc: InvalidPayloadError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(PersistenceError)
    async def _persistence(_req: Request, exc: PersistenceError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": exc.detail})
