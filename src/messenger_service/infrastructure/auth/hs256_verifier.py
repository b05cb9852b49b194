from __future__ import annotations

from uuid import UUID

import jwt

from messenger_service.application.dto.principal import Principal


class HS256Verifier:
    """Verify session JWTs signed with a shared HS256 secret."""

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    async def verify(self, token: str) -> Principal:
        payload = jwt.decode(
            token,
            self._secret,
            algorithms=[self._algorithm],
            options={"require": ["sub"]},
        )
        try:
            user_id = UUID(str(payload["sub"]))
        except ValueError as exc:
            raise jwt.InvalidTokenError("Subject is not a user id") from exc
        return Principal(user_id=user_id)

    def issue(self, user_id: UUID, **claims: object) -> str:
        """Mint a token for ``user_id`` (dev seeding and tests)."""
        return jwt.encode(
            {"sub": str(user_id), **claims},
            self._secret,
            algorithm=self._algorithm,
        )
