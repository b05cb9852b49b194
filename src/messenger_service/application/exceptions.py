from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    code = "error"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    code = "not_found"


class ForbiddenError(AppError):
    code = "forbidden"


class InvalidPayloadError(AppError):
    code = "invalid_payload"


class TransportError(AppError):
    """Inbound frame could not be decoded."""

    code = "invalid_frame"


class PersistenceError(AppError):
    """A Store call failed."""

    code = "persistence_error"
