from __future__ import annotations

from uuid import UUID


def direct_key(user_a: UUID, user_b: UUID) -> str:
    """Order-independent key of a 1:1 conversation between two users."""
    first, second = sorted((str(user_a), str(user_b)))
    return f"{first}:{second}"
