from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

# Returns an aware UTC timestamp; injected where "last seen" style values are stamped.
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
