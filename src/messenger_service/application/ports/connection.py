from __future__ import annotations

from typing import Protocol


class Connection(Protocol):
    """One live duplex transport session (a browser tab or device)."""

    @property
    def id(self) -> str: ...

    async def send_text(self, data: str) -> None: ...
