from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NewUserDTO:
    username: str
    email: str
    display_name: str
    avatar: str | None = None
    department: str | None = None
    status_message: str | None = "Available"


@dataclass(frozen=True, slots=True)
class ProfileUpdateDTO:
    display_name: str | None = None
    avatar: str | None = None
    department: str | None = None
    status_message: str | None = None

    def changes(self) -> dict[str, str]:
        return {
            key: value
            for key, value in (
                ("display_name", self.display_name),
                ("avatar", self.avatar),
                ("department", self.department),
                ("status_message", self.status_message),
            )
            if value is not None
        }
