"""Explicit identity passed into domain code.

Controllers and services never read the request user themselves; the
view layer builds a ``UserContext`` and hands it over.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UserContext:
    user_id: int
    email: str
    full_name: str = ""
    phone: str = ""
    address: str = ""
    is_staff: bool = False

    @classmethod
    def from_user(cls, user) -> "UserContext":
        return cls(
            user_id=user.pk,
            email=user.email or "",
            full_name=user.get_full_name() or "",
            phone=user.phone or "",
            address=getattr(user, "address", "") or "",
            is_staff=bool(getattr(user, "is_hall_manager", user.is_staff)),
        )

    @property
    def first_name(self) -> str:
        parts = self.full_name.split()
        return parts[0] if parts else ""

    @property
    def surname(self) -> str:
        return " ".join(self.full_name.split()[1:])
