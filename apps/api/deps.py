from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException


@dataclass(frozen=True)
class CurrentUser:
    id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def current_user(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> CurrentUser:
    """Caller identity forwarded by the session layer in front of the API."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return CurrentUser(id=x_user_id, role=(x_user_role or "user").lower())