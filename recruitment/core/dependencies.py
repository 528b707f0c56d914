"""
FastAPI dependencies shared by the routers.

Token issuance lives in the gateway in front of this service; requests
arrive with the authenticated user's id and role forwarded as headers.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Header, HTTPException, status

from recruitment.db.session import get_db  # noqa: F401  re-exported for routers


@dataclass(frozen=True)
class CurrentUser:
    id: UUID
    role: str


async def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> CurrentUser:
    """Build the acting user from forwarded identity headers."""
    if not x_user_id or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity headers",
        )
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user id header",
        )
    return CurrentUser(id=user_id, role=x_user_role)


def get_language(
    accept_language: Optional[str] = Header(default=None),
    lang: Optional[str] = None,
) -> str:
    """Requested content language: explicit ?lang= wins over Accept-Language."""
    if lang:
        return lang.strip().lower()
    if accept_language:
        # "en-US,en;q=0.9" -> "en"
        first = accept_language.split(",")[0].split(";")[0].strip()
        if first:
            return first.split("-")[0].lower()
    return ""
