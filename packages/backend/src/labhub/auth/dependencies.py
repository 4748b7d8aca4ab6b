"""FastAPI auth dependencies — the access-control gate.

Learn: These are used as Depends() (usually through ``guarded(...)``)
to resolve the caller and check what they are allowed to do.

AUTHENTICATE resolves the bearer token to a stored user:
- no Authorization header        → 401 "Access denied"
- token fails verification       → 400 "Invalid token"
- token ok but user is gone      → 403 "No user found"

REQUIRE-TEAM-MEMBER and REQUIRE-ADMIN both depend on AUTHENTICATE, so
FastAPI always resolves the user first, once per request (dependency
results are cached).
"""

import uuid
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from labhub.auth.jwt import TokenError, TokenIssuer, extract_bearer, get_token_issuer
from labhub.db.engine import get_db
from labhub.db.models import TeamMember, User


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> User:
    """Resolve the bearer token to a User (required — 401 if absent)."""
    if not authorization:
        raise HTTPException(
            status_code=401,
            detail="Access denied",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = issuer.verify(extract_bearer(authorization))
        user_id = uuid.UUID(claims.user_id)
    except (TokenError, ValueError):
        raise HTTPException(status_code=400, detail="Invalid token")

    user = await db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=403, detail="No user found")
    return user


async def require_team_member(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Allow only users with a roster row. Alumni still count.

    Looked up on every request: removing the roster row revokes access
    immediately.
    """
    result = await db.execute(
        select(TeamMember.id).where(TeamMember.user_id == user.id)
    )
    if result.first() is None:
        raise HTTPException(
            status_code=403, detail="Access denied: Not a team member"
        )
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Allow only users whose admin flag is set."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Access denied")
    return user


def ensure_author(publication, user: User) -> None:
    """Resource-owner check for publications."""
    if not publication.has_author(user.id):
        raise HTTPException(
            status_code=403,
            detail="Access denied: You are not an author of this publication",
        )
