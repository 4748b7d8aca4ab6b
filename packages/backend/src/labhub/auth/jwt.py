"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
A token carries the user id (``sub``) and the role label, signed with
the process-wide secret.

Tokens have no expiry by default: that is how the lab site has always
worked, and changing it logs everybody out. Setting
LABHUB_TOKEN_EXPIRE_MINUTES turns on an ``exp`` claim.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import jwt

from labhub.config import settings


class TokenError(Exception):
    """Raised when token verification fails."""


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    role: str


class TokenIssuer:
    """Issues and verifies signed bearer tokens.

    The secret, algorithm and expiry policy are fixed at construction.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: Optional[int] = None,
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def expire_minutes(self) -> Optional[int]:
        return self._expire_minutes

    def issue(self, user_id: str, role: str) -> str:
        """Create a signed token for a user."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "role": role,
            "iat": now,
        }
        if self._expire_minutes:
            payload["exp"] = now + timedelta(minutes=self._expire_minutes)
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Verify and decode a token.

        Returns the claims on success.
        Raises TokenError on failure.
        """
        if not token:
            raise TokenError("Invalid token: empty")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenError(f"Invalid token: {e}")

        role = payload.get("role")
        if not isinstance(role, str):
            raise TokenError("Invalid token: missing role claim")
        return TokenClaims(user_id=str(payload["sub"]), role=role)


def extract_bearer(authorization: str) -> str:
    """Return the token segment of an ``"<scheme> <token>"`` header.

    Any scheme word is accepted. A header without a space yields an
    empty string, which never verifies.
    """
    parts = authorization.split(" ")
    return parts[1] if len(parts) > 1 else ""


@lru_cache
def get_token_issuer() -> TokenIssuer:
    """FastAPI dependency — the one TokenIssuer built from settings."""
    return TokenIssuer(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.token_expire_minutes,
    )
