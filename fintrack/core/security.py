"""JWT bearer-token helpers that turn requests into ledger callers."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache

import jwt
from fastapi import Depends, HTTPException, Request, status
from jwt import ExpiredSignatureError, InvalidTokenError

from fintrack.core.config import AuthSettings, get_settings
from fintrack.domain.caller import CallerScope

# Used only when token verification is switched off (local development).
DEV_USER_HEADER = "X-User-Id"


class AuthenticationError(Exception):
    """The bearer token could not be verified."""


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """Subject of a verified access token."""

    user_id: str
    email: str | None = None


class SecurityProvider:
    """Verify (and, for development, issue) JWT access tokens."""

    def __init__(self, settings: AuthSettings) -> None:
        self._settings = settings

    @property
    def is_enabled(self) -> bool:
        return self._settings.enabled

    @property
    def organization_header(self) -> str:
        return self._settings.organization_header

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(minutes=self._settings.access_token_expire_minutes)

    def issue_token(self, user: AuthenticatedUser) -> str:
        """Create a signed access token for ``user``.

        Session issuance belongs to the identity service; this exists for
        development tooling and tests.
        """

        now = datetime.now(timezone.utc)
        payload: dict[str, object] = {
            "sub": user.user_id,
            "iat": now,
            "exp": now + self.token_ttl,
        }
        if user.email:
            payload["email"] = user.email
        return jwt.encode(payload, self._settings.secret_key, algorithm=self._settings.algorithm)

    def decode_token(self, token: str) -> AuthenticatedUser:
        """Verify signature and expiry; ``sub`` becomes the user id."""

        try:
            claims = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token expired") from exc
        except InvalidTokenError as exc:
            raise AuthenticationError("Invalid token") from exc

        if not isinstance(claims["sub"], str) or not claims["sub"]:
            raise AuthenticationError("Invalid token subject")
        email = claims.get("email")
        return AuthenticatedUser(user_id=claims["sub"], email=email if isinstance(email, str) else None)


@lru_cache(maxsize=1)
def get_security_provider() -> SecurityProvider:
    return SecurityProvider(get_settings().auth)


def get_authenticated_user(request: Request) -> AuthenticatedUser:
    """Retrieve the authenticated user placed on the request by the middleware."""

    user = getattr(request.state, "user", None)
    if user is None and not get_security_provider().is_enabled:
        dev_user = request.headers.get(DEV_USER_HEADER)
        if dev_user:
            user = AuthenticatedUser(user_id=dev_user)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return user


def get_caller_scope(
    request: Request,
    user: AuthenticatedUser = Depends(get_authenticated_user),
) -> CallerScope:
    """Build the explicit caller scope from the user and the selected organization."""

    organization_id = request.headers.get(get_security_provider().organization_header) or None
    return CallerScope(user_id=user.user_id, organization_id=organization_id)


__all__ = [
    "AuthenticatedUser",
    "AuthenticationError",
    "SecurityProvider",
    "get_authenticated_user",
    "get_caller_scope",
    "get_security_provider",
]
