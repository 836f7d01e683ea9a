"""Bearer-token authentication for the ledger API."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from fintrack.core.logger import get_logger
from fintrack.core.security import AuthenticationError, SecurityProvider

LOGGER = get_logger(__name__)

PUBLIC_PATHS = frozenset({"/health", "/openapi.json", "/docs", "/redoc"})


def _bearer_token(request: Request) -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    token = token.strip()
    return token if scheme.lower() == "bearer" and token else None


class AuthMiddleware(BaseHTTPMiddleware):
    """Verify the bearer token and expose the user as ``request.state.user``.

    Requests outside the public paths are answered with ``401`` when no valid
    token is presented, unless authentication is disabled in the settings.
    """

    def __init__(
        self,
        app,
        security_provider: SecurityProvider,
        *,
        public_paths: Iterable[str] = (),
        public_prefixes: Iterable[str] = (),
    ) -> None:
        super().__init__(app)
        self._security_provider = security_provider
        self._public_paths = PUBLIC_PATHS | set(public_paths)
        self._public_prefixes = tuple(public_prefixes)

    def _is_public(self, path: str) -> bool:
        return path in self._public_paths or path.startswith(self._public_prefixes)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request.state.user = None
        token = _bearer_token(request)
        if token is not None:
            try:
                request.state.user = self._security_provider.decode_token(token)
            except AuthenticationError as exc:
                LOGGER.info("Rejected bearer token on %s: %s", request.url.path, exc)
                return JSONResponse({"error": str(exc)}, status_code=401)

        if (
            request.state.user is None
            and self._security_provider.is_enabled
            and not self._is_public(request.url.path)
        ):
            return JSONResponse({"error": "Unauthorized"}, status_code=401)

        return await call_next(request)


__all__ = ["AuthMiddleware", "PUBLIC_PATHS"]
