"""Route gate middleware for browser navigations.

Runs ahead of every handler. Protected pages need a valid session cookie,
otherwise the browser is sent to the login page with the intended path as
``redirect``. Admin pages send authenticated non-admins to the default
landing page. Tokens are verified with ``utils.jwt_edge``.

Usage:
    app.add_middleware(RouteGateMiddleware)
"""

import logging
from typing import Optional, Sequence
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from virtuebox import config
from virtuebox.schemas.user import TokenPayload
from virtuebox.utils.jwt_edge import verify_token_edge

logger = logging.getLogger(__name__)


def path_matches(path: str, prefixes: Sequence[str]) -> bool:
    """True if ``path`` is one of ``prefixes`` or lies below one of them."""
    for prefix in prefixes:
        prefix = prefix.rstrip("/")
        if path == prefix or path.startswith(prefix + "/"):
            return True
    return False


def gate_decision(
    path: str,
    claims: Optional[TokenPayload],
    protected_prefixes: Sequence[str] = config.PROTECTED_PAGE_PREFIXES,
    admin_prefixes: Sequence[str] = config.ADMIN_PAGE_PREFIXES,
) -> Optional[str]:
    """Decide where a navigation goes.

    Args:
        path: Requested path.
        claims: Verified claims, or None when the cookie is absent or invalid.
        protected_prefixes: Pages that need authentication.
        admin_prefixes: Pages that need the ADMIN role.

    Returns:
        The redirect target, or None to let the request proceed.
    """
    if not path_matches(path, protected_prefixes):
        return None
    if claims is None:
        return f"{config.LOGIN_PAGE}?{urlencode({'redirect': path})}"
    if path_matches(path, admin_prefixes) and not claims.is_admin:
        return config.DEFAULT_LANDING_PAGE
    return None


class RouteGateMiddleware(BaseHTTPMiddleware):
    """Redirect unauthenticated or unauthorized page navigations."""

    def __init__(
        self,
        app,
        protected_prefixes: Sequence[str] = config.PROTECTED_PAGE_PREFIXES,
        admin_prefixes: Sequence[str] = config.ADMIN_PAGE_PREFIXES,
    ):
        super().__init__(app)
        self.protected_prefixes = tuple(protected_prefixes)
        self.admin_prefixes = tuple(admin_prefixes)

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if not path_matches(path, self.protected_prefixes):
            return await call_next(request)

        token = request.cookies.get(config.TOKEN_COOKIE_NAME)
        claims = verify_token_edge(token) if token else None
        target = gate_decision(
            path, claims, self.protected_prefixes, self.admin_prefixes
        )
        if target is not None:
            logger.debug("Route gate redirecting %s -> %s", path, target)
            return RedirectResponse(url=target, status_code=307)
        return await call_next(request)
