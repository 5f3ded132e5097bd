"""Request authentication for API routes.

Reads the session cookie, verifies it with the primary token verifier and
yields the claims. ``require_admin`` additionally demands the ADMIN role and
answers 403 rather than 401, so callers can tell "who are you" apart from
"you may not do this". Tokens are never logged.
"""

from fastapi import Depends, Request

from virtuebox import config
from virtuebox.core.exceptions import AuthenticationError, AuthorizationError
from virtuebox.schemas.user import TokenPayload
from virtuebox.utils.jwt_codec import verify_token


def authenticate_request(request: Request) -> TokenPayload:
    """Return the claims of the request's session cookie.

    Raises:
        AuthenticationError: If the cookie is missing or the token is invalid.
    """
    token = request.cookies.get(config.TOKEN_COOKIE_NAME)
    if not token:
        raise AuthenticationError("Unauthorized: No token provided")

    claims = verify_token(token)
    if claims is None:
        raise AuthenticationError("Unauthorized: Invalid or expired token")
    return claims


def require_auth(request: Request) -> TokenPayload:
    """Dependency: any authenticated user."""
    return authenticate_request(request)


def require_admin(claims: TokenPayload = Depends(require_auth)) -> TokenPayload:
    """Dependency: authenticated user with the ADMIN role.

    Raises:
        AuthorizationError: If the caller is authenticated but not an admin.
    """
    if not claims.is_admin:
        raise AuthorizationError("Forbidden: Admin access required")
    return claims
