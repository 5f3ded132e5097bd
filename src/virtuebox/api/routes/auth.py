"""Authentication routes.

This module handles login, logout and the current-user lookup. The session
token travels in an HTTP-only cookie.
"""

from fastapi import APIRouter, Response

from virtuebox import config
from virtuebox.core.dependencies import CurrentUserDep, UserManagerDep
from virtuebox.core.exceptions import ValidationError
from virtuebox.schemas.user import (
    CurrentUser,
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
)
from virtuebox.utils.converters import model_to_claims
from virtuebox.utils.jwt_codec import sign_token

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session cookie (HTTP-only, SameSite=Lax, Secure in production)."""
    response.set_cookie(
        key=config.TOKEN_COOKIE_NAME,
        value=token,
        max_age=int(config.get_token_lifetime().total_seconds()),
        path="/",
        secure=config.IS_PRODUCTION,
        httponly=True,
        samesite="lax",
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    response_model_exclude_none=True,
    summary="Log in",
)
def login(
    req: LoginRequest,
    response: Response,
    user_manager: UserManagerDep,
) -> LoginResponse:
    """Validate credentials and set the session cookie.

    Args:
        req: Login request with email and password.
        response: Outgoing response, receives the cookie.
        user_manager: Injected UserManager instance.

    Returns:
        LoginResponse with the logged-in user's public info.

    Raises:
        ValidationError: If email or password is missing (400).
        InvalidCredentialsError: On unknown email or wrong password (401).
        AccountDeactivatedError: If the account is deactivated (403).
    """
    if not req.email or not req.password:
        raise ValidationError("Email and password are required")

    user = user_manager.authenticate(req.email, req.password)
    claims = model_to_claims(user)
    set_session_cookie(response, sign_token(claims))
    return LoginResponse(user=CurrentUser.from_claims(claims))


@router.post("/logout", response_model=MessageResponse, summary="Log out")
def logout(response: Response) -> MessageResponse:
    """Clear the session cookie."""
    response.delete_cookie(
        key=config.TOKEN_COOKIE_NAME,
        path="/",
        secure=config.IS_PRODUCTION,
        httponly=True,
        samesite="lax",
    )
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    response_model_exclude_none=True,
    summary="Current user",
)
def me(claims: CurrentUserDep) -> CurrentUserResponse:
    """Return the authenticated user's info straight from the token claims."""
    return CurrentUserResponse(user=CurrentUser.from_claims(claims))
