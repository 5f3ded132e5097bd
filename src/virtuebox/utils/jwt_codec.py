"""Session token signing and verification.

This is the single signer for session tokens and the primary verifier used
by API routes. The route gate verifies the same tokens through
``utils.jwt_edge``, an independent implementation. Any change to the claim
shape or the algorithm here must land in ``jwt_edge`` at the same time;
``tests/test_jwt.py`` runs both verifiers against shared golden tokens.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from jose import JWTError, jwt
from pydantic import ValidationError

from virtuebox import config
from virtuebox.core.exceptions import ConfigurationError
from virtuebox.schemas.user import TokenPayload

logger = logging.getLogger(__name__)


def _resolve_secret(secret: Optional[str]) -> Optional[str]:
    """Return a usable secret, or None when it is missing or too short."""
    if secret is None:
        secret = config.JWT_SECRET
    if not secret or len(secret.encode("utf-8")) < config.MIN_SECRET_BYTES:
        return None
    return secret


def sign_token(
    claims: TokenPayload,
    secret: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed session token.

    Args:
        claims: Claims to embed.
        secret: Signing secret. Defaults to JWT_SECRET.
        expires_delta: Token lifetime. Defaults to JWT_EXPIRES_IN.

    Returns:
        Encoded token string.

    Raises:
        ConfigurationError: If the secret is missing or shorter than 32 bytes.
    """
    key = _resolve_secret(secret)
    if key is None:
        raise ConfigurationError(
            f"JWT_SECRET is missing or shorter than {config.MIN_SECRET_BYTES} bytes"
        )
    if expires_delta is None:
        expires_delta = config.get_token_lifetime()

    now = datetime.now(pytz.utc)
    to_encode = claims.model_dump(by_alias=True, exclude_none=True, mode="json")
    to_encode.update({"iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, key, algorithm=config.JWT_ALGORITHM)


def verify_token(token: str, secret: Optional[str] = None) -> Optional[TokenPayload]:
    """Verify and decode a session token.

    Fails closed: a missing or short secret, a malformed or expired token,
    a signature mismatch or an incomplete claim set all return None.

    Args:
        token: Encoded token string.
        secret: Verification secret. Defaults to JWT_SECRET.

    Returns:
        The token claims, or None if the token is not valid.
    """
    key = _resolve_secret(secret)
    if key is None:
        logger.error(
            "JWT_SECRET is missing or too short (must be >= %d bytes); "
            "rejecting token",
            config.MIN_SECRET_BYTES,
        )
        return None
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            key,
            algorithms=[config.JWT_ALGORITHM],
            options={"require_exp": True, "require_sub": True},
        )
        return TokenPayload.model_validate(payload)
    except (JWTError, ValidationError) as e:
        logger.debug("Token rejected: %s", type(e).__name__)
        return None
