"""Session token verification for the route gate.

The route gate runs ahead of the API stack and verifies tokens with PyJWT
rather than python-jose. Both verifiers accept exactly the tokens produced
by ``utils.jwt_codec.sign_token``: same HS256 algorithm, same secret rules,
same claim shape. Keep the two in step.
"""

import logging
from typing import Optional

import jwt
from pydantic import ValidationError

from virtuebox import config
from virtuebox.schemas.user import TokenPayload

logger = logging.getLogger(__name__)


def verify_token_edge(
    token: str, secret: Optional[str] = None
) -> Optional[TokenPayload]:
    """Verify a session token in the route gate.

    Args:
        token: Encoded token string.
        secret: Verification secret. Defaults to JWT_SECRET.

    Returns:
        The token claims, or None if the token is invalid, expired, or the
        secret is missing or shorter than 32 bytes.
    """
    if secret is None:
        secret = config.JWT_SECRET
    if not secret or len(secret.encode("utf-8")) < config.MIN_SECRET_BYTES:
        logger.error(
            "JWT_SECRET is missing or too short (must be >= %d bytes); "
            "all protected pages will redirect to login",
            config.MIN_SECRET_BYTES,
        )
        return None
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
        return TokenPayload.model_validate(payload)
    except (jwt.InvalidTokenError, ValidationError) as e:
        logger.debug("Token rejected at route gate: %s", type(e).__name__)
        return None
