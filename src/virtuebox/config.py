"""Configuration module for the VirtueBox partner back office.

This module provides centralized configuration management: store connection,
token signing, cookie policy, API server settings and seed defaults.
All configuration values can be overridden via environment variables.
"""

import os
import re
from datetime import timedelta
from typing import List, Optional

from dotenv import load_dotenv

from virtuebox.core.exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()

# --- Environment ---

APP_ENV: str = os.getenv("APP_ENV", "development").strip().lower()
IS_PRODUCTION: bool = APP_ENV in ("production", "prod")

# --- Store Configuration ---

# SQLAlchemy URL of the credential store. Required; see require_database_url().
DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")

# --- Authentication Configuration ---

# Symmetric signing secret. Must be at least MIN_SECRET_BYTES long.
JWT_SECRET: Optional[str] = os.getenv("JWT_SECRET")
JWT_ALGORITHM = "HS256"
MIN_SECRET_BYTES = 32

JWT_EXPIRES_IN: str = os.getenv("JWT_EXPIRES_IN", "7d")

TOKEN_COOKIE_NAME = "token"

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,"
    "http://127.0.0.1:5173",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
# "text" for human-readable output, "json" for log aggregators
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "text").lower()

# --- Route Gate Configuration ---

# Page prefixes that need a valid session cookie
PROTECTED_PAGE_PREFIXES = ("/dashboard", "/partners")
# Page prefixes that additionally need the ADMIN role
ADMIN_PAGE_PREFIXES = ("/partners",)
LOGIN_PAGE = "/login"
DEFAULT_LANDING_PAGE = "/dashboard"

# --- Partner Configuration ---

PARTNER_ID_PREFIX = "VBP"
PARTNER_ID_DIGITS = 5
PARTNER_ID_SEED = 10001
# Attempts before giving up when another writer took the same partner id
PARTNER_ID_MAX_ATTEMPTS = 5

# --- Seed Admin Configuration ---

SEED_ADMIN_EMAIL: str = os.getenv("SEED_ADMIN_EMAIL", "admin@virtuebox.com")
SEED_ADMIN_PASSWORD: str = os.getenv("SEED_ADMIN_PASSWORD", "Admin@123")
SEED_ADMIN_NAME: str = os.getenv("SEED_ADMIN_NAME", "Super Admin")


_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


def parse_duration(value: str) -> timedelta:
    """Parse a lifetime such as "7d", "12h", "30m" or "3600".

    Args:
        value: Duration string. A bare number is taken as seconds.

    Returns:
        The parsed timedelta.

    Raises:
        ConfigurationError: If the value is malformed or not positive.
    """
    match = _DURATION_RE.match(value or "")
    if not match:
        raise ConfigurationError(f"Invalid duration: {value!r}")
    amount, unit = int(match.group(1)), match.group(2)
    if amount <= 0:
        raise ConfigurationError(f"Duration must be positive: {value!r}")
    return timedelta(**{_DURATION_UNITS[unit]: amount})


def get_token_lifetime() -> timedelta:
    """Token lifetime as configured by JWT_EXPIRES_IN (default 7 days)."""
    return parse_duration(JWT_EXPIRES_IN)


def require_database_url() -> str:
    """Return DATABASE_URL or fail fast.

    Raises:
        ConfigurationError: If DATABASE_URL is not set.
    """
    if not DATABASE_URL:
        raise ConfigurationError(
            "DATABASE_URL must be set (e.g. sqlite:///./virtuebox.db)"
        )
    return DATABASE_URL
