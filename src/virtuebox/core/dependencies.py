"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes:
request-scoped managers bound to the shared store handle, and the
authentication guards.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from virtuebox.core.auth_guard import require_admin, require_auth
from virtuebox.core.database import Database, get_database, get_db
from virtuebox.schemas.user import TokenPayload
from virtuebox.utils import partner_manager
from virtuebox.utils import user_manager


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_partner_manager(
    db: Session = Depends(get_db),
    database: Database = Depends(get_database),
) -> partner_manager.PartnerManager:
    """Get PartnerManager instance with request-scoped DB session.

    The allocation lock comes from the shared store handle so that every
    request serializes partner id allocation on the same lock.
    """
    return partner_manager.PartnerManager(db, database.allocation_lock)


# Type aliases for dependency injection
UserManagerDep = Annotated[user_manager.UserManager, Depends(get_user_manager)]
PartnerManagerDep = Annotated[
    partner_manager.PartnerManager, Depends(get_partner_manager)
]
CurrentUserDep = Annotated[TokenPayload, Depends(require_auth)]
AdminUserDep = Annotated[TokenPayload, Depends(require_admin)]
