"""User database model.

One row per identity, ADMIN or PARTNER. Partner-only data lives in
``PartnerProfileModel`` keyed by the same ``user_id``.
"""

from sqlalchemy import Boolean, Column, String
from sqlalchemy.orm import relationship

from .base import Base


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    user_id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)  # lower-cased
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    mobile = Column(String, nullable=True)
    role = Column(String, nullable=False, index=True)  # 'ADMIN' or 'PARTNER'
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String, nullable=True)
    created_at = Column(String, nullable=False)  # ISO format string
    updated_at = Column(String, nullable=False)  # ISO format string

    profile = relationship(
        "PartnerProfileModel",
        back_populates="user",
        uselist=False,
        lazy="joined",
        cascade="all, delete-orphan",
    )
