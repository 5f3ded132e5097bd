"""Database models.

Importing this package registers every model with ``Base.metadata``.
"""

from .base import Base
from .user import UserModel
from .partner_profile import MONTHS, PartnerProfileModel

__all__ = ["Base", "UserModel", "PartnerProfileModel", "MONTHS"]
