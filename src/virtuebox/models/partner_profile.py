"""Partner profile database model.

Financial profile attached to a PARTNER user. Calculated figures (roi,
capital due, current month ...) are stored as given; nothing derives them.
"""

from sqlalchemy import Column, Date, Float, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import Base

MONTHS = (
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
)


class PartnerProfileModel(Base):
    """Partner profile database model."""

    __tablename__ = "partner_profiles"

    user_id = Column(
        String, ForeignKey("users.user_id"), primary_key=True, index=True
    )
    partner_id = Column(String, unique=True, index=True, nullable=False)

    deposit = Column(Float, nullable=False, default=0)
    share_percent = Column(Float, nullable=False, default=0)
    fee_percent = Column(Float, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    total_withdrawals = Column(Float, nullable=False, default=0)
    capital_due = Column(Float, nullable=False, default=0)
    roi = Column(Float, nullable=False, default=0)
    current_month_usd = Column(Float, nullable=False, default=0)
    current_month_inr = Column(Float, nullable=False, default=0)
    backup_balance = Column(Float, nullable=False, default=0)
    ic_market_account = Column(String, nullable=True)
    trading_agreement = Column(String, nullable=True)

    # Monthly breakdown (calendar year, USD); every month always present
    monthly_jan = Column(Float, nullable=False, default=0)
    monthly_feb = Column(Float, nullable=False, default=0)
    monthly_mar = Column(Float, nullable=False, default=0)
    monthly_apr = Column(Float, nullable=False, default=0)
    monthly_may = Column(Float, nullable=False, default=0)
    monthly_jun = Column(Float, nullable=False, default=0)
    monthly_jul = Column(Float, nullable=False, default=0)
    monthly_aug = Column(Float, nullable=False, default=0)
    monthly_sep = Column(Float, nullable=False, default=0)
    monthly_oct = Column(Float, nullable=False, default=0)
    monthly_nov = Column(Float, nullable=False, default=0)
    monthly_dec = Column(Float, nullable=False, default=0)

    created_at = Column(String, nullable=False, index=True)  # ISO format string

    user = relationship("UserModel", back_populates="profile")
