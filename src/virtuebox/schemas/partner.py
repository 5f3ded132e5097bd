"""Partner schema definitions.

Request and response models for partner records. Update requests carry
sparse semantics: only fields present in the body are applied, which is
read back through ``model_fields_set``.
"""

from datetime import date, datetime, timezone
from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from .base import CamelModel
from .user import Role


def _coerce_date(value: Any) -> Any:
    """Accept "YYYY-MM-DD", full ISO datetimes and blank strings."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if "T" in value:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            if parsed.tzinfo is not None:
                parsed = parsed.astimezone(timezone.utc)
            return parsed.date()
    return value


def _strip_text(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


class Monthly(CamelModel):
    """Monthly breakdown (calendar year, USD). All twelve months always present."""

    jan: float = 0
    feb: float = 0
    mar: float = 0
    apr: float = 0
    may: float = 0
    jun: float = 0
    jul: float = 0
    aug: float = 0
    sep: float = 0
    oct: float = 0
    nov: float = 0
    dec: float = 0


class MonthlyUpdate(CamelModel):
    """Sparse monthly update; only supplied months are written."""

    jan: Optional[float] = None
    feb: Optional[float] = None
    mar: Optional[float] = None
    apr: Optional[float] = None
    may: Optional[float] = None
    jun: Optional[float] = None
    jul: Optional[float] = None
    aug: Optional[float] = None
    sep: Optional[float] = None
    oct: Optional[float] = None
    nov: Optional[float] = None
    dec: Optional[float] = None

    @model_validator(mode="after")
    def no_null_months(self) -> "MonthlyUpdate":
        for month in self.model_fields_set:
            if getattr(self, month) is None:
                raise ValueError(f"monthly.{month} cannot be null")
        return self


class Partner(CamelModel):
    """Partner record as exposed by the API. Never carries the password."""

    id: str
    name: str
    email: str
    mobile: Optional[str] = None
    role: Role = Role.PARTNER
    partner_id: str
    is_active: bool
    created_by: Optional[str] = None

    deposit: float = 0
    share_percent: float = 0
    fee_percent: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_withdrawals: float = 0
    capital_due: float = 0
    roi: float = 0
    current_month_usd: float = Field(default=0, alias="currentMonthUSD")
    current_month_inr: float = Field(default=0, alias="currentMonthINR")
    backup_balance: float = 0
    ic_market_account: Optional[str] = None
    trading_agreement: Optional[str] = None
    monthly: Monthly = Field(default_factory=Monthly)

    created_at: str
    updated_at: str


class CreatePartnerRequest(CamelModel):
    """Body of a partner creation request."""

    # Required, but checked by the route so the caller gets one clear message
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    mobile: Optional[str] = None
    # null or absent fall back to the defaults applied on create
    is_active: Optional[bool] = None
    deposit: Optional[float] = None
    share_percent: Optional[float] = None
    fee_percent: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    ic_market_account: Optional[str] = None
    trading_agreement: Optional[str] = None
    monthly: Optional[MonthlyUpdate] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, value: Any) -> Any:
        return _coerce_date(value)

    @field_validator("mobile", "ic_market_account", "trading_agreement", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _strip_text(value)


class UpdatePartnerRequest(CamelModel):
    """Sparse partner update.

    Absent fields are left untouched. For dates an explicit null (or blank
    string) clears the stored value. A null or blank email/password means
    "keep the current one".
    """

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    mobile: Optional[str] = None
    is_active: Optional[bool] = None
    deposit: Optional[float] = None
    share_percent: Optional[float] = None
    fee_percent: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_withdrawals: Optional[float] = None
    capital_due: Optional[float] = None
    roi: Optional[float] = None
    current_month_usd: Optional[float] = Field(default=None, alias="currentMonthUSD")
    current_month_inr: Optional[float] = Field(default=None, alias="currentMonthINR")
    backup_balance: Optional[float] = None
    ic_market_account: Optional[str] = None
    trading_agreement: Optional[str] = None
    monthly: Optional[MonthlyUpdate] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, value: Any) -> Any:
        return _coerce_date(value)

    @field_validator("mobile", "ic_market_account", "trading_agreement", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _strip_text(value)

    @model_validator(mode="after")
    def reject_null_for_required(self) -> "UpdatePartnerRequest":
        for field in NON_NULLABLE_UPDATE_FIELDS & self.model_fields_set:
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        if "name" in self.model_fields_set and not (self.name or "").strip():
            raise ValueError("name cannot be empty")
        return self


# Columns that always hold a value; an explicit null for these is an error
NON_NULLABLE_UPDATE_FIELDS = frozenset(
    {
        "name",
        "is_active",
        "deposit",
        "share_percent",
        "total_withdrawals",
        "capital_due",
        "roi",
        "current_month_usd",
        "current_month_inr",
        "backup_balance",
    }
)


class PartnerResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    partner: Partner


class PartnerListResponse(CamelModel):
    success: bool = True
    role: Role
    partners: List[Partner]
