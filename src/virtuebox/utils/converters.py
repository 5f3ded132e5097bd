"""Converters between database models and API schemas."""

from virtuebox.models import MONTHS, UserModel
from virtuebox.schemas.partner import Monthly, Partner
from virtuebox.schemas.user import Role, TokenPayload


def model_to_claims(model: UserModel) -> TokenPayload:
    """Build session token claims for a user."""
    return TokenPayload(
        sub=model.user_id,
        email=model.email,
        role=Role(model.role),
        name=model.name,
        partner_id=model.profile.partner_id if model.profile else None,
    )


def model_to_partner(model: UserModel) -> Partner:
    """Flatten a PARTNER user and its profile into the API record."""
    profile = model.profile
    monthly = Monthly(
        **{month: getattr(profile, f"monthly_{month}") or 0 for month in MONTHS}
    )
    return Partner(
        id=model.user_id,
        name=model.name,
        email=model.email,
        mobile=model.mobile,
        role=Role(model.role),
        partner_id=profile.partner_id,
        is_active=model.is_active,
        created_by=model.created_by,
        deposit=profile.deposit,
        share_percent=profile.share_percent,
        fee_percent=profile.fee_percent,
        start_date=profile.start_date,
        end_date=profile.end_date,
        total_withdrawals=profile.total_withdrawals,
        capital_due=profile.capital_due,
        roi=profile.roi,
        current_month_usd=profile.current_month_usd,
        current_month_inr=profile.current_month_inr,
        backup_balance=profile.backup_balance,
        ic_market_account=profile.ic_market_account,
        trading_agreement=profile.trading_agreement,
        monthly=monthly,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
