"""Partner management utilities.

Business logic for partner records: sequential partner id allocation,
creation, listing, sparse updates and the active-status toggle used as
soft delete. Called from the partner routes only.
"""

import logging
import threading
from typing import List, Optional

from sqlalchemy import not_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from virtuebox import config
from virtuebox.core.exceptions import (
    EmailAlreadyExistsError,
    PartnerIdAllocationError,
    ValidationError,
)
from virtuebox.models import MONTHS, PartnerProfileModel, UserModel
from virtuebox.schemas.partner import (
    CreatePartnerRequest,
    Partner,
    UpdatePartnerRequest,
)
from virtuebox.schemas.user import Role
from virtuebox.utils.converters import model_to_partner
from virtuebox.utils.password import hash_password
from virtuebox.utils.user_manager import new_user_id, normalize_email, now_iso

logger = logging.getLogger(__name__)

# Update fields stored on the identity row
USER_UPDATE_FIELDS = ("mobile", "is_active")

# Update fields stored on the partner profile row
PROFILE_UPDATE_FIELDS = (
    "deposit",
    "share_percent",
    "fee_percent",
    "start_date",
    "end_date",
    "total_withdrawals",
    "capital_due",
    "roi",
    "current_month_usd",
    "current_month_inr",
    "backup_balance",
    "ic_market_account",
    "trading_agreement",
)


def format_partner_id(number: int) -> str:
    """Format a partner number, e.g. 10001 -> "VBP10001"."""
    return f"{config.PARTNER_ID_PREFIX}{number:0{config.PARTNER_ID_DIGITS}d}"


def parse_partner_id(partner_id: str) -> int:
    """Numeric suffix of a partner id, e.g. "VBP10042" -> 10042.

    Raises:
        PartnerIdAllocationError: If the id does not have the expected form.
    """
    prefix = config.PARTNER_ID_PREFIX
    suffix = partner_id[len(prefix):] if partner_id.startswith(prefix) else ""
    if not suffix.isdigit():
        raise PartnerIdAllocationError(f"Malformed partner id: {partner_id!r}")
    return int(suffix)


class PartnerManager:
    """Manages partner records using SQLAlchemy."""

    def __init__(self, db: Session, allocation_lock: Optional[threading.Lock] = None):
        """Initialize PartnerManager.

        Args:
            db: SQLAlchemy Session.
            allocation_lock: Lock shared by every manager writing to the same
                store; serializes partner id allocation with the insert.
        """
        self.db = db
        self.allocation_lock = allocation_lock or threading.Lock()

    def _query_partners(self):
        return self.db.query(UserModel).filter(UserModel.role == Role.PARTNER.value)

    def _get_partner_model(self, user_id: str) -> Optional[UserModel]:
        return self._query_partners().filter(UserModel.user_id == user_id).first()

    def _email_taken(self, email: str, exclude_user_id: Optional[str] = None) -> bool:
        query = self.db.query(UserModel.user_id).filter(UserModel.email == email)
        if exclude_user_id is not None:
            query = query.filter(UserModel.user_id != exclude_user_id)
        return query.first() is not None

    def next_partner_id(self) -> str:
        """Allocate the id following the most recently created partner.

        Returns the seed id (VBP10001) when no partner exists yet. Callers
        that insert with the result must hold ``allocation_lock``.
        """
        latest = (
            self.db.query(PartnerProfileModel.partner_id)
            .order_by(
                PartnerProfileModel.created_at.desc(),
                PartnerProfileModel.partner_id.desc(),
            )
            .first()
        )
        if latest is None or not latest.partner_id:
            return format_partner_id(config.PARTNER_ID_SEED)
        return format_partner_id(parse_partner_id(latest.partner_id) + 1)

    def create_partner(self, req: CreatePartnerRequest, created_by: str) -> Partner:
        """Create a new PARTNER user with a freshly allocated partner id.

        Args:
            req: Creation request.
            created_by: Name of the admin creating the record.

        Returns:
            The created Partner.

        Raises:
            ValidationError: If name, email or password is missing.
            EmailAlreadyExistsError: If the email is already in use.
            PartnerIdAllocationError: If no partner id could be claimed.
        """
        if not (req.name or "").strip() or not (req.email or "").strip() or not req.password:
            raise ValidationError("Name, email, and password are required")

        email = normalize_email(req.email)
        if self._email_taken(email):
            raise EmailAlreadyExistsError(email)

        # Hash outside the allocation lock; bcrypt is deliberately slow
        password_hash = hash_password(req.password)
        monthly = req.monthly.model_dump(exclude_unset=True) if req.monthly else {}

        for attempt in range(1, config.PARTNER_ID_MAX_ATTEMPTS + 1):
            with self.allocation_lock:
                partner_id = self.next_partner_id()
                now = now_iso()
                user = UserModel(
                    user_id=new_user_id(),
                    email=email,
                    password_hash=password_hash,
                    name=req.name.strip(),
                    mobile=req.mobile,
                    role=Role.PARTNER.value,
                    is_active=True if req.is_active is None else req.is_active,
                    created_by=created_by,
                    created_at=now,
                    updated_at=now,
                )
                user.profile = PartnerProfileModel(
                    partner_id=partner_id,
                    deposit=req.deposit or 0,
                    share_percent=req.share_percent or 0,
                    fee_percent=req.fee_percent,
                    start_date=req.start_date,
                    end_date=req.end_date,
                    total_withdrawals=0,
                    capital_due=0,
                    roi=0,
                    current_month_usd=0,
                    current_month_inr=0,
                    backup_balance=0,
                    ic_market_account=req.ic_market_account,
                    trading_agreement=req.trading_agreement,
                    created_at=now,
                    **{f"monthly_{month}": monthly.get(month, 0) for month in MONTHS},
                )
                self.db.add(user)
                try:
                    self.db.commit()
                except IntegrityError as e:
                    self.db.rollback()
                    if self._email_taken(email):
                        raise EmailAlreadyExistsError(email) from e
                    logger.warning(
                        "Partner id %s already taken (attempt %d/%d), retrying",
                        partner_id,
                        attempt,
                        config.PARTNER_ID_MAX_ATTEMPTS,
                    )
                    continue

            self.db.refresh(user)
            logger.info("Created partner %s (%s) by %s", partner_id, email, created_by)
            return model_to_partner(user)

        raise PartnerIdAllocationError(
            "Could not allocate a unique partner id, please retry"
        )

    def list_partners(self) -> List[Partner]:
        """All partner records, oldest first."""
        models = (
            self._query_partners()
            .join(PartnerProfileModel)
            .order_by(PartnerProfileModel.created_at.asc())
            .all()
        )
        return [model_to_partner(m) for m in models]

    def get_partner(self, user_id: str) -> Optional[Partner]:
        model = self._get_partner_model(user_id)
        if model is None:
            return None
        return model_to_partner(model)

    def update_partner(
        self, user_id: str, req: UpdatePartnerRequest
    ) -> Optional[Partner]:
        """Apply a sparse update to a partner.

        Only fields present in ``req`` change. Monthly values are written
        per month. A new email is checked against every other user first;
        a new password is re-hashed.

        Args:
            user_id: ID of the partner to update.
            req: Sparse update request.

        Returns:
            The updated Partner, or None if no partner has this id.

        Raises:
            EmailAlreadyExistsError: If the new email belongs to another user.
        """
        model = self._get_partner_model(user_id)
        if model is None:
            return None
        profile = model.profile
        supplied = req.model_fields_set

        if "name" in supplied:
            model.name = req.name.strip()
        for field in USER_UPDATE_FIELDS:
            if field in supplied:
                setattr(model, field, getattr(req, field))
        for field in PROFILE_UPDATE_FIELDS:
            if field in supplied:
                setattr(profile, field, getattr(req, field))

        if req.monthly is not None:
            for month in req.monthly.model_fields_set:
                setattr(profile, f"monthly_{month}", getattr(req.monthly, month))

        if req.email and req.email.strip():
            email = normalize_email(req.email)
            if email != model.email:
                if self._email_taken(email, exclude_user_id=user_id):
                    self.db.rollback()
                    raise EmailAlreadyExistsError(email)
                model.email = email

        if req.password:
            model.password_hash = hash_password(req.password)

        model.updated_at = now_iso()
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise EmailAlreadyExistsError(normalize_email(req.email or "")) from e

        self.db.refresh(model)
        logger.info(
            "Updated partner %s fields: %s",
            profile.partner_id,
            ", ".join(sorted(supplied - {"password"})) or "-",
        )
        return model_to_partner(model)

    def toggle_partner_active(self, user_id: str) -> Optional[Partner]:
        """Flip a partner's active flag (soft delete / restore).

        The flip is a single UPDATE so two concurrent toggles cannot both
        read the same starting value.

        Returns:
            The updated Partner, or None if no partner has this id.
        """
        result = self.db.execute(
            update(UserModel)
            .where(
                UserModel.user_id == user_id,
                UserModel.role == Role.PARTNER.value,
            )
            .values(is_active=not_(UserModel.is_active), updated_at=now_iso())
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            self.db.rollback()
            return None
        self.db.commit()

        model = self._get_partner_model(user_id)
        logger.info(
            "Partner %s %s",
            model.profile.partner_id,
            "activated" if model.is_active else "deactivated",
        )
        return model_to_partner(model)
