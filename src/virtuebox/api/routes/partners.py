"""Partner management routes."""

from fastapi import APIRouter, status

from virtuebox.core.dependencies import (
    AdminUserDep,
    CurrentUserDep,
    PartnerManagerDep,
)
from virtuebox.core.exceptions import PartnerNotFoundError
from virtuebox.schemas.partner import (
    CreatePartnerRequest,
    PartnerListResponse,
    PartnerResponse,
    UpdatePartnerRequest,
)

router = APIRouter(prefix="/api/partners", tags=["Partners"])


@router.get("", response_model=PartnerListResponse, summary="List partners")
def list_partners(
    claims: CurrentUserDep,
    partner_manager: PartnerManagerDep,
) -> PartnerListResponse:
    """Admins see every partner; a partner sees only their own record."""
    if claims.is_admin:
        partners = partner_manager.list_partners()
    else:
        own = partner_manager.get_partner(claims.user_id)
        partners = [own] if own is not None else []
    return PartnerListResponse(role=claims.role, partners=partners)


@router.post(
    "",
    response_model=PartnerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create partner",
)
def create_partner(
    req: CreatePartnerRequest,
    admin: AdminUserDep,
    partner_manager: PartnerManagerDep,
) -> PartnerResponse:
    partner = partner_manager.create_partner(req, created_by=admin.name)
    return PartnerResponse(message="Partner created successfully", partner=partner)


@router.get("/{user_id}", response_model=PartnerResponse, summary="Get partner")
def get_partner(
    user_id: str,
    admin: AdminUserDep,
    partner_manager: PartnerManagerDep,
) -> PartnerResponse:
    partner = partner_manager.get_partner(user_id)
    if partner is None:
        raise PartnerNotFoundError(user_id)
    return PartnerResponse(partner=partner)


@router.put("/{user_id}", response_model=PartnerResponse, summary="Update partner")
def update_partner(
    user_id: str,
    req: UpdatePartnerRequest,
    admin: AdminUserDep,
    partner_manager: PartnerManagerDep,
) -> PartnerResponse:
    """Apply a sparse update; fields absent from the body stay as they are."""
    partner = partner_manager.update_partner(user_id, req)
    if partner is None:
        raise PartnerNotFoundError(user_id)
    return PartnerResponse(message="Partner updated successfully", partner=partner)


@router.patch(
    "/{user_id}",
    response_model=PartnerResponse,
    summary="Toggle partner active status",
)
def toggle_partner(
    user_id: str,
    admin: AdminUserDep,
    partner_manager: PartnerManagerDep,
) -> PartnerResponse:
    """Soft delete / restore a partner by flipping its active flag."""
    partner = partner_manager.toggle_partner_active(user_id)
    if partner is None:
        raise PartnerNotFoundError(user_id)
    state = "activated" if partner.is_active else "deactivated"
    return PartnerResponse(message=f"Partner {state} successfully", partner=partner)
