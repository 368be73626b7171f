"""Family member API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, col, select

from familyhub.api.deps import get_current_member, require_admin
from familyhub.database import get_session
from familyhub.models.member import PASTEL_COLORS, FamilyMember
from familyhub.schemas.common import DataResponse, SuccessResponse
from familyhub.schemas.member import (
    MemberProfile,
    MemberRequest,
    MemberResponse,
    MemberSummary,
    PasswordRequest,
)
from familyhub.utils.avatar import avatar_url
from familyhub.utils.dt import utcnow
from familyhub.utils.security import hash_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/family-members", tags=["family"])


def member_summary(member: FamilyMember) -> MemberSummary:
    return MemberSummary(
        id=member.id,
        name=member.name,
        color=member.color,
        avatar_url=avatar_url(member.avatar_type, member.avatar_value),
    )


def member_profile(member: FamilyMember) -> MemberProfile:
    return MemberProfile(
        id=member.id,
        name=member.name,
        avatar_type=member.avatar_type,
        avatar_value=member.avatar_value,
        avatar_url=avatar_url(member.avatar_type, member.avatar_value),
        color=member.color,
        is_admin=member.is_admin,
    )


def _member_to_response(member: FamilyMember) -> MemberResponse:
    return MemberResponse(
        id=member.id,
        name=member.name,
        avatar_type=member.avatar_type,
        avatar_value=member.avatar_value,
        avatar_url=avatar_url(member.avatar_type, member.avatar_value),
        color=member.color,
        is_admin=member.is_admin,
        has_password=bool(member.password_hash),
        created_at=member.created_at,
        updated_at=member.updated_at,
    )


def _check_color(color: str) -> None:
    if color.upper() not in PASTEL_COLORS:
        raise HTTPException(status_code=400, detail="Invalid color selection")


@router.get("", response_model=DataResponse[list[MemberResponse]])
def list_members(
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    """List all family members, oldest first."""
    members = session.exec(
        select(FamilyMember).order_by(col(FamilyMember.created_at).asc(), col(FamilyMember.id).asc())
    ).all()
    return DataResponse(data=[_member_to_response(m) for m in members])


@router.post("", response_model=DataResponse[MemberResponse], status_code=201)
def create_member(
    request: MemberRequest,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Add a family member. Admin only."""
    _check_color(request.color)
    new_member = FamilyMember(
        name=request.name,
        avatar_type=request.avatar_type,
        avatar_value=request.avatar_value,
        color=request.color.upper(),
        is_admin=False,
    )
    session.add(new_member)
    session.commit()
    session.refresh(new_member)
    logger.info("Family member %s created", new_member.id)
    return DataResponse(data=_member_to_response(new_member))


@router.put("/{member_id}", response_model=DataResponse[MemberResponse])
def update_member(
    member_id: int,
    request: MemberRequest,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Update a member's name, avatar and color."""
    _check_color(request.color)
    target = session.get(FamilyMember, member_id)
    if not target:
        raise HTTPException(status_code=404, detail="Family member not found")

    target.name = request.name
    target.avatar_type = request.avatar_type
    target.avatar_value = request.avatar_value
    target.color = request.color.upper()
    target.updated_at = utcnow()
    session.add(target)
    session.commit()
    session.refresh(target)
    return DataResponse(data=_member_to_response(target))


@router.delete("/{member_id}", response_model=DataResponse[SuccessResponse])
def delete_member(
    member_id: int,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Remove a member with their completions, points and sessions. The admin cannot be removed."""
    target = session.get(FamilyMember, member_id)
    if not target:
        raise HTTPException(status_code=404, detail="Family member not found")
    if target.is_admin:
        raise HTTPException(status_code=400, detail="Cannot delete the admin account")

    # Completions, transactions, sessions and assignments cascade at the database level
    session.delete(target)
    session.commit()
    logger.info("Family member %s deleted", member_id)
    return DataResponse(data=SuccessResponse())


@router.put("/{member_id}/password", response_model=DataResponse[SuccessResponse])
def set_member_password(
    member_id: int,
    request: PasswordRequest,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Set or reset a member's login password."""
    target = session.get(FamilyMember, member_id)
    if not target:
        raise HTTPException(status_code=404, detail="Family member not found")

    target.password_hash = hash_password(request.password)
    target.updated_at = utcnow()
    session.add(target)
    session.commit()
    return DataResponse(data=SuccessResponse(message="Password set successfully"))
