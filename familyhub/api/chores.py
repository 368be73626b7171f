"""Chore management API endpoints."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete
from sqlmodel import Session, col, select

from familyhub.api.deps import get_current_member, require_admin
from familyhub.api.members import member_summary
from familyhub.database import get_session
from familyhub.models.chore import Category, Chore, ChoreAssignee
from familyhub.models.member import FamilyMember
from familyhub.schemas.chore import (
    CategoryResponse,
    ChoreRequest,
    ChoreResponse,
    CooldownConfig,
    CooldownStatusResponse,
    NfcBindRequest,
    NfcBindResponse,
    QrCodeResponse,
)
from familyhub.schemas.common import DataResponse, SuccessResponse
from familyhub.services import cooldown
from familyhub.services.completion_service import get_cooldown_status
from familyhub.services.recurrence import chore_occurs_on
from familyhub.utils.dt import utcnow
from familyhub.utils.security import generate_qr_token, qr_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chores", tags=["chores"])


def chore_to_response(chore: Chore, session: Session) -> ChoreResponse:
    category = session.get(Category, chore.category_id) if chore.category_id else None
    assignees = session.exec(
        select(FamilyMember)
        .join(ChoreAssignee, ChoreAssignee.family_member_id == FamilyMember.id)
        .where(ChoreAssignee.chore_id == chore.id)
        .order_by(col(FamilyMember.id).asc())
    ).all()

    policy = cooldown.policy_for(chore) if chore.is_permanent else None
    return ChoreResponse(
        id=chore.id,
        title=chore.title,
        description=chore.description,
        points=chore.points,
        category=CategoryResponse.model_validate(category) if category else None,
        assignees=[member_summary(m) for m in assignees],
        is_permanent=chore.is_permanent,
        recurring_type=chore.recurring_type,
        recurring_config=chore.recurrence(),
        due_date=chore.due_date,
        due_time=chore.due_time,
        end_date=chore.end_date,
        cooldown=CooldownConfig(type=policy.type, hours=getattr(policy, "hours", None)) if policy else None,
        cooldown_label=cooldown.describe(policy) if policy else None,
        qr_token=chore.qr_token,
        nfc_tag_id=chore.nfc_tag_id,
        deleted_at=chore.deleted_at,
        created_at=chore.created_at,
        updated_at=chore.updated_at,
    )


def _get_chore(chore_id: int, session: Session) -> Chore:
    chore = session.get(Chore, chore_id)
    if not chore:
        raise HTTPException(status_code=404, detail="Chore not found")
    return chore


def _apply_request(chore: Chore, request: ChoreRequest, session: Session) -> None:
    """Copy validated fields onto the row; a permanent chore without a cooldown gets 'unlimited'."""
    if request.category_id and not session.get(Category, request.category_id):
        raise HTTPException(status_code=404, detail="Category not found")

    policy = None
    if request.is_permanent:
        if request.cooldown is None or request.cooldown.type == "unlimited":
            policy = cooldown.Unlimited()
        elif request.cooldown.type == "daily":
            policy = cooldown.Daily()
        else:
            policy = cooldown.Hours(hours=request.cooldown.hours)

    chore.title = request.title
    chore.description = request.description
    chore.points = request.points
    chore.category_id = request.category_id
    chore.is_permanent = request.is_permanent
    chore.recurring_type = request.recurring_type
    chore.recurring_config = (
        request.recurring_config.model_dump_json(by_alias=True) if request.recurring_config else None
    )
    chore.due_date = request.due_date
    chore.due_time = request.due_time
    chore.end_date = request.end_date
    chore.cooldown_type, chore.cooldown_hours = cooldown.to_columns(policy)


def _replace_assignees(chore_id: int, member_ids: list[int], session: Session) -> None:
    unique_ids = list(dict.fromkeys(member_ids))
    if unique_ids:
        found = session.exec(select(FamilyMember.id).where(col(FamilyMember.id).in_(unique_ids))).all()
        if len(found) != len(unique_ids):
            raise HTTPException(status_code=404, detail="Family member not found")

    session.exec(delete(ChoreAssignee).where(ChoreAssignee.chore_id == chore_id))
    for member_id in unique_ids:
        session.add(ChoreAssignee(chore_id=chore_id, family_member_id=member_id))


@router.get("", response_model=DataResponse[list[ChoreResponse]])
def list_chores(
    include_deleted: bool = Query(default=False, alias="includeDeleted"),
    due_on: Optional[date] = Query(default=None, alias="dueOn"),
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    """List chores, newest first. ``dueOn`` keeps only chores scheduled for that day."""
    query = select(Chore)
    if not include_deleted:
        query = query.where(col(Chore.deleted_at).is_(None))
    chores = session.exec(query.order_by(col(Chore.created_at).desc(), col(Chore.id).desc())).all()

    if due_on is not None:
        chores = [c for c in chores if chore_occurs_on(c, due_on)]
    return DataResponse(data=[chore_to_response(c, session) for c in chores])


@router.post("", response_model=DataResponse[ChoreResponse], status_code=201)
def create_chore(
    request: ChoreRequest,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Create a chore with its own QR token. Admin only."""
    chore = Chore(title=request.title, qr_token=generate_qr_token())
    _apply_request(chore, request, session)
    session.add(chore)
    session.flush()
    _replace_assignees(chore.id, request.assignee_ids, session)
    session.commit()
    session.refresh(chore)

    logger.info("Chore %s created: %s", chore.id, chore.title)
    return DataResponse(data=chore_to_response(chore, session))


@router.get("/{chore_id}", response_model=DataResponse[ChoreResponse])
def get_chore(
    chore_id: int,
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    return DataResponse(data=chore_to_response(_get_chore(chore_id, session), session))


@router.put("/{chore_id}", response_model=DataResponse[ChoreResponse])
def update_chore(
    chore_id: int,
    request: ChoreRequest,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Replace a chore's definition and assignees."""
    chore = _get_chore(chore_id, session)
    _apply_request(chore, request, session)
    chore.updated_at = utcnow()
    session.add(chore)
    _replace_assignees(chore.id, request.assignee_ids, session)
    session.commit()
    session.refresh(chore)
    return DataResponse(data=chore_to_response(chore, session))


@router.delete("/{chore_id}", response_model=DataResponse[SuccessResponse])
def delete_chore(
    chore_id: int,
    hard: bool = False,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Soft-delete a chore, or remove it with its completions when ``hard=true``."""
    chore = _get_chore(chore_id, session)
    if hard:
        session.delete(chore)
    else:
        chore.deleted_at = utcnow()
        chore.updated_at = chore.deleted_at
        session.add(chore)
    session.commit()

    logger.info("Chore %s deleted (%s)", chore_id, "hard" if hard else "soft")
    return DataResponse(data=SuccessResponse())


@router.put("/{chore_id}/nfc", response_model=DataResponse[NfcBindResponse])
def bind_nfc_tag(
    chore_id: int,
    request: NfcBindRequest,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Bind an NFC tag to a chore, or unbind it with ``nfcTagId: null``."""
    chore = _get_chore(chore_id, session)
    tag_id = request.nfc_tag_id or None

    if tag_id:
        bound = session.exec(select(Chore).where(Chore.nfc_tag_id == tag_id)).first()
        if bound and bound.id != chore_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={"error": "NFC tag is already bound to another chore", "boundTo": bound.title},
            )

    chore.nfc_tag_id = tag_id
    chore.updated_at = utcnow()
    session.add(chore)
    session.commit()
    session.refresh(chore)

    return DataResponse(data=NfcBindResponse(
        chore=chore_to_response(chore, session),
        message="NFC tag bound successfully" if tag_id else "NFC tag unbound successfully",
    ))


@router.get("/{chore_id}/qr", response_model=DataResponse[QrCodeResponse])
def get_qr_code(
    chore_id: int,
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    """QR token and the payload to print for a chore. Older chores get a token on first request."""
    chore = _get_chore(chore_id, session)
    if not chore.qr_token:
        chore.qr_token = generate_qr_token()
        session.add(chore)
        session.commit()
        session.refresh(chore)
    return DataResponse(data=QrCodeResponse(qr_token=chore.qr_token, qr_data=qr_payload(chore.qr_token)))


@router.post("/{chore_id}/qr", response_model=DataResponse[QrCodeResponse])
def regenerate_qr_code(
    chore_id: int,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Issue a new QR token, invalidating printed codes for this chore."""
    chore = _get_chore(chore_id, session)
    chore.qr_token = generate_qr_token()
    chore.updated_at = utcnow()
    session.add(chore)
    session.commit()
    session.refresh(chore)
    return DataResponse(data=QrCodeResponse(qr_token=chore.qr_token, qr_data=qr_payload(chore.qr_token)))


@router.get("/{chore_id}/cooldown", response_model=DataResponse[CooldownStatusResponse])
def get_chore_cooldown(
    chore_id: int,
    member_id: Optional[int] = Query(default=None, alias="memberId"),
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    """Whether a member (default: the caller) can complete the chore now."""
    chore = _get_chore(chore_id, session)
    target_id = member_id or member.id
    if not session.get(FamilyMember, target_id):
        raise HTTPException(status_code=404, detail="Family member not found")

    result = get_cooldown_status(session, chore, target_id)
    return DataResponse(data=CooldownStatusResponse(
        can_complete=result.can_complete,
        reason=result.reason,
        next_available_at=result.next_available_at,
        remaining_time=result.remaining_time,
    ))
