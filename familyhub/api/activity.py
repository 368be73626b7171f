"""Activity feed API endpoint."""

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, col, select

from familyhub.api.deps import get_current_member
from familyhub.database import get_session
from familyhub.models.chore import Chore
from familyhub.models.ledger import ActivityLog
from familyhub.models.member import FamilyMember
from familyhub.schemas.activity import ActivityChore, ActivityEntry, ActivityMember
from familyhub.schemas.common import DataResponse
from familyhub.utils.avatar import avatar_url

router = APIRouter(prefix="/activity", tags=["activity"])


@router.get("", response_model=DataResponse[list[ActivityEntry]])
def list_activity(
    limit: int = Query(default=50, ge=1),
    offset: int = Query(default=0, ge=0),
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    """Newest activity first, with member and chore details when they still exist."""
    rows = session.exec(
        select(ActivityLog, FamilyMember, Chore)
        .join(FamilyMember, ActivityLog.family_member_id == FamilyMember.id, isouter=True)
        .join(Chore, ActivityLog.chore_id == Chore.id, isouter=True)
        .order_by(col(ActivityLog.created_at).desc(), col(ActivityLog.id).desc())
        .offset(offset)
        .limit(min(limit, 100))
    ).all()

    return DataResponse(data=[
        ActivityEntry(
            id=entry.id,
            type=entry.type,
            family_member_id=entry.family_member_id,
            chore_id=entry.chore_id,
            metadata=entry.details(),
            created_at=entry.created_at,
            family_member=ActivityMember(
                name=m.name,
                color=m.color,
                avatar_url=avatar_url(m.avatar_type, m.avatar_value),
            ) if m else None,
            chore=ActivityChore(title=c.title) if c else None,
        )
        for entry, m, c in rows
    ])
