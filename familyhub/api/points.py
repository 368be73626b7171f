"""Point ledger API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from familyhub.api.deps import get_current_member, require_admin
from familyhub.database import get_session
from familyhub.models.member import FamilyMember
from familyhub.schemas.common import DataResponse
from familyhub.schemas.points import (
    HistoryResponse,
    LeaderboardEntry,
    RedeemRequest,
    RedeemResponse,
    TransactionResponse,
)
from familyhub.services import ledger_service
from familyhub.utils.avatar import avatar_url

router = APIRouter(prefix="/points", tags=["points"])


@router.get("/leaderboard", response_model=DataResponse[list[LeaderboardEntry]])
def get_leaderboard(
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    """Family members ranked by current point balance."""
    return DataResponse(data=[
        LeaderboardEntry(
            id=m.id,
            name=m.name,
            avatar_type=m.avatar_type,
            avatar_value=m.avatar_value,
            avatar_url=avatar_url(m.avatar_type, m.avatar_value),
            color=m.color,
            is_admin=m.is_admin,
            total_points=points,
        )
        for m, points in ledger_service.leaderboard(session)
    ])


@router.get("/history/{member_id}", response_model=DataResponse[HistoryResponse])
def get_history(
    member_id: int,
    limit: int = 50,
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    """A member's balance and most recent transactions."""
    if not session.get(FamilyMember, member_id):
        raise HTTPException(status_code=404, detail="Family member not found")

    transactions = ledger_service.history(session, member_id, limit=max(1, min(limit, 200)))
    return DataResponse(data=HistoryResponse(
        balance=ledger_service.get_balance(session, member_id),
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
    ))


@router.post("/redeem", response_model=DataResponse[RedeemResponse])
def redeem(
    request: RedeemRequest,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Pay out a member's whole balance at the configured point value. Admin only."""
    try:
        redemption = ledger_service.redeem_all(session, request.family_member_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if redemption is None:
        raise HTTPException(status_code=409, detail="No points to redeem")

    return DataResponse(data=RedeemResponse(
        transaction=TransactionResponse.model_validate(redemption.transaction),
        points_redeemed=redemption.points_redeemed,
        money_value=redemption.money_value,
        member_name=redemption.member_name,
    ))
