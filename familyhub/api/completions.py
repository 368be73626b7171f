"""Chore completion API endpoints: direct, QR, NFC and undo."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlmodel import Session

from familyhub.api.deps import get_current_member
from familyhub.database import get_session
from familyhub.models.member import FamilyMember
from familyhub.schemas.chore import (
    CompleteRequest,
    CompletionRecord,
    CompletionResponse,
    NfcCompleteRequest,
    QrCompleteRequest,
    UndoResponse,
)
from familyhub.schemas.common import DataResponse, ErrorResponse
from familyhub.services.completion_service import (
    CompletionError,
    CompletionOutcome,
    complete_chore,
    find_chore_by_nfc_tag,
    find_chore_by_qr_token,
    undo_completion,
)
from familyhub.utils.dt import isoformat

router = APIRouter(prefix="/chores", tags=["completions"])

ERROR_STATUS = {
    CompletionError.CHORE_NOT_FOUND: 404,
    CompletionError.MEMBER_NOT_FOUND: 404,
    CompletionError.COMPLETION_NOT_FOUND: 404,
    CompletionError.CHORE_DELETED: 409,
    CompletionError.ON_COOLDOWN: 409,
    CompletionError.UNDO_WINDOW_EXPIRED: 409,
    CompletionError.UNEXPECTED: 500,
}

ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (404, 409, 500)}


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _failure(outcome) -> JSONResponse:
    extra = {}
    if getattr(outcome, "cooldown_ends_at", None) is not None:
        extra["cooldownEndsAt"] = isoformat(outcome.cooldown_ends_at)
    return _error(ERROR_STATUS[outcome.error], outcome.message, **extra)


def _success(outcome: CompletionOutcome) -> DataResponse[CompletionResponse]:
    return DataResponse(data=CompletionResponse(
        completion=CompletionRecord.model_validate(outcome.completion),
        points_earned=outcome.points_earned,
        chore_name=outcome.chore_name,
        completed_by_name=outcome.completed_by_name,
    ))


@router.post(
    "/{chore_id}/complete",
    response_model=DataResponse[CompletionResponse],
    responses=ERROR_RESPONSES,
)
def complete(
    chore_id: int,
    request: CompleteRequest,
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    """Mark a chore done on behalf of ``completedBy`` (shared dashboard flow)."""
    outcome = complete_chore(session, chore_id, request.completed_by)
    if not outcome.ok:
        return _failure(outcome)
    return _success(outcome)


@router.post(
    "/complete-by-qr",
    response_model=DataResponse[CompletionResponse],
    responses=ERROR_RESPONSES,
)
def complete_by_qr(
    request: QrCompleteRequest,
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    """Complete the chore behind a scanned QR code as the logged-in member."""
    chore = find_chore_by_qr_token(session, request.token)
    if not chore:
        return _error(404, "Invalid QR code or chore not found")

    outcome = complete_chore(session, chore.id, member.id)
    if not outcome.ok:
        return _failure(outcome)
    return _success(outcome)


@router.post(
    "/complete-by-nfc",
    response_model=DataResponse[CompletionResponse],
    responses=ERROR_RESPONSES,
)
def complete_by_nfc(
    request: NfcCompleteRequest,
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    """Complete the chore bound to a tapped NFC tag as the logged-in member."""
    chore = find_chore_by_nfc_tag(session, request.tag_id)
    if not chore:
        return _error(404, "NFC tag not linked to any chore")

    outcome = complete_chore(session, chore.id, member.id)
    if not outcome.ok:
        return _failure(outcome)
    return _success(outcome)


@router.post(
    "/completions/{completion_id}/undo",
    response_model=DataResponse[UndoResponse],
    responses=ERROR_RESPONSES,
)
def undo(
    completion_id: int,
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    """Reverse a completion and the points it awarded."""
    outcome = undo_completion(session, completion_id)
    if not outcome.ok:
        return _failure(outcome)
    return DataResponse(data=UndoResponse(chore_id=outcome.chore_id))
