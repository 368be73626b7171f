"""Chore completion engine.

Completing a chore validates the chore and the member, enforces the chore's
cooldown policy, then records the completion, credits the member's point
ledger, appends an activity entry and retires one-time chores. Undo reverses
exactly those writes. Both operations run as a single database transaction
and report failures as typed outcomes rather than exceptions.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from familyhub.config import settings
from familyhub.models.chore import Chore, ChoreCompletion
from familyhub.models.ledger import ActivityLog, PointTransaction
from familyhub.models.member import FamilyMember
from familyhub.services import cooldown
from familyhub.utils.dt import as_utc, format_remaining, utcnow

logger = logging.getLogger(__name__)


class CompletionError(str, Enum):
    CHORE_NOT_FOUND = "chore_not_found"
    CHORE_DELETED = "chore_deleted"
    MEMBER_NOT_FOUND = "member_not_found"
    ON_COOLDOWN = "on_cooldown"
    COMPLETION_NOT_FOUND = "completion_not_found"
    UNDO_WINDOW_EXPIRED = "undo_window_expired"
    UNEXPECTED = "unexpected"


ERROR_MESSAGES = {
    CompletionError.CHORE_NOT_FOUND: "Chore not found",
    CompletionError.CHORE_DELETED: "Chore has been deleted",
    CompletionError.MEMBER_NOT_FOUND: "Family member not found",
    CompletionError.ON_COOLDOWN: "Chore is on cooldown",
    CompletionError.COMPLETION_NOT_FOUND: "Completion not found",
    CompletionError.UNDO_WINDOW_EXPIRED: "Undo window has expired",
}


@dataclass
class CompletionOutcome:
    completion: Optional[ChoreCompletion] = None
    points_earned: int = 0
    chore_name: str = ""
    completed_by_name: str = ""
    error: Optional[CompletionError] = None
    cooldown_ends_at: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        if self.error is None:
            return None
        return ERROR_MESSAGES.get(self.error, "Failed to complete chore")


@dataclass
class UndoOutcome:
    chore_id: Optional[int] = None
    error: Optional[CompletionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        if self.error is None:
            return None
        return ERROR_MESSAGES.get(self.error, "Failed to undo completion")


@dataclass
class CooldownStatus:
    can_complete: bool
    reason: Optional[str] = None
    next_available_at: Optional[datetime] = None
    remaining_time: Optional[str] = None


# --- Lookup ---

def find_chore_by_qr_token(session: Session, token: str) -> Optional[Chore]:
    """Active chore whose QR token is exactly ``token``."""
    return session.exec(
        select(Chore).where(Chore.qr_token == token, col(Chore.deleted_at).is_(None))
    ).first()


def find_chore_by_nfc_tag(session: Session, tag_id: str) -> Optional[Chore]:
    """Active chore bound to NFC tag ``tag_id`` (lowercase hex, as sent by the scanner)."""
    return session.exec(
        select(Chore).where(Chore.nfc_tag_id == tag_id, col(Chore.deleted_at).is_(None))
    ).first()


def last_completion(session: Session, chore_id: int, member_id: int) -> Optional[ChoreCompletion]:
    return session.exec(
        select(ChoreCompletion)
        .where(ChoreCompletion.chore_id == chore_id, ChoreCompletion.completed_by == member_id)
        .order_by(col(ChoreCompletion.completed_at).desc(), col(ChoreCompletion.id).desc())
        .limit(1)
    ).first()


def get_cooldown_status(
    session: Session, chore: Chore, member_id: int, now: Optional[datetime] = None
) -> CooldownStatus:
    """Whether ``member_id`` may complete ``chore`` right now, and if not, until when."""
    now = as_utc(now) if now else utcnow()
    policy = cooldown.policy_for(chore)
    if isinstance(policy, cooldown.Unlimited):
        return CooldownStatus(can_complete=True)

    last = last_completion(session, chore.id, member_id)
    ends_at = cooldown.cooldown_ends_at(policy, last.completed_at if last else None)
    if ends_at is None or now >= ends_at:
        return CooldownStatus(can_complete=True)

    if isinstance(policy, cooldown.Daily):
        reason = "Already completed today"
    else:
        reason = f"Wait {policy.hours}h between completions"
    return CooldownStatus(
        can_complete=False,
        reason=reason,
        next_available_at=ends_at,
        remaining_time=format_remaining((ends_at - now).total_seconds()),
    )


# --- Complete ---

def complete_chore(
    session: Session, chore_id: int, completed_by: int, now: Optional[datetime] = None
) -> CompletionOutcome:
    """Record that ``completed_by`` did chore ``chore_id``.

    Commits on success, rolls back on any failure outcome. Retrying a
    successful call awards the points twice.
    """
    now = as_utc(now) if now else utcnow()
    try:
        outcome = _complete(session, chore_id, completed_by, now)
        if not outcome.ok:
            session.rollback()
            logger.info(
                "Completion of chore %s by member %s rejected: %s",
                chore_id, completed_by, outcome.error.value,
            )
            return outcome

        session.commit()
        session.refresh(outcome.completion)
        logger.info(
            "Chore %s completed by member %s (+%d points)",
            chore_id, completed_by, outcome.points_earned,
        )
        return outcome
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Failed to complete chore %s for member %s", chore_id, completed_by)
        return CompletionOutcome(error=CompletionError.UNEXPECTED)


def _complete(session: Session, chore_id: int, completed_by: int, now: datetime) -> CompletionOutcome:
    # No-op write takes the database write lock before cooldown state is read,
    # so concurrent completions of the same chore run one after the other.
    claimed = session.exec(
        update(Chore)
        .where(Chore.id == chore_id)
        .values(id=Chore.id)
        .execution_options(synchronize_session=False)
    )
    if claimed.rowcount == 0:
        return CompletionOutcome(error=CompletionError.CHORE_NOT_FOUND)

    chore = session.get(Chore, chore_id, populate_existing=True)
    if chore is None:
        return CompletionOutcome(error=CompletionError.CHORE_NOT_FOUND)
    if chore.deleted_at is not None:
        return CompletionOutcome(error=CompletionError.CHORE_DELETED)

    member = session.get(FamilyMember, completed_by)
    if member is None:
        return CompletionOutcome(error=CompletionError.MEMBER_NOT_FOUND)

    policy = cooldown.policy_for(chore)
    if not isinstance(policy, cooldown.Unlimited):
        last = last_completion(session, chore.id, member.id)
        ends_at = cooldown.cooldown_ends_at(policy, last.completed_at if last else None)
        if ends_at is not None and now < ends_at:
            return CompletionOutcome(error=CompletionError.ON_COOLDOWN, cooldown_ends_at=ends_at)

    completion = ChoreCompletion(
        chore_id=chore.id,
        completed_by=member.id,
        points_earned=chore.points,
        completed_at=now,
    )
    session.add(completion)
    session.flush()

    if chore.points > 0:
        session.add(PointTransaction(
            family_member_id=member.id,
            amount=chore.points,
            type="earned",
            description=f"Completed: {chore.title}",
            reference_id=completion.id,
            created_at=now,
        ))

    session.add(ActivityLog(
        type="chore_completed",
        family_member_id=member.id,
        chore_id=chore.id,
        reference_id=completion.id,
        metadata_json=json.dumps({"points": chore.points, "choreName": chore.title}),
        created_at=now,
    ))

    if chore.is_one_time:
        chore.deleted_at = now
        session.add(chore)

    session.flush()
    return CompletionOutcome(
        completion=completion,
        points_earned=chore.points,
        chore_name=chore.title,
        completed_by_name=member.name,
    )


# --- Undo ---

def undo_completion(
    session: Session, completion_id: int, now: Optional[datetime] = None
) -> UndoOutcome:
    """Reverse a completion: drop it, its points and its activity entry, revive one-time chores."""
    now = as_utc(now) if now else utcnow()
    try:
        outcome = _undo(session, completion_id, now)
        if not outcome.ok:
            session.rollback()
            logger.info("Undo of completion %s rejected: %s", completion_id, outcome.error.value)
            return outcome

        session.commit()
        logger.info("Completion %s of chore %s undone", completion_id, outcome.chore_id)
        return outcome
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Failed to undo completion %s", completion_id)
        return UndoOutcome(error=CompletionError.UNEXPECTED)


def _undo(session: Session, completion_id: int, now: datetime) -> UndoOutcome:
    completion = session.get(ChoreCompletion, completion_id, populate_existing=True)
    if completion is None:
        return UndoOutcome(error=CompletionError.COMPLETION_NOT_FOUND)

    window = settings.undo_window_seconds
    if window > 0 and now > as_utc(completion.completed_at) + timedelta(seconds=window):
        return UndoOutcome(error=CompletionError.UNDO_WINDOW_EXPIRED)

    chore_id = completion.chore_id
    points_earned = completion.points_earned

    # A concurrent undo may have removed the row since it was read
    removed = session.exec(
        delete(ChoreCompletion).where(ChoreCompletion.id == completion_id)
    )
    if removed.rowcount == 0:
        return UndoOutcome(error=CompletionError.COMPLETION_NOT_FOUND)

    if points_earned > 0:
        session.exec(
            delete(PointTransaction).where(
                PointTransaction.reference_id == completion_id,
                PointTransaction.type == "earned",
            )
        )

    session.exec(
        delete(ActivityLog).where(
            ActivityLog.type == "chore_completed",
            ActivityLog.reference_id == completion_id,
        )
    )

    chore = session.get(Chore, chore_id, populate_existing=True)
    if chore is not None and chore.is_one_time:
        chore.deleted_at = None
        chore.updated_at = now
        session.add(chore)

    session.flush()
    return UndoOutcome(chore_id=chore_id)
