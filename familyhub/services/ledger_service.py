"""Point ledger: balances, leaderboard, history and cash-out."""

import json
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sqlalchemy import case, func, update
from sqlmodel import Session, col, select

from familyhub.models.ledger import ActivityLog, PointTransaction
from familyhub.models.member import FamilyMember
from familyhub.models.settings import AppSettings
from familyhub.utils.dt import utcnow

logger = logging.getLogger(__name__)

# earned rows add, redeemed rows subtract
_signed_amount = case(
    (PointTransaction.type == "earned", PointTransaction.amount),
    else_=-PointTransaction.amount,
)


@dataclass
class Redemption:
    transaction: PointTransaction
    points_redeemed: int
    money_value: str
    member_name: str


def get_balance(session: Session, member_id: int) -> int:
    total = session.exec(
        select(func.coalesce(func.sum(_signed_amount), 0)).where(
            PointTransaction.family_member_id == member_id
        )
    ).one()
    return int(total)


def leaderboard(session: Session) -> list[tuple[FamilyMember, int]]:
    """Every member with their balance, highest first."""
    total = func.coalesce(func.sum(_signed_amount), 0)
    rows = session.exec(
        select(FamilyMember, total)
        .join(PointTransaction, PointTransaction.family_member_id == FamilyMember.id, isouter=True)
        .group_by(FamilyMember.id)
        .order_by(total.desc(), col(FamilyMember.id).asc())
    ).all()
    return [(member, int(points)) for member, points in rows]


def history(session: Session, member_id: int, limit: int = 50) -> list[PointTransaction]:
    return list(session.exec(
        select(PointTransaction)
        .where(PointTransaction.family_member_id == member_id)
        .order_by(col(PointTransaction.created_at).desc(), col(PointTransaction.id).desc())
        .limit(limit)
    ).all())


def format_money(points: int, point_value: Decimal, currency: str) -> str:
    amount = (Decimal(points) * Decimal(point_value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{currency} {amount}"


def redeem_all(session: Session, member_id: int) -> Optional[Redemption]:
    """Cash out a member's entire balance.

    Returns None when there is nothing to redeem. Raises LookupError if the
    member does not exist.
    """
    now = utcnow()
    # Lock the member before reading the balance so two cash-outs cannot both spend it
    claimed = session.exec(
        update(FamilyMember)
        .where(FamilyMember.id == member_id)
        .values(id=FamilyMember.id)
        .execution_options(synchronize_session=False)
    )
    if claimed.rowcount == 0:
        session.rollback()
        raise LookupError("Family member not found")

    member = session.get(FamilyMember, member_id, populate_existing=True)
    balance = get_balance(session, member_id)
    if balance <= 0:
        session.rollback()
        return None

    app_settings = session.exec(select(AppSettings)).first()
    point_value = app_settings.point_value if app_settings else Decimal("1.00")
    currency = app_settings.currency if app_settings else "USD"
    money_value = format_money(balance, point_value, currency)

    transaction = PointTransaction(
        family_member_id=member_id,
        amount=balance,
        type="redeemed",
        description=f"Redeemed {balance} points for {money_value}",
        created_at=now,
    )
    session.add(transaction)
    session.flush()

    session.add(ActivityLog(
        type="points_redeemed",
        family_member_id=member_id,
        reference_id=transaction.id,
        metadata_json=json.dumps({
            "amount": balance,
            "moneyValue": money_value,
            "transactionId": transaction.id,
        }),
        created_at=now,
    ))
    session.commit()
    session.refresh(transaction)

    logger.info("Member %s redeemed %d points (%s)", member_id, balance, money_value)
    return Redemption(
        transaction=transaction,
        points_redeemed=balance,
        money_value=money_value,
        member_name=member.name,
    )
