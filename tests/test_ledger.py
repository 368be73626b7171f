"""Point ledger: balances, leaderboard and redemption."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlmodel import select

from familyhub.models.ledger import ActivityLog, PointTransaction
from familyhub.models.settings import AppSettings
from familyhub.services import ledger_service
from familyhub.services.completion_service import complete_chore

T0 = datetime(2020, 1, 6, 9, 0, tzinfo=timezone.utc)


def earn(session, member, chore):
    outcome = complete_chore(session, chore.id, member.id, now=T0)
    assert outcome.ok
    return outcome


def test_balance_of_new_member_is_zero(session, make_member):
    assert ledger_service.get_balance(session, make_member().id) == 0


def test_balance_nets_redemptions(session, make_member):
    member = make_member()
    session.add(PointTransaction(family_member_id=member.id, amount=30, type="earned"))
    session.add(PointTransaction(family_member_id=member.id, amount=12, type="redeemed"))
    session.commit()
    assert ledger_service.get_balance(session, member.id) == 18


def test_leaderboard_includes_members_without_points(session, make_member, make_chore):
    alex = make_member(name="Alex")
    sam = make_member(name="Sam")
    robin = make_member(name="Robin")
    earn(session, sam, make_chore(points=20, is_permanent=True))
    earn(session, robin, make_chore(points=5, is_permanent=True))

    board = [(m.name, points) for m, points in ledger_service.leaderboard(session)]
    assert board == [("Sam", 20), ("Robin", 5), ("Alex", 0)]
    assert alex.id is not None


@pytest.mark.parametrize("points,point_value,currency,expected", [
    (10, Decimal("1.00"), "USD", "USD 10.00"),
    (15, Decimal("0.25"), "EUR", "EUR 3.75"),
    (3, Decimal("0.05"), "GBP", "GBP 0.15"),
])
def test_format_money(points, point_value, currency, expected):
    assert ledger_service.format_money(points, point_value, currency) == expected


def test_redeem_all(session, make_member, make_chore):
    session.add(AppSettings(currency="EUR", point_value=Decimal("0.50")))
    session.commit()
    member = make_member(name="Sam")
    earn(session, member, make_chore(points=30, is_permanent=True))

    redemption = ledger_service.redeem_all(session, member.id)

    assert redemption.points_redeemed == 30
    assert redemption.money_value == "EUR 15.00"
    assert redemption.member_name == "Sam"
    assert redemption.transaction.type == "redeemed"
    assert redemption.transaction.description == "Redeemed 30 points for EUR 15.00"
    assert ledger_service.get_balance(session, member.id) == 0

    entry = session.exec(select(ActivityLog).where(ActivityLog.type == "points_redeemed")).one()
    assert entry.details() == {
        "amount": 30,
        "moneyValue": "EUR 15.00",
        "transactionId": redemption.transaction.id,
    }


def test_redeem_with_nothing_to_redeem(session, make_member):
    member = make_member()
    assert ledger_service.redeem_all(session, member.id) is None
    assert session.exec(select(PointTransaction)).all() == []


def test_redeem_unknown_member(session):
    with pytest.raises(LookupError):
        ledger_service.redeem_all(session, 999)


def test_history_is_newest_first(session, make_member, make_chore):
    member = make_member()
    earn(session, member, make_chore(points=10, is_permanent=True))
    ledger_service.redeem_all(session, member.id)

    types = [t.type for t in ledger_service.history(session, member.id)]
    assert types == ["redeemed", "earned"]
    assert len(ledger_service.history(session, member.id, limit=1)) == 1
