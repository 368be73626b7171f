"""Recurring chore schedules: which days a chore shows up on."""

from datetime import date
from typing import Optional

from pydantic import TypeAdapter

from familyhub.models.chore import Chore
from familyhub.schemas.chore import (
    BiweeklyRule,
    DailyRule,
    DaysRule,
    IntervalRule,
    RecurrenceRule,
    WeeklyRule,
)

_rule_adapter = TypeAdapter(RecurrenceRule)


def parse_rule(raw: Optional[dict]):
    return _rule_adapter.validate_python(raw) if raw else None


def day_of_week(day: date) -> int:
    """0 = Sunday ... 6 = Saturday, the numbering clients use."""
    return (day.weekday() + 1) % 7


def occurs_on(rule, day: date, anchor: date) -> bool:
    """Whether ``rule`` schedules the chore on ``day``.

    ``anchor`` is the first day of an interval schedule.
    """
    if isinstance(rule, DailyRule):
        return True
    if isinstance(rule, WeeklyRule):
        return day_of_week(day) == rule.day_of_week
    if isinstance(rule, BiweeklyRule):
        if day < rule.start_date or day_of_week(day) != rule.day_of_week:
            return False
        return ((day - rule.start_date).days // 7) % 2 == 0
    if isinstance(rule, IntervalRule):
        elapsed = (day - anchor).days
        return elapsed >= 0 and elapsed % rule.days == 0
    if isinstance(rule, DaysRule):
        return day_of_week(day) in rule.days_of_week
    return True


def chore_occurs_on(chore: Chore, day: date) -> bool:
    """Non-recurring chores are always shown; recurring ones follow their rule until end_date."""
    if chore.end_date and day > chore.end_date:
        return False
    if not chore.recurring_type:
        return True
    rule = parse_rule(chore.recurrence())
    if rule is None:
        return True
    anchor = chore.due_date or chore.created_at.date()
    return occurs_on(rule, day, anchor)
