"""Cooldown policies for permanent chores.

A policy is one of three variants. ``policy_for`` turns the stored
``cooldown_type`` / ``cooldown_hours`` column pair into a variant, and
``cooldown_ends_at`` decides when a member may complete the chore again.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Union

from familyhub.models.chore import Chore
from familyhub.utils.dt import as_utc, local_tz


@dataclass(frozen=True)
class Unlimited:
    type: str = "unlimited"


@dataclass(frozen=True)
class Daily:
    type: str = "daily"


@dataclass(frozen=True)
class Hours:
    hours: int
    type: str = "hours"


CooldownPolicy = Union[Unlimited, Daily, Hours]


def policy_for(chore: Chore) -> CooldownPolicy:
    """Only permanent chores have a cooldown. An hours policy without hours means none."""
    if not chore.is_permanent:
        return Unlimited()
    if chore.cooldown_type == "daily":
        return Daily()
    if chore.cooldown_type == "hours" and chore.cooldown_hours:
        return Hours(hours=chore.cooldown_hours)
    return Unlimited()


def to_columns(policy: Optional[CooldownPolicy]) -> tuple[Optional[str], Optional[int]]:
    """Inverse of policy_for: (cooldown_type, cooldown_hours)."""
    if policy is None:
        return None, None
    if isinstance(policy, Hours):
        return policy.type, policy.hours
    return policy.type, None


def next_local_midnight(moment: datetime) -> datetime:
    """Start of the household-local day after ``moment``, returned in UTC."""
    tz = local_tz()
    local = as_utc(moment).astimezone(tz)
    next_day = local.date() + timedelta(days=1)
    if tz is None:
        # naive astimezone() resolves the offset in effect on that date
        midnight = datetime(next_day.year, next_day.month, next_day.day).astimezone()
    else:
        midnight = datetime(next_day.year, next_day.month, next_day.day, tzinfo=tz)
    return as_utc(midnight)


def cooldown_ends_at(policy: CooldownPolicy, last_completed_at: Optional[datetime]) -> Optional[datetime]:
    """Moment the cooldown after ``last_completed_at`` expires, None if there is none."""
    if last_completed_at is None or isinstance(policy, Unlimited):
        return None
    if isinstance(policy, Daily):
        return next_local_midnight(last_completed_at)
    return as_utc(last_completed_at) + timedelta(hours=policy.hours)


def describe(policy: CooldownPolicy) -> Optional[str]:
    if isinstance(policy, Daily):
        return "Once per day"
    if isinstance(policy, Hours):
        return f"Every {policy.hours}h"
    return None
