"""Category, chore and completion models."""

import json
from datetime import date, datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=50, unique=True)
    color: Optional[str] = None
    icon: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Chore(SQLModel, table=True):
    __tablename__ = "chores"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=200)
    description: Optional[str] = None
    points: int = Field(default=0)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id", ondelete="SET NULL")
    is_permanent: bool = Field(default=False)
    recurring_type: Optional[str] = None  # 'daily' | 'weekly' | 'biweekly' | 'custom'
    recurring_config: Optional[str] = None  # JSON
    due_date: Optional[date] = None
    due_time: Optional[str] = None  # HH:MM
    end_date: Optional[date] = None
    cooldown_type: Optional[str] = None  # 'unlimited' | 'daily' | 'hours'
    cooldown_hours: Optional[int] = None
    qr_token: Optional[str] = Field(default=None, unique=True)
    nfc_tag_id: Optional[str] = Field(default=None, unique=True, max_length=64)
    deleted_at: Optional[datetime] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_one_time(self) -> bool:
        """Neither permanent nor recurring: disappears after its single completion."""
        return not self.is_permanent and not self.recurring_type

    def recurrence(self) -> Optional[dict]:
        return json.loads(self.recurring_config) if self.recurring_config else None


class ChoreAssignee(SQLModel, table=True):
    __tablename__ = "chore_assignees"

    id: Optional[int] = Field(default=None, primary_key=True)
    chore_id: int = Field(foreign_key="chores.id", ondelete="CASCADE", index=True)
    family_member_id: int = Field(foreign_key="family_members.id", ondelete="CASCADE", index=True)


class ChoreCompletion(SQLModel, table=True):
    __tablename__ = "chore_completions"

    id: Optional[int] = Field(default=None, primary_key=True)
    chore_id: int = Field(foreign_key="chores.id", ondelete="CASCADE", index=True)
    completed_by: int = Field(foreign_key="family_members.id", ondelete="CASCADE", index=True)
    points_earned: int = Field(default=0)
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
