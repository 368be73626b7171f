"""Point ledger and activity log models."""

import json
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class PointTransaction(SQLModel, table=True):
    __tablename__ = "point_transactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    family_member_id: int = Field(foreign_key="family_members.id", ondelete="CASCADE", index=True)
    amount: int
    type: str  # 'earned' | 'redeemed'
    description: Optional[str] = Field(default=None, max_length=255)
    reference_id: Optional[int] = Field(default=None, index=True)  # chore_completions.id if earned
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ActivityLog(SQLModel, table=True):
    __tablename__ = "activity_log"

    id: Optional[int] = Field(default=None, primary_key=True)
    type: str  # 'chore_completed' | 'points_redeemed'
    family_member_id: Optional[int] = Field(
        default=None, foreign_key="family_members.id", ondelete="SET NULL", index=True
    )
    chore_id: Optional[int] = Field(default=None, foreign_key="chores.id", ondelete="SET NULL")
    reference_id: Optional[int] = Field(default=None, index=True)  # completion or transaction id
    metadata_json: Optional[str] = None  # JSON
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)

    def details(self) -> Optional[dict]:
        return json.loads(self.metadata_json) if self.metadata_json else None
