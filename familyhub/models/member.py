"""Family member and login session models."""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel

PASTEL_COLORS = (
    "#FFB3BA",  # Pink
    "#FFDFBA",  # Peach
    "#FFFFBA",  # Yellow
    "#BAFFC9",  # Mint
    "#BAE1FF",  # Sky Blue
    "#E0BBE4",  # Lavender
    "#D4A5A5",  # Dusty Rose
    "#A5D4D4",  # Teal
    "#C9C9FF",  # Periwinkle
    "#FFD4BA",  # Apricot
    "#D4BAFF",  # Lilac
    "#BAFFD4",  # Seafoam
)


class FamilyMember(SQLModel, table=True):
    __tablename__ = "family_members"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100)
    avatar_type: str = Field(default="dicebear")  # 'dicebear' | 'custom'
    avatar_value: str
    color: str = Field(max_length=7)
    is_admin: bool = Field(default=False)
    password_hash: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class UserSession(SQLModel, table=True):
    __tablename__ = "user_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    family_member_id: int = Field(foreign_key="family_members.id", ondelete="CASCADE", index=True)
    token_hash: Optional[str] = None  # session token fingerprint
    device_name: str = Field(default="Unknown device")
    expires_at: datetime
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
