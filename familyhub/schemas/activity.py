"""Activity feed schemas."""

from typing import Optional

from familyhub.schemas.common import CamelModel, UtcDateTime


class ActivityMember(CamelModel):
    name: str
    color: str
    avatar_url: str


class ActivityChore(CamelModel):
    title: str


class ActivityEntry(CamelModel):
    id: int
    type: str
    family_member_id: Optional[int]
    chore_id: Optional[int]
    metadata: Optional[dict]
    created_at: UtcDateTime
    family_member: Optional[ActivityMember]
    chore: Optional[ActivityChore]
