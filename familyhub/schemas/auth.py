"""Setup and login request/response schemas."""

from decimal import Decimal
from typing import Optional

from pydantic import Field

from familyhub.schemas.common import CamelModel, UtcDateTime
from familyhub.schemas.member import MemberProfile


# --- First-run setup ---

class SetupRequest(CamelModel):
    admin_name: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=6)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    point_value: Decimal = Field(default=Decimal("1"), gt=0)


class SetupStatusResponse(CamelModel):
    is_setup_complete: bool
    has_admin: bool
    has_family_member: bool


# --- Login ---

class LoginRequest(CamelModel):
    family_member_id: int = Field(gt=0)
    password: str = Field(min_length=1)
    device_name: Optional[str] = Field(default=None, max_length=100)


class LoginResponse(CamelModel):
    token: str
    expires_at: UtcDateTime
    user: MemberProfile
