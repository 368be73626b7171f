"""Family member schemas."""

from typing import Literal

from pydantic import Field

from familyhub.schemas.common import CamelModel, UtcDateTime

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class MemberSummary(CamelModel):
    id: int
    name: str
    color: str
    avatar_url: str


class MemberRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    avatar_type: Literal["dicebear", "custom"] = "dicebear"
    avatar_value: str = Field(min_length=1, max_length=500)
    color: str = Field(pattern=HEX_COLOR)


class MemberResponse(CamelModel):
    id: int
    name: str
    avatar_type: str
    avatar_value: str
    avatar_url: str
    color: str
    is_admin: bool
    has_password: bool
    created_at: UtcDateTime
    updated_at: UtcDateTime


class LoginMemberResponse(CamelModel):
    id: int
    name: str
    avatar_type: str
    avatar_value: str
    avatar_url: str
    color: str
    has_password: bool


class PasswordRequest(CamelModel):
    password: str = Field(min_length=6)


class MemberProfile(CamelModel):
    id: int
    name: str
    avatar_type: str
    avatar_value: str
    avatar_url: str
    color: str
    is_admin: bool
