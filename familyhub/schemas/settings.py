"""Household settings schemas."""

from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, Field, HttpUrl, field_validator

from familyhub.schemas.common import CamelModel, UtcDateTime


class SettingsResponse(CamelModel):
    id: int
    currency: str
    point_value: Decimal
    qr_base_url: Optional[str]
    created_at: UtcDateTime
    updated_at: UtcDateTime


class SettingsUpdateRequest(CamelModel):
    currency: str = Field(min_length=3, max_length=3)
    point_value: Decimal = Field(gt=0)
    qr_base_url: Optional[HttpUrl] = None

    @field_validator("qr_base_url", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        return value or None


class SecurityUpdateRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


class VerifyRequest(CamelModel):
    # older clients post the admin password as "password"
    credential: str = Field(min_length=1, validation_alias=AliasChoices("credential", "password"))


class VerifyResponse(CamelModel):
    success: bool = True
    auth_type: str = "password"
