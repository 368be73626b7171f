"""Response envelopes and the camelCase base model.

Every endpoint answers ``{"data": ...}`` on success and
``{"error": "...", ...}`` on failure.
"""

from datetime import datetime
from typing import Annotated, Generic, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from familyhub.utils.dt import as_utc

T = TypeVar("T")

# SQLite returns naive datetimes; responses always carry UTC
UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class DataResponse(BaseModel, Generic[T]):
    data: T


class ErrorResponse(CamelModel):
    error: str
    cooldown_ends_at: Optional[str] = None


class SuccessResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
