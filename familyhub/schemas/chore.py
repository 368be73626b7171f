"""Chore, category and completion request/response schemas."""

from datetime import date
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, field_validator, model_validator

from familyhub.schemas.common import CamelModel, UtcDateTime
from familyhub.schemas.member import MemberSummary

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"
DayOfWeek = Annotated[int, Field(ge=0, le=6)]  # 0 = Sunday


# --- Recurrence rules ---

class DailyRule(CamelModel):
    type: Literal["daily"]


class WeeklyRule(CamelModel):
    type: Literal["weekly"]
    day_of_week: DayOfWeek


class BiweeklyRule(CamelModel):
    type: Literal["biweekly"]
    day_of_week: DayOfWeek
    start_date: date


class IntervalRule(CamelModel):
    type: Literal["interval"]
    days: int = Field(gt=0)


class DaysRule(CamelModel):
    type: Literal["days"]
    days_of_week: list[DayOfWeek]


RecurrenceRule = Annotated[
    Union[DailyRule, WeeklyRule, BiweeklyRule, IntervalRule, DaysRule],
    Field(discriminator="type"),
]


# --- Cooldown ---

class CooldownConfig(CamelModel):
    type: Literal["unlimited", "daily", "hours"]
    hours: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _hours_iff_hours_type(self):
        if self.type == "hours" and self.hours is None:
            raise ValueError("Cooldown hours are required for an hours cooldown")
        if self.type != "hours" and self.hours is not None:
            raise ValueError("Cooldown hours only apply to an hours cooldown")
        return self


# --- Categories ---

class CategoryRequest(CamelModel):
    name: str = Field(min_length=1, max_length=50)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    icon: Optional[str] = Field(default=None, max_length=50)


class CategoryResponse(CamelModel):
    id: int
    name: str
    color: Optional[str]
    icon: Optional[str]
    created_at: UtcDateTime


# --- Chores ---

class ChoreRequest(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    points: int = Field(default=0, ge=0)
    category_id: Optional[int] = Field(default=None, gt=0)
    assignee_ids: list[Annotated[int, Field(gt=0)]] = []
    is_permanent: bool = False
    recurring_type: Optional[Literal["daily", "weekly", "biweekly", "custom"]] = None
    recurring_config: Optional[RecurrenceRule] = None
    due_date: Optional[date] = None
    due_time: Optional[str] = Field(default=None, pattern=r"^\d{2}:\d{2}(:\d{2})?$")
    end_date: Optional[date] = None
    cooldown: Optional[CooldownConfig] = None

    @field_validator("description", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        return value or None

    @model_validator(mode="after")
    def _cooldown_needs_permanent(self):
        if self.cooldown is not None and not self.is_permanent:
            raise ValueError("Only permanent chores can have a cooldown")
        return self


class ChoreResponse(CamelModel):
    id: int
    title: str
    description: Optional[str]
    points: int
    category: Optional[CategoryResponse]
    assignees: list[MemberSummary]
    is_permanent: bool
    recurring_type: Optional[str]
    recurring_config: Optional[dict]
    due_date: Optional[date]
    due_time: Optional[str]
    end_date: Optional[date]
    cooldown: Optional[CooldownConfig]
    cooldown_label: Optional[str]
    qr_token: Optional[str]
    nfc_tag_id: Optional[str]
    deleted_at: Optional[UtcDateTime]
    created_at: UtcDateTime
    updated_at: UtcDateTime


class NfcBindRequest(CamelModel):
    nfc_tag_id: Optional[str] = Field(max_length=64)


class NfcBindResponse(CamelModel):
    success: bool = True
    chore: ChoreResponse
    message: str


class QrCodeResponse(CamelModel):
    qr_token: str
    qr_data: str


class CooldownStatusResponse(CamelModel):
    can_complete: bool
    reason: Optional[str] = None
    next_available_at: Optional[UtcDateTime] = None
    remaining_time: Optional[str] = None


# --- Completion ---

class CompleteRequest(CamelModel):
    completed_by: int = Field(gt=0)


class QrCompleteRequest(CamelModel):
    token: str = Field(min_length=1)


class NfcCompleteRequest(CamelModel):
    tag_id: str = Field(min_length=1)


class CompletionRecord(CamelModel):
    id: int
    chore_id: int
    completed_by: int
    points_earned: int
    completed_at: UtcDateTime


class CompletionResponse(CamelModel):
    completion: CompletionRecord
    points_earned: int
    chore_name: str
    completed_by_name: str


class UndoResponse(CamelModel):
    success: bool = True
    chore_id: int
