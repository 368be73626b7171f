"""Point ledger schemas."""

from typing import Optional

from pydantic import Field

from familyhub.schemas.common import CamelModel, UtcDateTime


class TransactionResponse(CamelModel):
    id: int
    family_member_id: int
    amount: int
    type: str
    description: Optional[str]
    reference_id: Optional[int]
    created_at: UtcDateTime


class LeaderboardEntry(CamelModel):
    id: int
    name: str
    avatar_type: str
    avatar_value: str
    avatar_url: str
    color: str
    is_admin: bool
    total_points: int


class HistoryResponse(CamelModel):
    balance: int
    transactions: list[TransactionResponse]


class RedeemRequest(CamelModel):
    family_member_id: int = Field(gt=0)


class RedeemResponse(CamelModel):
    transaction: TransactionResponse
    points_redeemed: int
    money_value: str
    member_name: str
