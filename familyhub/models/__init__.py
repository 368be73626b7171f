"""FamilyHub Database Models."""

from familyhub.models.member import FamilyMember, UserSession
from familyhub.models.settings import AppSettings
from familyhub.models.chore import Category, Chore, ChoreAssignee, ChoreCompletion
from familyhub.models.ledger import ActivityLog, PointTransaction

__all__ = [
    "FamilyMember",
    "UserSession",
    "AppSettings",
    "Category",
    "Chore",
    "ChoreAssignee",
    "ChoreCompletion",
    "PointTransaction",
    "ActivityLog",
]
