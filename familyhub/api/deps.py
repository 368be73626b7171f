"""Common API dependencies: current member extraction, admin check."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from familyhub.database import get_session
from familyhub.models.member import FamilyMember, UserSession
from familyhub.services.auth_service import resolve_session

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> tuple[FamilyMember, UserSession]:
    """Resolve the bearer session token to its member and session row."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    try:
        return resolve_session(credentials.credentials, session)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )


def get_current_member(
    auth: tuple[FamilyMember, UserSession] = Depends(get_current_auth),
) -> FamilyMember:
    return auth[0]


def require_admin(member: FamilyMember = Depends(get_current_member)) -> FamilyMember:
    """Require the current member to be the household admin."""
    if not member.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return member
