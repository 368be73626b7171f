"""Login session API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, col, select

from familyhub.api.deps import get_current_auth, get_current_member
from familyhub.api.members import member_profile
from familyhub.database import get_session
from familyhub.models.member import FamilyMember, UserSession
from familyhub.schemas.auth import LoginRequest, LoginResponse
from familyhub.schemas.common import DataResponse, SuccessResponse
from familyhub.schemas.member import LoginMemberResponse, MemberProfile
from familyhub.services import auth_service
from familyhub.utils.avatar import avatar_url

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=DataResponse[LoginResponse])
def login(request: LoginRequest, session: Session = Depends(get_session)):
    """Log a family member in with their password. Returns a bearer session token."""
    try:
        result = auth_service.login(
            member_id=request.family_member_id,
            password=request.password,
            device_name=request.device_name,
            session=session,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return DataResponse(data=LoginResponse(
        token=result["token"],
        expires_at=result["expires_at"],
        user=member_profile(result["member"]),
    ))


@router.post("/logout", response_model=DataResponse[SuccessResponse])
def logout(
    auth: tuple[FamilyMember, UserSession] = Depends(get_current_auth),
    session: Session = Depends(get_session),
):
    """Close the session behind the presented token."""
    _, user_session = auth
    auth_service.logout(user_session, session)
    return DataResponse(data=SuccessResponse(message="Logged out successfully"))


@router.get("/me", response_model=DataResponse[MemberProfile])
def me(member: FamilyMember = Depends(get_current_member)):
    return DataResponse(data=member_profile(member))


@router.get("/members", response_model=DataResponse[list[LoginMemberResponse]])
def login_members(session: Session = Depends(get_session)):
    """Members to pick from on the login screen. Public; never exposes hashes."""
    members = session.exec(
        select(FamilyMember).order_by(col(FamilyMember.created_at).asc(), col(FamilyMember.id).asc())
    ).all()
    return DataResponse(data=[
        LoginMemberResponse(
            id=m.id,
            name=m.name,
            avatar_type=m.avatar_type,
            avatar_value=m.avatar_value,
            avatar_url=avatar_url(m.avatar_type, m.avatar_value),
            color=m.color,
            has_password=bool(m.password_hash),
        )
        for m in members
    ])
