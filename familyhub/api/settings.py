"""Household settings API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from familyhub.api.deps import get_current_member, require_admin
from familyhub.database import get_session
from familyhub.models.member import FamilyMember
from familyhub.models.settings import AppSettings
from familyhub.schemas.common import DataResponse, SuccessResponse
from familyhub.schemas.settings import (
    SecurityUpdateRequest,
    SettingsResponse,
    SettingsUpdateRequest,
    VerifyRequest,
    VerifyResponse,
)
from familyhub.services.auth_service import change_password, verify_admin_credential
from familyhub.utils.dt import utcnow

router = APIRouter(prefix="/settings", tags=["settings"])


def _get_settings(session: Session) -> AppSettings:
    app_settings = session.exec(select(AppSettings)).first()
    if not app_settings:
        raise HTTPException(status_code=404, detail="Settings not found")
    return app_settings


@router.get("", response_model=DataResponse[SettingsResponse])
def get_settings(
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    return DataResponse(data=SettingsResponse.model_validate(_get_settings(session)))


@router.put("", response_model=DataResponse[SettingsResponse])
def update_settings(
    request: SettingsUpdateRequest,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Change currency, point value and the QR base URL."""
    app_settings = _get_settings(session)
    app_settings.currency = request.currency.upper()
    app_settings.point_value = request.point_value
    app_settings.qr_base_url = str(request.qr_base_url) if request.qr_base_url else None
    app_settings.updated_at = utcnow()
    session.add(app_settings)
    session.commit()
    session.refresh(app_settings)
    return DataResponse(data=SettingsResponse.model_validate(app_settings))


@router.put("/security", response_model=DataResponse[SuccessResponse])
def update_security(
    request: SecurityUpdateRequest,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Change the admin's own password."""
    try:
        change_password(admin, request.current_password, request.new_password, session)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return DataResponse(data=SuccessResponse(message="Password updated successfully"))


@router.post("/verify", response_model=DataResponse[VerifyResponse])
def verify_admin(
    request: VerifyRequest,
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    """Confirm the admin password so a shared device can open the settings screen."""
    try:
        verify_admin_credential(request.credential, session)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return DataResponse(data=VerifyResponse())
