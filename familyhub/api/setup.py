"""First-run setup API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from familyhub.database import get_session
from familyhub.schemas.auth import SetupRequest, SetupStatusResponse
from familyhub.schemas.common import DataResponse, SuccessResponse
from familyhub.services.auth_service import complete_setup, setup_status

router = APIRouter(prefix="/setup", tags=["setup"])


@router.get("/status", response_model=DataResponse[SetupStatusResponse])
def get_setup_status(session: Session = Depends(get_session)):
    """Whether the household has been set up yet."""
    return DataResponse(data=SetupStatusResponse(**setup_status(session)))


@router.post("", response_model=DataResponse[SuccessResponse], status_code=201)
def run_setup(request: SetupRequest, session: Session = Depends(get_session)):
    """Create the admin account and household settings. Only allowed once."""
    try:
        complete_setup(
            admin_name=request.admin_name,
            password=request.password,
            currency=request.currency,
            point_value=request.point_value,
            session=session,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return DataResponse(data=SuccessResponse(message="Setup completed successfully"))
