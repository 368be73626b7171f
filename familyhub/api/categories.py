"""Chore category API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from familyhub.api.deps import get_current_member, require_admin
from familyhub.database import get_session
from familyhub.models.chore import Category
from familyhub.models.member import FamilyMember
from familyhub.schemas.chore import CategoryRequest, CategoryResponse
from familyhub.schemas.common import DataResponse, SuccessResponse

router = APIRouter(prefix="/categories", tags=["categories"])

DUPLICATE_NAME = "A category with this name already exists"


@router.get("", response_model=DataResponse[list[CategoryResponse]])
def list_categories(
    member: FamilyMember = Depends(get_current_member),
    session: Session = Depends(get_session),
):
    categories = session.exec(select(Category).order_by(col(Category.name).asc())).all()
    return DataResponse(data=[CategoryResponse.model_validate(c) for c in categories])


@router.post("", response_model=DataResponse[CategoryResponse], status_code=201)
def create_category(
    request: CategoryRequest,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    category = Category(name=request.name, color=request.color, icon=request.icon)
    session.add(category)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)
    session.refresh(category)
    return DataResponse(data=CategoryResponse.model_validate(category))


@router.put("/{category_id}", response_model=DataResponse[CategoryResponse])
def update_category(
    category_id: int,
    request: CategoryRequest,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    category.name = request.name
    category.color = request.color
    category.icon = request.icon
    session.add(category)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)
    session.refresh(category)
    return DataResponse(data=CategoryResponse.model_validate(category))


@router.delete("/{category_id}", response_model=DataResponse[SuccessResponse])
def delete_category(
    category_id: int,
    admin: FamilyMember = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Delete a category; its chores become uncategorized."""
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    session.delete(category)
    session.commit()
    return DataResponse(data=SuccessResponse())
