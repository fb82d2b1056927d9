"""Community health worker directory."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from umutisafe.api.deps import get_current_active_user, get_db
from umutisafe.core.exceptions import ForbiddenException, NotFoundException
from umutisafe.crud import crud_user
from umutisafe.models.user import User
from umutisafe.schemas.common import ApiResponse, Pagination
from umutisafe.schemas.user import AvailabilityUpdate, UserResponse

router = APIRouter(
    prefix="/chws",
    tags=["CHWs"],
)


@router.get(
    "",
    response_model=ApiResponse[List[UserResponse]],
    summary="List active CHWs",
)
async def list_chws(
    sector: Optional[str] = Query(default=None),
    availability: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
) -> dict:
    chws, total = crud_user.list_chws(
        db, sector=sector, availability=availability, search=search, page=page, limit=limit
    )
    return {
        "success": True,
        "data": [UserResponse.model_validate(c) for c in chws],
        "pagination": Pagination.build(total=total, page=page, limit=limit),
    }


@router.get(
    "/nearby",
    response_model=ApiResponse[List[UserResponse]],
    summary="Available CHWs near a sector",
)
async def list_nearby_chws(
    sector: Optional[str] = Query(default=None),
    limit: int = Query(default=5, ge=1, le=50),
    db: Session = Depends(get_db),
) -> dict:
    chws = crud_user.nearby_chws(db, sector=sector, limit=limit)
    return {"success": True, "data": [UserResponse.model_validate(c) for c in chws]}


# Registered before /{chw_id} so "availability" is not parsed as an id
@router.put(
    "/availability",
    response_model=ApiResponse[UserResponse],
    summary="Update my availability (CHW)",
)
async def update_availability(
    availability_in: AvailabilityUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    if current_user.role != "chw":
        raise ForbiddenException("Only CHWs can update availability")

    user = crud_user.update(db, db_obj=current_user, obj_in={"availability": availability_in.availability})
    return {
        "success": True,
        "message": "Availability updated successfully",
        "data": UserResponse.model_validate(user),
    }


@router.get(
    "/{chw_id}",
    response_model=ApiResponse[UserResponse],
    summary="Get a CHW",
)
async def get_chw(chw_id: UUID, db: Session = Depends(get_db)) -> dict:
    chw = crud_user.get_chw(db, chw_id)
    if chw is None:
        raise NotFoundException("CHW not found")
    return {"success": True, "data": UserResponse.model_validate(chw)}
