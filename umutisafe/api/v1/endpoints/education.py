"""Education tips: public reading, admin maintenance."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from umutisafe.api.deps import get_db, require_role
from umutisafe.core.exceptions import NotFoundException
from umutisafe.crud import crud_education_tip
from umutisafe.models.user import User
from umutisafe.schemas.common import ApiResponse
from umutisafe.schemas.education_tip import EducationTipCreate, EducationTipResponse, EducationTipUpdate

router = APIRouter(
    prefix="/education",
    tags=["Education"],
)


@router.get(
    "",
    response_model=ApiResponse[List[EducationTipResponse]],
    summary="List education tips",
)
async def list_tips(
    category: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
) -> dict:
    tips = crud_education_tip.list_active(db, category=category)
    return {"success": True, "data": [EducationTipResponse.model_validate(t) for t in tips]}


@router.get(
    "/{tip_id}",
    response_model=ApiResponse[EducationTipResponse],
    summary="Get an education tip",
)
async def get_tip(tip_id: UUID, db: Session = Depends(get_db)) -> dict:
    tip = crud_education_tip.get_active(db, tip_id)
    if tip is None:
        raise NotFoundException("Education tip not found")
    return {"success": True, "data": EducationTipResponse.model_validate(tip)}


@router.post(
    "",
    response_model=ApiResponse[EducationTipResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create an education tip (admin)",
)
async def create_tip(
    tip_in: EducationTipCreate,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> dict:
    tip = crud_education_tip.create(db, obj_in=tip_in)
    return {
        "success": True,
        "message": "Education tip created successfully",
        "data": EducationTipResponse.model_validate(tip),
    }


@router.put(
    "/{tip_id}",
    response_model=ApiResponse[EducationTipResponse],
    summary="Update an education tip (admin)",
)
async def update_tip(
    tip_id: UUID,
    tip_in: EducationTipUpdate,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> dict:
    tip = crud_education_tip.get(db, tip_id)
    if tip is None:
        raise NotFoundException("Education tip not found")
    tip = crud_education_tip.update(db, db_obj=tip, obj_in=tip_in)
    return {
        "success": True,
        "message": "Education tip updated successfully",
        "data": EducationTipResponse.model_validate(tip),
    }


@router.delete(
    "/{tip_id}",
    response_model=ApiResponse[None],
    summary="Retire an education tip (admin)",
)
async def delete_tip(
    tip_id: UUID,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> dict:
    if crud_education_tip.delete(db, id=tip_id) is None:
        raise NotFoundException("Education tip not found")
    return {"success": True, "message": "Education tip deleted successfully"}
