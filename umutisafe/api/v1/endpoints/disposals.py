"""Disposal record endpoints (owner scoped)."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from umutisafe.api.deps import get_current_active_user, get_db
from umutisafe.core.exceptions import NotFoundException
from umutisafe.crud import crud_disposal
from umutisafe.models.disposal import Disposal
from umutisafe.models.user import User
from umutisafe.schemas.common import ApiResponse, Pagination
from umutisafe.schemas.disposal import (
    DisposalCreate,
    DisposalResponse,
    DisposalStats,
    DisposalUpdate,
    MedicineImageResponse,
)
from umutisafe.utils.file_handler import save_upload_file

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/disposals",
    tags=["Disposals"],
)


def _get_owned_or_404(db: Session, disposal_id: UUID, user: User) -> Disposal:
    disposal = crud_disposal.get_owned(db, disposal_id=disposal_id, user_id=user.id)
    if disposal is None:
        raise NotFoundException("Disposal not found")
    return disposal


@router.post(
    "",
    response_model=ApiResponse[DisposalResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create disposal record",
)
async def create_disposal(
    disposal_in: DisposalCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    """
    Record a medicine the current user wants to dispose of.

    `risk_level` is accepted in any case and stored as LOW/MEDIUM/HIGH;
    confidence scores outside [0, 1] are clamped.
    """
    disposal = crud_disposal.create_for_user(db, obj_in=disposal_in, user_id=current_user.id)
    logger.info(f"[DISPOSAL] Created disposal {disposal.id} for user {current_user.id}")
    return {
        "success": True,
        "message": "Disposal created successfully",
        "data": DisposalResponse.model_validate(disposal),
    }


@router.get(
    "",
    response_model=ApiResponse[List[DisposalResponse]],
    summary="List my disposals",
)
async def list_my_disposals(
    status: Optional[str] = Query(default=None),
    risk_level: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    disposals, total = crud_disposal.list_for_user(
        db, user_id=current_user.id, status=status, risk_level=risk_level, page=page, limit=limit
    )
    return {
        "success": True,
        "data": [DisposalResponse.model_validate(d) for d in disposals],
        "pagination": Pagination.build(total=total, page=page, limit=limit),
    }


@router.get(
    "/stats",
    response_model=ApiResponse[DisposalStats],
    summary="My disposal statistics",
)
async def get_disposal_stats(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    stats = crud_disposal.stats_for_user(db, user_id=current_user.id)
    return {"success": True, "data": DisposalStats(**stats)}


@router.get(
    "/{disposal_id}",
    response_model=ApiResponse[DisposalResponse],
    summary="Get one of my disposals",
)
async def get_disposal(
    disposal_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    disposal = _get_owned_or_404(db, disposal_id, current_user)
    return {"success": True, "data": DisposalResponse.model_validate(disposal)}


@router.put(
    "/{disposal_id}",
    response_model=ApiResponse[DisposalResponse],
    summary="Update status or notes",
)
async def update_disposal(
    disposal_id: UUID,
    disposal_in: DisposalUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    """
    Allowed status changes: pending_review to pickup_requested or cancelled,
    pickup_requested to completed or cancelled. Anything else is a 400.
    """
    disposal = _get_owned_or_404(db, disposal_id, current_user)
    disposal = crud_disposal.update_disposal(db, disposal=disposal, obj_in=disposal_in)
    return {
        "success": True,
        "message": "Disposal updated successfully",
        "data": DisposalResponse.model_validate(disposal),
    }


@router.delete(
    "/{disposal_id}",
    response_model=ApiResponse[None],
    summary="Delete one of my disposals",
)
async def delete_disposal(
    disposal_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    disposal = _get_owned_or_404(db, disposal_id, current_user)
    crud_disposal.remove(db, disposal=disposal)
    logger.info(f"[DISPOSAL] Deleted disposal {disposal_id} for user {current_user.id}")
    return {"success": True, "message": "Disposal deleted successfully"}


@router.post(
    "/{disposal_id}/images",
    response_model=ApiResponse[MedicineImageResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Attach a medicine photo",
)
async def upload_disposal_image(
    disposal_id: UUID,
    file: UploadFile = File(..., description="JPG or PNG photo of the medicine"),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    disposal = _get_owned_or_404(db, disposal_id, current_user)
    url, filename, size = save_upload_file(file, "medicine_image")
    image = crud_disposal.add_image(
        db, disposal=disposal, url=url, filename=filename, mimetype=file.content_type, size=size
    )
    return {
        "success": True,
        "message": "Image uploaded successfully",
        "data": MedicineImageResponse.model_validate(image),
    }
