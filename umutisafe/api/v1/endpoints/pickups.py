"""Pickup request endpoints for requesters and community health workers."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from umutisafe.api.deps import get_current_active_user, get_db, require_role
from umutisafe.core.exceptions import BadRequestException, NotFoundException
from umutisafe.crud import crud_pickup_request, crud_user
from umutisafe.models.user import User
from umutisafe.schemas.common import ApiResponse, Pagination
from umutisafe.schemas.pickup_request import (
    ChwPickupStats,
    PickupRequestCreate,
    PickupRequestResponse,
    PickupStatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/pickups",
    tags=["Pickups"],
)


@router.post(
    "",
    response_model=ApiResponse[PickupRequestResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Request a CHW pickup",
)
async def create_pickup_request(
    pickup_in: PickupRequestCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    """
    Create a pickup request for an active CHW.

    When `disposal_id` names one of the caller's disposals it is linked and
    moved to `pickup_requested` in the same transaction.

    Raises:
        HTTPException: 400 without consent, 404 if the CHW is unknown or inactive
    """
    if not pickup_in.consent_given:
        raise BadRequestException("Consent is required to create pickup request")

    if crud_user.get_active_chw(db, pickup_in.chw_id) is None:
        raise NotFoundException("CHW not found or not available")

    pickup = crud_pickup_request.create_with_disposal(db, obj_in=pickup_in, user_id=current_user.id)
    return {
        "success": True,
        "message": "Pickup request created successfully",
        "data": PickupRequestResponse.model_validate(pickup),
    }


@router.get(
    "",
    response_model=ApiResponse[List[PickupRequestResponse]],
    summary="List my pickup requests",
)
async def list_my_pickups(
    status: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    pickups, total = crud_pickup_request.list_for_requester(
        db, user_id=current_user.id, status=status, page=page, limit=limit
    )
    return {
        "success": True,
        "data": [PickupRequestResponse.model_validate(p) for p in pickups],
        "pagination": Pagination.build(total=total, page=page, limit=limit),
    }


@router.get(
    "/chw",
    response_model=ApiResponse[List[PickupRequestResponse]],
    summary="List pickups assigned to me (CHW)",
)
async def list_chw_pickups(
    status: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    current_user: User = Depends(require_role("chw")),
    db: Session = Depends(get_db),
) -> dict:
    pickups, total = crud_pickup_request.list_for_chw(
        db, chw_id=current_user.id, status=status, page=page, limit=limit
    )
    return {
        "success": True,
        "data": [PickupRequestResponse.model_validate(p) for p in pickups],
        "pagination": Pagination.build(total=total, page=page, limit=limit),
    }


@router.get(
    "/chw/stats",
    response_model=ApiResponse[ChwPickupStats],
    summary="My pickup counts (CHW)",
)
async def get_chw_stats(
    current_user: User = Depends(require_role("chw")),
    db: Session = Depends(get_db),
) -> dict:
    stats = crud_pickup_request.stats_for_chw(db, chw_id=current_user.id)
    return {"success": True, "data": ChwPickupStats(**stats)}


@router.get(
    "/{pickup_id}",
    response_model=ApiResponse[PickupRequestResponse],
    summary="Get a pickup request",
)
async def get_pickup_request(
    pickup_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    pickup = crud_pickup_request.get_visible(db, pickup_id=pickup_id, user_id=current_user.id)
    if pickup is None:
        raise NotFoundException("Pickup request not found")
    return {"success": True, "data": PickupRequestResponse.model_validate(pickup)}


@router.put(
    "/{pickup_id}/status",
    response_model=ApiResponse[PickupRequestResponse],
    summary="Update pickup status (assigned CHW)",
)
async def update_pickup_status(
    pickup_id: UUID,
    update_in: PickupStatusUpdate,
    current_user: User = Depends(require_role("chw")),
    db: Session = Depends(get_db),
) -> dict:
    pickup = crud_pickup_request.get_assigned(db, pickup_id=pickup_id, chw_id=current_user.id)
    if pickup is None:
        raise NotFoundException("Pickup request not found")

    pickup = crud_pickup_request.update_status(db, pickup=pickup, obj_in=update_in)
    logger.info(f"[PICKUP] Pickup {pickup.id} set to {pickup.status} by CHW {current_user.id}")
    return {
        "success": True,
        "message": "Pickup request updated successfully",
        "data": PickupRequestResponse.model_validate(pickup),
    }


@router.put(
    "/{pickup_id}/cancel",
    response_model=ApiResponse[PickupRequestResponse],
    summary="Cancel my pickup request",
)
async def cancel_pickup_request(
    pickup_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    pickup = crud_pickup_request.get_requested(db, pickup_id=pickup_id, user_id=current_user.id)
    if pickup is None:
        raise NotFoundException("Pickup request not found")

    pickup = crud_pickup_request.cancel(db, pickup=pickup)
    return {
        "success": True,
        "message": "Pickup request cancelled successfully",
        "data": PickupRequestResponse.model_validate(pickup),
    }
