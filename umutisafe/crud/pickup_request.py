"""CRUD operations for `PickupRequest` model."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from umutisafe.core.exceptions import BadRequestException
from umutisafe.crud.base import CRUDBase
from umutisafe.crud.disposal import ALLOWED_TRANSITIONS as DISPOSAL_TRANSITIONS, crud_disposal
from umutisafe.models.pickup_request import PickupRequest
from umutisafe.models.user import User
from umutisafe.schemas.pickup_request import PickupRequestCreate, PickupStatusUpdate

logger = logging.getLogger(__name__)

CLOSED_STATUSES = frozenset({"completed", "cancelled"})

# Status -> statuses the assigned CHW may move it to. Repeating the current
# status is always allowed (completed included, which bumps the counter again).
STATUS_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "pending": frozenset({"scheduled", "collected", "completed", "cancelled", "rejected"}),
    "scheduled": frozenset({"collected", "completed", "cancelled", "rejected"}),
    "collected": frozenset({"completed"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
    "rejected": frozenset(),
}


class CRUDPickupRequest(CRUDBase[PickupRequest, PickupRequestCreate, PickupStatusUpdate]):
    def create_with_disposal(
        self,
        db: Session,
        *,
        obj_in: PickupRequestCreate,
        user_id: UUID,
    ) -> PickupRequest:
        """Insert the request and link the requester's disposal in one transaction.

        A `disposal_id` the requester does not own, or one already past
        `pending_review`, is logged and ignored; the request is still created.
        """
        data = obj_in.model_dump(exclude={"disposal_id"})
        pickup = PickupRequest(**data, user_id=user_id, status="pending")

        try:
            db.add(pickup)
            db.flush()

            if obj_in.disposal_id is not None:
                disposal = crud_disposal.get_owned(db, disposal_id=obj_in.disposal_id, user_id=user_id)
                if disposal is None:
                    logger.warning(
                        f"[PICKUP] Pickup {pickup.id} created for user {user_id} "
                        f"but disposal {obj_in.disposal_id} not found or not owned"
                    )
                elif "pickup_requested" not in DISPOSAL_TRANSITIONS[disposal.status]:
                    logger.warning(
                        f"[PICKUP] Pickup {pickup.id} created but disposal {disposal.id} "
                        f"is {disposal.status} and was left unlinked"
                    )
                else:
                    disposal.pickup_request_id = pickup.id
                    disposal.status = "pickup_requested"
                    db.add(disposal)

            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(pickup)
        logger.info(f"[PICKUP] Created pickup {pickup.id} for user {user_id} with CHW {pickup.chw_id}")
        return pickup

    def get_visible(self, db: Session, *, pickup_id: UUID, user_id: UUID) -> Optional[PickupRequest]:
        """Return the request when `user_id` is its requester or its CHW."""
        stmt = (
            select(PickupRequest)
            .where(
                PickupRequest.id == pickup_id,
                or_(PickupRequest.user_id == user_id, PickupRequest.chw_id == user_id),
            )
            .limit(1)
        )
        return db.scalars(stmt).first()

    def get_assigned(self, db: Session, *, pickup_id: UUID, chw_id: UUID) -> Optional[PickupRequest]:
        stmt = select(PickupRequest).where(PickupRequest.id == pickup_id, PickupRequest.chw_id == chw_id).limit(1)
        return db.scalars(stmt).first()

    def get_requested(self, db: Session, *, pickup_id: UUID, user_id: UUID) -> Optional[PickupRequest]:
        stmt = select(PickupRequest).where(PickupRequest.id == pickup_id, PickupRequest.user_id == user_id).limit(1)
        return db.scalars(stmt).first()

    def list_for_requester(
        self,
        db: Session,
        *,
        user_id: UUID,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[PickupRequest], int]:
        stmt = select(PickupRequest).where(PickupRequest.user_id == user_id)
        if status:
            stmt = stmt.where(PickupRequest.status == status)
        stmt = stmt.order_by(PickupRequest.created_at.desc())
        return self.paginate(db, stmt, page=page, limit=limit)

    def list_for_chw(
        self,
        db: Session,
        *,
        chw_id: UUID,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[PickupRequest], int]:
        stmt = select(PickupRequest).where(PickupRequest.chw_id == chw_id)
        if status:
            stmt = stmt.where(PickupRequest.status == status)
        stmt = stmt.order_by(PickupRequest.preferred_time.asc())
        return self.paginate(db, stmt, page=page, limit=limit)

    def list_all(
        self,
        db: Session,
        *,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[PickupRequest], int]:
        stmt = select(PickupRequest)
        if status:
            stmt = stmt.where(PickupRequest.status == status)
        stmt = stmt.order_by(PickupRequest.created_at.desc())
        return self.paginate(db, stmt, page=page, limit=limit)

    def update_status(
        self,
        db: Session,
        *,
        pickup: PickupRequest,
        obj_in: PickupStatusUpdate,
    ) -> PickupRequest:
        """Apply a CHW update.

        Every call that sets status to ``completed`` stamps `completed_at`
        and bumps the CHW's `completed_pickups`, even when the request was
        already completed.
        """
        if obj_in.status and obj_in.status != pickup.status:
            if obj_in.status not in STATUS_TRANSITIONS.get(pickup.status, frozenset()):
                raise BadRequestException(f"Cannot change pickup status from {pickup.status} to {obj_in.status}")
            pickup.status = obj_in.status
        if obj_in.chw_notes:
            pickup.chw_notes = obj_in.chw_notes
        if obj_in.scheduled_time:
            pickup.scheduled_time = obj_in.scheduled_time

        try:
            if obj_in.status == "completed":
                pickup.completed_at = datetime.utcnow()
                db.execute(
                    update(User)
                    .where(User.id == pickup.chw_id)
                    .values(completed_pickups=User.completed_pickups + 1)
                    .execution_options(synchronize_session=False)
                )
            db.add(pickup)
            db.commit()
            db.refresh(pickup)
        except Exception:
            db.rollback()
            raise
        return pickup

    def cancel(self, db: Session, *, pickup: PickupRequest) -> PickupRequest:
        if pickup.status in CLOSED_STATUSES:
            raise BadRequestException("Cannot cancel a completed or already cancelled request")
        return self.update(db, db_obj=pickup, obj_in={"status": "cancelled"})

    def stats_for_chw(self, db: Session, *, chw_id: UUID) -> Dict[str, int]:
        def count(status: str) -> int:
            stmt = select(func.count(PickupRequest.id)).where(
                PickupRequest.chw_id == chw_id, PickupRequest.status == status
            )
            return db.scalar(stmt) or 0

        pending = count("pending")
        scheduled = count("scheduled")
        completed = count("completed")
        return {
            "pending": pending,
            "scheduled": scheduled,
            "completed": completed,
            "total": pending + scheduled + completed,
        }


crud_pickup_request = CRUDPickupRequest(PickupRequest)
