"""CRUD operations for `Disposal` and `MedicineImage` models."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from umutisafe.core.exceptions import BadRequestException
from umutisafe.crud.base import CRUDBase
from umutisafe.models.disposal import Disposal
from umutisafe.models.medicine_image import MedicineImage
from umutisafe.schemas.disposal import DisposalCreate, DisposalUpdate
from umutisafe.utils.file_handler import delete_file
from umutisafe.utils.normalization import RISK_LEVELS

logger = logging.getLogger(__name__)

# Status -> statuses a caller may move it to
ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "pending_review": frozenset({"pickup_requested", "cancelled"}),
    "pickup_requested": frozenset({"completed", "cancelled"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
}


class CRUDDisposal(CRUDBase[Disposal, DisposalCreate, DisposalUpdate]):
    def create_for_user(self, db: Session, *, obj_in: DisposalCreate, user_id: UUID) -> Disposal:
        data = obj_in.model_dump()
        data["user_id"] = user_id
        data["status"] = "pending_review"
        return self.create(db, obj_in=data)

    def get_owned(self, db: Session, *, disposal_id: UUID, user_id: UUID) -> Optional[Disposal]:
        """Return the disposal only when it belongs to `user_id`."""
        stmt = select(Disposal).where(Disposal.id == disposal_id, Disposal.user_id == user_id).limit(1)
        return db.scalars(stmt).first()

    def list_for_user(
        self,
        db: Session,
        *,
        user_id: UUID,
        status: Optional[str] = None,
        risk_level: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Disposal], int]:
        stmt = select(Disposal).where(Disposal.user_id == user_id)
        if status:
            stmt = stmt.where(Disposal.status == status)
        if risk_level:
            stmt = stmt.where(Disposal.risk_level == risk_level.upper())
        stmt = stmt.order_by(Disposal.created_at.desc())
        return self.paginate(db, stmt, page=page, limit=limit)

    def list_all(
        self,
        db: Session,
        *,
        status: Optional[str] = None,
        risk_level: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Disposal], int]:
        stmt = select(Disposal)
        if status:
            stmt = stmt.where(Disposal.status == status)
        if risk_level:
            stmt = stmt.where(Disposal.risk_level == risk_level.upper())
        stmt = stmt.order_by(Disposal.created_at.desc())
        return self.paginate(db, stmt, page=page, limit=limit)

    def update_disposal(self, db: Session, *, disposal: Disposal, obj_in: DisposalUpdate) -> Disposal:
        """Apply a status and/or notes change.

        Raises:
            BadRequestException: when the status change is not allowed from
                the current status.
        """
        update_data: Dict[str, object] = {}
        if obj_in.status is not None and obj_in.status != disposal.status:
            allowed = ALLOWED_TRANSITIONS.get(disposal.status, frozenset())
            if obj_in.status not in allowed:
                raise BadRequestException(
                    f"Cannot change disposal status from '{disposal.status}' to '{obj_in.status}'"
                )
            update_data["status"] = obj_in.status
            if obj_in.status == "completed":
                update_data["completed_at"] = datetime.utcnow()
        if obj_in.notes is not None:
            update_data["notes"] = obj_in.notes

        if not update_data:
            return disposal
        return self.update(db, db_obj=disposal, obj_in=update_data)

    def add_image(
        self,
        db: Session,
        *,
        disposal: Disposal,
        url: str,
        filename: str,
        mimetype: Optional[str],
        size: int,
    ) -> MedicineImage:
        image = MedicineImage(
            disposal_id=disposal.id,
            filename=filename,
            url=url,
            mimetype=mimetype,
            size=size,
        )
        if not disposal.image_url:
            disposal.image_url = url
        try:
            db.add(image)
            db.add(disposal)
            db.commit()
            db.refresh(image)
        except Exception:
            db.rollback()
            raise
        return image

    def remove(self, db: Session, *, disposal: Disposal) -> None:
        """Hard delete a disposal and best-effort remove its stored files.

        Only files recorded as this disposal's own `MedicineImage` rows are
        unlinked; a client-supplied `image_url` may point at someone else's upload.
        """
        urls = [image.url for image in disposal.images if image.url]
        for url in dict.fromkeys(urls):
            if not delete_file(url):
                logger.info(f"[DISPOSAL] No file removed for {url} (disposal {disposal.id})")

        try:
            db.delete(disposal)
            db.commit()
        except Exception:
            db.rollback()
            raise

    def stats_for_user(self, db: Session, *, user_id: UUID) -> Dict[str, object]:
        def count(*conditions) -> int:
            stmt = select(func.count(Disposal.id)).where(Disposal.user_id == user_id, *conditions)
            return db.scalar(stmt) or 0

        rows = db.execute(
            select(Disposal.risk_level, func.count(Disposal.id))
            .where(Disposal.user_id == user_id)
            .group_by(Disposal.risk_level)
        ).all()
        by_risk_level = {level: 0 for level in RISK_LEVELS}
        for level, total in rows:
            if level:
                by_risk_level[level] = total

        return {
            "total_disposals": count(),
            "pending_review": count(Disposal.status == "pending_review"),
            "completed": count(Disposal.status == "completed"),
            "by_risk_level": by_risk_level,
        }


crud_disposal = CRUDDisposal(Disposal)
