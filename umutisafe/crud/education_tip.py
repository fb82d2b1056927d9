"""CRUD operations for `EducationTip` model."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from umutisafe.crud.base import CRUDBase
from umutisafe.models.education_tip import EducationTip
from umutisafe.schemas.education_tip import EducationTipCreate, EducationTipUpdate


class CRUDEducationTip(CRUDBase[EducationTip, EducationTipCreate, EducationTipUpdate]):
    def list_active(self, db: Session, *, category: Optional[str] = None) -> List[EducationTip]:
        stmt = select(EducationTip).where(EducationTip.is_active.is_(True))
        if category:
            stmt = stmt.where(EducationTip.category == category)
        stmt = stmt.order_by(EducationTip.display_order.asc(), EducationTip.created_at.desc())
        return list(db.scalars(stmt).all())

    def get_active(self, db: Session, id) -> Optional[EducationTip]:
        tip = self.get(db, id)
        if tip is None or not tip.is_active:
            return None
        return tip


crud_education_tip = CRUDEducationTip(EducationTip)
