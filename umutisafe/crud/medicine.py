"""CRUD operations for `Medicine` model, including the registry CSV import."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session

from umutisafe.crud.base import CRUDBase
from umutisafe.models.medicine import Medicine
from umutisafe.schemas.medicine import MedicineCreate, MedicineUpdate
from umutisafe.utils.normalization import clean_text, infer_risk_level

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"
SEARCH_MIN_LENGTH = 2
SEARCH_LIMIT = 10

# Columns copied as-is from an import row onto the model
_IMPORT_TEXT_FIELDS = (
    "brand_name",
    "strength",
    "pack_size",
    "packaging_type",
    "shelf_life",
    "manufacturer",
    "manufacturer_address",
    "manufacturer_country",
    "marketing_authorization_holder",
    "local_technical_representative",
    "disposal_instructions",
)


class CRUDMedicine(CRUDBase[Medicine, MedicineCreate, MedicineUpdate]):
    def list_medicines(
        self,
        db: Session,
        *,
        search: Optional[str] = None,
        category: Optional[str] = None,
        risk_level: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Medicine], int]:
        stmt = select(Medicine).where(Medicine.is_active.is_(True))
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(Medicine.generic_name.ilike(pattern), Medicine.brand_name.ilike(pattern)))
        if category:
            stmt = stmt.where(Medicine.category == category)
        if risk_level:
            stmt = stmt.where(Medicine.risk_level == risk_level)
        stmt = stmt.order_by(Medicine.generic_name.asc())
        return self.paginate(db, stmt, page=page, limit=limit)

    def search(self, db: Session, *, q: Optional[str]) -> List[Medicine]:
        """Autocomplete lookup; short queries return nothing."""
        term = (q or "").strip()
        if len(term) < SEARCH_MIN_LENGTH:
            return []
        pattern = f"%{term}%"
        stmt = (
            select(Medicine)
            .where(
                Medicine.is_active.is_(True),
                or_(Medicine.generic_name.ilike(pattern), Medicine.brand_name.ilike(pattern)),
            )
            .order_by(Medicine.generic_name.asc())
            .limit(SEARCH_LIMIT)
        )
        return list(db.scalars(stmt).all())

    def find_by_generic_name(self, db: Session, generic_name: str) -> Optional[Medicine]:
        stmt = (
            select(Medicine)
            .where(
                func.lower(Medicine.generic_name) == generic_name.strip().lower(),
                Medicine.is_active.is_(True),
            )
            .limit(1)
        )
        return db.scalars(stmt).first()

    def get_active(self, db: Session, id: Any) -> Optional[Medicine]:
        medicine = self.get(db, id)
        if medicine is None or not medicine.is_active:
            return None
        return medicine

    # ----- CSV import -----
    def _find_existing(
        self,
        db: Session,
        *,
        registration_number: Optional[str],
        generic_name: str,
        dosage_form: str,
    ) -> Optional[Medicine]:
        if registration_number:
            stmt = select(Medicine).where(Medicine.registration_number == registration_number)
        else:
            stmt = select(Medicine).where(
                Medicine.generic_name == generic_name,
                Medicine.dosage_form == dosage_form,
            )
        return db.scalars(stmt.limit(1)).first()

    def import_rows(
        self,
        db: Session,
        *,
        rows: Iterable[Dict[str, Optional[str]]],
        mode: str = "replace",
    ) -> Dict[str, int]:
        """Upsert registry rows inside one transaction.

        `rows` are keyed by logical column name. In ``replace`` mode the
        registry is emptied first; a failure anywhere leaves it untouched.
        """
        created = updated = skipped = 0
        try:
            if mode == "replace":
                db.execute(delete(Medicine))
                db.flush()

            for row in rows:
                generic_name = clean_text(row.get("generic_name"))
                dosage_form = clean_text(row.get("dosage_form"))
                if not generic_name or not dosage_form:
                    skipped += 1
                    continue

                registration_number = clean_text(row.get("registration_number"))
                category = clean_text(row.get("category")) or DEFAULT_CATEGORY
                values: Dict[str, Any] = {
                    "generic_name": generic_name,
                    "dosage_form": dosage_form,
                    "registration_number": registration_number,
                    "category": category,
                    "risk_level": infer_risk_level(row.get("risk_level"), category),
                    "is_active": True,
                }
                for field in _IMPORT_TEXT_FIELDS:
                    values[field] = clean_text(row.get(field))

                existing = self._find_existing(
                    db,
                    registration_number=registration_number,
                    generic_name=generic_name,
                    dosage_form=dosage_form,
                )
                if existing is not None:
                    for field, value in values.items():
                        setattr(existing, field, value)
                    updated += 1
                else:
                    db.add(Medicine(**values))
                    created += 1
                db.flush()

            db.commit()
        except Exception:
            db.rollback()
            logger.error("[MEDICINE] CSV import failed, registry left unchanged")
            raise

        logger.info(
            f"[MEDICINE] CSV import ({mode}) finished: created={created}, updated={updated}, skipped={skipped}"
        )
        return {"created": created, "updated": updated, "skipped": skipped}


crud_medicine = CRUDMedicine(Medicine)
