"""Shared persistence helpers for the per-entity CRUD singletons."""

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from umutisafe.database import Base


ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

Payload = Union[BaseModel, Dict[str, Any]]


def _as_dict(obj_in: Payload) -> Dict[str, Any]:
	if isinstance(obj_in, BaseModel):
		return obj_in.model_dump(exclude_unset=True)
	return dict(obj_in)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
	"""Typed access to one model.

	Writes commit immediately and roll the session back on failure; callers
	that need several writes in one transaction use the session directly.
	"""

	def __init__(self, model: Type[ModelType]):
		self.model = model

	def save(self, db: Session, db_obj: ModelType) -> ModelType:
		"""Add, commit and refresh `db_obj`."""
		try:
			db.add(db_obj)
			db.commit()
		except Exception:
			db.rollback()
			raise
		db.refresh(db_obj)
		return db_obj

	# ----- Read -----
	def get(self, db: Session, id: Any) -> Optional[ModelType]:
		return db.get(self.model, id)

	def get_multi(self, db: Session, *, skip: int = 0, limit: int = 100) -> Sequence[ModelType]:
		return db.scalars(select(self.model).offset(skip).limit(limit)).all()

	def get_by_field(self, db: Session, field_name: str, value: Any) -> Optional[ModelType]:
		column = getattr(self.model, field_name, None)
		if column is None:
			raise AttributeError(f"{self.model.__name__} has no column {field_name!r}")
		return db.scalars(select(self.model).where(column == value).limit(1)).first()

	def paginate(
		self,
		db: Session,
		stmt: Select,
		*,
		page: int = 1,
		limit: int = 10,
	) -> Tuple[List[ModelType], int]:
		"""Run `stmt` for one page and return `(rows, total)`.

		`stmt` must select the model only; ordering is left to the caller.
		"""
		total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
		rows = db.scalars(stmt.offset((page - 1) * limit).limit(limit)).all()
		return list(rows), total

	# ----- Write -----
	def create(self, db: Session, *, obj_in: Payload) -> ModelType:
		return self.save(db, self.model(**_as_dict(obj_in)))

	def update(self, db: Session, *, db_obj: ModelType, obj_in: Payload) -> ModelType:
		"""Copy the given fields onto `db_obj`; unknown keys are ignored."""
		for field, value in _as_dict(obj_in).items():
			if hasattr(db_obj, field):
				setattr(db_obj, field, value)
		return self.save(db, db_obj)

	def delete(self, db: Session, *, id: Any) -> Optional[ModelType]:
		"""Retire a row by id and return it, or None when it does not exist.

		Models with an `is_active` flag are soft-deleted; others are removed.
		"""
		db_obj = self.get(db, id)
		if db_obj is None:
			return None

		if hasattr(db_obj, "is_active"):
			db_obj.is_active = False
			return self.save(db, db_obj)

		try:
			db.delete(db_obj)
			db.commit()
		except Exception:
			db.rollback()
			raise
		return db_obj
