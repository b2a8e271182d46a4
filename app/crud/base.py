"""Generic CRUD base class for SQLAlchemy models."""

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.database import Base


ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
	"""Reusable CRUD helper for SQLAlchemy models.

	All methods operate on model instances and return database objects, not schemas.
	"""

	def __init__(self, model: Type[ModelType]):
		self.model = model

	# ----- Read -----
	def get(self, db: Session, id: Any) -> Optional[ModelType]:
		"""Get one record by primary key."""
		return db.get(self.model, id)

	def existing_ids(self, db: Session, ids: Sequence[int]) -> List[int]:
		"""Return the subset of ``ids`` that exist in the table."""
		if not ids:
			return []
		stmt = select(self.model.id).where(self.model.id.in_(ids))
		return list(db.scalars(stmt).all())

	def next_display_order(self, db: Session, *criteria: Any) -> int:
		"""Return the display_order that appends a new row at the end of its list."""
		stmt = select(func.max(self.model.display_order))
		if criteria:
			stmt = stmt.where(*criteria)
		current = db.scalar(stmt)
		return 0 if current is None else current + 1

	# ----- Create -----
	def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
		"""Create a new record from a Pydantic schema or dict."""
		obj_in_data: Dict[str, Any] = obj_in.model_dump(exclude_unset=True) if isinstance(obj_in, BaseModel) else dict(obj_in)
		db_obj = self.model(**obj_in_data)  # type: ignore[arg-type]
		try:
			db.add(db_obj)
			db.commit()
			db.refresh(db_obj)
		except Exception:
			db.rollback()
			raise
		return db_obj

	# ----- Update -----
	def update(
		self,
		db: Session,
		*,
		db_obj: ModelType,
		obj_in: Union[UpdateSchemaType, Dict[str, Any]],
	) -> ModelType:
		"""Update a record with fields from a Pydantic schema or dict."""
		update_data = obj_in.model_dump(exclude_unset=True) if isinstance(obj_in, BaseModel) else dict(obj_in)

		for field, value in update_data.items():
			if hasattr(db_obj, field):
				setattr(db_obj, field, value)

		try:
			db.add(db_obj)
			db.commit()
			db.refresh(db_obj)
		except Exception:
			db.rollback()
			raise
		return db_obj

	def reorder(self, db: Session, *, ids: Sequence[int]) -> int:
		"""Rewrite display_order to each id's position in ``ids``.

		All rows are updated in one transaction; nothing is written on failure.
		"""
		try:
			for position, obj_id in enumerate(ids):
				db.execute(
					update(self.model)
					.where(self.model.id == obj_id)
					.values(display_order=position)
				)
			db.commit()
		except Exception:
			db.rollback()
			raise
		return len(ids)

	# ----- Delete -----
	def delete(self, db: Session, *, id: Any) -> Optional[ModelType]:
		"""Delete a record.

		Prefer soft-delete if the model has an `is_active` field; otherwise hard delete.
		Returns the affected object (or None if not found).
		"""
		db_obj = self.get(db, id)
		if not db_obj:
			return None

		try:
			if hasattr(db_obj, "is_active"):
				setattr(db_obj, "is_active", False)
				db.add(db_obj)
			else:
				db.delete(db_obj)
			db.commit()
			if hasattr(db_obj, "is_active"):
				db.refresh(db_obj)
		except Exception:
			db.rollback()
			raise
		return db_obj
