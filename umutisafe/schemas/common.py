"""Response envelope shared by every endpoint."""

import math
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

DataT = TypeVar("DataT")


class Pagination(BaseModel):
	total: int
	page: int
	pages: int

	@classmethod
	def build(cls, *, total: int, page: int, limit: int) -> "Pagination":
		return cls(total=total, page=page, pages=math.ceil(total / limit) if limit else 0)


class ApiResponse(BaseModel, Generic[DataT]):
	"""`{success, message?, data?, pagination?}` envelope."""

	success: bool = True
	message: Optional[str] = None
	data: Optional[DataT] = None
	pagination: Optional[Pagination] = None

	model_config = ConfigDict(json_schema_extra={
		"example": {
			"success": True,
			"message": "Disposal created successfully",
			"data": {},
		}
	})


class ErrorResponse(BaseModel):
	success: bool = False
	message: str
	stack: Optional[Any] = None
