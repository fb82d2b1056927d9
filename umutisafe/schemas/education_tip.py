"""Pydantic schemas for `EducationTip` domain objects."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class EducationTipCreate(BaseModel):
	title: str = Field(..., min_length=1, max_length=255)
	icon: Optional[str] = None
	summary: str = Field(..., min_length=1)
	content: str = Field(..., min_length=1)
	category: Optional[str] = None
	display_order: int = 0

	model_config = ConfigDict(json_schema_extra={
		"example": {
			"title": "Never flush medicines",
			"icon": "droplet",
			"summary": "Flushing pollutes rivers and lakes.",
			"content": "Most medicines should not be flushed down the toilet...",
			"category": "disposal",
			"display_order": 1,
		}
	})


class EducationTipUpdate(BaseModel):
	title: Optional[str] = Field(default=None, min_length=1, max_length=255)
	icon: Optional[str] = None
	summary: Optional[str] = Field(default=None, min_length=1)
	content: Optional[str] = Field(default=None, min_length=1)
	category: Optional[str] = None
	display_order: Optional[int] = None
	is_active: Optional[bool] = None


class EducationTipResponse(BaseModel):
	id: UUID
	title: str
	icon: Optional[str] = None
	summary: str
	content: str
	category: Optional[str] = None
	is_active: bool
	display_order: int = 0
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None

	model_config = ConfigDict(from_attributes=True)
