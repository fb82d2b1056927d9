"""Pydantic schemas for `PickupRequest` domain objects."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .user import UserSummary


PICKUP_STATUSES = {"pending", "scheduled", "collected", "completed", "cancelled", "rejected"}


class PickupRequestCreate(BaseModel):
	chw_id: UUID
	medicine_name: str = Field(..., min_length=1, max_length=255)
	disposal_guidance: Optional[str] = None
	reason: str = Field(..., min_length=1, max_length=100)
	pickup_location: str = Field(..., min_length=1, max_length=255)
	latitude: Optional[float] = Field(default=None, ge=-90, le=90)
	longitude: Optional[float] = Field(default=None, ge=-180, le=180)
	preferred_time: datetime
	consent_given: bool = False
	notes: Optional[str] = None
	disposal_id: Optional[UUID] = None

	model_config = ConfigDict(json_schema_extra={
		"example": {
			"chw_id": "0f6f1f8e-3c0e-4a8f-8d4b-7d2b4f1d9a10",
			"medicine_name": "Morphine",
			"reason": "expired",
			"pickup_location": "Remera, Gasabo District",
			"preferred_time": "2026-10-21T09:00:00",
			"consent_given": True,
			"disposal_id": "a1d0c6e2-6d0b-4e3c-9a76-2d53f0e4b8c1",
		}
	})


class PickupStatusUpdate(BaseModel):
	status: Optional[str] = None
	chw_notes: Optional[str] = None
	scheduled_time: Optional[datetime] = None

	@field_validator("status")
	@classmethod
	def validate_status(cls, v: Optional[str]) -> Optional[str]:
		if v is not None and v not in PICKUP_STATUSES:
			raise ValueError(f"Status must be one of {sorted(PICKUP_STATUSES)}")
		return v


class DisposalSummary(BaseModel):
	id: UUID
	user_id: UUID
	generic_name: str
	brand_name: Optional[str] = None
	dosage_form: Optional[str] = None
	risk_level: Optional[str] = None
	status: str
	pickup_request_id: Optional[UUID] = None

	model_config = ConfigDict(from_attributes=True)


class PickupSummary(BaseModel):
	id: UUID
	status: str
	preferred_time: datetime
	scheduled_time: Optional[datetime] = None
	completed_at: Optional[datetime] = None
	chw: Optional[UserSummary] = None

	model_config = ConfigDict(from_attributes=True)


class PickupRequestResponse(BaseModel):
	id: UUID
	user_id: UUID
	chw_id: Optional[UUID] = None
	medicine_name: str
	disposal_guidance: Optional[str] = None
	reason: str
	pickup_location: str
	latitude: Optional[float] = None
	longitude: Optional[float] = None
	preferred_time: datetime
	status: str
	consent_given: bool
	notes: Optional[str] = None
	chw_notes: Optional[str] = None
	scheduled_time: Optional[datetime] = None
	completed_at: Optional[datetime] = None
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None
	requester: Optional[UserSummary] = None
	chw: Optional[UserSummary] = None
	disposal: Optional[DisposalSummary] = None

	model_config = ConfigDict(from_attributes=True)


class ChwPickupStats(BaseModel):
	pending: int
	scheduled: int
	completed: int
	total: int
