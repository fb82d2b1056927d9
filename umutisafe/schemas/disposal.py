"""Pydantic schemas for `Disposal` domain objects."""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from umutisafe.utils.normalization import clamp_confidence, clean_text, normalize_risk_level
from .pickup_request import PickupSummary
from .user import UserSummary


DISPOSAL_STATUSES = {"pending_review", "pickup_requested", "completed", "cancelled"}


class DisposalCreate(BaseModel):
	generic_name: str = Field(..., max_length=255)
	brand_name: Optional[str] = Field(default=None, max_length=255)
	dosage_form: Optional[str] = Field(default=None, max_length=255)
	packaging_type: Optional[str] = Field(default=None, max_length=255)
	medicine_name: Optional[str] = Field(default=None, max_length=255)
	predicted_category: Optional[str] = Field(default=None, max_length=255)
	predicted_category_confidence: Optional[float] = None
	risk_level: Optional[str] = None
	confidence: Optional[float] = None
	disposal_guidance: Optional[str] = None
	handling_method: Optional[str] = None
	reason: Optional[str] = Field(default=None, max_length=255)
	image_url: Optional[str] = Field(default=None, max_length=500)

	@field_validator("generic_name")
	@classmethod
	def validate_generic_name(cls, v: str) -> str:
		v = v.strip()
		if not v:
			raise ValueError("Generic name is required")
		return v

	@field_validator("risk_level")
	@classmethod
	def validate_risk_level(cls, v: Optional[str]) -> Optional[str]:
		return normalize_risk_level(v)

	@field_validator("confidence", "predicted_category_confidence")
	@classmethod
	def clamp_scores(cls, v: Optional[float]) -> Optional[float]:
		return clamp_confidence(v)

	@field_validator("image_url")
	@classmethod
	def blank_image_url(cls, v: Optional[str]) -> Optional[str]:
		return clean_text(v)

	model_config = ConfigDict(json_schema_extra={
		"example": {
			"generic_name": "Amoxicillin",
			"brand_name": "Amoxil",
			"dosage_form": "Capsule",
			"predicted_category": "Antibiotic",
			"risk_level": "medium",
			"confidence": 0.87,
			"reason": "expired",
		}
	})


class DisposalUpdate(BaseModel):
	status: Optional[str] = None
	notes: Optional[str] = None

	@field_validator("status")
	@classmethod
	def validate_status(cls, v: Optional[str]) -> Optional[str]:
		if v is not None and v not in DISPOSAL_STATUSES:
			raise ValueError(f"Status must be one of {sorted(DISPOSAL_STATUSES)}")
		return v


class MedicineImageResponse(BaseModel):
	id: UUID
	disposal_id: UUID
	filename: str
	url: str
	mimetype: Optional[str] = None
	size: Optional[int] = None
	created_at: Optional[datetime] = None

	model_config = ConfigDict(from_attributes=True)


class DisposalResponse(BaseModel):
	id: UUID
	user_id: UUID
	generic_name: str
	brand_name: Optional[str] = None
	dosage_form: Optional[str] = None
	packaging_type: Optional[str] = None
	medicine_name: Optional[str] = None
	predicted_category: Optional[str] = None
	predicted_category_confidence: Optional[float] = None
	risk_level: Optional[str] = None
	confidence: Optional[float] = None
	status: str
	reason: Optional[str] = None
	disposal_guidance: Optional[str] = None
	handling_method: Optional[str] = None
	image_url: Optional[str] = None
	pickup_request_id: Optional[UUID] = None
	completed_at: Optional[datetime] = None
	notes: Optional[str] = None
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None
	images: List[MedicineImageResponse] = []
	pickup_request: Optional[PickupSummary] = None

	model_config = ConfigDict(from_attributes=True)


class AdminDisposalResponse(DisposalResponse):
	user: Optional[UserSummary] = None


class DisposalStats(BaseModel):
	total_disposals: int
	pending_review: int
	completed: int
	by_risk_level: Dict[str, int]
