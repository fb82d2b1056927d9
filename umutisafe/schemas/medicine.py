"""Pydantic schemas for `Medicine` domain objects."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from umutisafe.utils.normalization import normalize_risk_level


IMPORT_MODES = {"replace", "append"}


def _risk_level(v: Optional[str]) -> Optional[str]:
	return normalize_risk_level(v)


class MedicineBase(BaseModel):
	generic_name: str = Field(..., min_length=1, max_length=255)
	brand_name: Optional[str] = None
	registration_number: Optional[str] = Field(default=None, max_length=255)
	dosage_form: str = Field(..., min_length=1)
	strength: Optional[str] = None
	pack_size: Optional[str] = None
	packaging_type: Optional[str] = None
	shelf_life: Optional[str] = None
	category: str = Field(..., min_length=1)
	risk_level: Optional[str] = "LOW"
	manufacturer: Optional[str] = None
	manufacturer_country: Optional[str] = None
	fda_approved: Optional[bool] = True
	disposal_instructions: Optional[str] = None

	@field_validator("risk_level")
	@classmethod
	def validate_risk_level(cls, v: Optional[str]) -> Optional[str]:
		return _risk_level(v) or "LOW"


class MedicineCreate(MedicineBase):
	model_config = ConfigDict(json_schema_extra={
		"example": {
			"generic_name": "Morphine Sulphate",
			"brand_name": "MST Continus",
			"dosage_form": "Tablet",
			"strength": "10mg",
			"category": "Opioid Analgesic",
			"risk_level": "HIGH",
		}
	})


class MedicineUpdate(BaseModel):
	generic_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
	brand_name: Optional[str] = None
	registration_number: Optional[str] = None
	dosage_form: Optional[str] = Field(default=None, min_length=1)
	strength: Optional[str] = None
	category: Optional[str] = Field(default=None, min_length=1)
	risk_level: Optional[str] = None
	manufacturer: Optional[str] = None
	fda_approved: Optional[bool] = None
	disposal_instructions: Optional[str] = None
	is_active: Optional[bool] = None

	@field_validator("risk_level")
	@classmethod
	def validate_risk_level(cls, v: Optional[str]) -> Optional[str]:
		return _risk_level(v)


class MedicineResponse(BaseModel):
	id: UUID
	generic_name: str
	brand_name: Optional[str] = None
	registration_number: Optional[str] = None
	dosage_form: str
	strength: Optional[str] = None
	pack_size: Optional[str] = None
	packaging_type: Optional[str] = None
	shelf_life: Optional[str] = None
	category: str
	risk_level: str
	manufacturer: Optional[str] = None
	manufacturer_address: Optional[str] = None
	manufacturer_country: Optional[str] = None
	marketing_authorization_holder: Optional[str] = None
	local_technical_representative: Optional[str] = None
	fda_approved: Optional[bool] = None
	disposal_instructions: Optional[str] = None
	registration_date: Optional[datetime] = None
	expiry_date: Optional[datetime] = None
	is_active: bool
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None

	model_config = ConfigDict(from_attributes=True)


class MedicineImportResult(BaseModel):
	mode: str
	created: int
	updated: int
	skipped: int


class PredictTextRequest(BaseModel):
	generic_name: str = Field(..., min_length=1)
	brand_name: Optional[str] = None
	dosage_form: Optional[str] = None


class PredictedMedicineInfo(BaseModel):
	generic_name: str
	brand_name: str
	dosage_form: str


class PredictionResponse(BaseModel):
	predicted_category: str
	risk_level: str
	confidence: float
	disposal_guidance: str
	safety_notes: str
	requires_chw: bool
	medicine_info: PredictedMedicineInfo
