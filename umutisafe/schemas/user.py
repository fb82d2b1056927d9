"""Pydantic schemas for `User` domain objects."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


ALLOWED_ROLES = {"user", "chw", "admin"}
ALLOWED_AVAILABILITY = {"available", "busy", "offline"}
PHONE_PATTERN = r"^\+?[\d\s\-()]+$"


def _validate_availability(v: Optional[str]) -> Optional[str]:
	if v is not None and v not in ALLOWED_AVAILABILITY:
		raise ValueError("Invalid availability status")
	return v


def _validate_role(v: Optional[str]) -> Optional[str]:
	if v is not None and v not in ALLOWED_ROLES:
		raise ValueError(f"Role must be one of {sorted(ALLOWED_ROLES)}")
	return v


class UserCreate(BaseModel):
	name: str = Field(..., min_length=2, max_length=100)
	email: EmailStr
	password: str = Field(..., min_length=6, max_length=100)
	role: str = "user"
	phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
	location: Optional[str] = None
	sector: Optional[str] = None
	coverage_area: Optional[str] = None

	@field_validator("name")
	@classmethod
	def strip_name(cls, v: str) -> str:
		v = v.strip()
		if len(v) < 2:
			raise ValueError("Name must be at least 2 characters")
		return v

	@field_validator("role")
	@classmethod
	def validate_role(cls, v: str) -> str:
		return _validate_role(v)

	model_config = ConfigDict(json_schema_extra={
		"example": {
			"name": "Jean Baptiste Niyonzima",
			"email": "jean.baptiste@gmail.com",
			"password": "password123",
			"role": "user",
			"phone": "+250781234567",
			"location": "Remera, Gasabo District",
		}
	})


class UserLogin(BaseModel):
	email: EmailStr
	password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
	name: Optional[str] = Field(default=None, min_length=2, max_length=100)
	phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
	location: Optional[str] = None
	sector: Optional[str] = None
	coverage_area: Optional[str] = None
	availability: Optional[str] = None

	@field_validator("availability")
	@classmethod
	def validate_availability(cls, v: Optional[str]) -> Optional[str]:
		return _validate_availability(v)


class PasswordChange(BaseModel):
	current_password: str
	new_password: str = Field(..., min_length=6, max_length=100)


class AvailabilityUpdate(BaseModel):
	availability: str

	@field_validator("availability")
	@classmethod
	def validate_availability(cls, v: str) -> str:
		return _validate_availability(v)


class AdminUserUpdate(BaseModel):
	name: Optional[str] = Field(default=None, min_length=2, max_length=100)
	email: Optional[EmailStr] = None
	role: Optional[str] = None
	phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
	location: Optional[str] = None
	sector: Optional[str] = None
	coverage_area: Optional[str] = None
	is_active: Optional[bool] = None

	@field_validator("role")
	@classmethod
	def validate_role(cls, v: Optional[str]) -> Optional[str]:
		return _validate_role(v)


class UserSummary(BaseModel):
	"""Public contact card embedded in disposal and pickup payloads."""

	id: UUID
	name: str
	email: Optional[str] = None
	phone: Optional[str] = None
	location: Optional[str] = None
	sector: Optional[str] = None
	rating: Optional[float] = None
	availability: Optional[str] = None

	model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
	id: UUID
	name: str
	email: str
	role: str
	phone: Optional[str] = None
	avatar: Optional[str] = None
	location: Optional[str] = None
	sector: Optional[str] = None
	coverage_area: Optional[str] = None
	availability: Optional[str] = None
	completed_pickups: int = 0
	rating: Optional[float] = None
	is_active: bool
	is_approved: bool
	approved_by: Optional[UUID] = None
	approved_at: Optional[datetime] = None
	last_login: Optional[datetime] = None
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None

	model_config = ConfigDict(from_attributes=True, json_schema_extra={
		"example": {
			"id": "5b0c7f4e-51a4-4c59-9a55-2f0a9c3c1d11",
			"name": "Jean Baptiste Niyonzima",
			"email": "jean.baptiste@gmail.com",
			"role": "user",
			"phone": "+250781234567",
			"avatar": "JBN",
			"is_active": True,
			"is_approved": False,
		}
	})


class LoginUserResponse(UserResponse):
	has_logged_before: bool = False
	previous_last_login: Optional[datetime] = None


class AuthPayload(BaseModel):
	user: UserResponse
	token: Optional[str] = None


class LoginPayload(BaseModel):
	user: LoginUserResponse
	token: str
