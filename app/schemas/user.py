"""Pydantic schemas for `User` domain objects."""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator



EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class UserBase(BaseModel):
	username: str = Field(..., min_length=1, max_length=100)
	email: str

	@field_validator("username")
	@classmethod
	def validate_username(cls, v: str) -> str:
		v = v.strip()
		if not v:
			raise ValueError("Username must not be empty")
		return v

	@field_validator("email")
	@classmethod
	def validate_email(cls, v: str) -> str:
		if not EMAIL_PATTERN.match(v):
			raise ValueError("Email address is not valid")
		return v.lower()


class UserCreate(UserBase):
	password: str = Field(..., min_length=6)

	model_config = ConfigDict(json_schema_extra={
		"example": {
			"username": "hanako",
			"email": "hanako@example.com",
			"password": "StrongPass!234",
		}
	})


class UserRoleUpdate(BaseModel):
	role: str

	model_config = ConfigDict(json_schema_extra={
		"example": {"role": "ECG講師"}
	})


class UserProfileUpdate(BaseModel):
	username: str = Field(..., min_length=1, max_length=100)
	bio: Optional[str] = None
	avatar_url: Optional[str] = Field(None, max_length=500)

	@field_validator("username")
	@classmethod
	def validate_username(cls, v: str) -> str:
		v = v.strip()
		if not v:
			raise ValueError("Username must not be empty")
		return v

	model_config = ConfigDict(json_schema_extra={
		"example": {
			"username": "hanako",
			"bio": "Studying for the N2 exam",
			"avatar_url": "https://example.com/avatars/hanako.png",
		}
	})


class UserSummaryResponse(BaseModel):
	"""Public view of a user, without the email address."""
	id: int
	username: str
	role: str
	bio: Optional[str] = None
	avatar_url: Optional[str] = None

	model_config = ConfigDict(from_attributes=True)


class UserResponse(UserBase):
	id: int
	role: str
	bio: Optional[str] = None
	avatar_url: Optional[str] = None
	is_active: bool
	created_at: datetime

	model_config = ConfigDict(from_attributes=True, json_schema_extra={
		"example": {
			"id": 1,
			"username": "hanako",
			"email": "hanako@example.com",
			"role": "ECGメンバー",
			"bio": "",
			"avatar_url": None,
			"is_active": True,
			"created_at": "2026-01-01T10:00:00Z",
		}
	})


class UserLogin(BaseModel):
	email: str
	password: str

	model_config = ConfigDict(json_schema_extra={
		"example": {
			"email": "hanako@example.com",
			"password": "StrongPass!234",
		}
	})


class TokenResponse(BaseModel):
	access_token: str
	token_type: str = "bearer"
	user: UserResponse
