from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

class UserOut(BaseModel):
	id: str
	username: str
	email: str
	profile_info: Optional[str] = Field(None, serialization_alias="profileInfo")
	created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")

	class Config:
		from_attributes = True

class PublicUserOut(BaseModel):
	id: str
	username: str
	profile_info: Optional[str] = Field(None, serialization_alias="profileInfo")
	created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")

	class Config:
		from_attributes = True

class ProfileUpdate(BaseModel):
	username: Optional[str] = Field(None, min_length=1, max_length=50)
	email: Optional[EmailStr] = None
	profile_info: Optional[str] = Field(None, alias="profileInfo", max_length=2000)

	@field_validator("username")
	@classmethod
	def username_not_blank(cls, v):
		if v is not None and not v.strip():
			raise ValueError("Username must not be blank")
		return v.strip() if v is not None else v

	class Config:
		populate_by_name = True
