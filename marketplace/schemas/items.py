from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

class ItemUpdate(BaseModel):
	title: Optional[str] = Field(None, min_length=1, max_length=200)
	description: Optional[str] = None
	price: Optional[float] = Field(None, ge=0)
	category: Optional[str] = Field(None, min_length=1, max_length=100)
	images: Optional[list[str]] = None

	@field_validator("title", "category")
	@classmethod
	def not_blank(cls, v):
		if v is not None and not v.strip():
			raise ValueError("Must not be blank")
		return v.strip() if v is not None else v

class ItemOut(BaseModel):
	id: str
	title: str
	description: Optional[str] = None
	price: Optional[float] = None
	category: Optional[str] = None
	seller_id: str = Field(serialization_alias="sellerId")
	images: list[str] = []
	created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")
	updated_at: Optional[datetime] = Field(None, serialization_alias="updatedAt")

	class Config:
		from_attributes = True

class ReviewCreate(BaseModel):
	rating: int = Field(ge=1, le=5)
	comment: Optional[str] = Field(None, max_length=2000)

class ReviewOut(BaseModel):
	id: str
	item_id: str = Field(serialization_alias="itemId")
	author_id: str = Field(serialization_alias="authorId")
	rating: int
	comment: Optional[str] = None
	created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")

	class Config:
		from_attributes = True
