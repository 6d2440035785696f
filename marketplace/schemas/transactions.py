from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

TransactionStatus = Literal["pending", "completed", "cancelled"]

class TransactionCreate(BaseModel):
	item_id: str = Field(alias="itemId", min_length=1)
	quantity: int = Field(gt=0)
	total_price: float = Field(alias="totalPrice", ge=0)

	class Config:
		populate_by_name = True

class StatusUpdate(BaseModel):
	status: TransactionStatus

class TransactionOut(BaseModel):
	id: str
	item_id: str = Field(serialization_alias="itemId")
	buyer_id: str = Field(serialization_alias="buyerId")
	seller_id: str = Field(serialization_alias="sellerId")
	quantity: int
	total_price: float = Field(serialization_alias="totalPrice")
	status: TransactionStatus
	created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")
	updated_at: Optional[datetime] = Field(None, serialization_alias="updatedAt")

	class Config:
		from_attributes = True
