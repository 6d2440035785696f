import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Float, JSON, CheckConstraint
from sqlalchemy.orm import relationship

from marketplace.db.base import Base

def new_id() -> str:
	return uuid.uuid4().hex

class User(Base):
	__tablename__ = "users"

	id = Column(String(32), primary_key=True, default=new_id)
	username = Column(String, nullable=False)
	email = Column(String, unique=True, index=True, nullable=False)
	password_hash = Column(String, nullable=False)
	profile_info = Column(Text, nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

	items = relationship("Item", back_populates="seller")

class Item(Base):
	__tablename__ = "items"

	id = Column(String(32), primary_key=True, default=new_id)
	title = Column(String, nullable=False)
	description = Column(Text, nullable=True)
	price = Column(Float, nullable=True, index=True)
	category = Column(String, nullable=True, index=True)
	seller_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
	images = Column(JSON, nullable=False, default=list)
	created_at = Column(DateTime, default=datetime.utcnow)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

	seller = relationship("User", back_populates="items")

# item_id is a plain column on both tables below: references are checked when the
# row is written, and deleting an item leaves its history in place.

class Transaction(Base):
	__tablename__ = "transactions"
	__table_args__ = (
		CheckConstraint("buyer_id <> seller_id", name="ck_transaction_not_self"),
	)

	id = Column(String(32), primary_key=True, default=new_id)
	item_id = Column(String(32), nullable=False, index=True)
	buyer_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
	seller_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
	quantity = Column(Integer, nullable=False)
	total_price = Column(Float, nullable=False)
	status = Column(String, nullable=False, default="pending")
	created_at = Column(DateTime, default=datetime.utcnow)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class Review(Base):
	__tablename__ = "reviews"
	__table_args__ = (
		CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating"),
	)

	id = Column(String(32), primary_key=True, default=new_id)
	item_id = Column(String(32), nullable=False, index=True)
	author_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
	rating = Column(Integer, nullable=False)
	comment = Column(Text, nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow)
