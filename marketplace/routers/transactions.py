from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from marketplace.db.session import get_db
from marketplace.db.models import Item, Transaction
from marketplace.schemas.transactions import TransactionCreate, StatusUpdate, TransactionOut
from marketplace.core.security import get_current_identity
from marketplace.core.permissions import authorize, authorize_history, authorize_purchase
from marketplace.core.logging import log_event

router = APIRouter(prefix="/transactions", tags=["transactions"])

@router.post("", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def create_transaction(
	request: Request,
	payload: TransactionCreate,
	db: Session = Depends(get_db),
	identity: str = Depends(get_current_identity),
):
	item = db.query(Item).filter(Item.id == payload.item_id).first()
	authorize_purchase(identity, item)

	# seller_id is copied now; later changes to the item do not touch this record
	transaction = Transaction(
		item_id=item.id,
		buyer_id=identity,
		seller_id=item.seller_id,
		quantity=payload.quantity,
		total_price=payload.total_price,
		status="pending",
	)
	db.add(transaction)
	db.commit()
	db.refresh(transaction)

	log_event(
		"transaction_created",
		transaction_id=transaction.id,
		item_id=item.id,
		buyer_id=identity,
		seller_id=transaction.seller_id,
		request_id=request.state.request_id,
	)
	return transaction

@router.get("/{user_id}", response_model=list[TransactionOut])
def list_transactions(
	user_id: str,
	role: str | None = Query(None, pattern="^(buyer|seller)$"),
	db: Session = Depends(get_db),
	identity: str = Depends(get_current_identity),
):
	authorize_history(identity, user_id)

	query = db.query(Transaction)
	if role == "buyer":
		query = query.filter(Transaction.buyer_id == user_id)
	elif role == "seller":
		query = query.filter(Transaction.seller_id == user_id)
	else:
		query = query.filter(or_(Transaction.buyer_id == user_id, Transaction.seller_id == user_id))
	return query.order_by(Transaction.created_at.desc()).all()

@router.put("/{transaction_id}/status", response_model=TransactionOut)
def update_transaction_status(
	request: Request,
	transaction_id: str,
	payload: StatusUpdate,
	db: Session = Depends(get_db),
	identity: str = Depends(get_current_identity),
):
	transaction = db.query(Transaction).filter(Transaction.id == transaction_id).first()
	# only the buyer of record may change the status
	authorize(identity, transaction, "update_status", "Transaction")

	previous = transaction.status
	transaction.status = payload.status
	db.commit()
	db.refresh(transaction)

	log_event(
		"transaction_status_updated",
		transaction_id=transaction.id,
		previous=previous,
		status=transaction.status,
		request_id=request.state.request_id,
	)
	return transaction
