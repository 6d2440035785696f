from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.db.session import get_db
from marketplace.db.models import Item, User
from marketplace.schemas.items import ItemUpdate, ItemOut
from marketplace.core.security import get_current_identity
from marketplace.core.permissions import authorize, ensure_found
from marketplace.core.storage import ImageStore
from marketplace.core.logging import log_event

router = APIRouter(prefix="/items", tags=["items"])

def get_image_store(request: Request) -> ImageStore:
	return request.app.state.image_store

def require_fields(**fields):
	missing = [name for name, value in fields.items() if value is None or (isinstance(value, str) and not value.strip())]
	if missing:
		raise HTTPException(status_code=400, detail=f"Missing required field(s): {', '.join(missing)}")

@router.post("/create", response_model=ItemOut)
def create_item(
	request: Request,
	title: str | None = Form(None),
	description: str | None = Form(None),
	price: float | None = Form(None, ge=0),
	category: str | None = Form(None),
	image: UploadFile | None = File(None),
	db: Session = Depends(get_db),
	identity: str = Depends(get_current_identity),
	images: ImageStore = Depends(get_image_store),
):
	require_fields(title=title, description=description, price=price, category=category)

	image_url = images.save(image) if image is not None and image.filename else None

	# any sellerId sent by the client is ignored; the caller is the seller
	item = Item(
		title=title.strip(),
		description=description,
		price=price,
		category=category.strip(),
		seller_id=identity,
		images=[image_url] if image_url else [],
	)
	db.add(item)
	try:
		db.commit()
	except SQLAlchemyError:
		db.rollback()
		if image_url:
			images.delete(image_url)
		raise
	db.refresh(item)

	log_event("item_created", item_id=item.id, seller_id=identity, request_id=request.state.request_id)
	return item

@router.get("/", response_model=list[ItemOut])
def list_items(
	category: str | None = None,
	min_price: float | None = Query(None, alias="minPrice", ge=0),
	max_price: float | None = Query(None, alias="maxPrice", ge=0),
	title: str | None = None,
	author: str | None = None,
	limit: int = Query(50, ge=1, le=200),
	offset: int = Query(0, ge=0),
	db: Session = Depends(get_db),
):
	query = db.query(Item)
	if category:
		query = query.filter(Item.category == category)
	if min_price is not None:
		query = query.filter(Item.price >= min_price)
	if max_price is not None:
		query = query.filter(Item.price <= max_price)
	# plain substring match: % and _ in the search are literal
	if title:
		query = query.filter(func.lower(Item.title).contains(title.lower(), autoescape=True))
	if author:
		query = query.join(Item.seller).filter(
			func.lower(User.username).contains(author.lower(), autoescape=True)
		)
	query = query.order_by(Item.created_at.desc(), Item.id.asc())
	return query.offset(offset).limit(limit).all()

@router.get("/{item_id}", response_model=ItemOut)
def get_item(item_id: str, db: Session = Depends(get_db)):
	item = db.query(Item).filter(Item.id == item_id).first()
	return ensure_found(item, "Item")

@router.put("/{item_id}", response_model=ItemOut)
def update_item(
	request: Request,
	item_id: str,
	payload: ItemUpdate,
	db: Session = Depends(get_db),
	identity: str = Depends(get_current_identity),
):
	item = db.query(Item).filter(Item.id == item_id).first()
	authorize(identity, item, "update", "Item")

	# seller_id is not part of ItemUpdate, so ownership cannot change here
	changes = payload.model_dump(exclude_unset=True, exclude_none=True)
	for key, value in changes.items():
		setattr(item, key, value)
	db.commit()
	db.refresh(item)

	log_event("item_updated", item_id=item.id, fields=sorted(changes), request_id=request.state.request_id)
	return item

@router.delete("/{item_id}")
def delete_item(
	request: Request,
	item_id: str,
	db: Session = Depends(get_db),
	identity: str = Depends(get_current_identity),
):
	item = db.query(Item).filter(Item.id == item_id).first()
	authorize(identity, item, "delete", "Item")

	db.delete(item)
	db.commit()
	log_event("item_deleted", item_id=item_id, actor=identity, request_id=request.state.request_id)
	return {"status": "OK", "message": "Item deleted"}
