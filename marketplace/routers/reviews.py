from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from marketplace.db.session import get_db
from marketplace.db.models import Item, Review
from marketplace.schemas.items import ReviewCreate, ReviewOut
from marketplace.core.security import get_current_identity
from marketplace.core.permissions import authorize, authorize_review, ensure_found
from marketplace.core.logging import log_event

router = APIRouter(tags=["reviews"])

@router.post("/items/{item_id}/reviews", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
def create_review(
	request: Request,
	item_id: str,
	payload: ReviewCreate,
	db: Session = Depends(get_db),
	identity: str = Depends(get_current_identity),
):
	item = db.query(Item).filter(Item.id == item_id).first()
	authorize_review(identity, item)

	review = Review(item_id=item.id, author_id=identity, rating=payload.rating, comment=payload.comment)
	db.add(review)
	db.commit()
	db.refresh(review)

	log_event("review_created", review_id=review.id, item_id=item.id, request_id=request.state.request_id)
	return review

@router.get("/items/{item_id}/reviews", response_model=list[ReviewOut])
def list_reviews(item_id: str, db: Session = Depends(get_db)):
	item = db.query(Item).filter(Item.id == item_id).first()
	ensure_found(item, "Item")
	return db.query(Review).filter(Review.item_id == item_id).order_by(Review.created_at.desc()).all()

@router.delete("/reviews/{review_id}")
def delete_review(
	request: Request,
	review_id: str,
	db: Session = Depends(get_db),
	identity: str = Depends(get_current_identity),
):
	review = db.query(Review).filter(Review.id == review_id).first()
	authorize(identity, review, "delete", "Review")

	db.delete(review)
	db.commit()
	log_event("review_deleted", review_id=review_id, actor=identity, request_id=request.state.request_id)
	return {"status": "OK", "message": "Review deleted"}
