from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace.db.session import get_db
from marketplace.db.models import User
from marketplace.schemas.users import UserOut, PublicUserOut, ProfileUpdate
from marketplace.core.security import get_current_identity
from marketplace.core.permissions import authorize, ensure_found
from marketplace.core.logging import log_event

router = APIRouter(prefix="/user", tags=["users"])

@router.get("/profile", response_model=UserOut)
def get_own_profile(db: Session = Depends(get_db), identity: str = Depends(get_current_identity)):
	user = db.query(User).filter(User.id == identity).first()
	return ensure_found(user, "User")

@router.get("/profile/{user_id}", response_model=PublicUserOut)
def get_public_profile(user_id: str, db: Session = Depends(get_db)):
	user = db.query(User).filter(User.id == user_id).first()
	return ensure_found(user, "User")

@router.put("/{user_id}", response_model=UserOut)
def update_profile(
	request: Request,
	user_id: str,
	payload: ProfileUpdate,
	db: Session = Depends(get_db),
	identity: str = Depends(get_current_identity),
):
	user = db.query(User).filter(User.id == user_id).first()
	authorize(identity, user, "update", "User")

	changes = payload.model_dump(exclude_unset=True)
	if changes.get("email"):
		email = changes["email"].lower()
		taken = db.query(User).filter(User.email == email, User.id != user.id).first()
		if taken:
			raise HTTPException(status_code=400, detail="User already exists with that email.")
		changes["email"] = email

	for key, value in changes.items():
		if value is None and key != "profile_info":
			continue
		setattr(user, key, value)
	try:
		db.commit()
	except IntegrityError:
		db.rollback()
		raise HTTPException(status_code=400, detail="User already exists with that email.")
	db.refresh(user)

	log_event("profile_updated", user_id=user.id, fields=sorted(changes), request_id=request.state.request_id)
	return user
