from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace.db.session import get_db
from marketplace.db.models import User
from marketplace.schemas.auth import SignupRequest, SigninRequest, TokenResponse
from marketplace.schemas.users import UserOut
from marketplace.core.security import hash_password, verify_password, get_token_service, TokenService
from marketplace.core.logging import log_event

router = APIRouter(tags=["auth"])

@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def signup(request: Request, payload: SignupRequest, db: Session = Depends(get_db)):
	email = payload.email.lower()
	exists = db.query(User).filter(User.email == email).first()
	if exists:
		raise HTTPException(status_code=400, detail="User already exists with that email.")

	user = User(
		username=payload.username,
		email=email,
		password_hash=hash_password(payload.password),
	)
	db.add(user)
	try:
		db.commit()
	except IntegrityError:
		# another request registered the same email since the check above
		db.rollback()
		raise HTTPException(status_code=400, detail="User already exists with that email.")
	db.refresh(user)

	log_event("user_registered", user_id=user.id, request_id=request.state.request_id)
	return user

@router.post("/signin", response_model=TokenResponse)
def signin(
	request: Request,
	response: Response,
	payload: SigninRequest,
	db: Session = Depends(get_db),
	tokens: TokenService = Depends(get_token_service),
):
	email = payload.email.lower()
	user = db.query(User).filter(User.email == email).first()
	if not user:
		raise HTTPException(status_code=400, detail="User not found.")
	if not verify_password(payload.password, user.password_hash):
		raise HTTPException(status_code=400, detail="Invalid password.")

	token = tokens.issue(user.id)
	response.headers["auth-token"] = token

	log_event("user_signed_in", user_id=user.id, request_id=request.state.request_id)
	return {"token": token, "token_type": "bearer"}
