from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from starlette import status

from marketplace.core.config import Settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer = HTTPBearer(auto_error=False)

class InvalidToken(Exception):
	"""Raised when a token is malformed, badly signed, expired or has no identity."""

def _normalize_password(password: str) -> str:
	# bcrypt only considers the first 72 bytes; truncate consistently to avoid errors.
	raw = password.encode("utf-8")
	if len(raw) <= 72:
		return password
	return raw[:72].decode("utf-8", errors="ignore")

def hash_password(password: str) -> str:
	return pwd_context.hash(_normalize_password(password))

def verify_password(password: str, password_hash: str) -> bool:
	return pwd_context.verify(_normalize_password(password), password_hash)

class TokenService:
	"""Issues and verifies signed identity tokens.

	Tokens carry ``{"id": <user id>, "iat": ..., "exp": ...}``. Nothing is stored
	server side, so a token stays valid until it expires.
	"""

	def __init__(self, secret: str, algorithm: str = "HS256", expires_min: int = 60):
		self.secret = secret
		self.algorithm = algorithm
		self.expires = timedelta(minutes=expires_min)

	@classmethod
	def from_settings(cls, settings: Settings) -> "TokenService":
		return cls(settings.TOKEN_SECRET, settings.TOKEN_ALG, settings.TOKEN_EXPIRES_MIN)

	def issue(self, identity: str, now: Optional[datetime] = None) -> str:
		now = now or datetime.now(timezone.utc)
		payload = {
			"id": str(identity),
			"iat": int(now.timestamp()),
			"exp": int((now + self.expires).timestamp()),
		}
		return jwt.encode(payload, self.secret, algorithm=self.algorithm)

	def verify(self, token: str) -> str:
		try:
			payload = jwt.decode(
				token,
				self.secret,
				algorithms=[self.algorithm],
				options={"require_exp": True},
			)
		except JWTError as exc:
			raise InvalidToken(str(exc)) from exc
		identity = payload.get("id")
		if not identity:
			raise InvalidToken("Token has no identity")
		return str(identity)

def get_token_service(request: Request) -> TokenService:
	return request.app.state.token_service

def get_current_identity(
	request: Request,
	creds: HTTPAuthorizationCredentials | None = Depends(bearer),
	tokens: TokenService = Depends(get_token_service),
) -> str:
	if not creds:
		raise HTTPException(
			status_code=status.HTTP_401_UNAUTHORIZED,
			detail="Authentication required",
			headers={"WWW-Authenticate": "Bearer"},
		)
	try:
		identity = tokens.verify(creds.credentials)
	except InvalidToken:
		raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired token")

	request.state.identity = identity
	return identity
