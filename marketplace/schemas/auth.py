from pydantic import BaseModel, EmailStr, Field, field_validator

class SignupRequest(BaseModel):
	username: str = Field(min_length=1, max_length=50)
	email: EmailStr
	password: str = Field(min_length=8, max_length=72)

	@field_validator("username")
	@classmethod
	def username_not_blank(cls, v):
		if not v.strip():
			raise ValueError("Username must not be blank")
		return v.strip()

	@field_validator("password")
	@classmethod
	def password_complexity(cls, v):
		if not any(c.isalpha() for c in v) or not any(c.isdigit() for c in v):
			raise ValueError("Password must contain at least one letter and one digit")
		return v

class SigninRequest(BaseModel):
	email: EmailStr
	password: str = Field(min_length=1)

class TokenResponse(BaseModel):
	token: str
	token_type: str = Field("bearer", serialization_alias="tokenType")
