import os
from dotenv import load_dotenv

load_dotenv()

def _split_csv(value: str) -> list[str]:
	return [part.strip() for part in value.split(",") if part.strip()]

class Settings:
	APP_NAME = "Marketplace API"

	def __init__(self, **overrides):
		self.DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./marketplace.db")

		self.TOKEN_SECRET = os.getenv("TOKEN_SECRET", "dev-secret-change-me")
		self.TOKEN_ALG = "HS256"
		self.TOKEN_EXPIRES_MIN = int(os.getenv("TOKEN_EXPIRES_MIN", "60"))

		self.UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
		self.UPLOAD_URL_PREFIX = os.getenv("UPLOAD_URL_PREFIX", "/uploads")

		self.ALLOW_ORIGINS = _split_csv(os.getenv("ALLOW_ORIGINS", "*"))
		self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

		for key, value in overrides.items():
			if not hasattr(self, key):
				raise TypeError(f"Unknown setting: {key}")
			setattr(self, key, value)
