import shutil
import uuid
from pathlib import Path

from fastapi import HTTPException, UploadFile
from starlette import status

from marketplace.core.config import Settings

ALLOWED_SUFFIXES = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

class ImageStore:
	"""Saves uploaded item images to a local directory served as static files."""

	def __init__(self, directory: str, url_prefix: str = "/uploads"):
		self.directory = Path(directory)
		self.url_prefix = url_prefix.rstrip("/")

	@classmethod
	def from_settings(cls, settings: Settings) -> "ImageStore":
		return cls(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)

	def ensure_directory(self) -> None:
		self.directory.mkdir(parents=True, exist_ok=True)

	def save(self, upload: UploadFile) -> str:
		if not (upload.content_type or "").startswith("image/"):
			raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file must be an image")
		suffix = Path(upload.filename or "").suffix.lower()
		if suffix not in ALLOWED_SUFFIXES:
			suffix = ".bin"

		self.ensure_directory()
		name = f"{uuid.uuid4().hex}{suffix}"
		with (self.directory / name).open("wb") as handle:
			shutil.copyfileobj(upload.file, handle)
		return f"{self.url_prefix}/{name}"

	def delete(self, url: str) -> None:
		name = url.rsplit("/", 1)[-1]
		(self.directory / name).unlink(missing_ok=True)
