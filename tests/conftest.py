import pytest
from fastapi.testclient import TestClient

from marketplace.core.config import Settings
from marketplace.main import create_app


@pytest.fixture
def settings(tmp_path):
	return Settings(
		DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
		TOKEN_SECRET="test-secret",
		UPLOAD_DIR=str(tmp_path / "uploads"),
		LOG_LEVEL="WARNING",
	)


@pytest.fixture
def app(settings):
	return create_app(settings)


@pytest.fixture
def client(app):
	with TestClient(app) as c:
		yield c


@pytest.fixture
def register(client):
	"""Sign a user up, sign them in and return their id, token and auth headers."""
	def _register(username, email=None, password="secret123"):
		email = email or f"{username}@example.com"
		r = client.post("/signup", json={"username": username, "email": email, "password": password})
		assert r.status_code == 201, r.text
		user = r.json()

		r = client.post("/signin", json={"email": email, "password": password})
		assert r.status_code == 200, r.text
		token = r.json()["token"]
		return {
			"id": user["id"],
			"username": username,
			"email": email,
			"token": token,
			"headers": {"Authorization": f"Bearer {token}"},
		}
	return _register


@pytest.fixture
def create_item(client):
	def _create_item(user, **fields):
		data = {
			"title": "Dune",
			"description": "Paperback, good condition",
			"price": "50",
			"category": "books",
			**fields,
		}
		r = client.post("/items/create", data=data, headers=user["headers"])
		assert r.status_code == 200, r.text
		return r.json()
	return _create_item
