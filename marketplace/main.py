from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace.core.config import Settings
from marketplace.core.logging import configure_logging, request_id_middleware, log_event
from marketplace.core.errors import (
	http_exception_handler,
	validation_exception_handler,
	storage_exception_handler,
	unhandled_exception_handler,
)
from marketplace.core.security import TokenService
from marketplace.core.storage import ImageStore
from marketplace.db.base import Base
from marketplace.db import models  # noqa: F401  registers tables on Base.metadata
from marketplace.db.session import build_engine, build_session_factory

from marketplace.routers.auth import router as auth_router
from marketplace.routers.users import router as users_router
from marketplace.routers.items import router as items_router
from marketplace.routers.reviews import router as reviews_router
from marketplace.routers.transactions import router as transactions_router


@asynccontextmanager
async def lifespan(app: FastAPI):
	# DB init
	Base.metadata.create_all(bind=app.state.engine)
	app.state.image_store.ensure_directory()
	log_event("startup", app=app.title)
	yield
	app.state.engine.dispose()

def create_app(settings: Settings | None = None) -> FastAPI:
	settings = settings or Settings()
	configure_logging(settings.LOG_LEVEL)

	app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

	app.state.settings = settings
	app.state.engine = build_engine(settings.DATABASE_URL)
	app.state.session_factory = build_session_factory(app.state.engine)
	app.state.token_service = TokenService.from_settings(settings)
	app.state.image_store = ImageStore.from_settings(settings)

	# Middleware
	app.middleware("http")(request_id_middleware)
	app.add_middleware(
		CORSMiddleware,
		allow_origins=settings.ALLOW_ORIGINS,
		allow_credentials=True,
		allow_methods=["*"],
		allow_headers=["*"],
		expose_headers=["auth-token", "X-Request-Id"],
	)

	# Errors always come back as {"message", "kind", ...}
	app.add_exception_handler(StarletteHTTPException, http_exception_handler)
	app.add_exception_handler(RequestValidationError, validation_exception_handler)
	app.add_exception_handler(SQLAlchemyError, storage_exception_handler)
	app.add_exception_handler(Exception, unhandled_exception_handler)

	# Routers
	app.include_router(auth_router)
	app.include_router(users_router)
	app.include_router(items_router)
	app.include_router(reviews_router)
	app.include_router(transactions_router)

	app.mount(
		settings.UPLOAD_URL_PREFIX,
		StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
		name="uploads",
	)

	@app.get("/health")
	def health():
		return {"status": "OK"}

	return app

app = create_app()

if __name__ == "__main__":
	import uvicorn
	uvicorn.run(app, host="0.0.0.0", port=8000)
