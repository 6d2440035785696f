from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

def _unicode_lower(value):
	return value.lower() if isinstance(value, str) else value

def build_engine(database_url: str):
	is_sqlite = database_url.startswith("sqlite")
	connect_args = {"check_same_thread": False} if is_sqlite else {}
	engine = create_engine(database_url, connect_args=connect_args)

	if is_sqlite:
		# SQLite's built-in lower() only folds ASCII letters
		@event.listens_for(engine, "connect")
		def _register_lower(dbapi_connection, connection_record):
			dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

	return engine

def build_session_factory(engine):
	return sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db(request: Request):
	db = request.app.state.session_factory()
	try:
		yield db
	except Exception:
		db.rollback()
		raise
	finally:
		db.close()
