import json
import logging
import time
import uuid
from fastapi import Request

from marketplace.core.errors import unhandled_exception_handler

logger = logging.getLogger("marketplace")

def configure_logging(level: str = "INFO") -> None:
	logger.setLevel(level)
	if not logger.handlers:
		handler = logging.StreamHandler()
		handler.setFormatter(logging.Formatter("%(message)s"))
		logger.addHandler(handler)

async def request_id_middleware(request: Request, call_next):
	request.state.request_id = str(uuid.uuid4())
	started = time.perf_counter()
	try:
		response = await call_next(request)
	except Exception as exc:
		# errors without a registered handler still get a stamped JSON 500
		response = await unhandled_exception_handler(request, exc)
	response.headers["X-Request-Id"] = request.state.request_id
	log_event(
		"request_completed",
		method=request.method,
		path=request.url.path,
		status=response.status_code,
		duration_ms=round((time.perf_counter() - started) * 1000, 2),
		request_id=request.state.request_id,
	)
	return response

def log_event(event: str, **kwargs):
	payload = {"event": event, **kwargs}
	logger.info(json.dumps(payload, ensure_ascii=False, default=str))
