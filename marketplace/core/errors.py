import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("marketplace")

ERROR_KINDS = {
	status.HTTP_400_BAD_REQUEST: "bad_request",
	status.HTTP_401_UNAUTHORIZED: "unauthenticated",
	status.HTTP_403_FORBIDDEN: "forbidden",
	status.HTTP_404_NOT_FOUND: "not_found",
	status.HTTP_500_INTERNAL_SERVER_ERROR: "internal",
}

def error_response(request: Request, status_code: int, message: str, details=None, headers=None):
	# Ensure details is serializable
	if isinstance(details, Exception):
		details = str(details)
	return JSONResponse(
		status_code=status_code,
		content={
			"message": message,
			"kind": ERROR_KINDS.get(status_code, "error"),
			"details": details,
			"request_id": getattr(request.state, "request_id", None),
		},
		headers=headers,
	)

def _jsonable_errors(errors):
	# pydantic puts the raw exception in ctx for custom validators
	cleaned = []
	for error in errors:
		error = dict(error)
		if "ctx" in error:
			error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
		error.pop("input", None)
		cleaned.append(error)
	return cleaned

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
	return error_response(
		request,
		exc.status_code,
		str(exc.detail),
		headers=getattr(exc, "headers", None),
	)

async def validation_exception_handler(request: Request, exc: RequestValidationError):
	return error_response(
		request,
		status.HTTP_400_BAD_REQUEST,
		"Validation error",
		details=_jsonable_errors(exc.errors()),
	)

async def storage_exception_handler(request: Request, exc: SQLAlchemyError):
	logger.error("storage error on %s %s", request.method, request.url.path, exc_info=exc)
	return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

async def unhandled_exception_handler(request: Request, exc: Exception):
	logger.error("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
	return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
