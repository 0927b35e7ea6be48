from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

API_PREFIX = "/api"

_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}


def error_body(message: str, fields: dict | None = None) -> dict:
    """The ``{"error": ...}`` body every JSON endpoint answers failures with."""
    body = {"error": message}
    if fields is not None:
        body["fields"] = fields
    return body


def validation_fields(exc: RequestValidationError) -> dict[str, str]:
    fields: dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_ROOTS]
        fields.setdefault(".".join(loc) or "request", error.get("msg", "Invalid value"))
    return fields


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # HTML routes keep FastAPI's default 422
        if not request.url.path.startswith(API_PREFIX):
            return await request_validation_exception_handler(request, exc)
        fields = validation_fields(exc)
        return JSONResponse(status_code=400, content=error_body(next(iter(fields.values())), fields))


__all__ = ["API_PREFIX", "error_body", "setup_exception_handlers", "validation_fields"]
