import logging
from typing import Any, Dict

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .exceptions import BaseAPIException, InternalServerError

logger = logging.getLogger("rewardapi")


def _describe(request: Request) -> str:
    client = request.client.host if request.client else "-"
    request_id = getattr(request.state, "request_id", "-")
    return f"{request.method} {request.url.path} from {client} [{request_id}]"


def error_body(code: str, message: str, details: Dict[str, Any] = None) -> Dict[str, Any]:
    return {
        "success": False,
        "error": {"code": code, "message": message, "details": details or {}},
    }


def _auth_headers(status_code: int):
    if status_code == 401:
        return {"WWW-Authenticate": "Bearer"}
    return None


async def handle_base_api_exception(request: Request, exc: BaseAPIException):
    line = f"[{type(exc).__name__}] {_describe(request)} -> {exc.status_code}: {exc.message}"
    if exc.status_code >= 500:
        logger.error(line, exc_info=exc if exc.__cause__ else None)
    else:
        logger.warning(line)
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(exc.detail),
        headers=_auth_headers(exc.status_code),
    )


async def handle_http_exception(request: Request, exc):
    logger.warning(f"[HTTPException] {_describe(request)} -> {exc.status_code}: {exc.detail}")
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        content = error_body("HTTP_ERROR", str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(content),
        headers=getattr(exc, "headers", None) or _auth_headers(exc.status_code),
    )


async def handle_validation_error(request: Request, exc):
    errors = jsonable_encoder(exc.errors())
    logger.warning(f"[RequestValidationError] {_describe(request)} -> 422: {errors}")
    return JSONResponse(
        status_code=422,
        content=error_body("VALIDATION_001", "Validation failed", {"errors": errors}),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(
        f"[Unhandled Error] {_describe(request)}: {type(exc).__name__}: {exc}",
        exc_info=exc,
    )
    internal = InternalServerError()
    return JSONResponse(status_code=internal.status_code, content=internal.detail)
