"""
统一响应格式

所有接口返回:
{
    "success": true | false,
    "message": "string",
    "data": {...} | [...]      (成功时)
    "error": "string"          (500 时附带原始错误信息)
}
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.config import settings
from app.system.errors import CatalogError

logger = logging.getLogger(__name__)


def success_response(data: Any = None, message: str = "", status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """成功响应"""
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def error_response(
    message: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    error: Optional[str] = None,
    **extra: Any,
) -> JSONResponse:
    """失败响应"""
    body = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    body.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def log_failure(message: str, exc: BaseException, log: logging.Logger = logger) -> None:
    """记录服务端错误；仅 DEBUG 模式附带堆栈"""
    log.error(f"{message}: {exc}", exc_info=exc if settings.DEBUG else False)


def _format_validation_errors(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    return error_response(exc.message, status_code=exc.status_code, **exc.extra())


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    response = error_response(str(exc.detail), status_code=exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(_format_validation_errors(exc), status_code=status.HTTP_400_BAD_REQUEST)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log_failure(f"Unhandled error on {request.method} {request.url.path}", exc)
    return error_response(
        "Internal server error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error=str(exc),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
