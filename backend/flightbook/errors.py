import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from flightbook.config import settings

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Lỗi máy chủ"
VALIDATION_ERROR_MESSAGE = "Dữ liệu không hợp lệ"


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # detail is either a plain message or a dict carrying `message` plus extra keys
    if isinstance(exc.detail, dict):
        body = {"success": False, **exc.detail}
    else:
        body = {"success": False, "message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({
            "success": False,
            "message": VALIDATION_ERROR_MESSAGE,
            "errors": exc.errors(),
        }),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    body = {"success": False, "message": SERVER_ERROR_MESSAGE}
    if not settings.is_production:
        body["error"] = str(exc)
    return JSONResponse(status_code=500, content=body)


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
