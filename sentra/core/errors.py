from typing import Any, Dict, List

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from sentra.core.config import settings

logger = logging.getLogger("sentra.errors")


class UploadError(Exception):
    """A submitted file was rejected or could not be stored."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    formatted = []
    for error in errors:
        # Drop the "body"/"query"/"path" prefix FastAPI puts in front of field names
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        formatted.append({
            "field": ".".join(location),
            "message": error.get("msg", "Invalid value"),
        })
    return formatted


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = format_validation_errors(exc.errors())
    logger.info(f"Validation failed: path={request.url.path}, errors={errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation failed", "errors": errors},
    )


async def upload_exception_handler(request: Request, exc: UploadError) -> JSONResponse:
    logger.warning(f"Upload rejected: path={request.url.path}, reason={exc.reason}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "File upload failed", "error": exc.reason},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error: path={request.url.path}, error={exc}", exc_info=True)
    content = {"message": "Internal Server Error"}
    if settings.DEBUG:
        content["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)
