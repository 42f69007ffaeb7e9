"""
Exception handling and performance middleware for the matching API
"""
import time
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from pydantic import ValidationError as PydanticValidationError

from jdmatch.utils.exceptions import JDMatchBaseException, map_to_http_exception
from jdmatch.utils.logging_config import get_logger

logger = get_logger(__name__)


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Global exception handler middleware"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        logger.info(f"Request started: {request.method} {request.url.path} [{request_id}]")

        try:
            response = await call_next(request)
            logger.info(f"Request completed: {request.method} {request.url.path} - {response.status_code} [{request_id}]")
            response.headers["X-Request-ID"] = request_id
            return response

        except JDMatchBaseException as exc:
            logger.error(
                f"{exc.error_code} in {request.method} {request.url.path}: {exc.message}",
                extra={"request_id": request_id, "error_code": exc.error_code, "details": exc.details}
            )
            http_exc = map_to_http_exception(exc)
            return self._create_error_response(request_id, http_exc.status_code, http_exc.detail)

        except PydanticValidationError as exc:
            logger.error(f"Fact validation error in {request.method} {request.url.path}: {exc}")
            detail = {
                "error": "Data validation failed",
                "message": "Invalid fact values",
                "validation_errors": exc.errors(include_url=False),
            }
            return self._create_error_response(request_id, 400, detail)

        except HTTPException as exc:
            logger.warning(f"HTTP exception in {request.method} {request.url.path}: {exc.detail}")
            return self._create_error_response(request_id, exc.status_code, exc.detail)

        except Exception as exc:
            logger.error(
                f"Unhandled exception in {request.method} {request.url.path}: {str(exc)}",
                extra={"request_id": request_id, "traceback": traceback.format_exc()},
                exc_info=True
            )
            detail = {
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please try again later.",
            }
            return self._create_error_response(request_id, 500, detail)

    @staticmethod
    def _create_error_response(request_id: str, status_code: int, detail: Any) -> JSONResponse:
        """Create standardized error response"""
        if isinstance(detail, str):
            detail = {"message": detail}
        elif not isinstance(detail, dict):
            detail = {"message": str(detail)}

        error_response = {
            "success": False,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "request_id": request_id,
            "status_code": status_code,
            **detail
        }

        return JSONResponse(
            status_code=status_code,
            content=error_response,
            headers={"X-Request-ID": request_id}
        )


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Middleware for performance monitoring"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        processing_time = time.time() - start_time
        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} took {processing_time:.3f}s "
                f"(threshold {self.slow_request_threshold}s)"
            )
        else:
            logger.debug(f"Request performance: {request.method} {request.url.path} - {processing_time:.3f}s")

        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response
