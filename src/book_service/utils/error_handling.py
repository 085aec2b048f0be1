"""
Centralized error handling and structured error logging
Maps domain exceptions to HTTP responses and tags every request with a trace id.
"""

import json
import logging
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from book_service.utils.exceptions import BadRequestAlertException
from book_service.utils.headers import create_failure_alert

# Context variable for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

logger = logging.getLogger(__name__)


class ErrorHandlingConfig:
    """Centralized configuration for error handling behavior"""

    SANITIZE_SENSITIVE_FIELDS = True
    SENSITIVE_FIELD_PATTERNS = [
        'password', 'token', 'key', 'secret', 'authorization',
        'auth', 'bearer', 'credential', 'cookie'
    ]

    LOG_REQUEST_BODIES = True
    LOG_HEADERS = True
    MAX_BODY_LOG_SIZE = 5000

    INCLUDE_TRACE_ID = True
    INCLUDE_TIMESTAMP = True

    @classmethod
    def is_sensitive_field(cls, field_name: str) -> bool:
        field_lower = field_name.lower()
        return any(pattern in field_lower for pattern in cls.SENSITIVE_FIELD_PATTERNS)

    @classmethod
    def sanitize_data(cls, data: Union[Dict, str, Any]) -> Any:
        """Recursively redact sensitive fields and truncate large strings"""
        if not cls.SANITIZE_SENSITIVE_FIELDS:
            return data

        if isinstance(data, dict):
            return {
                key: "***REDACTED***" if cls.is_sensitive_field(str(key)) else cls.sanitize_data(value)
                for key, value in data.items()
            }
        elif isinstance(data, list):
            return [cls.sanitize_data(item) for item in data]
        elif isinstance(data, str) and len(data) > cls.MAX_BODY_LOG_SIZE:
            return data[:cls.MAX_BODY_LOG_SIZE] + "...[TRUNCATED]"
        return data


class StructuredLogger:
    """Emits one JSON document per failure"""

    @staticmethod
    def log_error(
        error_type: str,
        message: str,
        request: Optional[Request] = None,
        exception: Optional[BaseException] = None,
        extra_context: Optional[Dict] = None,
        include_traceback: bool = True,
        level: int = logging.ERROR
    ) -> str:
        """
        Log a structured error entry

        Returns:
            The trace id attached to the entry
        """
        trace_id = _request_trace_id(request) or request_id_var.get('') or str(uuid.uuid4())[:8]

        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "trace_id": trace_id,
            "error_type": error_type,
            "message": message,
            "level": logging.getLevelName(level)
        }

        if request:
            headers = dict(request.headers)
            log_entry["request"] = {
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "headers": ErrorHandlingConfig.sanitize_data(headers) if ErrorHandlingConfig.LOG_HEADERS else {},
                "client_ip": request.client.host if request.client else None,
            }

        if exception:
            log_entry["exception"] = {
                "type": type(exception).__name__,
                "details": str(exception),
            }
            if include_traceback:
                log_entry["exception"]["traceback"] = "".join(
                    traceback.format_exception(type(exception), exception, exception.__traceback__)
                )

        if extra_context:
            log_entry["context"] = ErrorHandlingConfig.sanitize_data(extra_context)

        logger.log(level, json.dumps(log_entry, indent=2, default=str))

        return trace_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns a trace id to each request and captures its body for error logs"""

    async def dispatch(self, request: Request, call_next):
        trace_id = str(uuid.uuid4())[:8]
        request_id_var.set(trace_id)

        body = None
        if ErrorHandlingConfig.LOG_REQUEST_BODIES:
            body = await request.body()

        request.state.captured_body = body
        request.state.trace_id = trace_id

        response = await call_next(request)
        response.headers["X-Trace-ID"] = trace_id
        return response


def _request_trace_id(request: Optional[Request]) -> Optional[str]:
    # request.state lives on the scope, so it outlives the middleware context
    if request is None:
        return None
    return getattr(request.state, "trace_id", None)


def _captured_body(request: Request) -> Optional[str]:
    body = getattr(request.state, 'captured_body', None)
    if not body:
        return None
    try:
        return ErrorHandlingConfig.sanitize_data(body.decode('utf-8'))
    except UnicodeDecodeError:
        return "DECODE_ERROR"


def _application_name(request: Request) -> str:
    settings = getattr(request.app.state, "settings", None)
    return settings.application_name if settings else "app"


def _error_response(
    request: Request,
    status_code: int,
    content: Dict[str, Any],
    trace_id: Optional[str],
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    trace_id = trace_id or _request_trace_id(request)
    headers = dict(headers or {})

    # 500s are rendered outside RequestContextMiddleware, so the header is set here too
    if trace_id:
        headers["X-Trace-ID"] = trace_id
        if ErrorHandlingConfig.INCLUDE_TRACE_ID:
            content["trace_id"] = trace_id

    if ErrorHandlingConfig.INCLUDE_TIMESTAMP:
        content["timestamp"] = datetime.now(timezone.utc).isoformat()

    return JSONResponse(status_code=status_code, content=jsonable_encoder(content), headers=headers)


async def bad_request_alert_handler(request: Request, exc: BadRequestAlertException) -> JSONResponse:
    """Handle id presence/consistency violations (HTTP 400)"""

    trace_id = StructuredLogger.log_error(
        f"bad_request_{exc.error_key}",
        exc.message,
        request=request,
        extra_context={"entity": exc.entity_name, "request_body": _captured_body(request)},
        include_traceback=False,
        level=logging.WARNING
    )

    content = {
        "error": "HTTP 400",
        "title": exc.message,
        "message": exc.error_message,
        "entityName": exc.entity_name,
        "errorKey": exc.error_key,
        "params": exc.entity_name,
    }
    headers = create_failure_alert(_application_name(request), exc.entity_name, exc.error_key)
    return _error_response(request, 400, content, trace_id, headers)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions, logging only server-side failures"""

    trace_id = None
    if exc.status_code >= 500:
        trace_id = StructuredLogger.log_error(
            f"http_{exc.status_code}",
            f"HTTP {exc.status_code}: {exc.detail}",
            request=request,
            exception=exc,
            extra_context={"request_body": _captured_body(request)}
        )

    content = {
        "error": f"HTTP {exc.status_code}",
        "message": exc.detail,
    }
    return _error_response(request, exc.status_code, content, trace_id, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors as HTTP 400"""

    validation_details = []
    for error in exc.errors():
        validation_details.append({
            "field": " -> ".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Unknown validation error"),
            "type": error.get("type", "unknown"),
        })

    trace_id = StructuredLogger.log_error(
        "validation_error",
        f"Request validation failed: {len(validation_details)} validation errors",
        request=request,
        extra_context={
            "validation_errors": validation_details,
            "request_body": _captured_body(request),
        },
        include_traceback=False,
        level=logging.WARNING
    )

    content = {
        "error": "Validation Error",
        "message": "error.validation",
        "detail": validation_details,
        "error_count": len(validation_details)
    }
    return _error_response(request, 400, content, trace_id)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle everything else, including storage failures, as HTTP 500"""

    trace_id = StructuredLogger.log_error(
        "internal_server_error",
        f"Unhandled exception: {str(exc)}",
        request=request,
        exception=exc,
        extra_context={"request_body": _captured_body(request)}
    )

    # Don't expose internal details
    content = {
        "error": "Internal Server Error",
        "message": "An unexpected error occurred",
    }
    return _error_response(request, 500, content, trace_id)


def setup_error_handling(app: FastAPI) -> None:
    """Register middleware and exception handlers on the app"""

    app.add_middleware(RequestContextMiddleware)

    # Most specific first
    app.add_exception_handler(BadRequestAlertException, bad_request_alert_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Centralized error handling initialized")
