"""Logging configuration and management for the ClosetAI application.

This module provides the logging system used across the service:
- Structured logging with JSON formatting
- Correlation ID tracking across requests
- Request timing middleware
- Performance monitoring decorator
"""

import logging
import json
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from contextvars import ContextVar
from functools import wraps
import uuid
from pythonjsonlogger import jsonlogger
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from closetai.core.config import get_settings

# Get application settings
settings = get_settings()

# Context variable for correlation ID
correlation_id: ContextVar[str] = ContextVar('correlation_id', default='')

class StructuredLogger:
    """Custom logger that ensures consistent structured logging."""

    def __init__(self, name: str):
        """Initialize structured logger with given name."""
        self.logger = logging.getLogger(name)
        self.service_name = settings.APP_NAME
        self.environment = settings.ENVIRONMENT.value

    def _build_log_dict(
        self,
        message: str,
        level: str,
        additional_fields: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Build structured log dictionary with common fields."""
        log_dict = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'service': self.service_name,
            'environment': self.environment,
            'level': level,
            'message': message,
            'correlation_id': correlation_id.get(),
        }

        if additional_fields:
            log_dict.update(additional_fields)

        return log_dict

    def info(self, message: str, **kwargs):
        """Log info level message with structured data."""
        self.logger.info(
            json.dumps(self._build_log_dict(message, 'INFO', kwargs), default=str)
        )

    def error(self, message: str, error: Optional[Exception] = None, **kwargs):
        """Log error level message with structured data and optional exception."""
        log_dict = self._build_log_dict(message, 'ERROR', kwargs)

        if error:
            log_dict.update({
                'error_type': error.__class__.__name__,
                'error_message': str(error),
                'error_trace': self._get_traceback(error)
            })

        self.logger.error(json.dumps(log_dict, default=str))

    def warning(self, message: str, **kwargs):
        """Log warning level message with structured data."""
        self.logger.warning(
            json.dumps(self._build_log_dict(message, 'WARNING', kwargs), default=str)
        )

    def debug(self, message: str, **kwargs):
        """Log debug level message with structured data."""
        self.logger.debug(
            json.dumps(self._build_log_dict(message, 'DEBUG', kwargs), default=str)
        )

    @staticmethod
    def _get_traceback(error: Exception) -> str:
        """Get formatted traceback from exception."""
        return ''.join(traceback.format_exception(
            type(error),
            error,
            error.__traceback__
        ))

class CorrelationMiddleware(BaseHTTPMiddleware):
    """Middleware to handle correlation ID for request tracking."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request with correlation ID tracking."""
        token = correlation_id.set(
            request.headers.get('X-Correlation-ID', str(uuid.uuid4()))
        )

        try:
            response = await call_next(request)
            response.headers['X-Correlation-ID'] = correlation_id.get()
            return response
        except Exception as e:
            logger = get_logger(__name__)
            logger.error(
                "Request processing failed",
                error=e,
                path=request.url.path,
                method=request.method
            )
            raise
        finally:
            correlation_id.reset(token)

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging request and response details."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        """Log request and response details."""
        logger = get_logger(__name__)
        start_time = time.time()

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            query_params=dict(request.query_params),
            client_host=request.client.host if request.client else None
        )

        try:
            response = await call_next(request)

            process_time = (time.time() - start_time) * 1000
            response.headers['X-Process-Time-Ms'] = str(round(process_time, 2))
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                process_time_ms=round(process_time, 2)
            )

            return response
        except Exception as e:
            process_time = (time.time() - start_time) * 1000
            logger.error(
                "Request failed",
                error=e,
                method=request.method,
                path=request.url.path,
                process_time_ms=round(process_time, 2)
            )
            raise

def setup_logging():
    """Configure logging for the application."""
    class CustomJsonFormatter(jsonlogger.JsonFormatter):
        def add_fields(self, log_record, record, message_dict):
            super().add_fields(log_record, record, message_dict)
            log_record['timestamp'] = record.created
            log_record['level'] = record.levelname
            log_record['logger'] = record.name

    debug = settings.DEBUG or settings.FEATURES.ENABLE_DEBUG_LOGGING
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    json_handler = logging.StreamHandler()
    json_handler.setFormatter(CustomJsonFormatter())

    # Replace handlers so repeated calls do not duplicate output
    root.handlers = [json_handler]

def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name)

# Performance monitoring decorator
def monitor_performance(name: str = None):
    """Decorator for monitoring function performance."""
    def decorator(func):
        @wraps(func)
        async def wrapped(*args, **kwargs):
            logger = get_logger(func.__module__)
            start_time = time.time()

            try:
                result = await func(*args, **kwargs)
                process_time = (time.time() - start_time) * 1000

                logger.info(
                    f"Function {name or func.__name__} completed",
                    process_time_ms=round(process_time, 2)
                )

                return result
            except Exception as e:
                process_time = (time.time() - start_time) * 1000
                logger.error(
                    f"Function {name or func.__name__} failed",
                    error=e,
                    process_time_ms=round(process_time, 2)
                )
                raise

        return wrapped
    return decorator
