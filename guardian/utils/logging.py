"""
Structured logging with correlation IDs for the location service.
"""

import logging
import json
import time
import traceback
from typing import Any, Dict, Optional
from contextvars import ContextVar
from functools import wraps

# Context variables for request tracking
request_id_context: ContextVar[str] = ContextVar('request_id', default='')
operation_context: ContextVar[str] = ContextVar('operation', default='')


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        request_id = request_id_context.get('')
        if request_id:
            log_entry['request_id'] = request_id

        operation = operation_context.get('')
        if operation:
            log_entry['operation'] = operation

        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        # Add custom fields from extra
        if hasattr(record, 'extra_fields'):
            log_entry.update(record.extra_fields)

        if hasattr(record, 'duration'):
            log_entry['duration_ms'] = record.duration

        return json.dumps(log_entry, default=str)


class LocationLogger:
    """Logger for location ingestion events."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def log_location_received(
        self,
        device_id: str,
        latitude: float,
        longitude: float,
        is_sos: bool
    ):
        """Log an accepted location report."""
        operation_context.set("location_ingest")

        self.logger.info(
            f"[{time.strftime('%H:%M:%S')}] Location received: "
            f"{latitude:.5f}, {longitude:.5f} SOS:{is_sos}",
            extra={
                'extra_fields': {
                    'device_id': device_id,
                    'latitude': latitude,
                    'longitude': longitude,
                    'is_sos': is_sos
                }
            }
        )

    def log_sos_alert(self, device_id: str, latitude: float, longitude: float):
        """Log an emergency report at alert level."""
        operation_context.set("sos_alert")

        self.logger.warning(
            f"SOS alert! device: {device_id}",
            extra={
                'extra_fields': {
                    'device_id': device_id,
                    'latitude': latitude,
                    'longitude': longitude,
                    'sos': True
                }
            }
        )

    def log_error(
        self,
        error: Exception,
        operation: str,
        context: Optional[Dict[str, Any]] = None
    ):
        """Log errors with full context."""
        operation_context.set(operation)

        extra_fields = {
            'operation': operation,
            'error_type': type(error).__name__,
            'error_message': str(error)
        }

        if context:
            extra_fields.update(context)

        self.logger.error(
            f"Operation failed: {operation}",
            exc_info=error,
            extra={'extra_fields': extra_fields}
        )


def log_operation(operation_name: str):
    """Decorator that times an async service operation and logs its outcome."""

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            logger = logging.getLogger(f"{func.__module__}.{func.__name__}")
            operation_context.set(operation_name)
            start_time = time.time()

            try:
                result = await func(*args, **kwargs)
            except Exception:
                duration_ms = (time.time() - start_time) * 1000
                logger.debug(
                    f"Operation aborted: {operation_name}",
                    extra={'extra_fields': {'operation': operation_name, 'success': False},
                           'duration': duration_ms}
                )
                raise

            duration_ms = (time.time() - start_time) * 1000
            logger.debug(
                f"Operation completed: {operation_name}",
                extra={'extra_fields': {'operation': operation_name, 'success': True},
                       'duration': duration_ms}
            )
            return result

        return wrapper

    return decorator


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "structured",
    log_file: Optional[str] = None
):
    """Configure application logging."""

    level = getattr(logging, log_level.upper())

    if log_format == "structured":
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)


location_logger = LocationLogger('guardian.location')
