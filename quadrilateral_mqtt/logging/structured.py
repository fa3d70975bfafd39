"""
Structured JSON Logger
=====================

Bounded Context: Observability Infrastructure

Each call produces one JSON line with a typed event name and free-form
metadata, so bridge logs can be filtered by event in an aggregator.

Design:
- Wraps Python's logging module (thread-safe, handler-agnostic)
- Typed events (LogEvent enum)
- Timezone-aware UTC timestamps

Example:
    >>> logger = StructuredLogger(component="bridge")
    >>> logger.info(
    ...     event=LogEvent.DEVICE_SAMPLE_RECEIVED,
    ...     message="Received vertex_delta sample",
    ...     metadata={'vertex': 'A', 'source_id': 'tangible_01'}
    ... )
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .events import LogEvent


class StructuredLogger:
    """
    JSON structured logger.

    Attributes:
        component: Component name (e.g., "bridge", "subscriber")
        logger: Underlying Python logger instance

    Thread Safety:
        Thread-safe via Python's logging module.
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        logger_name: Optional[str] = None
    ):
        """
        Initialize structured logger.

        Args:
            component: Component identifier
            level: Logging level (default: INFO)
            logger_name: Custom logger name (default: quadrilateral_mqtt.<component>)
        """
        self.component = component
        self.logger_name = logger_name or f"quadrilateral_mqtt.{component}"
        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(level)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def _log(
        self,
        level: int,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return

        entry: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': logging.getLevelName(level),
            'component': self.component,
            'event': event.value,
            'message': message,
        }

        if metadata:
            entry['metadata'] = metadata

        if exc_info is not None:
            entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info)
            }

        self.logger.log(level, json.dumps(entry, default=str))

    def debug(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        self._log(logging.DEBUG, event, message, metadata)

    def info(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log INFO level message.

        Example:
            >>> logger.info(
            ...     event=LogEvent.MQTT_CONNECTED,
            ...     message="Connected to broker",
            ...     metadata={'broker': 'localhost:1883'}
            ... )
        """
        self._log(logging.INFO, event, message, metadata)

    def warning(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        self._log(logging.WARNING, event, message, metadata)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """
        Log ERROR level message.

        Args:
            event: Typed log event
            message: Human-readable message
            metadata: Additional context
            exc_info: Exception instance (type and message are included)

        Example:
            >>> try:
            ...     DeviceSampleMessage.from_dict(data)
            ... except ValueError as e:
            ...     logger.error(
            ...         event=LogEvent.SCHEMA_VALIDATION_ERROR,
            ...         message="Invalid device sample",
            ...         exc_info=e
            ...     )
        """
        self._log(logging.ERROR, event, message, metadata, exc_info)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)


class JSONFormatter(logging.Formatter):
    """Pass-through formatter: StructuredLogger messages are already JSON."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(
    component: str,
    level: int = logging.INFO
) -> StructuredLogger:
    """
    Factory function to create a configured StructuredLogger.

    Example:
        >>> logger = create_logger("bridge", level=logging.DEBUG)
    """
    return StructuredLogger(component=component, level=level)
