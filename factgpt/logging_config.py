"""
Logging configuration for FactGPT.

Provides structured JSON logging for audit trails and debugging.
"""

import json
import logging
import sys
import time
from contextvars import ContextVar
from typing import Optional

# Correlation id of the oracle round being processed (request id hex)
request_id_var: ContextVar[str] = ContextVar('request_id', default='')


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs one JSON object per record, suitable for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class AuditLogger:
    """
    Specialized logger for resolution audit events.

    Records question setup, every commit attempt and its result,
    and security-relevant rejections.
    """

    def __init__(self, name: str = "factgpt.audit"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        extra = {
            "event_type": event_type,
            "request_id": request_id_var.get(),
            **kwargs
        }

        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "",
            0,
            f"{event_type}: {kwargs.get('message', '')}",
            (),
            None
        )
        record.extra_fields = extra
        self._logger.handle(record)

    def question_initialized(
        self,
        instance_id: str,
        owner: str,
        deadline: int,
        app_id: int,
        oracle_endpoint: str
    ) -> None:
        self._log(
            logging.INFO,
            "QUESTION_INITIALIZED",
            instance_id=instance_id,
            owner=owner,
            deadline=deadline,
            app_id=str(app_id),
            oracle_endpoint=oracle_endpoint,
            message=f"Question {instance_id} open until {deadline}"
        )

    def initialize_rejected(self, instance_id: str, reason: str) -> None:
        self._log(
            logging.WARNING,
            "INITIALIZE_REJECTED",
            instance_id=instance_id,
            reason=reason,
            message=f"Initialize rejected for {instance_id}: {reason}"
        )

    def commit_requested(self, instance_id: str, outcome: bool) -> None:
        self._log(
            logging.INFO,
            "COMMIT_REQUESTED",
            instance_id=instance_id,
            outcome=outcome,
            message=f"Commit of outcome {str(outcome).lower()} requested for {instance_id}"
        )

    def commit_confirmed(self, instance_id: str, outcome: bool, message_hash: str) -> None:
        self._log(
            logging.INFO,
            "COMMIT_CONFIRMED",
            instance_id=instance_id,
            outcome=outcome,
            message_hash=message_hash,
            message=f"Outcome {str(outcome).lower()} committed for {instance_id}"
        )

    def commit_rejected(self, instance_id: str, code: str, reason: str) -> None:
        self._log(
            logging.WARNING,
            "COMMIT_REJECTED",
            instance_id=instance_id,
            code=code,
            reason=reason,
            message=f"Commit rejected for {instance_id}: {code}"
        )

    def security_event(
        self,
        event: str,
        severity: str = "medium",
        **details
    ) -> None:
        """Log a security-relevant event."""
        level = {
            "low": logging.INFO,
            "medium": logging.WARNING,
            "high": logging.ERROR,
            "critical": logging.CRITICAL
        }.get(severity, logging.WARNING)

        self._log(
            level,
            "SECURITY_EVENT",
            security_event=event,
            severity=severity,
            **details,
            message=f"Security event: {event}"
        )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting (recommended for production)
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def configure_from_env() -> None:
    """Configure logging from FACTGPT_LOG_* settings."""
    from . import config

    level = "DEBUG" if config.is_debug() else config.LOG_LEVEL
    configure_logging(level=level, json_format=config.LOG_JSON)


audit_log = AuditLogger()
