"""
Structured logging system for the NAS media importer.

This module provides a centralized logging system with a plain console
stream, JSON formatted rotating log files, and helpers for recording
file operations and import pipeline steps.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import LOGGER_NAME

_RESERVED_RECORD_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "getMessage",
    "message",
    "asctime",
    "exc_info",
    "exc_text",
    "stack_info",
}


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Structured fields passed through ``extra``
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class ImportLogger:
    """Centralized logger for the NAS media importer."""

    def __init__(
            self,
            name: str = LOGGER_NAME,
            log_level: str = "INFO",
            log_dir: Optional[Path] = None,
            enable_console: bool = True,
            max_file_size: int = 10 * 1024 * 1024,  # 10MB
            backup_count: int = 5,
    ):
        """
        Initialize the logger.

        Handlers are installed on the root logger so module level loggers
        created with ``logging.getLogger(__name__)`` share them.

        Args:
            name: Logger name
            log_level: Log level (DEBUG, INFO, WARN, ERROR)
            log_dir: Directory for log files, default is ./.logs
            enable_console: Whether to enable console output
            max_file_size: Maximum log file size in bytes
            backup_count: Number of backup files to keep
        """
        level = getattr(logging, log_level.upper())
        root = logging.getLogger()
        root.setLevel(level)
        root.handlers.clear()

        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            console_handler.setFormatter(console_formatter)
            root.addHandler(console_handler)

        log_dir = log_dir or Path.cwd() / ".logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"{name}.log"

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(JSONFormatter())
        root.addHandler(file_handler)

    def debug(self, message: str, **kwargs) -> None:
        """Log a debug message."""
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log an info message."""
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log a warning message."""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log an error message."""
        self._log(logging.ERROR, message, **kwargs)

    def _log(self, level: int, message: str, **kwargs) -> None:
        """Internal logging method with extra fields."""
        extra = {key: value for key, value in kwargs.items() if key not in {"exc_info", "stack_info"}}
        self.logger.log(level, message, extra=extra)

    def log_file_operation(
            self,
            operation: str,
            source_path: Path,
            destination_path: Optional[Path] = None,
            success: bool = True,
            error_message: Optional[str] = None,
    ) -> None:
        """Log a file operation with structured data."""
        log_data = {
            "operation": operation,
            "source_path": str(source_path),
            "success": success,
        }

        if destination_path:
            log_data["destination_path"] = str(destination_path)

        if error_message:
            log_data["error"] = error_message

        if success:
            self.info(f"File operation completed: {operation}", **log_data)
        else:
            self.error(f"File operation failed: {operation}", **log_data)

    def log_import_step(
            self,
            step: str,
            filepath: Path,
            success: bool,
            details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log an import pipeline step for a file."""
        log_data = {
            "step": step,
            "filepath": str(filepath),
            "success": success,
        }

        if details:
            log_data.update(details)

        if success:
            self.debug(f"Import step completed: {step}", **log_data)
        else:
            self.error(f"Import step failed: {step}", **log_data)


# Global logger instance
_global_logger: Optional[ImportLogger] = None


def setup_logging(
        log_level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_console: bool = True,
) -> ImportLogger:
    """Set up the global logging system."""
    global _global_logger

    if log_dir is None:
        log_dir = Path.cwd() / ".logs"

    _global_logger = ImportLogger(
        log_level=log_level,
        log_dir=log_dir,
        enable_console=enable_console,
    )

    return _global_logger


def get_logger() -> ImportLogger:
    """Get the global logger instance."""
    global _global_logger
    if _global_logger is None:
        _global_logger = setup_logging()

    return _global_logger
