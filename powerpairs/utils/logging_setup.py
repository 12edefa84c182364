"""Centralized logging configuration for powerpairs."""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'thread': record.threadName,
            'message': record.getMessage(),
        }

        # Add extra fields if present
        if hasattr(record, 'extra_fields'):
            log_obj.update(record.extra_fields)

        if record.exc_info:
            log_obj['exception'] = self.formatException(record.exc_info)

        for key in ['operation', 'set_size', 'duration']:
            if hasattr(record, key):
                log_obj[key] = getattr(record, key)

        return json.dumps(log_obj, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Colored console formatter for terminals."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        """Format with colors for console output."""
        if not sys.stderr.isatty():
            return super().format(record)

        original = record.levelname
        if original in self.COLORS:
            record.levelname = f"{self.COLORS[original]}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def setup_logging(
    name: str = 'powerpairs',
    level: str = 'WARNING',
    log_dir: Optional[Path] = None,
    console: bool = True,
    json_format: bool = True,
) -> logging.Logger:
    """
    Setup centralized logging configuration.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files; no file is written when None
        console: Enable stderr output
        json_format: Use JSON lines for file logs

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()  # Clear any existing handlers
    logger.propagate = False  # Prevent propagation to root logger to avoid duplicates

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, level.upper()))

        if sys.stderr.isatty():
            console_formatter = ConsoleFormatter(
                '%(asctime)s - %(levelname)s - [%(module)s:%(lineno)d] - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
        else:
            console_formatter = logging.Formatter(
                '%(asctime)s - %(levelname)s - [%(module)s] - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        date_str = datetime.now().strftime('%Y%m%d')
        suffix = 'jsonl' if json_format else 'log'
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / f'powerpairs_{date_str}.{suffix}',
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5
        )
        if json_format:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    '%(asctime)s - %(levelname)s - [%(module)s:%(lineno)d] - %(message)s',
                    datefmt='%Y-%m-%d %H:%M:%S'
                )
            )
        file_handler.setLevel(logging.DEBUG)  # Capture all levels in file
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str, **kwargs) -> logging.Logger:
    """
    Get or create a logger with the standard configuration.

    Loggers below ``powerpairs`` are returned unconfigured; they propagate
    to the package logger set up by :func:`setup_logging`.

    Args:
        name: Logger name (usually __name__)
        **kwargs: Additional arguments for setup_logging

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    if logger.handlers or name.startswith('powerpairs.'):
        return logger

    return setup_logging(name, **kwargs)


def log_operation(logger: logging.Logger, operation: str, **context):
    """
    Log an operation with context.

    Args:
        logger: Logger instance
        operation: Operation name
        **context: Additional context to log
    """
    logger.info(f"Starting operation: {operation}", extra={'operation': operation, 'extra_fields': context})
