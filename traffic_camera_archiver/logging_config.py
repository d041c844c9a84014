"""Centralized logging configuration for the traffic camera archiver."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any

ROOT_LOGGER_NAME = "traffic_camera_archiver"


class StructuredFormatter(logging.Formatter):
    """Custom formatter that adds structured information to log records."""

    def __init__(self, include_context: bool = True):
        self.include_context = include_context
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with structured information."""
        base_format = "%(asctime)s | %(levelname)-8s | %(name)-40s | %(message)s"

        if self.include_context and hasattr(record, 'context'):
            context_str = " | ".join([f"{k}={v}" for k, v in record.context.items()])
            base_format += f" | Context: {context_str}"

        if record.levelno >= logging.ERROR and record.exc_info:
            base_format += " | %(pathname)s:%(lineno)d"

        formatter = logging.Formatter(base_format)
        return formatter.format(record)


class LoggingManager:
    """Centralized logging management for the archiver."""

    def __init__(self, log_dir: str = "logs", log_level: int = logging.INFO):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.main_log_file = self.log_dir / "archiver.log"
        self.error_log_file = self.log_dir / "errors.log"
        self.performance_log_file = self.log_dir / "performance.log"

        self.log_level = log_level
        self.max_log_size = 10 * 1024 * 1024  # 10MB
        self.backup_count = 5

        self._performance_logger: Optional[logging.Logger] = None

        self._setup_root_logger()

    def _setup_root_logger(self) -> None:
        """Attach console and rotating file handlers to the package logger."""
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(self.log_level)
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(StructuredFormatter(include_context=False))
        root_logger.addHandler(console_handler)

        main_file_handler = logging.handlers.RotatingFileHandler(
            self.main_log_file,
            maxBytes=self.max_log_size,
            backupCount=self.backup_count
        )
        main_file_handler.setLevel(logging.DEBUG)
        main_file_handler.setFormatter(StructuredFormatter(include_context=True))
        root_logger.addHandler(main_file_handler)

        # Errors and critical only
        error_file_handler = logging.handlers.RotatingFileHandler(
            self.error_log_file,
            maxBytes=self.max_log_size,
            backupCount=self.backup_count
        )
        error_file_handler.setLevel(logging.ERROR)
        error_file_handler.setFormatter(StructuredFormatter(include_context=True))
        root_logger.addHandler(error_file_handler)

        root_logger.info("Logging system initialized")

    def get_performance_logger(self) -> logging.Logger:
        """Get logger specifically for per-tick timing lines."""
        if self._performance_logger is None:
            logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.performance")

            perf_handler = logging.handlers.RotatingFileHandler(
                self.performance_log_file,
                maxBytes=self.max_log_size,
                backupCount=self.backup_count
            )
            perf_handler.setLevel(logging.INFO)
            perf_handler.setFormatter(logging.Formatter("%(asctime)s | %(message)s"))
            logger.addHandler(perf_handler)

            self._performance_logger = logger

        return self._performance_logger

    def set_log_level(self, level: int) -> None:
        """Set the package log level."""
        self.log_level = level
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)


logging_manager: Optional[LoggingManager] = None


def get_logger(component_name: str) -> logging.Logger:
    """Get the logger for a component."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{component_name}")


def log_performance(message: str, metrics: Optional[Dict[str, Any]] = None) -> None:
    """Log performance metrics; a no-op until setup_logging() has run."""
    if logging_manager is None:
        return

    if metrics:
        metric_str = " | ".join([f"{k}={v}" for k, v in metrics.items()])
        message = f"{message} | {metric_str}"

    logging_manager.get_performance_logger().info(message)


def setup_logging(log_level: str = "INFO", log_dir: str = "logs") -> LoggingManager:
    """Setup centralized logging system."""
    global logging_manager

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    if logging_manager is not None and logging_manager.log_dir == Path(log_dir):
        logging_manager.set_log_level(numeric_level)
    else:
        logging_manager = LoggingManager(log_dir, numeric_level)

    return logging_manager
