"""Logging configuration and utilities."""

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

ROOT_LOGGER_NAME = 'uniprot_proxy'


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'
    }

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors if enabled."""
        levelname = record.levelname

        if self.use_colors and levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"

        result = super().format(record)

        # Restore so other handlers see the plain level name
        record.levelname = levelname

        return result


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    console: bool = True,
    colors: bool = True,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
    quiet: bool = False
) -> Dict[str, logging.Logger]:
    """
    Configure logging for command-line use.

    Library code only creates loggers; handlers are installed here.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Log file name inside ``log_dir``
        log_dir: Directory for rotating log files; no file logging if None
        console: Enable console output (stderr, so stdout stays clean for data)
        colors: Enable colored console output
        max_bytes: Maximum log file size before rotation
        backup_count: Number of rotated files to keep
        quiet: Only errors on the console

    Returns:
        Dictionary of configured loggers
    """
    level = getattr(logging, log_level.upper())

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.DEBUG)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        if log_file is None:
            log_file = f"uniprot_proxy_{datetime.now().strftime('%Y%m%d')}.log"

        file_handler = logging.handlers.RotatingFileHandler(
            log_path / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        package_logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.ERROR if quiet else level)
        console_handler.setFormatter(ColoredFormatter('%(levelname)s - %(message)s', use_colors=colors))
        package_logger.addHandler(console_handler)

    loggers = {
        'main': package_logger,
        'fetcher': get_logger('fetcher'),
        'extractor': get_logger('extractor'),
        'cache': get_logger('cache'),
        'api': get_logger('api'),
        'error': get_logger('error'),
        'performance': get_logger('performance')
    }

    package_logger.debug(f"Logging initialized - Level: {log_level}")

    return loggers


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def log_api_call(api_name: str, url: str, status_code: Optional[int], response_time: float, success: bool):
    """Log API call details."""
    logger = get_logger('api')

    if success:
        logger.debug(f"API call: {api_name} - {url} (status: {status_code}, response_time: {response_time:.2f}s)")
    else:
        logger.warning(f"API call failed: {api_name} - {url} (status: {status_code}, response_time: {response_time:.2f}s)")


def log_cache_hit(namespace: str, key: str, hit: bool):
    """Log cache access."""
    logger = get_logger('cache')

    if hit:
        logger.debug(f"Cache hit: {namespace}:{key}")
    else:
        logger.debug(f"Cache miss: {namespace}:{key}")


class LogTimer:
    """Context manager for timing operations."""

    def __init__(self, operation: str, logger: Optional[logging.Logger] = None):
        """
        Initialize timer.

        Args:
            operation: Operation description
            logger: Logger to use (defaults to performance logger)
        """
        self.operation = operation
        self.logger = logger or get_logger('performance')
        self.start_time = None
        self.elapsed = 0.0

    def __enter__(self):
        """Start timing."""
        self.start_time = datetime.now()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Log elapsed time."""
        if self.start_time:
            self.elapsed = (datetime.now() - self.start_time).total_seconds()
            if exc_type is None:
                self.logger.debug(f"{self.operation} completed in {self.elapsed:.2f}s")
            else:
                self.logger.error(f"{self.operation} failed after {self.elapsed:.2f}s")
