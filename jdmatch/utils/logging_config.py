"""
Centralized Logging Configuration for the JD/Resume Matching Engine
"""
import logging
import logging.config
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, Any


def setup_logging(
    level: str = "INFO",
    log_file: str = None,
    enable_console: bool = True,
    enable_file: bool = True,
    format_style: str = "detailed",
    log_dir: str = "logs"
) -> None:
    """
    Setup centralized logging configuration

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (defaults to logs/jdmatch_<date>.log)
        enable_console: Enable console logging
        enable_file: Enable file logging
        format_style: Format style ('simple', 'detailed', 'json')
        log_dir: Directory for the rotating log files
    """

    formats = {
        "simple": "%(levelname)s - %(name)s - %(message)s",
        "detailed": "%(asctime)s | %(levelname)-8s | %(name)-30s | %(funcName)-20s:%(lineno)-4d | %(message)s",
        "json": '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "function": "%(funcName)s", "line": %(lineno)d, "message": "%(message)s"}'
    }

    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": formats.get(format_style, formats["detailed"]),
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
            "simple": {
                "format": formats["simple"]
            }
        },
        "handlers": {},
        "loggers": {
            "jdmatch": {
                "level": level,
                "handlers": [],
                "propagate": False
            },
            "uvicorn": {
                "level": "INFO",
                "handlers": [],
                "propagate": False
            }
        }
    }

    if enable_console:
        config["handlers"]["console"] = {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "simple" if format_style == "simple" else "detailed",
            "stream": "ext://sys.stdout"
        }
        config["loggers"]["jdmatch"]["handlers"].append("console")
        config["loggers"]["uvicorn"]["handlers"].append("console")

    if enable_file:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        if log_file is None:
            log_file = directory / f"jdmatch_{datetime.now().strftime('%Y%m%d')}.log"

        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "detailed",
            "filename": str(log_file),
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
            "encoding": "utf8"
        }
        config["loggers"]["jdmatch"]["handlers"].append("file")
        config["loggers"]["uvicorn"]["handlers"].append("file")

        error_log_file = directory / f"jdmatch_errors_{datetime.now().strftime('%Y%m%d')}.log"
        config["handlers"]["error_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "formatter": "detailed",
            "filename": str(error_log_file),
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
            "encoding": "utf8"
        }
        config["loggers"]["jdmatch"]["handlers"].append("error_file")

    logging.config.dictConfig(config)

    logger = logging.getLogger("jdmatch.logging")
    logger.info(f"Logging configured - Level: {level}, Console: {enable_console}, File: {enable_file}")
    if enable_file:
        logger.info(f"Log file: {log_file}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with consistent naming

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger nested under the ``jdmatch`` namespace
    """
    if name == "jdmatch" or name.startswith("jdmatch."):
        return logging.getLogger(name)
    return logging.getLogger(f"jdmatch.{name}")


def configure_for_environment(settings=None):
    """
    Configure logging for the deployment environment

    Args:
        settings: Validated Settings; environment variables are read when omitted
    """
    if settings is not None:
        environment = settings.environment
        log_level = settings.log_level
    else:
        environment = os.getenv("ENVIRONMENT", "development").lower()
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    if environment == "production":
        setup_logging(
            level=log_level,
            enable_console=True,
            enable_file=True,
            format_style="detailed"
        )
    elif environment == "development":
        setup_logging(
            level="DEBUG",
            enable_console=True,
            enable_file=True,
            format_style="detailed"
        )
    elif environment == "testing":
        setup_logging(
            level="WARNING",
            enable_console=True,
            enable_file=False,
            format_style="simple"
        )
    else:
        setup_logging(level=log_level)


class PerformanceMonitor:
    """Context manager for monitoring performance with logging"""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.start_time = None
        self.elapsed_ms = None

    def __enter__(self):
        self.start_time = time.time()
        self.logger.debug(f"Starting {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.time() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.2f}ms: {exc_val}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms (exceeded threshold {self.threshold_ms}ms)")
        else:
            self.logger.info(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms")
        return False
