"""Logging configuration with optional Google Cloud Logging integration."""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from job_filters.constants import MAX_SEARCH_STR_LOG_LENGTH

# Global configuration cache
_logging_config: Optional[Dict] = None


def _load_logging_config() -> Dict:
    """
    Load logging configuration from config/logging.yaml.

    Returns:
        Dict with logging configuration, or default config if file not found.
    """
    global _logging_config

    if _logging_config is not None:
        return _logging_config

    config_path = Path(__file__).parent.parent.parent / "config" / "logging.yaml"

    if config_path.exists():
        try:
            with open(config_path, "r") as f:
                _logging_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            print(f"⚠️  Failed to load logging config from {config_path}: {e}", file=sys.stderr)
            _logging_config = {}
    else:
        _logging_config = {}

    _logging_config.setdefault("console", {})
    _logging_config["console"].setdefault("max_filter_value_length", MAX_SEARCH_STR_LOG_LENGTH)

    return _logging_config


def format_filter_value(value: Any, max_length: Optional[int] = None) -> Tuple[str, str]:
    """
    Format a filter value for logging with both full and display versions.

    Search strings and long value lists can be arbitrarily long; the display
    version is truncated with an ellipsis for console output.

    Args:
        value: Filter value (string, list, or None).
        max_length: Maximum length for display version. If None, uses config value.

    Returns:
        Tuple of (full_value, display_value)

    Example:
        >>> format_filter_value("linux opt", max_length=5)
        ('linux opt', 'li...')
    """
    if value is None:
        return "", ""

    if isinstance(value, (list, tuple)):
        full_value = ",".join(str(v) for v in value)
    else:
        full_value = str(value).strip()

    if max_length is None:
        config = _load_logging_config()
        max_length = config["console"]["max_filter_value_length"]

    # If max_length is 0 or negative, no truncation
    if max_length <= 0 or len(full_value) <= max_length:
        return full_value, full_value

    if max_length <= 3:
        display_value = full_value[:max_length]
    else:
        display_value = full_value[: max_length - 3] + "..."

    return full_value, display_value


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_cloud_logging: bool = False,
) -> None:
    """
    Configure logging with optional Google Cloud Logging integration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path to log file. If None, logs go to the console only.
        enable_cloud_logging: Enable Google Cloud Logging integration.

    Environment Variables:
        ENABLE_CLOUD_LOGGING: Set to 'true' to enable Cloud Logging.
        LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        LOG_FILE: Log file path.
        ENVIRONMENT: Environment name (staging, production, development) - added to Cloud Logging labels.
    """
    if os.getenv("ENABLE_CLOUD_LOGGING", "").lower() == "true":
        enable_cloud_logging = True

    log_level = os.getenv("LOG_LEVEL", log_level).upper()
    log_file = os.getenv("LOG_FILE", log_file or "")
    environment = os.getenv("ENVIRONMENT", "development")

    handlers = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    labels: Dict[str, str] = {}
    if enable_cloud_logging:
        try:
            import google.cloud.logging
            from google.cloud.logging.handlers import CloudLoggingHandler

            from job_filters import __version__

            client = google.cloud.logging.Client()
            labels = {
                "environment": environment,
                "service": "job-filters",
                "version": __version__,
            }

            cloud_handler = CloudLoggingHandler(
                client,
                name="job-filters",
                labels=labels,
            )
            cloud_handler.setLevel(getattr(logging, log_level))
            handlers.append(cloud_handler)

        except ImportError:
            print(
                "⚠️  google-cloud-logging not installed. Install with: pip install job-filters[cloud]",
                file=sys.stderr,
            )
            print("   Falling back to file and console logging only.", file=sys.stderr)

        except Exception as e:
            print(
                f"⚠️  Failed to initialize Google Cloud Logging: {e}",
                file=sys.stderr,
            )
            print("   Falling back to file and console logging only.", file=sys.stderr)

    log_format = f"[{environment.upper()}] %(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, log_level),
        format=log_format,
        handlers=handlers,
        force=True,  # Override any existing configuration
    )

    logger = logging.getLogger(__name__)
    logger.debug(
        f"Logging configured: environment={environment}, level={log_level}, file={log_file or '-'}"
    )
    if labels:
        logger.info(f"Google Cloud Logging enabled with labels: {labels}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


class StructuredLogger:
    """
    Helper class for structured logging with consistent formatting.

    Provides methods for logging filter operations with context.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize structured logger.

        Args:
            logger: Base logger instance
        """
        self.logger = logger

    @staticmethod
    def _with_details(message: str, details: Optional[Dict]) -> str:
        if details:
            detail_str = ", ".join(f"{k}={v}" for k, v in details.items())
            message += f" | {detail_str}"
        return message

    def filter_activity(
        self, action: str, field: str, value: Any = None, details: Optional[Dict] = None
    ) -> None:
        """
        Log a filter change.

        Args:
            action: Change being made (add, remove, replace, toggle, reset)
            field: Filter field
            value: Value involved, truncated for display
            details: Optional additional details
        """
        _, display_value = format_filter_value(value)
        message = f"[FILTER:{action.upper()}] {field}"
        if display_value:
            message += f"={display_value}"
        self.logger.debug(self._with_details(message, details))

    def cache_activity(self, status: str, details: Optional[Dict] = None) -> None:
        """
        Log filter cache refreshes.

        Args:
            status: Cache status (refreshed, unchanged)
            details: Optional additional details
        """
        message = self._with_details(f"[CACHE] {status.upper()}", details)
        self.logger.debug(message)

    def store_activity(self, action: str, details: Optional[Dict] = None) -> None:
        """
        Log key/value store events.

        Args:
            action: Store action (attached, changed, detached)
            details: Optional additional details
        """
        message = self._with_details(f"[STORE] {action.upper()}", details)
        self.logger.debug(message)


def get_structured_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        StructuredLogger instance.
    """
    base_logger = logging.getLogger(name)
    return StructuredLogger(base_logger)
