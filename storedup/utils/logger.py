"""Sanitized logging helpers for the detector.

Context passed as keyword arguments is serialized to JSON and scrubbed of
e-mail addresses, phone numbers and credentials before it reaches the logs.
Store submissions routinely carry WhatsApp numbers, so they are masked too.
"""
import json
import logging
import re
from typing import Any, Optional

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger('storedup')


def configure_logging(level: str = "INFO", fmt: Optional[str] = None) -> None:
    """Apply the configured level (and optionally a format) to the package logger."""
    logger.setLevel(level.upper())
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S'))


def sanitize_text(text: str) -> str:
    """Remove personal data and secrets from text.

    Args:
        text: Input text that may contain sensitive data

    Returns:
        Sanitized text with sensitive patterns replaced
    """
    if not text:
        return text

    text = re.sub(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}', '<email>', text)

    # Phone numbers, including wa.me links
    text = re.sub(r'\+?\b\d{8,15}\b', '<phone>', text)

    text = re.sub(r'sk-[a-zA-Z0-9]{20,}', '<api-key>', text)
    text = re.sub(r'\b[0-9a-f]{24,}\b', '<hash>', text, flags=re.IGNORECASE)

    return text


def safe_json(obj: Any, max_length: int = 1000) -> str:
    """Serialize object to JSON with sensitive data sanitized.

    Args:
        obj: Object to serialize
        max_length: Maximum length of output string

    Returns:
        Sanitized JSON string
    """
    try:
        json_str = json.dumps(obj, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return "<unable to serialize>"

    sanitized = sanitize_text(json_str)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "... [truncated]"
    return sanitized


def _log(level: int, message: str, **kwargs) -> None:
    if kwargs:
        logger.log(level, f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.log(level, message)


def log_info(message: str, **kwargs) -> None:
    """Log info message with optional sanitized context."""
    _log(logging.INFO, message, **kwargs)


def log_warning(message: str, **kwargs) -> None:
    """Log warning message with optional sanitized context."""
    _log(logging.WARNING, message, **kwargs)


def log_error(message: str, **kwargs) -> None:
    """Log error message with optional sanitized context."""
    _log(logging.ERROR, message, **kwargs)


def log_debug(message: str, **kwargs) -> None:
    """Log debug message with optional sanitized context."""
    _log(logging.DEBUG, message, **kwargs)


def log_duplicate_detection(duplicate_type: str, store_id: Any, **kwargs) -> None:
    """Log a positive duplicate verdict.

    Args:
        duplicate_type: Why the submission collided (name, handle, social_link)
        store_id: Id of the existing store
        **kwargs: Additional context
    """
    log_info("Duplicate store detected",
             duplicate_type=duplicate_type,
             existing_store=store_id,
             **kwargs)
