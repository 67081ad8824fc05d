"""
Utility functions for the Exam Tutor Backend.
"""

import time
import functools
from typing import Dict, Any, Optional, Tuple
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

REDACTED = "***"


def format_timestamp() -> str:
    """Get current timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def measure_time(func):
    """Decorator to measure function execution time."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        try:
            return func(*args, **kwargs)
        finally:
            execution_time = time.time() - start_time
            logger.info(f"{func.__name__} executed in {execution_time:.2f} seconds")
    return wrapper


def validate_file_size(file_size: int, max_file_size_mb: int) -> bool:
    """Validate if the file size is within limits."""
    max_size_bytes = max_file_size_mb * 1024 * 1024
    return file_size <= max_size_bytes


def truncate_text(text: str, max_chars: int) -> Tuple[str, bool]:
    """
    Keep only the first ``max_chars`` characters of ``text``.

    This is a lossy, silent cut: nothing past the bound reaches the model,
    even when that is where the answer lives.

    Returns:
        Tuple of (bounded text, whether anything was dropped)
    """
    if len(text) <= max_chars:
        return text, False
    return text[:max_chars], True


def redact_secret(text: Any, secret: Optional[str]) -> str:
    """Replace every occurrence of ``secret`` in ``text`` before it is logged."""
    text = str(text)
    if secret:
        text = text.replace(secret, REDACTED)
    return text


def log_processing_info(operation: str, details: Dict[str, Any]) -> None:
    """Log processing information."""
    logger.info(f"{operation}: {details}")


def handle_processing_error(operation: str, error: Exception, context: Dict[str, Any] = None,
                            secret: Optional[str] = None) -> Dict[str, Any]:
    """Handle and log processing errors."""
    error_info = {
        'operation': operation,
        'error_type': type(error).__name__,
        'error_message': redact_secret(error, secret),
        'timestamp': format_timestamp()
    }

    if context:
        error_info.update({key: redact_secret(value, secret) for key, value in context.items()})

    logger.error(f"Processing error: {error_info}")
    return error_info
