"""
Error taxonomy for the Exam Tutor Backend.

Every failure a request can hit is raised as a ``TutorError`` subclass
tagged with an ``ErrorKind``. The application matches the kind once, at the
HTTP boundary, to pick the status code and the caller-safe message.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Tag carried by every request failure."""
    INVALID_INPUT = "invalid_input"
    EXTRACTION_ERROR = "extraction_error"
    CONTENT_BLOCKED = "content_blocked"
    UPSTREAM_ERROR = "upstream_error"


class TutorError(Exception):
    """Base class for request failures.

    ``message`` is what the caller sees. ``detail`` is for the server log
    only and must already be free of secrets.
    """

    kind: ErrorKind = ErrorKind.UPSTREAM_ERROR
    status_code: int = 500
    default_message: str = "Failed to process the request."

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class InvalidInput(TutorError):
    """Missing or malformed question or document."""
    kind = ErrorKind.INVALID_INPUT
    status_code = 400
    default_message = "Invalid request."


class ExtractionError(TutorError):
    """Document could not be read or produced no text."""
    kind = ErrorKind.EXTRACTION_ERROR
    default_message = "Failed to extract text from PDF."


class ContentBlocked(TutorError):
    """Gemini refused the prompt or the answer for policy reasons."""
    kind = ErrorKind.CONTENT_BLOCKED
    default_message = "Content violated safety guidelines or was blocked by Gemini."


class UpstreamError(TutorError):
    """Any other Gemini failure, including timeouts and malformed responses."""
    kind = ErrorKind.UPSTREAM_ERROR
    default_message = "Failed to get response from Gemini"
