"""
Main tutoring service that validates requests, builds prompts and calls Gemini.
"""

from typing import Any, Optional, Protocol

from .pdf_processor import PDFProcessor
from .gemini_client import GeminiClient
from .prompts import PromptMode, build_chat_prompt, build_document_prompt
from ..config import Settings
from ..errors import ExtractionError, InvalidInput, TutorError, UpstreamError
from ..models import HealthResponse
from ..utils import (
    truncate_text,
    validate_file_size,
    log_processing_info,
    handle_processing_error
)
import logging

logger = logging.getLogger(__name__)


class TextExtractor(Protocol):
    def extract_text(self, file_content: bytes, filename: str = ...) -> str: ...


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str: ...


class TutorService:
    """Answers questions directly or grounded in an uploaded document.

    Holds no per-request state; one instance serves concurrent requests.
    """

    def __init__(
        self,
        settings: Settings,
        extractor: Optional[TextExtractor] = None,
        generator: Optional[TextGenerator] = None
    ):
        self.settings = settings
        self.extractor = extractor or PDFProcessor()
        self.generator = generator or GeminiClient(settings)

    def health(self) -> HealthResponse:
        """Report whether the Gemini key is configured, without revealing it."""
        return HealthResponse(
            status="ok" if self.settings.api_key_loaded else "degraded",
            api_key_loaded=self.settings.api_key_loaded,
            api_key_length=self.settings.api_key_length
        )

    def chat(self, question: Any) -> str:
        """Answer a question with the tutoring persona."""
        question = self._require_question(question)
        return self._answer(PromptMode.CHAT, question)

    def ask(self, question: Any, file_content: Optional[bytes], filename: Optional[str] = None) -> str:
        """
        Answer a question using only the text of an uploaded PDF.

        The extracted text is cut to ``max_document_chars`` before it is put
        in the prompt. Anything past that bound is silently dropped.

        Args:
            question: User's question
            file_content: Raw PDF bytes
            filename: Original upload name, used for logging only

        Returns:
            Text of Gemini's answer
        """
        if not file_content:
            raise InvalidInput("No PDF file uploaded.")
        question = self._require_question(question)

        if not validate_file_size(len(file_content), self.settings.max_file_size_mb):
            raise InvalidInput(
                f"File is too large: {len(file_content) / 1024 / 1024:.1f}MB. "
                f"Maximum size is {self.settings.max_file_size_mb}MB."
            )

        text = self._extract(file_content, filename or "upload.pdf")

        return self._answer(PromptMode.DOCUMENT, question, document_text=text)

    def _extract(self, file_content: bytes, filename: str) -> str:
        try:
            text = self.extractor.extract_text(file_content, filename)
        except TutorError:
            raise
        except Exception as e:
            error_info = handle_processing_error("pdf_extraction", e, {"filename": filename})
            raise ExtractionError(detail=str(error_info)) from e

        if not text or not text.strip():
            logger.error(f"Extracted text from {filename} is empty or whitespace only")
            raise ExtractionError(detail=f"No extractable text in {filename}")
        return text

    def _require_question(self, question: Any) -> str:
        if not isinstance(question, str) or not question.strip():
            raise InvalidInput("Question is required")
        return question

    def _build_prompt(self, mode: PromptMode, question: str, document_text: Optional[str]) -> str:
        if mode is PromptMode.CHAT:
            return build_chat_prompt(question)

        max_chars = self.settings.max_document_chars
        bounded_text, truncated = truncate_text(document_text or "", max_chars)
        if truncated:
            logger.warning(
                f"Document text truncated from {len(document_text)} to {max_chars} characters; "
                "the remainder is not sent to Gemini"
            )
        return build_document_prompt(bounded_text, question)

    def _answer(self, mode: PromptMode, question: str, document_text: Optional[str] = None) -> str:
        prompt = self._build_prompt(mode, question, document_text)

        log_processing_info("Prompt built", {
            "mode": mode.value,
            "question_length": len(question),
            "prompt_length": len(prompt)
        })

        try:
            return self.generator.generate(prompt)
        except UpstreamError as e:
            raise UpstreamError(mode.failure_message, detail=e.detail) from e
        except TutorError:
            raise
        except Exception as e:
            error_info = handle_processing_error(
                "answer_generation",
                e,
                {"mode": mode.value},
                secret=self.settings.gemini_api_key
            )
            raise UpstreamError(mode.failure_message, detail=str(error_info)) from e
