"""
Services package for the Exam Tutor Backend.
"""

from .pdf_processor import PDFProcessor
from .gemini_client import GeminiClient
from .prompts import PromptMode
from .tutor_service import TutorService

__all__ = [
    "PDFProcessor",
    "GeminiClient",
    "PromptMode",
    "TutorService"
]
