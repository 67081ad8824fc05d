"""
PDF processing service for extracting text from PDF files.
"""

import PyPDF2
from io import BytesIO
from typing import List

from ..errors import ExtractionError
from ..utils import (
    measure_time,
    log_processing_info,
    handle_processing_error
)
import logging

logger = logging.getLogger(__name__)


class PDFProcessor:
    """Service for extracting plain text from in-memory PDF files."""

    @measure_time
    def extract_text(self, file_content: bytes, filename: str = "upload.pdf") -> str:
        """
        Extract text from PDF file content.

        Args:
            file_content: PDF file content as bytes
            filename: Name of the PDF file, used for logging only

        Returns:
            Text of every readable page, joined with newlines

        Raises:
            ExtractionError: If the PDF cannot be read or yields no text
        """
        if not file_content:
            raise ExtractionError(detail=f"Empty file content for {filename}")

        try:
            # Read PDF from memory using PyPDF2
            pdf_reader = PyPDF2.PdfReader(BytesIO(file_content))
            total_pages = len(pdf_reader.pages)
        except Exception as e:
            error_info = handle_processing_error(
                "pdf_extraction",
                e,
                {"filename": filename, "file_size": len(file_content)}
            )
            raise ExtractionError(detail=str(error_info)) from e

        log_processing_info("PDF extraction started", {
            "filename": filename,
            "total_pages": total_pages,
            "file_size": len(file_content)
        })

        page_texts: List[str] = []
        for page_num, page in enumerate(pdf_reader.pages):
            try:
                page_text = page.extract_text()
            except Exception as page_error:
                error_info = handle_processing_error(
                    "page_extraction",
                    page_error,
                    {"filename": filename, "page": page_num + 1}
                )
                logger.warning(f"Skipping page {page_num + 1}: {error_info}")
                continue

            if page_text:
                page_texts.append(page_text)

        text = "\n".join(page_texts)

        log_processing_info("PDF extraction completed", {
            "filename": filename,
            "pages_with_text": len(page_texts),
            "total_pages": total_pages,
            "text_length": len(text)
        })

        if not text.strip():
            logger.error(f"Extracted text from {filename} is empty or whitespace only")
            raise ExtractionError(detail=f"No extractable text in {filename}")

        return text
