"""
Prompt templates for the two answering modes.
"""

from enum import Enum

NO_ANSWER_SENTENCE = "The provided document does not contain information to answer this question."

CHAT_TEMPLATE = "You are a helpful medical exam tutor. Answer the following question: {question}"

DOCUMENT_TEMPLATE = """You are an expert in medical education, specializing in preparing doctors for the Australian Medical Council (AMC) exam. Your task is to provide concise, accurate, and highly relevant information based *only* on the provided document.

Document:
"{document}"

Question:
"{question}"

Based on the document, please answer the question thoroughly and concisely. If the information is not explicitly available in the document, state "{no_answer}\""""


class PromptMode(str, Enum):
    """Which template a request is answered with."""
    CHAT = "chat"
    DOCUMENT = "document"

    @property
    def failure_message(self) -> str:
        """Generic caller-facing message for an upstream failure in this mode."""
        if self is PromptMode.DOCUMENT:
            return "Failed to process the PDF or get an answer. Check server logs for details."
        return "Failed to get response from Gemini"


def build_chat_prompt(question: str) -> str:
    return CHAT_TEMPLATE.format(question=question)


def build_document_prompt(document_text: str, question: str) -> str:
    # str.format does not re-scan substituted values, braces in the document are safe
    return DOCUMENT_TEMPLATE.format(
        document=document_text,
        question=question,
        no_answer=NO_ANSWER_SENTENCE,
    )
