"""
Pydantic models for request/response validation.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Request model for direct chat queries.

    The question is optional at the schema level so that a missing or empty
    question is reported as a 400 by the service instead of a 422.
    """
    question: Optional[Any] = Field(default=None, description="User's question")


class AnswerResponse(BaseModel):
    """Response model for /chat and /ask."""
    answer: str = Field(..., description="Generated answer")


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str = Field(..., description="Health status")
    api_key_loaded: bool = Field(..., description="Whether GEMINI_API_KEY is configured")
    api_key_length: int = Field(..., ge=0, description="Length of the configured key, 0 when absent")


class RootResponse(BaseModel):
    """Response model for the root banner."""
    message: str = Field(..., description="Status message")
    version: str = Field(..., description="Application version")


class ErrorResponse(BaseModel):
    """Response model for errors."""
    error: str = Field(..., description="Error message")
