"""
Exam Tutor Backend Application

A small tutoring backend that answers medical exam questions through
Google Gemini, optionally grounded in an uploaded PDF.

Features:
- Direct question answering with a tutoring persona
- PDF-grounded answering (in-memory extraction, no file storage)
- Google Gemini REST integration with explicit timeouts
- Tagged error handling with secret-safe logging
- Health monitoring
"""

__version__ = "1.0.0"
__author__ = "Exam Tutor Team"
__description__ = "A PDF-grounded exam tutor backend backed by Google Gemini"
