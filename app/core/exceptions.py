"""Error types raised by the document pipeline.

Each stage either returns a usable result or raises exactly one of these.
The API layer maps them to HTTP responses in ``app.main``.
"""
from typing import List, Optional

from fastapi import status


class QuizGeneratorError(Exception):
    """Base class for pipeline errors that carry an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class PDFValidationError(QuizGeneratorError):
    """Uploaded PDF failed extraction or quality checks."""

    status_code = status.HTTP_400_BAD_REQUEST


class RecordNotFoundError(QuizGeneratorError):
    """A document or question set id does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class QuestionGenerationError(QuizGeneratorError):
    """The AI call failed or returned no usable questions."""


class KeywordExtractionError(QuizGeneratorError):
    """The AI call failed or returned no usable keywords."""


class RenderError(QuizGeneratorError):
    """Rendering a question paper or answer key failed."""
