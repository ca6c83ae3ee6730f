"""Database models."""
from app.models.document import Document
from app.models.question_set import QuestionSet

__all__ = [
    "Document",
    "QuestionSet",
]
