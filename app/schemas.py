"""Pydantic schemas shared by the services and the API layer.

Python attributes are snake_case; JSON on the wire is camelCase.
"""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


DIFFICULTY_PATTERN = "^(easy|medium|hard)$"
QUESTION_TYPE_PATTERN = "^(mcq|truefalse)$"

TRUE_FALSE_CHOICES = ["True", "False"]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we store is UTC.
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class QuestionRecord(CamelModel):
    id: str
    question: str
    options: Optional[List[str]] = None
    correct_answer: str
    explanation: str = ""
    difficulty: str

    @property
    def choices(self) -> List[str]:
        """Options offered to the reader; true/false questions use a fixed pair."""
        return list(self.options) if self.options else list(TRUE_FALSE_CHOICES)


class GenerationConfig(CamelModel):
    question_count: int = Field(ge=5, le=30)
    difficulty: str = Field(pattern=DIFFICULTY_PATTERN)
    question_type: str = Field(pattern=QUESTION_TYPE_PATTERN)


class GenerateQuestionsRequest(GenerationConfig):
    document_id: str


class UploadedDocument(CamelModel):
    id: str
    filename: str
    file_size: int
    text_content: str
    word_count: int
    page_count: int
    uploaded_at: datetime

    @field_validator("uploaded_at")
    @classmethod
    def uploaded_at_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class QuestionSet(CamelModel):
    id: str
    document_id: str
    question_count: int
    difficulty: str
    question_type: str
    questions: List[QuestionRecord]
    generated_at: datetime

    @field_validator("generated_at")
    @classmethod
    def generated_at_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class PaperMetadata(CamelModel):
    question_count: int
    difficulty: str
    question_type: str
    generated_at: datetime


class RenderRequest(CamelModel):
    title: str
    instructions: str
    questions: List[QuestionRecord]
    metadata: PaperMetadata


# Response schemas

class DocumentSummary(CamelModel):
    id: str
    filename: str
    file_size: int
    word_count: int
    page_count: int


class UploadResponse(CamelModel):
    document: DocumentSummary
    keywords: List[str]


class GenerateQuestionsResponse(CamelModel):
    question_set_id: str
    questions: List[QuestionRecord]
    metadata: PaperMetadata
