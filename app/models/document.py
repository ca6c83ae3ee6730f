"""Document model."""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Text, Integer
from sqlalchemy.orm import relationship
from app.db.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Document(Base):
    """An uploaded PDF and the text extracted from it."""

    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    filename = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=False)
    text_content = Column(Text, nullable=False)
    word_count = Column(Integer, nullable=False)
    page_count = Column(Integer, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    # Relationships
    question_sets = relationship("QuestionSet", back_populates="document")
