"""Question set model."""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, JSON
from sqlalchemy.orm import relationship
from app.db.base import Base


class QuestionSet(Base):
    """A batch of generated questions tied to one document and one generation config."""

    __tablename__ = "question_sets"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    document_id = Column(String(36), ForeignKey("documents.id"), nullable=False, index=True)
    question_count = Column(Integer, nullable=False)
    difficulty = Column(String(20), nullable=False)  # easy / medium / hard
    question_type = Column(String(20), nullable=False)  # mcq / truefalse
    questions = Column(JSON, nullable=False)  # list of question dicts, in order
    generated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    # Relationships
    document = relationship("Document", back_populates="question_sets")
