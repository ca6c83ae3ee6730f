"""Record store for uploaded documents and generated question sets.

Records are write-once: there is no update or delete. Reads of unknown ids
return None.
"""
import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import sessionmaker

from app import models
from app.core.exceptions import RecordNotFoundError
from app.db.base import Base
from app.db.sessions import build_engine, build_session_factory
from app.schemas import QuestionRecord, QuestionSet, UploadedDocument

logger = logging.getLogger(__name__)


class RecordStore:
    """SQLAlchemy-backed store; every operation runs in its own session under one lock."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._lock = threading.Lock()

    @classmethod
    def from_url(cls, database_url: str) -> "RecordStore":
        """Build a store for `database_url`, creating the tables if needed."""
        engine = build_engine(database_url)
        Base.metadata.create_all(bind=engine)
        return cls(build_session_factory(engine))

    def create_document(
        self,
        filename: str,
        file_size: int,
        text_content: str,
        word_count: int,
        page_count: int
    ) -> UploadedDocument:
        row = models.Document(
            id=str(uuid.uuid4()),
            filename=filename,
            file_size=file_size,
            text_content=text_content,
            word_count=word_count,
            page_count=page_count,
            uploaded_at=datetime.now(timezone.utc),
        )
        with self._lock, self._session_factory() as db:
            db.add(row)
            db.commit()
            document = UploadedDocument.model_validate(row)

        logger.info("Stored document %s (%s, %d words)", document.id, filename, word_count)
        return document

    def get_document(self, document_id: str) -> Optional[UploadedDocument]:
        with self._lock, self._session_factory() as db:
            row = db.get(models.Document, document_id)
            return UploadedDocument.model_validate(row) if row else None

    def create_question_set(
        self,
        document_id: str,
        question_count: int,
        difficulty: str,
        question_type: str,
        questions: List[QuestionRecord]
    ) -> QuestionSet:
        """
        Store a generated question set.

        Raises:
            RecordNotFoundError: `document_id` does not reference a stored document
        """
        with self._lock, self._session_factory() as db:
            if db.get(models.Document, document_id) is None:
                raise RecordNotFoundError("Document not found")

            row = models.QuestionSet(
                id=str(uuid.uuid4()),
                document_id=document_id,
                question_count=question_count,
                difficulty=difficulty,
                question_type=question_type,
                questions=[q.model_dump() for q in questions],
                generated_at=datetime.now(timezone.utc),
            )
            db.add(row)
            db.commit()
            question_set = QuestionSet.model_validate(row)

        logger.info("Stored question set %s for document %s", question_set.id, document_id)
        return question_set

    def get_question_set(self, question_set_id: str) -> Optional[QuestionSet]:
        with self._lock, self._session_factory() as db:
            row = db.get(models.QuestionSet, question_set_id)
            return QuestionSet.model_validate(row) if row else None
