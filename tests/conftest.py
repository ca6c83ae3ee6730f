import os
from datetime import datetime, timezone

# Settings() is built at import time and requires the key
os.environ.setdefault("OPENAI_API_KEY", "test-key")

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.store import RecordStore
from app.main import create_app
from app.schemas import PaperMetadata, QuestionRecord, RenderRequest
from app.services.openai_service import OpenAIService
from tests.helpers import FakeOpenAI, make_pdf


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def ai_service(fake_openai):
    return OpenAIService(client=fake_openai, model="test-model", temperature=0.0)


@pytest.fixture
def store():
    return RecordStore.from_url("sqlite://")


@pytest.fixture
def client(store, ai_service):
    app = create_app(app_settings=Settings(OPENAI_API_KEY="test-key"), store=store, ai_service=ai_service)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def valid_pdf():
    return make_pdf(600)


@pytest.fixture
def render_request():
    def build(items, question_type="mcq"):
        return RenderRequest(
            title="Question Paper - biology.pdf",
            instructions="Instructions: Answer all questions.",
            questions=[QuestionRecord.model_validate(item) for item in items],
            metadata=PaperMetadata(
                question_count=len(items),
                difficulty="easy",
                question_type=question_type,
                generated_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            ),
        )
    return build
