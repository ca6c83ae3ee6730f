"""FastAPI dependencies exposing the per-app service instances.

The instances are built once in ``create_app`` and kept on ``app.state``.
"""
from fastapi import Request

from app.db.store import RecordStore
from app.services.document_renderer import DocumentRenderer
from app.services.openai_service import OpenAIService


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_ai_service(request: Request) -> OpenAIService:
    return request.app.state.ai_service


def get_renderer(request: Request) -> DocumentRenderer:
    return request.app.state.renderer
