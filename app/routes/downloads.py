"""Question paper and answer key download routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.core.dependencies import get_renderer, get_store
from app.core.exceptions import RenderError
from app.db.store import RecordStore
from app.schemas import PaperMetadata, RenderRequest
from app.services.document_renderer import (
    ANSWER_KEY,
    FORMATS,
    MEDIA_TYPES,
    QUESTION_PAPER,
    DocumentRenderer,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/download", tags=["Downloads"])


def _render_download(
    question_set_id: str,
    fmt: str,
    variant: str,
    filename_prefix: str,
    store: RecordStore,
    renderer: DocumentRenderer
) -> Response:
    if fmt not in FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid format. Use 'pdf' or 'docx'"
        )

    question_set = store.get_question_set(question_set_id)
    if not question_set:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Question set not found"
        )

    document = store.get_document(question_set.document_id)
    if not document:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )

    render_request = RenderRequest(
        title=f"Question Paper - {document.filename}",
        instructions=(
            "Instructions: Answer all questions. Each question carries equal marks. "
            f"Total questions: {len(question_set.questions)}"
        ),
        questions=question_set.questions,
        metadata=PaperMetadata(
            question_count=len(question_set.questions),
            difficulty=question_set.difficulty,
            question_type=question_set.question_type,
            generated_at=question_set.generated_at
        )
    )

    try:
        data = renderer.render(render_request, variant, fmt)
    except Exception as e:
        logger.exception("Rendering %s for question set %s failed", variant, question_set_id)
        raise RenderError(f"Failed to generate document: {str(e)}") from e

    return Response(
        content=data,
        media_type=MEDIA_TYPES[fmt],
        headers={
            "Content-Disposition": f'attachment; filename="{filename_prefix}-{question_set_id}.{fmt}"'
        }
    )


@router.get("/questions/{question_set_id}/{fmt}")
def download_question_paper(
    question_set_id: str,
    fmt: str,
    store: RecordStore = Depends(get_store),
    renderer: DocumentRenderer = Depends(get_renderer)
):
    """Download the question paper (no answers) as PDF or DOCX."""
    return _render_download(question_set_id, fmt, QUESTION_PAPER, "questions", store, renderer)


@router.get("/answers/{question_set_id}/{fmt}")
def download_answer_key(
    question_set_id: str,
    fmt: str,
    store: RecordStore = Depends(get_store),
    renderer: DocumentRenderer = Depends(get_renderer)
):
    """Download the answer key (correct answers and explanations) as PDF or DOCX."""
    return _render_download(question_set_id, fmt, ANSWER_KEY, "answers", store, renderer)
