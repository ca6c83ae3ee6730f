"""Question generation routes."""
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.dependencies import get_ai_service, get_store
from app.db.store import RecordStore
from app.schemas import (
    GenerateQuestionsRequest,
    GenerateQuestionsResponse,
    PaperMetadata,
    QuestionSet,
)
from app.services.openai_service import OpenAIService


router = APIRouter(prefix="/api", tags=["Questions"])


@router.post(
    "/generate-questions",
    response_model=GenerateQuestionsResponse,
    response_model_exclude_none=True
)
def generate_questions(
    request: GenerateQuestionsRequest,
    store: RecordStore = Depends(get_store),
    ai_service: OpenAIService = Depends(get_ai_service)
):
    """
    Generate a question set from an uploaded document.

    This endpoint:
    1. Loads the document text
    2. Calls OpenAI to generate and validates the questions
    3. Stores the question set
    4. Returns the questions with generation metadata

    Raises:
        HTTPException 404: Document not found
        QuestionGenerationError (500): AI call failed or returned nothing usable
    """
    document = store.get_document(request.document_id)

    if not document:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )

    questions = ai_service.generate_questions(document.text_content, request)

    question_set = store.create_question_set(
        document_id=document.id,
        question_count=request.question_count,
        difficulty=request.difficulty,
        question_type=request.question_type,
        questions=questions
    )

    return GenerateQuestionsResponse(
        question_set_id=question_set.id,
        questions=question_set.questions,
        metadata=PaperMetadata(
            question_count=question_set.question_count,
            difficulty=question_set.difficulty,
            question_type=question_set.question_type,
            generated_at=question_set.generated_at
        )
    )


@router.get(
    "/question-sets/{question_set_id}",
    response_model=QuestionSet,
    response_model_exclude_none=True
)
def get_question_set(
    question_set_id: str,
    store: RecordStore = Depends(get_store)
):
    """Get a stored question set, including answers and explanations."""
    question_set = store.get_question_set(question_set_id)

    if not question_set:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Question set not found"
        )

    return question_set
