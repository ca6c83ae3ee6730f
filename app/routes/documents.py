"""Document upload routes."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.core.dependencies import get_ai_service, get_store
from app.core.exceptions import KeywordExtractionError, PDFValidationError
from app.db.store import RecordStore
from app.schemas import DocumentSummary, UploadResponse
from app.services.openai_service import OpenAIService
from app.utils.pdf_processor import PDFProcessor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Documents"])

PDF_CONTENT_TYPE = "application/pdf"


def _extract_keywords(ai_service: OpenAIService, text: str) -> List[str]:
    """AI keywords for the upload preview, falling back to local key phrases."""
    try:
        return ai_service.extract_keywords(text)
    except KeywordExtractionError as e:
        logger.warning("Using local key phrases for preview: %s", e.message)
        return PDFProcessor.extract_key_phrases(text)


@router.post("/upload", response_model=UploadResponse)
def upload_pdf(
    pdf: Optional[UploadFile] = File(None),
    store: RecordStore = Depends(get_store),
    ai_service: OpenAIService = Depends(get_ai_service)
):
    """
    Upload a PDF, extract and validate its text, and store it as a document.

    Returns the stored document summary plus a keyword preview.

    Raises:
        HTTPException 400: No file, not a PDF, or the PDF failed validation
    """
    if pdf is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No PDF file uploaded"
        )

    if pdf.content_type != PDF_CONTENT_TYPE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are allowed"
        )

    # one byte past the limit is enough to know the upload is too large
    data = pdf.file.read(PDFProcessor.MAX_FILE_SIZE + 1)
    result = PDFProcessor.process_pdf(data)

    if not result.is_valid:
        logger.info("Rejected upload %s: %s", pdf.filename, "; ".join(result.errors))
        raise PDFValidationError("PDF validation failed", errors=result.errors)

    keywords = _extract_keywords(ai_service, result.text_content)

    document = store.create_document(
        filename=pdf.filename or "document.pdf",
        file_size=result.file_size,
        text_content=result.text_content,
        word_count=result.word_count,
        page_count=result.page_count
    )

    return UploadResponse(
        document=DocumentSummary.model_validate(document, from_attributes=True),
        keywords=keywords
    )
