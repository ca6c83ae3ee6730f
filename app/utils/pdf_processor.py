"""PDF processing utilities: text extraction and quality validation."""
import io
import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import List

import pypdf

logger = logging.getLogger(__name__)


@dataclass
class PDFProcessingResult:
    """Outcome of extracting and validating one uploaded PDF."""

    text_content: str
    word_count: int
    page_count: int
    file_size: int
    is_valid: bool
    errors: List[str] = field(default_factory=list)


class PDFProcessor:
    """Extract text content from PDF bytes and check it is usable for question generation."""

    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MiB
    MIN_WORD_COUNT = 500
    MAX_WHITESPACE_RATIO = 0.7

    EXTRACTION_FAILED = (
        "Failed to extract text from PDF. Please ensure the PDF contains "
        "selectable text, not scanned images."
    )
    FILE_TOO_LARGE = "File size exceeds 10MB limit"
    NO_TEXT = "No text content found in PDF. Please ensure the PDF contains selectable text."
    TOO_FEW_WORDS = (
        "Document contains too few words (minimum 500 words required "
        "for quality question generation)"
    )
    MOSTLY_WHITESPACE = (
        "Document appears to contain mostly formatting characters. "
        "Please ensure it contains readable educational content."
    )

    STOP_WORDS = frozenset({
        'this', 'that', 'with', 'have', 'will', 'from', 'they', 'know', 'want', 'been',
        'good', 'much', 'some', 'time', 'very', 'when', 'come', 'here', 'just', 'like',
        'long', 'make', 'many', 'over', 'such', 'take', 'than', 'them', 'well', 'were',
    })

    @staticmethod
    def process_pdf(data: bytes) -> PDFProcessingResult:
        """
        Extract text from PDF bytes and validate it.

        Buffers over MAX_FILE_SIZE are rejected without being parsed.
        Never raises: unreadable input comes back as an invalid result
        whose errors explain what went wrong.

        Args:
            data: Raw bytes of the uploaded file

        Returns:
            PDFProcessingResult with text, counts and validation outcome
        """
        file_size = len(data)

        if file_size > PDFProcessor.MAX_FILE_SIZE:
            logger.info("PDF rejected before parsing: %d bytes", file_size)
            return PDFProcessingResult(
                text_content="",
                word_count=0,
                page_count=0,
                file_size=file_size,
                is_valid=False,
                errors=[PDFProcessor.FILE_TOO_LARGE],
            )

        try:
            text_content, page_count = PDFProcessor._extract_from_pdf(data)
        except Exception as e:
            logger.warning("PDF extraction failed (%d bytes): %s", file_size, e)
            return PDFProcessingResult(
                text_content="",
                word_count=0,
                page_count=0,
                file_size=file_size,
                is_valid=False,
                errors=[PDFProcessor.EXTRACTION_FAILED],
            )

        word_count = PDFProcessor.count_words(text_content)
        errors = PDFProcessor.validate(text_content, word_count, file_size)

        return PDFProcessingResult(
            text_content=text_content,
            word_count=word_count,
            page_count=page_count,
            file_size=file_size,
            is_valid=not errors,
            errors=errors,
        )

    @staticmethod
    def _extract_from_pdf(data: bytes):
        """Return (text, page_count) for a PDF held in memory."""
        reader = pypdf.PdfReader(io.BytesIO(data))
        text_parts = []

        for page in reader.pages:
            page_text = page.extract_text() or ""
            if page_text.strip():
                text_parts.append(page_text)

        return "\n".join(text_parts), len(reader.pages)

    @staticmethod
    def count_words(text: str) -> int:
        """A word is a maximal run of non-whitespace characters."""
        return len(text.split())

    @staticmethod
    def whitespace_ratio(text: str) -> float:
        if not text:
            return 0.0
        whitespace = len(re.findall(r"\s", text))
        return whitespace / len(text)

    @staticmethod
    def validate(text_content: str, word_count: int, file_size: int) -> List[str]:
        """Return every violated quality rule (empty list when the document is usable)."""
        errors = []

        if file_size > PDFProcessor.MAX_FILE_SIZE:
            errors.append(PDFProcessor.FILE_TOO_LARGE)

        if not text_content.strip():
            errors.append(PDFProcessor.NO_TEXT)

        if word_count < PDFProcessor.MIN_WORD_COUNT:
            errors.append(PDFProcessor.TOO_FEW_WORDS)

        if PDFProcessor.whitespace_ratio(text_content) > PDFProcessor.MAX_WHITESPACE_RATIO:
            errors.append(PDFProcessor.MOSTLY_WHITESPACE)

        return errors

    @staticmethod
    def extract_key_phrases(text_content: str, limit: int = 20) -> List[str]:
        """
        Frequency-based keyword extraction that needs no network access.

        Used as a fallback when the AI keyword call fails.
        """
        words = re.sub(r"[^\w\s]", " ", text_content.lower()).split()
        words = [w for w in words if len(w) > 3 and w not in PDFProcessor.STOP_WORDS]

        return [word for word, _ in Counter(words).most_common(limit)]
