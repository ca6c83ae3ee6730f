"""
Question paper / answer key export - PDF and DOCX generation.

Both variants are built by one routine into a flat list of blocks
(the document tree); a per-format encoder turns the blocks into bytes:
- PdfEncoder uses reportlab platypus
- DocxEncoder uses python-docx
"""
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Dict, List
from xml.sax.saxutils import escape

from docx import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt, RGBColor
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from app.schemas import RenderRequest

logger = logging.getLogger(__name__)

QUESTION_PAPER = "questionPaper"
ANSWER_KEY = "answerKey"
VARIANTS = (QUESTION_PAPER, ANSWER_KEY)
FORMATS = ("pdf", "docx")

MEDIA_TYPES = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

ANSWER_KEY_SUFFIX = " - Answer Key"
CORRECT_ANSWER_HEX = "1A7A1A"


@dataclass(frozen=True)
class Block:
    """One line of a rendered document. `kind` selects its style."""

    kind: str  # title | instructions | metadata | question | option | answer | explanation
    text: str


def metadata_line(request: RenderRequest) -> str:
    meta = request.metadata
    return (
        f"Questions: {meta.question_count} | Difficulty: {meta.difficulty} | "
        f"Type: {meta.question_type} | Generated: {meta.generated_at:%Y-%m-%d}"
    )


def build_document_tree(request: RenderRequest, reveal_answers: bool) -> List[Block]:
    """
    Lay out a question paper (reveal_answers=False) or answer key (True).

    The paper carries the instructions; the key carries correct answers
    and explanations instead.
    """
    blocks = []

    if reveal_answers:
        blocks.append(Block("title", request.title + ANSWER_KEY_SUFFIX))
    else:
        blocks.append(Block("title", request.title))
        blocks.append(Block("instructions", request.instructions))
    blocks.append(Block("metadata", metadata_line(request)))

    for number, question in enumerate(request.questions, 1):
        blocks.append(Block("question", f"Q{number}. {question.question}"))

        for index, choice in enumerate(question.choices):
            blocks.append(Block("option", f"{chr(65 + index)}. {choice}"))

        if reveal_answers:
            blocks.append(Block("answer", f"Correct Answer: {question.correct_answer}"))
            blocks.append(Block("explanation", f"Explanation: {question.explanation}"))

    return blocks


class PdfEncoder:
    """Render blocks to PDF bytes with reportlab."""

    SPACE_AFTER = {
        "title": 0.4 * cm,
        "instructions": 0.3 * cm,
        "metadata": 0.8 * cm,
        "option": 0.05 * cm,
        "answer": 0.1 * cm,
        "explanation": 0.2 * cm,
    }

    @staticmethod
    def get_styles() -> Dict[str, ParagraphStyle]:
        base = getSampleStyleSheet()
        return {
            "title": ParagraphStyle(
                name="PaperTitle", parent=base["Title"], fontSize=18, leading=22, alignment=TA_CENTER
            ),
            "instructions": ParagraphStyle(
                name="PaperInstructions", parent=base["Normal"], fontSize=11, leading=14
            ),
            "metadata": ParagraphStyle(
                name="PaperMetadata", parent=base["Normal"], fontSize=9, leading=12, textColor=colors.grey
            ),
            "question": ParagraphStyle(
                name="QuestionText", parent=base["Normal"], fontName="Helvetica-Bold",
                fontSize=11, leading=14, spaceBefore=8, spaceAfter=4
            ),
            "option": ParagraphStyle(
                name="OptionText", parent=base["Normal"], fontSize=10.5, leading=13, leftIndent=20
            ),
            "answer": ParagraphStyle(
                name="CorrectAnswer", parent=base["Normal"], fontName="Helvetica-Bold",
                fontSize=10.5, leading=13, textColor=colors.HexColor(f"#{CORRECT_ANSWER_HEX}")
            ),
            "explanation": ParagraphStyle(
                name="ExplanationText", parent=base["Normal"], fontSize=10, leading=13
            ),
        }

    def encode(self, blocks: List[Block], title: str) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=2*cm,
            leftMargin=2*cm,
            topMargin=2*cm,
            bottomMargin=2*cm,
            title=title,
            invariant=True,
        )

        styles = self.get_styles()
        story = []
        for block in blocks:
            # Paragraph parses markup; model text must be escaped
            story.append(Paragraph(escape(block.text), styles[block.kind]))
            gap = self.SPACE_AFTER.get(block.kind)
            if gap:
                story.append(Spacer(1, gap))

        doc.build(story)
        data = buffer.getvalue()
        buffer.close()
        return data


class DocxEncoder:
    """Render blocks to DOCX bytes with python-docx."""

    def encode(self, blocks: List[Block], title: str) -> bytes:
        doc = DocxDocument()
        doc.core_properties.title = title

        for block in blocks:
            if block.kind == "title":
                heading = doc.add_heading(block.text, level=0)
                heading.alignment = WD_ALIGN_PARAGRAPH.CENTER
                continue

            p = doc.add_paragraph()
            run = p.add_run(block.text)

            if block.kind == "instructions":
                run.font.size = Pt(12)
            elif block.kind == "metadata":
                run.font.size = Pt(10)
                run.font.color.rgb = RGBColor(0x66, 0x66, 0x66)
                p.paragraph_format.space_after = Pt(18)
            elif block.kind == "question":
                run.bold = True
                run.font.size = Pt(12)
                p.paragraph_format.space_before = Pt(10)
            elif block.kind == "option":
                run.font.size = Pt(11)
                p.paragraph_format.left_indent = Inches(0.3)
                p.paragraph_format.space_after = Pt(0)
            elif block.kind == "answer":
                run.bold = True
                run.font.size = Pt(11)
                run.font.color.rgb = RGBColor.from_string(CORRECT_ANSWER_HEX)
            elif block.kind == "explanation":
                run.font.size = Pt(10)

        buffer = BytesIO()
        doc.save(buffer)
        data = buffer.getvalue()
        buffer.close()
        return data


class DocumentRenderer:
    """Render a question set as a question paper or answer key, in PDF or DOCX."""

    def __init__(self):
        self.encoders = {"pdf": PdfEncoder(), "docx": DocxEncoder()}

    def render(self, request: RenderRequest, variant: str, fmt: str) -> bytes:
        """
        Render `request` and return the complete file bytes.

        Args:
            request: Title, instructions, questions and metadata
            variant: "questionPaper" or "answerKey"
            fmt: "pdf" or "docx"

        Raises:
            ValueError: unknown variant or format
        """
        if variant not in VARIANTS:
            raise ValueError(f"Unknown document variant: {variant}")
        if fmt not in self.encoders:
            raise ValueError(f"Unknown document format: {fmt}")

        blocks = build_document_tree(request, reveal_answers=(variant == ANSWER_KEY))
        title = blocks[0].text
        data = self.encoders[fmt].encode(blocks, title)

        logger.info(
            "Rendered %s as %s: %d questions, %d bytes",
            variant, fmt, len(request.questions), len(data)
        )
        return data
