"""Builders and fakes shared by the test modules."""
import json
import re
from io import BytesIO
from types import SimpleNamespace

from docx import Document as DocxDocument
from pypdf import PdfReader
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from app.services.prompt_builder import KEYWORD_SYSTEM_PROMPT


VOCABULARY = [
    "photosynthesis", "converts", "light", "energy", "into", "chemical",
    "glucose", "inside", "plant", "cells",
]


def make_pdf(word_count: int, words_per_line: int = 10, lines_per_page: int = 40) -> bytes:
    """Build a text PDF with exactly `word_count` whitespace-separated words."""
    words = [VOCABULARY[i % len(VOCABULARY)] for i in range(word_count)]
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1)
    pdf.setFont("Helvetica", 10)

    y = 800
    lines = 0
    for start in range(0, len(words), words_per_line):
        pdf.drawString(50, y, " ".join(words[start:start + words_per_line]))
        y -= 18
        lines += 1
        if lines == lines_per_page:
            pdf.showPage()
            pdf.setFont("Helvetica", 10)
            y = 800
            lines = 0

    pdf.save()
    return buffer.getvalue()


def pdf_text(data: bytes) -> str:
    reader = PdfReader(BytesIO(data))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def docx_text(data: bytes) -> str:
    doc = DocxDocument(BytesIO(data))
    return "\n".join(p.text for p in doc.paragraphs)


def mcq_items(count: int, difficulty: str = "easy"):
    return [
        {
            "id": f"q{i}",
            "question": f"What does term {i} describe?",
            "options": [f"Answer {i}", f"Wrong {i}a", f"Wrong {i}b", f"Wrong {i}c"],
            "correctAnswer": f"Answer {i}",
            "explanation": f"Explanation {i} comes from the text.",
            "difficulty": difficulty,
        }
        for i in range(1, count + 1)
    ]


def truefalse_items(count: int, difficulty: str = "easy"):
    return [
        {
            "id": f"q{i}",
            "question": f"Statement {i} is supported by the text.",
            "correctAnswer": "True" if i % 2 else "False",
            "explanation": f"Explanation {i} comes from the text.",
            "difficulty": difficulty,
        }
        for i in range(1, count + 1)
    ]


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeCompletions:
    """Stands in for `client.chat.completions`.

    Scripted replies (strings or exceptions) are consumed first. After that
    it answers like a well-behaved model: keyword prompts get a keyword
    list, generation prompts get the requested number of questions.
    """

    def __init__(self):
        self.calls = []
        self.replies = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.replies:
            reply = self.replies.pop(0)
            if isinstance(reply, Exception):
                raise reply
            return completion(reply)

        system, prompt = kwargs["messages"][0]["content"], kwargs["messages"][1]["content"]
        if system == KEYWORD_SYSTEM_PROMPT:
            return completion(json.dumps({"keywords": ["photosynthesis", "glucose", "chlorophyll"]}))

        count = int(re.search(r"Create exactly (\d+)", prompt).group(1))
        difficulty = re.search(r'Set difficulty to "(\w+)"', prompt).group(1)
        if "true/false questions" in prompt:
            items = truefalse_items(count, difficulty)
        else:
            items = mcq_items(count, difficulty)
        return completion(json.dumps({"questions": items}))


class FakeOpenAI:
    def __init__(self):
        self.chat = SimpleNamespace(completions=FakeCompletions())

    @property
    def replies(self):
        return self.chat.completions.replies

    @property
    def calls(self):
        return self.chat.completions.calls
