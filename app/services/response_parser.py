"""Decode and validate the untrusted JSON payloads returned by the language model.

The model is asked for raw JSON but may wrap it in markdown code fences or
return records that break the question invariants (wrong option count, an
answer that is not one of the options). Everything here either returns clean
typed data or raises ResponseParseError.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from app.schemas import QuestionRecord, TRUE_FALSE_CHOICES

logger = logging.getLogger(__name__)

MCQ_OPTION_COUNT = 4

_FENCE_RE = re.compile(r"^```[\w-]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)
_LETTER_RE = re.compile(r"^\(?([A-Da-d])[\.\)]?$")


class ResponseParseError(ValueError):
    """The model response could not be turned into usable data."""


def strip_code_fences(raw: str) -> str:
    """Remove a wrapping ```json ... ``` fence if the model added one."""
    text = raw.strip()
    match = _FENCE_RE.match(text)
    if match:
        return match.group(1).strip()
    return text


def parse_json_array(raw: Optional[str], key: str) -> List[Any]:
    """
    Parse a model response and return the non-empty list stored under `key`.

    Raises:
        ResponseParseError: empty response, invalid JSON, or missing/empty list
    """
    if not raw or not raw.strip():
        raise ResponseParseError("the AI service returned an empty response")

    text = strip_code_fences(raw)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"response was not valid JSON ({e.msg})") from e

    if not isinstance(payload, dict):
        raise ResponseParseError("response JSON was not an object")

    items = payload.get(key)
    if not isinstance(items, list) or not items:
        raise ResponseParseError(f'response did not contain a non-empty "{key}" array')

    return items


def _clean_str(value: Any) -> str:
    """Strip strings; numbers (e.g. `"options": [1, 2, 3, 4]`) become their text."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _resolve_mcq_answer(answer: str, options: List[str]) -> Optional[str]:
    """Map the model's answer onto one of the options, or None if it is not one."""
    if answer in options:
        return answer

    folded = answer.casefold()
    for option in options:
        if option.casefold() == folded:
            return option

    letter = _LETTER_RE.match(answer)
    if letter:
        return options[ord(letter.group(1).upper()) - ord("A")]

    return None


def _resolve_true_false(answer: str) -> Optional[str]:
    for choice in TRUE_FALSE_CHOICES:
        if answer.casefold() == choice.casefold():
            return choice
    return None


def coerce_question(
    item: Any,
    question_type: str,
    difficulty: str
) -> Optional[QuestionRecord]:
    """
    Turn one raw item into a QuestionRecord, repairing what can be repaired.

    Returns None when the item cannot satisfy the record invariants.
    """
    if not isinstance(item, dict):
        return None

    question = _clean_str(item.get("question"))
    answer = _clean_str(item.get("correctAnswer", item.get("correct_answer")))
    if not question or not answer:
        return None

    if question_type == "mcq":
        options = item.get("options")
        if not isinstance(options, list) or len(options) != MCQ_OPTION_COUNT:
            return None
        options = [_clean_str(o) for o in options]
        if not all(options):
            return None
        if len({o.casefold() for o in options}) != MCQ_OPTION_COUNT:
            return None
        resolved = _resolve_mcq_answer(answer, options)
    else:
        options = None
        resolved = _resolve_true_false(answer)

    if resolved is None:
        return None

    try:
        return QuestionRecord(
            id=_clean_str(item.get("id")) or "q",
            question=question,
            options=options,
            correct_answer=resolved,
            explanation=_clean_str(item.get("explanation")),
            difficulty=_clean_str(item.get("difficulty")) or difficulty,
        )
    except ValidationError:
        return None


def parse_questions(
    raw: Optional[str],
    question_type: str,
    difficulty: str,
    limit: int
) -> List[QuestionRecord]:
    """
    Parse a question generation response into at most `limit` valid records.

    Records that cannot be repaired are dropped and logged. Surviving records
    are renumbered q1..qN in their original order.
    """
    items = parse_json_array(raw, "questions")

    records = []
    for index, item in enumerate(items, 1):
        record = coerce_question(item, question_type, difficulty)
        if record is None:
            logger.warning("Dropping invalid %s question #%d from AI response", question_type, index)
            continue
        records.append(record)

    if not records:
        raise ResponseParseError("no valid questions were generated")

    if len(records) > limit:
        logger.info("AI returned %d questions, keeping the first %d", len(records), limit)
        records = records[:limit]

    return [
        record.model_copy(update={"id": f"q{order}"})
        for order, record in enumerate(records, 1)
    ]


def parse_keywords(raw: Optional[str]) -> List[str]:
    """Parse a keyword response into unique, non-blank keywords (first occurrence wins)."""
    items = parse_json_array(raw, "keywords")

    seen: Dict[str, str] = {}
    for item in items:
        keyword = item.strip() if isinstance(item, str) else ""
        if keyword and keyword.casefold() not in seen:
            seen[keyword.casefold()] = keyword

    if not seen:
        raise ResponseParseError("no valid keywords were returned")

    return list(seen.values())
