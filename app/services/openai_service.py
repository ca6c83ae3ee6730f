"""OpenAI LLM service for question generation and keyword extraction."""
import logging
from typing import List, Optional

import openai
from openai import OpenAI

from app.core.config import settings
from app.core.exceptions import KeywordExtractionError, QuestionGenerationError
from app.schemas import GenerationConfig, QuestionRecord
from app.services.prompt_builder import KEYWORD_SYSTEM_PROMPT, SYSTEM_PROMPT, PromptBuilder
from app.services.response_parser import ResponseParseError, parse_keywords, parse_questions

logger = logging.getLogger(__name__)


class OpenAIService:
    """Service for interacting with OpenAI API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
        client: Optional[OpenAI] = None
    ):
        """
        Initialize the OpenAI client.

        Falls back to the global settings for anything not given. A prebuilt
        `client` can be passed in (tests use a fake one). Retries are disabled:
        a failed call fails the request.
        """
        self.client = client or OpenAI(
            api_key=api_key or settings.OPENAI_API_KEY,
            timeout=timeout or settings.OPENAI_TIMEOUT_SECONDS,
            max_retries=0,
        )
        self.model = model or settings.OPENAI_MODEL
        self.temperature = settings.OPENAI_TEMPERATURE if temperature is None else temperature

    def generate_questions(self, text: str, config: GenerationConfig) -> List[QuestionRecord]:
        """
        Generate quiz questions from document text.

        Args:
            text: Extracted document text
            config: Requested count, difficulty and question type

        Returns:
            Validated QuestionRecord list (q1..qN), at most config.question_count long

        Raises:
            QuestionGenerationError: API failure or unusable response
        """
        prompt = PromptBuilder.build_generation_prompt(
            text=text,
            question_count=config.question_count,
            difficulty=config.difficulty,
            question_type=config.question_type
        )

        try:
            content = self._complete_json(SYSTEM_PROMPT, prompt)
            questions = parse_questions(
                content,
                question_type=config.question_type,
                difficulty=config.difficulty,
                limit=config.question_count
            )
        except (openai.OpenAIError, ResponseParseError) as e:
            logger.error("Question generation failed: %s", e)
            raise QuestionGenerationError(f"Question generation failed: {e}") from e

        if len(questions) < config.question_count:
            logger.warning(
                "Requested %d questions, %d usable after validation",
                config.question_count, len(questions)
            )
        logger.info("Generated %d %s questions", len(questions), config.question_type)
        return questions

    def extract_keywords(self, text: str) -> List[str]:
        """
        Extract assessment-relevant keywords from document text.

        Raises:
            KeywordExtractionError: API failure or unusable response
        """
        prompt = PromptBuilder.build_keyword_prompt(text)

        try:
            content = self._complete_json(KEYWORD_SYSTEM_PROMPT, prompt)
            return parse_keywords(content)
        except (openai.OpenAIError, ResponseParseError) as e:
            logger.error("Keyword extraction failed: %s", e)
            raise KeywordExtractionError(f"Keyword extraction failed: {e}") from e

    def _complete_json(self, system_prompt: str, user_prompt: str) -> Optional[str]:
        """Run one chat completion in JSON mode and return the raw message text."""
        logger.debug("Sending %d-char prompt to %s", len(user_prompt), self.model)

        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            temperature=self.temperature,
            response_format={"type": "json_object"}
        )

        content = response.choices[0].message.content if response.choices else None
        logger.debug("Received %s-char response", len(content) if content else 0)
        return content
