"""Prompt construction for question generation and keyword extraction."""


SYSTEM_PROMPT = """You are an expert quiz creator for educational content.
You write clear, unambiguous assessment questions that can be answered from the provided text alone.
Return ONLY valid JSON in the requested format."""

KEYWORD_SYSTEM_PROMPT = """You are an expert curriculum analyst.
You identify the concepts and terminology in a text that are worth assessing.
Return ONLY valid JSON in the requested format."""


class PromptBuilder:
    """Build the user prompts sent to the language model. Pure functions, no I/O."""

    GENERATION_CHAR_LIMIT = 8000
    KEYWORD_CHAR_LIMIT = 5000
    ELLIPSIS = "..."

    DIFFICULTY_GUIDELINES = {
        "easy": "Easy questions test recall: definitions, facts and direct identification from the text.",
        "medium": "Medium questions test application and analysis: applying ideas, comparing and explaining relationships.",
        "hard": "Hard questions test synthesis and evaluation: combining several ideas, judging arguments and drawing conclusions.",
    }

    TYPE_RULES = {
        "mcq": """- Each question is multiple choice with exactly 4 options in an "options" array
- Exactly one option is correct
- "correctAnswer" must be the full text of the correct option, copied exactly from "options"
- Do not use "All of the above" or "None of the above" as options""",
        "truefalse": """- Each question is a true/false statement
- "correctAnswer" must be exactly "True" or "False"
- Do not include an "options" field""",
    }

    @staticmethod
    def truncate(text: str, limit: int) -> str:
        """Cut text to `limit` characters, marking the cut with an ellipsis."""
        if len(text) > limit:
            return text[:limit] + PromptBuilder.ELLIPSIS
        return text

    @staticmethod
    def build_generation_prompt(
        text: str,
        question_count: int,
        difficulty: str,
        question_type: str
    ) -> str:
        """
        Build the question generation prompt.

        Args:
            text: Extracted document text
            question_count: Exact number of questions to ask for
            difficulty: easy, medium or hard
            question_type: mcq or truefalse

        Returns:
            Prompt string with content truncated to GENERATION_CHAR_LIMIT
        """
        content = PromptBuilder.truncate(text, PromptBuilder.GENERATION_CHAR_LIMIT)
        guideline = PromptBuilder.DIFFICULTY_GUIDELINES.get(
            difficulty, PromptBuilder.DIFFICULTY_GUIDELINES["medium"]
        )
        type_rules = PromptBuilder.TYPE_RULES.get(question_type, PromptBuilder.TYPE_RULES["mcq"])
        type_label = "multiple choice" if question_type == "mcq" else "true/false"
        options_line = (
            '      "options": ["Option 1", "Option 2", "Option 3", "Option 4"],\n'
            if question_type == "mcq" else ""
        )

        return f"""Create exactly {question_count} {difficulty}-level {type_label} questions from the text below.
Only use information from the provided content. Do not rely on outside knowledge.

DIFFICULTY:
- {guideline}

QUESTION FORMAT:
{type_rules}

TEXT CONTENT:
{content}

Return a single JSON object in this exact shape:
{{
  "questions": [
    {{
      "id": "q1",
      "question": "Clear question text",
{options_line}      "correctAnswer": "The correct answer",
      "explanation": "Why the answer is correct, referencing the source text",
      "difficulty": "{difficulty}"
    }}
  ]
}}

REQUIREMENTS:
- Generate exactly {question_count} questions with ids "q1", "q2", and so on
- Every question must include id, question, correctAnswer, explanation and difficulty
- Set difficulty to "{difficulty}" for every question"""

    @staticmethod
    def build_keyword_prompt(text: str) -> str:
        """Build the keyword extraction prompt (content truncated to KEYWORD_CHAR_LIMIT)."""
        content = PromptBuilder.truncate(text, PromptBuilder.KEYWORD_CHAR_LIMIT)

        return f"""Analyze the following text and extract the most important keywords and key phrases that would be relevant for educational assessment.

REQUIREMENTS:
- Focus on concepts, terminology, processes, and important facts
- Exclude common words, articles, prepositions, and filler words
- Return 15-25 of the most significant keywords or phrases
- Prioritize educational and subject-specific terms

TEXT CONTENT:
{content}

Return a single JSON object in this exact shape:
{{"keywords": ["keyword one", "keyword two"]}}"""
