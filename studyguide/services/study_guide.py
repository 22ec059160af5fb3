"""Study guide generation service.

Turns lecture notes into a structured study guide with Google Gemini:
1) build a fixed prompt from the (truncated) notes 2) call the model
3) decode the JSON answer into a ``StudyGuide``.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from config import get_config

# Google GenAI SDK
try:
    from google import genai
    from google.genai import types

    GENAI_AVAILABLE = True
except ImportError:
    GENAI_AVAILABLE = False

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "... [truncated]"

SYSTEM_INSTRUCTION = (
    "You are a helpful assistant that generates structured study guides "
    "from lecture notes. Always respond with valid JSON only."
)

GENERATION_FAILED_MESSAGE = (
    "Failed to generate study guide. Please check your API key and try again."
)
MALFORMED_MESSAGE = (
    "The study guide returned by the model could not be read. Please try again."
)


# ============================================================
# Errors
# ============================================================


class StudyGuideError(Exception):
    """Study guide generation failure with an API error code."""

    code = "STUDY_GUIDE_GENERATION_FAILED"
    status = 500

    def __init__(
        self,
        message: str = GENERATION_FAILED_MESSAGE,
        *,
        code: Optional[str] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status is not None:
            self.status = status


class MalformedStudyGuideError(StudyGuideError):
    code = "STUDY_GUIDE_MALFORMED"

    def __init__(self, detail: str):
        super().__init__(MALFORMED_MESSAGE)
        self.detail = detail


# ============================================================
# Data model
# ============================================================


@dataclass
class PracticeQuestion:
    question: str
    answer: str

    def to_dict(self) -> Dict[str, str]:
        return {"question": self.question, "answer": self.answer}


@dataclass
class StudyGuide:
    key_concepts: List[str]
    explanations: Dict[str, str]
    practice_questions: List[PracticeQuestion]
    cheat_sheet: str

    @classmethod
    def from_payload(cls, payload: Any) -> "StudyGuide":
        """Validate decoded model JSON and build a study guide from it."""
        if not isinstance(payload, dict):
            raise MalformedStudyGuideError("response is not a JSON object")

        missing = [
            key
            for key in ("keyConcepts", "explanations", "practiceQuestions", "cheatSheet")
            if key not in payload
        ]
        if missing:
            raise MalformedStudyGuideError(f"missing fields: {', '.join(missing)}")

        key_concepts = payload["keyConcepts"]
        if not isinstance(key_concepts, list) or not all(
            isinstance(item, str) for item in key_concepts
        ):
            raise MalformedStudyGuideError("keyConcepts must be a list of strings")

        explanations = payload["explanations"]
        if not isinstance(explanations, dict) or not all(
            isinstance(value, str) for value in explanations.values()
        ):
            raise MalformedStudyGuideError(
                "explanations must map concept names to strings"
            )

        raw_questions = payload["practiceQuestions"]
        if not isinstance(raw_questions, list):
            raise MalformedStudyGuideError("practiceQuestions must be a list")
        practice_questions = []
        for index, item in enumerate(raw_questions):
            if (
                not isinstance(item, dict)
                or not isinstance(item.get("question"), str)
                or not isinstance(item.get("answer"), str)
            ):
                raise MalformedStudyGuideError(
                    f"practiceQuestions[{index}] needs string question and answer"
                )
            practice_questions.append(
                PracticeQuestion(question=item["question"], answer=item["answer"])
            )

        cheat_sheet = payload["cheatSheet"]
        # Models occasionally answer with a list of bullet lines.
        if isinstance(cheat_sheet, list) and all(
            isinstance(line, str) for line in cheat_sheet
        ):
            cheat_sheet = "\n".join(cheat_sheet)
        if not isinstance(cheat_sheet, str):
            raise MalformedStudyGuideError("cheatSheet must be a string")

        return cls(
            key_concepts=list(key_concepts),
            explanations=dict(explanations),
            practice_questions=practice_questions,
            cheat_sheet=cheat_sheet,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keyConcepts": list(self.key_concepts),
            "explanations": dict(self.explanations),
            "practiceQuestions": [q.to_dict() for q in self.practice_questions],
            "cheatSheet": self.cheat_sheet,
        }


# ============================================================
# Prompt + response helpers
# ============================================================


def truncate_text(text: str, max_chars: int = 10000) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def build_prompt(text: str, max_chars: int = 10000) -> str:
    """Build the study guide prompt."""
    lecture_notes = truncate_text(text, max_chars)
    return f"""You are an expert study guide generator. Convert the following lecture notes into a comprehensive study guide.

LECTURE NOTES:
{lecture_notes}

Generate a structured study guide with the following sections:

1. KEY CONCEPTS: List the most important concepts as bullet points (5-10 concepts)
2. EXPLANATIONS: Provide short, clear explanations for each key concept (2-3 sentences each)
3. PRACTICE QUESTIONS: Create 5-8 practice questions with concise answers (questions should test understanding of the material)
4. CHEAT SHEET: A condensed summary with the most critical information in a quick-reference format

Format your response as valid JSON with this exact structure:
{{
  "keyConcepts": ["concept1", "concept2", ...],
  "explanations": {{
    "concept1": "explanation text",
    "concept2": "explanation text",
    ...
  }},
  "practiceQuestions": [
    {{
      "question": "question text",
      "answer": "answer text"
    }},
    ...
  ],
  "cheatSheet": "condensed summary text"
}}"""


def strip_code_fences(text: str) -> str:
    text = (text or "").strip()
    if text.startswith("```json"):
        text = re.sub(r"```json\n?", "", text)
        text = re.sub(r"```\n?", "", text)
    elif text.startswith("```"):
        text = re.sub(r"```\n?", "", text)
    return text.strip()


def _extract_first_json_object(text: str) -> Optional[str]:
    start = text.find("{")
    if start == -1:
        return None
    depth = 0
    in_string = False
    escape = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def parse_study_guide(raw_text: str) -> StudyGuide:
    """Decode the model answer, tolerating markdown fences and chatter."""
    json_text = strip_code_fences(raw_text)
    # Oversized integers raise ValueError and deep nesting RecursionError.
    try:
        payload = json.loads(json_text)
    except (ValueError, RecursionError):
        candidate = _extract_first_json_object(json_text)
        if candidate is None:
            raise MalformedStudyGuideError("response contains no JSON object")
        try:
            payload = json.loads(candidate)
        except (ValueError, RecursionError) as exc:
            raise MalformedStudyGuideError(
                f"invalid JSON ({type(exc).__name__})"
            ) from exc
    return StudyGuide.from_payload(payload)


# ============================================================
# Gemini generator
# ============================================================


class StudyGuideGenerator:
    """Study guide generator backed by the Google Gemini API."""

    def __init__(self):
        if not GENAI_AVAILABLE:
            raise StudyGuideError(
                "google-genai is not installed. Run pip install google-genai.",
                code="GENAI_NOT_AVAILABLE",
            )

        cfg = get_config().runtime
        api_key = (cfg.gemini_api_key or "").strip()
        if not api_key:
            raise StudyGuideError(
                "GEMINI_API_KEY or GOOGLE_API_KEY is not set.",
                code="GEMINI_API_KEY_MISSING",
            )

        self.api_key = api_key
        self.model_name = cfg.gemini_model_name
        self.temperature = cfg.gemini_temperature
        self.max_output_tokens = cfg.gemini_max_output_tokens
        self.max_input_chars = cfg.max_input_chars
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _invoke(self, prompt: str) -> str:
        response = self.client.models.generate_content(
            model=self.model_name,
            contents=prompt,
            config=types.GenerateContentConfig(
                system_instruction=SYSTEM_INSTRUCTION,
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
                thinking_config=types.ThinkingConfig(include_thoughts=False),
                response_mime_type="application/json",
            ),
        )
        return (response.text or "").strip()

    def generate(self, text: str) -> StudyGuide:
        prompt = build_prompt(text, self.max_input_chars)
        try:
            raw_text = self._invoke(prompt)
        except Exception as exc:
            logger.exception("Gemini request failed (model=%s)", self.model_name)
            raise StudyGuideError() from exc

        try:
            return parse_study_guide(raw_text)
        except MalformedStudyGuideError as exc:
            logger.warning(
                "Unreadable study guide from %s: %s (%d chars)",
                self.model_name,
                exc.detail,
                len(raw_text),
            )
            raise