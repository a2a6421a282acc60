"""Client for turning source text into study items with the Gemini API."""
import json
import logging
from typing import Optional

import requests

from smartprep.config import DEFAULT_MAX_SOURCE_CHARS, DEFAULT_MODEL
from smartprep.exceptions import APIIntegrationError, ConfigurationError, GenerationError
from smartprep.models import ContentType, Difficulty, expected_item_tag, item_from_dict

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_TIMEOUT = 60
DEFAULT_TEMPERATURE = 0.7

GENERIC_FAILURE = "Failed to generate content. Please try again or reduce the text size."
MISSING_KEY = "API Key is missing. Please check your environment configuration."

SYSTEM_INSTRUCTION = """
You are an expert educational content creator.
Your goal is to generate high-quality study materials based strictly on the provided text.
Target Audience: High School / University Students.
Difficulty: {difficulty}.
Language: {language}.

Rules:
1. Do not hallucinate information not present in the text, but you may use general knowledge to explain concepts found in the text.
2. Format output strictly as JSON.
3. For MCQs, provide 4 distinct options.
4. For Flashcards, keep the front concise (concept/term) and back detailed (definition).
5. For Long QA, provide a structured answer.
"""

PROMPT_TEMPLATE = """
Based on the following text, generate {count} items of type {content_type}.

TEXT CONTEXT:
"{text}"
"""


def _string():
    return {"type": "STRING"}


def _string_array():
    return {"type": "ARRAY", "items": _string()}


def response_schema(content_type: ContentType) -> dict:
    """Declared output shape for a content type: an array of tagged objects."""
    tag = expected_item_tag(content_type)
    if tag == "MCQ":
        properties = {
            "question": _string(),
            "options": _string_array(),
            "correctAnswer": _string(),
            "explanation": _string(),
        }
        required = ["type", "question", "options", "correctAnswer", "explanation"]
    elif tag == "QA":
        properties = {"question": _string(), "answer": _string(), "points": _string_array()}
        required = ["type", "question", "answer"]
    else:
        properties = {"front": _string(), "back": _string()}
        required = ["type", "front", "back"]
    return {
        "type": "ARRAY",
        "items": {
            "type": "OBJECT",
            "properties": {"type": {"type": "STRING", "enum": [tag]}, **properties},
            "required": required,
        },
    }


def parse_items(raw_text: Optional[str], content_type: ContentType) -> list:
    """Parse the model's JSON text into items of the expected variant.

    A non-array top level yields an empty list. Elements tagged with another
    variant, or missing required fields, are dropped.
    """
    if not raw_text:
        return []
    data = json.loads(raw_text)
    if not isinstance(data, list):
        logger.warning("Generation response is %s, not an array; returning no items",
                       type(data).__name__)
        return []
    tag = expected_item_tag(content_type)
    items = []
    for index, entry in enumerate(data):
        if isinstance(entry, dict) and "type" not in entry:
            entry = {**entry, "type": tag}
        try:
            item = item_from_dict(entry)
        except ValueError as e:
            logger.warning("Dropping generated item %d: %s", index, e)
            continue
        if item.type != tag:
            logger.warning("Dropping generated item %d tagged %s, expected %s", index, item.type, tag)
            continue
        items.append(item)
    return items


class GeminiClient:
    def __init__(self, api_key: Optional[str], model: str = DEFAULT_MODEL,
                 max_source_chars: int = DEFAULT_MAX_SOURCE_CHARS,
                 temperature: float = DEFAULT_TEMPERATURE, timeout: int = DEFAULT_TIMEOUT):
        self.api_key = api_key
        self.model = model
        self.max_source_chars = max_source_chars
        self.temperature = temperature
        self.timeout = timeout

    def build_request(self, text: str, content_type: ContentType, count: int,
                      difficulty: Difficulty, language: str = "English") -> dict:
        content_type = ContentType(content_type)
        difficulty = Difficulty(difficulty)
        prompt = PROMPT_TEMPLATE.format(
            count=count,
            content_type=content_type.value,
            text=text[: self.max_source_chars],
        )
        system = SYSTEM_INSTRUCTION.format(difficulty=difficulty.value, language=language)
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "systemInstruction": {"parts": [{"text": system}]},
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": response_schema(content_type),
                "temperature": self.temperature,
            },
        }

    def _call_gemini(self, payload: dict) -> str:
        url = GEMINI_URL.format(model=self.model)
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        resp = requests.post(url, headers=headers, json=payload, timeout=self.timeout)
        resp.raise_for_status()
        body = resp.json()
        try:
            parts = body["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            raise APIIntegrationError("gemini returned no candidates")
        if not isinstance(parts, list):
            raise APIIntegrationError("gemini returned malformed content parts")
        texts = []
        for part in parts:
            text = part.get("text", "") if isinstance(part, dict) else None
            if not isinstance(text, str):
                raise APIIntegrationError("gemini returned a non-text content part")
            texts.append(text)
        return "".join(texts)

    def generate(self, text: str, content_type: ContentType, count: int,
                 difficulty: Difficulty, language: str = "English") -> list:
        if not self.api_key:
            raise ConfigurationError(MISSING_KEY)
        payload = self.build_request(text, content_type, count, difficulty, language)
        try:
            raw = self._call_gemini(payload)
            items = parse_items(raw, ContentType(content_type))
        except (requests.RequestException, APIIntegrationError, ValueError) as e:
            logger.error("Gemini generation error: %s", e)
            raise GenerationError(GENERIC_FAILURE) from None
        logger.info("Generated %d %s items", len(items), ContentType(content_type).value)
        return items
