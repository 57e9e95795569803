"""
LLM Service Module.

This module provides the LLMService class, which interfaces with the Google Gemini API
to summarize articles and to produce structured topic briefings for the
Entrepreneur NASHRA reader.
"""

import json

import logging
from typing import Any, Optional
from google import genai
from google.genai import types
from nashra.errors import ConfigurationError, UpstreamError
from nashra.models import BriefingResult

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_SUMMARY_CHAR_BUDGET = 2000

BRIEFING_TEXT_FIELDS = ("title", "summary", "outlook")

BRIEFING_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "title": types.Schema(type=types.Type.STRING),
        "summary": types.Schema(type=types.Type.STRING),
        "keyPoints": types.Schema(
            type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING)
        ),
        "outlook": types.Schema(type=types.Type.STRING),
    },
    required=["title", "summary", "keyPoints", "outlook"],
)

_LANGUAGE_NAMES = {
    "ar": "professional Modern Standard Arabic",
    "en": "clear professional English",
}


class LLMService:
    """
    Service for interacting with the Google Gemini API.

    The client is created once per service. Both operations refuse to run
    without a credential and never retry on their own.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        summary_char_budget: int = DEFAULT_SUMMARY_CHAR_BUDGET,
        language: str = "ar",
    ):
        self.api_key = (api_key or "").strip()
        self.model = model
        self.summary_char_budget = summary_char_budget
        self.language = language
        self.client: Optional[genai.Client] = None
        if not self.api_key:
            logger.warning("GEMINI_API_KEY not set. AI features disabled.")
            return
        try:
            self.client = genai.Client(api_key=self.api_key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Failed to initialize Gemini client: %s", e)
            self.client = None

    _SUMMARY_PROMPT = """
        You are the smart assistant of the "Entrepreneur NASHRA" newspaper.
        Summarize the following article as short, engaging bullet points (3 points at most).
        Make the summary useful for entrepreneurs and technologists.
        Write the summary in {language}.
        {truncation_note}
        Article title: "{title}"
        Content: "{excerpt}"
        """

    _BRIEFING_PROMPT = """
        You are an expert business and technology analyst for the "Entrepreneur NASHRA" newspaper.
        Write a short analytical report on the following topic: "{topic}".
        The report must be written in {language}.

        Required output, as JSON:
        1. title: a catchy title for the report.
        2. summary: an executive summary (about 50 words).
        3. keyPoints: a list of 3-5 key points or expected statistics.
        4. outlook: a short future outlook (20 words).
        """

    def _language_name(self) -> str:
        return _LANGUAGE_NAMES.get(self.language, _LANGUAGE_NAMES["ar"])

    def _require_client(self) -> genai.Client:
        """Returns the Gemini client or fails before any network call."""
        if not self.client:
            logger.error("Gemini client not initialized.")
            raise ConfigurationError("Gemini client not initialized")
        return self.client

    def _parse_json_response(self, text: str) -> Any:
        """Safely parses JSON from LLM output, handling markdown blocks."""
        cleaned = text.strip()
        # Strip Markdown code blocks usually returned by Gemini
        if cleaned.startswith("```"):
            # Remove opening ```json or ```
            cleaned = cleaned.split("\n", 1)[1] if "\n" in cleaned else ""
            # Remove closing ```
            if cleaned.rstrip().endswith("```"):
                cleaned = cleaned.rstrip()[:-3]

        return json.loads(cleaned)

    def truncate_content(self, content: str) -> str:
        """Returns the bounded prefix of the content that goes into the prompt."""
        return content[: self.summary_char_budget]

    def _get_summary_prompt(self, title: str, content: str) -> str:
        excerpt = self.truncate_content(content)
        truncation_note = ""
        if len(excerpt) < len(content):
            truncation_note = "The content below is only the opening part of the article."
        return self._SUMMARY_PROMPT.format(
            language=self._language_name(),
            truncation_note=truncation_note,
            title=title,
            excerpt=excerpt,
        )

    def _get_briefing_prompt(self, topic: str) -> str:
        return self._BRIEFING_PROMPT.format(topic=topic, language=self._language_name())

    @staticmethod
    def _validate_briefing(data: Any) -> BriefingResult:
        """Checks the parsed payload is a complete briefing, or raises ValueError."""
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")

        fields = {}
        for name in BRIEFING_TEXT_FIELDS:
            value = data.get(name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"missing or blank field {name!r}")
            fields[name] = value.strip()

        key_points = data.get("keyPoints")
        if not isinstance(key_points, list) or not key_points:
            raise ValueError("missing or empty field 'keyPoints'")
        if not all(isinstance(p, str) and p.strip() for p in key_points):
            raise ValueError("'keyPoints' must hold non-blank strings")

        return BriefingResult(
            title=fields["title"],
            summary=fields["summary"],
            keyPoints=[p.strip() for p in key_points],
            outlook=fields["outlook"],
        )

    async def summarize(self, title: str, content: str) -> str:
        """Asks Gemini for a short bullet summary of an article."""
        client = self._require_client()
        if not title.strip() and not content.strip():
            raise ValueError("Nothing to summarize.")

        prompt = self._get_summary_prompt(title, content)
        logger.info("Asking Gemini to summarize %r...", title[:60])
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
            )
            response_text = response.text if response.text else ""
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Summarization error: %s", e)
            raise UpstreamError(str(e), "summary_failed") from e

        if not response_text.strip():
            logger.error("Gemini returned an empty summary for %r.", title[:60])
            raise UpstreamError("empty response", "summary_failed")
        return response_text.strip()

    async def brief(self, topic: str) -> BriefingResult:
        """Asks Gemini for a structured briefing on a free-form topic."""
        client = self._require_client()
        if not topic.strip():
            raise ValueError("Topic must not be blank.")

        prompt = self._get_briefing_prompt(topic.strip())
        logger.info("Asking Gemini for a briefing on %r...", topic)
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=BRIEFING_SCHEMA,
                ),
            )
            response_text = response.text if response.text else ""
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error generating briefing: %s", e)
            raise UpstreamError(str(e), "briefing_failed") from e

        if not response_text.strip():
            logger.error("Gemini returned an empty briefing for %r.", topic)
            raise UpstreamError("empty response", "briefing_failed")

        try:
            # Use robust parser
            return self._validate_briefing(self._parse_json_response(response_text))
        except (json.JSONDecodeError, ValueError) as e:
            logger.error("Failed to parse Gemini response: %s", e)
            raise UpstreamError(str(e), "briefing_failed") from e
