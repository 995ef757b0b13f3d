"""
Suggestion Service
==================
Brainstorms thumbnail ideas from a free-text video description using a
Gemini text model with structured JSON output.

The response schema constrains mood, reaction and style to their closed
value sets; the parsed result is re-validated against the same models.
"""

import json
import logging
import re
from typing import Optional

from google.genai import types
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from config import GeminiSettings, create_client
from errors import (
    EmptyResponseError,
    InvalidSuggestionFormatError,
    ThumbnailError,
    ValidationError,
)
from prompt_generation import build_suggestion_prompt, build_suggestion_schema
from schemas import ThumbnailSuggestion
from utils import call_with_timeout, is_blank, truncate

logger = logging.getLogger(__name__)

_SUGGESTION_LIST = TypeAdapter(list[ThumbnailSuggestion])

# ```json ... ``` wrapper some models add despite the JSON mime type
_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


# =============================================================================
# PARSING
# =============================================================================

def parse_suggestions(raw_text: Optional[str]) -> list[ThumbnailSuggestion]:
    """
    Parse the model output into suggestions.

    Every item must be a complete suggestion with in-domain enum values;
    nothing is dropped or coerced.

    Raises:
        InvalidSuggestionFormatError: Text is empty, not JSON, not an array,
            or an item does not match the suggestion model
    """
    text = (raw_text or "").strip()
    if not text:
        raise InvalidSuggestionFormatError("The AI returned an empty suggestion list.", raw_text)

    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidSuggestionFormatError(
            f"The AI returned suggestions in an invalid format: {e.msg}. "
            f"Raw response: {truncate(raw_text)}",
            raw_text,
        ) from e

    if not isinstance(data, list):
        raise InvalidSuggestionFormatError(
            f"Expected a JSON array of suggestions, got {type(data).__name__}. "
            f"Raw response: {truncate(raw_text)}",
            raw_text,
        )

    try:
        return _SUGGESTION_LIST.validate_python(data)
    except PydanticValidationError as e:
        raise InvalidSuggestionFormatError(
            f"The AI returned suggestions that do not match the expected fields "
            f"({e.error_count()} error(s)). Raw response: {truncate(raw_text)}",
            raw_text,
        ) from e


# =============================================================================
# SUGGESTION CLIENT
# =============================================================================

class SuggestionGenerator:
    """Single request/response cycle against the Gemini text model."""

    def __init__(self, settings: GeminiSettings, client=None):
        self.settings = settings
        self.client = client or create_client(settings)

    @property
    def model(self) -> str:
        return self.settings.text_model

    @property
    def count(self) -> int:
        return self.settings.num_suggestions

    def build_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=build_suggestion_schema(self.count),
        )

    async def suggest(self, video_description: str) -> list[ThumbnailSuggestion]:
        """
        Brainstorm thumbnail ideas for a video.

        Args:
            video_description: Free-text description of the video

        Returns:
            Parsed suggestions, normally exactly `count` of them

        Raises:
            ValidationError: The description is blank (no remote call is made)
            TransportError: The call failed or timed out
            EmptyResponseError: The model returned no candidates
            InvalidSuggestionFormatError: The output could not be parsed
        """
        if is_blank(video_description):
            raise ValidationError("Please describe your video to get suggestions.")

        prompt = build_suggestion_prompt(video_description, self.count)
        logger.info(f"Requesting {self.count} thumbnail suggestions from Gemini ({self.model})")

        try:
            response = await call_with_timeout(
                self.client.aio.models.generate_content(
                    model=self.model,
                    contents=prompt,
                    config=self.build_config(),
                ),
                self.settings.request_timeout,
                f"Gemini suggestions ({self.model})",
            )
            if not response.candidates:
                raise EmptyResponseError(
                    "The AI did not return any suggestions. This may be due to "
                    "safety filters or invalid input."
                )
            suggestions = parse_suggestions(response.text)
        except ThumbnailError as e:
            logger.error(f"Suggestion generation failed: {e}")
            raise

        if len(suggestions) != self.count:
            logger.warning(f"Expected {self.count} suggestions, got {len(suggestions)}")

        logger.info(f"Received {len(suggestions)} suggestions")
        return suggestions
