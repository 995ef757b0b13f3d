"""
YouTube Thumbnail Studio - Image Generation Module
==================================================
Generates the final thumbnail with the Gemini image model (Nano Banana).

One request per call: the normalized reference image plus the text prompt,
image-only output. The first inline image of the first candidate is
returned as raw bytes.
"""

from enum import Enum
from typing import Optional

from google.genai import types

from config import GeminiSettings, create_client
from errors import (
    EmptyResponseError,
    MalformedResponseError,
    NoImageDataError,
    ThumbnailError,
)
from prompt_generation import build_thumbnail_prompt
from schemas import ThumbnailRequest
from utils import setup_logger, call_with_timeout, truncate

logger = setup_logger(__name__)


# =============================================================================
# RESPONSE EXTRACTION
# =============================================================================

class PartKind(str, Enum):
    """Shapes a content part of a Gemini response can take."""
    IMAGE = "image"
    TEXT = "text"
    UNKNOWN = "unknown"


def classify_part(part: types.Part) -> PartKind:
    """Decide what a response part carries."""
    inline = getattr(part, "inline_data", None)
    if inline is not None and inline.data:
        mime_type = inline.mime_type or ""
        if not mime_type or mime_type.startswith("image/"):
            return PartKind.IMAGE
        return PartKind.UNKNOWN
    if getattr(part, "text", None):
        return PartKind.TEXT
    return PartKind.UNKNOWN


def _block_reason(response: types.GenerateContentResponse) -> Optional[str]:
    feedback = getattr(response, "prompt_feedback", None)
    reason = getattr(feedback, "block_reason", None) if feedback else None
    return str(reason) if reason else None


def extract_image_bytes(response: types.GenerateContentResponse) -> bytes:
    """
    Pull the generated image out of a Gemini response.

    Raises:
        EmptyResponseError: No candidates at all
        MalformedResponseError: First candidate has no content parts
        NoImageDataError: Parts exist but none carries inline image data
    """
    candidates = response.candidates or []
    if not candidates:
        message = ("The AI did not return a response. This may be due to "
                   "safety filters or invalid input.")
        reason = _block_reason(response)
        if reason:
            message += f" (block reason: {reason})"
        raise EmptyResponseError(message)

    candidate = candidates[0]
    parts = candidate.content.parts if candidate.content else None
    if not parts:
        message = "The AI response did not contain any content."
        if candidate.finish_reason:
            message += f" (finish reason: {candidate.finish_reason})"
        raise MalformedResponseError(message)

    texts = []
    for part in parts:
        kind = classify_part(part)
        if kind == PartKind.IMAGE:
            return part.inline_data.data
        if kind == PartKind.TEXT:
            texts.append(part.text)

    message = "No image data found in the response from Gemini API."
    if texts:
        message += f" Model said: {truncate(' '.join(texts))}"
    raise NoImageDataError(message)


# =============================================================================
# GENERATION CLIENT
# =============================================================================

class ThumbnailGenerator:
    """Single request/response cycle against the Gemini image model."""

    def __init__(self, settings: GeminiSettings, client=None):
        self.settings = settings
        self.client = client or create_client(settings)

    @property
    def model(self) -> str:
        return self.settings.image_model

    def build_contents(self, request: ThumbnailRequest, prompt: str) -> types.Content:
        """Reference image first, then the instruction text."""
        image_part = types.Part.from_bytes(
            data=request.image.data,
            mime_type=request.image.mime_type,
        )
        text_part = types.Part.from_text(text=prompt)
        return types.Content(role="user", parts=[image_part, text_part])

    async def generate(self, request: ThumbnailRequest) -> bytes:
        """
        Generate one thumbnail.

        Args:
            request: Form values plus the normalized reference image

        Returns:
            Raw image bytes (PNG)

        Raises:
            TransportError: The call failed or timed out
            EmptyResponseError, MalformedResponseError, NoImageDataError:
                The response did not carry an image
        """
        prompt = build_thumbnail_prompt(request)
        refining = request.refinements is not None and request.refinements.is_active

        logger.info(f"Generating thumbnail with Gemini ({self.model})"
                    f"{' - refinement pass' if refining else ''}...")
        logger.debug(f"Prompt length: {len(prompt)} chars")

        try:
            response = await call_with_timeout(
                self.client.aio.models.generate_content(
                    model=self.model,
                    contents=[self.build_contents(request, prompt)],
                    config=types.GenerateContentConfig(
                        response_modalities=["IMAGE"],
                    ),
                ),
                self.settings.request_timeout,
                f"Gemini image generation ({self.model})",
            )
            image_data = extract_image_bytes(response)
        except ThumbnailError as e:
            logger.error(f"Thumbnail generation failed: {e}")
            raise

        logger.success(f"Thumbnail generated ({len(image_data) // 1024} KB)")
        return image_data
