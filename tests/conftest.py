"""
Test Configuration and Fixtures

Shared fixtures for all tests in the project. The google-genai client is
replaced by a fake exposing `aio.models.generate_content`; responses are
built with the real `google.genai.types` models.
"""

import io
from typing import Optional

import pytest
from google.genai import types
from PIL import Image

from config import GeminiSettings
from image_processing import normalize_image
from schemas import (
    ImageReaction,
    Mood,
    ThumbnailRequest,
    ThumbnailStyle,
    UploadedImage,
)


# =============================================================================
# IMAGE HELPERS
# =============================================================================

def make_image_bytes(
    width: int,
    height: int,
    color: tuple = (220, 40, 40),
    fmt: str = "PNG",
    mode: str = "RGB",
) -> bytes:
    """Encode a solid-color image of the given size."""
    if mode == "RGBA" and len(color) == 3:
        color = (*color, 255)
    img = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def open_image(data: bytes) -> Image.Image:
    return Image.open(io.BytesIO(data)).convert("RGB")


def is_dark(pixel: tuple, tolerance: int = 24) -> bool:
    return all(channel <= tolerance for channel in pixel[:3])


def is_close(pixel: tuple, color: tuple, tolerance: int = 24) -> bool:
    return all(abs(a - b) <= tolerance for a, b in zip(pixel[:3], color[:3]))


# =============================================================================
# RESPONSE HELPERS
# =============================================================================

def image_response(data: bytes, mime_type: str = "image/png", text: Optional[str] = None) -> types.GenerateContentResponse:
    """A response whose first candidate carries an inline image (and optional text first)."""
    parts = []
    if text:
        parts.append(types.Part(text=text))
    parts.append(types.Part(inline_data=types.Blob(data=data, mime_type=mime_type)))
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=parts))]
    )


def text_response(text: str) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=[types.Part(text=text)]))]
    )


def empty_response() -> types.GenerateContentResponse:
    return types.GenerateContentResponse(candidates=[])


# =============================================================================
# FAKE GEMINI CLIENT
# =============================================================================

class FakeModels:
    """Records every generate_content call and replays queued results."""

    def __init__(self):
        self.calls: list[dict] = []
        self.results: list = []

    def queue(self, result) -> None:
        """Queue a response, or an exception instance to be raised."""
        self.results.append(result)

    async def generate_content(self, *, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if not self.results:
            raise AssertionError("No fake response queued")
        result = self.results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


class FakeAio:
    def __init__(self, models: FakeModels):
        self.models = models


class FakeGenaiClient:
    def __init__(self):
        self.models = FakeModels()
        self.aio = FakeAio(self.models)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def settings() -> GeminiSettings:
    """Settings with a dummy credential and a short timeout."""
    return GeminiSettings(
        api_key="test-key",
        image_model="gemini-2.5-flash-image",
        text_model="gemini-2.5-flash",
        request_timeout=5,
        num_suggestions=3,
    )


@pytest.fixture
def fake_client() -> FakeGenaiClient:
    return FakeGenaiClient()


@pytest.fixture
def uploaded_image() -> UploadedImage:
    """A normalized square upload (letterboxed left and right)."""
    return normalize_image(make_image_bytes(800, 800))


@pytest.fixture
def sample_request(uploaded_image: UploadedImage) -> ThumbnailRequest:
    """The reference scenario: AI ART MASTERY, Energetic / Excited / Realistic."""
    return ThumbnailRequest(
        image=uploaded_image,
        title="AI ART MASTERY",
        concept="A beginner's guide to creating stunning art with AI tools",
        background_concept="Abstract tech background with glowing lines",
        mood=Mood.ENERGETIC,
        image_reaction=ImageReaction.EXCITED,
        thumbnail_style=ThumbnailStyle.REALISTIC,
    )


@pytest.fixture
def generated_png() -> bytes:
    """What the image model would return: a 1280x720 PNG."""
    return make_image_bytes(1280, 720, color=(30, 144, 255))
