"""
YouTube Thumbnail Studio - Pydantic Schemas
===========================================
Request-scoped values exchanged between the session, the prompt builders
and the Gemini clients. All models are frozen: a request is built once per
call and never mutated.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# CLOSED ENUMERATIONS
# =============================================================================
# Values are the display strings shown to the user and sent to the model.

class Mood(str, Enum):
    """Overall emotional tone of the thumbnail."""
    ENERGETIC = "Energetic"
    DRAMATIC = "Dramatic"
    PROFESSIONAL = "Professional"
    FUNNY = "Funny"
    INSPIRATIONAL = "Inspirational"


class ImageReaction(str, Enum):
    """Facial expression requested for the subject."""
    SURPRISED = "Surprised"
    EXCITED = "Excited"
    THOUGHTFUL = "Thoughtful"
    HAPPY = "Happy"
    INTENSE = "Intense"


class ThumbnailStyle(str, Enum):
    """Artistic rendering style."""
    REALISTIC = "Realistic Photography"
    DRAWING = "Digital Drawing/Illustration"
    CARTOON = "Cartoon / Animated"
    THREE_D_RENDER = "3D Render"
    PIXEL_ART = "Pixel Art"


class Brightness(str, Enum):
    """Brightness adjustment for a refinement pass."""
    NORMAL = "normal"
    BRIGHTER = "brighter"
    DARKER = "darker"


class ImageEncoding(str, Enum):
    """Encodings accepted by the image model, as MIME types."""
    PNG = "image/png"
    JPEG = "image/jpeg"
    WEBP = "image/webp"


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Canonical value list of a closed enumeration, in declaration order."""
    return [member.value for member in enum_cls]


# =============================================================================
# IMAGES
# =============================================================================

class UploadedImage(BaseModel):
    """A canonical 1280x720 image ready to be sent as a reference."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., min_length=1)
    encoding: ImageEncoding = ImageEncoding.JPEG

    @property
    def mime_type(self) -> str:
        return self.encoding.value


# =============================================================================
# GENERATION REQUEST
# =============================================================================

class RefinementSet(BaseModel):
    """Adjustments applied when re-generating over a previous result."""

    model_config = ConfigDict(frozen=True)

    brightness: Brightness = Brightness.NORMAL
    color: str = Field("", description="Free-text color palette instruction")
    layout: str = Field("", description="Free-text layout instruction")

    @property
    def is_active(self) -> bool:
        """True when at least one field differs from its neutral default."""
        return (
            self.brightness != Brightness.NORMAL
            or bool(self.color.strip())
            or bool(self.layout.strip())
        )


class ThumbnailRequest(BaseModel):
    """Everything the prompt builder and generation client need for one call."""

    model_config = ConfigDict(frozen=True)

    image: UploadedImage
    title: str
    concept: str
    background_concept: str
    mood: Mood
    image_reaction: ImageReaction
    thumbnail_style: ThumbnailStyle
    refinements: Optional[RefinementSet] = None


# =============================================================================
# SUGGESTIONS
# =============================================================================

class ThumbnailSuggestion(BaseModel):
    """
    One brainstormed idea. Parsed from the camelCase JSON returned by the
    text model; enum fields must be members of their closed sets.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    background_concept: str = Field(..., alias="backgroundConcept")
    mood: Mood
    image_reaction: ImageReaction = Field(..., alias="imageReaction")
    thumbnail_style: ThumbnailStyle = Field(..., alias="thumbnailStyle")
