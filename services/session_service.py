"""
Session Service

Form state for one user session and the orchestration boundary around the
generation and suggestion clients. Client errors are caught here and turned
into a single human-readable error value; loading flags are always cleared.
"""

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from config import GeminiSettings, create_client
from errors import ThumbnailError, ValidationError
from image_generation import ThumbnailGenerator
from image_processing import export_jpeg, export_png, normalize_image
from schemas import (
    Brightness,
    ImageReaction,
    Mood,
    RefinementSet,
    ThumbnailRequest,
    ThumbnailStyle,
    ThumbnailSuggestion,
    UploadedImage,
)
from services.suggestion_service import SuggestionGenerator
from utils import is_blank

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "My Awesome Video"
DEFAULT_CONCEPT = "A tutorial on how to use AI"
DEFAULT_BACKGROUND_CONCEPT = "Abstract tech background with glowing lines"

MISSING_IMAGE_MESSAGE = "Please upload an image first."
MISSING_FIELDS_MESSAGE = "Please fill out the Title, Core Concept, and Background Concept fields."


class ThumbnailSession:
    """Session state: current form values, uploaded image, results and flags."""

    def __init__(self, generator: ThumbnailGenerator, suggester: SuggestionGenerator):
        self.generator = generator
        self.suggester = suggester

        # Form values
        self.uploaded_image: Optional[UploadedImage] = None
        self.title = DEFAULT_TITLE
        self.concept = DEFAULT_CONCEPT
        self.background_concept = DEFAULT_BACKGROUND_CONCEPT
        self.mood = Mood.ENERGETIC
        self.image_reaction = ImageReaction.EXCITED
        self.thumbnail_style = ThumbnailStyle.REALISTIC
        self.refinements = RefinementSet()

        # Results (disjoint slots, each with its own loading flag)
        self.generated_thumbnail: Optional[bytes] = None
        self.suggestions: list[ThumbnailSuggestion] = []
        self.is_generating = False
        self.is_suggesting = False

        self.error: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: GeminiSettings, client=None) -> "ThumbnailSession":
        """Wire both clients to one shared google-genai client."""
        client = client or create_client(settings)
        return cls(
            ThumbnailGenerator(settings, client=client),
            SuggestionGenerator(settings, client=client),
        )

    @property
    def is_generated(self) -> bool:
        return self.generated_thumbnail is not None

    # =========================================================================
    # FORM
    # =========================================================================

    def upload_image(self, data: bytes) -> bool:
        """Normalize an uploaded file to the canonical 16:9 canvas."""
        try:
            self.uploaded_image = normalize_image(data)
        except ValidationError as e:
            logger.warning(f"Upload rejected: {e}")
            self.error = str(e)
            return False
        self.error = None
        return True

    def set_refinements(
        self,
        brightness: Optional[Brightness] = None,
        color: Optional[str] = None,
        layout: Optional[str] = None,
    ) -> RefinementSet:
        updates = {}
        if brightness is not None:
            updates["brightness"] = Brightness(brightness)
        if color is not None:
            updates["color"] = color
        if layout is not None:
            updates["layout"] = layout
        self.refinements = self.refinements.model_copy(update=updates)
        return self.refinements

    def apply_suggestion(self, suggestion: ThumbnailSuggestion) -> None:
        """Copy a brainstormed idea into the form. The concept is kept."""
        self.title = suggestion.title
        self.background_concept = suggestion.background_concept
        self.mood = suggestion.mood
        self.image_reaction = suggestion.image_reaction
        self.thumbnail_style = suggestion.thumbnail_style

    def build_request(self, is_refinement: bool = False) -> ThumbnailRequest:
        """
        Snapshot the form into an immutable request.

        Raises:
            ValidationError: Image or a required text field is missing, or a
                choice field holds a value outside its closed set
        """
        if self.uploaded_image is None:
            raise ValidationError(MISSING_IMAGE_MESSAGE)
        if is_blank(self.title) or is_blank(self.concept) or is_blank(self.background_concept):
            raise ValidationError(MISSING_FIELDS_MESSAGE)

        try:
            return ThumbnailRequest(
                image=self.uploaded_image,
                title=self.title,
                concept=self.concept,
                background_concept=self.background_concept,
                mood=self.mood,
                image_reaction=self.image_reaction,
                thumbnail_style=self.thumbnail_style,
                refinements=self.refinements if is_refinement else None,
            )
        except PydanticValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise ValidationError(f"Invalid form values: {fields}.") from e

    # =========================================================================
    # ACTIONS
    # =========================================================================

    async def generate(self, is_refinement: bool = False) -> Optional[bytes]:
        """
        Generate (or refine) the thumbnail.

        Returns the image bytes on success, None on failure; the reason is
        left in `error`.
        """
        if self.is_generating:
            logger.warning("Generation already in progress, ignoring request")
            return None

        try:
            request = self.build_request(is_refinement)
        except ValidationError as e:
            self.error = str(e)
            return None

        self.is_generating = True
        self.error = None
        if not is_refinement:
            self.generated_thumbnail = None

        try:
            self.generated_thumbnail = await self.generator.generate(request)
            return self.generated_thumbnail
        except ThumbnailError as e:
            self.error = f"Failed to generate thumbnail. Reason: {e}"
        except Exception as e:
            logger.exception("Unexpected error during thumbnail generation")
            self.error = f"Failed to generate thumbnail. Reason: {str(e) or 'An unknown error occurred.'}"
        finally:
            self.is_generating = False
        return None

    async def brainstorm(self, video_description: str) -> list[ThumbnailSuggestion]:
        """
        Ask for suggestions. On failure the previous suggestions are kept
        and the reason is left in `error`.
        """
        if self.is_suggesting:
            logger.warning("Suggestions already in progress, ignoring request")
            return self.suggestions

        self.is_suggesting = True
        self.error = None
        try:
            self.suggestions = await self.suggester.suggest(video_description)
        except ValidationError as e:
            self.error = str(e)
        except ThumbnailError as e:
            self.error = f"Failed to get suggestions. Reason: {e}"
        except Exception as e:
            logger.exception("Unexpected error while brainstorming")
            self.error = f"Failed to get suggestions. Reason: {str(e) or 'An unknown error occurred.'}"
        finally:
            self.is_suggesting = False
        return self.suggestions

    # =========================================================================
    # DOWNLOADS
    # =========================================================================

    def _require_thumbnail(self) -> bytes:
        if self.generated_thumbnail is None:
            raise ValidationError("There is no generated thumbnail to download.")
        return self.generated_thumbnail

    def download_png(self) -> bytes:
        return export_png(self._require_thumbnail())

    def download_jpeg(self) -> bytes:
        return export_jpeg(self._require_thumbnail())
