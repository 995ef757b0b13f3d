"""
Unit Tests for ThumbnailSession

Form validation, loading flags, error reporting and downloads at the
orchestration boundary.
"""

import json

import pytest
from PIL import Image

from errors import ValidationError
from schemas import Brightness, ImageReaction, Mood, ThumbnailStyle, ThumbnailSuggestion
from services.session_service import (
    DEFAULT_TITLE,
    MISSING_FIELDS_MESSAGE,
    MISSING_IMAGE_MESSAGE,
    ThumbnailSession,
)
from tests.conftest import (
    empty_response,
    image_response,
    make_image_bytes,
    open_image,
    text_response,
)


SUGGESTIONS_JSON = json.dumps([
    {
        "title": f"IDEA {i}",
        "backgroundConcept": f"Background {i}",
        "mood": "Dramatic",
        "imageReaction": "Intense",
        "thumbnailStyle": "3D Render",
    }
    for i in range(3)
])


@pytest.fixture
def session(settings, fake_client) -> ThumbnailSession:
    return ThumbnailSession.from_settings(settings, client=fake_client)


@pytest.fixture
def ready_session(session) -> ThumbnailSession:
    """A session with an uploaded image and the default form values."""
    assert session.upload_image(make_image_bytes(1080, 1920)) is True
    return session


# =============================================================================
# FORM
# =============================================================================

class TestForm:
    """Tests for form state handling"""

    def test_defaults(self, session):
        assert session.title == DEFAULT_TITLE
        assert session.mood == Mood.ENERGETIC
        assert session.image_reaction == ImageReaction.EXCITED
        assert session.thumbnail_style == ThumbnailStyle.REALISTIC
        assert session.refinements.is_active is False
        assert session.is_generated is False

    def test_upload_normalizes_to_canonical_canvas(self, session):
        assert session.upload_image(make_image_bytes(1080, 1920)) is True

        assert session.uploaded_image.mime_type == "image/jpeg"
        assert open_image(session.uploaded_image.data).size == (1280, 720)

    def test_rejected_upload_sets_error(self, session):
        assert session.upload_image(b"not an image") is False

        assert session.uploaded_image is None
        assert "Could not read" in session.error

    def test_oversized_upload_sets_error(self, session, monkeypatch):
        """Images over Pillow's pixel limit are rejected, not raised."""
        data = make_image_bytes(100, 100)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

        assert session.upload_image(data) is False

        assert session.uploaded_image is None
        assert "Could not read" in session.error

    def test_set_refinements_updates_only_given_fields(self, session):
        session.set_refinements(color="teal and orange")
        session.set_refinements(brightness="brighter")

        assert session.refinements.brightness == Brightness.BRIGHTER
        assert session.refinements.color == "teal and orange"
        assert session.refinements.layout == ""

    def test_apply_suggestion_keeps_concept(self, session):
        session.concept = "How I built a robot"
        suggestion = ThumbnailSuggestion(
            title="ROBOT BUILD",
            background_concept="Sparks flying in a dark workshop",
            mood=Mood.DRAMATIC,
            image_reaction=ImageReaction.INTENSE,
            thumbnail_style=ThumbnailStyle.THREE_D_RENDER,
        )

        session.apply_suggestion(suggestion)

        assert session.title == "ROBOT BUILD"
        assert session.background_concept == "Sparks flying in a dark workshop"
        assert session.mood == Mood.DRAMATIC
        assert session.image_reaction == ImageReaction.INTENSE
        assert session.thumbnail_style == ThumbnailStyle.THREE_D_RENDER
        assert session.concept == "How I built a robot"


# =============================================================================
# GENERATION
# =============================================================================

class TestGenerate:
    """Tests for ThumbnailSession.generate()"""

    async def test_missing_image(self, session, fake_client):
        result = await session.generate()

        assert result is None
        assert session.error == MISSING_IMAGE_MESSAGE
        assert session.is_generating is False
        assert fake_client.models.calls == []

    @pytest.mark.parametrize("field", ["title", "concept", "background_concept"])
    async def test_blank_required_field(self, ready_session, fake_client, field):
        setattr(ready_session, field, "   ")

        result = await ready_session.generate()

        assert result is None
        assert ready_session.error == MISSING_FIELDS_MESSAGE
        assert fake_client.models.calls == []

    async def test_success(self, ready_session, fake_client, generated_png):
        fake_client.models.queue(image_response(generated_png))

        result = await ready_session.generate()

        assert result == generated_png
        assert ready_session.generated_thumbnail == generated_png
        assert ready_session.is_generated is True
        assert ready_session.is_generating is False
        assert ready_session.error is None

    async def test_failure_sets_error_and_clears_loading(self, ready_session, fake_client):
        fake_client.models.queue(text_response("I cannot do that."))

        result = await ready_session.generate()

        assert result is None
        assert ready_session.is_generating is False
        assert ready_session.error.startswith("Failed to generate thumbnail. Reason: ")
        assert "No image data found" in ready_session.error

    async def test_new_generation_clears_previous_result(self, ready_session, fake_client, generated_png):
        fake_client.models.queue(image_response(generated_png))
        await ready_session.generate()
        fake_client.models.queue(empty_response())

        await ready_session.generate()

        assert ready_session.generated_thumbnail is None
        assert "safety filters" in ready_session.error

    async def test_failed_refinement_keeps_previous_result(self, ready_session, fake_client, generated_png):
        fake_client.models.queue(image_response(generated_png))
        await ready_session.generate()
        ready_session.set_refinements(brightness=Brightness.DARKER)
        fake_client.models.queue(ConnectionError("network down"))

        await ready_session.generate(is_refinement=True)

        assert ready_session.generated_thumbnail == generated_png
        assert "network down" in ready_session.error

    async def test_refinements_only_sent_on_refinement_pass(self, ready_session, fake_client, generated_png):
        ready_session.set_refinements(color="neon green")
        fake_client.models.queue(image_response(generated_png))
        fake_client.models.queue(image_response(generated_png))

        await ready_session.generate()
        await ready_session.generate(is_refinement=True)

        first_prompt = fake_client.models.calls[0]["contents"][0].parts[1].text
        second_prompt = fake_client.models.calls[1]["contents"][0].parts[1].text
        assert "Refinement" not in first_prompt
        assert "Use color palette: neon green." in second_prompt

    async def test_refinement_reuses_original_upload(self, ready_session, fake_client, generated_png):
        fake_client.models.queue(image_response(generated_png))
        fake_client.models.queue(image_response(generated_png))

        await ready_session.generate()
        await ready_session.generate(is_refinement=True)

        reference = fake_client.models.calls[1]["contents"][0].parts[0].inline_data.data
        assert reference == ready_session.uploaded_image.data

    async def test_unexpected_error_is_reported(self, ready_session, monkeypatch):
        async def explode(request):
            raise RuntimeError()

        monkeypatch.setattr(ready_session.generator, "generate", explode)

        await ready_session.generate()

        assert ready_session.error == "Failed to generate thumbnail. Reason: An unknown error occurred."
        assert ready_session.is_generating is False

    async def test_out_of_domain_choice_sets_error(self, ready_session, fake_client):
        """A choice outside its closed set is reported like any other form error."""
        ready_session.mood = "Sad"

        result = await ready_session.generate()

        assert result is None
        assert ready_session.error == "Invalid form values: mood."
        assert ready_session.is_generating is False
        assert fake_client.models.calls == []

    async def test_ignored_while_generating(self, ready_session, fake_client):
        ready_session.is_generating = True

        assert await ready_session.generate() is None
        assert fake_client.models.calls == []


# =============================================================================
# BRAINSTORMING
# =============================================================================

class TestBrainstorm:
    """Tests for ThumbnailSession.brainstorm()"""

    async def test_success(self, session, fake_client):
        fake_client.models.queue(text_response(SUGGESTIONS_JSON))

        result = await session.brainstorm("Building a robot from scrap")

        assert [s.title for s in result] == ["IDEA 0", "IDEA 1", "IDEA 2"]
        assert session.suggestions == result
        assert session.is_suggesting is False
        assert session.error is None

    async def test_blank_description(self, session, fake_client):
        await session.brainstorm("  ")

        assert session.error == "Please describe your video to get suggestions."
        assert session.is_suggesting is False
        assert fake_client.models.calls == []

    async def test_malformed_output_keeps_previous_suggestions(self, session, fake_client):
        fake_client.models.queue(text_response(SUGGESTIONS_JSON))
        previous = await session.brainstorm("Building a robot from scrap")
        fake_client.models.queue(text_response("not json at all"))

        result = await session.brainstorm("Building a robot from scrap")

        assert result == previous
        assert session.suggestions == previous
        assert session.error.startswith("Failed to get suggestions. Reason: ")
        assert session.is_suggesting is False

    async def test_generation_result_untouched_by_brainstorm(self, ready_session, fake_client, generated_png):
        fake_client.models.queue(image_response(generated_png))
        await ready_session.generate()
        fake_client.models.queue(text_response(SUGGESTIONS_JSON))

        await ready_session.brainstorm("Building a robot from scrap")

        assert ready_session.generated_thumbnail == generated_png


# =============================================================================
# DOWNLOADS
# =============================================================================

class TestDownloads:
    """Tests for PNG and JPEG downloads"""

    def test_nothing_to_download(self, session):
        with pytest.raises(ValidationError):
            session.download_png()
        with pytest.raises(ValidationError):
            session.download_jpeg()

    async def test_png_and_jpeg(self, ready_session, fake_client, generated_png):
        fake_client.models.queue(image_response(generated_png))
        await ready_session.generate()

        assert ready_session.download_png() == generated_png
        assert open_image(ready_session.download_jpeg()).size == (1280, 720)
