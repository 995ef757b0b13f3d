"""
YouTube Thumbnail Studio - Errors
=================================
Exceptions raised by the normalizer, the Gemini clients and configuration.
"""

from typing import Optional


class ThumbnailError(Exception):
    """Base class for all thumbnail studio errors."""
    pass


class MissingCredentialError(ThumbnailError):
    """The Gemini API credential is not configured. Fatal at startup."""
    pass


class ValidationError(ThumbnailError):
    """Required user input is missing or unusable. No remote call was made."""
    pass


class EmptyResponseError(ThumbnailError):
    """The model returned no candidates, usually because of safety filtering."""
    pass


class MalformedResponseError(ThumbnailError):
    """A candidate was returned but it carries no content parts."""
    pass


class NoImageDataError(ThumbnailError):
    """The response is well formed but contains no image part."""
    pass


class InvalidSuggestionFormatError(ThumbnailError):
    """The suggestion response could not be parsed into suggestions."""

    def __init__(self, message: str, raw_text: Optional[str] = None):
        super().__init__(message)
        self.raw_text = raw_text


class TransportError(ThumbnailError):
    """The remote call itself failed or timed out."""
    pass
