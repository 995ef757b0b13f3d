"""
YouTube Thumbnail Studio - Configuration
========================================
Central configuration for the normalizer, prompt builders and Gemini clients.

Configuration is loaded from environment variables, which can be set in a .env file.
See .env.example for a template.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os

# Load environment variables from .env file
from dotenv import load_dotenv

from errors import MissingCredentialError

# Find the project directory
PROJECT_DIR = Path(__file__).parent

# Load .env file if it exists
env_path = PROJECT_DIR / ".env"
if env_path.exists():
    load_dotenv(env_path)

# =============================================================================
# API KEYS (loaded from .env - no defaults for security)
# =============================================================================

# Google Gemini API for image generation and suggestions.
# API_KEY is accepted for deployments configured with the generic variable name.
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", "")

# =============================================================================
# MODEL SETTINGS
# =============================================================================

# Image-capable model used for thumbnail generation (Nano Banana)
GEMINI_IMAGE_MODEL = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")

# Text model used for brainstorming suggestions (structured JSON output)
GEMINI_TEXT_MODEL = os.getenv("GEMINI_TEXT_MODEL", "gemini-2.5-flash")

# Seconds before a single remote call is abandoned (0 disables the timeout)
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "120"))

# =============================================================================
# THUMBNAIL SETTINGS
# =============================================================================

THUMBNAIL_WIDTH = 1280
THUMBNAIL_HEIGHT = 720

# JPEG quality for normalized uploads sent to the model (size over fidelity)
NORMALIZED_JPEG_QUALITY = int(os.getenv("NORMALIZED_JPEG_QUALITY", "92"))

# JPEG quality for downloaded thumbnails
EXPORT_JPEG_QUALITY = 100

# Number of ideas requested when brainstorming
NUM_SUGGESTIONS = 3

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


# =============================================================================
# RUNTIME SETTINGS
# =============================================================================

@dataclass(frozen=True)
class GeminiSettings:
    """Settings shared by the generation and suggestion clients."""
    api_key: str
    image_model: str = GEMINI_IMAGE_MODEL
    text_model: str = GEMINI_TEXT_MODEL
    request_timeout: Optional[float] = REQUEST_TIMEOUT_SECONDS or None
    num_suggestions: int = NUM_SUGGESTIONS


def load_settings(api_key: Optional[str] = None) -> GeminiSettings:
    """
    Build the settings once at startup.

    Args:
        api_key: Explicit credential; defaults to GEMINI_API_KEY from the environment

    Raises:
        MissingCredentialError: If no credential is configured
    """
    key = (api_key if api_key is not None else GEMINI_API_KEY).strip()
    if not key:
        raise MissingCredentialError(
            "GEMINI_API_KEY is not set. Add it to your environment or .env file."
        )
    return GeminiSettings(api_key=key)


def create_client(settings: GeminiSettings):
    """Create the google-genai client shared by both services."""
    from google import genai

    return genai.Client(api_key=settings.api_key)
