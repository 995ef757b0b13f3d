"""
Services Package

Business logic layer for the application.
"""

from .suggestion_service import SuggestionGenerator
from .session_service import ThumbnailSession

__all__ = ['SuggestionGenerator', 'ThumbnailSession']
