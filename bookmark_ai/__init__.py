"""Categorize and search bookmarks with a chat completion model."""

from .config import AIConfig
from .errors import (
    BookmarkAIError,
    ConfigurationError,
    ResponseFormatError,
    UpstreamError,
    ValidationError,
)
from .models import AnalysisResult, Bookmark, CategorizedBookmark
from .service import analyze, ask

__all__ = [
    "AIConfig",
    "AnalysisResult",
    "Bookmark",
    "BookmarkAIError",
    "CategorizedBookmark",
    "ConfigurationError",
    "ResponseFormatError",
    "UpstreamError",
    "ValidationError",
    "analyze",
    "ask",
]
