"""Caller input coercion and working-set truncation."""

import logging
import time
from typing import List, Sequence

from .errors import ValidationError
from .models import UNCATEGORIZED, Bookmark, CategorizedBookmark, IndexedBookmark

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def _coerce_one(item, position: int, categorized: bool) -> Bookmark:
    if isinstance(item, Bookmark):
        if categorized and not isinstance(item, CategorizedBookmark):
            return item.with_category(UNCATEGORIZED)
        return item
    if not isinstance(item, dict):
        raise ValidationError(f"Bookmark {position} is not an object.")

    url = item.get("url")
    if not isinstance(url, str) or not url:
        raise ValidationError(f"Bookmark {position} has no url.")
    title = item.get("title")
    if not isinstance(title, str):
        title = ""
    add_date = item.get("addDate", item.get("add_date"))
    if isinstance(add_date, bool) or not isinstance(add_date, int):
        add_date = now_ms()

    if categorized:
        category = item.get("category")
        if not isinstance(category, str) or not category.strip():
            category = UNCATEGORIZED
        return CategorizedBookmark(title, url, add_date, category)
    return Bookmark(title, url, add_date)


def coerce_bookmarks(items, categorized: bool = False) -> List[Bookmark]:
    """Turn caller-supplied records (dicts or Bookmark objects) into Bookmarks."""
    if not isinstance(items, (list, tuple)):
        raise ValidationError("Invalid bookmarks data provided: expected a list.")
    return [_coerce_one(item, i, categorized) for i, item in enumerate(items)]


def index_working_set(bookmarks: Sequence[Bookmark], limit: int) -> List[IndexedBookmark]:
    """Keep the first ``limit`` bookmarks and number them by position."""
    if len(bookmarks) > limit:
        logger.warning(
            "Only the first %d of %d bookmarks will be sent to the model; the rest are skipped.",
            limit, len(bookmarks),
        )
    working_set = []
    for index, bookmark in enumerate(bookmarks[:limit]):
        category = getattr(bookmark, "category", None)
        working_set.append(IndexedBookmark(index, bookmark.title, bookmark.url, category))
    return working_set


def normalize_url(url: str) -> str:
    """Lowercase and drop a trailing slash, for duplicate detection."""
    return url.lower().rstrip('/')
