"""Read browser-exported (Netscape format) bookmark files."""

import logging
from typing import List

from bs4 import BeautifulSoup

from .models import Bookmark
from .normalize import now_ms

logger = logging.getLogger(__name__)


def _add_date_ms(value) -> int:
    # Netscape files store seconds
    try:
        return int(value) * 1000
    except (TypeError, ValueError):
        return now_ms()


def parse_bookmarks_html(content: str) -> List[Bookmark]:
    """Return one Bookmark per http(s) link in ``content``."""
    soup = BeautifulSoup(content, "html.parser")
    bookmarks = []
    for a in soup.find_all("a"):
        url = (a.get("href") or "").strip()
        if not url.startswith("http"):
            continue
        title = a.get_text(strip=True) or "Untitled"
        bookmarks.append(Bookmark(title, url, _add_date_ms(a.get("add_date"))))
    logger.debug("Parsed %d bookmarks from %d bytes of HTML", len(bookmarks), len(content))
    return bookmarks


def load_bookmarks(html_path: str) -> List[Bookmark]:
    with open(html_path, encoding="utf-8") as f:
        return parse_bookmarks_html(f.read())
