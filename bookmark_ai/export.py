"""Write categorized bookmarks back out as an importable Netscape file."""

import collections
import html
from typing import Dict, List, Sequence

from bs4 import BeautifulSoup
from tqdm import tqdm

from .models import AnalysisResult, Bookmark
from .normalize import normalize_url

HEADER = (
    "<!DOCTYPE NETSCAPE-Bookmark-file-1>\n"
    '<META HTTP-EQUIV="Content-Type" CONTENT="text/html; charset=UTF-8">\n'
    "<TITLE>Bookmarks</TITLE>\n"
    "<H1>Bookmarks</H1>\n"
    "<DL><p>\n"
)


def group_by_category(result: AnalysisResult) -> Dict[str, List[Bookmark]]:
    """Folders in the order of ``result.categories``, then any undeclared ones."""
    groups = collections.OrderedDict((name, []) for name in result.categories)
    for bookmark in result.bookmarks:
        groups.setdefault(bookmark.category, []).append(bookmark)
    return groups


def write_dl(folders: Dict[str, Sequence[Bookmark]], indent=4):
    """Emit DL/DT HTML lines, one H3 folder per non-empty category."""
    pad = " " * indent
    for name, links in folders.items():
        if not links:
            continue
        yield f"{pad}<DT><H3>{html.escape(name)}</H3>\n"
        yield f"{pad}<DL><p>\n"
        for b in links:
            yield (f'{pad}    <DT><A HREF="{html.escape(b.url)}" '
                   f'ADD_DATE="{b.add_date // 1000}">{html.escape(b.title)}</A>\n')
        yield f"{pad}</DL><p>\n"


def export_netscape(result: AnalysisResult, out_path: str, extra=None):
    """Write ``result`` to ``out_path``; ``extra`` maps folder name to more bookmarks."""
    folders = group_by_category(result)
    for name, links in (extra or {}).items():
        if links:
            folders.setdefault(name, []).extend(links)

    print(f"Exporting organized bookmarks to {out_path}...")
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(HEADER)
        lines = list(write_dl(folders, 4))
        for line in tqdm(lines, desc="Writing HTML", unit="line"):
            f.write(line)
        f.write("</DL><p>\n")


def verify_bookmarks(input_path, output_path) -> bool:
    """Check that every http(s) URL in the input file exists in the output.

    URLs are compared after normalize_url, so dropped duplicates do not count as missing.
    """
    print("Verifying bookmark preservation...")

    def urls(path):
        with open(path, encoding="utf-8") as f:
            soup = BeautifulSoup(f.read(), "html.parser")
        hrefs = (a.get("href") or "" for a in soup.find_all("a"))
        return {normalize_url(h) for h in hrefs if h.startswith("http")}

    input_urls = urls(input_path)
    output_urls = urls(output_path)
    missing_urls = input_urls - output_urls

    if not missing_urls:
        print(f"✓ All {len(input_urls)} bookmarks were preserved in the output file.")
        return True
    print(f"⚠ WARNING: {len(missing_urls)} bookmarks were not preserved in the output!")
    print(f"  Input: {len(input_urls)} URLs, Output: {len(output_urls)} URLs")
    if len(missing_urls) <= 5:
        for url in sorted(missing_urls):
            print(f"  Missing: {url}")
    return False
