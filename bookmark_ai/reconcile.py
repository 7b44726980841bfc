"""Turn decoded, untrusted model documents into complete results.

The model may drop entries, repeat them, or invent ids. Nothing it
declares is used until it has been type- and bounds-checked here.
"""

import logging
from typing import List, Sequence

from .models import (
    OTHER_CATEGORY,
    UNCATEGORIZED,
    AnalysisResult,
    Bookmark,
    CategorizationDoc,
    CategorizedBookmark,
    CategorySet,
    DeclaredCategory,
    GeneratorDoc,
    Malformed,
    QueryDoc,
)

logger = logging.getLogger(__name__)


def _valid_id(value, size: int) -> bool:
    # bool is an int subclass; JSON true/false are not ids
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < size


def _label(value):
    if isinstance(value, str) and value.strip():
        return value
    return None


def validate_categorization(document, size: int) -> GeneratorDoc:
    """Check a decoded categorization document field by field.

    Entries whose id is not an integer in ``[0, size)`` are dropped, as are
    repeats of an id already seen. A missing or empty category becomes
    "Uncategorized".
    """
    if not isinstance(document, dict):
        return Malformed(f"expected an object, got {type(document).__name__}")

    raw_categories = document.get("categories")
    if not isinstance(raw_categories, list):
        raw_categories = []
    categories = [c for c in (_label(c) for c in raw_categories) if c is not None]

    raw_entries = document.get("bookmarks")
    if not isinstance(raw_entries, list):
        raw_entries = []

    entries = []
    seen = set()
    discarded = 0
    for raw in raw_entries:
        entry_id = raw.get("id") if isinstance(raw, dict) else None
        if not _valid_id(entry_id, size) or entry_id in seen:
            discarded += 1
            continue
        seen.add(entry_id)
        entries.append(DeclaredCategory(entry_id, _label(raw.get("category")) or UNCATEGORIZED))

    if discarded:
        logger.debug("Discarded %d unusable bookmark entries from model output", discarded)
    return CategorizationDoc(categories=categories, entries=entries)


def validate_query(document, size: int) -> GeneratorDoc:
    """Check a decoded query document.

    A missing or non-list ``relevantIds`` means nothing matched.
    """
    if not isinstance(document, dict):
        return Malformed(f"expected an object, got {type(document).__name__}")
    raw_ids = document.get("relevantIds")
    if not isinstance(raw_ids, list):
        logger.debug("relevantIds missing or not a list; treating as no matches")
        raw_ids = []

    relevant_ids = []
    for value in raw_ids:
        if _valid_id(value, size) and value not in relevant_ids:
            relevant_ids.append(value)
    if len(relevant_ids) != len(raw_ids):
        logger.debug("Dropped %d unusable relevant ids", len(raw_ids) - len(relevant_ids))
    return QueryDoc(relevant_ids=relevant_ids)


def reconcile_categorization(doc: CategorizationDoc, working_set: Sequence[Bookmark]) -> AnalysisResult:
    """Attach declared categories and reassign anything the model skipped.

    Every bookmark in ``working_set`` appears exactly once in the result:
    declared entries first, in model order, then the rest as "Other".
    """
    categorized: List[CategorizedBookmark] = []
    covered = set()
    for entry in doc.entries:
        categorized.append(working_set[entry.id].with_category(entry.category))
        covered.add(entry.id)

    missing = [i for i in range(len(working_set)) if i not in covered]
    if missing:
        logger.info("Model skipped %d bookmarks; assigning them to %r", len(missing), OTHER_CATEGORY)
    categorized.extend(working_set[i].with_category(OTHER_CATEGORY) for i in missing)

    categories = CategorySet(doc.categories)
    categories.add(OTHER_CATEGORY)
    return AnalysisResult(categories=categories.to_list(), bookmarks=categorized)


def select_relevant(doc: QueryDoc, bookmarks: Sequence[CategorizedBookmark]) -> List[CategorizedBookmark]:
    """Map ranked ids back to bookmarks, keeping the model's order."""
    return [bookmarks[i] for i in doc.relevant_ids]
