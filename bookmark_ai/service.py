"""The two operations exposed to callers: ``analyze`` and ``ask``.

Both are stateless; each call makes at most one request to the model and
surfaces any failure as a :class:`~bookmark_ai.errors.BookmarkAIError`.
"""

import logging
from typing import List, Optional

from .client import GeneratorClient
from .config import AIConfig
from .errors import ValidationError
from .models import OTHER_CATEGORY, AnalysisResult, CategorizedBookmark
from .normalize import coerce_bookmarks, index_working_set
from .prompts import categorize_messages, query_messages
from .reconcile import reconcile_categorization, select_relevant, validate_categorization, validate_query
from .repair import parse_document

logger = logging.getLogger(__name__)


def _resolve(config: Optional[AIConfig], generator: Optional[GeneratorClient]):
    """Pick the settings for a call; a generator brings its own config."""
    if generator is not None:
        if config is not None and config != generator.config:
            raise ValueError("Pass either config or a generator built with it, not two different configs.")
        config = generator.config
    elif config is None:
        config = AIConfig.from_env()
    config.require_api_key()
    return config


def analyze(bookmarks, config: Optional[AIConfig] = None,
            generator: Optional[GeneratorClient] = None) -> AnalysisResult:
    """Group bookmarks into a handful of categories.

    Only the first ``config.analyze_limit`` bookmarks are sent to the model;
    the result holds exactly one entry for each of those and no others.

    When ``generator`` is given, its ``config`` is used; passing a different
    ``config`` alongside it is a ValueError.
    """
    source = coerce_bookmarks(bookmarks)
    config = _resolve(config, generator)
    if not source:
        return AnalysisResult(categories=[OTHER_CATEGORY], bookmarks=[])

    working_set = index_working_set(source, config.analyze_limit)
    generator = generator or GeneratorClient(config)
    logger.info("Categorizing %d bookmarks", len(working_set))

    raw = generator.complete(
        categorize_messages(working_set),
        temperature=config.analyze_temperature,
        max_tokens=config.analyze_max_tokens,
    )
    doc = validate_categorization(parse_document(raw), len(working_set))

    result = reconcile_categorization(doc, source[: len(working_set)])
    logger.info("Categorized %d bookmarks into %d categories", len(result.bookmarks), len(result.categories))
    return result


def ask(query, bookmarks, config: Optional[AIConfig] = None,
        generator: Optional[GeneratorClient] = None) -> List[CategorizedBookmark]:
    """Return the categorized bookmarks relevant to ``query``, best match first."""
    if not isinstance(query, str) or not query.strip():
        raise ValidationError("Invalid query provided: expected a non-empty string.")
    source = coerce_bookmarks(bookmarks, categorized=True)
    config = _resolve(config, generator)
    if not source:
        return []

    working_set = index_working_set(source, config.query_limit)
    generator = generator or GeneratorClient(config)
    logger.info("Searching %d bookmarks for %r", len(working_set), query)

    raw = generator.complete(
        query_messages(query.strip(), working_set),
        temperature=config.query_temperature,
        max_tokens=config.query_max_tokens,
    )
    doc = validate_query(parse_document(raw), len(working_set))
    return select_relevant(doc, source)
