import json
from unittest.mock import MagicMock

import pytest

from bookmark_ai.client import GeneratorClient
from bookmark_ai.config import AIConfig
from bookmark_ai.models import Bookmark, CategorizedBookmark


def completion(content):
    """A chat completion response object carrying ``content``."""
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


@pytest.fixture
def config():
    return AIConfig(api_key="test-key", model="test-model")


@pytest.fixture
def make_generator(config):
    """Build a GeneratorClient whose SDK client returns the given text (or dict)."""
    def _make(content, cfg=None):
        if not isinstance(content, str):
            content = json.dumps(content)
        sdk = MagicMock()
        sdk.chat.completions.create.return_value = completion(content)
        return GeneratorClient(cfg or config, client=sdk)
    return _make


@pytest.fixture
def bookmarks():
    return [
        Bookmark("A", "http://a", 1700000000000),
        Bookmark("B", "http://b", 1700000001000),
        Bookmark("C", "https://c.example/page", 1700000002000),
    ]


@pytest.fixture
def categorized():
    return [
        CategorizedBookmark("Python docs", "https://docs.python.org", 1700000000000, "Docs"),
        CategorizedBookmark("Recipes", "https://cooking.example", 1700000001000, "Food"),
        CategorizedBookmark("pytest", "https://pytest.org", 1700000002000, "Docs"),
    ]
