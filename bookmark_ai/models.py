"""Data shapes passed between the pipeline stages.

Everything here is request-scoped: ids in :class:`IndexedBookmark` are
positions in one working set and mean nothing outside a single
request/response pair.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Union

OTHER_CATEGORY = "Other"
UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class Bookmark:
    title: str
    url: str
    add_date: int  # epoch milliseconds

    def with_category(self, category: str) -> "CategorizedBookmark":
        return CategorizedBookmark(self.title, self.url, self.add_date, category)

    def to_dict(self) -> dict:
        return {"title": self.title, "url": self.url, "addDate": self.add_date}


@dataclass(frozen=True)
class CategorizedBookmark(Bookmark):
    category: str

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["category"] = self.category
        return data


@dataclass(frozen=True)
class IndexedBookmark:
    """The only shape ever shown to the model."""

    id: int
    title: str
    url: str
    category: Optional[str] = None

    def to_payload(self) -> dict:
        payload = {"id": self.id, "title": self.title, "url": self.url}
        if self.category is not None:
            payload["category"] = self.category
        return payload


class CategorySet:
    """Insertion-ordered set of category labels (case-sensitive)."""

    def __init__(self, labels: Iterable[str] = ()):
        self._labels: List[str] = []
        self._seen = set()
        for label in labels:
            self.add(label)

    def add(self, label: str) -> None:
        if label not in self._seen:
            self._seen.add(label)
            self._labels.append(label)

    def __contains__(self, label) -> bool:
        return label in self._seen

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

    def to_list(self) -> List[str]:
        return list(self._labels)


@dataclass
class AnalysisResult:
    categories: List[str]
    bookmarks: List[CategorizedBookmark]

    def to_dict(self) -> dict:
        return {
            "categories": list(self.categories),
            "bookmarks": [b.to_dict() for b in self.bookmarks],
        }


# ---------- decoded model output ---------------------------------------------

@dataclass(frozen=True)
class DeclaredCategory:
    """One bounds-checked ``{"id", "category"}`` entry from the model."""

    id: int
    category: str


@dataclass
class CategorizationDoc:
    categories: List[str] = field(default_factory=list)
    entries: List[DeclaredCategory] = field(default_factory=list)


@dataclass
class QueryDoc:
    relevant_ids: List[int] = field(default_factory=list)


@dataclass
class Malformed:
    reason: str


GeneratorDoc = Union[CategorizationDoc, QueryDoc, Malformed]
