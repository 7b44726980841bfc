"""Instruction text and request messages for the two model calls."""

import json
from typing import List, Sequence

from .models import IndexedBookmark

RESPONSE_FORMAT = {"type": "json_object"}

CATEGORIZE_SYSTEM_PROMPT = """You are an expert bookmark organizer.
You will receive a JSON list of bookmarks, each with an 'id', 'title' and 'url'.
Group them into 3 to 6 specific, meaningful categories based on their titles and URLs.

RULES:
1.  **Format:** Respond ONLY with a JSON object of exactly this shape:
    {
      "categories": ["Category A", "Category B"],
      "bookmarks": [
        {"id": 0, "category": "Category A"}
      ]
    }
2.  **Coverage:** Include one entry in "bookmarks" for EVERY id you were given.
3.  **Consistency:** Every "category" must be one of the names listed in "categories".
4.  **Raw output:** No prose, no explanations, no ```json fences. Only the raw JSON object."""

QUERY_SYSTEM_PROMPT = """You are a bookmark search assistant.
You will receive a JSON object with the user's "query" and a list of "bookmarks" (each with an 'id', 'title', 'url' and 'category').
Return ONLY the ids of the bookmarks that are highly relevant to the query, most relevant first.

RULES:
1.  **Format:** Respond ONLY with a JSON object of exactly this shape:
    {"relevantIds": [0, 5, 12]}
2.  **No match:** If nothing is relevant, return {"relevantIds": []}.
3.  **Raw output:** No prose, no explanations, no ```json fences. Only the raw JSON object."""


def categorize_messages(working_set: Sequence[IndexedBookmark]) -> List[dict]:
    payload = [b.to_payload() for b in working_set]
    return [
        {"role": "system", "content": CATEGORIZE_SYSTEM_PROMPT},
        {"role": "user", "content": json.dumps(payload, ensure_ascii=False)},
    ]


def query_messages(query: str, working_set: Sequence[IndexedBookmark]) -> List[dict]:
    payload = {"query": query, "bookmarks": [b.to_payload() for b in working_set]}
    return [
        {"role": "system", "content": QUERY_SYSTEM_PROMPT},
        {"role": "user", "content": json.dumps(payload, ensure_ascii=False)},
    ]
