"""Decode model output that may be truncated or slightly malformed.

The model is token-limited and can stop mid-document. Rather than fail
outright, :func:`repair` tries progressively more invasive fixes:

1. parse the trimmed text as-is;
2. close an open string and every open ``[``/``{`` in reverse order;
3. cut back to the last complete ``}`` and close what is still open there,
   or, failing that, to the last array opening or element boundary.

Each step only runs when the previous one failed, so a well-formed
document never passes through a repair.
"""

import json
import logging
import re
from typing import Any, List, Tuple

from .errors import ResponseFormatError

logger = logging.getLogger(__name__)

CLOSERS = {"{": "}", "[": "]"}
FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*(?:```)?$", re.DOTALL)


class _ScanState:
    """Bracket nesting at the end of a text, ignoring anything inside strings."""

    def __init__(self, text: str):
        self.stack: List[str] = []
        self.in_string = False
        self.dangling_escape = False
        self.object_ends: List[int] = []
        self.array_cuts: List[int] = []  # prefix lengths that end on an array boundary

        escape = False
        for i, ch in enumerate(text):
            if self.in_string:
                if escape:
                    escape = False
                elif ch == "\\":
                    escape = True
                elif ch == '"':
                    self.in_string = False
                continue
            if ch == '"':
                self.in_string = True
            elif ch in CLOSERS:
                self.stack.append(ch)
                if ch == "[":
                    self.array_cuts.append(i + 1)
            elif ch == "," and self.stack and self.stack[-1] == "[":
                self.array_cuts.append(i)
            elif ch in "}]":
                if self.stack:
                    self.stack.pop()
                if ch == "}":
                    self.object_ends.append(i)
        self.dangling_escape = escape


def clean(text: str) -> str:
    """Trim whitespace and a surrounding Markdown code fence."""
    text = (text or "").strip()
    match = FENCE_RE.match(text)
    if match:
        text = match.group(1).strip()
    return text


def close_open_brackets(text: str) -> str:
    """Append whatever quote and closers are needed to balance ``text``."""
    state = _ScanState(text)
    if state.in_string:
        if state.dangling_escape:
            text = text[:-1]
        text += '"'
    else:
        text = text.rstrip()
        while text.endswith(","):
            text = text[:-1].rstrip()
    return text + "".join(CLOSERS[c] for c in reversed(state.stack))


def _strict(text: str) -> Any:
    return json.loads(text)


def _bracket_closing(text: str) -> Any:
    fixed = close_open_brackets(text)
    if fixed == text:
        raise ValueError("nothing to close")
    return json.loads(fixed)


def _truncate_to_last_object(text: str) -> Any:
    state = _ScanState(text)
    cuts = [end + 1 for end in reversed(state.object_ends)] + list(reversed(state.array_cuts))
    for cut in cuts:
        candidate = close_open_brackets(text[:cut])
        try:
            return json.loads(candidate)
        except ValueError:
            continue
    raise ValueError("no complete object to truncate to")


STRATEGIES: Tuple[Tuple[str, Any], ...] = (
    ("strict", _strict),
    ("bracket-closing", _bracket_closing),
    ("truncate-to-last-object", _truncate_to_last_object),
)


def repair(text: str) -> Any:
    """Decode ``text``, falling back to the repair strategies in order.

    Raises:
        ResponseFormatError: every strategy failed.
    """
    cleaned = clean(text)
    if not cleaned:
        raise ResponseFormatError("The model returned an empty response.")

    for name, strategy in STRATEGIES:
        try:
            document = strategy(cleaned)
        except ValueError as e:
            logger.debug("JSON %s parse failed: %s", name, e)
            continue
        if name != "strict":
            logger.debug("Recovered model output using %s repair", name)
        return document

    logger.error("Could not decode model output: %s", cleaned[:500])
    raise ResponseFormatError("The model returned an invalid or incomplete response format.")


def parse_document(text: str) -> dict:
    """Like :func:`repair`, but the decoded value must be a JSON object."""
    document = repair(text)
    if not isinstance(document, dict):
        raise ResponseFormatError(
            f"Expected a JSON object from the model, got {type(document).__name__}."
        )
    return document
