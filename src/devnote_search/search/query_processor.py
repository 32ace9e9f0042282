"""Query normalization and match highlighting.

Queries are matched as literal substrings: no tokenization, stemming or
operator syntax. The normalized form is also what gets highlighted.
"""

import re
from typing import List, Optional, Tuple

from .exceptions import EmptyQueryError

DEFAULT_PRE_TAG = "<mark>"
DEFAULT_POST_TAG = "</mark>"

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_query(query: Optional[str]) -> str:
    """Trim, collapse whitespace runs to one space and lowercase.

    Raises:
        EmptyQueryError: If nothing is left after trimming
    """
    if not isinstance(query, str) or not query.strip():
        raise EmptyQueryError()
    collapsed = _WHITESPACE_RUN.sub(" ", query.strip())
    return _lowered_with_origin(collapsed)[0]


def _lowered_with_origin(text: str) -> Tuple[str, List[int]]:
    """Lowercase ``text`` one character at a time.

    Returns the lowered text and, for each of its characters, the index of
    the source character it came from.
    """
    lowered = []
    origin = []
    for position, char in enumerate(text):
        folded = char.lower()
        lowered.append(folded)
        origin.extend([position] * len(folded))
    return "".join(lowered), origin


def match_spans(text: Optional[str], normalized_query: str) -> List[Tuple[int, int]]:
    """Source spans of ``text`` that match an already-normalized query.

    A span matches when its characters, each lowercased on its own, spell
    the query. Scoring and highlighting both use this rule.
    """
    if not text or not normalized_query:
        return []

    haystack, origin = _lowered_with_origin(text)
    spans: List[Tuple[int, int]] = []
    found = haystack.find(normalized_query)
    while found != -1:
        end = found + len(normalized_query)
        span = (origin[found], origin[end - 1] + 1)
        if spans and span[0] < spans[-1][1]:
            # both matches touch one source character that lowered to several
            spans[-1] = (spans[-1][0], span[1])
        else:
            spans.append(span)
        found = haystack.find(normalized_query, end)
    return spans


def contains(text: Optional[str], normalized_query: str) -> bool:
    """Case-insensitive substring test against an already-normalized query."""
    if not text or not normalized_query:
        return False
    if text.isascii():
        return normalized_query in text.lower()
    return bool(match_spans(text, normalized_query))


def highlight_text(
    text: Optional[str],
    normalized_query: str,
    pre_tag: str = DEFAULT_PRE_TAG,
    post_tag: str = DEFAULT_POST_TAG,
) -> Optional[str]:
    """Wrap every case-insensitive occurrence of the query in markers.

    The matched span keeps its original casing; text without a match is
    returned unchanged.
    """
    spans = match_spans(text, normalized_query)
    if not spans:
        return text

    pieces = []
    cursor = 0
    for start, end in spans:
        pieces.extend((text[cursor:start], pre_tag, text[start:end], post_tag))
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces)


class QueryProcessor:
    """Normalizes queries and highlights matches with configured markers."""

    def __init__(
        self, pre_tag: str = DEFAULT_PRE_TAG, post_tag: str = DEFAULT_POST_TAG
    ):
        self.pre_tag = pre_tag
        self.post_tag = post_tag

    def normalize(self, query: Optional[str]) -> str:
        return normalize_query(query)

    def highlight(self, text: Optional[str], normalized_query: str) -> Optional[str]:
        return highlight_text(text, normalized_query, self.pre_tag, self.post_tag)
