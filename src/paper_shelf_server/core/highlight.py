"""
Search-term highlighting.

Splits text into plain and matching spans so any rendering layer
(markdown, HTML, a terminal) can emphasise query terms without
knowing how they were found.
"""

from __future__ import annotations

import html
import re
from typing import Iterable, Optional

from .models import HighlightSpan, SpanKind

ELLIPSIS = "..."


def normalize_terms(search_terms: Iterable[str]) -> list[str]:
    """Lower-case, trim, and de-duplicate terms, dropping empty ones."""
    seen: dict[str, None] = {}
    for term in search_terms:
        cleaned = term.lower().strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def query_terms(query: str) -> list[str]:
    """Split a free-text query into highlightable terms."""
    return normalize_terms(query.split())


def truncate(text: str, max_length: Optional[int]) -> str:
    """
    Cut text to max_length characters and append an ellipsis.

    A missing, zero or negative max_length leaves the text untouched.
    """
    if max_length is None or max_length <= 0 or len(text) <= max_length:
        return text
    return text[:max_length] + ELLIPSIS


def highlight(
    text: str,
    search_terms: Iterable[str],
    max_length: Optional[int] = None,
) -> list[HighlightSpan]:
    """
    Partition text into plain and match spans.

    Truncation happens before matching, so a term cut by the
    truncation boundary is not highlighted. Matching is case-insensitive
    and substring based; at each position the longest matching term wins.

    Args:
        text: The text to highlight.
        search_terms: Query terms; blank terms are ignored.
        max_length: Optional maximum length before the ellipsis.

    Returns:
        Spans whose texts concatenate back to the (truncated) text.
        Empty text yields no spans.
    """
    if not text:
        return []

    display_text = truncate(text, max_length)
    terms = normalize_terms(search_terms)

    if not terms:
        return [HighlightSpan(kind=SpanKind.PLAIN, text=display_text)]

    # Longest first so the alternation prefers the longest term at a position
    ordered = sorted(terms, key=len, reverse=True)
    pattern = re.compile(
        "(" + "|".join(re.escape(term) for term in ordered) + ")",
        re.IGNORECASE,
    )

    spans = []
    # With one capturing group, odd indices hold the matched pieces
    for i, part in enumerate(pattern.split(display_text)):
        if not part:
            continue
        kind = SpanKind.MATCH if i % 2 else SpanKind.PLAIN
        spans.append(HighlightSpan(kind=kind, text=part))

    return spans


def render_spans(spans: Iterable[HighlightSpan], style: str = "markdown") -> str:
    """
    Render spans as styled text.

    Args:
        spans: Output of highlight().
        style: 'markdown' wraps matches in ** markers; 'html' escapes
               all text and wraps matches in <mark> elements.

    Raises:
        ValueError: For an unknown style.
    """
    if style == "markdown":
        return "".join(
            f"**{span.text}**" if span.is_match else span.text for span in spans
        )
    if style == "html":
        return "".join(
            f"<mark>{html.escape(span.text)}</mark>" if span.is_match else html.escape(span.text)
            for span in spans
        )
    raise ValueError(f"Unknown render style: {style!r}")
