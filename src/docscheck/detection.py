"""Heuristic detection of error pages served with a successful status.

Static sites often answer unknown routes with a 200 and a "not found" page,
so the HTTP status alone misses broken links. This module matches the page
title and visible text against fixed phrase lists. It is a heuristic: a
legitimate page whose title contains "Error" is reported too.
"""

from typing import List, Optional

from docscheck.constants import (
    BODY_ERROR_PATTERNS,
    BODY_ERROR_REASON_PREFIX,
    TITLE_ERROR_PATTERNS,
    TITLE_ERROR_REASON_PREFIX,
)


def find_patterns(text: Optional[str], patterns: List[str]) -> List[str]:
    """Return the patterns that occur in ``text`` (case-sensitive substring match)."""
    if not text:
        return []
    return [pattern for pattern in patterns if pattern in text]


def has_error_title(title: Optional[str]) -> bool:
    return bool(find_patterns(title, TITLE_ERROR_PATTERNS))


def has_error_body(body_text: Optional[str]) -> bool:
    return bool(find_patterns(body_text, BODY_ERROR_PATTERNS))


def detect_error_page(
    title: Optional[str],
    body_text: Optional[str],
    status: int = 200,
) -> Optional[str]:
    """Classify a successfully loaded page as an error page or not.

    Args:
        title: Document title
        body_text: Visible text of the document body
        status: HTTP status the page was served with

    Returns:
        Failure reason, or None when neither title nor body matches.
        A title match takes precedence over a body match.
    """
    if has_error_title(title):
        return f'{TITLE_ERROR_REASON_PREFIX}: "{title}"'
    if has_error_body(body_text):
        return f"{BODY_ERROR_REASON_PREFIX} despite {status} status"
    return None
