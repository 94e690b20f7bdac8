"""Data models for link checking."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from docscheck.constants import (
    BODY_ERROR_REASON_PREFIX,
    CONNECTION_REFUSED_MARKER,
    HTTP_ERROR_STATUS,
    TITLE_ERROR_REASON_PREFIX,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrontierEntry:
    """A URL awaiting a visit, with the depth at which it was discovered."""

    url: str
    depth: int


class PageOutcome(Enum):
    """Terminal state of a checked page."""
    SUCCESS = "success"
    HTTP_ERROR = "http_error"
    HEURISTIC = "heuristic"
    EXCEPTION = "exception"


@dataclass
class PageResult:
    """Outcome of checking one page, returned by a worker to the crawl driver."""

    url: str
    depth: int
    outcome: PageOutcome
    status: Optional[int] = None
    reason: Optional[str] = None
    title: Optional[str] = None
    links: List[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.outcome != PageOutcome.SUCCESS


def is_heuristic_reason(reason: str) -> bool:
    """Whether a failure reason came from error-page content detection."""
    return reason.startswith((TITLE_ERROR_REASON_PREFIX, BODY_ERROR_REASON_PREFIX))


@dataclass
class FailureSummary:
    """Broken pages partitioned the way the console summary reports them."""

    connection_errors: List[Tuple[str, str]] = field(default_factory=list)
    error_content_pages: List[Tuple[str, str]] = field(default_factory=list)
    other_errors: List[Tuple[str, str]] = field(default_factory=list)
    bad_status_pages: List[Tuple[str, int]] = field(default_factory=list)


@dataclass
class CrawlReport:
    """Result of one crawl run, persisted for regression tracking."""

    checked_pages: Dict[str, Optional[int]] = field(default_factory=dict)
    broken_links: Dict[str, str] = field(default_factory=dict)
    page_depths: Dict[str, int] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def total_checked(self) -> int:
        return len(self.checked_pages)

    @property
    def total_broken(self) -> int:
        return len(self.broken_links)

    def summarize(self) -> FailureSummary:
        """Partition failures into connection, error-content and other errors.

        Returns:
            FailureSummary with each bucket in report order
        """
        summary = FailureSummary()

        for url, reason in self.broken_links.items():
            if CONNECTION_REFUSED_MARKER in reason:
                summary.connection_errors.append((url, reason))
            elif is_heuristic_reason(reason):
                summary.error_content_pages.append((url, reason))
            else:
                summary.other_errors.append((url, reason))

        summary.bad_status_pages = [
            (url, status) for url, status in self.checked_pages.items()
            if status is not None and status >= HTTP_ERROR_STATUS
        ]
        return summary

    def to_dict(self) -> dict:
        return {
            "checked_pages": self.checked_pages,
            "broken_links": self.broken_links,
            "page_depths": self.page_depths,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CrawlReport":
        """Build a report from its JSON form.

        Older reports use camelCase keys (``checkedPages``, ``brokenLinks``);
        both spellings are accepted.
        """
        return cls(
            checked_pages=dict(data.get("checked_pages", data.get("checkedPages", {}))),
            broken_links=dict(data.get("broken_links", data.get("brokenLinks", {}))),
            page_depths=dict(data.get("page_depths", {})),
            timestamp=data.get("timestamp", ""),
        )

    def save(self, path: Path) -> None:
        """Write the report as indented JSON.

        Args:
            path: Destination file; parent directories are created
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.debug(f"Saved report: {path}")

    @classmethod
    def load(cls, path: Path) -> "CrawlReport":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))


@dataclass
class ReportComparison:
    """Difference between a baseline report and a current one."""

    newly_broken: Dict[str, str] = field(default_factory=dict)
    fixed: Dict[str, str] = field(default_factory=dict)
    still_broken: Dict[str, str] = field(default_factory=dict)

    @property
    def has_regressions(self) -> bool:
        return bool(self.newly_broken)


def compare_reports(baseline: CrawlReport, current: CrawlReport) -> ReportComparison:
    """Compare broken pages between two crawl reports.

    Args:
        baseline: Earlier report
        current: Later report

    Returns:
        ReportComparison; ``fixed`` holds the baseline reason, the other
        buckets hold the current reason
    """
    comparison = ReportComparison()

    for url, reason in current.broken_links.items():
        if url in baseline.broken_links:
            comparison.still_broken[url] = reason
        else:
            comparison.newly_broken[url] = reason

    for url, reason in baseline.broken_links.items():
        if url not in current.broken_links:
            comparison.fixed[url] = reason

    return comparison


@dataclass(frozen=True)
class MarkdownLink:
    """An inline ``[text](target)`` link found in a Markdown file."""

    text: str
    target: str
    position: int = 0


@dataclass(frozen=True)
class BrokenMarkdownLink:
    """A relative Markdown link whose target does not exist on disk."""

    file: str
    link: str
    text: str

    def __str__(self) -> str:
        return f"{self.file}: [{self.text}]({self.link})"
