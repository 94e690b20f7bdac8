"""Site-wide link checker: a depth-bounded crawl of a locally served site."""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional

from docscheck.config import CrawlConfig
from docscheck.constants import HTTP_ERROR_STATUS, TITLE_ERROR_REASON_PREFIX
from docscheck.detection import detect_error_page
from docscheck.frontier import Frontier
from docscheck.infrastructure import PagePool
from docscheck.links import extract_links, get_hostname, is_external, normalize_url
from docscheck.models import CrawlReport, FrontierEntry, PageOutcome, PageResult

logger = logging.getLogger(__name__)

# document.body may be missing on non-HTML responses
BODY_TEXT_SCRIPT = "() => document.body ? document.body.innerText : ''"


@dataclass
class CrawlState:
    """Mutable state of one crawl run. Owned by the driver; built fresh per run."""

    seed_host: Optional[str]
    frontier: Frontier = field(default_factory=Frontier)
    visited: Dict[str, Optional[int]] = field(default_factory=dict)
    depths: Dict[str, int] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_seeds(cls, seed_urls: List[str]) -> "CrawlState":
        """Create state with every seed queued at depth 0.

        The seed host is taken from the first seed; links to any other host
        count as external.
        """
        if not seed_urls:
            raise ValueError("At least one seed URL is required")

        state = cls(seed_host=get_hostname(seed_urls[0]))
        for url in seed_urls:
            state.frontier.push(url, 0)
        return state

    def mark_visited(self, url: str, depth: int) -> None:
        if url in self.visited:
            raise ValueError(f"URL already visited: {url}")
        self.visited[url] = None
        self.depths[url] = depth

    def to_report(self) -> CrawlReport:
        return CrawlReport(
            checked_pages=dict(self.visited),
            broken_links=dict(self.failures),
            page_depths=dict(self.depths),
            timestamp=datetime.now().isoformat(),
        )


class SiteLinkChecker:
    """Crawls a site from a set of seeds and reports broken pages.

    The frontier is a stack, so the walk is depth-first: one entry is popped,
    checked and its links pushed before the next pop. The extra tabs only
    load the next few stack entries ahead of time. A load for a URL the walk
    never claims is cancelled and not counted, so the pages visited do not
    depend on ``config.concurrency`` or on which page finishes loading first.
    Workers only return a PageResult; the driver alone mutates the frontier,
    visited map and failure map.

    Per-page failures (bad status, error content, navigation exceptions) are
    recorded and never stop the crawl. Only a browser launch failure does.
    """

    def __init__(
        self,
        config: Optional[CrawlConfig] = None,
        pool: Optional[PagePool] = None,
    ):
        """Initialize the checker.

        Args:
            config: Crawl limits and browser settings (defaults if None)
            pool: Tab pool to use; one is created from ``config`` when None.
                The pool is started and stopped by ``run``.
        """
        self.config = config or CrawlConfig()
        self._pool = pool

    async def run(self, seed_urls: List[str]) -> CrawlReport:
        """Crawl from the seeds until the frontier is empty or max_pages is reached.

        Args:
            seed_urls: Absolute starting URLs, all queued at depth 0

        Returns:
            CrawlReport with visited statuses, failure reasons and depths

        Raises:
            BrowserLaunchError: If the browser session cannot be started
        """
        state = CrawlState.from_seeds(seed_urls)
        pool = self._pool or PagePool(
            max_size=self.config.concurrency,
            headless=self.config.headless,
            timeout_ms=self.config.timeout,
        )

        logger.info("Launching browser...")
        logger.info(
            f"Max depth: {self.config.max_depth}, max pages: {self.config.max_pages}, "
            f"concurrency: {self.config.concurrency}"
        )

        async with pool:
            await self._crawl_loop(state, pool)
            status = pool.get_status()
            logger.debug(
                f"Tab pool: {status.total_requests} navigations, "
                f"{status.total_errors} failed"
            )

        return state.to_report()

    async def _crawl_loop(self, state: CrawlState, pool: PagePool) -> None:
        prefetched: Dict[str, asyncio.Task] = {}
        try:
            while state.frontier and len(state.visited) < self.config.max_pages:
                await self._prefetch(state, pool, prefetched)

                entry = self._claim_next(state)
                if entry is None:
                    continue

                task = prefetched.pop(entry.url, None)
                if task is None:
                    task = asyncio.create_task(self._check_page(pool, entry))
                result = await task

                self._apply_result(state, replace(result, depth=entry.depth))
        finally:
            await _cancel_all(prefetched.values())

    async def _prefetch(
        self,
        state: CrawlState,
        pool: PagePool,
        prefetched: Dict[str, asyncio.Task],
    ) -> None:
        """Start loading the pages the walk will claim next.

        The window is the first few checkable URLs from the top of the stack,
        at most ``concurrency`` of them and never more than the remaining page
        budget. Loads for URLs that have dropped out of the window are
        cancelled; their results are never recorded.
        """
        budget = min(self.config.concurrency, self.config.max_pages - len(state.visited))
        window: Dict[str, FrontierEntry] = {}
        for entry in state.frontier:
            if len(window) >= budget:
                break
            if (
                entry.url in state.visited
                or entry.url in window
                or entry.depth > self.config.max_depth
            ):
                continue
            window[entry.url] = entry

        stale = [url for url in prefetched if url not in window]
        await _cancel_all(prefetched.pop(url) for url in stale)

        for url, entry in window.items():
            if url not in prefetched:
                prefetched[url] = asyncio.create_task(self._check_page(pool, entry))

    def _claim_next(self, state: CrawlState) -> Optional[FrontierEntry]:
        """Pop the top of the stack and mark it visited.

        Returns None when the popped entry is already visited or too deep.
        """
        entry = state.frontier.pop()

        if entry.url in state.visited:
            return None

        if entry.depth > self.config.max_depth:
            logger.info(f"\nSkipping (max depth): {entry.url}")
            return None

        logger.info(f"\nChecking: {entry.url} (depth: {entry.depth})")
        state.mark_visited(entry.url, entry.depth)
        return entry

    async def _check_page(self, pool: PagePool, entry: FrontierEntry) -> PageResult:
        """Load one page on a pooled tab and classify it.

        Never raises for page-level problems; navigation errors become an
        EXCEPTION result carrying the error message, after passing through
        the pool so the tab's error counter sees them.
        """
        try:
            async with pool.acquire() as page:
                return await self._load_page(page, entry)
        except Exception as e:
            return PageResult(
                url=entry.url,
                depth=entry.depth,
                outcome=PageOutcome.EXCEPTION,
                reason=_error_message(e),
            )

    async def _load_page(self, page, entry: FrontierEntry) -> PageResult:
        response = await page.goto(
            entry.url,
            wait_until=self.config.wait_until,
            timeout=self.config.timeout,
        )
        if response is None:
            return PageResult(
                url=entry.url,
                depth=entry.depth,
                outcome=PageOutcome.EXCEPTION,
                reason="No response received",
            )

        status = response.status
        if status >= HTTP_ERROR_STATUS:
            return PageResult(
                url=entry.url,
                depth=entry.depth,
                outcome=PageOutcome.HTTP_ERROR,
                status=status,
                reason=f"HTTP status: {status}",
            )

        title = await page.title()
        body_text = await page.evaluate(BODY_TEXT_SCRIPT)
        reason = detect_error_page(title, body_text, status)

        html = await page.content()
        links = extract_links(html, page.url)

        return PageResult(
            url=entry.url,
            depth=entry.depth,
            outcome=PageOutcome.HEURISTIC if reason else PageOutcome.SUCCESS,
            status=status,
            reason=reason,
            title=title,
            links=links,
        )

    def _apply_result(self, state: CrawlState, result: PageResult) -> None:
        """Record a page result and enqueue the links it discovered."""
        state.visited[result.url] = result.status

        if result.outcome == PageOutcome.EXCEPTION:
            logger.info(f"  ❌ Error: {result.reason}")
            state.failures[result.url] = result.reason
            return

        if result.outcome == PageOutcome.HTTP_ERROR:
            logger.info(f"  ❌ Status: {result.status}")
            state.failures[result.url] = result.reason
            return

        logger.info(f"  ✅ Status: {result.status}")

        if result.outcome == PageOutcome.HEURISTIC:
            logger.warning("  ⚠️ Warning: Page may contain error messages")
            if result.title and result.reason.startswith(TITLE_ERROR_REASON_PREFIX):
                logger.warning(f'  ⚠️ Page title: "{result.title}"')
            state.failures[result.url] = result.reason

        logger.info(f"  Found {len(result.links)} links")
        self._enqueue_links(state, result.links, result.depth + 1)

    def _enqueue_links(self, state: CrawlState, links: List[str], depth: int) -> int:
        """Push new same-site links at ``depth``.

        Returns:
            Number of links pushed
        """
        queued = 0
        for link in links:
            if not self.config.include_external and is_external(link, state.seed_host):
                continue

            normalized = normalize_url(link)
            if not normalized:
                continue

            if normalized in state.visited or normalized in state.frontier:
                continue

            state.frontier.push(normalized, depth)
            queued += 1

        return queued


def check_site(seed_urls: List[str], config: Optional[CrawlConfig] = None) -> CrawlReport:
    """
    Synchronous wrapper for crawling a site.

    Convenience function for non-async contexts.

    Args:
        seed_urls: Absolute starting URLs
        config: Crawl configuration

    Returns:
        CrawlReport
    """
    return asyncio.run(SiteLinkChecker(config).run(seed_urls))


def _error_message(error: Exception) -> str:
    """First line of an exception message; Playwright appends a call log."""
    text = str(error).strip()
    if not text:
        return type(error).__name__
    return text.splitlines()[0]


async def _cancel_all(tasks) -> None:
    """Cancel unclaimed page loads and wait for their tabs to come back."""
    tasks = list(tasks)
    for task in tasks:
        task.cancel()
    if tasks:
        await asyncio.gather(*tasks, return_exceptions=True)
