"""
Browser Tab Pool Management.

This module manages a fixed pool of reusable browser tabs for link checking.
All tabs live in one Playwright browser context; each navigation checks a tab
out of the pool and returns it afterwards, so the pool size bounds how many
pages are loaded at the same time.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from docscheck.exceptions import BrowserLaunchError

logger = logging.getLogger(__name__)


@dataclass
class PoolStatus:
    """Current status of the tab pool."""
    total_size: int
    available: int
    in_use: int
    total_requests: int
    total_errors: int
    uptime_seconds: float


@dataclass
class TabMetrics:
    """Metrics for a pooled tab."""
    tab_id: int
    created_at: datetime
    requests_handled: int = 0
    errors: int = 0
    last_used: datetime | None = None

    def record_success(self) -> None:
        """Record a successful checkout."""
        self.requests_handled += 1
        self.last_used = datetime.now()

    def record_error(self) -> None:
        """Record a checkout that ended in an exception."""
        self.requests_handled += 1
        self.errors += 1
        self.last_used = datetime.now()


class PagePool:
    """
    Fixed-size pool of browser tabs.

    Usage:
        async with PagePool(max_size=3) as pool:
            async with pool.acquire() as page:
                await page.goto(url)

    Features:
    - Async tab acquisition with guaranteed return
    - Per-tab request/error counters
    - Cleanup of every tab, the context and the browser on stop, even
      when startup fails part-way
    """

    def __init__(
        self,
        max_size: int = 3,
        headless: bool = True,
        timeout_ms: int = 30000,
        browser_type: str = "chromium",
        user_agent: str | None = None,
    ):
        """
        Initialize tab pool.

        Args:
            max_size: Number of tabs in the pool
            headless: Run the browser in headless mode
            timeout_ms: Default navigation timeout applied to every tab
            browser_type: Playwright browser engine
            user_agent: Custom user agent string
        """
        self.max_size = max_size
        self.headless = headless
        self.timeout_ms = timeout_ms
        self.browser_type = browser_type
        self.user_agent = user_agent

        self._playwright = None
        self._browser = None
        self._context = None
        self._pages: dict[int, Any] = {}  # tab_id -> Page
        self._metrics: dict[int, TabMetrics] = {}  # tab_id -> metrics
        self._available: asyncio.Queue[int] = asyncio.Queue()
        self._started = False
        self._start_time: datetime | None = None

    async def __aenter__(self) -> "PagePool":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()

    async def start(self) -> None:
        """
        Launch the browser and open all tabs.

        Raises:
            BrowserLaunchError: If the browser or any tab cannot be created.
                Anything opened before the failure is closed first.
        """
        if self._started:
            return

        try:
            await self._launch_browser()
            for tab_id in range(self.max_size):
                await self._create_tab(tab_id)
        except Exception as e:
            logger.error(f"Failed to start browser: {e}")
            await self._close_all()
            raise BrowserLaunchError(f"Failed to start browser: {e}") from e

        self._start_time = datetime.now()
        self._started = True
        logger.info(
            f"Browser pool started with {self.max_size} tabs "
            f"({self.browser_type}, headless={self.headless})"
        )

    async def _launch_browser(self) -> None:
        """Start Playwright, launch the browser and open a context."""
        try:
            from playwright.async_api import async_playwright
        except ImportError:
            raise ImportError(
                "playwright package not installed. "
                "Install with: pip install playwright && playwright install chromium"
            )

        self._playwright = await async_playwright().start()
        browser_launcher = getattr(self._playwright, self.browser_type)
        self._browser = await browser_launcher.launch(headless=self.headless)

        context_options: dict[str, Any] = {
            "ignore_https_errors": True,
        }
        if self.user_agent:
            context_options["user_agent"] = self.user_agent

        self._context = await self._browser.new_context(**context_options)
        logger.debug("Browser context created")

    async def _create_tab(self, tab_id: int) -> None:
        page = await self._context.new_page()
        page.set_default_navigation_timeout(self.timeout_ms)

        self._pages[tab_id] = page
        self._metrics[tab_id] = TabMetrics(tab_id=tab_id, created_at=datetime.now())
        await self._available.put(tab_id)
        logger.debug(f"Created tab {tab_id}")

    async def stop(self) -> None:
        """
        Shutdown the pool gracefully.

        Closes all tabs, the context and the browser instance.
        """
        if not self._started:
            return

        await self._close_all()
        self._started = False
        logger.info("Browser closed")

    async def _close_all(self) -> None:
        """Close everything that has been opened, logging individual failures."""
        for tab_id, page in list(self._pages.items()):
            try:
                await page.close()
            except Exception as e:
                logger.warning(f"Error closing tab {tab_id}: {e}")

        self._pages.clear()
        self._metrics.clear()
        self._available = asyncio.Queue()

        if self._context:
            try:
                await self._context.close()
            except Exception as e:
                logger.warning(f"Error closing browser context: {e}")
            self._context = None

        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping playwright: {e}")
            self._playwright = None

    @asynccontextmanager
    async def acquire(self):
        """
        Check a tab out of the pool.

        Usage:
            async with pool.acquire() as page:
                await page.goto(url)

        Yields:
            Playwright Page, returned to the pool when the block exits
        """
        if not self._started:
            raise RuntimeError("Browser pool not started. Call start() first.")

        tab_id = await self._available.get()
        page = self._pages[tab_id]
        metrics = self._metrics[tab_id]

        try:
            yield page
            metrics.record_success()
        except Exception:
            metrics.record_error()
            raise
        finally:
            # Return to pool
            await self._available.put(tab_id)

    def get_status(self) -> PoolStatus:
        """Get current pool status."""
        uptime = 0.0
        if self._start_time:
            uptime = (datetime.now() - self._start_time).total_seconds()

        return PoolStatus(
            total_size=len(self._pages),
            available=self._available.qsize(),
            in_use=len(self._pages) - self._available.qsize(),
            total_requests=sum(m.requests_handled for m in self._metrics.values()),
            total_errors=sum(m.errors for m in self._metrics.values()),
            uptime_seconds=uptime,
        )

    @property
    def is_started(self) -> bool:
        """Whether pool has been started."""
        return self._started
