"""docscheck - link checking and sidebar maintenance for a documentation site."""

__version__ = "0.1.0"

from docscheck.config import CrawlConfig, build_seed_urls
from docscheck.exceptions import (
    BrowserLaunchError,
    ConfigError,
    DocsCheckError,
    SidebarError,
)
from docscheck.infrastructure import PagePool
from docscheck.markdown_links import MarkdownLinkValidator, check_markdown_links
from docscheck.models import (
    BrokenMarkdownLink,
    CrawlReport,
    ReportComparison,
    compare_reports,
)
from docscheck.sidebar import SidebarUpdater
from docscheck.site_checker import SiteLinkChecker, check_site

__all__ = [
    "CrawlConfig",
    "build_seed_urls",
    "DocsCheckError",
    "ConfigError",
    "BrowserLaunchError",
    "SidebarError",
    "PagePool",
    "MarkdownLinkValidator",
    "check_markdown_links",
    "BrokenMarkdownLink",
    "CrawlReport",
    "ReportComparison",
    "compare_reports",
    "SidebarUpdater",
    "SiteLinkChecker",
    "check_site",
]
