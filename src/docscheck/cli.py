"""Command-line interface for the documentation checks."""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from docscheck.config import CrawlConfig, build_seed_urls, settings
from docscheck.constants import DEFAULT_SEED_PATHS
from docscheck.exceptions import BrowserLaunchError, ConfigError, SidebarError
from docscheck.logging_config import get_logger, setup_logging
from docscheck.markdown_links import MarkdownLinkValidator
from docscheck.models import BrokenMarkdownLink, CrawlReport, compare_reports
from docscheck.sidebar import SidebarUpdater
from docscheck.site_checker import SiteLinkChecker

logger = get_logger(__name__)

# CLI flag -> CrawlConfig field
CRAWL_OVERRIDES = {
    "max_depth": "max_depth",
    "max_pages": "max_pages",
    "timeout": "timeout",
    "concurrency": "concurrency",
}


def resolve_crawl_config(args) -> CrawlConfig:
    """Build the crawl configuration: file or environment, then CLI flags.

    Raises:
        ConfigError: If the file or the resulting values are invalid
    """
    if getattr(args, "config", None):
        config = CrawlConfig.from_file(args.config)
    else:
        config = CrawlConfig.from_env()

    overrides = {
        field_name: getattr(args, flag)
        for flag, field_name in CRAWL_OVERRIDES.items()
        if getattr(args, flag, None) is not None
    }
    if getattr(args, "include_external", False):
        overrides["include_external"] = True
    if getattr(args, "headed", False):
        overrides["headless"] = False

    if not overrides:
        return config

    try:
        return CrawlConfig(**{**config.model_dump(), **overrides})
    except ValueError as e:
        raise ConfigError(f"Invalid crawl option: {e}") from e


def resolve_seed_urls(args) -> List[str]:
    """Base URL first, then the built-in seed paths and any --path values."""
    paths = [] if args.no_default_paths else list(DEFAULT_SEED_PATHS)
    paths.extend(args.paths or [])
    return build_seed_urls(args.base_url or settings.BASE_URL, paths)


def print_crawl_summary(report: CrawlReport) -> None:
    """Print the crawl summary in the console report format.

    Args:
        report: Finished crawl report
    """
    summary = report.summarize()

    print("\n=== SUMMARY ===")
    print(f"Total pages checked: {report.total_checked}")
    print(f"Broken links: {report.total_broken}")

    sections = [
        ("CONNECTION ERRORS", summary.connection_errors),
        ("PAGES WITH ERROR MESSAGES", summary.error_content_pages),
        ("OTHER ERRORS", summary.other_errors),
        ("PAGES WITH BAD STATUS", summary.bad_status_pages),
    ]
    for heading, entries in sections:
        if entries:
            print(f"\n=== {heading} ===")
            for url, detail in entries:
                print(f"{url}: {detail}")


def print_markdown_results(broken: List[BrokenMarkdownLink]) -> None:
    if broken:
        print("\n=== BROKEN MARKDOWN LINKS ===")
        for broken_link in broken:
            print(str(broken_link))
    else:
        print("\nNo broken Markdown links found!")


def _run_crawl(args) -> bool:
    """Run the site crawl and save the report. Returns False on a fatal error."""
    try:
        config = resolve_crawl_config(args)
    except ConfigError as e:
        logger.error(f"Error: {e}")
        return False

    seed_urls = resolve_seed_urls(args)
    checker = SiteLinkChecker(config)

    try:
        report = asyncio.run(checker.run(seed_urls))
    except BrowserLaunchError as e:
        logger.error(f"Fatal error: {e}")
        return False

    print_crawl_summary(report)

    output_path = Path(args.output or settings.REPORT_FILE)
    try:
        report.save(output_path)
    except OSError as e:
        logger.error(f"Error: cannot write report {output_path}: {e}")
        return False
    print(f"\nResults saved to {output_path}")
    return True


def _run_markdown(content_dir: Optional[str]) -> List[BrokenMarkdownLink]:
    validator = MarkdownLinkValidator(Path(content_dir or settings.CONTENT_DIR))
    broken = validator.validate()
    print_markdown_results(broken)
    if validator.unchecked:
        print(f"\n{len(validator.unchecked)} link(s) could not be checked (see log)")
    return broken


def crawl_command(args):
    """Crawl the locally served site and report broken pages."""
    if not _run_crawl(args):
        sys.exit(1)


def markdown_command(args):
    """Check relative links in Markdown sources."""
    _run_markdown(args.content_dir)


def all_command(args):
    """Run the site crawl followed by the Markdown check."""
    crawl_ok = _run_crawl(args)
    _run_markdown(args.content_dir)
    if not crawl_ok:
        sys.exit(1)


def sidebar_command(args):
    """Regenerate the sidebar configuration from the docs directory."""
    updater = SidebarUpdater(
        docs_dir=Path(args.docs_dir or settings.DOCS_DIR),
        sidebar_file=Path(args.sidebar_file or settings.SIDEBAR_FILE),
    )
    try:
        updated = updater.run(dry_run=args.dry_run)
    except SidebarError as e:
        logger.error(e.message)
        sys.exit(1)

    if args.dry_run:
        print(updated)


def diff_command(args):
    """Compare two saved crawl reports."""
    try:
        baseline = CrawlReport.load(Path(args.baseline))
        current = CrawlReport.load(Path(args.current))
    except (OSError, ValueError) as e:
        print(f"Error: cannot load report: {e}")
        sys.exit(1)

    comparison = compare_reports(baseline, current)

    print(f"\n{'=' * 60}")
    print(f"Baseline: {args.baseline} ({baseline.timestamp})")
    print(f"Current:  {args.current} ({current.timestamp})")
    print(f"{'=' * 60}")

    if comparison.newly_broken:
        print("\n❌ Newly broken:")
        for url, reason in comparison.newly_broken.items():
            print(f"  • {url}: {reason}")

    if comparison.fixed:
        print("\n✅ Fixed:")
        for url in comparison.fixed:
            print(f"  • {url}")

    print(f"\nStill broken: {len(comparison.still_broken)}")


def _add_crawl_arguments(parser) -> None:
    parser.add_argument(
        "base_url", nargs="?", help=f"Root of the served site (default: {settings.BASE_URL})"
    )
    parser.add_argument(
        "--path",
        dest="paths",
        action="append",
        help="Additional seed path appended to the base URL (repeatable)",
    )
    parser.add_argument(
        "--no-default-paths",
        action="store_true",
        help="Do not add the built-in seed paths",
    )
    parser.add_argument("--max-depth", type=int, help="Maximum link depth (default: 5)")
    parser.add_argument("--max-pages", type=int, help="Maximum pages to check (default: 100)")
    parser.add_argument(
        "--include-external",
        action="store_true",
        help="Also follow links to other hosts",
    )
    parser.add_argument(
        "--timeout", type=int, help="Per-page navigation timeout in ms (default: 30000)"
    )
    parser.add_argument(
        "--concurrency", type=int, help="Number of browser tabs (default: 3)"
    )
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--config", help="YAML or JSON file with crawl settings")
    parser.add_argument(
        "--output",
        "-f",
        help=f"Report file (default: {settings.REPORT_FILE})",
    )


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        description="docscheck - Link checks and sidebar maintenance for the documentation site"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.LOG_LEVEL.upper(),
        help="Set logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    crawl_parser = subparsers.add_parser(
        "crawl", help="Crawl the served site and report broken pages."
    )
    _add_crawl_arguments(crawl_parser)
    crawl_parser.set_defaults(func=crawl_command)

    markdown_parser = subparsers.add_parser(
        "markdown", help="Check relative links in Markdown sources."
    )
    markdown_parser.add_argument(
        "content_dir", nargs="?", help=f"Markdown root (default: {settings.CONTENT_DIR})"
    )
    markdown_parser.set_defaults(func=markdown_command)

    all_parser = subparsers.add_parser(
        "all", help="Run the site crawl, then the Markdown check."
    )
    _add_crawl_arguments(all_parser)
    all_parser.add_argument(
        "--content-dir", help=f"Markdown root (default: {settings.CONTENT_DIR})"
    )
    all_parser.set_defaults(func=all_command)

    sidebar_parser = subparsers.add_parser(
        "sidebar", help="Regenerate the sidebar from the docs directory."
    )
    sidebar_parser.add_argument("--docs-dir", help=f"Docs root (default: {settings.DOCS_DIR})")
    sidebar_parser.add_argument(
        "--sidebar-file", help=f"Sidebar file (default: {settings.SIDEBAR_FILE})"
    )
    sidebar_parser.add_argument(
        "--dry-run", action="store_true", help="Print the result instead of writing it"
    )
    sidebar_parser.set_defaults(func=sidebar_command)

    diff_parser = subparsers.add_parser(
        "diff", help="Compare two saved crawl reports."
    )
    diff_parser.add_argument("baseline", help="Earlier report file")
    diff_parser.add_argument("current", help="Later report file")
    diff_parser.set_defaults(func=diff_command)

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging based on flags
    setup_logging(
        level=args.log_level,
        log_file=getattr(args, 'log_file', None),
    )

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
