# src/docscheck/constants.py
"""Centralized constants for the documentation checks.

This module contains fixed patterns and default values that are used
across multiple modules. For user-configurable crawl settings, see config.py
and CrawlConfig.
"""

# =============================================================================
# Crawl Defaults
# =============================================================================

# Locally served site build
DEFAULT_BASE_URL = "http://localhost:3000"

# Pages that are not reliably reachable from the home page and are
# checked as additional starting points
DEFAULT_SEED_PATHS = [
    "/docs",
    "/docs/code-walkthrough/master-secret-generation",
    "/docs/code-walkthrough/kek-version-creation",
    "/docs/code-walkthrough/admin-setup",
    "/docs/code-walkthrough/log-creation",
    "/docs/code-walkthrough/user-provisioning",
    "/docs/code-walkthrough/log-reading",
    "/docs/code-walkthrough/key-rotation",
    "/docs/code-snippets/typescript-client-sdk/src/crypto/KeyDerivation",
    "/docs/code-snippets/typescript-client-sdk/src/auth/AuthManager",
]

DEFAULT_MAX_DEPTH = 5
DEFAULT_MAX_PAGES = 100
DEFAULT_NAVIGATION_TIMEOUT_MS = 30000
DEFAULT_CONCURRENCY = 3

# Playwright equivalent of waiting until the network is idle
DEFAULT_WAIT_UNTIL = "networkidle"

# Written to the working directory unless overridden
DEFAULT_REPORT_FILE = "link-check-results.json"


# =============================================================================
# Error Page Detection
# =============================================================================

# Phrases in the visible body text that indicate an error page
BODY_ERROR_PATTERNS = [
    "Page not found",
    "Error 404",
    "Cannot find",
    "Not Found",
    "The page you were looking for doesn't exist",
]

# Phrases in the document title that indicate an error page
TITLE_ERROR_PATTERNS = [
    "404",
    "Not Found",
    "Error",
    "Page not found",
]

# Failure reasons produced by the content heuristic start with one of these
TITLE_ERROR_REASON_PREFIX = "Page has error in title"
BODY_ERROR_REASON_PREFIX = "Page contains error messages"

# Marker used to group connection-refused navigation failures
CONNECTION_REFUSED_MARKER = "ERR_CONNECTION_REFUSED"

HTTP_ERROR_STATUS = 400


# =============================================================================
# Markdown Validation
# =============================================================================

DEFAULT_CONTENT_DIR = "content"

MARKDOWN_EXTENSIONS = (".md", ".mdx")

EXTERNAL_LINK_PREFIXES = ("http://", "https://")


# =============================================================================
# Sidebar Regeneration
# =============================================================================

DEFAULT_DOCS_DIR = "docs"
DEFAULT_SIDEBAR_FILE = "sidebars.ts"

# Optional per-component pages, in sidebar order after the overview
COMPONENT_PAGES = [
    "api",
    "configuration",
    "architecture",
    "storage-adapters",
]

# (directory under docs, sidebar label), in the order sections are inserted
SIDEBAR_SECTIONS = [
    ("architecture", "Architecture"),
    ("deployment", "Deployment"),
    ("security", "Security"),
    ("api", "API Reference"),
]

COMPONENTS_LABEL = "Components"
