"""Link extraction and normalization for crawled pages."""

from typing import List, Optional
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup

CRAWLABLE_SCHEMES = ("http", "https")


def extract_links(html: str, page_url: str) -> List[str]:
    """Extract the absolute address of every anchor on a page.

    Hrefs are resolved the way a browser resolves ``a.href``: against the
    document's ``<base href>`` when present, otherwise the page URL.
    Anchors without an href, and hrefs that resolve to something other than
    an http(s) address (mailto:, javascript:, tel:), are dropped.

    Args:
        html: Rendered page HTML
        page_url: Final URL of the page after redirects

    Returns:
        Absolute URLs in document order, duplicates included
    """
    soup = BeautifulSoup(html, "html.parser")

    base_url = page_url
    base_tag = soup.find("base", href=True)
    if base_tag:
        base_url = urljoin(page_url, base_tag["href"].strip())

    links = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        try:
            absolute_url = urljoin(base_url, href)
        except ValueError:
            continue
        if urlparse(absolute_url).scheme not in CRAWLABLE_SCHEMES:
            continue
        links.append(absolute_url)

    return links


def normalize_url(url: str) -> str:
    """Strip the fragment, so ``/docs/x#a`` and ``/docs/x#b`` are one page."""
    return urldefrag(url)[0]


def get_hostname(url: str) -> Optional[str]:
    """Lowercased hostname of ``url`` without port, or None."""
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


def is_external(url: str, seed_host: Optional[str]) -> bool:
    """Whether ``url`` lives on a different host than the seed."""
    return get_hostname(url) != seed_host
