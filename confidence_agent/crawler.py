from __future__ import annotations

import logging
import re
import time
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from .models import CrawledPage, CrawlResult, PageFetch

logger = logging.getLogger(__name__)

MAX_PAGES = 8
FETCH_TIMEOUT_S = 15.0
CRAWL_DELAY_S = 0.3

_clock = time.monotonic

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
REQUEST_HEADERS = {
    "user-agent": USER_AGENT,
    "accept": "text/html,application/xhtml+xml",
}

PRIORITY_PATHS = (
    "/",
    "/about",
    "/about-us",
    "/pricing",
    "/features",
    "/product",
    "/solutions",
    "/faq",
)

_SKIP_PATTERNS = (
    re.compile(r"\.(png|jpg|jpeg|gif|svg|css|js|pdf|zip)$", re.IGNORECASE),
    re.compile(r"^/(wp-|admin|login|signup|cart|checkout|account)", re.IGNORECASE),
    re.compile(r"^/(tag|category|author)/", re.IGNORECASE),
    re.compile(r"\?"),
    re.compile(r"#"),
)

# First match wins.
_PAGE_TYPE_KEYWORDS = (
    ("pricing", "pricing"),
    ("about", "about"),
    ("feature", "features"),
    ("product", "product"),
    ("faq", "faq"),
)


def normalize_origin(raw: str) -> str:
    value = (raw or "").strip()
    if not value:
        raise ValueError("Please provide a URL.")
    if not re.match(r"^[a-zA-Z][a-zA-Z\d+.-]*://", value):
        value = "https://" + value

    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https"):
        raise ValueError("Please use an http(s) website URL.")
    if not parsed.netloc:
        raise ValueError("Please enter a valid website domain.")
    return f"{parsed.scheme}://{parsed.netloc.lower()}"


def detect_page_type(path: str) -> str:
    p = (path or "").lower()
    if p in ("/", ""):
        return "homepage"
    for keyword, page_type in _PAGE_TYPE_KEYWORDS:
        if keyword in p:
            return page_type
    return "other"


def should_skip_path(path: str) -> bool:
    return any(pattern.search(path) for pattern in _SKIP_PATTERNS)


def fetch_page(client: httpx.Client, url: str) -> PageFetch:
    """Fetch one page. Never raises; failures come back as ``success=False``.

    ``FETCH_TIMEOUT_S`` bounds the whole request, body included, not just
    each socket read.
    """
    deadline = _clock() + FETCH_TIMEOUT_S
    try:
        with client.stream("GET", url, headers=REQUEST_HEADERS, timeout=FETCH_TIMEOUT_S) as res:
            if not res.is_success:
                return PageFetch(url=url, success=False, error=f"HTTP {res.status_code}")
            chunks: list[str] = []
            for chunk in res.iter_text():
                if _clock() > deadline:
                    return PageFetch(url=url, success=False, error="Request timed out")
                chunks.append(chunk)
    except httpx.TimeoutException:
        return PageFetch(url=url, success=False, error="Request timed out")
    except Exception as e:
        return PageFetch(url=url, success=False, error=str(e) or "Fetch failed")

    return PageFetch(url=url, html="".join(chunks), success=True)


def _discover_paths(html: str, origin: str) -> list[str]:
    """Same-origin link targets from the homepage, in document order.

    Query strings and fragments are kept on the candidate so the skip
    policy can drop them.
    """
    soup = BeautifulSoup(html, "html.parser")
    paths: list[str] = []
    for a in soup.find_all("a", href=True):
        href = (a.get("href") or "").strip()
        if not href or href.startswith(("mailto:", "tel:", "javascript:")):
            continue
        try:
            p = urlparse(urljoin(origin + "/", href))
        except ValueError:
            continue
        if p.scheme not in ("http", "https"):
            continue
        if f"{p.scheme}://{p.netloc.lower()}" != origin:
            continue
        path = p.path or "/"
        if p.query:
            path += "?" + p.query
        if p.fragment:
            path += "#" + p.fragment
        paths.append(path)
    return paths


def _fetch_llms_txt(client: httpx.Client, origin: str) -> str | None:
    result = fetch_page(client, origin + "/llms.txt")
    if result.success and result.html:
        return result.html
    logger.debug("No llms.txt for %s: %s", origin, result.error or "empty")
    return None


def _crawl(client: httpx.Client, origin: str) -> CrawlResult:
    homepage = fetch_page(client, origin)
    if not homepage.success:
        logger.info("Homepage fetch failed for %s: %s", origin, homepage.error)
        return CrawlResult(success=False, origin=origin, error=homepage.error)

    pages = [CrawledPage(url=origin, page_type="homepage", html=homepage.html or "")]
    crawled = {origin, origin + "/"}

    llms_txt = _fetch_llms_txt(client, origin)

    candidates = list(dict.fromkeys([*PRIORITY_PATHS, *_discover_paths(homepage.html or "", origin)]))

    fetched = 0
    for path in candidates:
        if len(pages) >= MAX_PAGES:
            break

        page_url = origin + path
        if page_url in crawled:
            continue
        if should_skip_path(path):
            logger.debug("Skipping %s", path)
            continue

        # Delay between sub-page fetches only.
        if fetched:
            time.sleep(CRAWL_DELAY_S)
        fetched += 1

        result = fetch_page(client, page_url)
        if result.success:
            pages.append(CrawledPage(url=page_url, page_type=detect_page_type(path), html=result.html or ""))
            crawled.add(page_url)
        else:
            logger.debug("Page %s skipped: %s", page_url, result.error)

    logger.info("Crawled %d page(s) from %s (llms.txt: %s)", len(pages), origin, "yes" if llms_txt else "no")
    return CrawlResult(success=True, origin=origin, pages=pages, llms_txt=llms_txt)


def crawl_site(base_url: str, client: httpx.Client | None = None) -> CrawlResult:
    """Crawl the homepage plus up to ``MAX_PAGES - 1`` same-origin pages, sequentially."""
    origin = normalize_origin(base_url)
    logger.info("Crawling %s", origin)
    if client is not None:
        return _crawl(client, origin)
    with httpx.Client(timeout=FETCH_TIMEOUT_S, follow_redirects=True) as own_client:
        return _crawl(own_client, origin)
