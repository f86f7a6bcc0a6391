import httpx
import pytest

from confidence_agent import crawler
from confidence_agent.crawler import crawl_site, detect_page_type, normalize_origin, should_skip_path


@pytest.fixture(autouse=True)
def _no_delay(monkeypatch):
    monkeypatch.setattr(crawler, "CRAWL_DELAY_S", 0)


def _client(pages: dict[str, tuple[int, str]], requested: list[str], errors: tuple[str, ...] = ()):
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        requested.append(path)
        if path in errors:
            raise httpx.ConnectError("connection refused", request=request)
        status, body = pages.get(path, (404, "not found"))
        return httpx.Response(status, text=body)

    return httpx.Client(transport=httpx.MockTransport(handler))


def _links(*hrefs: str) -> str:
    anchors = "".join(f'<a href="{h}">link</a>' for h in hrefs)
    return f"<html><body><h1>Acme</h1>{anchors}</body></html>"


def test_homepage_failure_is_fatal():
    requested: list[str] = []
    result = crawl_site("acme.test", client=_client({"/": (500, "boom")}, requested))

    assert result.success is False
    assert result.error == "HTTP 500"
    assert result.pages == []
    assert requested == ["/"]


def test_homepage_network_error_is_fatal():
    requested: list[str] = []
    result = crawl_site("https://acme.test", client=_client({}, requested, errors=("/",)))

    assert result.success is False
    assert result.error


def test_page_cap_stops_before_discovered_links():
    home = _links(*[f"/p{i}" for i in range(20)])
    pages = {"/": (200, home)}
    for path in ("/about", "/about-us", "/pricing", "/features", "/product", "/solutions", "/faq"):
        pages[path] = (200, "<p>ok</p>")
    for i in range(20):
        pages[f"/p{i}"] = (200, "<p>ok</p>")

    requested: list[str] = []
    result = crawl_site("https://acme.test", client=_client(pages, requested))

    assert result.success
    assert result.crawled_count == crawler.MAX_PAGES
    assert [p.page_type for p in result.pages] == [
        "homepage", "about", "about", "pricing", "features", "product", "other", "faq",
    ]
    assert not any(p.startswith("/p") and p != "/pricing" and p != "/product" for p in requested)


def test_discovery_skips_excluded_and_cross_origin_links():
    home = _links(
        "https://other.test/about",
        "/wp-admin/settings",
        "/blog?page=2",
        "/pricing#plans",
        "/logo.png",
        "/tag/news/",
        "/login",
        "mailto:hi@acme.test",
        "https://acme.test/team",
    )
    pages = {"/": (200, home), "/team": (200, "<p>team</p>"), "/llms.txt": (200, "# Acme\n")}

    requested: list[str] = []
    result = crawl_site("https://acme.test/some/path", client=_client(pages, requested))

    assert result.origin == "https://acme.test"
    assert [p.url for p in result.pages] == ["https://acme.test", "https://acme.test/team"]
    assert result.pages[1].page_type == "other"
    assert result.llms_txt == "# Acme\n"
    for skipped in ("/wp-admin/settings", "/blog", "/logo.png", "/tag/news/", "/login"):
        assert skipped not in requested


def test_failed_subpages_are_dropped_not_fatal():
    pages = {"/": (200, _links("/about")), "/pricing": (200, "<p>$10</p>")}
    requested: list[str] = []
    result = crawl_site("https://acme.test", client=_client(pages, requested, errors=("/about",)))

    assert result.success
    assert [p.page_type for p in result.pages] == ["homepage", "pricing"]
    assert result.llms_txt is None


def test_malformed_link_is_skipped_not_fatal():
    pages = {"/": (200, _links("/docs\x01x")), "/about": (200, "<p>about</p>")}
    requested: list[str] = []
    result = crawl_site("https://acme.test", client=_client(pages, requested))

    assert result.success
    assert [p.url for p in result.pages] == ["https://acme.test", "https://acme.test/about"]


def test_fetch_page_reports_invalid_url():
    requested: list[str] = []
    result = crawler.fetch_page(_client({}, requested), "https://acme.test/docs\x01x")

    assert result.success is False
    assert result.error
    assert requested == []


def test_fetch_page_deadline_covers_slow_body(monkeypatch):
    now = [0.0]
    monkeypatch.setattr(crawler, "_clock", lambda: now[0])

    def trickle():
        for _ in range(10):
            now[0] += 5
            yield b"<p>still loading</p>"

    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, content=trickle())))
    result = crawler.fetch_page(client, "https://acme.test/")

    assert result.success is False
    assert result.error == "Request timed out"
    assert now[0] < 50


def test_delay_only_between_subpage_fetches(monkeypatch):
    sleeps: list[float] = []
    monkeypatch.setattr(crawler.time, "sleep", sleeps.append)
    pages = {"/": (200, _links()), "/about": (200, "<p>about</p>"), "/pricing": (200, "<p>$10</p>")}

    requested: list[str] = []
    crawl_site("https://acme.test", client=_client(pages, requested))

    subpages = [p for p in requested if p not in ("/", "/llms.txt")]
    assert len(subpages) == len(crawler.PRIORITY_PATHS) - 1
    assert len(sleeps) == len(subpages) - 1


def test_homepage_only_crawl_never_sleeps(monkeypatch):
    sleeps: list[float] = []
    monkeypatch.setattr(crawler.time, "sleep", sleeps.append)
    monkeypatch.setattr(crawler, "PRIORITY_PATHS", ("/",))

    result = crawl_site("https://acme.test", client=_client({"/": (200, _links())}, []))

    assert result.crawled_count == 1
    assert sleeps == []


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/", "homepage"),
        ("", "homepage"),
        ("/pricing", "pricing"),
        ("/about-us", "about"),
        ("/features/reports", "features"),
        ("/product-tour", "product"),
        ("/faq", "faq"),
        ("/pricing-faq", "pricing"),
        ("/blog/post", "other"),
    ],
)
def test_detect_page_type(path, expected):
    assert detect_page_type(path) == expected


@pytest.mark.parametrize(
    "path,skip",
    [
        ("/about", False),
        ("/styles/main.css", True),
        ("/wp-content/uploads", True),
        ("/admin", True),
        ("/checkout/step-1", True),
        ("/category/news/", True),
        ("/author/jane/", True),
        ("/search?q=x", True),
        ("/page#top", True),
        ("/docs", False),
    ],
)
def test_should_skip_path(path, skip):
    assert should_skip_path(path) is skip


def test_normalize_origin():
    assert normalize_origin("Acme.test/pricing?x=1") == "https://acme.test"
    assert normalize_origin("http://acme.test:8080/") == "http://acme.test:8080"
    with pytest.raises(ValueError):
        normalize_origin("   ")
    with pytest.raises(ValueError):
        normalize_origin("ftp://acme.test")
