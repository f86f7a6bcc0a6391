import httpx
import pytest

from confidence_agent import analyzer, crawler
from confidence_agent.models import CompleteEvent, CrawledPage, CrawlResult, ErrorEvent, StepEvent
from confidence_agent.scorer import calculate_scores


@pytest.fixture(autouse=True)
def _no_delay(monkeypatch):
    monkeypatch.setattr(crawler, "CRAWL_DELAY_S", 0)


@pytest.fixture
def crawled(rich_homepage_html):
    return CrawlResult(
        success=True,
        origin="https://acme.test",
        pages=[
            CrawledPage(url="https://acme.test", page_type="homepage", html=rich_homepage_html),
            CrawledPage(url="https://acme.test/about", page_type="about", html="<h1>About Acme</h1>"),
        ],
        llms_txt="# Acme\n\n> Payroll software for startups.\n",
    )


class RecordingStore:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved = []
        self.usage = []

    def save_analysis(self, identity, url, result):
        if self.fail:
            raise RuntimeError("database unavailable")
        self.saved.append((identity, url, result))
        return "analysis-1"

    def increment_usage(self, identity):
        self.usage.append(identity)


def test_successful_run_emits_five_steps_then_result(monkeypatch, crawled):
    monkeypatch.setattr(analyzer, "crawl_site", lambda url, client=None: crawled)

    events = list(analyzer.run_analysis("acme.test"))

    assert [e.step for e in events[:5]] == [1, 2, 3, 4, 5]
    assert all(isinstance(e, StepEvent) for e in events[:5])
    assert events[0].message == "Crawling pages"
    assert len(events) == 6
    assert isinstance(events[-1], CompleteEvent)

    result = events[-1].result
    assert result.url == "https://acme.test"
    assert result.pages_analyzed == 2
    assert result.llms_txt.present is True
    assert result.llms_txt.modifier == 5
    assert result.understanding.category == "Unknown"
    assert result.scores == calculate_scores(result.blockers, result.llms_txt.modifier)
    severities = [b.severity for b in result.blockers]
    assert severities == sorted(severities, reverse=True)
    impacts = [s.impact for s in result.strengths]
    assert impacts == sorted(impacts, reverse=True)
    assert "STRENGTH_LLMS_TXT_ALIGNED" in {s.code for s in result.strengths}


def test_homepage_failure_stops_before_extraction(monkeypatch):
    monkeypatch.setattr(
        analyzer, "crawl_site", lambda url, client=None: CrawlResult(success=False, origin="https://acme.test", error="HTTP 500")
    )

    def never(*args, **kwargs):
        raise AssertionError("extraction must not run")

    monkeypatch.setattr(analyzer, "extract_page", never)

    events = list(analyzer.run_analysis("acme.test"))

    assert [type(e) for e in events] == [StepEvent, ErrorEvent]
    assert events[-1].error == "HTTP 500"


def test_unexpected_failure_becomes_single_error_event(monkeypatch, crawled):
    monkeypatch.setattr(analyzer, "crawl_site", lambda url, client=None: crawled)

    def boom(*args, **kwargs):
        raise RuntimeError("scoring exploded")

    monkeypatch.setattr(analyzer, "calculate_scores", boom)

    events = list(analyzer.run_analysis("acme.test"))

    assert [e.step for e in events if isinstance(e, StepEvent)] == [1, 2, 3, 4, 5]
    terminal = [e for e in events if not isinstance(e, StepEvent)]
    assert len(terminal) == 1
    assert terminal[0].error == "scoring exploded"
    assert events[-1] is terminal[0]


def test_invalid_url_is_reported_as_error():
    events = list(analyzer.run_analysis("   "))
    assert isinstance(events[-1], ErrorEvent)
    assert events[-1].error == "Please provide a URL."


def test_result_is_saved_when_store_and_identity_given(monkeypatch, crawled):
    monkeypatch.setattr(analyzer, "crawl_site", lambda url, client=None: crawled)
    store = RecordingStore()

    terminal = analyzer.analyze("acme.test", store=store, identity="user-1")

    assert isinstance(terminal, CompleteEvent)
    assert store.saved[0][:2] == ("user-1", "https://acme.test")
    assert store.usage == ["user-1"]


def test_store_is_skipped_without_identity(monkeypatch, crawled):
    monkeypatch.setattr(analyzer, "crawl_site", lambda url, client=None: crawled)
    store = RecordingStore()

    analyzer.analyze("acme.test", store=store)

    assert store.saved == []


def test_store_failure_does_not_fail_the_analysis(monkeypatch, crawled):
    monkeypatch.setattr(analyzer, "crawl_site", lambda url, client=None: crawled)

    terminal = analyzer.analyze("acme.test", store=RecordingStore(fail=True), identity="user-1")

    assert isinstance(terminal, CompleteEvent)


def test_end_to_end_with_mock_transport(rich_homepage_html):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/":
            return httpx.Response(200, text=rich_homepage_html)
        if request.url.path == "/pricing":
            return httpx.Response(200, text="<h1>Pricing</h1><p>Starter costs $49/month for one workspace.</p>")
        return httpx.Response(404)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        terminal = analyzer.analyze("https://acme.test", client=client)

    assert isinstance(terminal, CompleteEvent)
    result = terminal.result
    assert result.pages_analyzed == 2
    codes = {b.code for b in result.blockers}
    assert "CLARITY_NO_LLMS_TXT" in codes
    assert "SPECIFICITY_MISSING_ATTRIBUTES" in codes
    assert 0 <= result.scores.total <= 100
