import pytest

from confidence_agent.extractor import extract_page


@pytest.fixture
def build_page():
    def _build(body: str, *, url: str = "https://acme.test", page_type: str = "homepage", head: str = ""):
        html = f"<html><head>{head}</head><body>{body}</body></html>"
        return extract_page(html, url, page_type)

    return _build


@pytest.fixture(autouse=True)
def _no_gemini_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


RICH_HOMEPAGE = """<html><head><title>Acme Payroll</title>
<meta name="description" content="Payroll software for startups">
<script type="application/ld+json">{"@context": "https://schema.org", "@type": "Organization", "name": "Acme"}</script>
</head><body>
<nav><a href="/pricing">Pricing</a><a href="/about">About</a></nav>
<section><h1>Acme is a payroll platform for startups</h1>
<p>Run payroll for teams of 5 to 500 people in under 10 minutes.</p></section>
<p>Tired of chasing payroll spreadsheets every month? Acme automates the whole run.</p>
<p>We helped Globex to close payroll in 2 days. Customers saved $12,000 per year on average.</p>
<p>Case study: how Initech cut payroll errors to zero in 3 months.</p>
<p>"Acme cut our close time in half and our auditors love it." - Maria Lopez, CFO at Globex</p>
<p>Rated 4.8 out of 5 from 300 reviews on G2 by startup and small business finance teams.</p>
<h2>What does Acme cost?</h2><p>Plans start at $8 per employee per month, billed monthly.</p>
<h2>How long does setup take?</h2><p>Most teams finish onboarding in about 30 minutes.</p>
<h2>Which countries are supported?</h2><p>Acme supports payroll in the US, UK and Canada today.</p>
</body></html>"""


@pytest.fixture
def rich_homepage_html() -> str:
    return RICH_HOMEPAGE
