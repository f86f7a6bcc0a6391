from confidence_agent.aggregator import combine_site_extractions
from confidence_agent.extractor import extract_page
from confidence_agent.models import ManifestAlignment
from confidence_agent.strengths import (
    detect_faq_content,
    detect_freshness,
    detect_high_fact_density,
    detect_llms_txt,
    detect_product_schema,
    run_strength_checks,
)


def _site(*pages):
    pages = list(pages)
    return combine_site_extractions(pages), pages


def test_rich_homepage_strengths(rich_homepage_html):
    site, pages = _site(extract_page(rich_homepage_html, "https://acme.test", "homepage"))

    strengths = run_strength_checks(site, pages)
    codes = {s.code for s in strengths}

    assert {
        "STRENGTH_SCHEMA_PRESENT",
        "STRENGTH_QUANTIFIED_OUTCOMES",
        "STRENGTH_THIRD_PARTY",
        "STRENGTH_CLEAR_DEFINITION",
        "STRENGTH_AUDIENCE_DEFINED",
        "STRENGTH_CASE_STUDIES",
        "STRENGTH_TESTIMONIALS",
        "STRENGTH_PROBLEM_FRAMING",
        "STRENGTH_FAQ_CONTENT",
    } <= codes
    assert "STRENGTH_PRODUCT_SCHEMA" not in codes
    assert strengths[0].code == "STRENGTH_CLEAR_DEFINITION"
    impacts = [s.impact for s in strengths]
    assert impacts == sorted(impacts, reverse=True)


def test_sparse_page_has_no_strengths(build_page):
    site, pages = _site(build_page("<p>nothing to see</p>"))
    assert run_strength_checks(site, pages) == []


def test_faq_content_needs_three_entries(build_page):
    two = "".join(f"<h2>What is plan {i}?</h2><p>Plan {i} covers payroll for up to ten people.</p>" for i in range(2))
    site, pages = _site(build_page(two))
    assert detect_faq_content(site, pages) == []

    three = two + "<h2>How do refunds work?</h2><p>Refunds are issued within 14 days of a request.</p>"
    site, pages = _site(build_page(three))
    found = detect_faq_content(site, pages)
    assert [s.code for s in found] == ["STRENGTH_FAQ_CONTENT"]
    assert found[0].pillar == "audience"


def test_high_fact_density(build_page):
    body = " ".join(["Syncs in 40 ms with 99.9% uptime for $10 per seat."] * 25)
    site, pages = _site(build_page(f"<p>{body}</p>"))

    found = detect_high_fact_density(site, pages)

    assert [s.code for s in found] == ["STRENGTH_HIGH_FACT_DENSITY"]
    assert found[0].evidence[0].snippet.startswith("75 hard facts in 275 words")


def test_product_schema_and_freshness(build_page):
    page = build_page(
        "<h1>Plans</h1><p>Prices updated March 2026 for every plan and seat.</p>",
        url="https://acme.test/pricing",
        page_type="pricing",
        head='<script type="application/ld+json">{"@type": "SoftwareApplication"}</script>',
    )
    site, pages = _site(page)

    assert [s.code for s in detect_product_schema(site, pages)] == ["STRENGTH_PRODUCT_SCHEMA"]
    fresh = detect_freshness(site, pages)
    assert [s.code for s in fresh] == ["STRENGTH_FRESHNESS"]
    assert "March 2026" in fresh[0].evidence[0].snippet
    assert fresh[0].evidence[0].url == "https://acme.test/pricing"


def test_schema_dates_count_as_freshness(build_page):
    page = build_page(
        "<p>Plans start at $12 per user for every team.</p>",
        head='<script type="application/ld+json">{"@type": "Product", "offers": {"priceValidUntil": "2026-12-31"}}</script>',
    )
    site, pages = _site(page)
    assert detect_freshness(site, pages)[0].evidence[0].snippet == "structured data date/version"


def test_llms_txt_strength_only_when_aligned():
    assert detect_llms_txt(None) == []
    assert detect_llms_txt(ManifestAlignment(present=False, aligned=None, modifier=0)) == []
    assert detect_llms_txt(ManifestAlignment(present=True, aligned=False, modifier=-5)) == []

    found = detect_llms_txt(ManifestAlignment(present=True, aligned=True, modifier=5, notes=["llms.txt found"]))
    assert [s.code for s in found] == ["STRENGTH_LLMS_TXT_ALIGNED"]
    assert found[0].impact == 60
