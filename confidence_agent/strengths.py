from __future__ import annotations

from . import signals
from .models import Evidence, ManifestAlignment, PageExtraction, SiteData, Strength

SITE_WIDE = "Site-wide"
MIN_FAQS = 3


def _homepage_url(site: SiteData) -> str:
    return site.homepage.url if site.homepage is not None else "Homepage"


def _evidence(snippets: list[str], url: str = SITE_WIDE, location: str = "Content", limit: int = 3) -> list[Evidence]:
    return [Evidence(url=url, snippet=s, location=location) for s in snippets[:limit]]


def detect_schema_present(site: SiteData, extractions: list[PageExtraction]) -> list[Strength]:
    types: list[str] = []
    for e in extractions:
        types.extend(e.schema_data.types)
    types = list(dict.fromkeys(types))
    if not types:
        return []
    return [Strength(
        code="STRENGTH_SCHEMA_PRESENT",
        title="Structured data present",
        description="Your pages carry JSON-LD that AI can parse without guessing.",
        pillar="specificity",
        impact=70,
        evidence=_evidence(["Schema types: " + ", ".join(types)], location="JSON-LD"),
    )]


def detect_quantified_outcomes(site: SiteData, extractions: list[PageExtraction]) -> list[Strength]:
    outcomes = signals.find_outcomes(signals.narrative_text(extractions))
    if not outcomes:
        return []
    return [Strength(
        code="STRENGTH_QUANTIFIED_OUTCOMES",
        title="Quantified outcomes",
        description="You state measurable results, which AI can quote when recommending you.",
        pillar="specificity",
        impact=75,
        evidence=_evidence(outcomes),
    )]


def detect_third_party_mentions(site: SiteData, extractions: list[PageExtraction]) -> list[Strength]:
    content = signals.proof_text(extractions)
    platforms = signals.find_third_party_platforms(content)
    if not platforms and not signals.has_as_seen_on(content):
        return []
    snippet = "Mentions: " + ", ".join(platforms) if platforms else "Press / award mentions found"
    return [Strength(
        code="STRENGTH_THIRD_PARTY",
        title="Third-party validation",
        description="You reference external reviews, press, or communities that AI treats as independent proof.",
        pillar="proof",
        impact=72,
        evidence=_evidence([snippet]),
    )]


def detect_clear_definition(site: SiteData, extractions: list[PageExtraction]) -> list[Strength]:
    if not site.all_definitions:
        return []
    return [Strength(
        code="STRENGTH_CLEAR_DEFINITION",
        title="Clear description of what you do",
        description="AI can find a sentence that defines your company or product.",
        pillar="clarity",
        impact=85,
        evidence=_evidence(site.all_definitions, url=_homepage_url(site)),
    )]


def detect_audience_statement(site: SiteData, extractions: list[PageExtraction]) -> list[Strength]:
    if not site.all_audience_statements:
        return []
    return [Strength(
        code="STRENGTH_AUDIENCE_DEFINED",
        title="Audience is stated",
        description="Your content says who the product is for, so AI can match it to the right requests.",
        pillar="audience",
        impact=75,
        evidence=_evidence(site.all_audience_statements),
    )]


def detect_case_studies(site: SiteData, extractions: list[PageExtraction]) -> list[Strength]:
    hits = signals.find_case_studies(signals.proof_text(extractions))
    if not hits:
        return []
    return [Strength(
        code="STRENGTH_CASE_STUDIES",
        title="Case studies present",
        description="Detailed client stories give AI concrete evidence of your work.",
        pillar="proof",
        impact=80,
        evidence=_evidence(hits),
    )]


def detect_testimonials(site: SiteData, extractions: list[PageExtraction]) -> list[Strength]:
    quotes = signals.find_testimonials(signals.proof_text(extractions))
    if not quotes:
        return []
    return [Strength(
        code="STRENGTH_TESTIMONIALS",
        title="Attributed testimonials",
        description="Named client quotes are proof AI can attribute.",
        pillar="proof",
        impact=70,
        evidence=_evidence(quotes),
    )]


def detect_problem_framing(site: SiteData, extractions: list[PageExtraction]) -> list[Strength]:
    hits = signals.find_problem_framing(signals.narrative_text(extractions))
    if not hits:
        return []
    return [Strength(
        code="STRENGTH_PROBLEM_FRAMING",
        title="Problem-first framing",
        description="You describe the problem before the solution, which mirrors how users phrase AI questions.",
        pillar="clarity",
        impact=68,
        evidence=_evidence(hits),
    )]


def detect_faq_content(site: SiteData, extractions: list[PageExtraction]) -> list[Strength]:
    if len(site.all_faqs) < MIN_FAQS:
        return []
    return [Strength(
        code="STRENGTH_FAQ_CONTENT",
        title="FAQ content",
        description=f"{len(site.all_faqs)} question-and-answer pairs map directly to how people ask AI.",
        pillar="audience",
        impact=62,
        evidence=_evidence([f.question for f in site.all_faqs], location="FAQ content"),
    )]


def detect_high_fact_density(site: SiteData, extractions: list[PageExtraction]) -> list[Strength]:
    density = signals.fact_density(signals.site_text(extractions))
    if density.words <= signals.MIN_WORDS_FOR_DENSITY or density.ratio < signals.HIGH_DENSITY_THRESHOLD:
        return []
    return [Strength(
        code="STRENGTH_HIGH_FACT_DENSITY",
        title="Fact-dense content",
        description="Your pages are rich in numbers, units, prices, and standards that AI can quote precisely.",
        pillar="specificity",
        impact=66,
        evidence=_evidence([f"{density.facts} hard facts in {density.words} words ({density.ratio * 100:.1f}%)"], location="All pages"),
    )]


def detect_product_schema(site: SiteData, extractions: list[PageExtraction]) -> list[Strength]:
    pages = [e for e in extractions if e.schema_data.has_product]
    if not pages:
        return []
    return [Strength(
        code="STRENGTH_PRODUCT_SCHEMA",
        title="Product schema present",
        description="Your offering is described as a structured Product/SoftwareApplication.",
        pillar="specificity",
        impact=64,
        evidence=[Evidence(url=e.url, snippet="Product/SoftwareApplication schema", location="JSON-LD") for e in pages[:3]],
    )]


def detect_freshness(site: SiteData, extractions: list[PageExtraction]) -> list[Strength]:
    evidence: list[Evidence] = []
    for page in signals.pricing_pages(extractions):
        markers = signals.find_freshness_markers(page)
        if markers:
            evidence.append(Evidence(url=page.url, snippet=", ".join(markers[:3]), location="Pricing"))
    if not evidence:
        return []
    return [Strength(
        code="STRENGTH_FRESHNESS",
        title="Pricing shows freshness signals",
        description="Dates or versions near your pricing tell AI the information is current.",
        pillar="specificity",
        impact=55,
        evidence=evidence[:3],
    )]


def detect_llms_txt(alignment: ManifestAlignment | None) -> list[Strength]:
    if alignment is None or not alignment.present or not alignment.aligned:
        return []
    return [Strength(
        code="STRENGTH_LLMS_TXT_ALIGNED",
        title="llms.txt present and aligned",
        description="Your llms.txt agrees with your site and gives AI a concise, factual summary.",
        pillar="clarity",
        impact=60,
        evidence=_evidence(alignment.notes, location="/llms.txt"),
    )]


_SITE_DETECTORS = (
    detect_schema_present,
    detect_quantified_outcomes,
    detect_third_party_mentions,
    detect_clear_definition,
    detect_audience_statement,
    detect_case_studies,
    detect_testimonials,
    detect_problem_framing,
    detect_faq_content,
    detect_high_fact_density,
    detect_product_schema,
    detect_freshness,
)


def run_strength_checks(
    site: SiteData,
    extractions: list[PageExtraction],
    llms_txt: ManifestAlignment | None = None,
) -> list[Strength]:
    strengths: list[Strength] = []
    for detect in _SITE_DETECTORS:
        strengths.extend(detect(site, extractions))
    strengths.extend(detect_llms_txt(llms_txt))
    return sorted(strengths, key=lambda s: s.impact, reverse=True)
