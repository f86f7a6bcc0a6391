"""
Blocker checks.

Each ``check_*`` function is independent and pure: it reads the aggregated
site view and the per-page extractions and returns zero or more blockers.
``run_blocker_checks`` concatenates them in a fixed order and sorts by
severity (stable, so ties keep check order).
"""
from __future__ import annotations

from . import signals
from .models import Blocker, Evidence, ManifestAlignment, PageExtraction, SiteData

VAGUE_WORDS = (
    "innovative", "cutting-edge", "next-generation", "world-class", "best-in-class",
    "synergy", "leverage", "optimize", "streamline", "empower", "enable",
    "transform", "revolutionize", "disrupt", "reimagine", "unlock", "accelerate",
    "seamless", "robust", "scalable", "dynamic", "agile", "flexible",
    "holistic", "end-to-end", "turnkey", "comprehensive", "integrated",
    "drive growth", "drive results", "make potential possible",
    "fiercely human", "human-centered", "thought leadership",
)

EMPTY_PHRASES = (
    "we help companies", "we help businesses", "achieve their goals",
    "digital transformation", "strategic partner", "trusted partner",
    "customer-centric", "results-driven", "solutions that",
)

SITE_WIDE = "Site-wide"


def _homepage_url(site: SiteData) -> str:
    return site.homepage.url if site.homepage is not None else "Homepage"


def _evidence(url: str, snippet: str, location: str) -> list[Evidence]:
    return [Evidence(url=url, snippet=snippet, location=location)]


def check_language_clarity(site: SiteData, extractions: list[PageExtraction]) -> list[Blocker]:
    blockers: list[Blocker] = []
    homepage = site.homepage
    headline = homepage.hero.headline if homepage is not None else ""
    subheadline = homepage.hero.subheadline if homepage is not None else ""
    hero_text = f"{headline} {subheadline}".lower()

    vague = [w for w in VAGUE_WORDS if w in hero_text]
    empty = [p for p in EMPTY_PHRASES if p in hero_text]

    if vague or empty:
        evidence = _evidence(_homepage_url(site), headline or "No headline found", "Homepage hero")
        evidence.append(Evidence(url=_homepage_url(site), snippet="Buzzwords: " + ", ".join(vague + empty), location="Homepage hero"))
        blockers.append(Blocker(
            code="CLARITY_VAGUE_HERO",
            title="Homepage headline uses vague buzzwords",
            description="Your main headline uses empty phrases that don't tell AI what you actually do",
            pillar="clarity",
            severity=90,
            evidence=evidence,
            fix_strategy="Replace vague language with specifics. Say exactly what you do and for whom.",
        ))

    if not site.all_definitions:
        blockers.append(Blocker(
            code="CLARITY_NO_DEFINITION",
            title="No clear description of what you do",
            description="AI cannot find a sentence explaining what your company does",
            pillar="clarity",
            severity=92,
            evidence=_evidence(_homepage_url(site), "No definition statement found", SITE_WIDE),
            fix_strategy='Add one crystal-clear sentence: "[Company] is a [type] that [does what] for [whom]."',
        ))

    return blockers


def check_problem_framing(site: SiteData, extractions: list[PageExtraction]) -> list[Blocker]:
    blockers: list[Blocker] = []
    content = signals.narrative_text(extractions)

    has_problem = signals.has_problem_framing(content)

    if not has_problem and signals.has_solution_only_phrasing(content):
        headline = site.homepage.hero.headline if site.homepage is not None else ""
        blockers.append(Blocker(
            code="CLARITY_NO_PROBLEM_FRAMING",
            title="Describes solution without the problem",
            description="AI expands user queries into problems. Your site only describes what you do, not what problem you solve.",
            pillar="clarity",
            severity=78,
            evidence=_evidence(_homepage_url(site), headline or "Site content", "Homepage and key pages"),
            fix_strategy='Lead with the problem your audience faces. "Tired of X? We help you Y." frames context for AI.',
        ))

    if not has_problem and not signals.has_question_framing(content):
        blockers.append(Blocker(
            code="CLARITY_NO_QUERY_MATCHING",
            title="No question-based framing",
            description="AI matches user questions to content. Your site has no questions that mirror how users ask for recommendations.",
            pillar="audience",
            severity=65,
            evidence=_evidence(SITE_WIDE, "No user-facing questions found", "All content"),
            fix_strategy='Add FAQ or question-based sections: "Looking for X?" or "Struggling with Y?"',
        ))

    return blockers


def check_specificity(site: SiteData, extractions: list[PageExtraction]) -> list[Blocker]:
    blockers: list[Blocker] = []
    content = signals.narrative_text(extractions)

    if not signals.find_real_examples(content):
        blockers.append(Blocker(
            code="SPECIFICITY_NO_EXAMPLES",
            title="No concrete examples of your work",
            description="AI found no specific examples showing what you've done for actual clients",
            pillar="specificity",
            severity=86,
            evidence=_evidence(SITE_WIDE, "No specific client work examples found", "All content"),
            fix_strategy='Add specific examples: "We helped [Company X] achieve [result]"',
        ))

    if not signals.find_outcomes(content):
        blockers.append(Blocker(
            code="SPECIFICITY_NO_OUTCOMES",
            title="No specific outcomes or results mentioned",
            description="AI found no concrete numbers showing what results you deliver",
            pillar="specificity",
            severity=78,
            evidence=_evidence(SITE_WIDE, "No specific metrics found", "All content"),
            fix_strategy='Add specific outcomes: "Reduced processing time by 40%"',
        ))

    unexplained = signals.find_unexplained_terms(signals.site_text(extractions), site.all_definitions)
    if unexplained:
        blockers.append(Blocker(
            code="SPECIFICITY_UNEXPLAINED_JARGON",
            title="Branded terms without plain-language meaning",
            description=(
                "Your site relies on proprietary names that AI cannot map to a known category. "
                "Unexplained branded frameworks make it harder to say what you actually do."
            ),
            pillar="specificity",
            severity=62,
            evidence=_evidence(SITE_WIDE, "Unexplained terms: " + ", ".join(unexplained[:5]), "All content"),
            fix_strategy='Follow each branded term with a plain description: "[Term] (our [generic category] for [outcome])".',
        ))

    return blockers


def check_proof_points(site: SiteData, extractions: list[PageExtraction]) -> list[Blocker]:
    blockers: list[Blocker] = []
    content = signals.proof_text(extractions)

    if not signals.find_case_studies(content):
        blockers.append(Blocker(
            code="PROOF_NO_CASE_STUDIES",
            title="No real case studies found",
            description="AI couldn't find detailed examples of client work",
            pillar="proof",
            severity=84,
            evidence=_evidence(SITE_WIDE, "No case studies found", "All pages"),
            fix_strategy="Add 2-3 case studies showing: the client, the challenge, what you did, and results.",
        ))

    if not signals.find_testimonials(content):
        blockers.append(Blocker(
            code="PROOF_NO_TESTIMONIALS",
            title="No client testimonials found",
            description="AI found no actual client quotes with attribution",
            pillar="proof",
            severity=75,
            evidence=_evidence(SITE_WIDE, "No testimonials found", "All pages"),
            fix_strategy='Add real quotes from clients: "Quote" - Name, Title at Company',
        ))

    if not signals.find_third_party_platforms(content) and not signals.has_as_seen_on(content):
        blockers.append(Blocker(
            code="PROOF_NO_THIRD_PARTY",
            title="No third-party authority signals",
            description=(
                "AI prioritizes external validation over self-reported claims. Your site has no references "
                "to review platforms, press coverage, or community discussions."
            ),
            pillar="proof",
            severity=72,
            evidence=_evidence(SITE_WIDE, "No links or mentions of G2, Capterra, press, or community platforms", "All pages"),
            fix_strategy=(
                'Add "As featured in" section, link to your G2/Capterra profiles, or mention press coverage. '
                "External proof > self-reported claims."
            ),
        ))

    return blockers


def check_audience_clarity(site: SiteData, extractions: list[PageExtraction]) -> list[Blocker]:
    blockers: list[Blocker] = []

    if not site.all_audience_statements:
        blockers.append(Blocker(
            code="AUDIENCE_NOT_SPECIFIC",
            title="Target audience is vague",
            description="AI can't tell who this is for",
            pillar="audience",
            severity=80,
            evidence=_evidence(SITE_WIDE, "No audience statements found", "All content"),
            fix_strategy='Be specific: "mid-market SaaS companies", "CTOs at healthcare organizations"',
        ))

    if not signals.find_company_sizes(signals.narrative_text(extractions)):
        blockers.append(Blocker(
            code="AUDIENCE_NO_SIZE",
            title="Company size not specified",
            description="AI doesn't know if you serve startups, mid-market, or enterprise",
            pillar="audience",
            severity=65,
            evidence=_evidence(SITE_WIDE, "No company size indicators found", "All content"),
            fix_strategy='Specify who you work with: "enterprise organizations" or "seed to Series B startups"',
        ))

    return blockers


def check_schema_markup(site: SiteData, extractions: list[PageExtraction]) -> list[Blocker]:
    blockers: list[Blocker] = []

    all_types: list[str] = []
    has_organization = has_review = has_faq = False
    for e in extractions:
        all_types.extend(e.schema_data.types)
        has_organization = has_organization or e.schema_data.has_organization
        has_review = has_review or e.schema_data.has_review
        has_faq = has_faq or e.schema_data.has_faq
    all_types = list(dict.fromkeys(all_types))

    if not all_types:
        # Finer-grained schema checks are meaningless without any markup.
        return [Blocker(
            code="SPECIFICITY_NO_SCHEMA",
            title="No structured data (schema markup) found",
            description=(
                "AI systems prioritize structured data they can parse directly. Your site has no JSON-LD "
                "schema markup, forcing AI to guess what information means."
            ),
            pillar="specificity",
            severity=82,
            evidence=_evidence(SITE_WIDE, "No JSON-LD schema detected on any page", "All pages"),
            fix_strategy="Add JSON-LD schema markup. At minimum: Organization schema on homepage, and Product/Service schema for your offering.",
        )]

    if not has_organization:
        blockers.append(Blocker(
            code="SPECIFICITY_NO_ORG_SCHEMA",
            title="Missing Organization schema",
            description=(
                "AI cannot find structured data about who you are. Organization schema helps AI cite your "
                "company name, logo, and contact info confidently."
            ),
            pillar="specificity",
            severity=68,
            evidence=_evidence(_homepage_url(site), "Found schema types: " + ", ".join(all_types), "Homepage"),
            fix_strategy="Add Organization schema with name, description, logo, and contactPoint.",
        ))

    if not has_review and site.all_proof_points:
        blockers.append(Blocker(
            code="PROOF_NO_REVIEW_SCHEMA",
            title="Testimonials exist but no Review schema",
            description=(
                "You have social proof on your site, but AI cannot parse it as structured reviews. "
                "Adding Review/AggregateRating schema makes proof quotable."
            ),
            pillar="proof",
            severity=60,
            evidence=_evidence(SITE_WIDE, "Proof points found but no Review schema", "Content"),
            fix_strategy="Add AggregateRating or Review schema to make your testimonials machine-readable.",
        ))

    if not has_faq and site.all_faqs:
        blockers.append(Blocker(
            code="SPECIFICITY_NO_FAQ_SCHEMA",
            title="FAQ content exists but no FAQPage schema",
            description=(
                "Your site has Q&A content that could directly match user queries, but it's not in schema "
                "format. FAQPage schema dramatically improves AI matching."
            ),
            pillar="audience",
            severity=55,
            evidence=_evidence(SITE_WIDE, f"Found {len(site.all_faqs)} FAQ items without schema", "FAQ content"),
            fix_strategy="Add FAQPage schema to your FAQ content. This directly maps to how users ask AI questions.",
        ))

    return blockers


def check_factual_density(site: SiteData, extractions: list[PageExtraction]) -> list[Blocker]:
    blockers: list[Blocker] = []
    text = signals.site_text(extractions)
    density = signals.fact_density(text)

    if density.words > signals.MIN_WORDS_FOR_DENSITY and density.ratio < signals.LOW_DENSITY_THRESHOLD:
        blockers.append(Blocker(
            code="SPECIFICITY_LOW_FACT_DENSITY",
            title="Content is light on hard facts",
            description=(
                "AI favors sources it can quote precisely. Your pages contain few numbers, units, prices, "
                "versions, or certifications relative to their length."
            ),
            pillar="specificity",
            severity=70,
            evidence=_evidence(
                SITE_WIDE,
                f"{density.facts} hard facts in {density.words} words ({density.ratio * 100:.1f}%)",
                "All pages",
            ),
            fix_strategy="Replace adjectives with measurable facts: limits, prices, response times, supported versions, compliance standards.",
        ))

    unsupported = signals.find_unsupported_superlatives(signals.narrative_text(extractions))
    if unsupported:
        blockers.append(Blocker(
            code="PROOF_UNSUPPORTED_SUPERLATIVES",
            title="Superlative claims without supporting data",
            description=(
                'Claims like "the best" or "faster than" with no numbers behind them read as marketing. '
                "AI discounts comparisons it cannot verify."
            ),
            pillar="proof",
            severity=58,
            evidence=[Evidence(url=SITE_WIDE, snippet=s, location="Content") for s in unsupported[:3]],
            fix_strategy='Back every comparison with a number and a source: "2x faster page loads (median, 10k sites)".',
        ))

    return blockers


def check_product_data_signals(site: SiteData, extractions: list[PageExtraction]) -> list[Blocker]:
    pages = signals.pricing_pages(extractions)
    if not pages:
        return []

    blockers: list[Blocker] = []
    pricing_url = pages[0].url

    if not any(e.schema_data.has_product for e in extractions):
        blockers.append(Blocker(
            code="SPECIFICITY_NO_PRODUCT_SCHEMA",
            title="Pricing shown but no Product schema",
            description=(
                "Your site lists prices, but AI cannot read them as structured offers. Product or "
                "SoftwareApplication schema makes plans and prices citable."
            ),
            pillar="specificity",
            severity=66,
            evidence=_evidence(pricing_url, "Pricing content found without Product/SoftwareApplication schema", "Pricing"),
            fix_strategy="Add Product or SoftwareApplication schema with an Offer per plan (price, priceCurrency, billing period).",
        ))

    missing = signals.find_missing_product_attributes(signals.site_text(extractions))
    if len(missing) >= 3:
        blockers.append(Blocker(
            code="SPECIFICITY_MISSING_ATTRIBUTES",
            title="Key product attributes are missing",
            description=(
                "AI compares products on concrete attributes. Your site does not describe "
                + ", ".join(missing)
                + "."
            ),
            pillar="specificity",
            severity=60,
            evidence=_evidence(pricing_url, "Missing attributes: " + ", ".join(missing), "Product and pricing content"),
            fix_strategy="Document what it works with, technical specifications, what it is made of, and where/when it is available.",
        ))

    if not any(signals.find_freshness_markers(p) for p in pages):
        blockers.append(Blocker(
            code="SPECIFICITY_NO_FRESHNESS",
            title="Pricing has no freshness signals",
            description="AI cannot tell whether your prices are current. No dates or version numbers appear near pricing.",
            pillar="specificity",
            severity=50,
            evidence=_evidence(pricing_url, "No dates or version numbers in pricing content", "Pricing"),
            fix_strategy='Add "Prices updated [Month Year]" or the current product version next to your plans.',
        ))

    return blockers


def check_llms_txt(alignment: ManifestAlignment | None) -> list[Blocker]:
    if alignment is None:
        return []

    if not alignment.present:
        return [Blocker(
            code="CLARITY_NO_LLMS_TXT",
            title="No llms.txt file",
            description="AI systems increasingly look for /llms.txt, a concise factual summary of your product. None was found.",
            pillar="clarity",
            severity=40,
            evidence=_evidence(SITE_WIDE, "GET /llms.txt returned nothing", "/llms.txt"),
            fix_strategy="Publish a short Markdown llms.txt at your site root: what you are, what you are not, who it's for, pricing.",
        )]

    if alignment.aligned is False:
        return [Blocker(
            code="CLARITY_LLMS_TXT_MISALIGNED",
            title="llms.txt does not match your site",
            description="Your llms.txt exists but disagrees with what your pages say, which lowers AI confidence in both.",
            pillar="clarity",
            severity=58,
            evidence=_evidence(SITE_WIDE, "; ".join(alignment.notes) or "Alignment checks failed", "/llms.txt"),
            fix_strategy="Rewrite llms.txt to use your product name and category, keep it under 2000 characters with # headings, and drop marketing language.",
        )]

    return []


def run_blocker_checks(
    site: SiteData,
    extractions: list[PageExtraction],
    llms_txt: ManifestAlignment | None = None,
) -> list[Blocker]:
    blockers: list[Blocker] = []
    blockers.extend(check_language_clarity(site, extractions))
    blockers.extend(check_problem_framing(site, extractions))
    blockers.extend(check_specificity(site, extractions))
    blockers.extend(check_proof_points(site, extractions))
    blockers.extend(check_audience_clarity(site, extractions))
    blockers.extend(check_schema_markup(site, extractions))
    blockers.extend(check_factual_density(site, extractions))
    blockers.extend(check_product_data_signals(site, extractions))
    blockers.extend(check_llms_txt(llms_txt))
    return sorted(blockers, key=lambda b: b.severity, reverse=True)
