from __future__ import annotations

from .models import PageExtraction, SiteData

SUMMARY_CHAR_LIMIT = 6000


def _dedupe(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


def combine_site_extractions(extractions: list[PageExtraction]) -> SiteData:
    """Merge per-page extractions into one site-level view.

    Statement lists are deduplicated (first occurrence wins); FAQs are not.
    When several pages share a page type, the last one is kept in ``page_types``.
    """
    site = SiteData()
    for extraction in extractions:
        site.page_types[extraction.page_type] = extraction
        if extraction.page_type == "homepage":
            site.homepage = extraction
        site.all_headings.extend(extraction.headings)
        site.all_definitions.extend(extraction.definition_statements)
        site.all_audience_statements.extend(extraction.audience_statements)
        site.all_claims.extend(extraction.claims)
        site.all_proof_points.extend(extraction.proof_points)
        site.all_faqs.extend(extraction.faqs)

    site.all_definitions = _dedupe(site.all_definitions)
    site.all_audience_statements = _dedupe(site.all_audience_statements)
    site.all_claims = _dedupe(site.all_claims)
    site.all_proof_points = _dedupe(site.all_proof_points)
    return site


def build_site_content_summary(site: SiteData) -> str:
    """Plain-text digest of the site used as prompt context."""
    parts: list[str] = []

    homepage = site.homepage
    if homepage is not None:
        parts.append("=== HOMEPAGE ===")
        if homepage.meta.title:
            parts.append(f"Title: {homepage.meta.title}")
        if homepage.meta.description:
            parts.append(f"Meta: {homepage.meta.description}")
        if homepage.hero.headline:
            parts.append(f"Headline: {homepage.hero.headline}")
        if homepage.hero.subheadline:
            parts.append(f"Subheadline: {homepage.hero.subheadline}")
        if homepage.paragraphs:
            parts.append("Content:\n" + "\n".join(homepage.paragraphs[:5]))

    about = site.page_types.get("about")
    if about is not None:
        parts.append("\n=== ABOUT PAGE ===")
        if about.hero.headline:
            parts.append(f"Headline: {about.hero.headline}")
        if about.paragraphs:
            parts.append("Content:\n" + "\n".join(about.paragraphs[:3]))

    if site.all_definitions:
        parts.append("\n=== DEFINITIONS FOUND ===")
        parts.append("\n".join(site.all_definitions[:5]))

    if site.all_proof_points:
        parts.append("\n=== PROOF POINTS ===")
        parts.append("\n".join(site.all_proof_points[:5]))

    content = "\n".join(parts)
    if len(content) > SUMMARY_CHAR_LIMIT:
        content = content[:SUMMARY_CHAR_LIMIT] + "\n[truncated]"
    return content
