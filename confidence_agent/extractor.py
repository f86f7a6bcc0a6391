"""
Page extraction.

Turns raw markup into a :class:`PageExtraction`: structured-data summary,
headings, hero, paragraphs, lists, FAQs, and four independent regex
families (definitions, audience statements, claims, proof points).
"""
from __future__ import annotations

import json
import re
from typing import Any, Iterable

from bs4 import BeautifulSoup, Tag

from .models import FAQ, Heading, Hero, PageExtraction, PageMeta, StructuredDataSummary

MAX_PARAGRAPHS = 30
MAX_LIST_GROUPS = 20
MAX_LIST_ITEMS = 20
MAX_DEFINITIONS = 10
MAX_AUDIENCE = 10
MAX_CLAIMS = 15
MAX_PROOF_POINTS = 15
FAQ_ANSWER_LIMIT = 500

_BOILERPLATE_TAGS = ("script", "style", "noscript", "iframe", "nav", "footer", "header", "aside")

_SCHEMA_KEYWORDS = {
    "has_organization": ("organization", "localbusiness"),
    "has_product": ("product", "softwareapplication"),
    "has_review": ("review", "aggregaterating"),
    "has_faq": ("faqpage", "question"),
    "has_how_to": ("howto",),
}

_DEFINITION_PATTERNS = (
    re.compile(r"\b(\w+)\s+is\s+(?:a|an|the)\s+([^.]+)", re.IGNORECASE),
    re.compile(r"\bwe\s+(?:are|provide|offer|build)\s+(?:a|an|the)?\s*([^.]+)", re.IGNORECASE),
)

_AUDIENCE_PATTERNS = (
    re.compile(r"\b(?:for|built for|designed for)\s+([^.]+?)(?:\.|,|$)", re.IGNORECASE),
    re.compile(r"\bhelps?\s+([^.]+?)\s+(?:to|by|with)", re.IGNORECASE),
)

_CLAIM_PATTERNS = (
    re.compile(r"\b(?:increase|boost|improve|reduce|save)\s+([^.]+)", re.IGNORECASE),
    re.compile(r"\b\d+%\s+(?:faster|better|more|less)[^.]*", re.IGNORECASE),
)

_PROOF_PATTERNS = (
    re.compile(r"\b(\d{1,3}(?:,\d{3})*\+?)\s*(?:customers?|users?|teams?)", re.IGNORECASE),
    re.compile(r"\b(?:trusted by|used by)\s+(\d{1,3}(?:,\d{3})*\+?)", re.IGNORECASE),
)

_FAQ_PREFIXES = ("what", "how", "why")


def _text(node: Tag | None) -> str:
    if node is None:
        return ""
    return re.sub(r"\s+", " ", node.get_text()).strip()


def _schema_types(entry: dict[str, Any]) -> list[str]:
    raw = entry.get("@type")
    if raw is None:
        return []
    values = raw if isinstance(raw, list) else [raw]
    return [v for v in values if isinstance(v, str) and v]


def _apply_types(summary: dict[str, Any], types: list[str]) -> None:
    summary["types"].extend(types)
    for t in types:
        lowered = t.lower()
        for flag, keywords in _SCHEMA_KEYWORDS.items():
            if any(k in lowered for k in keywords):
                summary[flag] = True


def extract_schema(soup: BeautifulSoup) -> StructuredDataSummary:
    """Summarize JSON-LD blocks. Must run on the unmodified document."""
    summary: dict[str, Any] = {
        "types": [],
        "has_organization": False,
        "has_product": False,
        "has_review": False,
        "has_faq": False,
        "has_how_to": False,
        "raw": [],
    }

    for script in soup.find_all("script", attrs={"type": re.compile(r"^\s*application/ld\+json\s*$", re.I)}):
        content = script.string if script.string is not None else script.get_text()
        if not content or not content.strip():
            continue
        try:
            parsed = json.loads(content)
        except ValueError:
            continue

        entries = parsed if isinstance(parsed, list) else [parsed]
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            _apply_types(summary, _schema_types(entry))

            graph = entry.get("@graph")
            if isinstance(graph, list):
                for item in graph:
                    if isinstance(item, dict):
                        _apply_types(summary, _schema_types(item))

            summary["raw"].append(entry)

    summary["types"] = list(dict.fromkeys(summary["types"]))
    return StructuredDataSummary(**summary)


def _match_family(texts: Iterable[str], patterns: tuple[re.Pattern[str], ...], limit: int) -> list[str]:
    found: list[str] = []
    for text in texts:
        if not text:
            continue
        hits: list[tuple[int, str]] = []
        for pattern in patterns:
            hits.extend((m.start(), m.group(0).strip()) for m in pattern.finditer(text))
        hits.sort(key=lambda h: h[0])
        found.extend(h[1] for h in hits if h[1])
    return list(dict.fromkeys(found))[:limit]


def find_definition_statements(texts: Iterable[str]) -> list[str]:
    return _match_family(texts, _DEFINITION_PATTERNS, MAX_DEFINITIONS)


def find_audience_statements(texts: Iterable[str]) -> list[str]:
    return _match_family(texts, _AUDIENCE_PATTERNS, MAX_AUDIENCE)


def find_claims(texts: Iterable[str]) -> list[str]:
    return _match_family(texts, _CLAIM_PATTERNS, MAX_CLAIMS)


def find_proof_points(texts: Iterable[str]) -> list[str]:
    return _match_family(texts, _PROOF_PATTERNS, MAX_PROOF_POINTS)


def _is_question_heading(text: str) -> bool:
    lowered = text.lower()
    return "?" in text or lowered.startswith(_FAQ_PREFIXES)


def _next_paragraph(node: Tag) -> Tag | None:
    sibling = node.find_next_sibling()
    if sibling is not None and sibling.name == "p":
        return sibling
    return None


def _extract_hero(soup: BeautifulSoup) -> Hero:
    h1 = soup.find("h1")
    if h1 is None:
        return Hero()

    headline = _text(h1)
    subheadline = ""
    parent = h1.parent
    if parent is not None:
        subheadline = _text(parent.find("p"))
    if not subheadline:
        subheadline = _text(_next_paragraph(h1))
    if not (20 <= len(subheadline) < 500):
        subheadline = ""
    return Hero(headline=headline, subheadline=subheadline)


def _extract_lists(soup: BeautifulSoup) -> list[list[str]]:
    groups: list[list[str]] = []
    for el in soup.find_all(["ul", "ol"]):
        items = [t for t in (_text(li) for li in el.find_all("li")) if t and len(t) < 500]
        if 0 < len(items) < MAX_LIST_ITEMS:
            groups.append(items)
        if len(groups) >= MAX_LIST_GROUPS:
            break
    return groups


def _extract_faqs(soup: BeautifulSoup) -> list[FAQ]:
    faqs: list[FAQ] = []
    for el in soup.find_all(["h2", "h3", "h4"]):
        question = _text(el)
        if not question or not _is_question_heading(question):
            continue
        answer = _text(_next_paragraph(el))
        if len(answer) > 20:
            faqs.append(FAQ(question=question, answer=answer[:FAQ_ANSWER_LIMIT]))
    return faqs


def extract_page(html: str, url: str, page_type: str) -> PageExtraction:
    schema = extract_schema(BeautifulSoup(html or "", "html.parser"))

    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup.find_all(list(_BOILERPLATE_TAGS)):
        tag.extract()

    meta_desc = soup.find("meta", attrs={"name": "description"})
    meta = PageMeta(
        title=_text(soup.title),
        description=(meta_desc.get("content") or "").strip() if meta_desc is not None else "",
    )

    headings: list[Heading] = []
    for el in soup.find_all(["h1", "h2", "h3"]):
        text = _text(el)
        if 2 < len(text) < 300:
            headings.append(Heading(level=el.name, text=text))

    hero = _extract_hero(soup)

    paragraphs = [t for t in (_text(p) for p in soup.find_all("p")) if 30 <= len(t) < 2000][:MAX_PARAGRAPHS]

    texts = [hero.headline, hero.subheadline, *(h.text for h in headings), *paragraphs]
    texts = [t for t in texts if t]

    return PageExtraction(
        url=url,
        page_type=page_type,
        meta=meta,
        headings=headings,
        hero=hero,
        paragraphs=paragraphs,
        lists=_extract_lists(soup),
        definition_statements=find_definition_statements(texts),
        audience_statements=find_audience_statements(texts),
        claims=find_claims(texts),
        proof_points=find_proof_points(texts),
        faqs=_extract_faqs(soup),
        schema_data=schema,
    )
