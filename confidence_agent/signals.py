"""
Site-level text detectors.

Both the blocker checks and the strength checks read the same signals; each
detector here is a small pure function over plain text (or extractions) so
it can be exercised against literal fixture strings.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable

from .models import PageExtraction


def narrative_text(extractions: Iterable[PageExtraction]) -> str:
    """Hero text plus paragraphs of every page."""
    parts: list[str] = []
    for e in extractions:
        parts.extend([e.hero.headline, e.hero.subheadline, *e.paragraphs])
    return " ".join(p for p in parts if p)


def proof_text(extractions: Iterable[PageExtraction]) -> str:
    """Paragraphs plus headings of every page."""
    parts: list[str] = []
    for e in extractions:
        parts.extend([*e.paragraphs, *(h.text for h in e.headings)])
    return " ".join(p for p in parts if p)


def page_full_text(extraction: PageExtraction) -> str:
    parts = [extraction.hero.headline, extraction.hero.subheadline]
    parts.extend(h.text for h in extraction.headings)
    parts.extend(extraction.paragraphs)
    for group in extraction.lists:
        parts.extend(group)
    for faq in extraction.faqs:
        parts.extend([faq.question, faq.answer])
    return " ".join(p for p in parts if p)


def site_text(extractions: Iterable[PageExtraction]) -> str:
    return " ".join(t for t in (page_full_text(e) for e in extractions) if t)


def snippet_around(text: str, start: int, end: int, width: int = 80) -> str:
    lo = max(0, start - width)
    hi = min(len(text), end + width)
    snippet = text[lo:hi].strip()
    if lo > 0:
        snippet = "…" + snippet
    if hi < len(text):
        snippet = snippet + "…"
    return snippet


# Problem framing

PROBLEM_PATTERNS = (
    re.compile(r"struggling with", re.I),
    re.compile(r"tired of", re.I),
    re.compile(r"frustrated by", re.I),
    re.compile(r"challenge[sd]? (?:of|with|in)", re.I),
    re.compile(r"problems? (?:of|with|in|like)", re.I),
    re.compile(r"pain point", re.I),
    re.compile(r"(?:do you|are you) (?:having|facing|dealing)", re.I),
    re.compile(r"(?:hard|difficult|tough) to", re.I),
    re.compile(r"waste[sd]? (?:time|money|hours)", re.I),
    re.compile(r"(?:stop|eliminate|end|fix|solve) (?:the|your)", re.I),
    re.compile(r"what if you could", re.I),
    re.compile(r"imagine (?:if|a world|being able)", re.I),
)

SOLUTION_ONLY_PATTERNS = (
    re.compile(r"we (?:provide|offer|deliver|build|create)", re.I),
    re.compile(r"(?:our|the) (?:platform|solution|tool|software|product)", re.I),
    re.compile(r"(?:leading|best|top|premier) (?:provider|solution|platform)", re.I),
)

_QUESTION_PHRASE_RE = re.compile(r"(do you|are you|have you|what if|why do|how do)", re.I)


def find_problem_framing(text: str) -> list[str]:
    hits: list[str] = []
    for pattern in PROBLEM_PATTERNS:
        m = pattern.search(text)
        if m:
            hits.append(snippet_around(text, m.start(), m.end()))
    return hits


def has_problem_framing(text: str) -> bool:
    return any(p.search(text) for p in PROBLEM_PATTERNS)


def has_solution_only_phrasing(text: str) -> bool:
    return any(p.search(text) for p in SOLUTION_ONLY_PATTERNS)


def has_question_framing(text: str) -> bool:
    return "?" in text and bool(_QUESTION_PHRASE_RE.search(text))


# Specificity

REAL_EXAMPLE_PATTERNS = (
    re.compile(r"[Ww]e (?:helped|worked with)\s+([A-Z][a-zA-Z\s]+?)(?:\s+to|\s+by|,|\.)"),
    re.compile(r"case study:\s*([^.]+)", re.I),
)

OUTCOME_PATTERNS = (
    re.compile(r"\d+%\s*(?:increase|decrease|reduction|improvement|faster)", re.I),
    re.compile(r"(?:saved?|reduced?|increased?)\s*(?:by\s*)?\$?\d[\d,]*", re.I),
)


def find_real_examples(text: str) -> list[str]:
    return [m.group(0).strip() for p in REAL_EXAMPLE_PATTERNS for m in p.finditer(text)]


def find_outcomes(text: str) -> list[str]:
    return list(dict.fromkeys(m.group(0).strip() for p in OUTCOME_PATTERNS for m in p.finditer(text)))


_TERM_SUFFIXES = ("Method", "Methodology", "Framework", "Engine", "Protocol", "Formula", "Blueprint")

_BRANDED_TERM_PATTERNS = (
    re.compile(r"\b(?:proprietary|patented|patent-pending|signature)\s+([A-Z][\w-]*(?:\s+[A-Z][\w-]*){0,3})"),
    re.compile(r"\b((?:[A-Z][\w-]*\s+){1,3}(?:" + "|".join(_TERM_SUFFIXES) + r"))\b"),
    re.compile(r"\b([A-Z][\w-]*(?:\s+[A-Z][\w-]*){0,3})\s?[™®]"),
)

_TERM_STOP_PREFIXES = ("The ", "Our ", "Your ", "A ", "An ")


def find_proprietary_terms(text: str) -> list[str]:
    terms: list[str] = []
    for pattern in _BRANDED_TERM_PATTERNS:
        for m in pattern.finditer(text):
            term = m.group(1).strip()
            for prefix in _TERM_STOP_PREFIXES:
                if term.startswith(prefix):
                    term = term[len(prefix):]
            # "Our Method" or "The Framework" names nothing.
            if term in _TERM_SUFFIXES:
                continue
            if len(term) > 2:
                terms.append(term)
    return list(dict.fromkeys(terms))


def is_term_explained(term: str, text: str, definitions: Iterable[str] = ()) -> bool:
    """True when the term is followed by a plain-language gloss or appears in a definition."""
    lowered = term.lower()
    if any(lowered in d.lower() for d in definitions):
        return True
    gloss = re.compile(
        re.escape(term) + r"[™®]?\s*(?:\(|:|—|–|-\s|,\s*(?:a|an|which|our)\b|(?:is|means|refers to|helps)\b)"
    )
    return bool(gloss.search(text))


def find_unexplained_terms(text: str, definitions: Iterable[str] = ()) -> list[str]:
    definitions = list(definitions)
    return [t for t in find_proprietary_terms(text) if not is_term_explained(t, text, definitions)]


# Proof

CASE_STUDY_PATTERNS = (
    re.compile(r"case study[:\s]+", re.I),
    re.compile(r"how we helped", re.I),
    re.compile(r"success story", re.I),
)

TESTIMONIAL_PATTERNS = (
    re.compile(r"\"[^\"]{30,500}\"\s*[-–—]\s*[A-Z][a-z]+"),
    re.compile(r"“[^”]{30,500}”\s*[-–—]\s*[A-Z][a-z]+"),
)

THIRD_PARTY_PLATFORMS = (
    ("G2", ("g2.com", "g2crowd")),
    ("Capterra", ("capterra.com",)),
    ("TrustPilot", ("trustpilot.com",)),
    ("Product Hunt", ("producthunt.com",)),
    ("Reddit", ("reddit.com", " r/")),
    ("GitHub", ("github.com",)),
    ("TechCrunch", ("techcrunch.com",)),
    ("Forbes", ("forbes.com",)),
    ("Gartner", ("gartner.com",)),
    ("Forrester", ("forrester.com",)),
)

AS_SEEN_ON_PATTERNS = (
    re.compile(r"as (?:seen|featured) (?:on|in)", re.I),
    re.compile(r"featured (?:by|in)", re.I),
    re.compile(r"recognized by", re.I),
    re.compile(r"awarded by", re.I),
    re.compile(r"rated .* on g2", re.I),
    re.compile(r"\d+\+?\s*reviews? on", re.I),
)


def find_case_studies(text: str) -> list[str]:
    hits: list[str] = []
    for pattern in CASE_STUDY_PATTERNS:
        for m in pattern.finditer(text):
            hits.append(snippet_around(text, m.start(), m.end()))
    return hits


def find_testimonials(text: str) -> list[str]:
    return [m.group(0) for p in TESTIMONIAL_PATTERNS for m in p.finditer(text)]


def find_third_party_platforms(text: str) -> list[str]:
    lowered = text.lower()
    return [name for name, needles in THIRD_PARTY_PLATFORMS if any(n in lowered for n in needles)]


def has_as_seen_on(text: str) -> bool:
    return any(p.search(text) for p in AS_SEEN_ON_PATTERNS)


# Audience

COMPANY_SIZE_KEYWORDS = ("enterprise", "mid-market", "startup", "small business")


def find_company_sizes(text: str) -> list[str]:
    lowered = text.lower()
    return [k for k in COMPANY_SIZE_KEYWORDS if k in lowered]


# Factual density

HARD_FACT_PATTERNS = (
    re.compile(r"\b\d+(?:\.\d+)?\s?%"),
    re.compile(r"[$€£]\s?\d[\d,]*(?:\.\d+)?"),
    re.compile(
        r"\b\d+(?:\.\d+)?\s?(?:ms|milliseconds?|seconds?|secs?|minutes?|mins?|hours?|hrs?|days?|weeks?|"
        r"months?|years?|kb|mb|gb|tb|kg|lbs?|oz|km|miles?|cm|mm|inches|ft|mph|kwh|hz|ghz|mhz|fps|dpi|x)\b",
        re.I,
    ),
    re.compile(r"\b(?:v\d+(?:\.\d+)+|version\s+\d+(?:\.\d+)*)\b", re.I),
    re.compile(r"\b(?:SOC\s?[12]|ISO\s?\d{4,5}|GDPR|HIPAA|PCI(?:[- ]DSS)?|CCPA|FedRAMP|WCAG)\b", re.I),
)

LOW_DENSITY_THRESHOLD = 0.01
HIGH_DENSITY_THRESHOLD = 0.03
MIN_WORDS_FOR_DENSITY = 200


@dataclass(frozen=True)
class FactDensity:
    facts: int
    words: int

    @property
    def ratio(self) -> float:
        return self.facts / self.words if self.words else 0.0


def find_hard_facts(text: str) -> list[str]:
    return [m.group(0) for p in HARD_FACT_PATTERNS for m in p.finditer(text)]


def fact_density(text: str) -> FactDensity:
    return FactDensity(facts=len(find_hard_facts(text)), words=len(text.split()))


_SUPERLATIVE_RE = re.compile(
    r"(?<!\w)(?:best|fastest|cheapest|easiest|leading|industry-leading|top-rated|#1|number one|"
    r"most (?:advanced|powerful|trusted|popular|reliable|secure)|unmatched|unrivaled|unparalleled|"
    r"world's (?:first|best|leading)|(?:better|faster|cheaper|easier|smarter) than)(?!\w)",
    re.I,
)
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")


def find_unsupported_superlatives(text: str) -> list[str]:
    """Sentences with comparative or superlative claims and no hard fact in them."""
    out: list[str] = []
    for sentence in _SENTENCE_SPLIT_RE.split(text):
        sentence = sentence.strip()
        if sentence and _SUPERLATIVE_RE.search(sentence) and not find_hard_facts(sentence):
            out.append(sentence[:200])
    return list(dict.fromkeys(out))


# Product data

_PRICE_RE = re.compile(r"[$€£]\s?\d[\d,]*(?:\.\d+)?")
_BILLING_RE = re.compile(r"(?:\bper|/)\s?(?:month|mo|year|yr|user|seat)\b", re.I)

PRODUCT_ATTRIBUTES = (
    ("compatibility", ("compatible", "compatibility", "integrates with", "integration", "works with")),
    ("specifications", ("specification", "specs", "technical details", "dimensions", "requirements")),
    ("materials", ("material", "made of", "made from", "made with", "fabric", "ingredients")),
    ("availability", ("availability", "available in", "available now", "in stock", "out of stock", "ships", "delivery")),
)

FRESHNESS_PATTERNS = (
    re.compile(
        r"\b(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|jun(?:e)?|jul(?:y)?|aug(?:ust)?|"
        r"sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?\s+(?:\d{1,2},?\s+)?(?:19|20)\d{2}\b",
        re.I,
    ),
    re.compile(r"\b(?:19|20)\d{2}-\d{2}-\d{2}\b"),
    re.compile(r"\b(?:last updated|updated|as of|effective)\b[^.]{0,40}\d", re.I),
    re.compile(r"\b(?:v\d+(?:\.\d+)+|version\s+\d+(?:\.\d+)*)\b", re.I),
)

_SCHEMA_FRESHNESS_KEYS = ("dateModified", "datePublished", "softwareVersion", "priceValidUntil", "releaseDate")


def has_pricing_indicators(extraction: PageExtraction) -> bool:
    if extraction.page_type == "pricing":
        return True
    text = page_full_text(extraction)
    return bool(_PRICE_RE.search(text) or _BILLING_RE.search(text))


def pricing_pages(extractions: Iterable[PageExtraction]) -> list[PageExtraction]:
    return [e for e in extractions if has_pricing_indicators(e)]


def find_missing_product_attributes(text: str) -> list[str]:
    lowered = text.lower()
    return [name for name, needles in PRODUCT_ATTRIBUTES if not any(n in lowered for n in needles)]


def _schema_has_freshness(node: Any) -> bool:
    if isinstance(node, dict):
        if any(node.get(k) for k in _SCHEMA_FRESHNESS_KEYS):
            return True
        return any(_schema_has_freshness(v) for v in node.values())
    if isinstance(node, list):
        return any(_schema_has_freshness(v) for v in node)
    return False


def find_freshness_markers(extraction: PageExtraction) -> list[str]:
    text = page_full_text(extraction)
    markers = [m.group(0).strip() for p in FRESHNESS_PATTERNS for m in p.finditer(text)]
    if _schema_has_freshness(extraction.schema_data.raw):
        markers.append("structured data date/version")
    return list(dict.fromkeys(markers))
