"""
Text-generation helpers backed by Google Gemini.

Every call here is best-effort: when the API key is missing, the request
fails, or the reply is not usable JSON, callers get ``None`` and substitute
deterministic content.
"""
from __future__ import annotations

import json
import logging
import os
import re
from typing import Any

from google import genai
from google.genai import types

from .aggregator import build_site_content_summary
from .models import Blocker, SiteData, Understanding, UnderstandingConfidence

logger = logging.getLogger(__name__)

GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_TIMEOUT_S = float(os.environ.get("GEMINI_TIMEOUT_S", "30"))

ENRICH_TOP_N = 5

_FENCE_RE = re.compile(r"```(?:json|txt|plaintext)?\s*\n?", re.IGNORECASE)


def generate_text(prompt: str, *, temperature: float = 0.3, max_output_tokens: int = 1024) -> str | None:
    """Send one prompt to Gemini and return the reply text, or None on any failure."""
    api_key = os.environ.get("GEMINI_API_KEY")
    if not api_key:
        return None

    try:
        client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(GEMINI_TIMEOUT_S * 1000)),
        )
        resp = client.models.generate_content(
            model=GEMINI_MODEL,
            contents=[types.Content(role="user", parts=[types.Part.from_text(text=prompt)])],
            config=types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            ),
        )
    except Exception as e:
        logger.warning("Gemini call failed: %s", e)
        return None

    text = (getattr(resp, "text", None) or "").strip()
    return text or None


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).replace("```", "").strip()


def parse_json_payload(text: str | None) -> Any | None:
    """Parse a JSON document out of a model reply, tolerating code fences and chatter."""
    if not text:
        return None
    cleaned = strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except ValueError:
        pass
    m = re.search(r"(\{.*\}|\[.*\])", cleaned, flags=re.DOTALL)
    if not m:
        return None
    try:
        return json.loads(m.group(1))
    except ValueError:
        return None


def _as_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        value = [value]
    out: list[str] = []
    for item in value:
        if item is None:
            continue
        s = str(item).strip()
        if s:
            out.append(s)
    return out


def _as_str(value: Any, default: str) -> str:
    s = str(value).strip() if value is not None else ""
    return s or default


# Understanding

def fallback_understanding(site: SiteData) -> Understanding:
    headline = site.homepage.hero.headline if site.homepage is not None else ""
    return Understanding(
        one_liner=headline or "Unable to determine",
        category="Unknown",
        audience="Not specified",
        use_cases=[],
        confusions=["Could not analyze with AI"],
        missing_for_confidence=[],
        confidence=UnderstandingConfidence(score=30, level="Low", reason="Fallback mode"),
    )


def _normalize_understanding(raw: Any) -> Understanding | None:
    """Clamp and default model output so downstream code stays stable."""
    if not isinstance(raw, dict):
        return None

    try:
        score = int(float(raw.get("confidenceScore", 50)))
    except (TypeError, ValueError):
        score = 50
    score = max(0, min(100, score))

    return Understanding(
        one_liner=_as_str(raw.get("oneLiner"), "Unable to determine"),
        category=_as_str(raw.get("category"), "Unclear"),
        audience=_as_str(raw.get("audience"), "Not clearly specified"),
        use_cases=_as_str_list(raw.get("useCases")),
        confusions=_as_str_list(raw.get("confusions")),
        missing_for_confidence=_as_str_list(raw.get("missingForConfidence")),
        confidence=UnderstandingConfidence(
            score=score,
            level=_as_str(raw.get("confidenceLevel"), "Medium"),
            reason=_as_str(raw.get("confidenceReason"), "AI analysis completed"),
        ),
    )


def _understanding_prompt(site_content: str) -> str:
    return f"""You are evaluating a company's website to understand what they do. Based on the content below, provide a structured analysis.

Here is the extracted content from their website:

---
{site_content}
---

Respond in this exact JSON format (no markdown, just raw JSON):
{{
  "oneLiner": "A single sentence describing what this company/product does. Be specific and concrete.",
  "category": "The product category (e.g., Project Management, CRM, Analytics, etc.)",
  "audience": "Who this product is for (be specific: company size, roles, industries)",
  "useCases": ["Use case 1", "Use case 2", "Use case 3"],
  "confusions": ["Anything unclear or confusing about their messaging"],
  "missingForConfidence": ["Information that would help you recommend them more confidently"],
  "confidenceScore": 75,
  "confidenceLevel": "Medium",
  "confidenceReason": "Brief explanation of your confidence level"
}}

Be honest and specific. If something is unclear, say so."""


def generate_understanding(site: SiteData) -> Understanding:
    reply = generate_text(_understanding_prompt(build_site_content_summary(site)), max_output_tokens=800)
    understanding = _normalize_understanding(parse_json_payload(reply))
    if understanding is None:
        if reply is not None:
            logger.warning("Understanding reply was not usable JSON; using fallback")
        return fallback_understanding(site)
    return understanding


# Blocker enrichment

def _enrichment_prompt(site_content: str, blockers: list[Blocker]) -> str:
    items = []
    for b in blockers:
        snippet = b.evidence[0].snippet if b.evidence else ""
        items.append(
            f'- code: {b.code}\n  title: {b.title}\n  description: {b.description}\n  evidence: {snippet}'
        )
    listing = "\n".join(items)
    return f"""You are reviewing why AI assistants hesitate to recommend a company. Below is the company's website content and a list of detected issues.

For each issue, rewrite it so it is specific to THIS site: quote or reference the actual content, and give a concrete fix the company could ship this week.

Website content:
---
{site_content}
---

Issues:
{listing}

Respond with ONLY valid JSON (no markdown):
{{
  "blockers": [
    {{"code": "<issue code, unchanged>", "description": "<site-specific explanation>", "evidenceSnippet": "<short quote or reference from the site>", "fixStrategy": "<concrete fix>"}}
  ]
}}

Only include codes from the list above."""


def _parse_enrichment(raw: Any) -> dict[str, dict[str, str]]:
    entries = raw.get("blockers") if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        return {}
    out: dict[str, dict[str, str]] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        code = str(entry.get("code") or "").strip()
        if not code:
            continue
        out[code] = {
            "description": str(entry.get("description") or "").strip(),
            "snippet": str(entry.get("evidenceSnippet") or entry.get("evidence") or "").strip(),
            "fix_strategy": str(entry.get("fixStrategy") or "").strip(),
        }
    return out


def _apply_enrichment(blocker: Blocker, patch: dict[str, str]) -> Blocker:
    update: dict[str, Any] = {}
    if patch["description"]:
        update["description"] = patch["description"]
    if patch["fix_strategy"]:
        update["fix_strategy"] = patch["fix_strategy"]
    # Only an existing snippet is rewritten; evidence is never invented.
    if patch["snippet"] and blocker.evidence:
        evidence = list(blocker.evidence)
        evidence[0] = evidence[0].model_copy(update={"snippet": patch["snippet"]})
        update["evidence"] = evidence
    return blocker.model_copy(update=update) if update else blocker


def enrich_blockers(blockers: list[Blocker], site: SiteData) -> list[Blocker]:
    """Rewrite the top blockers with site-specific text in one request.

    Returns a new list in the same order. Codes, titles, pillars and
    severities never change; on any failure the input is returned as-is.
    """
    top = sorted(blockers, key=lambda b: b.severity, reverse=True)[:ENRICH_TOP_N]
    if not top:
        return list(blockers)

    reply = generate_text(
        _enrichment_prompt(build_site_content_summary(site), top),
        temperature=0.4,
        max_output_tokens=2000,
    )
    patches = _parse_enrichment(parse_json_payload(reply))
    if not patches:
        if reply is not None:
            logger.warning("Blocker enrichment reply was not usable; keeping deterministic text")
        return list(blockers)

    top_ids = {id(b) for b in top}
    out: list[Blocker] = []
    for b in blockers:
        patch = patches.get(b.code)
        out.append(_apply_enrichment(b, patch) if patch and id(b) in top_ids else b)
    return out
