from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any
from urllib.parse import urlparse

from .ai_writer import generate_text, parse_json_payload, strip_code_fences
from .models import FAQ, LlmsTxtResponse, SchemaResponse, SiteInfo

logger = logging.getLogger(__name__)

MAX_FAQ_ENTRIES = 10
MAX_REVIEWS = 5


def _domain(url: str) -> str:
    host = urlparse(url if "://" in url else "https://" + url).hostname or url
    return host[4:] if host.startswith("www.") else host


def _generated_object(prompt: str) -> dict[str, Any] | None:
    parsed = parse_json_payload(generate_text(prompt, max_output_tokens=800))
    if isinstance(parsed, dict) and parsed.get("@type"):
        return parsed
    return None


def organization_schema(info: SiteInfo) -> dict[str, Any]:
    prompt = f"""Generate a JSON-LD Organization schema for this company. Return ONLY valid JSON, no markdown.

Company Info:
- Name: {info.name}
- URL: {info.url}
- Description: {info.description or 'Not provided'}
- Category: {info.category or 'Technology'}
- Target Audience: {info.audience or 'Businesses'}

Generate a complete Organization schema with:
- @context and @type
- name, url, description
- A professional sameAs array (leave empty if unsure)
- contactPoint with generic support email format

Return ONLY the JSON object, no explanation."""
    generated = _generated_object(prompt)
    if generated is not None:
        return generated

    return {
        "@context": "https://schema.org",
        "@type": "Organization",
        "name": info.name,
        "url": info.url,
        "description": info.description or f"{info.name} - {info.category or 'Technology'} solutions",
        "contactPoint": {
            "@type": "ContactPoint",
            "contactType": "customer support",
            "email": f"support@{_domain(info.url)}",
        },
    }


def product_schema(info: SiteInfo) -> dict[str, Any]:
    prompt = f"""Generate a JSON-LD SoftwareApplication schema for this product. Return ONLY valid JSON, no markdown.

Product Info:
- Name: {info.name}
- URL: {info.url}
- Description: {info.description or 'Not provided'}
- Category: {info.category or 'Business Software'}
- Target Audience: {info.audience or 'Businesses'}

Generate a SoftwareApplication schema with:
- @context and @type
- name, url, description
- applicationCategory
- operatingSystem: "Web"
- offers with a FreeTrial or typical SaaS pricing structure

Return ONLY the JSON object, no explanation."""
    generated = _generated_object(prompt)
    if generated is not None:
        return generated

    return {
        "@context": "https://schema.org",
        "@type": "SoftwareApplication",
        "name": info.name,
        "url": info.url,
        "description": info.description or f"{info.name} software",
        "applicationCategory": info.category or "BusinessApplication",
        "operatingSystem": "Web",
        "offers": {
            "@type": "Offer",
            "price": "0",
            "priceCurrency": "USD",
            "description": "Free trial available",
        },
    }


def faq_schema(faqs: list[FAQ]) -> dict[str, Any]:
    return {
        "@context": "https://schema.org",
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": faq.question,
                "acceptedAnswer": {"@type": "Answer", "text": faq.answer},
            }
            for faq in faqs[:MAX_FAQ_ENTRIES]
        ],
    }


def review_schema(info: SiteInfo) -> dict[str, Any]:
    testimonials = info.testimonials
    rating_value = min(4.5 + len(testimonials) * 0.1, 5)
    return {
        "@context": "https://schema.org",
        "@type": "Product",
        "name": info.name,
        "description": info.description,
        "aggregateRating": {
            "@type": "AggregateRating",
            "ratingValue": f"{rating_value:.1f}",
            "reviewCount": max(len(testimonials), 1),
            "bestRating": "5",
            "worstRating": "1",
        },
        "review": [
            {
                "@type": "Review",
                "reviewRating": {"@type": "Rating", "ratingValue": "5", "bestRating": "5"},
                "reviewBody": text,
                # Placeholder names; site owners replace them with real customers.
                "author": {"@type": "Person", "name": f"Customer {i + 1}"},
            }
            for i, text in enumerate(testimonials[:MAX_REVIEWS])
        ],
    }


SCHEMA_INSTRUCTIONS = """## How to Add Schema to Your Site

### Option 1: Add to HTML <head> (Recommended)
Copy the schema code above and paste it into your website's <head> section, just before the closing </head> tag.

### Option 2: WordPress
Use a schema plugin, add it to your theme's header.php, or use a "Header Scripts" plugin.

### Option 3: Next.js / React
Render a <script type="application/ld+json"> tag with the JSON in your layout.

### Option 4: Webflow / Squarespace
Look for "Custom Code" in your site settings and paste in the <head> section.

### Verification
After adding, use Google's Rich Results Test to verify:
https://search.google.com/test/rich-results
"""


def _schema_instructions(schema_type: str) -> str:
    extra = ""
    if schema_type == "review":
        extra = '\nNote: For Review schema, replace "Customer 1", "Customer 2" etc. with real customer names.\n'
    elif schema_type == "faq":
        extra = "\nTip: FAQPage schema can appear as rich results in Google search.\n"
    return SCHEMA_INSTRUCTIONS + extra


def generate_schemas(schema_type: str, info: SiteInfo) -> SchemaResponse:
    schemas: dict[str, dict[str, Any]] = {}
    want_all = schema_type == "all"

    if want_all or schema_type == "organization":
        schemas["organization"] = organization_schema(info)
    if want_all or schema_type == "product":
        schemas["product"] = product_schema(info)
    if (want_all or schema_type == "faq") and info.faqs:
        schemas["faq"] = faq_schema(info.faqs)
    if (want_all or schema_type == "review") and info.testimonials:
        schemas["review"] = review_schema(info)

    snippets = [
        f'<!-- {name.capitalize()} Schema -->\n<script type="application/ld+json">\n{json.dumps(schema, indent=2)}\n</script>'
        for name, schema in schemas.items()
    ]
    return SchemaResponse(schemas=schemas, html="\n\n".join(snippets), instructions=_schema_instructions(schema_type))


LLMS_TXT_INSTRUCTIONS = """## How to Add llms.txt to Your Site

1. Save this content as `llms.txt` (plain text).
2. Place it at your domain root so it is served at `https://yourdomain.com/llms.txt`
   (Next.js: `/public`; static hosts: next to `index.html`; WordPress: upload to the web root).
3. Visit the URL in a browser to confirm it is accessible.

### Best Practices
- Update quarterly or when you ship major features
- Keep it factual; AI systems distrust marketing speak
- Include boundaries ("What We Are NOT")
- Keep total length under 2000 characters
"""


def _llms_txt_prompt(info: SiteInfo, today: str) -> str:
    lines = [
        f"- Name: {info.name}",
        f"- URL: {info.url}",
        f"- Description: {info.description or 'Not provided'}",
        f"- Category: {info.category or 'Technology'}",
        f"- Target Audience: {info.audience or 'Businesses'}",
    ]
    if info.use_cases:
        lines.append("- Use Cases: " + ", ".join(info.use_cases))
    if info.features:
        lines.append("- Key Features: " + ", ".join(info.features))
    facts = "\n".join(lines)

    return f"""Generate a llms.txt file for this product/company. The llms.txt format is a plain text file that helps AI systems understand a product accurately.

Company/Product Info:
{facts}

Generate a llms.txt file following this exact format:

# [Product Name]

> [One-line description - what it is and who it's for]

## What We Are
[2-3 bullet points describing the core product/service]

## What We Are NOT
[2-3 bullet points clarifying boundaries - what you shouldn't recommend this for]

## Key Capabilities
[4-6 bullet points of specific features/capabilities]

## Best For
[2-4 bullet points describing ideal use cases and customer profiles]

## Pricing
[Brief pricing info if known, otherwise "See website for current pricing"]

## Contact
- Website: [URL]
- Support: [support email format]

---
Last updated: {today}

IMPORTANT RULES:
1. Be factual and specific - NO marketing buzzwords
2. Use plain language a human would use
3. Include boundaries (what NOT to recommend for)
4. Keep it under 1500 characters total
5. Don't invent features - only include what's clearly indicated

Return ONLY the llms.txt content, no explanation or markdown code blocks."""


def fallback_llms_txt(info: SiteInfo, today: str) -> str:
    name = info.name
    category = info.category.lower() if info.category else "software"
    audience = info.audience or "businesses"
    summary = info.description or f"{name} - {info.category or 'software'} for {audience}"
    if info.use_cases:
        capabilities = "\n".join(f"- {uc}" for uc in info.use_cases)
    else:
        capabilities = "- [List your main features]\n- [Add specific capabilities]\n- [Include measurable benefits]"

    return f"""# {name}

> {summary}

## What We Are
- A {category} solution
- Built for {audience}
- [Add your core value proposition]

## What We Are NOT
- Not a replacement for [competing category]
- Not designed for [wrong audience]
- Not a [common misconception]

## Key Capabilities
{capabilities}

## Best For
- {info.audience or 'Teams looking for [solution type]'}
- Companies that need [specific requirement]
- Organizations with [use case]

## Pricing
See {info.url.rstrip('/')}/pricing for current plans

## Contact
- Website: {info.url}
- Support: support@{_domain(info.url)}

---
Last updated: {today}"""


def generate_llms_txt(info: SiteInfo) -> LlmsTxtResponse:
    today = date.today().isoformat()
    reply = generate_text(_llms_txt_prompt(info, today), temperature=0.4, max_output_tokens=1000)
    content = strip_code_fences(reply) if reply else ""
    if not content:
        logger.warning("llms.txt generation unavailable for %s; using template", info.url)
        content = fallback_llms_txt(info, today)
    return LlmsTxtResponse(content=content, instructions=LLMS_TXT_INSTRUCTIONS)
