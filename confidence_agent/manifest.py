from __future__ import annotations

from .models import ManifestAlignment, SiteData, Understanding

FLUFF_WORDS = ("revolutionary", "best-in-class", "world-class", "cutting-edge", "game-changing")

CONCISE_LIMIT = 2000
VERBOSE_LIMIT = 5000
MISALIGNED_MODIFIER = -5


def _first_word(value: str) -> str:
    words = value.lower().split()
    return words[0] if words else ""


def analyze_llms_txt(
    llms_txt: str | None,
    site: SiteData,
    understanding: Understanding | None,
) -> ManifestAlignment:
    """Compare the site's llms.txt against what the pages say.

    Four checks: product name, category, structure, and absence of marketing
    fluff. At least two passing means aligned (+3..+5); otherwise -5.
    """
    if not llms_txt:
        return ManifestAlignment(present=False, aligned=None, modifier=0, notes=["No llms.txt found (neutral)"])

    notes = ["llms.txt found"]
    lowered = llms_txt.lower()
    checks = 4
    passed = 0

    site_name = _first_word(site.homepage.meta.title) if site.homepage is not None else ""
    if site_name and site_name in lowered:
        passed += 1
        notes.append("Product name matches")

    category = _first_word(understanding.category) if understanding is not None else ""
    if category and category in lowered:
        passed += 1
        notes.append("Category aligns")

    if len(llms_txt) < CONCISE_LIMIT and "#" in llms_txt:
        passed += 1
        notes.append("Well-structured format")
    elif len(llms_txt) > VERBOSE_LIMIT:
        notes.append("llms.txt may be too verbose")

    if any(w in lowered for w in FLUFF_WORDS):
        notes.append("Contains marketing language (reduces trust)")
    else:
        passed += 1
        notes.append("No marketing fluff detected")

    ratio = passed / checks
    aligned = ratio >= 0.5
    if aligned:
        # Half-up: 4.5 -> 5.
        modifier = int(3 + ratio * 2 + 0.5)
        notes.append(f"Alignment bonus: +{modifier}%")
    else:
        modifier = MISALIGNED_MODIFIER
        notes.append(f"Misalignment penalty: {MISALIGNED_MODIFIER}%")

    return ManifestAlignment(present=True, aligned=aligned, modifier=modifier, notes=notes)
