from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Iterator

import httpx

from .aggregator import combine_site_extractions
from .ai_writer import enrich_blockers, generate_understanding
from .blockers import run_blocker_checks
from .crawler import crawl_site
from .extractor import extract_page
from .manifest import analyze_llms_txt
from .models import AnalysisResult, CompleteEvent, ErrorEvent, StepEvent, StreamEvent
from .scorer import calculate_scores
from .store import AnalysisStore
from .strengths import run_strength_checks

logger = logging.getLogger(__name__)

STEP_MESSAGES = {
    1: "Crawling pages",
    2: "Extracting content",
    3: "Building AI understanding",
    4: "Identifying blockers",
    5: "Calculating score",
}


def _step(n: int) -> StepEvent:
    return StepEvent(step=n, message=STEP_MESSAGES[n])


def _persist(store: AnalysisStore, identity: str, url: str, result: AnalysisResult) -> None:
    try:
        store.save_analysis(identity, url, result)
        store.increment_usage(identity)
    except Exception:
        logger.warning("Saving analysis for %s failed", url, exc_info=True)


def run_analysis(
    url: str,
    *,
    client: httpx.Client | None = None,
    store: AnalysisStore | None = None,
    identity: str | None = None,
) -> Iterator[StreamEvent]:
    """Run the full pipeline, yielding progress events.

    Yields up to five ``StepEvent``s in order, then exactly one terminal
    ``CompleteEvent`` or ``ErrorEvent``. Nothing is yielded after the
    terminal event.
    """
    t0 = time.perf_counter()
    try:
        yield _step(1)
        crawl = crawl_site(url, client=client)
        if not crawl.success:
            yield ErrorEvent(error=crawl.error or "Crawl failed")
            return

        yield _step(2)
        extractions = [extract_page(p.html, p.url, p.page_type) for p in crawl.pages]
        site = combine_site_extractions(extractions)

        yield _step(3)
        understanding = generate_understanding(site)

        yield _step(4)
        llms_txt = analyze_llms_txt(crawl.llms_txt, site, understanding)
        blockers = enrich_blockers(run_blocker_checks(site, extractions, llms_txt), site)
        strengths = run_strength_checks(site, extractions, llms_txt)

        yield _step(5)
        scores = calculate_scores(blockers, llms_txt.modifier)

        result = AnalysisResult(
            url=crawl.origin or url,
            analyzed_at=datetime.now(timezone.utc).isoformat(),
            elapsed_seconds=round(time.perf_counter() - t0, 1),
            pages_analyzed=crawl.crawled_count,
            scores=scores,
            understanding=understanding,
            blockers=blockers,
            strengths=strengths,
            llms_txt=llms_txt,
        )
    except Exception as e:
        logger.exception("Analysis of %s failed", url)
        yield ErrorEvent(error=str(e) or "Analysis failed")
        return

    if store is not None and identity:
        _persist(store, identity, result.url, result)

    logger.info("Analysis of %s complete: score %d, %d blocker(s)", result.url, scores.total, len(blockers))
    yield CompleteEvent(result=result)


def analyze(url: str, **kwargs) -> CompleteEvent | ErrorEvent:
    """Run the pipeline to completion and return only the terminal event."""
    terminal: CompleteEvent | ErrorEvent = ErrorEvent(error="Analysis failed")
    for event in run_analysis(url, **kwargs):
        if not isinstance(event, StepEvent):
            terminal = event
    return terminal
