from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Pillar = Literal["clarity", "specificity", "proof", "audience"]
PageType = Literal["homepage", "pricing", "about", "features", "product", "faq", "other"]


class _Model(BaseModel):
    # Wire format is camelCase; attributes stay snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalyzeRequest(_Model):
    url: str = Field(..., min_length=1)
    # Only used by the persistence collaborator, never by the analysis itself.
    identity: str | None = None

    @field_validator("url")
    @classmethod
    def _url_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("URL is required")
        return v


class PageFetch(_Model):
    url: str
    html: str | None = None
    success: bool
    error: str | None = None


class CrawledPage(_Model):
    url: str
    page_type: str
    html: str


class CrawlResult(_Model):
    success: bool
    origin: str | None = None
    pages: list[CrawledPage] = Field(default_factory=list)
    llms_txt: str | None = None
    error: str | None = None

    @property
    def crawled_count(self) -> int:
        return len(self.pages)


class StructuredDataSummary(_Model):
    types: list[str] = Field(default_factory=list)
    has_organization: bool = False
    has_product: bool = False
    has_review: bool = False
    has_faq: bool = Field(False, alias="hasFAQ")
    has_how_to: bool = Field(False, alias="hasHowTo")
    raw: list[dict[str, Any]] = Field(default_factory=list)


class Heading(_Model):
    level: str
    text: str


class Hero(_Model):
    headline: str = ""
    subheadline: str = ""


class PageMeta(_Model):
    title: str = ""
    description: str = ""


class FAQ(_Model):
    question: str
    answer: str


class PageExtraction(_Model):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    url: str
    page_type: str
    meta: PageMeta = Field(default_factory=PageMeta)
    headings: list[Heading] = Field(default_factory=list)
    hero: Hero = Field(default_factory=Hero)
    paragraphs: list[str] = Field(default_factory=list)
    lists: list[list[str]] = Field(default_factory=list)
    definition_statements: list[str] = Field(default_factory=list)
    audience_statements: list[str] = Field(default_factory=list)
    claims: list[str] = Field(default_factory=list)
    proof_points: list[str] = Field(default_factory=list)
    faqs: list[FAQ] = Field(default_factory=list)
    schema_data: StructuredDataSummary = Field(default_factory=StructuredDataSummary, alias="schema")


class SiteData(_Model):
    homepage: PageExtraction | None = None
    all_headings: list[Heading] = Field(default_factory=list)
    all_definitions: list[str] = Field(default_factory=list)
    all_audience_statements: list[str] = Field(default_factory=list)
    all_claims: list[str] = Field(default_factory=list)
    all_proof_points: list[str] = Field(default_factory=list)
    all_faqs: list[FAQ] = Field(default_factory=list, alias="allFAQs")
    page_types: dict[str, PageExtraction] = Field(default_factory=dict)


class Evidence(_Model):
    url: str
    snippet: str
    location: str


class Finding(_Model):
    code: str
    title: str
    description: str
    pillar: Pillar
    evidence: list[Evidence] = Field(default_factory=list)


class Blocker(Finding):
    severity: int = Field(..., ge=0, le=100)
    fix_strategy: str | None = None


class Strength(Finding):
    impact: int = Field(..., ge=0, le=100)


class ManifestAlignment(_Model):
    present: bool
    aligned: bool | None
    modifier: int
    notes: list[str] = Field(default_factory=list)


class PillarScores(_Model):
    clarity: int
    specificity: int
    proof: int
    audience: int


class Scores(_Model):
    total: int
    pillars: PillarScores


class UnderstandingConfidence(_Model):
    score: int
    level: str
    reason: str


class Understanding(_Model):
    one_liner: str
    category: str
    audience: str
    use_cases: list[str] = Field(default_factory=list)
    confusions: list[str] = Field(default_factory=list)
    missing_for_confidence: list[str] = Field(default_factory=list)
    confidence: UnderstandingConfidence


class AnalysisResult(_Model):
    success: bool = True
    url: str
    analyzed_at: str
    elapsed_seconds: float
    pages_analyzed: int
    scores: Scores
    understanding: Understanding
    blockers: list[Blocker]
    strengths: list[Strength]
    llms_txt: ManifestAlignment


class StepEvent(_Model):
    type: Literal["step"] = "step"
    step: int = Field(..., ge=1, le=5)
    message: str


class CompleteEvent(_Model):
    type: Literal["complete"] = "complete"
    result: AnalysisResult


class ErrorEvent(_Model):
    type: Literal["error"] = "error"
    error: str


StreamEvent = StepEvent | CompleteEvent | ErrorEvent


class SiteInfo(_Model):
    url: str = ""
    name: str = ""
    description: str = ""
    category: str = ""
    audience: str = ""
    faqs: list[FAQ] = Field(default_factory=list)
    testimonials: list[str] = Field(default_factory=list)
    use_cases: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)


class SchemaRequest(_Model):
    schema_type: Literal["organization", "product", "faq", "review", "all"] = "all"
    site_info: SiteInfo


class SchemaResponse(_Model):
    success: bool = True
    schemas: dict[str, dict[str, Any]]
    html: str
    instructions: str


class LlmsTxtRequest(_Model):
    site_info: SiteInfo


class LlmsTxtResponse(_Model):
    success: bool = True
    content: str
    instructions: str
