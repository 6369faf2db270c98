"""Result models for sentiment, ESG and summary generation."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field

SentimentLabel = Literal["Positive", "Negative", "Neutral"]
ESGLabel = Literal["Environmental", "Social", "Governance"]


@dataclass
class SentimentPrediction:
    """Raw output of the binary sentiment model."""

    label: str  # "positive" or "negative"
    score: float


@dataclass
class ClassificationResult:
    """Result of classifying the sentiment of a text."""

    sentiment: SentimentLabel
    error: str | None = None


@dataclass
class ESGResult:
    """Result of ESG categorization; categories always holds 1-3 labels."""

    categories: list[str]
    primary: str
    explanation: str
    error: str | None = None


class ESGResponse(BaseModel):
    """Loose shape of the generative model's ESG answer, sanitized afterwards."""

    categories: Any = Field(default_factory=list)  # filtered by sanitize_categories
    primary: Any = None
    explanation: str | None = None


class TrendingTopic(BaseModel):
    """A topic surfaced in a company's recent coverage."""

    topic: str
    category: str
    sentiment: str
    importance: str = Field(description="High, Medium or Low")


class ESGSummary(BaseModel):
    """Company-level ESG narrative."""

    overall_summary: str
    key_concerns: list[str] = Field(default_factory=list)
    positive_highlights: list[str] = Field(default_factory=list)
    trending_topics: list[TrendingTopic] = Field(default_factory=list)
    recommendations: str = ""


@dataclass
class SummaryResult:
    """Result of summary generation for a company."""

    success: bool
    company: str
    summary: ESGSummary | None = None
    analyzed_articles: int = 0
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    fallback: bool = False
    message: str | None = None
