"""Trend, distribution and timeline projections over classified articles."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Iterable

from src.data_collection.database import Database, db
from src.data_collection.models import ESG_LABELS, SENTIMENT_LABELS, Article

logger = logging.getLogger(__name__)


@dataclass
class TrendPoint:
    """Sentiment counts for one calendar day (UTC)."""

    date: date
    positive: int = 0
    negative: int = 0
    neutral: int = 0
    total: int = 0

    def add(self, sentiment: str) -> None:
        setattr(self, sentiment.lower(), getattr(self, sentiment.lower()) + 1)
        self.total += 1


@dataclass
class DistributionEntry:
    category: str
    count: int


@dataclass
class ESGDistribution:
    """Category counts; total counts memberships, so it can exceed the article count."""

    entries: list[DistributionEntry] = field(default_factory=list)
    total: int = 0


@dataclass
class Overview:
    total_articles: int
    sentiment_breakdown: dict[str, int]
    esg_breakdown: dict[str, int]
    last_updated: datetime | None


@dataclass
class TimelineEntry:
    date: datetime
    title: str
    sentiment: str | None
    categories: list[str]
    source: str


@dataclass
class ClassificationStats:
    """Classified vs. pending counts for one dimension."""

    classified: int
    unclassified: int
    distribution: dict[str, int]


def to_utc(value: datetime) -> datetime:
    """Normalize a timestamp to UTC; naive values are stored UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def count_categories(category_lists: Iterable[list[str] | None]) -> dict[str, int]:
    """Count category memberships: an article with two categories counts once in each."""
    counts: Counter[str] = Counter()
    for categories in category_lists:
        for category in categories or []:
            counts[category] += 1
    return {label: counts[label] for label in ESG_LABELS if counts[label] > 0}


class AnalyticsAggregator:
    """Read-only projections of a company's classified coverage."""

    def __init__(self, database: Database | None = None):
        self.db = database or db

    def _company_articles(self, company: str) -> list[Article]:
        with self.db.get_session() as session:
            return self.db.get_company_articles(session, company)

    def sentiment_trend(self, company: str) -> list[TrendPoint]:
        """Daily sentiment counts for articles with a sentiment, oldest day first."""
        points: dict[date, TrendPoint] = {}

        for article in self._company_articles(company):
            if article.sentiment not in SENTIMENT_LABELS:
                continue
            day = to_utc(article.published_at).date()
            if day not in points:
                points[day] = TrendPoint(date=day)
            points[day].add(article.sentiment)

        return [points[day] for day in sorted(points)]

    def _category_lists(self, company: str) -> list[list[str]]:
        with self.db.get_session() as session:
            return self.db.get_esg_category_lists(session, company)

    def esg_distribution(self, company: str) -> ESGDistribution:
        """Per-category counts across categorized articles."""
        counts = count_categories(self._category_lists(company))
        entries = [DistributionEntry(category=c, count=n) for c, n in counts.items()]
        return ESGDistribution(entries=entries, total=sum(counts.values()))

    def overview(self, company: str) -> Overview:
        """Headline statistics for a company."""
        with self.db.get_session() as session:
            total = self.db.get_article_count(session, company)
            sentiment_breakdown = self.db.get_sentiment_counts(session, company)
            latest = self.db.get_latest_published_at(session, company)
            category_lists = self.db.get_esg_category_lists(session, company)

        return Overview(
            total_articles=total,
            sentiment_breakdown=sentiment_breakdown,
            esg_breakdown=count_categories(category_lists),
            last_updated=to_utc(latest) if latest else None,
        )

    def timeline(self, company: str, limit: int = 50) -> list[TimelineEntry]:
        """Most recent articles regardless of classification state, newest first."""
        with self.db.get_session() as session:
            articles = self.db.get_recent_articles(session, company, limit=limit)

        return [
            TimelineEntry(
                date=to_utc(article.published_at),
                title=article.title,
                sentiment=article.sentiment,
                categories=list(article.esg_categories or []),
                source=article.source_display_name,
            )
            for article in articles
        ]

    def sentiment_stats(self, company: str) -> ClassificationStats:
        """Analyzed vs. unanalyzed sentiment counts."""
        with self.db.get_session() as session:
            total = self.db.get_article_count(session, company)
            distribution = self.db.get_sentiment_counts(session, company)

        analyzed = sum(distribution.values())
        return ClassificationStats(
            classified=analyzed,
            unclassified=total - analyzed,
            distribution=distribution,
        )

    def esg_stats(self, company: str) -> ClassificationStats:
        """Categorized vs. uncategorized counts."""
        with self.db.get_session() as session:
            total = self.db.get_article_count(session, company)
            category_lists = self.db.get_esg_category_lists(session, company)

        return ClassificationStats(
            classified=len(category_lists),
            unclassified=total - len(category_lists),
            distribution=count_categories(category_lists),
        )
