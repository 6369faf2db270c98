"""Company-level ESG summary generation with a statistical fallback."""

import json
import logging
import re
from typing import Any, Sequence

from src.data_collection.models import ESG_LABELS, SENTIMENT_LABELS

from .config import MAX_SUMMARY_ARTICLES, SUMMARY_PROMPT_TEMPLATE
from .llm_client import GenerativeClient
from .models import ESGSummary, SummaryResult, TrendingTopic

logger = logging.getLogger(__name__)

FALLBACK_RECOMMENDATION = "Continue monitoring ESG developments and stakeholder concerns."


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapped around a JSON answer."""
    text = text.strip()
    if text.startswith("```json"):
        text = re.sub(r"```json\n?", "", text)
        text = re.sub(r"```\n?", "", text)
    elif text.startswith("```"):
        text = re.sub(r"```\n?", "", text)
    return text.strip()


def _plurality(counts: dict[str, int], order: Sequence[str]) -> str:
    """Most frequent key; ties go to the earliest key in `order`."""
    return max(order, key=lambda key: counts[key])


def build_basic_summary(articles: Sequence[Any], company_name: str) -> SummaryResult:
    """Deterministic summary computed from article labels alone.

    Always returns a successful, structurally valid result.
    """
    sentiment_counts = {label: 0 for label in SENTIMENT_LABELS}
    category_counts = {label: 0 for label in ESG_LABELS}

    for article in articles:
        if article.sentiment in sentiment_counts:
            sentiment_counts[article.sentiment] += 1
        for category in article.esg_categories or []:
            if category in category_counts:
                category_counts[category] += 1

    dominant_sentiment = _plurality(sentiment_counts, SENTIMENT_LABELS)
    dominant_category = _plurality(category_counts, ESG_LABELS)

    summary = ESGSummary(
        overall_summary=(
            f"Based on {len(articles)} articles, {company_name} has a predominantly "
            f"{dominant_sentiment.lower()} ESG coverage, with focus on {dominant_category} issues."
        ),
        key_concerns=[a.title for a in articles if a.sentiment == "Negative"][:3],
        positive_highlights=[a.title for a in articles if a.sentiment == "Positive"][:3],
        trending_topics=[
            TrendingTopic(
                topic=f"{category} initiatives",
                category=category,
                sentiment=dominant_sentiment,
                importance="High" if count > 3 else "Medium",
            )
            for category, count in category_counts.items()
            if count > 0
        ],
        recommendations=FALLBACK_RECOMMENDATION,
    )

    return SummaryResult(
        success=True,
        company=company_name,
        summary=summary,
        analyzed_articles=len(articles),
        fallback=True,
    )


class SummaryGenerator:
    """Generates a structured ESG narrative for a company from its articles."""

    def __init__(self, client: GenerativeClient | None = None):
        self._client = client

    @property
    def client(self) -> GenerativeClient:
        """Claude client, created on first use."""
        if self._client is None:
            self._client = GenerativeClient()
        return self._client

    def get_stats(self) -> dict | None:
        """Usage of the Claude client, or None if it was never created."""
        if self._client is None:
            return None
        return self._client.get_stats()

    def summarize(self, articles: Sequence[Any], company_name: str) -> SummaryResult:
        """Summarize a company's coverage.

        Args:
            articles: Classified articles, most relevant first
            company_name: Company the articles are about

        Returns:
            SummaryResult; unsuccessful only when there are no articles
        """
        if not articles:
            return SummaryResult(
                success=False,
                company=company_name,
                message="No articles available for summary generation",
            )

        try:
            prompt = self._build_prompt(articles[:MAX_SUMMARY_ARTICLES], company_name)
            response_text = self.client.generate(prompt)
            summary = ESGSummary.model_validate(json.loads(strip_code_fences(response_text)))

            return SummaryResult(
                success=True,
                company=company_name,
                summary=summary,
                analyzed_articles=len(articles),
            )

        except Exception as e:
            logger.error(f"Error generating ESG summary, using basic summary: {e}")
            return build_basic_summary(articles, company_name)

    def _build_prompt(self, articles: Sequence[Any], company_name: str) -> str:
        lines = []
        for index, article in enumerate(articles, start=1):
            categories = ", ".join(article.esg_categories or []) or "Uncategorized"
            lines.append(
                f"{index}. Title: {article.title}\n"
                f"   Description: {article.description or ''}\n"
                f"   Sentiment: {article.sentiment or 'Unknown'}\n"
                f"   ESG Category: {categories}"
            )
        return SUMMARY_PROMPT_TEMPLATE.format(company=company_name, articles="\n\n".join(lines))
