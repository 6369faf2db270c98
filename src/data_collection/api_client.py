"""NewsData.io API client wrapper."""

import logging
from datetime import datetime, timezone
from typing import Any

from newsdataapi import NewsDataApiClient
from pydantic import BaseModel, field_validator

from .config import ESG_SEARCH_KEYWORDS, LANGUAGE, MAX_QUERY_LENGTH, settings

logger = logging.getLogger(__name__)

# NewsData.io caps results per request at 10 on the free tier
MAX_RESULTS_PER_REQUEST: int = 10


class NewsSearchError(Exception):
    """Raised when the news search API cannot be reached or rejects a request."""


class ArticleData(BaseModel):
    """Validated article data from API response."""

    url: str
    title: str
    description: str | None = None
    content: str | None = None
    image_url: str | None = None
    published_at: datetime
    source_name: str | None = None
    source_id: str | None = None
    author: str | None = None

    @field_validator("published_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Store publication times as UTC; naive values are assumed to be UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @field_validator("url", "title")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


class NewsDataClient:
    """Wrapper around NewsData.io API client."""

    def __init__(self, api_key: str | None = None):
        self.api_key = api_key or settings.newsdata_api_key
        if not self.api_key:
            raise ValueError("NewsData API key is required")
        self.client = NewsDataApiClient(apikey=self.api_key)
        self.api_calls_made = 0

    def _parse_article(self, raw: dict[str, Any]) -> ArticleData:
        """Parse raw API response into validated ArticleData."""
        pub_date = None
        if raw.get("pubDate"):
            try:
                pub_date = datetime.fromisoformat(raw["pubDate"].replace("Z", "+00:00"))
            except (ValueError, AttributeError):
                pass

        creators = raw.get("creator") or []
        if isinstance(creators, str):
            creators = [creators]

        return ArticleData(
            url=raw.get("link", ""),
            title=raw.get("title", ""),
            description=raw.get("description"),
            content=raw.get("content"),
            image_url=raw.get("image_url"),
            published_at=pub_date,
            source_name=raw.get("source_name") or raw.get("source_id"),
            source_id=raw.get("source_id"),
            author=", ".join(creators) or None,
        )

    def _group_keywords_for_query(self, company: str, keywords: list[str]) -> list[str]:
        """
        Group keywords using OR to maximize coverage per query while staying under limit.

        Returns:
            List of query strings like '"Tesla" AND (climate change OR pollution)'
        """
        queries = []
        current: list[str] = []

        # Reserve space for: '"company" AND (' + ')'
        overhead = len(f'"{company}" AND ()')

        for keyword in keywords:
            test_keywords = current + [keyword]
            query_len = len(" OR ".join(test_keywords)) + overhead

            if query_len <= MAX_QUERY_LENGTH:
                current.append(keyword)
            else:
                if current:
                    queries.append(f'"{company}" AND ({" OR ".join(current)})')
                current = [keyword]

        if current:
            queries.append(f'"{company}" AND ({" OR ".join(current)})')

        return queries

    def generate_search_queries(self, company: str) -> list[str]:
        """
        Generate queries combining the company name with ESG keywords.

        General ESG terms come first, then one or more groups per pillar so
        that environmental, social and governance coverage are balanced.
        """
        queries = []
        for keywords in ESG_SEARCH_KEYWORDS.values():
            queries.extend(self._group_keywords_for_query(company, keywords))
        return queries

    def search_news(self, query: str, size: int = MAX_RESULTS_PER_REQUEST) -> list[ArticleData]:
        """
        Run a single search request.

        Raises:
            NewsSearchError: If the request fails or the API reports an error
                (including rate limiting).
        """
        try:
            response = self.client.news_api(q=query, language=LANGUAGE, size=size)
        except Exception as e:
            self.api_calls_made += 1
            logger.error(f"API request failed: {e}")
            raise NewsSearchError(f"Failed to fetch news: {e}") from e

        self.api_calls_made += 1

        if response.get("status") != "success":
            results = response.get("results")
            message = results.get("message", "Unknown error") if isinstance(results, dict) else "Unknown error"
            logger.error(f"API error: {message}")
            raise NewsSearchError(f"Failed to fetch news: {message}")

        articles = []
        for raw_article in response.get("results") or []:
            try:
                articles.append(self._parse_article(raw_article))
            except Exception as e:
                logger.warning(f"Failed to parse article: {e}")

        return articles

    def search_company_news(self, company: str, page_size: int | None = None) -> list[ArticleData]:
        """
        Search for ESG-related news about a company.

        Args:
            company: Company name to search for
            page_size: Number of unique articles to collect (default: from settings)

        Returns:
            Up to page_size articles with distinct URLs, in API order
        """
        if not company or not company.strip():
            raise ValueError("Company name is required")
        company = company.strip()
        page_size = page_size or settings.news_page_size

        logger.info(f"Searching ESG news for: {company}")

        collected: list[ArticleData] = []
        seen_urls: set[str] = set()

        for query in self.generate_search_queries(company):
            remaining = page_size - len(collected)
            if remaining <= 0:
                break

            logger.debug(f"Searching: {query}")
            for article in self.search_news(query, size=min(remaining, MAX_RESULTS_PER_REQUEST)):
                if article.url in seen_urls:
                    continue
                seen_urls.add(article.url)
                collected.append(article)
                if len(collected) >= page_size:
                    break

        logger.info(f"Found {len(collected)} articles for {company} in {self.api_calls_made} API calls")
        return collected
