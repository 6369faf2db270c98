"""Collection orchestrator: search company news and ingest it without duplicates."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from .api_client import ArticleData, NewsDataClient
from .database import Database, db
from .models import Article

logger = logging.getLogger(__name__)


@dataclass
class IngestStats:
    """Statistics from an ingestion run."""

    articles_new: int = 0
    articles_duplicates: int = 0
    articles_conflicts: int = 0  # Lost a concurrent insert race, resolved by re-read

    @property
    def total(self) -> int:
        return self.articles_new + self.articles_duplicates


class NewsCollector:
    """Orchestrates news search and deduplicated ingestion."""

    def __init__(
        self,
        database: Database | None = None,
        api_client: NewsDataClient | None = None,
    ):
        self.db = database or db
        self._api_client = api_client

    @property
    def api_client(self) -> NewsDataClient:
        """News search client, created on first use so ingestion works without an API key."""
        if self._api_client is None:
            self._api_client = NewsDataClient()
        return self._api_client

    def ingest_articles(
        self, company: str, articles: list[ArticleData]
    ) -> tuple[list[Article], IngestStats]:
        """
        Persist candidate articles for a company, skipping URLs already stored.

        Each candidate is written in its own session so a conflict on one URL
        never rolls back the others.

        Args:
            company: Company the new articles are associated with
            articles: Candidate articles in source order

        Returns:
            Tuple of (stored records in input order, IngestStats)
        """
        if not company or not company.strip():
            raise ValueError("Company name is required")
        company = company.strip()

        stats = IngestStats()
        saved: list[Article] = []

        for article_data in articles:
            try:
                with self.db.get_session() as session:
                    article, status = self.db.upsert_article(session, company, article_data)
            except IntegrityError:
                # Another writer inserted this URL after our lookup; the winner's record stands
                logger.info(f"Article already exists: {article_data.url}")
                with self.db.get_session() as session:
                    article = self.db.get_article_by_url(session, article_data.url)
                if article is None:
                    raise
                stats.articles_conflicts += 1
                status = "duplicate"

            if status == "new":
                stats.articles_new += 1
            else:
                stats.articles_duplicates += 1
            saved.append(article)

        logger.info(
            f"Ingested {len(saved)} articles for {company}: "
            f"{stats.articles_new} new, {stats.articles_duplicates} already stored"
        )
        return saved, stats

    def collect_company_news(
        self, company: str, page_size: int | None = None
    ) -> tuple[list[Article], IngestStats]:
        """
        Search the news API for a company and ingest the results.

        Raises:
            NewsSearchError: If the search API fails; nothing is ingested.
        """
        if not company or not company.strip():
            raise ValueError("Company name is required")

        articles = self.api_client.search_company_news(company, page_size=page_size)
        return self.ingest_articles(company, articles)
