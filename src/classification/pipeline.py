"""Pipeline orchestration for sentiment and ESG classification of stored articles."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable
from uuid import UUID

from src.data_collection.database import ESG, SENTIMENT, ArticleNotFoundError, Database, db
from src.data_collection.models import Article

from .config import SUMMARY_ARTICLE_WINDOW, classification_settings
from .esg import ESGClassifier
from .models import ClassificationResult, ESGResult, SummaryResult
from .rate_limit import FixedIntervalLimiter, RateLimiter
from .sentiment import SentimentClassifier
from .summarizer import SummaryGenerator

logger = logging.getLogger(__name__)


@dataclass
class BatchStats:
    """Statistics from a classification batch."""

    succeeded: int = 0
    failed: int = 0
    total: int = 0
    message: str = ""
    errors: list[str] = field(default_factory=list)


@dataclass
class ClassificationTask:
    """One classification dimension: how to label an article and how to store it."""

    dimension: str
    classify: Callable[[Article], Any]
    store: Callable[[Any, UUID, Any], Article]
    limiter: RateLimiter


def sentiment_text(article: Article) -> str:
    """Text used for sentiment: title and description."""
    return f"{article.title}. {article.description or ''}"


class ClassificationPipeline:
    """Drives stored articles through the sentiment and ESG classifiers.

    Articles are processed one at a time with a pause between external calls;
    a failure on one article is recorded and the batch moves on.
    """

    def __init__(
        self,
        database: Database | None = None,
        sentiment_classifier: SentimentClassifier | None = None,
        esg_classifier: ESGClassifier | None = None,
        summary_generator: SummaryGenerator | None = None,
        sentiment_limiter: RateLimiter | None = None,
        esg_limiter: RateLimiter | None = None,
    ):
        """Initialize the pipeline.

        Args:
            database: Article store
            sentiment_classifier: Sentiment classifier
            esg_classifier: ESG classifier
            summary_generator: Company summary generator
            sentiment_limiter: Pacing for sentiment calls (default: fixed interval from settings)
            esg_limiter: Pacing for ESG calls (default: fixed interval from settings)
        """
        self.db = database or db
        self.sentiment_classifier = sentiment_classifier or SentimentClassifier()
        self.esg_classifier = esg_classifier or ESGClassifier()
        self.summary_generator = summary_generator or SummaryGenerator()
        self.sentiment_limiter = sentiment_limiter or FixedIntervalLimiter(
            classification_settings.sentiment_delay_seconds
        )
        self.esg_limiter = esg_limiter or FixedIntervalLimiter(
            classification_settings.esg_delay_seconds
        )

    def _classify_sentiment(self, article: Article) -> ClassificationResult:
        return self.sentiment_classifier.classify(sentiment_text(article))

    def _classify_esg(self, article: Article) -> ESGResult:
        return self.esg_classifier.classify(article.title, article.description, article.content)

    def _store_sentiment(self, session, article_id: UUID, result: ClassificationResult) -> Article:
        return self.db.update_sentiment(session, article_id, result.sentiment)

    def _store_esg(self, session, article_id: UUID, result: ESGResult) -> Article:
        return self.db.update_esg_categories(session, article_id, result.categories)

    @property
    def sentiment_task(self) -> ClassificationTask:
        return ClassificationTask(
            dimension=SENTIMENT,
            classify=self._classify_sentiment,
            store=self._store_sentiment,
            limiter=self.sentiment_limiter,
        )

    @property
    def esg_task(self) -> ClassificationTask:
        return ClassificationTask(
            dimension=ESG,
            classify=self._classify_esg,
            store=self._store_esg,
            limiter=self.esg_limiter,
        )

    def run_batch(
        self,
        task: ClassificationTask,
        company: str | None = None,
        limit: int | None = None,
    ) -> BatchStats:
        """Classify up to `limit` articles whose dimension is still unset.

        Args:
            task: Dimension to classify
            company: Restrict to one company (default: all companies)
            limit: Maximum articles to process (default: from settings)

        Returns:
            BatchStats with per-article success and failure counts

        Raises:
            ValueError: If limit is not positive; nothing is selected.
            Exception: Only if selecting the articles fails.
        """
        if limit is None:
            limit = classification_settings.classification_batch_size
        if limit < 1:
            raise ValueError("limit must be positive")

        stats = BatchStats()

        with self.db.get_session() as session:
            articles = self.db.get_unclassified_articles(
                session, task.dimension, company=company, limit=limit
            )

        if not articles:
            stats.message = "All articles already classified or no articles found"
            logger.info(f"No articles pending {task.dimension} classification")
            return stats

        stats.total = len(articles)
        logger.info(f"Classifying {task.dimension} for {stats.total} articles")

        for article in articles:
            try:
                with task.limiter.acquire():
                    result = task.classify(article)

                with self.db.get_session() as session:
                    task.store(session, article.id, result)

                stats.succeeded += 1

                if stats.succeeded % 5 == 0:
                    logger.info(f"Classified {stats.succeeded}/{stats.total} articles")

            except Exception as e:
                logger.error(f"Failed to classify article {article.id}: {e}")
                stats.failed += 1
                stats.errors.append(f"Article {article.id}: {e}")

        stats.message = f"Classified {stats.succeeded} articles"
        logger.info(
            f"{task.dimension.capitalize()} classification complete: "
            f"{stats.succeeded} success, {stats.failed} failed"
        )
        return stats

    def classify_sentiment_batch(self, company: str | None = None, limit: int | None = None) -> BatchStats:
        """Classify sentiment for unanalyzed articles."""
        return self.run_batch(self.sentiment_task, company=company, limit=limit)

    def classify_esg_batch(self, company: str | None = None, limit: int | None = None) -> BatchStats:
        """Assign ESG categories to uncategorized articles."""
        return self.run_batch(self.esg_task, company=company, limit=limit)

    def _classify_single(self, task: ClassificationTask, article_id: UUID | str) -> tuple[Article, Any]:
        with self.db.get_session() as session:
            article = self.db.get_article_by_id(session, article_id)
        if article is None:
            raise ArticleNotFoundError(article_id)

        with task.limiter.acquire():
            result = task.classify(article)

        with self.db.get_session() as session:
            updated = task.store(session, article.id, result)
        return updated, result

    def classify_article_sentiment(self, article_id: UUID | str) -> tuple[Article, ClassificationResult]:
        """Classify and store the sentiment of one article.

        Raises:
            ArticleNotFoundError: If no article has this id.
        """
        return self._classify_single(self.sentiment_task, article_id)

    def classify_article_esg(self, article_id: UUID | str) -> tuple[Article, ESGResult]:
        """Categorize and store the ESG categories of one article.

        Raises:
            ArticleNotFoundError: If no article has this id.
        """
        return self._classify_single(self.esg_task, article_id)

    def get_stats(self) -> dict[str, Any]:
        """Generative API usage of the ESG classifier and summary generator.

        Components that have not made a call yet are left out.
        """
        stats = {}

        esg_usage = self.esg_classifier.get_stats()
        if esg_usage is not None:
            stats["esg"] = esg_usage

        summary_usage = self.summary_generator.get_stats()
        if summary_usage is not None:
            stats["summary"] = summary_usage

        return stats

    def summarize_company(self, company: str) -> SummaryResult:
        """Generate an ESG summary from a company's most recent articles."""
        if not company or not company.strip():
            raise ValueError("Company name is required")

        with self.db.get_session() as session:
            articles = self.db.get_articles_for_summary(
                session, company.strip(), limit=SUMMARY_ARTICLE_WINDOW
            )

        if not articles:
            logger.info(f"No articles found for company: {company}")

        return self.summary_generator.summarize(articles, company.strip())
