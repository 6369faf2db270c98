"""Database operations for company news storage."""

import logging
from contextlib import contextmanager
from typing import Generator
from uuid import UUID

from sqlalchemy import create_engine, func
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .api_client import ArticleData
from .config import settings
from .models import ESG_LABELS, SENTIMENT_LABELS, Article, Base

logger = logging.getLogger(__name__)

# Classification dimensions an article can be selected on
SENTIMENT = "sentiment"
ESG = "esg"
DIMENSIONS: tuple[str, ...] = (SENTIMENT, ESG)

MAX_ESG_CATEGORIES = 3


class ArticleNotFoundError(LookupError):
    """Raised when an article id does not exist in the store."""

    def __init__(self, article_id: UUID | str):
        self.article_id = article_id
        super().__init__(f"Article not found: {article_id}")


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so `value` matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _as_uuid(article_id: UUID | str) -> UUID:
    if isinstance(article_id, UUID):
        return article_id
    return UUID(str(article_id))


class Database:
    """Database connection and operations manager."""

    def __init__(self, database_url: str | None = None):
        self.database_url = database_url or settings.database_url
        engine_kwargs = {}
        if self.database_url.startswith("sqlite"):
            # Share one connection so in-memory databases survive across sessions
            engine_kwargs = {
                "connect_args": {"check_same_thread": False},
                "poolclass": StaticPool,
            }
        self.engine = create_engine(self.database_url, echo=False, **engine_kwargs)
        # Articles are handed back to callers after the session closes
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    def init_db(self) -> None:
        """Create all tables."""
        Base.metadata.create_all(self.engine)
        logger.info("Database initialized successfully")

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_article_by_url(self, session: Session, url: str) -> Article | None:
        """Get an article by its URL."""
        return session.query(Article).filter(Article.url == url).first()

    def get_article_by_id(self, session: Session, article_id: UUID | str) -> Article | None:
        """Get a specific article by ID."""
        return session.query(Article).filter(Article.id == _as_uuid(article_id)).first()

    def upsert_article(
        self, session: Session, company: str, article_data: ArticleData
    ) -> tuple[Article, str]:
        """
        Insert an article unless its URL is already stored.

        Existing records are returned untouched, whichever company they were
        first ingested for.

        Returns:
            Tuple of (Article object, status string)
            Status is one of: "new", "duplicate"

        Raises:
            sqlalchemy.exc.IntegrityError: If another writer inserted the same
                URL between the lookup and the flush.
        """
        existing = self.get_article_by_url(session, article_data.url)
        if existing:
            return existing, "duplicate"

        article = Article(
            company=company,
            url=article_data.url,
            title=article_data.title,
            description=article_data.description,
            content=article_data.content,
            image_url=article_data.image_url,
            published_at=article_data.published_at,
            source_name=article_data.source_name,
            source_id=article_data.source_id,
            author=article_data.author,
        )
        session.add(article)
        session.flush()
        return article, "new"

    def get_unclassified_articles(
        self,
        session: Session,
        dimension: str,
        company: str | None = None,
        limit: int = 10,
    ) -> list[Article]:
        """Get articles whose sentiment or ESG categories are still unset.

        Args:
            session: Database session
            dimension: "sentiment" or "esg"
            company: Restrict to one company (default: all companies)
            limit: Maximum articles to return
        """
        if dimension == SENTIMENT:
            query = session.query(Article).filter(Article.sentiment.is_(None))
        elif dimension == ESG:
            query = session.query(Article).filter(Article.esg_categories.is_(None))
        else:
            raise ValueError(f"Unknown classification dimension: {dimension}")

        if company:
            query = query.filter(Article.company == company)

        return query.order_by(Article.created_at).limit(limit).all()

    def update_sentiment(self, session: Session, article_id: UUID | str, sentiment: str) -> Article:
        """Set the sentiment label of an article, overwriting any previous value."""
        if sentiment not in SENTIMENT_LABELS:
            raise ValueError(f"Invalid sentiment: {sentiment!r}")

        article = self.get_article_by_id(session, article_id)
        if article is None:
            raise ArticleNotFoundError(article_id)
        article.sentiment = sentiment
        return article

    def update_esg_categories(
        self, session: Session, article_id: UUID | str, categories: list[str]
    ) -> Article:
        """Set the ESG categories of an article, overwriting any previous value.

        An empty list is refused: NULL is the only "not categorized" state.
        """
        if not categories or len(categories) > MAX_ESG_CATEGORIES:
            raise ValueError(f"An article holds 1 to {MAX_ESG_CATEGORIES} ESG categories, got {categories!r}")
        invalid = [c for c in categories if c not in ESG_LABELS]
        if invalid:
            raise ValueError(f"Invalid ESG categories: {invalid}")

        article = self.get_article_by_id(session, article_id)
        if article is None:
            raise ArticleNotFoundError(article_id)
        article.esg_categories = list(categories)
        return article

    def get_company_articles(self, session: Session, company: str) -> list[Article]:
        """Get every article for a company, oldest first."""
        return (
            session.query(Article)
            .filter(Article.company == company)
            .order_by(Article.published_at)
            .all()
        )

    def get_esg_category_lists(self, session: Session, company: str) -> list[list[str]]:
        """Get the category list of every categorized article for a company.

        Only the JSON column is loaded; membership counting happens in Python
        since JSON array functions differ between PostgreSQL and SQLite.
        """
        rows = (
            session.query(Article.esg_categories)
            .filter(Article.company == company, Article.esg_categories.isnot(None))
            .all()
        )
        return [row[0] for row in rows]

    def get_recent_articles(self, session: Session, company: str, limit: int = 50) -> list[Article]:
        """Get the most recent articles for a company, newest first."""
        return (
            session.query(Article)
            .filter(Article.company == company)
            .order_by(Article.published_at.desc())
            .limit(limit)
            .all()
        )

    def get_stored_articles(
        self,
        session: Session,
        company: str,
        sentiment: str | None = None,
        esg_category: str | None = None,
        limit: int = 50,
    ) -> list[Article]:
        """Get stored articles for a company with optional filters, newest first.

        Raises:
            ValueError: On an unrecognized sentiment or ESG category filter.
        """
        if sentiment is not None and sentiment not in SENTIMENT_LABELS:
            raise ValueError(f"Invalid sentiment filter: {sentiment!r}")
        if esg_category is not None and esg_category not in ESG_LABELS:
            raise ValueError(
                "Invalid category. Must be Environmental, Social, or Governance"
            )

        query = session.query(Article).filter(Article.company == company)
        if sentiment is not None:
            query = query.filter(Article.sentiment == sentiment)
        query = query.order_by(Article.published_at.desc())

        if esg_category is None:
            return query.limit(limit).all()

        # JSON membership is filtered in Python to stay portable across backends
        query = query.filter(Article.esg_categories.isnot(None))
        matches = []
        for article in query:
            if esg_category in (article.esg_categories or []):
                matches.append(article)
                if len(matches) >= limit:
                    break
        return matches

    def get_articles_for_summary(self, session: Session, company: str, limit: int = 50) -> list[Article]:
        """Get recent articles whose company name contains `company`, case-insensitively."""
        pattern = f"%{escape_like(company)}%"
        return (
            session.query(Article)
            .filter(Article.company.ilike(pattern, escape="\\"))
            .order_by(Article.published_at.desc())
            .limit(limit)
            .all()
        )

    def get_all_companies(self, session: Session) -> list[str]:
        """Get all companies that have stored articles."""
        rows = session.query(Article.company).distinct().order_by(Article.company).all()
        return [row[0] for row in rows]

    def get_article_count(self, session: Session, company: str | None = None) -> int:
        """Get number of articles, optionally for one company."""
        query = session.query(Article)
        if company is not None:
            query = query.filter(Article.company == company)
        return query.count()

    def get_sentiment_counts(self, session: Session, company: str) -> dict[str, int]:
        """Count classified articles per sentiment label for a company."""
        rows = (
            session.query(Article.sentiment, func.count(Article.id))
            .filter(Article.company == company, Article.sentiment.isnot(None))
            .group_by(Article.sentiment)
            .all()
        )
        return {sentiment: count for sentiment, count in rows}

    def get_latest_published_at(self, session: Session, company: str):
        """Most recent publication time for a company, or None."""
        return (
            session.query(func.max(Article.published_at))
            .filter(Article.company == company)
            .scalar()
        )


db = Database()
