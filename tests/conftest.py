"""Pytest fixtures for ESG News Classifier tests."""

import os

# Keep the module-level Database off PostgreSQL during tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from src.data_collection.api_client import ArticleData
from src.data_collection.database import Database


@pytest.fixture
def test_db() -> Database:
    """Fresh in-memory SQLite database with tables created."""
    database = Database(database_url="sqlite://")
    database.init_db()
    yield database
    database.engine.dispose()


@pytest.fixture
def sample_article_data() -> ArticleData:
    """Create a sample ArticleData for testing."""
    return ArticleData(
        url="https://example.com/tesla-emissions",
        title="Tesla Cuts Factory Emissions by 40%",
        description="Tesla reports a major drop in carbon emissions at its Berlin plant",
        content="Full article content about Tesla's emissions reductions...",
        image_url="https://example.com/image.jpg",
        published_at=datetime(2024, 12, 14, 10, 0, 0, tzinfo=timezone.utc),
        source_name="Example News",
        source_id="example",
        author="Jane Reporter",
    )


@pytest.fixture
def make_article_data():
    """Factory for ArticleData with unique URLs."""

    def _make(i: int, **kwargs) -> ArticleData:
        defaults = {
            "url": f"https://example.com/article-{i}",
            "title": f"Test Article {i}",
            "description": f"Description {i}",
            "published_at": datetime(2024, 12, 14, 10, i % 60, 0, tzinfo=timezone.utc),
            "source_name": "Test Source",
        }
        defaults.update(kwargs)
        return ArticleData(**defaults)

    return _make


@pytest.fixture
def store_articles(test_db, make_article_data):
    """Insert articles for a company, optionally pre-classified.

    Each entry is a dict of ArticleData overrides plus optional
    "sentiment" and "esg_categories" keys.
    """

    def _store(company: str, entries: list[dict]) -> list:
        stored = []
        with test_db.get_session() as session:
            for i, overrides in enumerate(entries):
                overrides = dict(overrides)
                sentiment = overrides.pop("sentiment", None)
                categories = overrides.pop("esg_categories", None)
                overrides.setdefault("url", f"https://example.com/{company.lower()}-{i}")
                article, _ = test_db.upsert_article(session, company, make_article_data(i, **overrides))
                article.sentiment = sentiment
                article.esg_categories = categories
                stored.append(article)
        return stored

    return _store


@pytest.fixture
def mock_generative_client():
    """Mock Claude client whose generate() returns a configurable string."""
    client = MagicMock()
    client.generate.return_value = "{}"
    return client
