"""SQLAlchemy models for the company news store."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import DeclarativeBase

SENTIMENT_LABELS: tuple[str, ...] = ("Positive", "Negative", "Neutral")
ESG_LABELS: tuple[str, ...] = ("Environmental", "Social", "Governance")


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Article(Base):
    """News article about a company, with its classification state."""

    __tablename__ = "articles"
    __table_args__ = (
        Index("ix_articles_company_published_at", "company", "published_at"),
        Index("ix_articles_sentiment", "sentiment"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # Unique across all companies, not per company
    url = Column(String(2048), unique=True, nullable=False, index=True)
    company = Column(String(255), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    content = Column(Text)
    image_url = Column(String(2048))
    published_at = Column(DateTime(timezone=True), nullable=False)
    source_name = Column(String(255))
    source_id = Column(String(255))
    author = Column(String(255))

    # Classification state. NULL means "not yet classified".
    sentiment = Column(String(10))  # Positive, Negative, Neutral
    esg_categories = Column(JSON(none_as_null=True))  # 1-3 of Environmental, Social, Governance
    ai_summary = Column(Text)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def source_display_name(self) -> str:
        return self.source_name or "Unknown"

    def __repr__(self) -> str:
        return f"<Article(company={self.company!r}, title={self.title[:50]!r}...)>"
