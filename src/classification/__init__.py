"""Sentiment and ESG classification pipeline for company news."""

from .config import ESG_CATEGORIES, classification_settings
from .esg import ESGClassifier
from .llm_client import GenerativeClient
from .models import ClassificationResult, ESGResult, ESGSummary, SummaryResult, TrendingTopic
from .pipeline import BatchStats, ClassificationPipeline, ClassificationTask
from .rate_limit import FixedIntervalLimiter, RateLimiter
from .sentiment import SentimentClassifier, remap_sentiment
from .sentiment_client import SentimentClient, SentimentServiceError
from .summarizer import SummaryGenerator, build_basic_summary

__all__ = [
    "BatchStats",
    "ClassificationPipeline",
    "ClassificationResult",
    "ClassificationTask",
    "ESGClassifier",
    "ESGResult",
    "ESGSummary",
    "ESG_CATEGORIES",
    "FixedIntervalLimiter",
    "GenerativeClient",
    "RateLimiter",
    "SentimentClassifier",
    "SentimentClient",
    "SentimentServiceError",
    "SummaryGenerator",
    "SummaryResult",
    "TrendingTopic",
    "build_basic_summary",
    "classification_settings",
    "remap_sentiment",
]
