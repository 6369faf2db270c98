"""Data collection module for company ESG news articles."""

from .config import settings
from .models import Article

__all__ = ["settings", "Article"]
