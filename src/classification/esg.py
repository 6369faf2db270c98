"""ESG categorization of articles using Claude."""

import json
import logging
import re

from src.data_collection.models import ESG_LABELS

from .config import (
    DEFAULT_ESG_CATEGORY,
    MAX_ESG_CONTENT_CHARS,
    MIN_ESG_TEXT_CHARS,
    build_esg_prompt,
)
from .llm_client import GenerativeClient
from .models import ESGResponse, ESGResult

logger = logging.getLogger(__name__)

MAX_CATEGORIES = 3


def build_analysis_text(title: str | None, description: str | None, content: str | None) -> str:
    """Combine title, description and the head of the content into one text."""
    head = content[:MAX_ESG_CONTENT_CHARS] if content else ""
    return f"{title or ''}. {description or ''} {head}".strip()


def sanitize_categories(categories) -> list[str]:
    """Keep valid, distinct labels in order, at most three, never empty."""
    if not isinstance(categories, list):
        categories = []

    sanitized: list[str] = []
    for category in categories:
        if category in ESG_LABELS and category not in sanitized:
            sanitized.append(category)
    sanitized = sanitized[:MAX_CATEGORIES]

    if not sanitized:
        sanitized = [DEFAULT_ESG_CATEGORY]
    return sanitized


def keyword_categories(text: str) -> list[str]:
    """Find category names mentioned literally in a free-text answer."""
    text_lower = text.lower()
    categories = [label for label in ESG_LABELS if label.lower() in text_lower]
    return categories or [DEFAULT_ESG_CATEGORY]


class ESGClassifier:
    """Assigns one to three ESG categories to an article.

    Fallback order:
    - Too little text: default category without calling the model
    - Unparseable answer: keyword scan of the raw answer
    - Model failure: default category, tagged with the error
    """

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

    def classify(
        self,
        title: str | None,
        description: str | None = None,
        content: str | None = None,
    ) -> ESGResult:
        text = build_analysis_text(title, description, content)

        if len(text) < MIN_ESG_TEXT_CHARS:
            return ESGResult(
                categories=[DEFAULT_ESG_CATEGORY],
                primary=DEFAULT_ESG_CATEGORY,
                explanation="Insufficient text for categorization",
            )

        try:
            response_text = self.client.generate(build_esg_prompt(text))
            parsed = self._parse_response(response_text)
            categories = sanitize_categories(parsed.categories)

            primary = parsed.primary
            if primary not in categories:
                primary = categories[0]

            return ESGResult(
                categories=categories,
                primary=primary,
                explanation=parsed.explanation or "ESG categorization complete",
            )

        except Exception as e:
            logger.error(f"Error in ESG categorization: {e}")
            return ESGResult(
                categories=[DEFAULT_ESG_CATEGORY],
                primary=DEFAULT_ESG_CATEGORY,
                explanation="Failed to categorize, using default",
                error=str(e),
            )

    def _parse_response(self, response_text: str) -> ESGResponse:
        """Parse the model answer, falling back to a keyword scan."""
        json_str = self._extract_json(response_text)
        if json_str:
            try:
                return ESGResponse.model_validate(json.loads(json_str))
            except (json.JSONDecodeError, ValueError) as e:
                logger.warning(f"Failed to parse ESG response: {e}")
        else:
            logger.warning("No JSON found in ESG response")

        categories = keyword_categories(response_text)
        return ESGResponse(
            categories=categories,
            primary=categories[0],
            explanation="Categorized based on keyword analysis",
        )

    def _extract_json(self, text: str) -> str | None:
        """Extract the brace-delimited JSON object from text that may include prose."""
        match = re.search(r"\{[\s\S]*\}", text)
        if match:
            return match.group()
        return None
