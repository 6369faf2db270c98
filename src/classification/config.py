"""Configuration settings and prompts for the classification pipeline."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()


class ClassificationSettings(BaseModel):
    """Settings for sentiment/ESG classification and summary generation."""

    # API Keys
    anthropic_api_key: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", "")
    )
    hf_api_token: str = Field(
        default_factory=lambda: os.getenv("HF_API_TOKEN", "")
    )

    # Generative model settings
    generation_model: str = Field(
        default_factory=lambda: os.getenv("GENERATION_MODEL", "claude-sonnet-4-20250514")
    )
    generation_max_tokens: int = Field(
        default_factory=lambda: int(os.getenv("GENERATION_MAX_TOKENS", "1024"))
    )

    # Binary sentiment inference endpoint
    sentiment_api_url: str = Field(
        default_factory=lambda: os.getenv(
            "SENTIMENT_API_URL",
            "https://api-inference.huggingface.co/models/distilbert-base-uncased-finetuned-sst-2-english",
        )
    )
    sentiment_timeout: float = Field(
        default_factory=lambda: float(os.getenv("SENTIMENT_TIMEOUT", "30"))
    )

    # Batch processing
    classification_batch_size: int = Field(
        default_factory=lambda: int(os.getenv("CLASSIFICATION_BATCH_SIZE", "10"))
    )
    sentiment_delay_seconds: float = Field(
        default_factory=lambda: float(os.getenv("SENTIMENT_DELAY_SECONDS", "0.1"))
    )
    esg_delay_seconds: float = Field(
        default_factory=lambda: float(os.getenv("ESG_DELAY_SECONDS", "0.2"))
    )

    model_config = ConfigDict(frozen=True)


# Sentiment remapping thresholds on the model's confidence score
HIGH_CONFIDENCE_THRESHOLD: float = 0.6
LOW_CONFIDENCE_THRESHOLD: float = 0.4

MAX_SENTIMENT_CHARS: int = 500
MAX_ESG_CONTENT_CHARS: int = 500
MIN_ESG_TEXT_CHARS: int = 10
MAX_SUMMARY_ARTICLES: int = 20
SUMMARY_ARTICLE_WINDOW: int = 50

DEFAULT_ESG_CATEGORY: str = "Social"

# ESG category definitions, keyed by the label stored on articles
ESG_CATEGORIES = {
    "Environmental": {
        "code": "E",
        "description": "Climate change, carbon emissions, pollution, waste management, renewable energy, water conservation, biodiversity",
    },
    "Social": {
        "code": "S",
        "description": "Labor practices, diversity & inclusion, employee welfare, human rights, community relations, product safety, health & safety",
    },
    "Governance": {
        "code": "G",
        "description": "Board diversity, executive compensation, corruption, transparency, shareholder rights, business ethics, compliance",
    },
}


def _format_category_definitions() -> str:
    lines = []
    for name, info in ESG_CATEGORIES.items():
        lines.append(f"- {name} ({info['code']}): {info['description']}")
    return "\n".join(lines)


ESG_PROMPT_TEMPLATE = """You are an ESG (Environmental, Social, Governance) analyst. Analyze the following news article and categorize it into one or more ESG categories.

ESG Categories:
{category_definitions}

Article:
"{text}"

Instructions:
1. Identify which ESG category or categories this article belongs to (can be multiple)
2. Return ONLY a JSON object in this exact format:
{{
  "categories": ["Environmental", "Social", "Governance"],
  "primary": "Environmental",
  "explanation": "Brief explanation of why"
}}

Important:
- "categories" should be an array with one or more of: "Environmental", "Social", "Governance"
- "primary" should be the most relevant single category
- Keep explanation under 50 words
- Return ONLY valid JSON, no other text"""


SUMMARY_PROMPT_TEMPLATE = """You are an ESG (Environmental, Social, Governance) analyst. Analyze the following news articles about {company} and provide a comprehensive ESG summary.

Articles Data:
{articles}

Provide a JSON response with the following structure:
{{
  "overall_summary": "A 2-3 sentence overview of {company}'s current ESG standing based on the news",
  "key_concerns": ["concern 1", "concern 2", "concern 3"],
  "positive_highlights": ["highlight 1", "highlight 2", "highlight 3"],
  "trending_topics": [
    {{
      "topic": "topic name",
      "category": "Environmental|Social|Governance",
      "sentiment": "Positive|Negative|Neutral",
      "importance": "High|Medium|Low"
    }}
  ],
  "recommendations": "Brief recommendations for stakeholders (1-2 sentences)"
}}

Requirements:
- Keep all text concise and actionable
- Focus on the most significant ESG issues
- Identify 3-5 trending topics maximum
- Highlight both concerns and positive developments
- Base analysis strictly on the provided articles

Return ONLY valid JSON, no additional text."""


def build_esg_prompt(text: str) -> str:
    """Fill the ESG categorization prompt for one article's text."""
    return ESG_PROMPT_TEMPLATE.format(
        category_definitions=_format_category_definitions(),
        text=text,
    )


classification_settings = ClassificationSettings()
