"""Sentiment classification with confidence remapping."""

import logging

from .config import HIGH_CONFIDENCE_THRESHOLD, LOW_CONFIDENCE_THRESHOLD, MAX_SENTIMENT_CHARS
from .models import ClassificationResult, SentimentPrediction
from .sentiment_client import SentimentClient

logger = logging.getLogger(__name__)

_POLARITY = {"positive": "Positive", "negative": "Negative"}
_OPPOSITE = {"positive": "Negative", "negative": "Positive"}


def remap_sentiment(prediction: SentimentPrediction) -> str:
    """Map a binary model prediction to Positive, Negative or Neutral.

    A confident call keeps the model's label, a low-confidence call counts as
    evidence for the opposite polarity, and anything in between is Neutral.
    """
    if prediction.score >= HIGH_CONFIDENCE_THRESHOLD:
        return _POLARITY[prediction.label]
    elif prediction.score <= LOW_CONFIDENCE_THRESHOLD:
        return _OPPOSITE[prediction.label]
    else:
        return "Neutral"


class SentimentClassifier:
    """Classifies text as Positive, Negative or Neutral.

    Never raises: any failure of the inference service yields Neutral.
    """

    def __init__(self, client: SentimentClient | None = None):
        self.client = client or SentimentClient()

    def classify(self, text: str | None) -> ClassificationResult:
        if not text or not text.strip():
            return ClassificationResult(sentiment="Neutral")

        truncated = text[:MAX_SENTIMENT_CHARS]

        try:
            prediction = self.client.predict(truncated)
            return ClassificationResult(sentiment=remap_sentiment(prediction))
        except Exception as e:
            logger.warning(f"Sentiment analysis failed, defaulting to Neutral: {e}")
            return ClassificationResult(sentiment="Neutral", error=str(e))
