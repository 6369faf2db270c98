"""HTTP client for the binary sentiment inference service.

Targets Hugging Face style text-classification endpoints, which answer a
``{"inputs": text}`` request with label/score predictions sorted by score.
"""

import logging
from typing import Any

import httpx

from .config import classification_settings
from .models import SentimentPrediction

logger = logging.getLogger(__name__)

BINARY_LABELS = ("positive", "negative")


class SentimentServiceError(Exception):
    """Raised when the inference service fails or returns an unusable answer."""


class SentimentClient:
    """HTTP client for a binary (positive/negative) sentiment model.

    Example:
        client = SentimentClient()
        prediction = client.predict("Company cuts emissions by 40%")
        print(prediction.label, prediction.score)
        client.close()
    """

    def __init__(
        self,
        api_url: str | None = None,
        api_token: str | None = None,
        timeout: float | None = None,
    ):
        """Initialize the sentiment client.

        Args:
            api_url: Inference endpoint URL (default: from settings)
            api_token: Bearer token, optional for self-hosted endpoints
            timeout: Request timeout in seconds
        """
        self.api_url = api_url or classification_settings.sentiment_api_url
        self.api_token = api_token if api_token is not None else classification_settings.hf_api_token
        self.timeout = timeout or classification_settings.sentiment_timeout
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {}
            if self.api_token:
                headers["Authorization"] = f"Bearer {self.api_token}"
            self._client = httpx.Client(timeout=self.timeout, headers=headers)
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def predict(self, text: str) -> SentimentPrediction:
        """Get the top binary sentiment prediction for a text.

        Raises:
            httpx.HTTPError: On transport errors or non-2xx responses.
            SentimentServiceError: If the response cannot be interpreted.
        """
        client = self._get_client()
        response = client.post(self.api_url, json={"inputs": text})
        response.raise_for_status()
        return self._parse_prediction(response.json())

    def _parse_prediction(self, data: Any) -> SentimentPrediction:
        """Extract the top prediction from the service response."""
        if isinstance(data, dict) and "error" in data:
            raise SentimentServiceError(f"Inference service error: {data['error']}")

        # Batched form: [[{label, score}, ...]]
        if isinstance(data, list) and data and isinstance(data[0], list):
            data = data[0]
        if isinstance(data, list):
            if not data:
                raise SentimentServiceError("Empty prediction list")
            data = data[0]
        if not isinstance(data, dict):
            raise SentimentServiceError(f"Unexpected response shape: {type(data).__name__}")

        try:
            label = str(data["label"]).lower()
            score = float(data["score"])
        except (KeyError, TypeError, ValueError) as e:
            raise SentimentServiceError(f"Malformed prediction: {data!r}") from e

        if label not in BINARY_LABELS:
            raise SentimentServiceError(f"Unexpected label: {label!r}")
        if not 0.0 <= score <= 1.0:
            raise SentimentServiceError(f"Score out of range: {score}")

        return SentimentPrediction(label=label, score=score)
