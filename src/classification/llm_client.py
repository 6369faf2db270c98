"""Claude client for free-text generation."""

import logging
import time

from anthropic import Anthropic, RateLimitError

from .config import classification_settings

logger = logging.getLogger(__name__)


class GenerativeClient:
    """Sends prompts to Claude and returns the text of the answer.

    Features:
    - Automatic retry with exponential backoff for rate limits
    - Token usage tracking for cost estimation
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        max_tokens: int | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: Anthropic API key (default: from settings)
            model: Model to use (default: from settings)
            max_retries: Maximum retry attempts for rate limits
            retry_delay: Initial delay between retries in seconds
            max_tokens: Maximum output tokens
        """
        self.api_key = api_key or classification_settings.anthropic_api_key
        self.model = model or classification_settings.generation_model
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.max_tokens = max_tokens or classification_settings.generation_max_tokens

        if not self.api_key:
            raise ValueError(
                "Anthropic API key is required. Set ANTHROPIC_API_KEY environment variable."
            )

        self.client = Anthropic(api_key=self.api_key)

        # Track usage
        self.total_input_tokens = 0
        self.total_output_tokens = 0
        self.total_api_calls = 0

    def generate(self, prompt: str, system_prompt: str | None = None) -> str:
        """Send a prompt and return the response text.

        Rate-limit errors are retried with exponential backoff; every other
        error is raised to the caller.
        """
        delay = self.retry_delay

        for attempt in range(self.max_retries):
            try:
                kwargs = {
                    "model": self.model,
                    "max_tokens": self.max_tokens,
                    "messages": [{"role": "user", "content": prompt}],
                }
                if system_prompt:
                    kwargs["system"] = system_prompt

                response = self.client.messages.create(**kwargs)

                self.total_input_tokens += response.usage.input_tokens
                self.total_output_tokens += response.usage.output_tokens
                self.total_api_calls += 1

                return response.content[0].text

            except RateLimitError:
                if attempt < self.max_retries - 1:
                    logger.warning(
                        f"Rate limit hit, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{self.max_retries})"
                    )
                    time.sleep(delay)
                    delay *= 2
                else:
                    raise

            except Exception as e:
                logger.error(f"API call failed: {e}")
                raise

        raise RuntimeError("API call failed after all retries")

    def get_stats(self) -> dict[str, int | float | str]:
        """Get usage statistics."""
        # Claude Sonnet pricing: $3.00 / 1M input tokens, $15.00 / 1M output tokens
        input_cost = (self.total_input_tokens / 1_000_000) * 3.00
        output_cost = (self.total_output_tokens / 1_000_000) * 15.00

        return {
            "total_input_tokens": self.total_input_tokens,
            "total_output_tokens": self.total_output_tokens,
            "total_api_calls": self.total_api_calls,
            "estimated_cost_usd": input_cost + output_cost,
            "model": self.model,
        }
