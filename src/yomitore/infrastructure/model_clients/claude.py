"""
Anthropic Claude model client
"""

import os
import time

import anthropic
from anthropic import Anthropic

from yomitore.domain.constants import DEFAULT_TIMEOUT_SECONDS
from yomitore.domain.value_objects import ModelResponse
from yomitore.errors import TransportFailure
from yomitore.infrastructure.model_clients.base import ModelClient


class ClaudeClient(ModelClient):
    """Claude client using the Anthropic API"""

    def __init__(
        self,
        model_name: str,
        api_key: str | None = None,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        max_tokens: int = 2048
    ):
        """
        Args:
            model_name: Model name (e.g. claude-haiku-4-5-20251001)
            api_key: Anthropic API key (falls back to environment variable if not specified)
            timeout_seconds: Timeout for the single attempt (default: 60)
            max_tokens: Maximum number of tokens (default: 2048)
        """
        self.model_name = model_name
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.timeout_seconds = timeout_seconds
        self.max_tokens = max_tokens

        if not self.api_key:
            raise ValueError("ANTHROPIC_API_KEY is not set")

        self.client = Anthropic(
            api_key=self.api_key,
            timeout=float(timeout_seconds),
            max_retries=0,
        )

    def generate(self, prompt: str) -> ModelResponse:
        """
        Send a prompt and retrieve the response

        Args:
            prompt: Input prompt

        Returns:
            ModelResponse: The model's response

        Raises:
            TransportFailure: On timeout, connection or API errors
        """
        start_time = time.time()
        try:
            response = self.client.messages.create(
                model=self.model_name,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}]
            )
        except anthropic.APITimeoutError as e:
            raise TransportFailure(f"Request timed out after {self.timeout_seconds}s") from e
        except anthropic.APIStatusError as e:
            raise TransportFailure(f"API error {e.status_code}: {e.message}") from e
        except anthropic.APIError as e:
            raise TransportFailure(f"API request failed: {e}") from e
        end_time = time.time()

        latency_ms = int((end_time - start_time) * 1000)
        output = "".join(
            getattr(block, "text", "") for block in response.content
        ).strip()

        # Retrieve token usage
        input_tokens = getattr(response.usage, "input_tokens", 0) or 0
        output_tokens = getattr(response.usage, "output_tokens", 0) or 0

        return ModelResponse(
            output=output,
            latency_ms=latency_ms,
            model_name=self.model_name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
