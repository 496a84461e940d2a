"""
OpenAI-compatible model client (Groq by default)
"""

import os
import time

import openai
from openai import OpenAI

from yomitore.domain.constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from yomitore.domain.value_objects import ModelResponse
from yomitore.errors import TransportFailure
from yomitore.infrastructure.model_clients.base import ModelClient


class OpenAICompatibleClient(ModelClient):
    """Client for any OpenAI-compatible chat completions endpoint"""

    def __init__(
        self,
        model_name: str,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        max_tokens: int = 2048
    ):
        """
        Args:
            model_name: Model name (e.g. openai/gpt-oss-120b)
            base_url: API endpoint (falls back to YOMITORE_BASE_URL, then the Groq endpoint)
            api_key: API key (falls back to GROQ_API_KEY, then OPENAI_API_KEY)
            timeout_seconds: Timeout for the single attempt (default: 60)
            max_tokens: Maximum number of tokens (default: 2048)
        """
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self.max_tokens = max_tokens

        # Configuration priority: argument > environment variable > default value
        self.base_url = base_url or os.environ.get("YOMITORE_BASE_URL", DEFAULT_BASE_URL)
        api_key = api_key or os.environ.get("GROQ_API_KEY") or os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("GROQ_API_KEY is not set")

        # No SDK-level retries: one attempt, one timeout
        self.client = OpenAI(
            base_url=self.base_url,
            api_key=api_key,
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
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
            )
        except openai.APITimeoutError as e:
            raise TransportFailure(f"Request timed out after {self.timeout_seconds}s") from e
        except openai.APIStatusError as e:
            raise TransportFailure(f"API error {e.status_code}: {e.message}") from e
        except openai.APIError as e:
            raise TransportFailure(f"API request failed: {e}") from e
        end_time = time.time()

        if not response.choices:
            raise TransportFailure("API response contained no choices.")

        latency_ms = int((end_time - start_time) * 1000)
        # content can be null
        output = (response.choices[0].message.content or "").strip()

        # Retrieve token usage
        input_tokens = 0
        output_tokens = 0
        if response.usage:
            input_tokens = response.usage.prompt_tokens or 0
            output_tokens = response.usage.completion_tokens or 0

        return ModelResponse(
            output=output,
            latency_ms=latency_ms,
            model_name=self.model_name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
