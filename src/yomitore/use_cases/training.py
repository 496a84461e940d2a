"""
Training Service

Adapts a ModelClient into the two operations the session needs:
generating a passage and evaluating a summary. Both are blocking and are run
off the control thread by yomitore.session.operations.
"""

from __future__ import annotations

import logging

from yomitore.errors import TransportFailure
from yomitore.infrastructure.model_clients.base import ModelClient
from yomitore.prompt_builder import build_evaluation_prompt, build_generation_prompt

logger = logging.getLogger(__name__)


class TrainingService:
    """generate(length) / evaluate(original, summary) over a model client"""

    def __init__(self, client: ModelClient) -> None:
        self._client = client

    @property
    def model_name(self) -> str:
        return getattr(self._client, "model_name", type(self._client).__name__)

    def generate(self, length_hint: int) -> str:
        """
        Generate a reading passage.

        Raises:
            TransportFailure: If the call fails or returns nothing
        """
        response = self._client.generate(build_generation_prompt(length_hint))
        text = response.output.strip()
        if not text:
            raise TransportFailure("The model returned an empty passage.")
        logger.info("Generated passage: %d chars in %dms", len(text), response.latency_ms)
        return text

    def evaluate(self, original: str, summary: str) -> str:
        """
        Evaluate a summary and return the evaluator's raw answer.

        Raises:
            TransportFailure: If the call fails or returns nothing
        """
        response = self._client.generate(build_evaluation_prompt(original, summary))
        text = response.output.strip()
        if not text:
            raise TransportFailure("The evaluator returned an empty response.")
        logger.info("Evaluated summary in %dms", response.latency_ms)
        return text
