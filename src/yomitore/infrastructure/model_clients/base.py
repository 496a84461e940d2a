"""
Model client base class

Defines the abstract base class inherited by all model clients.

Every client makes exactly one attempt per call, bounded by its timeout, and
reports any failure as TransportFailure with a displayable message.
"""

from abc import ABC, abstractmethod

from yomitore.domain.value_objects import ModelResponse


class ModelClient(ABC):
    """Abstract base class for model clients"""

    model_name: str = "unknown"

    @abstractmethod
    def generate(self, prompt: str) -> ModelResponse:
        """Send a prompt and retrieve the response"""
        pass
