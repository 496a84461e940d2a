"""
Model client package

Provides a unified interface to each LLM provider.
"""

from yomitore.infrastructure.model_clients.base import ModelClient
from yomitore.infrastructure.model_clients.factory import OFFLINE_MODEL, create_client
from yomitore.infrastructure.model_clients.fixed import FixedResponseClient
from yomitore.domain.value_objects import ModelResponse

__all__ = ["FixedResponseClient", "ModelClient", "ModelResponse", "OFFLINE_MODEL", "create_client"]
