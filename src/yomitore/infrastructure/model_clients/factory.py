"""
Model client factory

Creates the appropriate client instance based on the model name.
"""

from __future__ import annotations

from yomitore.app_config import AppConfig, load_config
from yomitore.infrastructure.model_clients.base import ModelClient
from yomitore.infrastructure.model_clients.claude import ClaudeClient
from yomitore.infrastructure.model_clients.fixed import FixedResponseClient
from yomitore.infrastructure.model_clients.openai_compat import OpenAICompatibleClient

OFFLINE_MODEL = "fixed"


def create_client(model_name: str | None = None, config: AppConfig | None = None) -> ModelClient:
    """
    Create the appropriate client based on the model name

    Args:
        model_name: Model name (default: config.api.model)
        config: AppConfig (loads from env if not provided)

    Returns:
        ModelClient: The appropriate client instance
    """
    if config is None:
        config = load_config()
    if model_name is None:
        model_name = config.api.model

    timeout = config.api.timeout_seconds
    max_tokens = config.api.max_tokens

    if model_name == OFFLINE_MODEL:
        return FixedResponseClient()
    elif model_name.startswith("claude"):
        return ClaudeClient(model_name, timeout_seconds=timeout, max_tokens=max_tokens)
    else:
        return OpenAICompatibleClient(
            model_name,
            base_url=config.api.base_url,
            api_key=config.api.api_key,
            timeout_seconds=timeout,
            max_tokens=max_tokens,
        )
