"""LLM provider implementations."""

from .base import LLMProvider, ModelConfig
from .factory import get_providers, parse_model_string
from .openai import OpenAIProvider, supports_sampling_params

__all__ = [
    "LLMProvider",
    "ModelConfig",
    "OpenAIProvider",
    "get_providers",
    "parse_model_string",
    "supports_sampling_params",
]
