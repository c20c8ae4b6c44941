"""Factory functions for creating LLM providers."""

from .base import LLMProvider
from .openai import OpenAIProvider


def get_providers() -> dict[str, LLMProvider]:
    """Get instances of each provider type.

    Returns:
        Dictionary mapping provider type names to provider instances.
        Keys are: "openai"
    """
    return {
        "openai": OpenAIProvider(),
    }


def parse_model_string(model: str) -> tuple[str, str]:
    """Parse 'provider/model_id' into (provider_type, model_id).

    A bare model id (no '/') is assumed to be served by OpenAI.

    Args:
        model: Model string, e.g. "openai/gpt-5.2" or "gpt-5-mini"

    Returns:
        Tuple of (provider_type, model_id)
    """
    if "/" not in model:
        return "openai", model
    provider_type, model_id = model.split("/", 1)
    return provider_type, model_id
