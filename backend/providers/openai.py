"""OpenAI GPT LLM provider implementation.

Handles OpenAI's GPT models via the langchain-openai package.
OpenAI requires a valid API key for authentication.
"""

from langchain_openai import ChatOpenAI

from .base import LLMProvider, ModelConfig


# Model families that reject sampling parameters such as temperature.
# gpt-5.2 accepts them; the rest of the gpt-5 family does not.
_SAMPLING_ENABLED_PREFIXES = ("gpt-5.2",)
_SAMPLING_DISABLED_PREFIXES = ("gpt-5",)


def supports_sampling_params(model_id: str) -> bool:
    """Whether the model accepts a temperature setting."""
    if model_id.startswith(_SAMPLING_ENABLED_PREFIXES):
        return True
    if model_id.startswith(_SAMPLING_DISABLED_PREFIXES):
        return False
    return True


class OpenAIProvider(LLMProvider):
    """Provider for OpenAI GPT models.

    Available models:
        - gpt-5.2 (primary)
        - gpt-5-mini (faster, more economical)
    """

    def get_llm(self, config: ModelConfig) -> ChatOpenAI:
        """Return a ChatOpenAI client configured for OpenAI.

        The temperature is only forwarded to models that accept it.

        Args:
            config: Model configuration with OpenAI API details

        Returns:
            A configured ChatOpenAI client

        Raises:
            ValueError: If api_key is not provided
        """
        if not config.api_key:
            raise ValueError(
                "OpenAI API key is required. "
                "Set it via the OPENAI_API_KEY environment variable."
            )

        kwargs = {
            "model": config.model_id,
            "api_key": config.api_key,
        }
        if config.api_base:
            kwargs["base_url"] = config.api_base
        if config.temperature is not None and supports_sampling_params(config.model_id):
            kwargs["temperature"] = config.temperature

        return ChatOpenAI(**kwargs)
