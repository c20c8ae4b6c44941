"""Base classes and models for LLM providers."""

from abc import ABC, abstractmethod
from typing import Optional

from langchain_openai import ChatOpenAI
from pydantic import BaseModel


class ModelConfig(BaseModel):
    """Configuration for one backing model as used by one worker.

    Attributes:
        model_name: Friendly alias (e.g., "juror_a@gpt-5.2")
        provider_type: Provider registry key (e.g., "openai")
        model_id: Model identifier sent to the API (e.g., "gpt-5.2")
        api_base: Base URL for the API endpoint (empty for the default)
        api_key: API key
        temperature: Sampling temperature, or None to use the model default
    """

    model_config = {"frozen": True}

    model_name: str
    provider_type: str
    model_id: str
    api_base: str = ""
    api_key: str = ""
    temperature: Optional[float] = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Implementations are thin wrappers around ChatOpenAI with
    provider-specific defaults.
    """

    @abstractmethod
    def get_llm(self, config: ModelConfig) -> ChatOpenAI:
        """Return a configured LLM client for the given model.

        Args:
            config: Model configuration with provider details

        Returns:
            A configured ChatOpenAI client
        """
        pass
