"""
LangChain callback handler for usage tracking.

Captures token usage reported by the LLM API for a single worker call.

Usage:
    callback = UsageTrackingCallback()
    response = await llm.ainvoke(messages, config={"callbacks": [callback]})
    usage = callback.usage
"""

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.messages import BaseMessage
from langchain_core.outputs import LLMResult

logger = logging.getLogger(__name__)


@dataclass
class UsageMetadata:
    """Captured usage metadata from an LLM call."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def __bool__(self) -> bool:
        """Returns True if any usage was captured."""
        return self.input_tokens > 0 or self.output_tokens > 0


class UsageTrackingCallback(BaseCallbackHandler):
    """
    Callback handler that captures usage metadata from LLM responses.

    The usage is read from LLMResult.llm_output["token_usage"] (OpenAI
    style) or, failing that, from the generated message's usage_metadata.
    """

    def __init__(self) -> None:
        super().__init__()
        self._usage: UsageMetadata | None = None
        self._run_id: UUID | None = None

    @property
    def usage(self) -> UsageMetadata | None:
        """Get the captured usage metadata."""
        return self._usage

    def on_chat_model_start(
        self,
        serialized: dict[str, Any],
        messages: list[list[BaseMessage]],
        *,
        run_id: UUID,
        **kwargs: Any,
    ) -> None:
        """Called when chat model starts. Captures run_id for correlation."""
        self._run_id = run_id
        self._usage = None

    def on_llm_end(
        self,
        response: LLMResult,
        *,
        run_id: UUID,
        **kwargs: Any,
    ) -> None:
        """Called when LLM completes. Extracts usage metadata from response."""
        usage = UsageMetadata()

        if response.llm_output and "token_usage" in response.llm_output:
            token_usage = response.llm_output["token_usage"] or {}
            usage.input_tokens = token_usage.get("prompt_tokens", 0) or 0
            usage.output_tokens = token_usage.get("completion_tokens", 0) or 0
            usage.total_tokens = token_usage.get("total_tokens", 0) or 0

        if not usage and response.generations:
            for gen_list in response.generations:
                for gen in gen_list:
                    msg_usage = getattr(getattr(gen, "message", None), "usage_metadata", None)
                    if msg_usage:
                        usage.input_tokens = msg_usage.get("input_tokens", 0)
                        usage.output_tokens = msg_usage.get("output_tokens", 0)
                        usage.total_tokens = msg_usage.get("total_tokens", 0)
                        break
                if usage:
                    break

        if usage:
            self._usage = usage
            logger.debug(
                f"Captured usage: input={usage.input_tokens}, "
                f"output={usage.output_tokens}"
            )
        else:
            logger.debug("No usage metadata found in LLM response")
