"""Worker handles: one configured LLM call per role per run.

A worker renders its role instructions, asks the model for JSON matching
the role's output schema, validates the result and reports token usage.
Every failure surfaces as WorkerFailureError.
"""

import logging
from dataclasses import dataclass
from typing import Any, Generic, Optional, Protocol, TypeVar

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.output_parsers import JsonOutputParser
from langchain_openai import ChatOpenAI
from pydantic import BaseModel

from modules.debates.exceptions import WorkerFailureError
from modules.usage.callback import UsageTrackingCallback
from modules.usage.models import UsageSnapshot
from modules.usage.pricing import PricingTable, build_usage_snapshot
from modules.usage.token_counter import count_tokens
from providers.base import ModelConfig
from providers.factory import get_providers, parse_model_string
from shared.config import Settings, get_settings

from .roles import RoleConfig
from .schemas import DebateContext

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class WorkerResult(Generic[T]):
    """Validated worker output plus the usage of the call that produced it."""

    output: T
    usage: UsageSnapshot


class Worker(Protocol):
    """Anything that can run one role invocation."""

    label: str

    async def invoke(self, context: DebateContext, prompt: str) -> WorkerResult: ...


class WorkerFactory(Protocol):
    """Builds the worker for a role on a backing model under a usage label."""

    def __call__(self, role: RoleConfig, model: str, label: str) -> Worker: ...


def _message_text(content: Any) -> str:
    """Flatten message content (string or content blocks) to text."""
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class WorkerHandle:
    """A role bound to a configured chat model.

    Args:
        role: Role to play
        model: Backing model id (used for pricing and token estimation)
        llm: Configured chat model
        label: Usage label reported with each call (e.g., "baseline_mini")
        pricing: Pricing table for cost (defaults to the configured one)
    """

    def __init__(
        self,
        role: RoleConfig,
        model: str,
        llm: ChatOpenAI,
        label: Optional[str] = None,
        pricing: Optional[PricingTable] = None,
    ):
        self.role = role
        self.model = model
        self.llm = llm
        self.label = label or role.key
        self.pricing = pricing
        self.parser = JsonOutputParser(pydantic_object=role.output_schema)

    def build_messages(self, context: DebateContext, prompt: str) -> list:
        system_prompt = (
            f"{self.role.render_instructions(context)}\n\n"
            f"{self.parser.get_format_instructions()}"
        )
        return [
            SystemMessage(content=system_prompt),
            HumanMessage(content=prompt),
        ]

    async def invoke(self, context: DebateContext, prompt: str) -> WorkerResult:
        """Run the role once and validate its output.

        Args:
            context: Question and domain for this run
            prompt: Phase-specific user message

        Returns:
            WorkerResult with the validated output and usage snapshot

        Raises:
            WorkerFailureError: On provider, parse, or validation errors
        """
        messages = self.build_messages(context, prompt)
        usage_callback = UsageTrackingCallback()

        try:
            response = await self.llm.ainvoke(messages, config={"callbacks": [usage_callback]})
        except Exception as e:
            raise WorkerFailureError(self.label, f"provider error: {e}") from e

        content = _message_text(response.content)

        try:
            parsed = self.parser.parse(content)
            output = self.role.output_schema.model_validate(parsed)
        except Exception as e:
            logger.debug(f"Unparseable output from {self.label}: {content[:200]}")
            raise WorkerFailureError(self.label, f"invalid output: {e}") from e

        usage = usage_callback.usage
        if usage:
            input_tokens = usage.input_tokens
            output_tokens = usage.output_tokens
            total_tokens = usage.total_tokens
        else:
            # No usage metadata from API, estimate with tiktoken
            try:
                input_tokens = sum(count_tokens(_message_text(m.content), self.model) for m in messages)
                output_tokens = count_tokens(content, self.model)
            except Exception as e:
                logger.warning(f"usage.estimate_failed worker={self.label}: {e}")
                input_tokens = output_tokens = 0
            total_tokens = input_tokens + output_tokens
            logger.debug(f"Estimated usage for {self.label}: input={input_tokens}, output={output_tokens}")

        snapshot = build_usage_snapshot(
            worker_label=self.label,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=total_tokens,
            pricing=self.pricing,
        )
        return WorkerResult(output=output, usage=snapshot)


def build_worker(
    role: RoleConfig,
    model: str,
    label: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> WorkerHandle:
    """Build a fresh worker for a role on a backing model.

    Each call constructs its own chat model, so roles never share
    sampling settings.

    Args:
        role: Role to play
        model: Model string ("gpt-5.2" or "provider/model_id")
        label: Usage label (defaults to the role key)
        settings: Application settings (defaults to the cached settings)

    Returns:
        WorkerHandle ready to invoke
    """
    settings = settings or get_settings()
    provider_type, model_id = parse_model_string(model)
    providers = get_providers()
    if provider_type not in providers:
        raise ValueError(f"Unknown provider: {provider_type}")

    config = ModelConfig(
        model_name=f"{label or role.key}@{model_id}",
        provider_type=provider_type,
        model_id=model_id,
        api_base=settings.openai_base_url or "",
        api_key=settings.openai_api_key,
        temperature=role.temperature,
    )
    llm = providers[provider_type].get_llm(config)
    return WorkerHandle(role=role, model=model_id, llm=llm, label=label)
