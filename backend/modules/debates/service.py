"""
Debates service implementation.

Admission control (configuration, rate limit, input safety) and the
sanitized event stream for one debate run.
"""

import logging
from typing import AsyncIterator, Optional

from core.workers import WorkerFactory
from modules.safety.exceptions import SafetyRejectionError
from modules.safety.guardrails import SafetyGuardrails
from shared.config import Settings
from shared.rate_limit import RateLimiter, RateLimitResult

from .exceptions import DebateNotConfiguredError, RateLimitExceededError
from .interfaces import IDebateService
from .models import DebateEvent, DebateRequest, ErrorEvent
from .orchestrator import run_debate

logger = logging.getLogger(__name__)


class DebateService(IDebateService):
    """
    Debate service backed by the LangGraph orchestrator.

    Implements IDebateService. Every event leaving stream_debate has
    passed through the safety guardrails.
    """

    def __init__(
        self,
        settings: Settings,
        rate_limiter: RateLimiter,
        guardrails: SafetyGuardrails,
        worker_factory: Optional[WorkerFactory] = None,
    ):
        self._settings = settings
        self._rate_limiter = rate_limiter
        self._guardrails = guardrails
        self._worker_factory = worker_factory

    def ensure_configured(self) -> None:
        if not self._settings.openai_api_key:
            logger.error("config.invalid: OPENAI_API_KEY missing")
            raise DebateNotConfiguredError()

    def admit(self, client_key: str) -> RateLimitResult:
        limit = self._rate_limiter.check(client_key)
        if not limit.allowed:
            logger.warning(f"rate_limit.exceeded client={client_key}")
            raise RateLimitExceededError(limit.headers())
        return limit

    async def screen_question(self, query: str) -> None:
        decision = await self._guardrails.check_input_safety(query)
        if not decision.allowed:
            logger.warning(f"request.blocked reason={decision.reason.value}")
            raise SafetyRejectionError.from_decision(decision)

    async def stream_debate(self, request: DebateRequest) -> AsyncIterator[DebateEvent]:
        """Run the debate and yield each event after output screening."""
        logger.info(f"request.accepted domain={request.domain.value} model={request.model.value}")
        events = run_debate(
            request.query,
            request.domain,
            request.model,
            worker_factory=self._worker_factory,
            settings=self._settings,
        )
        try:
            async for event in events:
                yield await self._guardrails.sanitize_debate_event(event)
        except Exception as e:
            logger.error(f"request.failed: {e}")
            yield ErrorEvent(message=str(e) or "Debate failed")
        finally:
            await events.aclose()
