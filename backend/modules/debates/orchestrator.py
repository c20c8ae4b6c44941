"""
Runs a jury debate on the LangGraph graph and yields DebateEvent objects.

Nodes emit typed events through stream_mode="custom"; this module only
builds the initial state, relays events, and turns any failure into a
single terminal error event.
"""

import logging
import time
from functools import partial
from typing import AsyncIterator, Optional

from core.graph import DebateState, build_graph
from core.schemas import DebateContext, Domain
from core.workers import WorkerFactory, build_worker
from shared.config import Settings, get_settings
from shared.logging import truncate

from .models import (
    CompleteEvent,
    DebateEvent,
    ErrorEvent,
    ModelOption,
    get_alternate_model,
)

logger = logging.getLogger(__name__)


def _build_initial_state(
    query: str,
    domain: Domain,
    model: ModelOption,
    worker_factory: WorkerFactory,
    settings: Settings,
) -> DebateState:
    return {
        "context": DebateContext(query=query, domain=domain),
        "model": model.value,
        "alternate_model": get_alternate_model(model).value,
        "worker_factory": worker_factory,
        "delta_chunk_size": settings.delta_chunk_size,
        "rebuttals": None,
        "revisions": None,
    }


async def run_debate(
    query: str,
    domain: Domain | str,
    model: ModelOption | str = ModelOption.GPT_5_2,
    *,
    worker_factory: Optional[WorkerFactory] = None,
    settings: Optional[Settings] = None,
) -> AsyncIterator[DebateEvent]:
    """
    Run a full debate and yield its events in order.

    The stream ends with a complete event, or with exactly one error
    event if a required phase fails. Never raises once iteration starts.

    Args:
        query: The question
        domain: Question domain
        model: Selected backing model
        worker_factory: Builds workers; defaults to OpenAI-backed workers
        settings: Application settings (defaults to the cached settings)

    Yields:
        DebateEvent objects (unsanitized)
    """
    settings = settings or get_settings()
    factory = worker_factory or partial(_default_worker, settings=settings)
    started = time.monotonic()

    try:
        domain = Domain(domain)
        model = ModelOption(model)
        logger.info(
            f"debate.start domain={domain.value} model={model.value} "
            f"query={truncate(query, settings.log_truncate_length)!r}"
        )

        graph = build_graph()
        initial_state = _build_initial_state(query, domain, model, factory, settings)

        async for event in graph.astream(initial_state, stream_mode="custom"):
            yield event

    except Exception as e:
        logger.error(f"request.failed: {e}", exc_info=logger.isEnabledFor(logging.DEBUG))
        yield ErrorEvent(message=str(e) or "Debate failed")
        return

    duration_ms = int((time.monotonic() - started) * 1000)
    logger.info(f"debate.complete duration_ms={duration_ms}")
    yield CompleteEvent()


def _default_worker(role, model: str, label: str, settings: Settings):
    return build_worker(role, model, label=label, settings=settings)
