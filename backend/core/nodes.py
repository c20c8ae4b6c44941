"""Node functions for the debate graph.

Each node runs one phase. Events are emitted through LangGraph's custom
stream (get_stream_writer) as they happen; the returned dict updates the
graph state for later phases.

Workers within a phase run concurrently. Usage events are emitted in the
order workers resolve; a failing worker fails the whole phase.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

from langgraph.config import get_stream_writer

from modules.debates.models import (
    BaselineFairEvent,
    BaselineMiniEvent,
    CoordinationEvent,
    CritiquesCompleteEvent,
    DebatePhase,
    EvaluationEvent,
    JurorDeltaEvent,
    PhaseEvent,
    PositionsCompleteEvent,
    RebuttalsCompleteEvent,
    RevisionsCompleteEvent,
    UsageEvent,
    VerdictEvent,
)
from modules.usage.models import UsageScope

from .coordination import decide_coordination, revise_after_critique
from .prompts import (
    build_critique_prompt,
    build_evaluation_prompt,
    build_rebuttal_prompt,
    build_revision_prompt,
    build_verdict_prompt,
    normalize_juror_ref,
    received_critiques,
)
from .roles import (
    BASELINE_ROLE,
    CHIEF_JUSTICE_ROLE,
    EVALUATOR_ROLE,
    RoleConfig,
    juror_role,
)
from .schemas import JUROR_IDS, DebateContext
from .workers import WorkerResult

logger = logging.getLogger(__name__)


def chunk_text(text: str, size: int = 80) -> list[str]:
    """Split text into fragments of at most size characters."""
    return [text[i:i + size] for i in range(0, len(text), size)]


def _worker(state: dict, role: RoleConfig, model: str, label: str | None = None):
    factory = state["worker_factory"]
    return factory(role, model, label or role.key)


async def run_workers(
    jobs: dict[str, Awaitable[WorkerResult]],
    on_result: Callable[[str, WorkerResult], None],
) -> dict[str, WorkerResult]:
    """Run worker calls concurrently, reporting each as it resolves.

    The first failure cancels the remaining calls and propagates.

    Args:
        jobs: Key to pending worker invocation
        on_result: Called with (key, result) in resolution order

    Returns:
        Results keyed like jobs
    """

    async def labeled(key: str, job: Awaitable[WorkerResult]) -> tuple[str, WorkerResult]:
        return key, await job

    tasks = [asyncio.ensure_future(labeled(key, job)) for key, job in jobs.items()]
    results: dict[str, WorkerResult] = {}
    try:
        for next_done in asyncio.as_completed(tasks):
            key, result = await next_done
            results[key] = result
            on_result(key, result)
    finally:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
    return {key: results[key] for key in jobs}


def _emit_usage(writer, result: WorkerResult) -> None:
    writer(UsageEvent(scope=UsageScope(result.usage.worker_label), data=result.usage))


class _PhaseTimer:
    """Logs phase.start and phase.end with the elapsed time."""

    def __init__(self, phase: DebatePhase):
        self.phase = phase
        self.start = time.monotonic()
        logger.info(f"phase.start phase={phase.value}")

    def end(self) -> None:
        duration_ms = int((time.monotonic() - self.start) * 1000)
        logger.info(f"phase.end phase={self.phase.value} duration_ms={duration_ms}")


async def baseline(state: dict) -> dict:
    """Run the two single-shot baselines: selected model and its alternate."""
    writer = get_stream_writer()
    context: DebateContext = state["context"]

    writer(PhaseEvent(phase=DebatePhase.BASELINE))
    timer = _PhaseTimer(DebatePhase.BASELINE)

    fair = _worker(state, BASELINE_ROLE, state["model"], UsageScope.BASELINE_FAIR.value)
    mini = _worker(state, BASELINE_ROLE, state["alternate_model"], UsageScope.BASELINE_MINI.value)

    def on_result(key: str, result: WorkerResult) -> None:
        if key == "fair":
            writer(BaselineFairEvent(data=result.output))
        else:
            writer(BaselineMiniEvent(data=result.output))
        _emit_usage(writer, result)

    results = await run_workers(
        {
            "fair": fair.invoke(context, context.query),
            "mini": mini.invoke(context, context.query),
        },
        on_result,
    )
    timer.end()

    return {
        "baseline_fair": results["fair"].output,
        "baseline_mini": results["mini"].output,
    }


async def positions(state: dict) -> dict:
    """Collect round-one positions, stream juror text, decide coordination."""
    writer = get_stream_writer()
    context: DebateContext = state["context"]
    chunk_size = state.get("delta_chunk_size", 80)

    writer(PhaseEvent(phase=DebatePhase.POSITIONS))
    timer = _PhaseTimer(DebatePhase.POSITIONS)

    jobs = {
        juror: _worker(state, juror_role(juror, "juror"), state["model"]).invoke(
            context, context.query
        )
        for juror in JUROR_IDS
    }
    results = await run_workers(jobs, lambda _, result: _emit_usage(writer, result))
    juror_positions = {juror: results[juror].output for juror in JUROR_IDS}

    writer(PositionsCompleteEvent(positions=juror_positions))

    for juror in JUROR_IDS:
        position = juror_positions[juror]
        for fragment in chunk_text(f"{position.summary}\n\n{position.reasoning}", chunk_size):
            writer(JurorDeltaEvent(juror=juror, delta=fragment))
    timer.end()

    coordination = decide_coordination(juror_positions)
    logger.info(
        f"coordination.decision agreement={coordination.agreement_score:.2f} "
        f"confidence={coordination.average_confidence:.2f} "
        f"skip_critique={coordination.skip_critique} "
        f"skip_revision={coordination.skip_revision} "
        f"deep={coordination.deep_deliberation}"
    )
    writer(CoordinationEvent(data=coordination))

    return {"juror_positions": juror_positions, "coordination": coordination}


async def critique(state: dict) -> dict:
    """Cross-critique round; skipped with empty lists on high agreement."""
    writer = get_stream_writer()
    context: DebateContext = state["context"]
    coordination = state["coordination"]

    writer(PhaseEvent(phase=DebatePhase.CRITIQUE))
    timer = _PhaseTimer(DebatePhase.CRITIQUE)

    if coordination.skip_critique:
        critiques = {juror: [] for juror in JUROR_IDS}
        writer(CritiquesCompleteEvent(critiques=critiques))
        timer.end()
        return {"critiques": critiques}

    jobs = {
        juror: _worker(state, juror_role(juror, "critique"), state["model"]).invoke(
            context,
            build_critique_prompt(
                context.query,
                state["juror_positions"],
                coordination.disagreement_focus,
                juror,
            ),
        )
        for juror in JUROR_IDS
    }
    results = await run_workers(jobs, lambda _, result: _emit_usage(writer, result))
    critiques = {juror: results[juror].output.critiques for juror in JUROR_IDS}
    for author in JUROR_IDS:
        for item in critiques[author]:
            if normalize_juror_ref(item.target_juror) is None:
                logger.warning(
                    f"critique.unroutable author={author} target={item.target_juror!r}"
                )

    writer(CritiquesCompleteEvent(critiques=critiques))
    timer.end()

    revised = revise_after_critique(coordination, critiques)
    if revised is not coordination:
        logger.info(
            f"coordination.revised skip_revision={revised.skip_revision} "
            f"rationale={revised.rationale!r}"
        )
        writer(CoordinationEvent(data=revised))

    return {"critiques": critiques, "coordination": revised}


async def rebuttal(state: dict) -> dict:
    """Deep deliberation only: each juror answers the critiques it received."""
    writer = get_stream_writer()
    context: DebateContext = state["context"]

    writer(PhaseEvent(phase=DebatePhase.REBUTTAL))
    timer = _PhaseTimer(DebatePhase.REBUTTAL)

    jobs = {
        juror: _worker(state, juror_role(juror, "rebuttal"), state["model"]).invoke(
            context,
            build_rebuttal_prompt(
                context.query,
                state["juror_positions"][juror],
                received_critiques(state["critiques"], juror),
            ),
        )
        for juror in JUROR_IDS
    }
    results = await run_workers(jobs, lambda _, result: _emit_usage(writer, result))
    rebuttals = {juror: results[juror].output for juror in JUROR_IDS}

    writer(RebuttalsCompleteEvent(rebuttals=rebuttals))
    timer.end()

    return {"rebuttals": rebuttals}


async def revision(state: dict) -> dict:
    """Revision round; skipped (revisions None) when coordination says so."""
    writer = get_stream_writer()
    context: DebateContext = state["context"]
    coordination = state["coordination"]
    rebuttals = state.get("rebuttals")

    writer(PhaseEvent(phase=DebatePhase.REVISION))
    timer = _PhaseTimer(DebatePhase.REVISION)

    if coordination.skip_revision:
        writer(RevisionsCompleteEvent(revisions=None))
        timer.end()
        return {"revisions": None}

    jobs = {
        juror: _worker(state, juror_role(juror, "revision"), state["model"]).invoke(
            context,
            build_revision_prompt(
                context.query,
                state["juror_positions"][juror],
                received_critiques(state["critiques"], juror),
                rebuttals[juror] if rebuttals else None,
            ),
        )
        for juror in JUROR_IDS
    }
    results = await run_workers(jobs, lambda _, result: _emit_usage(writer, result))
    revisions = {juror: results[juror].output for juror in JUROR_IDS}

    writer(RevisionsCompleteEvent(revisions=revisions))
    timer.end()

    return {"revisions": revisions}


async def verdict(state: dict) -> dict:
    """Chief justice synthesizes the consensus verdict."""
    writer = get_stream_writer()
    context: DebateContext = state["context"]

    writer(PhaseEvent(phase=DebatePhase.VERDICT))
    timer = _PhaseTimer(DebatePhase.VERDICT)

    prompt = build_verdict_prompt(
        context.query,
        state["juror_positions"],
        state["critiques"],
        state.get("rebuttals"),
        state.get("revisions"),
        state["coordination"],
    )
    result = await _worker(state, CHIEF_JUSTICE_ROLE, state["model"]).invoke(context, prompt)
    _emit_usage(writer, result)
    writer(VerdictEvent(data=result.output))
    timer.end()

    return {"final_verdict": result.output}


async def evaluate(state: dict) -> dict:
    """Best-effort comparison of the baseline with the verdict.

    Failure is logged and swallowed; no event is emitted.
    """
    writer = get_stream_writer()
    context: DebateContext = state["context"]

    prompt = build_evaluation_prompt(context.query, state["baseline_fair"], state["final_verdict"])
    try:
        result = await _worker(state, EVALUATOR_ROLE, state["model"]).invoke(context, prompt)
    except Exception as e:
        logger.warning(f"evaluation.failed: {e}")
        return {"evaluation": None}

    _emit_usage(writer, result)
    writer(EvaluationEvent(data=result.output))
    return {"evaluation": result.output}


NODES: dict[str, Callable[[dict], Awaitable[dict[str, Any]]]] = {
    "baseline": baseline,
    "positions": positions,
    "critique": critique,
    "rebuttal": rebuttal,
    "revision": revision,
    "verdict": verdict,
    "evaluate": evaluate,
}
