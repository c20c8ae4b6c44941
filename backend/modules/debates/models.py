"""
Debates module data models.

Request models and the streamed event union for the Tribunal debate.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from core.schemas import (
    BaselineOutput,
    CoordinationDecision,
    Critique,
    Domain,
    Evaluation,
    JurorId,
    Position,
    Rebuttal,
    RevisedPosition,
    Verdict,
)
from modules.usage.models import UsageScope, UsageSnapshot


class ModelOption(str, Enum):
    """Backing models a client may select."""

    GPT_5_2 = "gpt-5.2"
    GPT_5_MINI = "gpt-5-mini"


DEFAULT_MODEL = ModelOption.GPT_5_2

_ALTERNATES = {
    ModelOption.GPT_5_2: ModelOption.GPT_5_MINI,
    ModelOption.GPT_5_MINI: ModelOption.GPT_5_2,
}


def get_alternate_model(model: ModelOption | str) -> ModelOption:
    """Return the model paired with the selected one for the second baseline."""
    return _ALTERNATES[ModelOption(model)]


class DebateRequest(BaseModel):
    """Request to run a debate."""

    query: str = Field(
        ...,
        min_length=1,
        description="The question to put to the jury (length capped by max_query_length)",
    )
    domain: Domain = Field(..., description="Question domain")
    model: ModelOption = Field(
        default=DEFAULT_MODEL,
        description="Backing model for the jury",
    )


class DebatePhase(str, Enum):
    """Phase markers emitted as the debate progresses."""

    BASELINE = "baseline"
    POSITIONS = "positions"
    CRITIQUE = "critique"
    REBUTTAL = "rebuttal"
    REVISION = "revision"
    VERDICT = "verdict"


# SSE Event Types

class DebateEventType(str, Enum):
    """Types of events emitted during debate streaming."""

    PHASE = "phase"
    BASELINE_FAIR = "baseline_fair"
    BASELINE_MINI = "baseline_mini"
    JUROR_DELTA = "juror_delta"
    COORDINATION = "coordination"
    POSITIONS_COMPLETE = "positions_complete"
    CRITIQUES_COMPLETE = "critiques_complete"
    REBUTTALS_COMPLETE = "rebuttals_complete"
    REVISIONS_COMPLETE = "revisions_complete"
    VERDICT = "verdict"
    EVALUATION = "evaluation"
    USAGE = "usage"
    COMPLETE = "complete"
    ERROR = "error"


class _Event(BaseModel):
    model_config = {"frozen": True}


class PhaseEvent(_Event):
    type: Literal["phase"] = "phase"
    phase: DebatePhase


class BaselineFairEvent(_Event):
    type: Literal["baseline_fair"] = "baseline_fair"
    data: BaselineOutput


class BaselineMiniEvent(_Event):
    type: Literal["baseline_mini"] = "baseline_mini"
    data: BaselineOutput


class JurorDeltaEvent(_Event):
    """A fragment of a juror's round-one text."""

    type: Literal["juror_delta"] = "juror_delta"
    juror: JurorId
    delta: str


class CoordinationEvent(_Event):
    type: Literal["coordination"] = "coordination"
    data: CoordinationDecision


class PositionsCompleteEvent(_Event):
    type: Literal["positions_complete"] = "positions_complete"
    positions: dict[JurorId, Position]


class CritiquesCompleteEvent(_Event):
    """Critiques authored by each juror; empty lists when critique was skipped."""

    type: Literal["critiques_complete"] = "critiques_complete"
    critiques: dict[JurorId, list[Critique]]


class RebuttalsCompleteEvent(_Event):
    type: Literal["rebuttals_complete"] = "rebuttals_complete"
    rebuttals: Optional[dict[JurorId, Rebuttal]] = None


class RevisionsCompleteEvent(_Event):
    """Revised positions; None when the revision round was skipped."""

    type: Literal["revisions_complete"] = "revisions_complete"
    revisions: Optional[dict[JurorId, RevisedPosition]] = None


class VerdictEvent(_Event):
    type: Literal["verdict"] = "verdict"
    data: Verdict


class EvaluationEvent(_Event):
    type: Literal["evaluation"] = "evaluation"
    data: Evaluation


class UsageEvent(_Event):
    type: Literal["usage"] = "usage"
    scope: UsageScope
    data: UsageSnapshot


class CompleteEvent(_Event):
    type: Literal["complete"] = "complete"


class ErrorEvent(_Event):
    type: Literal["error"] = "error"
    message: str


DebateEvent = Annotated[
    Union[
        PhaseEvent,
        BaselineFairEvent,
        BaselineMiniEvent,
        JurorDeltaEvent,
        CoordinationEvent,
        PositionsCompleteEvent,
        CritiquesCompleteEvent,
        RebuttalsCompleteEvent,
        RevisionsCompleteEvent,
        VerdictEvent,
        EvaluationEvent,
        UsageEvent,
        CompleteEvent,
        ErrorEvent,
    ],
    Field(discriminator="type"),
]

debate_event_adapter: TypeAdapter[DebateEvent] = TypeAdapter(DebateEvent)


def parse_debate_event(payload: dict | str) -> DebateEvent:
    """Parse a wire payload (dict or JSON string) back into its event model."""
    if isinstance(payload, str):
        return debate_event_adapter.validate_json(payload)
    return debate_event_adapter.validate_python(payload)


class SampleQuestion(BaseModel):
    """A curated example question."""

    id: str
    domain: Domain
    prompt: str
    difficulty: Literal["easy", "medium", "hard"] = "hard"


class SamplesResponse(BaseModel):
    """Response for the samples listing."""

    count: int
    items: list[SampleQuestion]
    by_domain: dict[str, list[SampleQuestion]]
