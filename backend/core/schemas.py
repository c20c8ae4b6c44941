"""Pydantic models for the debate core module.

These define the structured output each worker role must return, plus the
immutable context shared by every worker in a run. The models double as
output schemas for LangChain's JsonOutputParser.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


JurorId = Literal["A", "B", "C"]
JUROR_IDS: tuple[JurorId, ...] = ("A", "B", "C")


class Domain(str, Enum):
    """Question domains supported by the jury."""

    FINANCE = "finance"
    HEALTHCARE = "healthcare"
    LEGAL = "legal"
    GENERAL = "general"


class Stance(str, Enum):
    """A juror's categorical judgment."""

    SUPPORT = "support"
    OPPOSE = "oppose"
    NUANCED = "nuanced"


class Severity(str, Enum):
    """Severity of a single critique challenge."""

    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"


class Assessment(str, Enum):
    """Overall assessment of a critiqued position."""

    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"


class DebateContext(BaseModel):
    """Immutable input to every worker invocation in a run."""

    model_config = {"frozen": True}

    query: str
    domain: Domain


class BaselineOutput(BaseModel):
    """Single-shot answer used as the comparison baseline."""

    stance: Stance
    summary: str = Field(..., description="1-2 sentence summary")
    confidence: float = Field(..., ge=0, le=1)
    reasoning: str = Field(..., description="Short explanation")


class EvidenceItem(BaseModel):
    """A supporting claim and what it rests on."""

    claim: str
    basis: str = Field(..., description="Source, data, or logic")


class Position(BaseModel):
    """A juror's round-one judgment."""

    stance: Stance
    summary: str = Field(..., description="1-2 sentence position statement")
    confidence: float = Field(..., ge=0, le=1, description="Confidence in this position")
    reasoning: str = Field(..., description="Detailed reasoning")
    evidence: list[EvidenceItem] = Field(
        default_factory=list, description="Supporting evidence points"
    )
    risks: list[str] = Field(default_factory=list, description="Key risks or caveats")


class Challenge(BaseModel):
    """One challenged claim inside a critique."""

    point: str = Field(..., description="Claim being challenged")
    counterargument: str = Field(..., description="Why it's wrong or incomplete")
    severity: Severity


class Critique(BaseModel):
    """A critique of one juror's position, authored by another juror."""

    target_juror: str = Field(..., description="Which juror is being critiqued (A, B or C)")
    agreements: list[str] = Field(default_factory=list, description="Points of agreement")
    challenges: list[Challenge] = Field(default_factory=list)
    missing_perspectives: list[str] = Field(
        default_factory=list, description="What was overlooked"
    )
    overall_assessment: Assessment


class CritiquesOutput(BaseModel):
    """Worker output for the critique round."""

    critiques: list[Critique] = Field(
        default_factory=list, description="List of critiques authored by this juror"
    )


class Rebuttal(BaseModel):
    """A juror's answer to the critiques it received (deep deliberation)."""

    concessions: list[str] = Field(
        default_factory=list, description="Points conceded after reading critiques"
    )
    defenses: list[str] = Field(
        default_factory=list, description="Points defended against critiques"
    )
    refined_stance: Stance
    refined_summary: str = Field(..., description="Updated summary after rebuttal")


class RevisedPosition(BaseModel):
    """A juror's final position after critique (and rebuttal)."""

    original_stance: Stance
    revised_stance: Stance
    position_changed: bool
    confidence: float = Field(..., ge=0, le=1)
    summary: str
    reasoning: str
    concessions: list[str] = Field(default_factory=list)
    rebuttals: list[str] = Field(default_factory=list)


class PositionBreakdown(BaseModel):
    """How many jurors ended on each stance."""

    support: int = 0
    oppose: int = 0
    nuanced: int = 0


class ReasoningQuality(BaseModel):
    """Per-juror reasoning quality, 0-10."""

    juror_a: float = Field(..., ge=0, le=10)
    juror_b: float = Field(..., ge=0, le=10)
    juror_c: float = Field(..., ge=0, le=10)


class HallucinationFlag(BaseModel):
    """A claim the chief justice believes is unsupported."""

    juror: str
    claim: str
    reason: str


class Verdict(BaseModel):
    """Synthesized consensus produced by the chief justice."""

    verdict: str = Field(..., description="Consensus verdict in 1-2 sentences")
    agreement_score: float = Field(..., ge=0, le=1)
    confidence_score: float = Field(..., ge=0, le=1)
    position_breakdown: PositionBreakdown
    key_agreements: list[str] = Field(default_factory=list)
    key_disagreements: list[str] = Field(default_factory=list)
    key_evidence: list[str] = Field(
        default_factory=list, description="Key evidence supporting the verdict"
    )
    next_actions: list[str] = Field(
        default_factory=list, description="Recommended next actions tied to the verdict"
    )
    reasoning_quality: ReasoningQuality
    hallucination_flags: list[HallucinationFlag] = Field(default_factory=list)
    final_reasoning: str


class Scorecard(BaseModel):
    """Evaluator scores for one answer, each 0-10."""

    overall: float = Field(..., ge=0, le=10)
    consistency: float = Field(..., ge=0, le=10)
    specificity: float = Field(..., ge=0, le=10)
    reasoning: float = Field(..., ge=0, le=10)
    coverage: float = Field(..., ge=0, le=10)
    notes: str = Field(..., description="Short notes on answer quality")


class Evaluation(BaseModel):
    """Baseline vs jury comparison."""

    baseline: Scorecard
    jury: Scorecard
    winner: Literal["baseline", "jury", "tie"]
    rationale: str = Field(..., description="1-2 sentence comparison rationale")


class CoordinationDecision(BaseModel):
    """
    Control-flow record dictating which optional rounds run.

    Frozen: a revised decision is a new value, never a patched one.
    """

    model_config = {"frozen": True}

    agreement_score: float = Field(..., ge=0, le=1)
    average_confidence: float = Field(..., ge=0, le=1)
    skip_critique: bool
    skip_revision: bool
    deep_deliberation: bool
    rationale: str
    disagreement_focus: list[str] = Field(default_factory=list)
