"""Coordination scoring for the debate graph.

Pure functions that turn round-one positions (and later the critiques)
into a CoordinationDecision. No I/O and no LLM calls happen here.
"""

from itertools import combinations
from typing import Mapping

from .schemas import (
    JUROR_IDS,
    CoordinationDecision,
    Critique,
    Position,
    Severity,
    Stance,
)

SKIP_CRITIQUE_AGREEMENT = 0.8
SKIP_CRITIQUE_CONFIDENCE = 0.6
DEEP_DELIBERATION_AGREEMENT = 0.4
SKIP_REVISION_AGREEMENT = 0.6

RATIONALE_FAST_TRACK = "High agreement and confidence; fast-tracking to verdict."
RATIONALE_DEEP = "Very low agreement; adding a rebuttal round before revision."
RATIONALE_DEBATE = "Disagreement detected; running critique and revision rounds."
RATIONALE_LOW_SEVERITY = "Low-severity critiques; skipping revision round."


def stance_agreement(a: Stance, b: Stance) -> float:
    """Pairwise stance similarity: 1 if equal, 0.6 with nuance, else 0."""
    if a == b:
        return 1.0
    if a == Stance.NUANCED or b == Stance.NUANCED:
        return 0.6
    return 0.0


def compute_agreement_score(positions: Mapping[str, Position]) -> float:
    """Mean pairwise agreement across all juror pairs."""
    pairs = list(combinations(JUROR_IDS, 2))
    total = sum(
        stance_agreement(positions[left].stance, positions[right].stance)
        for left, right in pairs
    )
    return total / len(pairs)


def compute_average_confidence(positions: Mapping[str, Position]) -> float:
    """Mean confidence of the three jurors."""
    return sum(positions[juror].confidence for juror in JUROR_IDS) / len(JUROR_IDS)


def build_disagreement_focus(positions: Mapping[str, Position]) -> list[str]:
    """One line per pair of jurors whose stances differ."""
    focus = []
    for left, right in combinations(JUROR_IDS, 2):
        a, b = positions[left], positions[right]
        if a.stance != b.stance:
            focus.append(
                f"Juror {left} ({a.stance.value}): {a.summary} | "
                f"Juror {right} ({b.stance.value}): {b.summary}"
            )
    return focus


def coordination_from_scores(
    agreement_score: float,
    average_confidence: float,
    disagreement_focus: list[str] | None = None,
) -> CoordinationDecision:
    """Apply the round-one thresholds to precomputed scores."""
    skip_critique = (
        agreement_score >= SKIP_CRITIQUE_AGREEMENT
        and average_confidence >= SKIP_CRITIQUE_CONFIDENCE
    )
    deep_deliberation = not skip_critique and agreement_score < DEEP_DELIBERATION_AGREEMENT

    if skip_critique:
        rationale = RATIONALE_FAST_TRACK
    elif deep_deliberation:
        rationale = RATIONALE_DEEP
    else:
        rationale = RATIONALE_DEBATE

    return CoordinationDecision(
        agreement_score=agreement_score,
        average_confidence=average_confidence,
        skip_critique=skip_critique,
        skip_revision=skip_critique,
        deep_deliberation=deep_deliberation,
        rationale=rationale,
        disagreement_focus=disagreement_focus or [],
    )


def decide_coordination(positions: Mapping[str, Position]) -> CoordinationDecision:
    """Compute the initial coordination decision from round-one positions."""
    return coordination_from_scores(
        compute_agreement_score(positions),
        compute_average_confidence(positions),
        build_disagreement_focus(positions),
    )


def count_major_challenges(critiques: Mapping[str, list[Critique]]) -> int:
    """Count challenges marked major across every critique."""
    return sum(
        1
        for critique_list in critiques.values()
        for critique in critique_list
        for challenge in critique.challenges
        if challenge.severity == Severity.MAJOR
    )


def revise_after_critique(
    decision: CoordinationDecision,
    critiques: Mapping[str, list[Critique]],
) -> CoordinationDecision:
    """
    Re-evaluate skip_revision once critiques are in.

    Deep deliberation always keeps the revision round. The same decision
    object is returned when nothing changes, so callers can compare by
    identity to decide whether to re-emit it.
    """
    if decision.deep_deliberation:
        return decision

    skip_revision = (
        count_major_challenges(critiques) == 0
        and decision.agreement_score >= SKIP_REVISION_AGREEMENT
    )
    if skip_revision == decision.skip_revision:
        return decision

    return decision.model_copy(
        update={
            "skip_revision": skip_revision,
            "rationale": RATIONALE_LOW_SEVERITY if skip_revision else RATIONALE_DEBATE,
        }
    )
