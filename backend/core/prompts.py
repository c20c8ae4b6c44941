"""Prompt builders for each debate phase.

Pure string construction from prior-phase outputs. Structured outputs are
embedded as JSON so the model sees exactly what the previous round said.
"""

import json
import re
from typing import Mapping, Optional

from .roles import JUROR_PERSONAS
from .schemas import (
    JUROR_IDS,
    BaselineOutput,
    CoordinationDecision,
    Critique,
    JurorId,
    Position,
    Rebuttal,
    RevisedPosition,
    Verdict,
)

SKIPPED_HIGH_AGREEMENT = "Skipped due to high agreement in Round 1."
SKIPPED_LOW_SEVERITY = "Skipped due to low-severity critiques."

_JUROR_LETTER = re.compile(r"^([abc])$", re.IGNORECASE)
_JUROR_MENTION = re.compile(r"\bjuror[\s_-]*([abc])\b", re.IGNORECASE)


def normalize_juror_ref(target: str) -> Optional[JurorId]:
    """Resolve a free-form juror reference to an id.

    Accepts a bare letter, any "Juror X" mention ("juror_a",
    "Juror A (Cautious Analyst)") or a persona name. A reference that
    names more than one juror, or none, resolves to None.
    """
    text = target.strip()
    letter = _JUROR_LETTER.match(text)
    if letter:
        return letter.group(1).upper()  # type: ignore[return-value]

    found = {mention.upper() for mention in _JUROR_MENTION.findall(text)}
    lowered = text.lower().replace("\u2019", "'")
    found.update(juror for juror, persona in JUROR_PERSONAS.items() if persona.name.lower() in lowered)
    if len(found) != 1:
        return None
    return found.pop()  # type: ignore[return-value]


def received_critiques(
    critiques: Mapping[str, list[Critique]],
    juror: JurorId,
) -> list[Critique]:
    """All critiques, from any author, whose target is the given juror."""
    return [
        critique
        for author in critiques
        for critique in critiques[author]
        if normalize_juror_ref(critique.target_juror) == juror
    ]


def _dump(value) -> str:
    """Serialize models, or dicts/lists of models, to compact JSON."""
    if value is None:
        return "null"
    if hasattr(value, "model_dump"):
        return json.dumps(value.model_dump(mode="json"))
    if isinstance(value, Mapping):
        return json.dumps({k: json.loads(_dump(v)) for k, v in value.items()})
    if isinstance(value, list):
        return json.dumps([json.loads(_dump(v)) for v in value])
    return json.dumps(value)


def build_critique_prompt(
    query: str,
    positions: Mapping[str, Position],
    disagreement_focus: list[str],
    juror: JurorId,
) -> str:
    """Prompt for a juror critiquing all three round-one positions."""
    if disagreement_focus:
        focus_block = "Key disagreements to resolve:\n- " + "\n- ".join(disagreement_focus)
    else:
        focus_block = "No major disagreements detected."

    position_blocks = "".join(
        f"Juror {j} position: {positions[j].summary}\n{positions[j].reasoning}\n\n"
        for j in JUROR_IDS
    )
    return (
        f"Question: {query}\n\n"
        f"{position_blocks}"
        f"{focus_block}\n\n"
        f"Provide critiques from the perspective of Juror {juror}. "
        "Return an object with a 'critiques' array following the schema."
    )


def build_rebuttal_prompt(
    query: str,
    original: Position,
    critiques: list[Critique],
) -> str:
    """Prompt for a juror answering the critiques it received."""
    return (
        f"Question: {query}\n\n"
        f"Your original position ({original.stance.value}): {original.summary}\n"
        f"{original.reasoning}\n\n"
        f"Critiques you received: {_dump(critiques)}\n\n"
        "Respond to these critiques. Concede points that are correct, defend points "
        "that still hold, and state your refined stance and summary."
    )


def build_revision_prompt(
    query: str,
    original: Position,
    critiques: list[Critique],
    rebuttal: Optional[Rebuttal] = None,
) -> str:
    """Prompt for a juror revising its position after critique (and rebuttal)."""
    rebuttal_block = f"Your rebuttal: {_dump(rebuttal)}\n\n" if rebuttal is not None else ""
    return (
        f"Question: {query}\n\n"
        f"Your original position ({original.stance.value}): {original.summary}\n"
        f"{original.reasoning}\n\n"
        f"Critiques you received: {_dump(critiques)}\n\n"
        f"{rebuttal_block}"
        "Revise your position if needed. Provide updated summary, confidence, "
        "concessions, and rebuttals."
    )


def build_verdict_prompt(
    query: str,
    positions: Mapping[str, Position],
    critiques: Mapping[str, list[Critique]],
    rebuttals: Optional[Mapping[str, Rebuttal]],
    revisions: Optional[Mapping[str, RevisedPosition]],
    coordination: CoordinationDecision,
) -> str:
    """Prompt for the chief justice with the full debate transcript."""
    if coordination.skip_critique:
        critique_summary = SKIPPED_HIGH_AGREEMENT
    else:
        critique_summary = _dump(critiques)

    if coordination.skip_revision:
        revision_summary = (
            SKIPPED_HIGH_AGREEMENT if coordination.skip_critique else SKIPPED_LOW_SEVERITY
        )
    else:
        revision_summary = _dump(revisions)

    rebuttal_block = ""
    if coordination.deep_deliberation and rebuttals is not None:
        rebuttal_block = f"Rebuttals: {_dump(rebuttals)}\n\n"

    return (
        f"Question: {query}\n\n"
        f"Round 1 positions: {_dump(positions)}\n\n"
        f"Round 2 critiques: {critique_summary}\n\n"
        f"{rebuttal_block}"
        f"Round 3 revisions: {revision_summary}\n\n"
        "Synthesize a final consensus verdict with agreement/confidence scores "
        "and hallucination flags."
    )


def build_evaluation_prompt(query: str, baseline: BaselineOutput, verdict: Verdict) -> str:
    """Prompt for the evaluator comparing the baseline with the jury verdict."""
    return (
        f"Question: {query}\n\n"
        f"Baseline answer: {baseline.summary}\n"
        f"Baseline reasoning: {baseline.reasoning}\n"
        f"Baseline confidence: {baseline.confidence}\n\n"
        f"Jury verdict: {verdict.verdict}\n"
        f"Final reasoning: {verdict.final_reasoning}\n"
        f"Agreement score: {verdict.agreement_score}\n"
        f"Confidence score: {verdict.confidence_score}\n"
        f"Key agreements: {json.dumps(verdict.key_agreements)}\n"
        f"Key disagreements: {json.dumps(verdict.key_disagreements)}\n\n"
        "Score baseline vs jury for consistency, specificity, reasoning transparency, "
        "and coverage. Return strict JSON matching the schema."
    )
