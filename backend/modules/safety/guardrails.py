"""
Safety guardrail pipeline.

Screens inbound questions before a debate starts, and every outbound
debate event before it reaches the client. Output screening fails
closed: if the moderation classifier is unavailable, the content is
redacted. Redaction keeps each event's shape so clients can render it.
"""

import asyncio
import logging
from typing import Optional

from core.schemas import (
    BaselineOutput,
    Critique,
    Evaluation,
    Position,
    Rebuttal,
    RevisedPosition,
    Verdict,
)
from modules.debates.models import (
    BaselineFairEvent,
    BaselineMiniEvent,
    CritiquesCompleteEvent,
    DebateEvent,
    EvaluationEvent,
    JurorDeltaEvent,
    PositionsCompleteEvent,
    RebuttalsCompleteEvent,
    RevisionsCompleteEvent,
    VerdictEvent,
)

from .interfaces import IModerationClient
from .jailbreak import detect_prompt_injection
from .models import SafetyDecision, SafetyReason

logger = logging.getLogger(__name__)

REDACTED_TEXT = "Content withheld due to safety policy."
REDACTED_DELTA = "[redacted for safety]"

INPUT_MESSAGES = {
    SafetyReason.PROMPT_INJECTION: (
        "Request looks like a prompt-injection attempt. "
        "Please rephrase the question without meta-instructions."
    ),
    SafetyReason.UNSAFE_CONTENT: "Request contains unsafe content and cannot be processed.",
    SafetyReason.MODERATION_UNAVAILABLE: (
        "Safety check is temporarily unavailable. Please try again shortly."
    ),
}


def _injection_blocked(text: str, label: str) -> bool:
    detection = detect_prompt_injection(text)
    if detection.flagged:
        logger.warning(
            f"safety.prompt_injection_detected label={label} matches={detection.matches}"
        )
    return detection.flagged


class SafetyGuardrails:
    """
    Input admission and output redaction for debates.

    Args:
        moderation: Moderation classifier (OpenAIModerationClient in production)
    """

    def __init__(self, moderation: IModerationClient):
        self.moderation = moderation

    async def check_input_safety(self, text: str) -> SafetyDecision:
        """
        Decide whether a question may start a debate.

        Injection rules run first; moderation is only consulted when they
        pass.

        Args:
            text: The user's question

        Returns:
            SafetyDecision; on rejection reason and message are set
        """
        reason = await self._screen(text, "input")
        if reason is None:
            return SafetyDecision(allowed=True)
        return SafetyDecision(allowed=False, reason=reason, message=INPUT_MESSAGES[reason])

    async def _screen(self, text: str, label: str) -> Optional[SafetyReason]:
        """Return the blocking reason for text, or None when it is safe."""
        if _injection_blocked(text, label):
            return SafetyReason.PROMPT_INJECTION

        verdict = await self.moderation.classify(text, label=label)
        if verdict.flagged:
            return SafetyReason.UNSAFE_CONTENT
        if verdict.unavailable:
            logger.warning(f"safety.moderation_unavailable label={label}")
            return SafetyReason.MODERATION_UNAVAILABLE
        return None

    async def _allowed(self, parts: list[str], label: str) -> bool:
        return await self._screen("\n".join(parts), label) is None

    # Per-item screening. Each returns the original object when it is safe.

    async def _sanitize_position(self, position: Position) -> Position:
        parts = [
            position.summary,
            position.reasoning,
            *(f"{item.claim} {item.basis}" for item in position.evidence),
            *position.risks,
        ]
        if await self._allowed(parts, "positions"):
            return position
        return position.model_copy(
            update={
                "summary": REDACTED_TEXT,
                "reasoning": REDACTED_TEXT,
                "evidence": [],
                "risks": [],
            }
        )

    async def _sanitize_critique(self, critique: Critique) -> Critique:
        parts = [
            critique.target_juror,
            *critique.agreements,
            *(f"{item.point} {item.counterargument}" for item in critique.challenges),
            *critique.missing_perspectives,
            critique.overall_assessment.value,
        ]
        if await self._allowed(parts, "critiques"):
            return critique
        return critique.model_copy(
            update={"agreements": [], "challenges": [], "missing_perspectives": []}
        )

    async def _sanitize_rebuttal(self, rebuttal: Rebuttal) -> Rebuttal:
        parts = [*rebuttal.concessions, *rebuttal.defenses, rebuttal.refined_summary]
        if await self._allowed(parts, "rebuttals"):
            return rebuttal
        return rebuttal.model_copy(
            update={"concessions": [], "defenses": [], "refined_summary": REDACTED_TEXT}
        )

    async def _sanitize_revision(self, revision: RevisedPosition) -> RevisedPosition:
        parts = [
            revision.summary,
            revision.reasoning,
            *revision.concessions,
            *revision.rebuttals,
        ]
        if await self._allowed(parts, "revisions"):
            return revision
        return revision.model_copy(
            update={
                "summary": REDACTED_TEXT,
                "reasoning": REDACTED_TEXT,
                "concessions": [],
                "rebuttals": [],
            }
        )

    async def _sanitize_baseline(self, data: BaselineOutput, label: str) -> BaselineOutput:
        if await self._allowed([data.summary, data.reasoning], label):
            return data
        return data.model_copy(update={"summary": REDACTED_TEXT, "reasoning": REDACTED_TEXT})

    async def _sanitize_verdict(self, data: Verdict) -> Verdict:
        parts = [
            data.verdict,
            data.final_reasoning,
            *data.key_agreements,
            *data.key_disagreements,
            *data.key_evidence,
            *data.next_actions,
            *(f"{flag.juror} {flag.claim} {flag.reason}" for flag in data.hallucination_flags),
        ]
        if await self._allowed(parts, "verdict"):
            return data
        return data.model_copy(
            update={
                "verdict": REDACTED_TEXT,
                "final_reasoning": REDACTED_TEXT,
                "key_agreements": [],
                "key_disagreements": [],
                "key_evidence": [],
                "next_actions": [],
                "hallucination_flags": [],
            }
        )

    async def _sanitize_evaluation(self, data: Evaluation) -> Evaluation:
        parts = [data.baseline.notes, data.jury.notes, data.rationale]
        if await self._allowed(parts, "evaluation"):
            return data
        return data.model_copy(
            update={
                "baseline": data.baseline.model_copy(update={"notes": REDACTED_TEXT}),
                "jury": data.jury.model_copy(update={"notes": REDACTED_TEXT}),
                "rationale": REDACTED_TEXT,
            }
        )

    async def _sanitize_mapping(self, items: dict, sanitize) -> dict:
        keys = list(items)
        results = await asyncio.gather(*(sanitize(items[key]) for key in keys))
        return dict(zip(keys, results))

    async def sanitize_debate_event(self, event: DebateEvent) -> DebateEvent:
        """
        Screen an outbound event and redact unsafe content.

        Structured outputs are screened per item (per juror, per critique),
        so one unsafe item does not redact its siblings. Events without
        free text pass through unchanged.

        Args:
            event: Event produced by the debate

        Returns:
            The same object when nothing was redacted, otherwise a copy
            of the same type with the unsafe items redacted
        """
        if isinstance(event, (BaselineFairEvent, BaselineMiniEvent)):
            data = await self._sanitize_baseline(event.data, event.type)
            return event if data is event.data else event.model_copy(update={"data": data})

        if isinstance(event, JurorDeltaEvent):
            if not _injection_blocked(event.delta, "juror_delta"):
                return event
            return event.model_copy(update={"delta": REDACTED_DELTA})

        if isinstance(event, PositionsCompleteEvent):
            positions = await self._sanitize_mapping(event.positions, self._sanitize_position)
            if all(positions[k] is event.positions[k] for k in positions):
                return event
            return event.model_copy(update={"positions": positions})

        if isinstance(event, CritiquesCompleteEvent):
            critiques = await self._sanitize_mapping(
                event.critiques,
                lambda items: asyncio.gather(*(self._sanitize_critique(c) for c in items)),
            )
            unchanged = all(
                a is b
                for key in critiques
                for a, b in zip(critiques[key], event.critiques[key])
            )
            if unchanged:
                return event
            return event.model_copy(
                update={"critiques": {key: list(items) for key, items in critiques.items()}}
            )

        if isinstance(event, RebuttalsCompleteEvent):
            if event.rebuttals is None:
                return event
            rebuttals = await self._sanitize_mapping(event.rebuttals, self._sanitize_rebuttal)
            if all(rebuttals[k] is event.rebuttals[k] for k in rebuttals):
                return event
            return event.model_copy(update={"rebuttals": rebuttals})

        if isinstance(event, RevisionsCompleteEvent):
            if event.revisions is None:
                return event
            revisions = await self._sanitize_mapping(event.revisions, self._sanitize_revision)
            if all(revisions[k] is event.revisions[k] for k in revisions):
                return event
            return event.model_copy(update={"revisions": revisions})

        if isinstance(event, VerdictEvent):
            data = await self._sanitize_verdict(event.data)
            return event if data is event.data else event.model_copy(update={"data": data})

        if isinstance(event, EvaluationEvent):
            data = await self._sanitize_evaluation(event.data)
            return event if data is event.data else event.model_copy(update={"data": data})

        return event


# Module-level instance getter
_guardrails: Optional[SafetyGuardrails] = None


def get_safety_guardrails() -> SafetyGuardrails:
    """Get the guardrails singleton backed by OpenAI moderation."""
    global _guardrails
    if _guardrails is None:
        from .moderation import OpenAIModerationClient

        _guardrails = SafetyGuardrails(OpenAIModerationClient())
    return _guardrails


def reset_safety_guardrails() -> None:
    """Reset the guardrails singleton (for testing)."""
    global _guardrails
    _guardrails = None
