"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
singleton resets, a scripted moderation client, and a worker factory that
returns canned role outputs instead of calling a model.
"""

import pytest

from api.dependencies import reset_container
from core.schemas import (
    Assessment,
    BaselineOutput,
    Challenge,
    Critique,
    CritiquesOutput,
    Evaluation,
    EvidenceItem,
    Position,
    PositionBreakdown,
    ReasoningQuality,
    Rebuttal,
    RevisedPosition,
    Scorecard,
    Severity,
    Stance,
    Verdict,
)
from core.workers import WorkerResult
from modules.debates.exceptions import WorkerFailureError
from modules.safety.guardrails import reset_safety_guardrails
from modules.safety.models import ModerationStatus, ModerationVerdict
from modules.usage.models import UsageSnapshot
from modules.usage.pricing import reset_pricing_table
from shared.config import Settings, get_settings


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and module singletons before and after each test."""
    get_settings.cache_clear()
    reset_pricing_table()
    reset_safety_guardrails()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_pricing_table()
    reset_safety_guardrails()
    reset_container()


@pytest.fixture
def settings() -> Settings:
    """Settings with a test key, ignoring any local .env file."""
    return Settings(_env_file=None, openai_api_key="sk-test", delta_chunk_size=20)


# Moderation


class FakeModerationClient:
    """
    Moderation client scripted by substring.

    Text containing any of flag_terms is FLAGGED; when unavailable is set
    every call returns UNAVAILABLE. Every classified text is recorded.
    """

    def __init__(self):
        self.flag_terms: list[str] = []
        self.unavailable = False
        self.calls: list[tuple[str, str]] = []

    async def classify(self, text: str, label: str = "input") -> ModerationVerdict:
        self.calls.append((label, text))
        if self.unavailable:
            return ModerationVerdict(status=ModerationStatus.UNAVAILABLE)
        if any(term in text for term in self.flag_terms):
            return ModerationVerdict(
                status=ModerationStatus.FLAGGED,
                categories={"violence": True},
            )
        return ModerationVerdict(status=ModerationStatus.CLEAR)


@pytest.fixture
def fake_moderation() -> FakeModerationClient:
    return FakeModerationClient()


# Canned role outputs


def make_position(
    stance: Stance = Stance.SUPPORT,
    confidence: float = 0.7,
    summary: str = "Position summary",
    reasoning: str = "Position reasoning",
) -> Position:
    return Position(
        stance=stance,
        summary=summary,
        confidence=confidence,
        reasoning=reasoning,
        evidence=[EvidenceItem(claim="Claim", basis="Study")],
        risks=["Risk"],
    )


def make_critique(target: str, severity: Severity = Severity.MAJOR) -> Critique:
    return Critique(
        target_juror=target,
        agreements=["Agreed point"],
        challenges=[
            Challenge(point="Point", counterargument="Counterargument", severity=severity)
        ],
        missing_perspectives=["Missing angle"],
        overall_assessment=Assessment.MODERATE,
    )


def make_verdict(text: str = "The jury leans toward support.") -> Verdict:
    return Verdict(
        verdict=text,
        agreement_score=0.7,
        confidence_score=0.75,
        position_breakdown=PositionBreakdown(support=2, nuanced=1),
        key_agreements=["Shared view"],
        key_disagreements=["Open issue"],
        key_evidence=["Evidence"],
        next_actions=["Next step"],
        reasoning_quality=ReasoningQuality(juror_a=8, juror_b=7, juror_c=7.5),
        hallucination_flags=[],
        final_reasoning="Final reasoning",
    )


def make_evaluation() -> Evaluation:
    card = Scorecard(
        overall=7,
        consistency=7,
        specificity=6,
        reasoning=7,
        coverage=6,
        notes="Solid",
    )
    return Evaluation(
        baseline=card,
        jury=card.model_copy(update={"overall": 8.5}),
        winner="jury",
        rationale="The jury covered more ground.",
    )


@pytest.fixture
def position_factory():
    return make_position


@pytest.fixture
def critique_factory():
    return make_critique


@pytest.fixture
def verdict_factory():
    return make_verdict


@pytest.fixture
def evaluation_factory():
    return make_evaluation


# Worker factory


class FakeWorker:
    def __init__(self, factory: "FakeWorkerFactory", role, model: str, label: str):
        self.factory = factory
        self.role = role
        self.model = model
        self.label = label

    async def invoke(self, context, prompt: str) -> WorkerResult:
        self.factory.calls.append((self.label, self.model, prompt))
        if self.label in self.factory.failures:
            raise WorkerFailureError(self.label, "provider error: boom")
        output = self.factory.output_for(self.role.key, self.label)
        usage = UsageSnapshot(
            worker_label=self.label,
            model=self.model,
            input_tokens=100,
            output_tokens=50,
            total_tokens=150,
            cost_usd=0.001,
        )
        return WorkerResult(output=output, usage=usage)


class FakeWorkerFactory:
    """
    Worker factory returning canned outputs keyed by role key.

    Defaults describe a moderate-agreement debate (A and B support, C
    nuanced) in which every critique raises one major challenge, so the
    critique and revision rounds both run.
    """

    def __init__(self):
        self.positions: dict[str, Position] = {
            "A": make_position(Stance.SUPPORT, 0.8, "A supports", "A reasoning text"),
            "B": make_position(Stance.SUPPORT, 0.7, "B supports", "B reasoning text"),
            "C": make_position(Stance.NUANCED, 0.6, "C is nuanced", "C reasoning text"),
        }
        self.critique_severity = Severity.MAJOR
        self.target_format = "{}"
        self.verdict = make_verdict()
        self.failures: set[str] = set()
        self.calls: list[tuple[str, str, str]] = []
        self.built: list[tuple[str, str, str]] = []

    def __call__(self, role, model: str, label: str) -> FakeWorker:
        self.built.append((role.key, model, label))
        return FakeWorker(self, role, model, label)

    def labels(self) -> list[str]:
        return [label for label, _, _ in self.calls]

    def output_for(self, role_key: str, label: str):
        if role_key == "baseline":
            return BaselineOutput(
                stance=Stance.SUPPORT,
                summary=f"{label} summary",
                confidence=0.7,
                reasoning=f"{label} reasoning",
            )

        phase, _, suffix = role_key.partition("_")
        juror = suffix.upper()
        if phase == "juror":
            return self.positions[juror]
        if phase == "critique":
            targets = [j for j in ("A", "B", "C") if j != juror]
            return CritiquesOutput(
                critiques=[make_critique(self.target_format.format(t), self.critique_severity) for t in targets]
            )
        if phase == "rebuttal":
            return Rebuttal(
                concessions=["Conceded"],
                defenses=["Defended"],
                refined_stance=self.positions[juror].stance,
                refined_summary=f"{juror} refined",
            )
        if phase == "revision":
            stance = self.positions[juror].stance
            return RevisedPosition(
                original_stance=stance,
                revised_stance=stance,
                position_changed=False,
                confidence=0.75,
                summary=f"{juror} revised",
                reasoning="Revised reasoning",
            )
        if role_key == "verdict":
            return self.verdict
        if role_key == "evaluator":
            return make_evaluation()
        raise AssertionError(f"Unexpected role {role_key}")


@pytest.fixture
def fake_worker_factory() -> FakeWorkerFactory:
    return FakeWorkerFactory()
