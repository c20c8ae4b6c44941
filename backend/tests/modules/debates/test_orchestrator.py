"""Tests for the debate orchestrator and graph."""

import logging

import pytest

from core.coordination import RATIONALE_LOW_SEVERITY
from core.graph import build_graph, route_after_critique
from core.prompts import SKIPPED_HIGH_AGREEMENT
from core.schemas import Domain, Severity, Stance
from modules.debates.models import (
    CompleteEvent,
    DebatePhase,
    ErrorEvent,
    ModelOption,
)
from modules.debates.orchestrator import run_debate


async def collect(factory, settings, model=ModelOption.GPT_5_2, domain=Domain.FINANCE):
    return [
        event
        async for event in run_debate(
            "Should we expand into the EU market?",
            domain,
            model,
            worker_factory=factory,
            settings=settings,
        )
    ]


def milestones(events) -> list[str]:
    """Event types without usage and delta noise; phases as 'phase:<name>'."""
    out = []
    for event in events:
        if event.type in ("usage", "juror_delta"):
            continue
        out.append(f"phase:{event.phase.value}" if event.type == "phase" else event.type)
    return out


def of_type(events, event_type: str):
    return [event for event in events if event.type == event_type]


def _set_positions(factory, position_factory, stances, confidence=0.7):
    factory.positions = {
        juror: position_factory(stance, confidence, f"{juror} summary", f"{juror} reasoning")
        for juror, stance in zip("ABC", stances)
    }


class TestRouteAfterCritique:
    def test_routes(self):
        from core.coordination import coordination_from_scores

        assert route_after_critique({"coordination": coordination_from_scores(0.1, 0.5)}) == "rebuttal"
        assert route_after_critique({"coordination": coordination_from_scores(0.7, 0.5)}) == "revision"

    def test_graph_compiles(self):
        graph = build_graph()
        assert {"baseline", "positions", "critique", "rebuttal", "revision", "verdict", "evaluate"} <= set(
            graph.get_graph().nodes
        )


class TestStandardDebate:
    """Moderate agreement with major challenges: critique and revision both run."""

    @pytest.mark.asyncio
    async def test_event_order(self, fake_worker_factory, settings):
        events = await collect(fake_worker_factory, settings)
        order = milestones(events)

        # Baselines arrive in resolution order
        assert order[0] == "phase:baseline"
        assert set(order[1:3]) == {"baseline_fair", "baseline_mini"}
        assert order[3:] == [
            "phase:positions",
            "positions_complete",
            "coordination",
            "phase:critique",
            "critiques_complete",
            "phase:revision",
            "revisions_complete",
            "phase:verdict",
            "verdict",
            "evaluation",
            "complete",
        ]
        assert isinstance(events[-1], CompleteEvent)

    @pytest.mark.asyncio
    async def test_coordination_decision(self, fake_worker_factory, settings):
        events = await collect(fake_worker_factory, settings)

        [coordination] = of_type(events, "coordination")
        assert coordination.data.agreement_score == pytest.approx(2.2 / 3)
        assert coordination.data.average_confidence == pytest.approx(0.7)
        assert coordination.data.skip_critique is False
        assert coordination.data.skip_revision is False
        assert coordination.data.deep_deliberation is False

    @pytest.mark.asyncio
    async def test_no_rebuttal_round(self, fake_worker_factory, settings):
        events = await collect(fake_worker_factory, settings)

        assert "phase:rebuttal" not in milestones(events)
        assert not any(label.startswith("rebuttal_") for label in fake_worker_factory.labels())

    @pytest.mark.asyncio
    async def test_critiques_and_revisions_are_keyed_by_juror(self, fake_worker_factory, settings):
        events = await collect(fake_worker_factory, settings)

        [critiques] = of_type(events, "critiques_complete")
        [revisions] = of_type(events, "revisions_complete")
        assert set(critiques.critiques) == {"A", "B", "C"}
        assert [c.target_juror for c in critiques.critiques["A"]] == ["B", "C"]
        assert set(revisions.revisions) == {"A", "B", "C"}

    @pytest.mark.asyncio
    async def test_usage_event_per_worker_call(self, fake_worker_factory, settings):
        events = await collect(fake_worker_factory, settings)

        scopes = sorted(event.scope.value for event in of_type(events, "usage"))
        assert scopes == sorted(
            [
                "baseline_fair",
                "baseline_mini",
                "juror_a", "juror_b", "juror_c",
                "critique_a", "critique_b", "critique_c",
                "revision_a", "revision_b", "revision_c",
                "verdict",
                "evaluator",
            ]
        )
        assert all(event.data.worker_label == event.scope.value for event in of_type(events, "usage"))

    @pytest.mark.asyncio
    async def test_juror_deltas_follow_positions(self, fake_worker_factory, settings):
        events = await collect(fake_worker_factory, settings)
        types = [event.type for event in events]

        deltas = of_type(events, "juror_delta")
        first_delta = types.index("juror_delta")
        last_delta = len(types) - 1 - types[::-1].index("juror_delta")
        assert types.index("positions_complete") < first_delta
        assert last_delta < types.index("coordination")
        assert all(len(event.delta) <= settings.delta_chunk_size for event in deltas)

        for juror, position in fake_worker_factory.positions.items():
            text = "".join(event.delta for event in deltas if event.juror == juror)
            assert text == f"{position.summary}\n\n{position.reasoning}"

    @pytest.mark.asyncio
    async def test_baselines_use_selected_and_alternate_model(self, fake_worker_factory, settings):
        await collect(fake_worker_factory, settings, model=ModelOption.GPT_5_MINI)

        built = {label: model for _, model, label in fake_worker_factory.built}
        assert built["baseline_fair"] == "gpt-5-mini"
        assert built["baseline_mini"] == "gpt-5.2"
        assert built["juror_a"] == "gpt-5-mini"
        assert built["verdict"] == "gpt-5-mini"

    @pytest.mark.asyncio
    async def test_evaluator_compares_fair_baseline(self, fake_worker_factory, settings):
        await collect(fake_worker_factory, settings)

        [prompt] = [p for label, _, p in fake_worker_factory.calls if label == "evaluator"]
        assert "Baseline answer: baseline_fair summary" in prompt
        assert f"Jury verdict: {fake_worker_factory.verdict.verdict}" in prompt

    @pytest.mark.asyncio
    async def test_critique_prompt_carries_focus(self, fake_worker_factory, settings):
        await collect(fake_worker_factory, settings)

        [prompt] = [p for label, _, p in fake_worker_factory.calls if label == "critique_b"]
        assert "Key disagreements to resolve:" in prompt
        assert "perspective of Juror B" in prompt


class TestFastTrack:
    """High agreement and confidence skips critique and revision."""

    @pytest.mark.asyncio
    async def test_skips_optional_rounds(
        self, fake_worker_factory, settings, position_factory
    ):
        _set_positions(
            fake_worker_factory, position_factory,
            [Stance.SUPPORT, Stance.SUPPORT, Stance.SUPPORT], confidence=0.9,
        )

        events = await collect(fake_worker_factory, settings)

        [coordination] = of_type(events, "coordination")
        assert coordination.data.skip_critique is True
        assert coordination.data.skip_revision is True

        [critiques] = of_type(events, "critiques_complete")
        assert critiques.critiques == {"A": [], "B": [], "C": []}
        [revisions] = of_type(events, "revisions_complete")
        assert revisions.revisions is None

        labels = fake_worker_factory.labels()
        assert not any(label.startswith(("critique_", "revision_", "rebuttal_")) for label in labels)
        assert "phase:critique" in milestones(events)
        assert "phase:revision" in milestones(events)

    @pytest.mark.asyncio
    async def test_verdict_prompt_marks_skipped_rounds(
        self, fake_worker_factory, settings, position_factory
    ):
        _set_positions(
            fake_worker_factory, position_factory,
            [Stance.OPPOSE, Stance.OPPOSE, Stance.OPPOSE], confidence=0.8,
        )

        await collect(fake_worker_factory, settings)

        [prompt] = [p for label, _, p in fake_worker_factory.calls if label == "verdict"]
        assert f"Round 2 critiques: {SKIPPED_HIGH_AGREEMENT}" in prompt
        assert f"Round 3 revisions: {SKIPPED_HIGH_AGREEMENT}" in prompt


class TestLowSeveritySkip:
    @pytest.mark.asyncio
    async def test_revised_coordination_is_emitted(self, fake_worker_factory, settings):
        fake_worker_factory.critique_severity = Severity.MODERATE

        events = await collect(fake_worker_factory, settings)

        initial, revised = of_type(events, "coordination")
        assert initial.data.skip_revision is False
        assert revised.data.skip_revision is True
        assert revised.data.rationale == RATIONALE_LOW_SEVERITY

        types = [event.type for event in events]
        assert types.index("critiques_complete") < len(types) - 1 - types[::-1].index("coordination")

        [revisions] = of_type(events, "revisions_complete")
        assert revisions.revisions is None
        assert not any(label.startswith("revision_") for label in fake_worker_factory.labels())


class TestDeepDeliberation:
    """Very low agreement adds a rebuttal round before revision."""

    @pytest.fixture
    def split_factory(self, fake_worker_factory, position_factory):
        _set_positions(
            fake_worker_factory, position_factory,
            [Stance.SUPPORT, Stance.OPPOSE, Stance.OPPOSE],
        )
        return fake_worker_factory

    @pytest.mark.asyncio
    async def test_rebuttals_before_revisions(self, split_factory, settings):
        events = await collect(split_factory, settings)

        order = milestones(events)
        assert order.index("critiques_complete") < order.index("phase:rebuttal")
        assert order.index("phase:rebuttal") < order.index("rebuttals_complete")
        assert order.index("rebuttals_complete") < order.index("phase:revision")
        assert order.index("revisions_complete") < order.index("verdict")

        [coordination] = of_type(events, "coordination")
        assert coordination.data.deep_deliberation is True

        [rebuttals] = of_type(events, "rebuttals_complete")
        assert set(rebuttals.rebuttals) == {"A", "B", "C"}
        [revisions] = of_type(events, "revisions_complete")
        assert revisions.revisions is not None

    @pytest.mark.asyncio
    async def test_revision_prompt_includes_own_rebuttal(self, split_factory, settings):
        await collect(split_factory, settings)

        [prompt] = [p for label, _, p in split_factory.calls if label == "revision_c"]
        assert "Your rebuttal:" in prompt
        assert "C refined" in prompt

    @pytest.mark.asyncio
    async def test_rebuttal_prompt_has_received_critiques(self, split_factory, settings):
        await collect(split_factory, settings)

        [prompt] = [p for label, _, p in split_factory.calls if label == "rebuttal_a"]
        assert prompt.count('"target_juror": "A"') == 2

    @pytest.mark.asyncio
    async def test_descriptive_targets_are_routed(self, split_factory, settings):
        split_factory.target_format = "Juror {} (panel member)"

        await collect(split_factory, settings)

        [prompt] = [p for label, _, p in split_factory.calls if label == "rebuttal_a"]
        assert prompt.count('"target_juror": "Juror A (panel member)"') == 2

    @pytest.mark.asyncio
    async def test_unroutable_critiques_are_logged(self, split_factory, settings, caplog):
        split_factory.target_format = "the whole panel"

        with caplog.at_level(logging.WARNING, logger="core.nodes"):
            events = await collect(split_factory, settings)

        assert isinstance(events[-1], CompleteEvent)
        assert caplog.text.count("critique.unroutable") == 6


class TestFailures:
    @pytest.mark.asyncio
    async def test_worker_failure_ends_with_single_error(self, fake_worker_factory, settings):
        fake_worker_factory.failures = {"critique_b"}

        events = await collect(fake_worker_factory, settings)

        errors = of_type(events, "error")
        assert len(errors) == 1
        assert events[-1] is errors[0]
        assert "critique_b" in errors[0].message
        assert not of_type(events, "complete")
        assert not of_type(events, "verdict")
        assert not of_type(events, "critiques_complete")

    @pytest.mark.asyncio
    async def test_baseline_failure(self, fake_worker_factory, settings):
        fake_worker_factory.failures = {"baseline_mini"}

        events = await collect(fake_worker_factory, settings)

        assert isinstance(events[-1], ErrorEvent)
        assert "phase:positions" not in milestones(events)

    @pytest.mark.asyncio
    async def test_verdict_failure_is_fatal(self, fake_worker_factory, settings):
        fake_worker_factory.failures = {"verdict"}

        events = await collect(fake_worker_factory, settings)

        assert isinstance(events[-1], ErrorEvent)
        assert "evaluator" not in fake_worker_factory.labels()

    @pytest.mark.asyncio
    async def test_evaluation_failure_is_swallowed(self, fake_worker_factory, settings):
        fake_worker_factory.failures = {"evaluator"}

        events = await collect(fake_worker_factory, settings)

        assert not of_type(events, "evaluation")
        assert not of_type(events, "error")
        assert of_type(events, "verdict")
        assert isinstance(events[-1], CompleteEvent)
        assert "evaluator" not in [event.scope.value for event in of_type(events, "usage")]

    @pytest.mark.asyncio
    async def test_invalid_domain_is_error_event(self, fake_worker_factory, settings):
        events = await collect(fake_worker_factory, settings, domain="astrology")

        assert len(events) == 1
        assert isinstance(events[0], ErrorEvent)
        assert fake_worker_factory.calls == []


class TestPhaseMarkers:
    @pytest.mark.asyncio
    async def test_phases_in_order(self, fake_worker_factory, settings):
        events = await collect(fake_worker_factory, settings)

        phases = [event.phase for event in of_type(events, "phase")]
        assert phases == [
            DebatePhase.BASELINE,
            DebatePhase.POSITIONS,
            DebatePhase.CRITIQUE,
            DebatePhase.REVISION,
            DebatePhase.VERDICT,
        ]
