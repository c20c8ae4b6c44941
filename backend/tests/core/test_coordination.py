"""Tests for coordination scoring."""

import pytest

from core.coordination import (
    RATIONALE_DEBATE,
    RATIONALE_DEEP,
    RATIONALE_FAST_TRACK,
    RATIONALE_LOW_SEVERITY,
    build_disagreement_focus,
    compute_agreement_score,
    compute_average_confidence,
    coordination_from_scores,
    count_major_challenges,
    decide_coordination,
    revise_after_critique,
    stance_agreement,
)
from core.schemas import Severity, Stance


def _positions(position_factory, a, b, c, confidence=0.7):
    return {
        "A": position_factory(a, confidence, "A summary"),
        "B": position_factory(b, confidence, "B summary"),
        "C": position_factory(c, confidence, "C summary"),
    }


class TestStanceAgreement:
    @pytest.mark.parametrize(
        "a,b,expected",
        [
            (Stance.SUPPORT, Stance.SUPPORT, 1.0),
            (Stance.NUANCED, Stance.NUANCED, 1.0),
            (Stance.SUPPORT, Stance.NUANCED, 0.6),
            (Stance.NUANCED, Stance.OPPOSE, 0.6),
            (Stance.SUPPORT, Stance.OPPOSE, 0.0),
        ],
    )
    def test_pairwise_values(self, a, b, expected):
        assert stance_agreement(a, b) == expected
        assert stance_agreement(b, a) == expected


class TestScores:
    def test_unanimous_agreement(self, position_factory):
        positions = _positions(position_factory, Stance.SUPPORT, Stance.SUPPORT, Stance.SUPPORT)
        assert compute_agreement_score(positions) == 1.0

    def test_one_nuanced_juror(self, position_factory):
        positions = _positions(position_factory, Stance.SUPPORT, Stance.SUPPORT, Stance.NUANCED)
        assert compute_agreement_score(positions) == pytest.approx(2.2 / 3)

    def test_split_jury(self, position_factory):
        positions = _positions(position_factory, Stance.SUPPORT, Stance.OPPOSE, Stance.OPPOSE)
        assert compute_agreement_score(positions) == pytest.approx(1 / 3)

    def test_average_confidence(self, position_factory):
        positions = {
            "A": position_factory(confidence=0.9),
            "B": position_factory(confidence=0.6),
            "C": position_factory(confidence=0.3),
        }
        assert compute_average_confidence(positions) == pytest.approx(0.6)


class TestDisagreementFocus:
    def test_one_line_per_differing_pair(self, position_factory):
        positions = _positions(position_factory, Stance.SUPPORT, Stance.SUPPORT, Stance.OPPOSE)

        focus = build_disagreement_focus(positions)

        assert focus == [
            "Juror A (support): A summary | Juror C (oppose): C summary",
            "Juror B (support): B summary | Juror C (oppose): C summary",
        ]

    def test_empty_when_unanimous(self, position_factory):
        positions = _positions(position_factory, Stance.NUANCED, Stance.NUANCED, Stance.NUANCED)
        assert build_disagreement_focus(positions) == []


class TestDecideCoordination:
    def test_fast_track_on_high_agreement_and_confidence(self, position_factory):
        positions = _positions(
            position_factory, Stance.SUPPORT, Stance.SUPPORT, Stance.SUPPORT, confidence=0.9
        )

        decision = decide_coordination(positions)

        assert decision.skip_critique is True
        assert decision.skip_revision is True
        assert decision.deep_deliberation is False
        assert decision.rationale == RATIONALE_FAST_TRACK
        assert decision.disagreement_focus == []

    def test_high_agreement_low_confidence_still_debates(self, position_factory):
        positions = _positions(
            position_factory, Stance.SUPPORT, Stance.SUPPORT, Stance.SUPPORT, confidence=0.5
        )

        decision = decide_coordination(positions)

        assert decision.skip_critique is False
        assert decision.skip_revision is False
        assert decision.deep_deliberation is False
        assert decision.rationale == RATIONALE_DEBATE

    def test_deep_deliberation_on_split_jury(self, position_factory):
        positions = _positions(position_factory, Stance.SUPPORT, Stance.OPPOSE, Stance.OPPOSE)

        decision = decide_coordination(positions)

        assert decision.skip_critique is False
        assert decision.deep_deliberation is True
        assert decision.rationale == RATIONALE_DEEP
        assert len(decision.disagreement_focus) == 2

    def test_zero_agreement_is_deep(self):
        decision = coordination_from_scores(0.0, 0.9)

        assert decision.deep_deliberation is True
        assert decision.skip_critique is False
        assert decision.skip_revision is False

    @pytest.mark.parametrize(
        "agreement,confidence,skip,deep",
        [
            (0.8, 0.6, True, False),
            (0.79, 0.9, False, False),
            (0.8, 0.59, False, False),
            (0.4, 0.9, False, False),
            (0.39, 0.9, False, True),
        ],
    )
    def test_threshold_boundaries(self, agreement, confidence, skip, deep):
        decision = coordination_from_scores(agreement, confidence)
        assert decision.skip_critique is skip
        assert decision.deep_deliberation is deep

    def test_decision_is_frozen(self):
        decision = coordination_from_scores(0.5, 0.5)
        with pytest.raises(Exception):
            decision.skip_revision = True


class TestReviseAfterCritique:
    def _critiques(self, critique_factory, severity):
        return {
            "A": [critique_factory("B", severity)],
            "B": [critique_factory("C", Severity.MINOR)],
            "C": [],
        }

    def test_count_major_challenges(self, critique_factory):
        critiques = {
            "A": [critique_factory("B", Severity.MAJOR), critique_factory("C", Severity.MAJOR)],
            "B": [critique_factory("A", Severity.MODERATE)],
            "C": [],
        }
        assert count_major_challenges(critiques) == 2

    def test_low_severity_skips_revision(self, critique_factory):
        decision = coordination_from_scores(0.73, 0.7)

        revised = revise_after_critique(
            decision, self._critiques(critique_factory, Severity.MODERATE)
        )

        assert revised is not decision
        assert revised.skip_revision is True
        assert revised.rationale == RATIONALE_LOW_SEVERITY
        assert revised.agreement_score == decision.agreement_score
        assert decision.skip_revision is False

    def test_major_challenge_keeps_revision(self, critique_factory):
        decision = coordination_from_scores(0.73, 0.7)

        revised = revise_after_critique(decision, self._critiques(critique_factory, Severity.MAJOR))

        assert revised is decision

    def test_low_agreement_keeps_revision(self, critique_factory):
        decision = coordination_from_scores(0.5, 0.7)

        revised = revise_after_critique(
            decision, self._critiques(critique_factory, Severity.MINOR)
        )

        assert revised is decision
        assert revised.skip_revision is False

    def test_deep_deliberation_never_skips_revision(self, critique_factory):
        decision = coordination_from_scores(0.2, 0.7)

        revised = revise_after_critique(decision, {"A": [], "B": [], "C": []})

        assert revised is decision
        assert revised.skip_revision is False

    def test_fast_track_decision_unchanged(self):
        """Skipped critique yields empty lists; the decision stays as it was."""
        decision = coordination_from_scores(1.0, 0.9)

        assert revise_after_critique(decision, {"A": [], "B": [], "C": []}) is decision
