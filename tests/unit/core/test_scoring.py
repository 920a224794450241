"""
Tests for the interview scoring engine.

Tests:
- Per-skill means, nulls for unevaluated skills
- Skipped and unscored questions are ignored
- Multi-skill questions count fully toward each skill
- Double rounding and recommendation thresholds
- Preview path (unrounded, zero-filled, non-zero overall)
"""

from decimal import Decimal

import pytest

from core.scoring import (
    ScoredItem,
    preview,
    recommendation_for,
    round_half_up,
    summarize,
)
from database.models.interviews import Recommendation


def technical(score, skipped=False):
    return ScoredItem(score=score, skipped=skipped, evaluates_technical=True)


def problem_solving(score, skipped=False):
    return ScoredItem(score=score, skipped=skipped, evaluates_problem_solving=True)


def communication(score, skipped=False):
    return ScoredItem(score=score, skipped=skipped, evaluates_communication=True)


class TestRoundHalfUp:
    """Rounding used by the persisted summary."""

    @pytest.mark.parametrize("value, expected", [
        (2.5, 3),
        (3.5, 4),
        (0.5, 1),
        (4.49, 4),
        (Decimal("1.5"), 2),
        (4, 4),
    ])
    def test_half_goes_up(self, value, expected):
        assert round_half_up(value) == expected


class TestSummarize:
    """Authoritative aggregate."""

    def test_technical_mean_and_null_skill(self):
        summary = summarize([technical(3), technical(4), technical(5)])

        assert summary.technical_score == 4
        assert summary.problem_solving_score is None
        assert summary.communication_score is None
        assert summary.overall_score == 4
        assert summary.recommendation == Recommendation.HIRE

    def test_zero_is_a_real_score(self):
        summary = summarize([problem_solving(0)])

        assert summary.problem_solving_score == 0
        assert summary.overall_score == 0
        assert summary.recommendation == Recommendation.PASS

    def test_skipped_question_is_invisible(self):
        base = [technical(2), communication(3)]
        with_skipped = base + [ScoredItem(
            score=5,
            skipped=True,
            evaluates_technical=True,
            evaluates_problem_solving=True,
            evaluates_communication=True,
        )]

        assert summarize(with_skipped) == summarize(base)

    def test_unscored_question_is_ignored(self):
        assert summarize([technical(None), technical(2)]).technical_score == 2

    def test_multi_flag_question_counts_fully_in_each_skill(self):
        both = ScoredItem(score=5, evaluates_technical=True, evaluates_communication=True)
        summary = summarize([both, technical(1)])

        assert summary.technical_score == 3
        assert summary.communication_score == 5
        assert summary.overall_score == 4

    def test_question_without_flags_feeds_no_skill(self):
        summary = summarize([ScoredItem(score=4)])

        assert summary is not None
        assert summary.technical_score is None
        assert summary.overall_score is None
        assert summary.recommendation is None

    def test_rounding_happens_twice(self):
        # skill means 1.5, 1.5, 4 round to 2, 2, 4 -> overall 3;
        # rounding the raw means once would give round(2.33) = 2
        items = [
            technical(1), technical(2),
            problem_solving(1), problem_solving(2),
            communication(4),
        ]
        summary = summarize(items)

        assert (summary.technical_score, summary.problem_solving_score, summary.communication_score) == (2, 2, 4)
        assert summary.overall_score == 3

    def test_nothing_scored_returns_none(self):
        assert summarize([]) is None
        assert summarize([technical(None), technical(5, skipped=True)]) is None

    def test_pure_function(self):
        items = [technical(3), problem_solving(4), communication(5)]
        assert summarize(items) == summarize(items)


class TestRecommendation:

    @pytest.mark.parametrize("overall, expected", [
        (5, Recommendation.STRONG_HIRE),
        (4, Recommendation.HIRE),
        (3, Recommendation.CONSIDER),
        (2, Recommendation.PASS),
        (1, Recommendation.PASS),
        (0, Recommendation.PASS),
        (None, None),
    ])
    def test_thresholds(self, overall, expected):
        assert recommendation_for(overall) == expected


class TestPreview:
    """Live estimate shown while scoring."""

    def test_skill_means_are_not_rounded(self):
        result = preview([technical(3), technical(4)])

        assert result.technical_score == 3.5
        assert result.problem_solving_score == 0
        assert result.communication_score == 0
        assert result.overall_score == 3.5

    def test_overall_is_one_decimal_mean_of_non_zero_skills(self):
        result = preview([technical(4), problem_solving(3), problem_solving(4), communication(5)])

        # (4 + 3.5 + 5) / 3 = 4.1666...
        assert result.overall_score == 4.2

    def test_zero_score_drops_out_of_preview_but_not_summary(self):
        items = [technical(0), communication(4)]

        assert preview(items).overall_score == 4
        assert summarize(items).overall_score == 2

    def test_counts(self):
        result = preview([technical(2), technical(5, skipped=True), technical(None)])

        assert result.scored_count == 1
        assert result.skipped_count == 1

    def test_empty(self):
        result = preview([])

        assert result.overall_score == 0
        assert result.scored_count == 0
