"""Tests for the single-question answer histogram."""

from __future__ import annotations

from surveylens.analysis.distribution import build_distribution


class TestBuildDistribution:
    def test_counts_per_scale_value(self, make_responses) -> None:
        responses = make_responses([{"q1": v} for v in [1, 1, 3, 5, 5, 5]])
        buckets = build_distribution(responses, "q1", 1, 5)
        assert [(b.value, b.count) for b in buckets] == [(1, 2), (2, 0), (3, 1), (4, 0), (5, 3)]

    def test_ignores_missing_fractional_and_out_of_range(self, make_responses) -> None:
        responses = make_responses([{"q1": 0}, {"q1": 6}, {"q1": 2.5}, {}, {"q1": 2}])
        buckets = build_distribution(responses, "q1", 1, 5)
        assert sum(b.count for b in buckets) == 1
        assert buckets[1].count == 1

    def test_one_bucket_per_integer(self, make_responses) -> None:
        buckets = build_distribution(make_responses([]), "q1", 0, 10)
        assert [b.value for b in buckets] == list(range(11))
        assert all(b.count == 0 for b in buckets)

    def test_other_questions_not_counted(self, make_responses) -> None:
        responses = make_responses([{"q1": 3, "q2": 4}])
        buckets = build_distribution(responses, "q2", 1, 5)
        assert [b.count for b in buckets] == [0, 0, 0, 1, 0]
