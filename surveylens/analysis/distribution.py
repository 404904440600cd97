"""Answer histogram for a single question."""

from __future__ import annotations

from collections.abc import Sequence

from surveylens.analysis.engine import answer_value
from surveylens.analysis.models import DistributionBucket
from surveylens.models import SurveyResponse


def build_distribution(
    responses: Sequence[SurveyResponse],
    question_key: str,
    scale_min: int,
    scale_max: int,
) -> list[DistributionBucket]:
    """One bucket per integer in ``[scale_min, scale_max]``.

    Missing, fractional and out-of-range answers are not counted anywhere.
    """
    buckets = {v: DistributionBucket(value=v) for v in range(scale_min, scale_max + 1)}
    for r in responses:
        v = answer_value(r, question_key)
        if v is None or v != int(v):
            continue
        bucket = buckets.get(int(v))
        if bucket is not None:
            bucket.count += 1
    return list(buckets.values())
