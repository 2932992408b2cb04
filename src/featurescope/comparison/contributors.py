"""Ranking of the features contributing most to a comparison."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass

from featurescope.comparison.classify import head_tails_breaks
from featurescope.comparison.distance import DistanceResult


@dataclass
class Contributor:
    """A feature that differs between the compared assets.

    `field` and `contribution` are only set for per-field comparisons,
    `difference` only for single feature set comparisons.
    """

    feature: str
    field: str | None = None
    contribution: float | None = None
    difference: float | None = None


def top_contributors(
    comparison: DistanceResult | Mapping[str, DistanceResult],
) -> list[Contributor]:
    """Pick the features that explain a comparison.

    Per-field comparisons keep the head/tails head of the fields by distance,
    weight each of their contributing features by sqrt(distance) and keep the
    head/tails head of those. A single comparison reports its own
    contributors as they are.
    """
    if isinstance(comparison, DistanceResult):
        return [
            Contributor(feature=feature, difference=difference)
            for feature, difference in comparison.top_contributors.items()
        ]

    fields = head_tails_breaks(lambda item: item[1].distance, comparison.items())
    candidates = [
        Contributor(
            feature=feature,
            field=name,
            contribution=math.sqrt(result.distance) * difference,
        )
        for name, result in fields
        for feature, difference in result.top_contributors.items()
    ]
    return head_tails_breaks(lambda contributor: contributor.contribution or 0.0, candidates)
