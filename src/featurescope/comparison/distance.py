"""Distance between two feature sets.

Each feature present on both sides is turned into a difference in [0, 1]:
- booleans: 0 when equal, 1 otherwise
- numbers: relative difference |a - b| / max(|a|, |b|)
- distributions (value -> share mappings): Jensen-Shannon distance, base 2

Anything else (references, strings, histograms of differing bins) is not
comparable and ignored. The overall distance is the root mean square of the
differences.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from scipy.spatial.distance import jensenshannon

from featurescope.core.config import get_settings
from featurescope.extraction.models import FeatureSet


@dataclass
class DistanceResult:
    """Distance between two feature sets.

    `top_contributors` maps feature name to its difference, largest first.
    """

    distance: float
    significant: bool = False
    top_contributors: dict[str, float] = field(default_factory=dict)


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool) and math.isfinite(value)


def _is_distribution(value: Any) -> bool:
    return (
        isinstance(value, Mapping)
        and bool(value)
        and all(_is_number(share) for share in value.values())
    )


def _relative_difference(a: float, b: float) -> float:
    scale = max(abs(a), abs(b))
    if scale == 0:
        return 0.0
    return abs(a - b) / scale


def _distribution_difference(a: Mapping[Any, float], b: Mapping[Any, float]) -> float:
    keys = list(dict.fromkeys([*a, *b]))
    p = np.asarray([a.get(key, 0.0) for key in keys], dtype=float)
    q = np.asarray([b.get(key, 0.0) for key in keys], dtype=float)
    if p.sum() <= 0 or q.sum() <= 0:
        return 0.0 if p.sum() == q.sum() else 1.0
    d = float(jensenshannon(p, q, base=2))
    # Rounding can leave identical distributions a hair above zero or produce nan
    return 0.0 if math.isnan(d) or d < 1e-12 else min(d, 1.0)


def feature_difference(a: Any, b: Any) -> float | None:
    """Difference between two values of the same feature, None if not comparable."""
    if isinstance(a, bool) and isinstance(b, bool):
        return 0.0 if a == b else 1.0
    if _is_number(a) and _is_number(b):
        return _relative_difference(float(a), float(b))
    if _is_distribution(a) and _is_distribution(b):
        return _distribution_difference(a, b)
    return None


def features_distance(a: FeatureSet, b: FeatureSet) -> DistanceResult:
    """Compare two feature sets.

    Args:
        a: Feature set of the first asset
        b: Feature set of the second asset

    Returns:
        DistanceResult with the overall distance, its significance and the
        features contributing most to it
    """
    settings = get_settings()

    differences: dict[str, float] = {}
    for name, value in a.items():
        if name not in b:
            continue
        difference = feature_difference(value, b[name])
        if difference is not None:
            differences[name] = difference

    if not differences:
        return DistanceResult(distance=0.0)

    distance = math.sqrt(sum(d * d for d in differences.values()) / len(differences))
    ranked = sorted(
        ((name, d) for name, d in differences.items() if d > 0),
        key=lambda item: item[1],
        reverse=True,
    )
    return DistanceResult(
        distance=distance,
        significant=distance > settings.significance_threshold,
        top_contributors=dict(ranked[: settings.top_contributors_limit]),
    )
