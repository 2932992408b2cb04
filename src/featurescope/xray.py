"""X-ray: display post-processing of extraction and comparison results.

Floats are trimmed to a few significant decimals and an optional hook can
attach human readable descriptions to each feature set. Results are never
modified in place.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from typing import Any

from featurescope.comparison.engine import ComparisonResult
from featurescope.core.config import get_settings
from featurescope.extraction.models import ExtractionResult, FeatureSet

Describe = Callable[[FeatureSet], FeatureSet]


def order_of_magnitude(x: float) -> int:
    if x == 0 or not math.isfinite(x):
        return 0
    return math.floor(math.log10(abs(x)))


def trim_decimals(decimal_places: int, value: Any) -> Any:
    """Round every float in `value` (recursively) to `decimal_places` significant decimals.

    Numbers below 1 keep `decimal_places` digits after their first significant one,
    so 0.000123456 becomes 0.000123 rather than 0.0.
    """
    if isinstance(value, float):
        if not math.isfinite(value):
            return value
        return round(value, decimal_places - min(order_of_magnitude(value), 0))
    if isinstance(value, Mapping):
        return {key: trim_decimals(decimal_places, v) for key, v in value.items()}
    if isinstance(value, list | tuple):
        return type(value)(trim_decimals(decimal_places, v) for v in value)
    return value


def x_ray[R: (ExtractionResult, ComparisonResult)](
    result: R,
    *,
    describe: Describe | None = None,
    decimal_places: int | None = None,
) -> R:
    """Turn a feature vector into an x-ray.

    Args:
        result: Extraction result, or a comparison whose two constituents get x-rayed
        describe: Optional hook adding descriptions to a feature set
        decimal_places: Significant decimals kept; defaults to settings

    Returns:
        A new result of the same type
    """
    places = decimal_places if decimal_places is not None else get_settings().decimal_places

    def prettify(features: FeatureSet) -> FeatureSet:
        trimmed = trim_decimals(places, features)
        return describe(trimmed) if describe is not None else trimmed

    if isinstance(result, ComparisonResult):
        left, right = result.constituents
        return replace(
            result,
            constituents=(
                x_ray(left, describe=describe, decimal_places=places),
                x_ray(right, describe=describe, decimal_places=places),
            ),
        )

    constituents = result.constituents
    if isinstance(constituents, Mapping):
        constituents = {name: prettify(features) for name, features in constituents.items()}
    elif isinstance(constituents, Sequence):
        constituents = [
            x_ray(constituent, describe=describe, decimal_places=places)
            for constituent in constituents
        ]

    return replace(result, features=prettify(result.features), constituents=constituents)
