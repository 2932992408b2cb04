"""Comparison of two assets' feature sets."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from featurescope.comparison.contributors import Contributor, top_contributors
from featurescope.comparison.distance import DistanceResult, features_distance
from featurescope.core.exceptions import IncompatibleAssetsError
from featurescope.core.logging import get_logger
from featurescope.extraction.dispatcher import FeatureExtractor
from featurescope.extraction.models import (
    Asset,
    ExtractionOptions,
    ExtractionResult,
    FeatureSet,
)

logger = get_logger(__name__)

DistanceFn = Callable[[FeatureSet, FeatureSet], DistanceResult]


@dataclass
class ComparisonResult:
    """Outcome of comparing two assets.

    `comparison` is a single DistanceResult for column assets and a mapping of
    column name to DistanceResult for everything else.
    """

    constituents: tuple[ExtractionResult, ExtractionResult]
    comparison: DistanceResult | dict[str, DistanceResult]
    top_contributors: list[Contributor]
    sample: bool
    significant: bool


def compare_features(
    extractor: FeatureExtractor,
    opts: ExtractionOptions,
    a: Asset,
    b: Asset,
    *,
    distance: DistanceFn = features_distance,
) -> ComparisonResult:
    """Extract features of two assets and compare them.

    Args:
        extractor: Extractor used for both assets
        opts: Extraction options
        a: First asset
        b: Second asset
        distance: Distance function between two feature sets

    Returns:
        ComparisonResult

    Raises:
        IncompatibleAssetsError: If exactly one of the assets has per-column features
    """
    left = extractor.extract(opts, a)
    right = extractor.extract(opts, b)

    comparison: DistanceResult | dict[str, DistanceResult]
    if isinstance(left.constituents, Mapping) and isinstance(right.constituents, Mapping):
        comparison = {}
        for name, features in left.constituents.items():
            if name not in right.constituents:
                logger.debug("comparison_field_missing", field=name)
                continue
            comparison[name] = distance(features, right.constituents[name])
        significant = any(result.significant for result in comparison.values())
    elif left.constituents is None and right.constituents is None:
        comparison = distance(left.features, right.features)
        significant = comparison.significant
    else:
        raise IncompatibleAssetsError(a.kind.value, b.kind.value)

    result = ComparisonResult(
        constituents=(left, right),
        comparison=comparison,
        top_contributors=top_contributors(comparison),
        sample=left.sample or right.sample,
        significant=significant,
    )
    logger.info(
        "comparison_completed",
        left=a.kind.value,
        right=b.kind.value,
        significant=result.significant,
        contributors=len(result.top_contributors),
    )
    return result
