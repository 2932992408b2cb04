"""Comparison of feature sets.

Compares the feature sets of two assets and ranks the features that explain
the differences:
- features_distance: default distance between two feature sets
- compare_features: extract and compare two assets
- top_contributors: head/tails ranking of contributing features
"""

from featurescope.comparison.classify import head_tails_breaks
from featurescope.comparison.contributors import Contributor, top_contributors
from featurescope.comparison.distance import DistanceResult, feature_difference, features_distance
from featurescope.comparison.engine import ComparisonResult, DistanceFn, compare_features

__all__ = [
    # Main entry point
    "compare_features",
    # Ranking
    "head_tails_breaks",
    "top_contributors",
    # Distance
    "feature_difference",
    "features_distance",
    # Models
    "ComparisonResult",
    "Contributor",
    "DistanceFn",
    "DistanceResult",
]
