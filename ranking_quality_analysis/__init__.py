"""
Ranking-quality analysis of distance functions.

Measures how well a distance metric ranks points of the same ground-truth
group ahead of all other points, summarised as per-percentile ROC AUC
statistics.
"""

from .data import FeatureDataset, Group, LabelPartition, generate_blobs_dataset
from .distance import (
    DistanceMetric,
    EuclideanDistance,
    ManhattanDistance,
    MatrixWeightedDistance,
    get_distance_metric,
)
from .errors import (
    DegenerateInputError,
    DimensionMismatchError,
    EmptyGroupError,
    RankingQualityError,
    ShapeError,
)
from .evaluation import (
    RankingQualityEvaluator,
    RankingQualityResult,
    evaluate_ranking_quality,
)

__version__ = "0.1.0"

__all__ = [
    "FeatureDataset",
    "Group",
    "LabelPartition",
    "generate_blobs_dataset",
    "DistanceMetric",
    "EuclideanDistance",
    "ManhattanDistance",
    "MatrixWeightedDistance",
    "get_distance_metric",
    "RankingQualityError",
    "DimensionMismatchError",
    "ShapeError",
    "EmptyGroupError",
    "DegenerateInputError",
    "RankingQualityEvaluator",
    "RankingQualityResult",
    "evaluate_ranking_quality",
]
