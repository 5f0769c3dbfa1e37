"""Distance functions used to rank neighbours.

Modules
-------
metrics
    Euclidean, Manhattan and matrix-weighted (Mahalanobis) distances
registry
    Name-based construction of metrics
"""

from .metrics import (
    DistanceMetric,
    EuclideanDistance,
    ManhattanDistance,
    MatrixWeightedDistance,
)
from .registry import DISTANCE_METRICS, get_distance_metric

__all__ = [
    "DistanceMetric",
    "EuclideanDistance",
    "ManhattanDistance",
    "MatrixWeightedDistance",
    "DISTANCE_METRICS",
    "get_distance_metric",
]
