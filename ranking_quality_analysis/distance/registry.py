"""Metric registry.

Export a direct ``DISTANCE_METRICS`` mapping so callers (and the CLI) can
build metrics from a configuration name.
"""

from __future__ import annotations

from typing import Callable

from ranking_quality_analysis.distance.metrics import (
    DistanceMetric,
    EuclideanDistance,
    ManhattanDistance,
    MatrixWeightedDistance,
)

DISTANCE_METRICS: dict[str, Callable[..., DistanceMetric]] = {
    "euclidean": EuclideanDistance,
    "manhattan": ManhattanDistance,
    "weighted": MatrixWeightedDistance,
}


def get_distance_metric(name: str, **params) -> DistanceMetric:
    """Instantiate a registered metric by name.

    Parameters
    ----------
    name : str
        One of ``DISTANCE_METRICS`` (case-insensitive).
    **params
        Constructor arguments, e.g. ``weight_matrix`` for ``"weighted"``.
    """
    key = name.lower()
    if key not in DISTANCE_METRICS:
        raise ValueError(
            f"Unknown metric: {name!r}. Options: {sorted(DISTANCE_METRICS)}."
        )
    return DISTANCE_METRICS[key](**params)


__all__ = ["DISTANCE_METRICS", "get_distance_metric"]
