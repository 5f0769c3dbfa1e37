"""Exact brute-force neighbour ranking over the full dataset."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Iterator

import numpy as np
from numpy.typing import NDArray

from ranking_quality_analysis.data.dataset import FeatureDataset
from ranking_quality_analysis.distance.metrics import DistanceMetric


@dataclass(frozen=True, eq=False)
class RankedNeighborList:
    """Every dataset point ordered by ascending distance to one query.

    Attributes
    ----------
    query_id : Hashable
        ID of the query point (itself present in the list at distance 0).
    ids : np.ndarray
        Point IDs in ranking order, length = dataset size.
    distances : NDArray[np.float64]
        Non-decreasing distances aligned with ``ids``.
    positions : NDArray[np.intp]
        Dataset row index of each ranked point.
    """

    query_id: Hashable
    ids: np.ndarray
    distances: NDArray[np.float64]
    positions: NDArray[np.intp]

    def __len__(self) -> int:
        return len(self.ids)

    def __iter__(self) -> Iterator[tuple[Hashable, float]]:
        return zip(self.ids.tolist(), self.distances.tolist())


def rank_neighbors(
    dataset: FeatureDataset, query_id: Hashable, metric: DistanceMetric
) -> RankedNeighborList:
    """Rank all dataset points by ``metric`` distance to ``query_id``.

    A full scan: every ID appears exactly once. Equal distances keep dataset
    row order (stable sort), so rankings are reproducible.
    """
    query = dataset.get(query_id)
    distances = metric.pairwise(query, dataset.values)
    order = np.argsort(distances, kind="stable")
    return RankedNeighborList(
        query_id=query_id,
        ids=dataset.ids.to_numpy()[order],
        distances=distances[order],
        positions=order,
    )


__all__ = ["RankedNeighborList", "rank_neighbors"]
