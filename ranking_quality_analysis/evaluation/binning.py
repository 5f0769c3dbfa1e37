"""Percentile binning of per-point AUCs by within-group rank position.

A point at 0-based position ``ind`` in a group of size ``n`` (ordered by
ascending distance to the group centroid) falls into bin

    floor(num_bins * ind / n)

clamped to ``[0, num_bins - 1]``. Each bin keeps a single-pass mean and
variance (Welford, 1962). Partial accumulators merge exactly with the
pairwise update of Chan, Golub & LeVeque (1979), which lets independent
workers accumulate locally and combine at the end.
"""

from __future__ import annotations

import operator

import numpy as np
import pandas as pd

from ranking_quality_analysis import config
from ranking_quality_analysis.errors import EmptyGroupError


def percentile_bin(ind: int, n: int, num_bins: int = config.NUM_BINS) -> int:
    """Map rank position ``ind`` within a group of size ``n`` to a bin index."""
    ind = operator.index(ind)
    n = operator.index(n)
    if n <= 0:
        raise EmptyGroupError(f"Group size must be positive. Got n={n}.")
    if num_bins <= 0:
        raise ValueError(f"num_bins must be positive. Got num_bins={num_bins}.")
    b = (num_bins * ind) // n
    return min(max(b, 0), num_bins - 1)


class MeanVariance:
    """Online mean / variance accumulator."""

    __slots__ = ("count", "mean", "m2")

    def __init__(self) -> None:
        self.count = 0
        self.mean = 0.0
        self.m2 = 0.0

    def add(self, value: float) -> "MeanVariance":
        x = float(value)
        self.count += 1
        delta = x - self.mean
        self.mean += delta / self.count
        self.m2 += delta * (x - self.mean)
        return self

    def merge(self, other: "MeanVariance") -> "MeanVariance":
        """Fold ``other`` into this accumulator in place."""
        if other.count == 0:
            return self
        if self.count == 0:
            self.count, self.mean, self.m2 = other.count, other.mean, other.m2
            return self
        n = self.count + other.count
        delta = other.mean - self.mean
        self.mean += delta * other.count / n
        self.m2 += other.m2 + delta * delta * self.count * other.count / n
        self.count = n
        return self

    def variance(self, ddof: int = config.VARIANCE_DDOF) -> float:
        """Return ``m2 / (count - ddof)``, or NaN when undefined."""
        denom = self.count - ddof
        if denom <= 0:
            return float("nan")
        return self.m2 / denom

    def __repr__(self) -> str:
        return f"MeanVariance(count={self.count}, mean={self.mean!r}, m2={self.m2!r})"


class RankPositionBinner:
    """Fixed array of :class:`MeanVariance` accumulators, one per percentile bin."""

    def __init__(self, num_bins: int = config.NUM_BINS) -> None:
        if num_bins <= 0:
            raise ValueError(f"num_bins must be positive. Got num_bins={num_bins}.")
        self.num_bins = num_bins
        self._bins = [MeanVariance() for _ in range(num_bins)]

    def add(self, ind: int, n: int, auc: float) -> int:
        """Accumulate ``auc`` for rank position ``ind`` of ``n``; return the bin used."""
        b = percentile_bin(ind, n, self.num_bins)
        self._bins[b].add(auc)
        return b

    def merge(self, other: "RankPositionBinner") -> "RankPositionBinner":
        if other.num_bins != self.num_bins:
            raise ValueError(
                f"Cannot merge binners with {other.num_bins} and {self.num_bins} bins."
            )
        for mine, theirs in zip(self._bins, other._bins):
            mine.merge(theirs)
        return self

    def __getitem__(self, index: int) -> MeanVariance:
        return self._bins[index]

    def __len__(self) -> int:
        return self.num_bins

    @property
    def total_count(self) -> int:
        return sum(acc.count for acc in self._bins)

    def to_frame(
        self,
        ddof: int = config.VARIANCE_DDOF,
        empty_fill: float = config.EMPTY_BIN_FILL,
    ) -> pd.DataFrame:
        """Emit one row per bin: ``percentile, count, mean_auc, variance_auc``.

        Bins without samples report ``count=0`` and ``empty_fill`` for mean and
        variance; so does the variance of a bin with ``count <= ddof``.
        """
        counts = np.array([acc.count for acc in self._bins], dtype=np.int64)
        means = np.array(
            [acc.mean if acc.count > 0 else empty_fill for acc in self._bins],
            dtype=np.float64,
        )
        variances = np.array(
            [
                acc.m2 / (acc.count - ddof) if acc.count > ddof else empty_fill
                for acc in self._bins
            ],
            dtype=np.float64,
        )
        percentiles = np.arange(self.num_bins, dtype=np.float64) / self.num_bins
        return pd.DataFrame(
            {
                "percentile": percentiles,
                "count": counts,
                "mean_auc": means,
                "variance_auc": variances,
            }
        )


__all__ = ["MeanVariance", "RankPositionBinner", "percentile_bin"]
