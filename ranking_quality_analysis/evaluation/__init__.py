"""Ranking-quality evaluation pipeline.

Modules
-------
centroids
    Group mean vectors
neighbors
    Exact full-dataset neighbour ranking
roc_auc
    Step-rule ROC AUC of a ranking against positive IDs
binning
    Percentile bins with mergeable online mean/variance
ranking_quality
    Driver that runs the whole pipeline
"""

from .binning import MeanVariance, RankPositionBinner, percentile_bin
from .centroids import compute_centroid, compute_group_centroids
from .neighbors import RankedNeighborList, rank_neighbors
from .ranking_quality import (
    EvaluationState,
    RankingQualityEvaluator,
    RankingQualityResult,
    SkippedGroup,
    evaluate_ranking_quality,
)
from .roc_auc import compute_roc_auc, roc_auc_from_mask

__all__ = [
    "MeanVariance",
    "RankPositionBinner",
    "percentile_bin",
    "compute_centroid",
    "compute_group_centroids",
    "RankedNeighborList",
    "rank_neighbors",
    "compute_roc_auc",
    "roc_auc_from_mask",
    "EvaluationState",
    "RankingQualityEvaluator",
    "RankingQualityResult",
    "SkippedGroup",
    "evaluate_ranking_quality",
]
