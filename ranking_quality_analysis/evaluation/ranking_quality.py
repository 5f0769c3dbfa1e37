"""
Evaluate how well a distance function ranks same-group points first.

For every point the whole dataset is ranked by distance to that point and
the ranking is scored with a ROC AUC, treating members of the point's
ground-truth group as positives. Within each group, points are ordered by
ascending distance to the group centroid; the resulting rank position
(normalised by group size) selects one of ``num_bins`` percentile bins in
which the AUCs are averaged. The output table therefore shows whether the
metric separates groups equally well for central and for peripheral
members.

A run moves strictly forward through

    INIT -> PARTITIONED -> CENTROIDS_COMPUTED -> SCORING -> AGGREGATED -> DONE

and either completes or raises; no partial table is returned.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Hashable, Iterable, Mapping, Sequence

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from ranking_quality_analysis import config
from ranking_quality_analysis.data.dataset import FeatureDataset
from ranking_quality_analysis.data.partition import (
    Group,
    LabelPartition,
    PartitionProvider,
    validate_partition,
)
from ranking_quality_analysis.distance.metrics import DistanceMetric
from ranking_quality_analysis.distance.registry import get_distance_metric
from ranking_quality_analysis.errors import DegenerateInputError, EmptyGroupError
from ranking_quality_analysis.evaluation.binning import RankPositionBinner
from ranking_quality_analysis.evaluation.centroids import compute_group_centroids
from ranking_quality_analysis.evaluation.logging import (
    log_evaluation_completion,
    log_evaluation_start,
    log_group_start,
    log_skipped_group,
)
from ranking_quality_analysis.evaluation.neighbors import rank_neighbors
from ranking_quality_analysis.evaluation.roc_auc import roc_auc_from_mask

# Configure logger (library-friendly: leave handlers/levels to callers)
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


ProgressCallback = Callable[[int, int], None]


class EvaluationState(Enum):
    INIT = 0
    PARTITIONED = 1
    CENTROIDS_COMPUTED = 2
    SCORING = 3
    AGGREGATED = 4
    DONE = 5


@dataclass(frozen=True)
class SkippedGroup:
    label: Hashable
    size: int
    reason: str


@dataclass(frozen=True, eq=False)
class RankingQualityResult:
    """Outcome of one evaluation run.

    Attributes
    ----------
    table : pd.DataFrame
        Exactly ``num_bins`` rows ascending by ``percentile`` with columns
        ``percentile, count, mean_auc, variance_auc``.
    per_point : pd.DataFrame
        One row per scored point: ``id, group, rank_position, bin, auc``.
    metric : DistanceMetric
        Metric that produced the rankings.
    num_bins : int
    n_points : int
        Dataset size.
    n_groups : int
        Number of groups in the partition, including skipped ones.
    skipped_groups : tuple[SkippedGroup, ...]
        Groups left out under the skip policy.
    """

    table: pd.DataFrame
    per_point: pd.DataFrame
    metric: DistanceMetric
    num_bins: int
    n_points: int
    n_groups: int
    skipped_groups: tuple[SkippedGroup, ...] = field(default_factory=tuple)

    @property
    def n_scored(self) -> int:
        return len(self.per_point)


def _get_n_jobs(n_tasks: int, n_jobs: int | None = None) -> int:
    """Resolve the number of joblib workers for ``n_tasks`` scoring units.

    Explicit ``n_jobs`` wins, then the ``RQA_N_JOBS`` environment variable,
    then ``config.N_JOBS``. Small workloads always run sequentially.
    """
    if n_jobs is None:
        env = os.environ.get(config.N_JOBS_ENV_VAR)
        if env is not None:
            try:
                n_jobs = int(env)
            except ValueError:
                logger.warning("Ignoring non-integer %s=%r", config.N_JOBS_ENV_VAR, env)
        if n_jobs is None:
            n_jobs = config.N_JOBS
    if n_jobs == 0:
        raise ValueError("n_jobs must be non-zero.")
    if n_tasks < config.MIN_POINTS_FOR_PARALLEL:
        return 1
    return n_jobs


def _member_order(
    dataset: FeatureDataset,
    group: Group,
    centroid: np.ndarray,
    metric: DistanceMetric,
) -> list[Hashable]:
    """Members sorted by ascending distance to ``centroid``, ties by ID.

    IDs that cannot be compared with each other fall back to dataset order.
    """
    try:
        members = sorted(group.members)
    except TypeError:
        members = sorted(group.members, key=dataset.position)
    rows = dataset.values[dataset.positions(members)]
    distances = metric.pairwise(centroid, rows)
    order = np.argsort(distances, kind="stable")
    return [members[i] for i in order]


# Worker (module-level for joblib pickling / clarity)
def _score_point(
    dataset: FeatureDataset,
    point_id: Hashable,
    metric: DistanceMetric,
    member_mask: np.ndarray,
) -> float:
    ranking = rank_neighbors(dataset, point_id, metric)
    return roc_auc_from_mask(member_mask[ranking.positions])


class RankingQualityEvaluator:
    """Single-use driver for one ranking-quality run.

    Parameters
    ----------
    metric : DistanceMetric, optional
        Defaults to ``config.DEFAULT_METRIC``.
    num_bins : int, default=config.NUM_BINS
    n_jobs : int, optional
        joblib worker count for per-point scoring (threads).
    progress : callable, optional
        Called as ``progress(processed, total)`` after each scored point.
    skip_degenerate_groups : bool, default=config.SKIP_DEGENERATE_GROUPS
        Skip (and report) empty groups and groups spanning the whole dataset
        instead of aborting the run.
    variance_ddof : int, default=config.VARIANCE_DDOF
    empty_bin_fill : float, default=config.EMPTY_BIN_FILL
    """

    def __init__(
        self,
        metric: DistanceMetric | None = None,
        *,
        num_bins: int = config.NUM_BINS,
        n_jobs: int | None = None,
        progress: ProgressCallback | None = None,
        skip_degenerate_groups: bool = config.SKIP_DEGENERATE_GROUPS,
        variance_ddof: int = config.VARIANCE_DDOF,
        empty_bin_fill: float = config.EMPTY_BIN_FILL,
    ) -> None:
        if num_bins <= 0:
            raise ValueError(f"num_bins must be positive. Got num_bins={num_bins}.")
        self.metric = metric if metric is not None else get_distance_metric(config.DEFAULT_METRIC)
        self.num_bins = num_bins
        self.n_jobs = n_jobs
        self.progress = progress
        self.skip_degenerate_groups = skip_degenerate_groups
        self.variance_ddof = variance_ddof
        self.empty_bin_fill = empty_bin_fill
        self.state = EvaluationState.INIT
        self._started = False

    def _advance(self, new_state: EvaluationState) -> None:
        if new_state.value != self.state.value + 1:
            raise RuntimeError(f"Invalid transition {self.state.name} -> {new_state.name}.")
        logger.debug("State %s -> %s", self.state.name, new_state.name)
        self.state = new_state

    def _screen_groups(
        self, groups: Sequence[Group], n_points: int
    ) -> tuple[list[Group], list[SkippedGroup]]:
        active: list[Group] = []
        skipped: list[SkippedGroup] = []
        for group in groups:
            size = len(group)
            if size == 0:
                error: Exception = EmptyGroupError(f"Group {group.label!r} has no members.")
            elif size == n_points:
                error = DegenerateInputError(
                    f"Group {group.label!r} spans all {n_points} points; "
                    "its rankings have no negatives."
                )
            else:
                active.append(group)
                continue
            if not self.skip_degenerate_groups:
                raise error
            log_skipped_group(group.label, str(error), logger=logger)
            skipped.append(SkippedGroup(label=group.label, size=size, reason=str(error)))
        return active, skipped

    def run(
        self,
        dataset: FeatureDataset,
        partition: PartitionProvider | Iterable[Group],
    ) -> RankingQualityResult:
        """Run the full pipeline and return the binned AUC table."""
        if self._started:
            raise RuntimeError("RankingQualityEvaluator instances are single-use.")
        self._started = True
        t0 = time.perf_counter()
        n_points = len(dataset)

        if isinstance(partition, PartitionProvider):
            groups = list(partition.partition(dataset))
        else:
            groups = list(partition)
        validate_partition(dataset, groups)
        active, skipped = self._screen_groups(groups, n_points)
        self._advance(EvaluationState.PARTITIONED)
        log_evaluation_start(n_points, len(groups), self.metric, logger=logger)

        centroids = compute_group_centroids(dataset, active)
        self._advance(EvaluationState.CENTROIDS_COMPUTED)

        self._advance(EvaluationState.SCORING)
        binner = RankPositionBinner(self.num_bins)
        total = sum(len(g) for g in active)
        processed = 0
        rows: list[tuple] = []
        for gi, group in enumerate(active, start=1):
            n = len(group)
            log_group_start(gi, len(active), group.label, n, logger=logger)
            ordered = _member_order(dataset, group, centroids[group.label], self.metric)
            member_mask = np.zeros(n_points, dtype=bool)
            member_mask[dataset.positions(ordered)] = True

            n_jobs = _get_n_jobs(n, self.n_jobs)
            if n_jobs == 1:
                aucs = [
                    _score_point(dataset, point_id, self.metric, member_mask)
                    for point_id in ordered
                ]
            else:
                aucs = Parallel(n_jobs=n_jobs, prefer="threads")(
                    delayed(_score_point)(dataset, point_id, self.metric, member_mask)
                    for point_id in ordered
                )

            group_binner = RankPositionBinner(self.num_bins)
            for ind, (point_id, auc) in enumerate(zip(ordered, aucs)):
                b = group_binner.add(ind, n, auc)
                rows.append((point_id, group.label, ind, b, auc))
                processed += 1
                if self.progress is not None:
                    self.progress(processed, total)
            binner.merge(group_binner)

        self._advance(EvaluationState.AGGREGATED)
        table = binner.to_frame(ddof=self.variance_ddof, empty_fill=self.empty_bin_fill)
        per_point = pd.DataFrame(rows, columns=["id", "group", "rank_position", "bin", "auc"])

        self._advance(EvaluationState.DONE)
        log_evaluation_completion(
            len(per_point), len(skipped), time.perf_counter() - t0, logger=logger
        )
        return RankingQualityResult(
            table=table,
            per_point=per_point,
            metric=self.metric,
            num_bins=self.num_bins,
            n_points=n_points,
            n_groups=len(groups),
            skipped_groups=tuple(skipped),
        )


def evaluate_ranking_quality(
    dataset: FeatureDataset | pd.DataFrame,
    metric: DistanceMetric | None = None,
    *,
    labels: Mapping[Hashable, Hashable] | pd.Series | None = None,
    groups: Iterable[Group] | None = None,
    partition: PartitionProvider | None = None,
    num_bins: int = config.NUM_BINS,
    n_jobs: int | None = None,
    progress: ProgressCallback | None = None,
    skip_degenerate_groups: bool = config.SKIP_DEGENERATE_GROUPS,
    variance_ddof: int = config.VARIANCE_DDOF,
    empty_bin_fill: float = config.EMPTY_BIN_FILL,
) -> RankingQualityResult:
    """Evaluate ``metric`` against a ground-truth grouping of ``dataset``.

    Exactly one of ``labels``, ``groups`` or ``partition`` describes the
    ground truth.

    Parameters
    ----------
    dataset : FeatureDataset or pd.DataFrame
        Points to rank. A DataFrame is wrapped (index = IDs).
    metric : DistanceMetric, optional
        Defaults to ``config.DEFAULT_METRIC``.
    labels : Mapping or pd.Series, optional
        Point ID -> ground-truth label.
    groups : iterable of Group, optional
        Explicit partition.
    partition : PartitionProvider, optional
        Object producing the partition from the dataset.
    num_bins, n_jobs, progress, skip_degenerate_groups, variance_ddof, empty_bin_fill
        See :class:`RankingQualityEvaluator`.

    Returns
    -------
    RankingQualityResult

    Raises
    ------
    DimensionMismatchError
        If the metric does not fit the dataset dimensionality.
    EmptyGroupError, DegenerateInputError
        For empty or all-spanning groups, unless ``skip_degenerate_groups``.
    """
    sources = [s for s in (labels, groups, partition) if s is not None]
    if len(sources) != 1:
        raise ValueError("Pass exactly one of 'labels', 'groups' or 'partition'.")
    if not isinstance(dataset, FeatureDataset):
        dataset = FeatureDataset(dataset)
    if labels is not None:
        source: PartitionProvider | Iterable[Group] = LabelPartition(labels)
    else:
        source = sources[0]

    evaluator = RankingQualityEvaluator(
        metric,
        num_bins=num_bins,
        n_jobs=n_jobs,
        progress=progress,
        skip_degenerate_groups=skip_degenerate_groups,
        variance_ddof=variance_ddof,
        empty_bin_fill=empty_bin_fill,
    )
    return evaluator.run(dataset, source)


__all__ = [
    "EvaluationState",
    "RankingQualityEvaluator",
    "RankingQualityResult",
    "SkippedGroup",
    "evaluate_ranking_quality",
]
