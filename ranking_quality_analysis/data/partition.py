"""Ground-truth grouping of dataset points.

Labels are supplied by the caller; this module only turns a label
assignment into :class:`Group` objects and checks that the groups partition
the dataset.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Hashable, Iterable, Mapping, Protocol, runtime_checkable

import pandas as pd

from ranking_quality_analysis.data.dataset import FeatureDataset


@dataclass(frozen=True)
class Group:
    """Set of point IDs sharing one ground-truth label."""

    label: Hashable
    members: frozenset

    def __len__(self) -> int:
        return len(self.members)

    def __contains__(self, point_id: object) -> bool:
        return point_id in self.members


@runtime_checkable
class PartitionProvider(Protocol):
    def partition(self, dataset: FeatureDataset) -> list[Group]: ...


class LabelPartition:
    """Partition a dataset by a per-point label assignment.

    Groups are emitted in order of first appearance of their label in the
    dataset, which keeps runs reproducible without requiring orderable
    labels.

    Parameters
    ----------
    labels : Mapping or pd.Series
        Point ID -> label. Must cover every dataset ID.
    """

    def __init__(self, labels: Mapping[Hashable, Hashable] | pd.Series) -> None:
        if isinstance(labels, pd.Series):
            self._labels = labels.copy()
        else:
            self._labels = pd.Series(dict(labels), dtype=object)
        if not self._labels.index.is_unique:
            raise ValueError("Label assignment has duplicate point IDs.")

    def partition(self, dataset: FeatureDataset) -> list[Group]:
        missing = dataset.ids.difference(self._labels.index)
        if len(missing) > 0:
            preview = missing.tolist()[:5]
            raise ValueError(f"Missing labels for {len(missing)} point(s): {preview}.")
        aligned = self._labels.reindex(dataset.ids)
        if aligned.isna().any():
            preview = aligned.index[aligned.isna()].tolist()[:5]
            raise ValueError(f"Null labels for point(s): {preview}.")

        members: dict[Hashable, list] = {}
        for point_id, label in zip(aligned.index, aligned.to_numpy()):
            members.setdefault(label, []).append(point_id)
        return [Group(label=label, members=frozenset(ids)) for label, ids in members.items()]


def groups_from_mapping(groups: Mapping[Hashable, Iterable[Hashable]]) -> list[Group]:
    """Build groups from an explicit ``label -> member IDs`` mapping."""
    return [Group(label=label, members=frozenset(ids)) for label, ids in groups.items()]


def validate_partition(dataset: FeatureDataset, groups: Iterable[Group]) -> None:
    """Check that ``groups`` cover every dataset ID exactly once.

    Empty groups are not rejected here; the evaluator applies its own
    empty-group policy to them.
    """
    counts: Counter = Counter()
    labels: Counter = Counter()
    for group in groups:
        counts.update(group.members)
        labels[group.label] += 1

    repeated = [label for label, c in labels.items() if c > 1]
    if repeated:
        raise ValueError(f"Group labels must be unique. Repeated: {repeated[:5]}.")

    unknown = [point_id for point_id in counts if point_id not in dataset]
    if unknown:
        raise ValueError(f"Groups reference {len(unknown)} unknown ID(s): {unknown[:5]}.")
    duplicated = [point_id for point_id, c in counts.items() if c > 1]
    if duplicated:
        raise ValueError(
            f"{len(duplicated)} ID(s) belong to more than one group: {duplicated[:5]}."
        )
    uncovered = [point_id for point_id in dataset.ids if point_id not in counts]
    if uncovered:
        raise ValueError(
            f"{len(uncovered)} ID(s) are not covered by any group: {uncovered[:5]}."
        )


__all__ = [
    "Group",
    "PartitionProvider",
    "LabelPartition",
    "groups_from_mapping",
    "validate_partition",
]
