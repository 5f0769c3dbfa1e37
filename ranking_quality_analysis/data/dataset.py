"""ID-keyed feature storage backed by a pandas DataFrame."""

from __future__ import annotations

from typing import Hashable, Iterable, Protocol, Sequence, runtime_checkable

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray


@runtime_checkable
class FeatureStore(Protocol):
    """Minimal read-only store the evaluator consumes."""

    def get(self, point_id: Hashable) -> NDArray[np.float64]: ...

    def all_ids(self) -> list: ...


class FeatureDataset:
    """Immutable collection of equal-length feature vectors keyed by ID.

    Rows are points, columns are features. The input frame is copied and the
    underlying float64 array is marked read-only, so vectors returned by
    :meth:`get` can be shared freely between worker threads.

    Parameters
    ----------
    frame : pd.DataFrame
        Numeric feature matrix. The index holds the point IDs and must be
        unique.
    """

    def __init__(self, frame: pd.DataFrame) -> None:
        if not isinstance(frame, pd.DataFrame):
            raise TypeError(f"Expected a pandas DataFrame, got {type(frame).__name__}.")
        if frame.shape[1] == 0:
            raise ValueError("Feature frame has no columns.")
        if not frame.index.is_unique:
            dupes = frame.index[frame.index.duplicated()].unique().tolist()[:5]
            raise ValueError(f"Point IDs must be unique. Duplicates: {dupes}.")

        values = frame.to_numpy(dtype=np.float64, copy=True)
        if not np.all(np.isfinite(values)):
            n_bad = int(np.sum(~np.isfinite(values)))
            raise ValueError(f"Feature matrix contains {n_bad} non-finite value(s).")
        values.setflags(write=False)

        self._values = values
        self._ids = frame.index.copy()
        self._columns = frame.columns.copy()
        self._positions = {point_id: i for i, point_id in enumerate(self._ids)}

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> "FeatureDataset":
        return cls(frame)

    @classmethod
    def from_array(
        cls,
        X: ArrayLike,
        ids: Sequence[Hashable] | None = None,
        columns: Sequence[Hashable] | None = None,
    ) -> "FeatureDataset":
        """Build a dataset from a 2-D array; IDs default to ``0..n-1``."""
        X = np.asarray(X, dtype=np.float64)
        if X.ndim == 1:
            X = X[:, np.newaxis]
        if X.ndim != 2:
            raise ValueError(f"Feature matrix must be 2-D (n, d). Got ndim={X.ndim}.")
        if columns is None:
            columns = [f"F{j}" for j in range(X.shape[1])]
        return cls(pd.DataFrame(X, index=ids, columns=columns))

    # --- FeatureStore protocol ---

    def get(self, point_id: Hashable) -> NDArray[np.float64]:
        try:
            return self._values[self._positions[point_id]]
        except KeyError:
            raise KeyError(f"Unknown point ID: {point_id!r}") from None

    def all_ids(self) -> list:
        return self._ids.tolist()

    # --- Convenience accessors ---

    @property
    def ids(self) -> pd.Index:
        return self._ids

    @property
    def values(self) -> NDArray[np.float64]:
        """Read-only (n, d) feature matrix in ID order."""
        return self._values

    @property
    def dimensionality(self) -> int:
        return self._values.shape[1]

    def position(self, point_id: Hashable) -> int:
        return self._positions[point_id]

    def positions(self, point_ids: Iterable[Hashable]) -> NDArray[np.intp]:
        return np.fromiter(
            (self._positions[point_id] for point_id in point_ids), dtype=np.intp
        )

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self._values, index=self._ids, columns=self._columns)

    def __len__(self) -> int:
        return self._values.shape[0]

    def __contains__(self, point_id: object) -> bool:
        return point_id in self._positions

    def __repr__(self) -> str:
        n, d = self._values.shape
        return f"FeatureDataset(n={n}, d={d})"


__all__ = ["FeatureStore", "FeatureDataset"]
