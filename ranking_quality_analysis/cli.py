"""Evaluate a distance function's ranking quality on a labelled feature table.

The input is a CSV/TSV file whose first column holds point IDs, one column
holds the ground-truth labels and all remaining columns are numeric
features. The binned AUC table is written to stdout.

Usage
-----
    ranking-quality data.csv --label-column label
    ranking-quality data.tsv --sep '\\t' --metric manhattan --bins 20
    ranking-quality data.csv --metric weighted --weights inv_cov.txt -v
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np
import pandas as pd

from ranking_quality_analysis import config
from ranking_quality_analysis.data.dataset import FeatureDataset
from ranking_quality_analysis.distance.registry import DISTANCE_METRICS, get_distance_metric
from ranking_quality_analysis.evaluation.ranking_quality import evaluate_ranking_quality


# ── CLI ───────────────────────────────────────────────────────────────────────
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="ranking-quality",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("input", type=Path, help="Feature table (first column = point IDs)")
    p.add_argument("--label-column", default="label", help="Ground-truth label column (default 'label')")
    p.add_argument("--sep", default=",", help="Field separator of the input (default ',')")
    p.add_argument(
        "--metric",
        default=config.DEFAULT_METRIC,
        choices=sorted(DISTANCE_METRICS),
        help=f"Distance metric (default {config.DEFAULT_METRIC!r})",
    )
    p.add_argument("--weights", type=Path, default=None, help="Square weight matrix file for --metric weighted")
    p.add_argument("--bins", type=int, default=config.NUM_BINS, help=f"Number of percentile bins (default {config.NUM_BINS})")
    p.add_argument("--n-jobs", type=int, default=None, help="joblib workers for scoring")
    p.add_argument("--skip-degenerate", action="store_true", help="Skip empty/all-spanning groups instead of failing")
    p.add_argument("--ddof", type=int, default=config.VARIANCE_DDOF, help="Delta degrees of freedom for bin variance")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG logging")
    return p.parse_args(argv)


# ── helpers ───────────────────────────────────────────────────────────────────
def _load_table(path: Path, sep: str, label_column: str) -> tuple[pd.DataFrame, pd.Series]:
    df = pd.read_csv(path, sep=sep, index_col=0)
    if label_column not in df.columns:
        raise KeyError(f"Label column {label_column!r} not found in {path}.")
    labels = df.pop(label_column)
    features = df.apply(pd.to_numeric, errors="raise")
    return features, labels


def _load_weights(path: Path) -> np.ndarray:
    delimiter = "," if path.suffix.lower() == ".csv" else None
    return np.loadtxt(path, delimiter=delimiter, ndmin=2)


def _build_metric(args: argparse.Namespace):
    if args.metric == "weighted":
        if args.weights is None:
            raise ValueError("--metric weighted requires --weights.")
        return get_distance_metric("weighted", weight_matrix=_load_weights(args.weights))
    if args.weights is not None:
        raise ValueError("--weights is only valid with --metric weighted.")
    return get_distance_metric(args.metric)


# ── main ──────────────────────────────────────────────────────────────────────
def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if not args.input.exists():
        raise FileNotFoundError(args.input)

    features, labels = _load_table(args.input, args.sep, args.label_column)
    result = evaluate_ranking_quality(
        FeatureDataset(features),
        _build_metric(args),
        labels=labels,
        num_bins=args.bins,
        n_jobs=args.n_jobs,
        skip_degenerate_groups=args.skip_degenerate,
        variance_ddof=args.ddof,
    )
    result.table.to_csv(sys.stdout, index=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
