"""
Histogram of relative absolute errors.

Counts how many targets fall into each of a fixed set of half-open error
bins, ``[0, 5%)``, ``[5%, 10%)``, ... ``[100%, inf)``, and tags each bin with
the quality tier of its lower edge so the bins line up with the tier colours
used in reports.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from math import isinf
from typing import Any, Final

import numpy as np
import pandas as pd

from .quality import QualityThresholds, QualityTier, classify_quality

ERROR_BIN_EDGES: Final[tuple[float, ...]] = (0.0, 0.05, 0.10, 0.20, 0.30, 0.50, 1.0, float("inf"))


@dataclass(frozen=True)
class ErrorBin:
    """One bin of the error histogram."""

    lower: float
    upper: float
    count: int
    share_pct: float | None
    tier: QualityTier

    @property
    def label(self) -> str:
        if isinf(self.upper):
            return f"{self.lower * 100:.0f}%+"
        return f"{self.lower * 100:.0f}-{self.upper * 100:.0f}%"

    def to_dict(self) -> dict[str, Any]:
        return {
            "range": self.label,
            "lower": self.lower,
            "upper": self.upper,
            "count": self.count,
            "share_pct": self.share_pct,
            "tier": self.tier.value,
        }


def error_distribution(
    rel_abs_errors: Iterable[float],
    *,
    edges: Sequence[float] = ERROR_BIN_EDGES,
    thresholds: QualityThresholds | None = None,
) -> list[ErrorBin]:
    """
    Bin relative absolute errors into half-open intervals.

    Parameters
    ----------
    rel_abs_errors:
        Error values; NaN values are ignored.
    edges:
        Strictly increasing bin edges. A value ``v`` lands in bin ``i`` when
        ``edges[i] <= v < edges[i + 1]``; values outside every bin are not
        counted.
    thresholds:
        Tier boundaries used to tag each bin by its lower edge.

    Returns
    -------
    list[ErrorBin]
        One entry per bin, in ascending order. ``share_pct`` is the percentage
        of all (non-NaN) input values in the bin, or None when the input is
        empty.
    """
    edge_arr = np.asarray(edges, dtype=float)
    if edge_arr.ndim != 1 or len(edge_arr) < 2:
        raise ValueError("edges must contain at least two values.")
    if np.any(np.diff(edge_arr) <= 0):
        raise ValueError("edges must be strictly increasing.")

    values = np.asarray(list(rel_abs_errors), dtype=float)
    values = values[~np.isnan(values)]
    n = len(values)

    # side="right" makes each bin closed on the left and open on the right.
    idx = np.searchsorted(edge_arr, values, side="right") - 1
    in_range = (idx >= 0) & (idx < len(edge_arr) - 1)
    counts = np.bincount(idx[in_range], minlength=len(edge_arr) - 1)

    bins: list[ErrorBin] = []
    for i in range(len(edge_arr) - 1):
        count = int(counts[i])
        bins.append(
            ErrorBin(
                lower=float(edge_arr[i]),
                upper=float(edge_arr[i + 1]),
                count=count,
                share_pct=(count / n * 100.0) if n else None,
                tier=classify_quality(edge_arr[i], thresholds),
            )
        )
    return bins


def error_distribution_df(
    rel_abs_errors: Iterable[float],
    *,
    edges: Sequence[float] = ERROR_BIN_EDGES,
    thresholds: QualityThresholds | None = None,
) -> pd.DataFrame:
    """Tabular form of :func:`error_distribution`, one row per bin."""
    bins = error_distribution(rel_abs_errors, edges=edges, thresholds=thresholds)
    return pd.DataFrame([b.to_dict() for b in bins])
