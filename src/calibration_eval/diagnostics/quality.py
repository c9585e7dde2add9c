"""
Quality tiers for relative absolute error.

Every calibration target is graded by how close the weighted estimate lands
to it, measured as relative absolute error (``|error| / |target|``):

- EXCELLENT: rel_abs_error < 0.05
- GOOD:      0.05 <= rel_abs_error < 0.20
- POOR:      rel_abs_error >= 0.20

The tiers partition ``[0, inf)`` with no gaps or overlaps: each boundary
belongs to the worse tier (0.05 is GOOD, 0.20 is POOR).

A headline quality score weights the tiers as EXCELLENT=100, GOOD=75,
POOR=0 and averages over all graded targets. The score of zero targets is
undefined and reported as None rather than NaN or 0.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from math import isnan
from typing import Any

import numpy as np


class QualityTier(str, Enum):
    """Grade of a single relative absolute error."""

    EXCELLENT = "excellent"
    GOOD = "good"
    POOR = "poor"


@dataclass(frozen=True)
class QualityThresholds:
    """
    Tier boundaries and score weights.

    These are reporting conventions and should be held fixed across runs so
    that scores stay comparable.
    """

    # Strict upper bound of EXCELLENT (and inclusive lower bound of GOOD).
    excellent_max: float = 0.05

    # Strict upper bound of GOOD (and inclusive lower bound of POOR).
    good_max: float = 0.20

    excellent_weight: float = 100.0
    good_weight: float = 75.0

    def __post_init__(self) -> None:
        if not 0.0 < self.excellent_max < self.good_max:
            raise ValueError(
                "Quality thresholds must satisfy 0 < excellent_max < good_max; "
                f"got excellent_max={self.excellent_max}, good_max={self.good_max}."
            )


@dataclass(frozen=True)
class QualityCounts:
    """Number of graded targets in each tier."""

    excellent: int = 0
    good: int = 0
    poor: int = 0

    @property
    def total(self) -> int:
        return self.excellent + self.good + self.poor

    def __getitem__(self, tier: QualityTier) -> int:
        return getattr(self, QualityTier(tier).value)

    def to_dict(self) -> dict[str, int]:
        return {
            "excellent": self.excellent,
            "good": self.good,
            "poor": self.poor,
            "total": self.total,
        }


@dataclass(frozen=True)
class QualityBreakdown:
    """Tier counts plus the derived headline score (None when nothing was graded)."""

    counts: QualityCounts
    score: float | None

    def to_dict(self) -> dict[str, Any]:
        return {**self.counts.to_dict(), "score": self.score}


_DEFAULT_THRESHOLDS = QualityThresholds()


def classify_quality(
    rel_abs_error: float,
    thresholds: QualityThresholds | None = None,
) -> QualityTier:
    """
    Grade a single relative absolute error.

    Parameters
    ----------
    rel_abs_error:
        Relative absolute error of one target. Expected to be >= 0.
    thresholds:
        Optional tier boundaries. Defaults to 0.05 / 0.20.

    Returns
    -------
    QualityTier

    Raises
    ------
    ValueError
        If ``rel_abs_error`` is NaN.
    """
    thr = thresholds or _DEFAULT_THRESHOLDS
    value = float(rel_abs_error)
    if isnan(value):
        raise ValueError("Cannot classify a NaN relative absolute error.")

    if value < thr.excellent_max:
        return QualityTier.EXCELLENT
    if value < thr.good_max:
        return QualityTier.GOOD
    return QualityTier.POOR


def classify_quality_array(
    values: Iterable[float],
    thresholds: QualityThresholds | None = None,
) -> np.ndarray:
    """
    Vectorised :func:`classify_quality`.

    Returns an object array of :class:`QualityTier` members aligned with
    ``values``.

    Raises
    ------
    ValueError
        If any value is NaN.
    """
    return _TIER_ORDER[_tier_codes(values, thresholds)]


def count_quality_tiers(
    values: Iterable[float],
    thresholds: QualityThresholds | None = None,
) -> QualityCounts:
    """Count how many relative absolute errors fall into each tier."""
    excellent, good, poor = np.bincount(_tier_codes(values, thresholds), minlength=3)
    return QualityCounts(excellent=int(excellent), good=int(good), poor=int(poor))


def score_quality(
    counts: QualityCounts,
    total: int | None = None,
    thresholds: QualityThresholds | None = None,
) -> float | None:
    """
    Weighted quality score: ``(excellent*100 + good*75) / total``.

    Parameters
    ----------
    counts:
        Tier counts.
    total:
        Denominator. Defaults to ``counts.total``.
    thresholds:
        Supplies the tier weights.

    Returns
    -------
    float or None
        Score in [0, 100], or None when ``total`` is 0 (undefined).
    """
    thr = thresholds or _DEFAULT_THRESHOLDS
    denom = counts.total if total is None else int(total)
    if denom < 0:
        raise ValueError(f"total must be non-negative; got {denom}.")
    if denom == 0:
        return None
    return (counts.excellent * thr.excellent_weight + counts.good * thr.good_weight) / denom


def quality_breakdown(
    values: Iterable[float],
    thresholds: QualityThresholds | None = None,
) -> QualityBreakdown:
    """Tier counts and score for a collection of relative absolute errors."""
    counts = count_quality_tiers(values, thresholds)
    return QualityBreakdown(counts=counts, score=score_quality(counts, thresholds=thresholds))


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

_TIER_ORDER = np.array(
    [QualityTier.EXCELLENT, QualityTier.GOOD, QualityTier.POOR], dtype=object
)


def _tier_codes(values: Iterable[float], thresholds: QualityThresholds | None) -> np.ndarray:
    # 0 = excellent, 1 = good, 2 = poor
    thr = thresholds or _DEFAULT_THRESHOLDS
    if isinstance(values, np.ndarray):
        arr = values.astype(float, copy=False)
    else:
        arr = np.asarray(list(values), dtype=float)
    if np.isnan(arr).any():
        raise ValueError("Cannot classify NaN relative absolute errors.")
    return np.select(
        [arr < thr.excellent_max, arr < thr.good_max],
        [0, 1],
        default=2,
    ).astype(np.intp)
