"""
Per-metric trajectories across epochs.

Shows how the estimate for one target converges on it as training
progresses: one row per (selected) epoch for a single ``(metric, area)``
pair.
"""

from __future__ import annotations

import pandas as pd

from ..diagnostics.quality import QualityThresholds, classify_quality_array
from ..schema import AREA, EPOCH, ERROR, ESTIMATE, METRIC, REL_ABS_ERROR, TARGET
from ..utils.validation import ensure_columns_present

TRAJECTORY_COLUMNS = [EPOCH, ESTIMATE, TARGET, ERROR, REL_ABS_ERROR, "quality"]


def metric_trajectory(
    records: pd.DataFrame,
    metric: str,
    area: str,
    *,
    thresholds: QualityThresholds | None = None,
) -> pd.DataFrame:
    """
    Rows of one metric for one area, sorted by epoch.

    Parameters
    ----------
    records : pandas.DataFrame
        Training-log rows, typically already restricted to selected epochs.

    metric : str
        Exact metric identifier.

    area : str
        Area name.

    thresholds : QualityThresholds, optional
        Used to fill the ``quality`` column.

    Returns
    -------
    pandas.DataFrame
        Columns ``epoch, estimate, target, error, rel_abs_error, quality``
        (``quality`` holds tier names). Empty when the pair has no rows.
    """
    ensure_columns_present(
        records, [AREA, METRIC, EPOCH, ESTIMATE, TARGET, ERROR, REL_ABS_ERROR],
        context="metric_trajectory",
    )
    mask = (records[METRIC] == metric) & (records[AREA] == area)
    out = records.loc[mask, [EPOCH, ESTIMATE, TARGET, ERROR, REL_ABS_ERROR]]
    out = out.sort_values(EPOCH, kind="stable").reset_index(drop=True)

    tiers = classify_quality_array(out[REL_ABS_ERROR].to_numpy(dtype=float), thresholds)
    return out.assign(quality=[t.value for t in tiers])[TRAJECTORY_COLUMNS]


def list_metrics(records: pd.DataFrame) -> list[str]:
    """Distinct metric identifiers in first-seen order."""
    ensure_columns_present(records, [METRIC], context="list_metrics")
    return [str(m) for m in pd.unique(records[METRIC])]


def list_areas_for_metric(records: pd.DataFrame, metric: str) -> list[str]:
    """Sorted areas that report ``metric``."""
    ensure_columns_present(records, [AREA, METRIC], context="list_areas_for_metric")
    return sorted({str(a) for a in records.loc[records[METRIC] == metric, AREA].unique()})
