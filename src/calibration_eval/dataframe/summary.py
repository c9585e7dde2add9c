"""
Headline summary of a training log.

Answers "how well do the calibrated weights hit their targets right now?":
the latest epoch's row count, mean relative error and quality breakdown,
plus a little context about how many epochs and metrics the log covers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pandas as pd

from ..config import DEFAULT_EPOCH_CAP
from ..diagnostics.distribution import ErrorBin, error_distribution
from ..diagnostics.quality import QualityBreakdown, QualityThresholds, quality_breakdown
from ..schema import EPOCH, METRIC, REL_ABS_ERROR
from ..utils.validation import ensure_columns_present
from .epochs import EpochSelection, filter_to_selection, select_epochs


@dataclass(frozen=True)
class TrainingLogSummary:
    """
    Headline figures for one training log.

    Fields:
    - max_epoch: latest epoch (0 for an empty log)
    - total_entries: rows at the latest epoch
    - mean_rel_abs_error: mean over latest rows, None when there are none
    - unique_metrics: distinct metrics across the selected epochs
    - selected_epochs / total_epochs: epochs analysed vs present
    - quality: tier counts and score at the latest epoch
    - distribution: error histogram at the latest epoch
    """

    max_epoch: int
    total_entries: int
    mean_rel_abs_error: float | None
    unique_metrics: int
    selected_epochs: int
    total_epochs: int
    quality: QualityBreakdown
    distribution: tuple[ErrorBin, ...]

    @property
    def is_downsampled(self) -> bool:
        return self.selected_epochs < self.total_epochs

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_epoch": self.max_epoch,
            "total_entries": self.total_entries,
            "mean_rel_abs_error": self.mean_rel_abs_error,
            "unique_metrics": self.unique_metrics,
            "selected_epochs": self.selected_epochs,
            "total_epochs": self.total_epochs,
            "is_downsampled": self.is_downsampled,
            "quality": self.quality.to_dict(),
            "distribution": [b.to_dict() for b in self.distribution],
        }


def summarize_selection(
    selected: pd.DataFrame,
    selection: EpochSelection,
    *,
    thresholds: QualityThresholds | None = None,
) -> TrainingLogSummary:
    """
    Build the headline summary from rows already restricted to ``selection``.

    Parameters
    ----------
    selected : pandas.DataFrame
        Training-log rows at the selected epochs.
    selection : EpochSelection
        The selection those rows were filtered with.
    thresholds : QualityThresholds, optional
        Quality tier boundaries and weights.
    """
    ensure_columns_present(selected, [EPOCH, METRIC, REL_ABS_ERROR], context="summarize_selection")

    if selection.selected:
        latest = selected[selected[EPOCH] == selection.max_epoch]
    else:
        latest = selected.iloc[0:0]
    rels = latest[REL_ABS_ERROR].to_numpy(dtype=float)

    return TrainingLogSummary(
        max_epoch=selection.max_epoch,
        total_entries=int(len(latest)),
        mean_rel_abs_error=float(rels.mean()) if len(rels) else None,
        unique_metrics=int(selected[METRIC].nunique()),
        selected_epochs=len(selection.selected),
        total_epochs=selection.total_epochs,
        quality=quality_breakdown(rels, thresholds),
        distribution=tuple(error_distribution(rels, thresholds=thresholds)),
    )


def summarize_training_log(
    df: pd.DataFrame,
    *,
    cap: int = DEFAULT_EPOCH_CAP,
    thresholds: QualityThresholds | None = None,
) -> TrainingLogSummary:
    """Select epochs from a raw training log and summarise it in one call."""
    selection = select_epochs(df, cap)
    return summarize_selection(
        filter_to_selection(df, selection), selection, thresholds=thresholds
    )
