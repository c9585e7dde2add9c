"""
Epoch downsampling for long calibration runs.

A training log can hold thousands of epochs. Views that plot or summarise
across epochs only need a bounded, evenly spaced subset, but they must always
include the most recent epoch, which is the canonical "current" snapshot.

Selection rule
--------------
Let ``E`` be the ascending distinct epochs and ``step = max(1, len(E) // cap)``.
The selection keeps every epoch whose position in ``E`` is a multiple of
``step``, plus the maximum epoch unconditionally. When ``len(E) <= cap``
nothing is dropped.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from ..config import DEFAULT_EPOCH_CAP
from ..schema import EPOCH
from ..utils.validation import ensure_columns_present, ensure_positive_int


@dataclass(frozen=True)
class EpochSelection:
    """
    Result of downsampling the epochs of one training log.

    Fields:
    - selected: ascending tuple of kept epochs (always contains max_epoch when non-empty)
    - max_epoch: largest epoch present, or 0 for an empty log
    - total_epochs: number of distinct epochs before downsampling
    - step: stride used over the sorted distinct epochs
    - cap: the cap the selection was computed for
    """

    selected: tuple[int, ...]
    max_epoch: int
    total_epochs: int
    step: int
    cap: int

    @property
    def is_downsampled(self) -> bool:
        return len(self.selected) < self.total_epochs

    def __contains__(self, epoch: object) -> bool:
        return epoch in self.selected

    def __len__(self) -> int:
        return len(self.selected)

    def to_dict(self) -> dict[str, Any]:
        return {
            "selected": list(self.selected),
            "max_epoch": self.max_epoch,
            "total_epochs": self.total_epochs,
            "step": self.step,
            "cap": self.cap,
            "is_downsampled": self.is_downsampled,
        }


def select_epochs(
    table: pd.DataFrame | Iterable[int],
    cap: int = DEFAULT_EPOCH_CAP,
) -> EpochSelection:
    """
    Choose a bounded, ordered subset of epochs that always includes the latest.

    Parameters
    ----------
    table : pandas.DataFrame or iterable of int
        Either a training-log table with an ``epoch`` column, or the epoch
        values themselves (duplicates allowed).

    cap : int, default 100
        Target number of epochs. Must be strictly positive.

    Returns
    -------
    EpochSelection
        ``max_epoch`` is 0 and ``selected`` is empty for an empty input.
    """
    cap = ensure_positive_int(cap, name="cap")

    if isinstance(table, pd.DataFrame):
        ensure_columns_present(table, [EPOCH], context="select_epochs")
        raw = table[EPOCH].to_numpy()
    else:
        raw = np.fromiter((int(e) for e in table), dtype=np.int64)

    epochs = np.unique(raw.astype(np.int64, copy=False))
    if len(epochs) == 0:
        return EpochSelection(selected=(), max_epoch=0, total_epochs=0, step=1, cap=cap)

    max_epoch = int(epochs[-1])
    step = max(1, len(epochs) // cap)

    keep = np.arange(len(epochs)) % step == 0
    keep[-1] = True

    return EpochSelection(
        selected=tuple(int(e) for e in epochs[keep]),
        max_epoch=max_epoch,
        total_epochs=int(len(epochs)),
        step=step,
        cap=cap,
    )


def filter_to_selection(df: pd.DataFrame, selection: EpochSelection) -> pd.DataFrame:
    """Rows of ``df`` whose epoch is in the selection."""
    ensure_columns_present(df, [EPOCH], context="filter_to_selection")
    return df[df[EPOCH].isin(selection.selected)]


def latest_snapshot(df: pd.DataFrame, selection: EpochSelection | None = None) -> pd.DataFrame:
    """
    Rows at the maximum epoch.

    If ``selection`` is omitted it is computed from ``df``.
    """
    ensure_columns_present(df, [EPOCH], context="latest_snapshot")
    if selection is None:
        selection = select_epochs(df)
    if not selection.selected:
        return df.iloc[0:0]
    return df[df[EPOCH] == selection.max_epoch]
