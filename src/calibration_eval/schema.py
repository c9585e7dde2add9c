"""
Canonical table layout for calibration training logs.

Every analysis function in this package consumes a ``pandas.DataFrame`` with
the columns listed in :data:`COLUMNS`, one row per (epoch, area, metric)
observation. :class:`Record` is the equivalent single-row view, handy for
building small tables in tests and notebooks.

``rel_abs_error`` is produced upstream by the calibration run and is trusted
as-is; nothing here recomputes it from ``error`` and ``target``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any, Final

import pandas as pd

from .utils.validation import ensure_columns_present

AREA: Final[str] = "area"
METRIC: Final[str] = "metric"
ESTIMATE: Final[str] = "estimate"
TARGET: Final[str] = "target"
ERROR: Final[str] = "error"
ABS_ERROR: Final[str] = "abs_error"
REL_ABS_ERROR: Final[str] = "rel_abs_error"
VALIDATED: Final[str] = "validated"
EPOCH: Final[str] = "epoch"

COLUMNS: Final[tuple[str, ...]] = (
    AREA,
    METRIC,
    ESTIMATE,
    TARGET,
    ERROR,
    ABS_ERROR,
    REL_ABS_ERROR,
    VALIDATED,
    EPOCH,
)

NUMERIC_COLUMNS: Final[tuple[str, ...]] = (
    ESTIMATE,
    TARGET,
    ERROR,
    ABS_ERROR,
    REL_ABS_ERROR,
)

_DTYPES: Final[dict[str, str]] = {
    AREA: "object",
    METRIC: "object",
    ESTIMATE: "float64",
    TARGET: "float64",
    ERROR: "float64",
    ABS_ERROR: "float64",
    REL_ABS_ERROR: "float64",
    VALIDATED: "bool",
    EPOCH: "int64",
}


@dataclass(frozen=True, slots=True)
class Record:
    """One observation of a calibrated estimate against its target."""

    area: str
    metric: str
    estimate: float
    target: float
    error: float
    abs_error: float
    rel_abs_error: float
    validated: bool
    epoch: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def empty_frame() -> pd.DataFrame:
    """Return a zero-row table with the canonical columns and dtypes."""
    return pd.DataFrame({col: pd.Series(dtype=dtype) for col, dtype in _DTYPES.items()})


def records_to_frame(records: Iterable[Record]) -> pd.DataFrame:
    """
    Build a canonical training-log DataFrame from :class:`Record` objects.

    Parameters
    ----------
    records : iterable of Record
        Observations in any order.

    Returns
    -------
    pandas.DataFrame
        Table with exactly the columns of :data:`COLUMNS`, in that order.
    """
    rows = [r.to_dict() for r in records]
    if not rows:
        return empty_frame()
    return pd.DataFrame(rows, columns=list(COLUMNS)).astype(_DTYPES)


def iter_records(df: pd.DataFrame) -> Iterable[Record]:
    """Yield each row of a canonical table as a :class:`Record`."""
    ensure_columns_present(df, COLUMNS, context="iter_records")
    for row in df[list(COLUMNS)].itertuples(index=False, name=None):
        area, metric, estimate, target, error, abs_error, rel, validated, epoch = row
        yield Record(
            area=str(area),
            metric=str(metric),
            estimate=float(estimate),
            target=float(target),
            error=float(error),
            abs_error=float(abs_error),
            rel_abs_error=float(rel),
            validated=bool(validated),
            epoch=int(epoch),
        )
