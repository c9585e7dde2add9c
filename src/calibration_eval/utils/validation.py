from __future__ import annotations

from numbers import Integral
from typing import Sequence

import pandas as pd


class DataFrameValidationError(ValueError):
    """
    Error raised when a training-log DataFrame fails a validation check.

    Subclasses ValueError so callers can catch either the specific type or
    the general one.
    """


def _prefix(context: str | None) -> str:
    return f"[{context}] " if context is not None else ""


def ensure_columns_present(
    df: pd.DataFrame,
    required: Sequence[str],
    *,
    context: str | None = None,
) -> None:
    """
    Ensure that all required columns are present in a DataFrame.

    Parameters
    ----------
    df : pandas.DataFrame
        The training-log table to validate.

    required : sequence of str
        Column names that must be present in ``df``.

    context : str, optional
        Name of the calling function, included in the error message.

    Raises
    ------
    DataFrameValidationError
        If one or more required columns are missing.
    """
    missing = [c for c in required if c not in df.columns]
    if not missing:
        return

    raise DataFrameValidationError(
        f"{_prefix(context)}DataFrame is missing required columns: {missing}"
    )


def ensure_positive_int(value: Integral, *, name: str) -> int:
    """
    Validate a strictly positive integer parameter (e.g. an epoch cap).

    Any integral type is accepted (numpy integers included) and returned as a
    plain ``int``. Booleans are rejected even though they subclass int.
    """
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{name} must be an int; got {type(value).__name__}.")
    if value <= 0:
        raise ValueError(f"{name} must be strictly positive; got {value}.")
    return int(value)
