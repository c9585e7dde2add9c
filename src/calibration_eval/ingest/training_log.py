"""
Loading of calibration training logs from CSV.

The training log is written by the calibration run as a flat CSV with a
header row and ten columns, in order::

    index, name, metric, estimate, target, error, abs_error,
    rel_abs_error, validation, epoch

Ingestion is deliberately forgiving because a partially written log is
still worth inspecting:

- blank lines are ignored,
- rows with fewer than ten fields are skipped (and logged), never fatal,
- numeric fields that fail to parse become ``0``,
- ``validation`` is True only for the exact literal ``"True"``.

The result is a canonical table (see :mod:`calibration_eval.schema`) with the
``name`` column exposed as ``area``.
"""

from __future__ import annotations

import csv
import logging
import os
from typing import Final, TextIO, Union

import numpy as np
import pandas as pd

from ..schema import (
    AREA,
    COLUMNS,
    EPOCH,
    METRIC,
    NUMERIC_COLUMNS,
    VALIDATED,
    empty_frame,
)

logger = logging.getLogger(__name__)

# Positional layout of the raw CSV.
RAW_FIELDS: Final[tuple[str, ...]] = (
    "index",
    "name",
    "metric",
    "estimate",
    "target",
    "error",
    "abs_error",
    "rel_abs_error",
    "validation",
    "epoch",
)
MIN_FIELDS: Final[int] = len(RAW_FIELDS)

PathOrBuffer = Union[str, os.PathLike, TextIO]


def parse_training_log(text: str) -> pd.DataFrame:
    """
    Parse the text of a training-log CSV into a canonical DataFrame.

    Parameters
    ----------
    text : str
        Full CSV contents, including the header row.

    Returns
    -------
    pandas.DataFrame
        Table with the columns of :data:`calibration_eval.schema.COLUMNS`.
        Empty (but correctly typed) when the input holds no data rows.
    """
    lines = text.strip().splitlines()
    if len(lines) < 2:
        logger.error("Training log appears to be empty or malformed (%d line(s)).", len(lines))
        return empty_frame()

    rows: list[list[str]] = []
    skipped = 0

    # Line numbers are 1-based and count the header. Only whitespace-only
    # lines are blank; a line of empty fields is still a row.
    numbered = [(n, line) for n, line in enumerate(lines[1:], start=2) if line.strip()]
    parsed = csv.reader(line for _, line in numbered)
    for (lineno, _), fields in zip(numbered, parsed):
        if len(fields) < MIN_FIELDS:
            skipped += 1
            logger.warning(
                "Skipping malformed row at line %d (%d of %d fields): %r",
                lineno,
                len(fields),
                MIN_FIELDS,
                ",".join(fields),
            )
            continue
        rows.append(fields[:MIN_FIELDS])

    if skipped:
        logger.info("Skipped %d malformed row(s) while reading training log.", skipped)

    if not rows:
        return empty_frame()

    raw = pd.DataFrame(rows, columns=list(RAW_FIELDS))
    out = pd.DataFrame(
        {
            AREA: raw["name"].astype(object),
            METRIC: raw["metric"].astype(object),
        }
    )
    for col in NUMERIC_COLUMNS:
        out[col] = _to_float(raw[col])
    out[VALIDATED] = raw["validation"] == "True"
    out[EPOCH] = _to_epoch(raw["epoch"])

    logger.debug("Parsed %d training-log row(s).", len(out))
    return out[list(COLUMNS)]


def read_training_log(path_or_buffer: PathOrBuffer, *, encoding: str = "utf-8") -> pd.DataFrame:
    """
    Read a training-log CSV from a path or an open text buffer.

    Parameters
    ----------
    path_or_buffer : str, os.PathLike or text buffer
        Location of the CSV, or an object with a ``read()`` method.

    encoding : str, default "utf-8"
        Encoding used when ``path_or_buffer`` is a path.

    Returns
    -------
    pandas.DataFrame
        See :func:`parse_training_log`.

    Raises
    ------
    FileNotFoundError
        If a path is given and does not exist. An unreachable source is the
        one hard failure of ingestion.
    """
    if isinstance(path_or_buffer, (str, os.PathLike)):
        with open(path_or_buffer, encoding=encoding, newline="") as fh:
            text = fh.read()
    elif hasattr(path_or_buffer, "read"):
        text = path_or_buffer.read()
    else:
        raise TypeError(
            f"path_or_buffer must be a path or text buffer; got {type(path_or_buffer).__name__}."
        )

    logger.info("Reading training log from %s", _describe(path_or_buffer))
    return parse_training_log(text)


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------


def _to_float(col: pd.Series) -> pd.Series:
    return pd.to_numeric(col.str.strip(), errors="coerce").fillna(0.0).astype("float64")


def _to_epoch(col: pd.Series) -> pd.Series:
    values = pd.to_numeric(col.str.strip(), errors="coerce").to_numpy(dtype=float)
    values = np.where(np.isfinite(values), np.trunc(values), 0.0)
    return pd.Series(values.astype("int64"), index=col.index)


def _describe(path_or_buffer: PathOrBuffer) -> str:
    if isinstance(path_or_buffer, (str, os.PathLike)):
        return os.fspath(path_or_buffer)
    return getattr(path_or_buffer, "name", "<buffer>")
