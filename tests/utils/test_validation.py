from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from calibration_eval.utils import (
    DataFrameValidationError,
    ensure_columns_present,
    ensure_positive_int,
)


def test_ensure_columns_present_passes_when_all_columns_exist():
    df = pd.DataFrame({"area": ["A"], "metric": ["age/0_10"]})

    # Should not raise
    ensure_columns_present(df, ["area", "metric"], context="test")


def test_ensure_columns_present_raises_with_missing_columns_and_context():
    df = pd.DataFrame({"area": ["A"]})

    with pytest.raises(DataFrameValidationError) as excinfo:
        ensure_columns_present(df, ["area", "epoch"], context="select_epochs")

    msg = str(excinfo.value)
    assert "select_epochs" in msg
    assert "missing required columns" in msg.lower()
    assert "['epoch']" in msg


def test_dataframe_validation_error_is_subclass_of_valueerror():
    """Callers can catch it as ValueError if desired."""
    df = pd.DataFrame({"a": [1]})

    with pytest.raises(ValueError):
        ensure_columns_present(df, ["a", "b"])


@pytest.mark.parametrize("value", [0, -3])
def test_ensure_positive_int_rejects_non_positive(value):
    with pytest.raises(ValueError):
        ensure_positive_int(value, name="cap")


@pytest.mark.parametrize("value", [True, 2.5, "10"])
def test_ensure_positive_int_rejects_non_int(value):
    with pytest.raises(TypeError):
        ensure_positive_int(value, name="cap")


def test_ensure_positive_int_returns_value():
    assert ensure_positive_int(100, name="cap") == 100


def test_ensure_positive_int_accepts_numpy_integers():
    value = ensure_positive_int(np.int64(100), name="cap")

    assert value == 100
    assert type(value) is int
    with pytest.raises(ValueError):
        ensure_positive_int(np.int32(0), name="cap")
    with pytest.raises(TypeError):
        ensure_positive_int(np.bool_(True), name="cap")
