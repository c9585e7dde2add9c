from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from calibration_eval.dataframe import (
    filter_to_selection,
    latest_snapshot,
    select_epochs,
)
from calibration_eval.utils import DataFrameValidationError


def _epoch_df(epochs) -> pd.DataFrame:
    return pd.DataFrame({"epoch": list(epochs), "metric": ["m"] * len(epochs)})


def test_select_epochs_250_epochs_cap_100():
    sel = select_epochs(range(1, 251), cap=100)

    assert sel.step == 2
    assert sel.max_epoch == 250
    assert sel.selected == tuple(range(1, 250, 2)) + (250,)
    assert len(sel.selected) == 126
    assert sel.is_downsampled


def test_select_epochs_keeps_everything_at_or_below_cap():
    for n in (1, 37, 100):
        sel = select_epochs(range(n), cap=100)
        assert sel.selected == tuple(range(n))
        assert not sel.is_downsampled


def test_select_epochs_always_contains_max_epoch():
    for n in (101, 150, 199, 301, 999, 1234):
        epochs = [e * 3 for e in range(n)]
        sel = select_epochs(epochs, cap=100)

        assert sel.max_epoch == max(epochs)
        assert sel.max_epoch in sel
        assert list(sel.selected) == sorted(sel.selected)
        assert len(set(sel.selected)) == len(sel.selected)
        assert len(sel.selected) <= 2 * 100 + 1


def test_select_epochs_from_dataframe_ignores_duplicates_and_order():
    df = _epoch_df([5, 3, 5, 1, 3, 9])

    sel = select_epochs(df)

    assert sel.selected == (1, 3, 5, 9)
    assert sel.total_epochs == 4
    assert sel.max_epoch == 9


def test_select_epochs_empty_table():
    sel = select_epochs(_epoch_df([]))

    assert sel.max_epoch == 0
    assert sel.selected == ()
    assert sel.total_epochs == 0


def test_select_epochs_rejects_invalid_cap_and_missing_column():
    with pytest.raises(ValueError):
        select_epochs([1, 2, 3], cap=0)
    with pytest.raises(DataFrameValidationError):
        select_epochs(pd.DataFrame({"metric": ["m"]}))


def test_filter_and_latest_snapshot():
    df = _epoch_df(list(range(1, 251)) * 2)
    sel = select_epochs(df, cap=100)

    filtered = filter_to_selection(df, sel)
    latest = latest_snapshot(df, sel)

    assert set(filtered["epoch"]) == set(sel.selected)
    assert len(filtered) == 2 * 126
    assert set(latest["epoch"]) == {250}
    assert len(latest) == 2


def test_latest_snapshot_computes_selection_when_omitted():
    df = _epoch_df([1, 2, 2, 3, 3, 3])

    assert len(latest_snapshot(df)) == 3
    assert latest_snapshot(_epoch_df([])).empty


def test_selection_to_dict():
    d = select_epochs([1, 2, 3]).to_dict()

    assert d["selected"] == [1, 2, 3]
    assert d["max_epoch"] == 3
    assert d["is_downsampled"] is False


def test_select_epochs_accepts_numpy_integer_cap():
    sel = select_epochs(range(1, 251), cap=np.int64(100))

    assert sel.step == 2
    assert type(sel.cap) is int
    assert sel.to_dict()["cap"] == 100
