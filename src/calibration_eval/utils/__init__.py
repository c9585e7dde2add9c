"""
Utility helpers for the calibration-eval package.

Currently includes:
    - DataFrame and parameter validation utilities
"""

from .validation import (
    DataFrameValidationError,
    ensure_columns_present,
    ensure_positive_int,
)

__all__ = [
    "DataFrameValidationError",
    "ensure_columns_present",
    "ensure_positive_int",
]
