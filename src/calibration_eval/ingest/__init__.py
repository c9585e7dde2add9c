"""
Ingestion of calibration training logs into canonical DataFrames.
"""

from .training_log import MIN_FIELDS, RAW_FIELDS, parse_training_log, read_training_log

__all__ = [
    "MIN_FIELDS",
    "RAW_FIELDS",
    "parse_training_log",
    "read_training_log",
]
