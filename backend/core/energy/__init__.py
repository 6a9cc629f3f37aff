"""
Energy usage logic.

Exports: aggregation and CSV helpers
"""

from .aggregation import aggregate_energy_data, parse_period, period_key, summary_window
from .csv_io import (
    UploadedReading,
    parse_uploaded_csv,
    records_to_download_csv,
    records_to_training_csv,
)

__all__ = [
    "UploadedReading",
    "aggregate_energy_data",
    "parse_period",
    "parse_uploaded_csv",
    "period_key",
    "records_to_download_csv",
    "records_to_training_csv",
    "summary_window",
]
