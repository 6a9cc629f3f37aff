"""
CSV reading and writing for usage data.

Covers the three CSV shapes the system handles: files users upload
(`Date,Usage` header), the download offered on the dashboard
(`Date,Usage`) and the training set exported for SageMaker (`date,usage`).

Dependencies: csv (stdlib)
System role: Usage data file formats
"""

import csv
import io
import logging
from dataclasses import dataclass
from typing import Iterable

from backend.models.energy import EnergyRecord

logger = logging.getLogger(__name__)

DOWNLOAD_HEADER = ("Date", "Usage")
TRAINING_HEADER = ("date", "usage")


@dataclass(frozen=True)
class UploadedReading:
    """One valid row of an uploaded file."""

    date: str
    usage: int


def _format_usage(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _write_rows(header: tuple[str, str], records: Iterable[EnergyRecord]) -> str:
    lines = [",".join(header)]
    lines.extend(f"{record.date},{_format_usage(record.energy_usage)}" for record in records)
    return "\n".join(lines)


def records_to_download_csv(records: Iterable[EnergyRecord]) -> str:
    """
    Render a user's readings for download.

    Args:
        records: Readings in storage order

    Returns:
        str: CSV text with a Date,Usage header
    """
    return _write_rows(DOWNLOAD_HEADER, records)


def records_to_training_csv(records: Iterable[EnergyRecord]) -> str:
    """
    Render all readings as the model training set, sorted by date.

    Args:
        records: Readings of all users

    Returns:
        str: CSV text with a date,usage header
    """
    return _write_rows(TRAINING_HEADER, sorted(records, key=lambda record: record.date))


def parse_uploaded_csv(content: str) -> tuple[list[UploadedReading], int]:
    """
    Parse an uploaded usage file.

    The first line is the header; columns are looked up by name
    (`Date`, `Usage`). Cells are trimmed and blank lines skipped. Rows
    without a date or with a non-numeric usage are skipped; usage is
    truncated to whole kWh.

    Args:
        content: File text

    Returns:
        tuple: (valid readings, number of rows skipped)
    """
    reader = csv.DictReader(io.StringIO(content.lstrip("\ufeff")), skipinitialspace=True)
    if reader.fieldnames:
        reader.fieldnames = [name.strip() for name in reader.fieldnames]

    readings = []
    skipped = 0
    for line_number, row in enumerate(reader, start=2):
        cells = {key: (value or "").strip() for key, value in row.items() if key}
        if not any(cells.values()):
            continue

        row_date = cells.get("Date", "")
        try:
            usage = int(float(cells.get("Usage", "")))
        except (ValueError, OverflowError):
            usage = None

        if not row_date or usage is None:
            logger.warning(
                "Skipping invalid CSV row",
                extra={"line_number": line_number, "row": str(cells)},
            )
            skipped += 1
            continue

        readings.append(UploadedReading(date=row_date, usage=usage))

    return readings, skipped
