"""
Usage summary aggregation.

Groups a user's readings into daily, weekly or monthly buckets and reports
total, mean and per-source totals for each bucket. Also computes the date
window each summary period covers.

Dependencies: backend.models.energy
System role: Summary computation behind GET /energy/summary
"""

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable

from backend.core.exceptions import ValidationError
from backend.models.energy import AggregatedUsage, EnergyRecord, SummaryPeriod

logger = logging.getLogger(__name__)

# Days covered by the daily and weekly summaries; monthly covers 12 months.
WINDOW_DAYS = {
    SummaryPeriod.DAILY: 7,
    SummaryPeriod.WEEKLY: 28,
}
MONTHLY_WINDOW_MONTHS = 12


def parse_period(value: str | None) -> SummaryPeriod:
    """
    Parse the `period` query parameter.

    Args:
        value: Raw parameter, any casing

    Returns:
        SummaryPeriod: Parsed period

    Raises:
        ValidationError: Missing or unknown period
    """
    if not value:
        raise ValidationError(
            "Missing required query parameter: period (daily/weekly/monthly)",
            field="period",
        )
    try:
        return SummaryPeriod(value.lower())
    except ValueError as e:
        raise ValidationError(
            "Invalid period. Must be daily, weekly, or monthly",
            field="period",
        ) from e


def _months_before(day: date, months: int) -> date:
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    # Clamp to the last day of the target month
    next_month = date(year + (month == 12), month % 12 + 1, 1)
    last_day = (next_month - timedelta(days=1)).day
    return date(year, month, min(day.day, last_day))


def summary_window(period: SummaryPeriod, today: date) -> tuple[str, str]:
    """
    Date range queried for a summary, ending today.

    Args:
        period: Summary period
        today: Current date

    Returns:
        tuple[str, str]: (start_date, end_date) as YYYY-MM-DD
    """
    if period is SummaryPeriod.MONTHLY:
        start = _months_before(today, MONTHLY_WINDOW_MONTHS)
    else:
        start = today - timedelta(days=WINDOW_DAYS[period])
    return start.isoformat(), today.isoformat()


def _reading_day(record_date: str) -> date:
    # Accepts unpadded fields ("2024-1-5") and a trailing time part
    return datetime.strptime(record_date.split("T", 1)[0].strip(), "%Y-%m-%d").date()


def period_key(record_date: str, period: SummaryPeriod) -> str:
    """
    Bucket key of a reading date.

    Daily buckets are the date itself, weekly buckets the Monday starting
    the ISO week, monthly buckets YYYY-MM.

    Args:
        record_date: Reading date YYYY-MM-DD (zero padding optional)
        period: Summary period

    Returns:
        str: Bucket key

    Raises:
        ValueError: Date cannot be parsed (weekly and monthly only)
    """
    if period is SummaryPeriod.DAILY:
        return record_date

    day = _reading_day(record_date)
    if period is SummaryPeriod.WEEKLY:
        return (day - timedelta(days=day.weekday())).isoformat()
    return f"{day.year:04d}-{day.month:02d}"


def whole_number(value: float) -> int | float:
    """Return value as int when it has no fractional part."""
    return int(value) if float(value).is_integer() else value


def aggregate_energy_data(
    records: Iterable[EnergyRecord],
    period: SummaryPeriod,
) -> list[AggregatedUsage]:
    """
    Aggregate readings per period.

    Readings whose date cannot be bucketed are logged and left out.

    Args:
        records: Readings of one user
        period: Summary period

    Returns:
        list[AggregatedUsage]: One entry per bucket, sorted by bucket key
    """
    grouped: dict[str, list[EnergyRecord]] = defaultdict(list)
    for record in records:
        try:
            key = period_key(record.date, period)
        except ValueError:
            logger.warning(
                "Skipping reading with unparseable date",
                extra={"user_id": record.user_id, "reading_date": record.date},
            )
            continue
        grouped[key].append(record)

    summary = []
    for key, items in grouped.items():
        breakdown: dict[str, float] = defaultdict(float)
        total = 0.0
        for item in items:
            total += item.energy_usage
            breakdown[item.source] += item.energy_usage

        summary.append(
            AggregatedUsage(
                period=key,
                totalUsage=whole_number(total),
                avgUsage=whole_number(total / len(items)),
                sourceBreakdown={source: whole_number(value) for source, value in breakdown.items()},
            )
        )

    return sorted(summary, key=lambda entry: entry.period)
