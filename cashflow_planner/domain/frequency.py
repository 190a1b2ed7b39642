"""Gap statistics and frequency inference over irregular date series"""

import statistics
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from cashflow_planner.domain.models import Frequency, MONTHLY_MULTIPLIERS
from cashflow_planner.utils.date_utils import day_span, month_key

# Days per month when converting a day span into months of history
DAYS_PER_MONTH = 30

# Biweekly pays ~26 times a year, semi-monthly 24
BIWEEKLY_ANNUAL_RATE_THRESHOLD = 25

SEMI_MONTHLY_MONTH_SHARE = 0.7

# Gap stddev below this means charges land on a fixed calendar day
TIGHT_GAP_STDDEV = 5


@dataclass
class GapStatistics:
    """Day gaps between consecutive occurrences"""

    gaps: List[int]
    average_gap: float
    stddev_gap: float


def day_gaps(dates: List[date]) -> List[int]:
    """Consecutive day gaps of the dates in chronological order"""
    ordered = sorted(dates)
    return [(later - earlier).days for earlier, later in zip(ordered, ordered[1:])]


def gap_statistics(dates: List[date]) -> Optional[GapStatistics]:
    """Mean and population stddev of day gaps; None for fewer than 2 dates"""
    gaps = day_gaps(dates)
    if not gaps:
        return None
    return GapStatistics(
        gaps=gaps,
        average_gap=statistics.fmean(gaps),
        stddev_gap=statistics.pstdev(gaps),
    )


def coefficient_of_variation(values: List[float]) -> float:
    """Population stddev / mean (0 for empty input or a zero mean)"""
    if not values:
        return 0.0
    mean = statistics.fmean(values)
    if mean == 0:
        return 0.0
    return statistics.pstdev(values) / mean


def annualized_rate(dates: List[date]) -> float:
    """Occurrences per year implied by the observed span (0 for a zero span)"""
    months_spanned = day_span(dates) / DAYS_PER_MONTH
    if months_spanned <= 0:
        return 0.0
    return len(dates) / months_spanned * 12


def looks_semi_monthly(dates: List[date]) -> bool:
    """
    Fixed calendar days twice a month (e.g. the 1st and 15th).

    Requires exactly 2 distinct days-of-month and at least 70% of the
    covered calendar months holding exactly 2 occurrences.
    """
    distinct_days = {d.day for d in dates}
    if len(distinct_days) != 2:
        return False
    per_month = Counter(month_key(d) for d in dates)
    months_with_two = sum(1 for count in per_month.values() if count == 2)
    return months_with_two >= len(per_month) * SEMI_MONTHLY_MONTH_SHARE


def _classify_twice_monthly(dates: List[date]) -> Frequency:
    # Biweekly and semi-monthly gaps overlap; calendar days decide first,
    # then the yearly occurrence rate.
    if looks_semi_monthly(dates):
        return Frequency.SEMI_MONTHLY
    if annualized_rate(dates) > BIWEEKLY_ANNUAL_RATE_THRESHOLD:
        return Frequency.BIWEEKLY
    return Frequency.SEMI_MONTHLY


def infer_frequency(dates: List[date]) -> Optional[Frequency]:
    """
    Classify how often a cluster repeats from its day-gap distribution.

    Bands on the average gap:
    - < 10:        weekly
    - 10 - 18:     biweekly or semi-monthly (day-of-month pattern, then rate)
    - 18 - 25:     biweekly
    - 25 - 35:     monthly
    - 35 - 40:     monthly if gaps are tight (stddev < 5), else biweekly
    - 40 - 100:    quarterly
    - >= 100:      annual

    Returns None when there are fewer than 2 dates.
    """
    stats = gap_statistics(dates)
    if stats is None:
        return None

    avg_gap = stats.average_gap
    if avg_gap < 10:
        return Frequency.WEEKLY
    elif avg_gap < 18:
        return _classify_twice_monthly(dates)
    elif avg_gap < 25:
        return Frequency.BIWEEKLY
    elif avg_gap <= 35:
        return Frequency.MONTHLY
    elif avg_gap < 40:
        return Frequency.MONTHLY if stats.stddev_gap < TIGHT_GAP_STDDEV else Frequency.BIWEEKLY
    elif avg_gap < 100:
        return Frequency.QUARTERLY
    else:
        return Frequency.ANNUAL


def infer_check_frequency(dates: List[date]) -> Optional[Frequency]:
    """Checks are written weekly, biweekly or monthly; nothing else is considered"""
    stats = gap_statistics(dates)
    if stats is None:
        return None

    if stats.average_gap <= 8:
        return Frequency.WEEKLY
    if 20 <= stats.average_gap <= 35:
        return Frequency.MONTHLY
    return Frequency.BIWEEKLY


def monthly_equivalent(amount: float, frequency: Frequency) -> float:
    """Normalize a per-occurrence amount to a monthly rate"""
    return amount * MONTHLY_MULTIPLIERS[Frequency(frequency)]
