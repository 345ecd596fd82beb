"""Aggregation of expense records into chart-ready series.

Every function here is pure: it reads the records it is given and returns new
series objects. Amounts are summed exactly and rounded to 2 decimal places once
per bucket, never per item.
"""
import logging
from collections import defaultdict
from datetime import date
from decimal import Context, Decimal, MAX_PREC, ROUND_HALF_UP, localcontext
from typing import Callable, Dict, Hashable, Iterable, List, Sequence

from models.chart import ChartSeries, FlatSeries, GroupedPoint, GroupedSeries, GroupingMode, SeriesPoint
from models.expense import CATEGORIES, ExpenseRecord

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')

# Sums and quantize stay exact for any finite float amount; the default 28-digit
# context raises InvalidOperation once a rounded total needs more digits
EXACT_CONTEXT = Context(prec=MAX_PREC, rounding=ROUND_HALF_UP)


def round_amount(total: Decimal) -> float:
    """Round an exact sum to 2 decimal places (half-up)."""
    with localcontext(EXACT_CONTEXT):
        return float(total.quantize(CENTS, rounding=ROUND_HALF_UP))


def _to_decimal(amount: float) -> Decimal:
    # str() keeps the amount as entered (0.1 -> Decimal('0.1'), not the binary expansion)
    return Decimal(str(amount))


def category_sort_key(category: str):
    """Canonical categories first in their fixed order, anything else after, by name."""
    if category in CATEGORIES:
        return (0, CATEGORIES.index(category), '')
    return (1, 0, category)


def day_label(day: date) -> str:
    return f"{day:%b} {day.day}, {day.year}"


def month_label(month_start: date) -> str:
    return f"{month_start:%b %Y}"


def _month_start(day: date) -> date:
    return day.replace(day=1)


def _sum_by(records: Iterable[ExpenseRecord], key: Callable[[ExpenseRecord], Hashable]) -> Dict[Hashable, Decimal]:
    totals: Dict[Hashable, Decimal] = defaultdict(Decimal)
    with localcontext(EXACT_CONTEXT):
        for record in records:
            totals[key(record)] += _to_decimal(record.amount)
    return totals


def _sum_by_bucket_and_category(
    records: Iterable[ExpenseRecord], bucket: Callable[[ExpenseRecord], Hashable]
) -> Dict[Hashable, Dict[str, Decimal]]:
    totals: Dict[Hashable, Dict[str, Decimal]] = defaultdict(lambda: defaultdict(Decimal))
    with localcontext(EXACT_CONTEXT):
        for record in records:
            totals[bucket(record)][record.category] += _to_decimal(record.amount)
    return totals


def aggregate_by_category(records: Sequence[ExpenseRecord]) -> List[SeriesPoint]:
    """Total per category present in the data, in canonical category order."""
    totals = _sum_by(records, lambda r: r.category)
    return [
        SeriesPoint(name=category, value=round_amount(totals[category]))
        for category in sorted(totals, key=category_sort_key)
    ]


def aggregate_by_day(records: Sequence[ExpenseRecord]) -> List[SeriesPoint]:
    """Total per calendar day, oldest first."""
    totals = _sum_by(records, lambda r: r.date)
    return [SeriesPoint(name=day_label(day), value=round_amount(totals[day])) for day in sorted(totals)]


def aggregate_by_month(records: Sequence[ExpenseRecord]) -> List[SeriesPoint]:
    """Total per calendar month, oldest first."""
    totals = _sum_by(records, lambda r: _month_start(r.date))
    return [SeriesPoint(name=month_label(month), value=round_amount(totals[month])) for month in sorted(totals)]


def aggregate_by_year(records: Sequence[ExpenseRecord]) -> List[SeriesPoint]:
    """Total per calendar year, oldest first."""
    totals = _sum_by(records, lambda r: r.date.year)
    return [SeriesPoint(name=str(year), value=round_amount(totals[year])) for year in sorted(totals)]


def aggregate_by_month_grouped(records: Sequence[ExpenseRecord]) -> List[GroupedPoint]:
    """
    Per month, one value for each canonical category (0 when nothing was spent),
    so every group has the same shape and colors line up across months.
    """
    totals = _sum_by_bucket_and_category(records, lambda r: _month_start(r.date))
    groups = []
    for month in sorted(totals):
        by_category = totals[month]
        # Canonical categories are zero-filled; unexpected ones are appended, not dropped
        categories = list(CATEGORIES) + sorted(c for c in by_category if c not in CATEGORIES)
        series = [SeriesPoint(name=c, value=round_amount(by_category.get(c, Decimal(0)))) for c in categories]
        groups.append(GroupedPoint(name=month_label(month), series=series))
    return groups


def aggregate_by_year_grouped(records: Sequence[ExpenseRecord]) -> List[GroupedPoint]:
    """
    Per year, one value for each category with spend that year. Unlike the
    monthly view, categories without spend are omitted.
    """
    totals = _sum_by_bucket_and_category(records, lambda r: r.date.year)
    groups = []
    for year in sorted(totals):
        by_category = totals[year]
        series = [
            SeriesPoint(name=c, value=round_amount(by_category[c]))
            for c in sorted(by_category, key=category_sort_key)
        ]
        groups.append(GroupedPoint(name=str(year), series=series))
    return groups


def aggregate(records: Sequence[ExpenseRecord], mode: GroupingMode) -> ChartSeries:
    """Chart series for the given grouping mode."""
    mode = GroupingMode(mode)
    logger.debug(f"Aggregating {len(records)} records by {mode.value}")
    if mode is GroupingMode.CATEGORY:
        return FlatSeries(points=aggregate_by_category(records))
    if mode is GroupingMode.DAY:
        return FlatSeries(points=aggregate_by_day(records))
    if mode is GroupingMode.MONTH:
        return GroupedSeries(points=aggregate_by_month_grouped(records))
    return GroupedSeries(points=aggregate_by_year_grouped(records))


def total_amount(records: Iterable[ExpenseRecord]) -> float:
    """Sum of all amounts, rounded to 2 decimal places."""
    with localcontext(EXACT_CONTEXT):
        total = sum((_to_decimal(r.amount) for r in records), Decimal(0))
    return round_amount(total)
