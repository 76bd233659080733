"""
Booking aggregates behind the dashboard charts.

All four aggregates are pure functions of a record list and are recomputed
after every filter:
1. Daily series   - bookings per arrival date (line chart)
2. Country counts - bookings per country (pie chart)
3. Monthly series - bookings per arrival month, calendar order (area chart)
4. Traveler totals - adults / children / babies summed (bar chart)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Hashable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from src.data_processing import BookingRecord, MONTH_NAMES

TRAVELER_FIELDS = (("Adults", "adults"), ("Children", "children"), ("Babies", "babies"))

# "first_seen", "sorted", or an explicit sequence of labels giving the order
Ordering = Union[str, Sequence[Hashable]]


@dataclass
class SeriesResult:
    categories: List[str] = field(default_factory=list)
    values: List[int] = field(default_factory=list)


@dataclass
class LabelledResult:
    labels: List[str] = field(default_factory=list)
    values: List[int] = field(default_factory=list)


@dataclass
class BarResult:
    series: List[Tuple[str, int]] = field(default_factory=list)


@dataclass
class Aggregates:
    daily: SeriesResult
    countries: LabelledResult
    monthly: SeriesResult
    travelers: BarResult


def _is_record_list(records) -> bool:
    return isinstance(records, (list, tuple)) and len(records) > 0


def group_and_count(
    records: Sequence[BookingRecord],
    key: Callable[[BookingRecord], Optional[Hashable]],
    order: Ordering = "first_seen",
) -> Tuple[list, List[int]]:
    """
    Count records per key. Records whose key is None are skipped.

    order:
    - "first_seen": groups in order of first appearance
    - "sorted":     groups sorted by key
    - a sequence:   groups follow that sequence; keys not in it are dropped,
                    entries with no records are omitted (not zero-filled)
    """
    if not _is_record_list(records):
        return [], []
    keys = [k for k in (key(r) for r in records) if k is not None]
    if not keys:
        return [], []

    s = pd.Series(keys)
    counts = s.groupby(s, sort=False).size()

    if isinstance(order, str):
        if order == "sorted":
            counts = counts.sort_index()
        elif order != "first_seen":
            raise ValueError(f"Unknown ordering: {order!r}")
    else:
        counts = counts.reindex(list(order)).dropna()

    return list(counts.index), [int(v) for v in counts.values]


def daily_series(records: Sequence[BookingRecord]) -> SeriesResult:
    """Bookings per ISO arrival date, in chronological order."""
    cats, vals = group_and_count(
        records,
        lambda r: r.arrival_date.isoformat() if r.arrival_date else None,
        order="sorted",
    )
    return SeriesResult(categories=cats, values=vals)


def monthly_series(records: Sequence[BookingRecord]) -> SeriesResult:
    """Bookings per arrival month, January..December; months with no bookings left out."""
    cats, vals = group_and_count(
        records,
        lambda r: r.arrival_date_month if r.arrival_date else None,
        order=MONTH_NAMES,
    )
    return SeriesResult(categories=cats, values=vals)


def country_counts(records: Sequence[BookingRecord]) -> LabelledResult:
    labels, vals = group_and_count(records, lambda r: r.country or None)
    return LabelledResult(labels=labels, values=vals)


def traveler_totals(records: Sequence[BookingRecord]) -> BarResult:
    """Adults, Children, Babies summed over all records (missing counts as 0)."""
    if not _is_record_list(records):
        return BarResult()
    return BarResult(series=[
        (name, sum(getattr(r, attr) or 0 for r in records))
        for name, attr in TRAVELER_FIELDS
    ])


def compute_aggregates(records: Sequence[BookingRecord]) -> Aggregates:
    return Aggregates(
        daily=daily_series(records),
        countries=country_counts(records),
        monthly=monthly_series(records),
        travelers=traveler_totals(records),
    )
