"""
Dashboard state: loaded bookings, the current filtered view, carousel position
and error state. The Streamlit page keeps one instance in session_state.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from src.aggregations import Aggregates, compute_aggregates
from src.charts import ChartCarousel, ChartConfig, build_chart_configs
from src.data_processing import (
    BookingRecord,
    DateBound,
    LoadError,
    filter_by_date_range,
    load_bookings,
)

LOAD_ERROR_MESSAGE = "Failed to load data"
FILTER_ERROR_MESSAGE = "Error filtering data"


class Dashboard:
    def __init__(self) -> None:
        self.records: List[BookingRecord] = []
        self.filtered: List[BookingRecord] = []
        self.carousel = ChartCarousel()
        self.loading = True
        self.error: Optional[str] = None
        self.filter_error: Optional[str] = None
        self._aggregates: Optional[Aggregates] = None

    def set_records(self, records: List[BookingRecord]) -> None:
        self.records = list(records or [])
        self._set_filtered(self.records)
        self.error = None
        self.loading = False

    def load(self, path: Path, verbose: bool = False) -> bool:
        """Load the CSV. On failure the dashboard goes into its terminal error state."""
        try:
            records = load_bookings(path, verbose=verbose)
        except LoadError as e:
            print(f"Error loading data: {e}", file=sys.stderr)
            self.error = LOAD_ERROR_MESSAGE
            self.loading = False
            return False
        self.set_records(records)
        return True

    def _set_filtered(self, records: List[BookingRecord]) -> None:
        self.filtered = records
        self._aggregates = None

    def apply_filter(self, start: DateBound, end: DateBound) -> bool:
        """
        Replace the filtered view with records arriving in [start, end].
        A failing filter leaves the previous view in place and sets filter_error.
        """
        try:
            filtered = filter_by_date_range(self.records, start, end)
            aggregates = compute_aggregates(filtered)
        except Exception as e:
            print(f"Error filtering data: {e}", file=sys.stderr)
            self.filter_error = FILTER_ERROR_MESSAGE
            return False
        self._set_filtered(filtered)
        self._aggregates = aggregates
        self.filter_error = None
        return True

    @property
    def has_data(self) -> bool:
        return len(self.filtered) > 0

    @property
    def aggregates(self) -> Aggregates:
        if self._aggregates is None:
            self._aggregates = compute_aggregates(self.filtered)
        return self._aggregates

    def next_chart(self) -> int:
        # navigation is disabled while there is nothing to show
        if self.has_data:
            self.carousel.next()
        return self.carousel.index

    def previous_chart(self) -> int:
        if self.has_data:
            self.carousel.previous()
        return self.carousel.index

    def chart_configs(self) -> List[ChartConfig]:
        return build_chart_configs(self.aggregates)

    def current_chart(self) -> Optional[ChartConfig]:
        """Config for the carousel's current chart, or None if the filtered view is empty."""
        if not self.has_data:
            return None
        return self.chart_configs()[self.carousel.index]
