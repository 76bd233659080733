"""
Data processing: CSV → BookingRecord list, derived arrival dates, date-range filter.
Print a summary of the dataset: python -m src.data_processing
Filtered summary: python -m src.data_processing --start 2015-07-01 --end 2015-08-31
"""
from __future__ import annotations

import argparse
import io
import math
import sys
import warnings
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Union

import pandas as pd
from dateutil import parser as date_parser
from tqdm import tqdm

from src.utils import resolve_data_path, get_data_path

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# Columns mapped onto named BookingRecord fields; everything else lands in `extra`
KNOWN_COLUMNS = (
    "country",
    "adults",
    "children",
    "babies",
    "arrival_date_year",
    "arrival_date_month",
    "arrival_date_day_of_month",
)

DateBound = Union[date, datetime, str, None]


class LoadError(Exception):
    """The bookings CSV could not be read or parsed."""


class FilterError(Exception):
    """A filter pass was given input it cannot work with."""


@dataclass(frozen=True)
class BookingRecord:
    country: str = ""
    adults: Optional[int] = None
    children: Optional[int] = None
    babies: Optional[int] = None
    arrival_date_year: Optional[int] = None
    arrival_date_month: str = ""
    arrival_date_day_of_month: Optional[int] = None
    # None when the year/month/day triple is not a real calendar date
    arrival_date: Optional[date] = None
    extra: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({}), compare=False, repr=False,
    )

    @classmethod
    def from_row(cls, row: dict) -> "BookingRecord":
        """Build a record from one CSV row. Missing columns fall back to defaults."""
        year = parse_int(row.get("arrival_date_year"))
        month = _clean_str(row.get("arrival_date_month"))
        day = parse_int(row.get("arrival_date_day_of_month"))
        return cls(
            country=_clean_str(row.get("country")),
            adults=parse_int(row.get("adults")),
            children=parse_int(row.get("children")),
            babies=parse_int(row.get("babies")),
            arrival_date_year=year,
            arrival_date_month=month,
            arrival_date_day_of_month=day,
            arrival_date=derive_arrival_date(year, month, day),
            extra=MappingProxyType(
                {k: _clean_str(v) for k, v in row.items() if k not in KNOWN_COLUMNS}
            ),
        )

    @property
    def has_valid_date(self) -> bool:
        return self.arrival_date is not None


def _clean_str(value) -> str:
    # short rows come back from read_csv padded with NaN
    if value is None or pd.isna(value):
        return ""
    return str(value).strip()


def parse_int(value) -> Optional[int]:
    """Parse '2', ' 2 ', '2.0' → 2. Returns None for blanks, 'NA' and other junk."""
    s = _clean_str(value)
    if not s:
        return None
    try:
        return int(s)
    except ValueError:
        pass
    try:
        f = float(s)
    except ValueError:
        return None
    if math.isnan(f) or math.isinf(f):
        return None
    return int(f)


def month_index(month_name: str) -> Optional[int]:
    """Zero-based month index for a full English month name (case-sensitive)."""
    try:
        return MONTH_NAMES.index(month_name)
    except ValueError:
        return None


def derive_arrival_date(
    year: Optional[int],
    month_name: str,
    day: Optional[int],
) -> Optional[date]:
    """Combine year, month name and day into a date. Returns None if invalid."""
    idx = month_index(month_name)
    if year is None or idx is None or day is None:
        return None
    try:
        return date(year, idx + 1, day)
    except (ValueError, OverflowError):
        return None


def _records_from_frame(df: pd.DataFrame, verbose: bool = False) -> List[BookingRecord]:
    rows = df.to_dict("records")
    records = [
        BookingRecord.from_row(row)
        for row in tqdm(rows, desc="Rows", unit=" rows", disable=not verbose)
    ]
    if verbose:
        invalid = sum(1 for r in records if not r.has_valid_date)
        print(f"Parsed {len(records):,} bookings ({invalid:,} without a valid arrival date)")
    return records


def _read_csv(source) -> pd.DataFrame:
    # Every cell as text, no NA coercion: field parsing happens per record.
    # Over-long rows are kept and their surplus cells dropped.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", pd.errors.ParserWarning)
        return pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            index_col=False,
            engine="python",
            on_bad_lines=lambda bad_line: bad_line,
        )


def parse_bookings(text: str, verbose: bool = False) -> List[BookingRecord]:
    """Parse raw CSV text (header row first) into booking records."""
    try:
        df = _read_csv(io.StringIO(text))
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise LoadError(f"Could not parse bookings CSV: {e}") from e
    return _records_from_frame(df, verbose=verbose)


def load_bookings(path: Path, verbose: bool = False) -> List[BookingRecord]:
    """Read the bookings CSV at `path`. Raises LoadError if it can't be read."""
    path = Path(path)
    if not path.exists():
        raise LoadError(f"{path} not found. Place the bookings CSV there or set BOOKINGS_CSV_PATH.")
    try:
        df = _read_csv(path)
    except (OSError, UnicodeDecodeError, pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise LoadError(f"Could not read {path}: {e}") from e
    if verbose:
        print(f"Loaded {path} ({len(df.columns)} columns)")
    return _records_from_frame(df, verbose=verbose)


def parse_date_bound(value: DateBound) -> Optional[date]:
    """
    Turn a filter bound into a date. None means open bound: blank and
    unparseable strings are open, not an empty window.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            return date_parser.parse(s).date()
        except (ValueError, OverflowError):
            return None
    raise FilterError(f"Unsupported date bound: {value!r}")


def filter_by_date_range(
    records: Sequence[BookingRecord],
    start: DateBound = None,
    end: DateBound = None,
) -> List[BookingRecord]:
    """
    Records with start <= arrival_date <= end, in input order.
    Records without a valid arrival date never match.
    """
    if not isinstance(records, (list, tuple)):
        raise FilterError(f"Expected a list of bookings, got {type(records).__name__}")
    lo = parse_date_bound(start)
    hi = parse_date_bound(end)
    out = []
    for r in records:
        d = r.arrival_date
        if d is None:
            continue
        if lo is not None and d < lo:
            continue
        if hi is not None and d > hi:
            continue
        out.append(r)
    return out


def main() -> int:
    from src.aggregations import compute_aggregates

    parser = argparse.ArgumentParser(description="Summarise the hotel bookings CSV.")
    parser.add_argument("--csv", type=Path, help="Bookings CSV (default: BOOKINGS_CSV_PATH, else the sample).")
    parser.add_argument("--sample", action="store_true", help="Use the bundled sample CSV.")
    parser.add_argument("--start", help="Earliest arrival date (inclusive).")
    parser.add_argument("--end", help="Latest arrival date (inclusive).")
    parser.add_argument("--verbose", action="store_true", help="Show parsing progress.")
    args = parser.parse_args()

    if args.csv:
        path = args.csv
    elif args.sample:
        path = get_data_path(sample=True)
    else:
        path, _ = resolve_data_path()

    try:
        records = load_bookings(path, verbose=args.verbose)
        if args.start or args.end:
            records = filter_by_date_range(records, args.start, args.end)
    except (LoadError, FilterError) as e:
        print(e, file=sys.stderr)
        return 1

    agg = compute_aggregates(records)
    print(f"Bookings: {len(records):,}")
    print("\nBookings by month:")
    for month, n in zip(agg.monthly.categories, agg.monthly.values):
        print(f"  {month:<10} {n:>6,}")
    print("\nTravelers:")
    for name, total in agg.travelers.series:
        print(f"  {name:<10} {total:>6,}")
    print("\nTop countries:")
    top = sorted(zip(agg.countries.labels, agg.countries.values), key=lambda p: -p[1])[:10]
    for country, n in top:
        print(f"  {country:<10} {n:>6,}")
    if agg.daily.categories:
        print(f"\nArrival dates: {agg.daily.categories[0]} .. {agg.daily.categories[-1]} "
              f"({len(agg.daily.categories):,} distinct days)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
