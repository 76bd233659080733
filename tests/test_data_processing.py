import sys
import warnings
from datetime import date, datetime
from pathlib import Path

import pandas as pd
import pytest

from src.data_processing import (
    MONTH_NAMES,
    BookingRecord,
    FilterError,
    LoadError,
    derive_arrival_date,
    filter_by_date_range,
    load_bookings,
    main,
    parse_bookings,
    parse_int,
)

CSV_TEXT = """hotel,arrival_date_year,arrival_date_month,arrival_date_day_of_month,adults,children,babies,country
Resort Hotel,2015,July,1,2,0,0,PRT
Resort Hotel,2015,July,3,1,NA,0,GBR
City Hotel,2015,Sept,4,2,1,0,FRA
City Hotel,2016,February,30,2,0,1,
"""


def _record(y, m, d, **kw):
    row = {
        "arrival_date_year": str(y),
        "arrival_date_month": m,
        "arrival_date_day_of_month": str(d),
    }
    row.update(kw)
    return BookingRecord.from_row(row)


def test_derived_date_round_trips_for_every_month():
    for i, name in enumerate(MONTH_NAMES):
        d = derive_arrival_date(2016, name, 15)
        assert (d.year, d.month, d.day) == (2016, i + 1, 15)


def test_month_name_match_is_case_sensitive():
    assert derive_arrival_date(2015, "july", 1) is None
    assert derive_arrival_date(2015, "Jul", 1) is None


def test_impossible_calendar_date_is_invalid():
    assert derive_arrival_date(2016, "February", 30) is None
    assert derive_arrival_date(None, "February", 1) is None


def test_parse_int_defaults_to_none():
    assert parse_int("2") == 2
    assert parse_int(" 3 ") == 3
    assert parse_int("2.0") == 2
    assert parse_int("NA") is None
    assert parse_int("") is None
    assert parse_int("abc") is None
    assert parse_int(None) is None


def test_parse_bookings_keeps_malformed_rows():
    records = parse_bookings(CSV_TEXT)
    assert len(records) == 4

    first = records[0]
    assert first.arrival_date == date(2015, 7, 1)
    assert first.country == "PRT"
    assert first.adults == 2
    assert dict(first.extra) == {"hotel": "Resort Hotel"}

    assert records[1].children is None
    assert records[2].arrival_date is None  # unknown month name
    assert records[2].country == "FRA"
    assert records[3].arrival_date is None  # 30 February
    assert records[3].country == ""


def test_missing_columns_fall_back_to_defaults():
    records = parse_bookings("country,adults\nPRT,2\n")
    assert len(records) == 1
    r = records[0]
    assert r.country == "PRT"
    assert r.adults == 2
    assert r.children is None
    assert r.arrival_date_month == ""
    assert r.arrival_date is None


def test_short_rows_are_padded():
    records = parse_bookings("country,adults,children\nPRT,2\n")
    assert records[0].country == "PRT"
    assert records[0].children is None


def test_empty_text_raises_load_error():
    with pytest.raises(LoadError):
        parse_bookings("")


def test_load_bookings_missing_file(tmp_path: Path):
    with pytest.raises(LoadError):
        load_bookings(tmp_path / "nope.csv")


def test_load_bookings_empty_file(tmp_path: Path):
    p = tmp_path / "empty.csv"
    p.write_text("", encoding="utf-8")
    with pytest.raises(LoadError):
        load_bookings(p)


def test_load_bookings_from_file(tmp_path: Path):
    p = tmp_path / "bookings.csv"
    p.write_text(CSV_TEXT, encoding="utf-8")
    records = load_bookings(p)
    assert [r.country for r in records] == ["PRT", "GBR", "FRA", ""]


def test_bundled_sample_loads():
    root = Path(__file__).resolve().parents[1]
    records = load_bookings(root / "data" / "hotel_bookings_sample.csv")
    assert len(records) == 37
    assert all(r.has_valid_date for r in records)
    july_2015 = filter_by_date_range(records, "2015-07-01", "2015-07-31")
    assert len(july_2015) == 9


def test_filter_is_inclusive_and_stable():
    records = [
        _record(2015, "July", 3),
        _record(2015, "July", 1),
        _record(2015, "July", 2),
        _record(2015, "July", 4),
    ]
    out = filter_by_date_range(records, date(2015, 7, 1), date(2015, 7, 3))
    assert [r.arrival_date.day for r in out] == [3, 1, 2]


def test_filter_accepts_strings_and_datetimes():
    records = [_record(2015, "July", 1), _record(2015, "August", 1)]
    assert len(filter_by_date_range(records, "2015-07-01", "2015-07-01")) == 1
    assert len(filter_by_date_range(records, datetime(2015, 7, 2, 12, 0), None)) == 1


def test_blank_or_unparseable_bounds_are_open():
    records = [_record(2015, "July", 1), _record(2017, "August", 31)]
    assert filter_by_date_range(records, "", "") == records
    assert filter_by_date_range(records, None, None) == records
    assert filter_by_date_range(records, "garbage", "2016-01-01") == records[:1]


def test_filter_drops_records_without_valid_date():
    records = [_record(2015, "July", 1), _record(2015, "Julember", 1)]
    assert filter_by_date_range(records, None, None) == records[:1]


def test_reversed_window_is_empty():
    records = [_record(2015, "July", 1)]
    assert filter_by_date_range(records, "2015-08-01", "2015-06-01") == []


def test_filter_returns_subset_and_is_idempotent():
    records = parse_bookings(CSV_TEXT)
    once = filter_by_date_range(records, "2015-07-02", "2016-12-31")
    assert all(any(r is s for s in records) for r in once)
    twice = filter_by_date_range(once, "2015-07-02", "2016-12-31")
    assert twice == once


def test_filter_rejects_bad_input():
    with pytest.raises(FilterError):
        filter_by_date_range("not records", None, None)
    with pytest.raises(FilterError):
        filter_by_date_range([], 20150701, None)


def test_huge_year_or_day_degrades_to_invalid_date():
    header = "arrival_date_year,arrival_date_month,arrival_date_day_of_month,country\n"
    records = parse_bookings(
        header
        + "2015,July,99999999999999999999,GBR\n"
        + "1e30,July,1,PRT\n"
        + "2015,July,2,ESP\n"
    )
    assert [r.arrival_date for r in records] == [None, None, date(2015, 7, 2)]
    assert [r.country for r in records] == ["GBR", "PRT", "ESP"]


def test_record_extra_columns_are_read_only():
    record = parse_bookings(CSV_TEXT)[0]
    with pytest.raises(TypeError):
        record.extra["hotel"] = "City Hotel"
    assert record.extra["hotel"] == "Resort Hotel"


def test_over_long_rows_keep_leading_cells():
    with warnings.catch_warnings():
        warnings.simplefilter("error", pd.errors.ParserWarning)
        records = parse_bookings("country,adults\nPRT,2,surplus\nGBR,1\n")
    assert [r.country for r in records] == ["PRT", "GBR"]
    assert [r.adults for r in records] == [2, 1]


def test_cli_summary(tmp_path: Path, monkeypatch, capsys):
    p = tmp_path / "bookings.csv"
    p.write_text(CSV_TEXT, encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["data_processing", "--csv", str(p)])

    assert main() == 0
    out = capsys.readouterr().out
    assert "Bookings: 4" in out
    assert "Bookings by month:" in out
    assert "July" in out
    assert "Travelers:" in out
    assert "Adults" in out


def test_cli_filtered_summary(tmp_path: Path, monkeypatch, capsys):
    p = tmp_path / "bookings.csv"
    p.write_text(CSV_TEXT, encoding="utf-8")
    monkeypatch.setattr(
        sys, "argv",
        ["data_processing", "--csv", str(p), "--start", "2015-07-02", "--end", "2015-07-31"],
    )

    assert main() == 0
    assert "Bookings: 1" in capsys.readouterr().out


def test_cli_missing_file_exits_with_error(tmp_path: Path, monkeypatch, capsys):
    missing = tmp_path / "missing.csv"
    monkeypatch.setattr(sys, "argv", ["data_processing", "--csv", str(missing)])

    assert main() == 1
    captured = capsys.readouterr()
    assert "missing.csv" in captured.err
    assert captured.out == ""
