from pathlib import Path

from src.dashboard import Dashboard, FILTER_ERROR_MESSAGE, LOAD_ERROR_MESSAGE

CSV_TEXT = """arrival_date_year,arrival_date_month,arrival_date_day_of_month,adults,children,babies,country
2015,July,1,2,0,0,PRT
2015,July,20,1,1,0,GBR
2015,September,4,2,0,0,FRA
"""


def _loaded(tmp_path: Path) -> Dashboard:
    p = tmp_path / "bookings.csv"
    p.write_text(CSV_TEXT, encoding="utf-8")
    dash = Dashboard()
    assert dash.load(p)
    return dash


def test_load_failure_is_terminal(tmp_path: Path):
    dash = Dashboard()
    assert not dash.load(tmp_path / "missing.csv")
    assert dash.error == LOAD_ERROR_MESSAGE
    assert dash.loading is False
    assert dash.current_chart() is None


def test_load_shows_everything(tmp_path: Path):
    dash = _loaded(tmp_path)
    assert dash.error is None
    assert dash.loading is False
    assert len(dash.records) == 3
    assert dash.filtered == dash.records
    assert dash.current_chart().kind == "line"


def test_filter_recomputes_charts(tmp_path: Path):
    dash = _loaded(tmp_path)
    assert dash.apply_filter("2015-07-01", "2015-07-31")
    assert len(dash.filtered) == 2
    assert dash.aggregates.monthly.categories == ["July"]


def test_failed_filter_keeps_previous_view(tmp_path: Path):
    dash = _loaded(tmp_path)
    dash.apply_filter("2015-07-01", "2015-07-31")
    before = dash.filtered

    assert not dash.apply_filter(12345, None)
    assert dash.filter_error == FILTER_ERROR_MESSAGE
    assert dash.filtered is before

    assert dash.apply_filter(None, None)
    assert dash.filter_error is None
    assert len(dash.filtered) == 3


def test_navigation(tmp_path: Path):
    dash = _loaded(tmp_path)
    assert dash.previous_chart() == 3
    assert dash.current_chart().kind == "bar"
    assert dash.next_chart() == 0
    assert dash.next_chart() == 1
    assert dash.current_chart().kind == "pie"


def test_empty_period_shows_no_chart(tmp_path: Path):
    dash = _loaded(tmp_path)
    dash.next_chart()
    dash.apply_filter("2020-01-01", "2020-12-31")
    assert not dash.has_data
    assert dash.current_chart() is None
    # navigation disabled while empty
    assert dash.next_chart() == 1
    assert dash.previous_chart() == 1
