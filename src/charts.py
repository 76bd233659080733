"""
Chart configs for the dashboard carousel and their plotly figures.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

import plotly.graph_objects as go

from src.aggregations import Aggregates

CHART_KINDS = ("line", "pie", "area", "bar")

CHART_HEIGHT = 350
NO_DATA_TEXT = "No data available"
NO_DATA_FOR_PERIOD_TEXT = "No data available for the selected period"

# ── colour palette ──────────────────────────────────────────────────────────
ACCENT      = "#6C5CE7"
ACCENT_LITE = "#A29BFE"
BAR_COLORS  = ["#6C5CE7", "#00B894", "#FDCB6E"]


@dataclass
class ChartConfig:
    """One carousel slide: chart kind, series payload and display options."""
    kind: str
    series: List[Dict[str, Any]] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not any(s.get("data") for s in self.series)

    @property
    def title(self) -> str:
        return self.options.get("title", {}).get("text", "")


def step_index(index: int, delta: int, size: int = len(CHART_KINDS)) -> int:
    return (index + delta) % size


@dataclass
class ChartCarousel:
    index: int = 0
    size: int = len(CHART_KINDS)

    def next(self) -> int:
        self.index = step_index(self.index, 1, self.size)
        return self.index

    def previous(self) -> int:
        self.index = step_index(self.index, -1, self.size)
        return self.index

    @property
    def kind(self) -> str:
        return CHART_KINDS[self.index]


def _line_config(agg: Aggregates) -> ChartConfig:
    daily = agg.daily
    return ChartConfig(
        kind="line",
        series=[{"name": "Bookings", "data": daily.values}] if daily.values else [],
        options={
            "chart": {"type": "line", "height": CHART_HEIGHT},
            "xaxis": {"categories": daily.categories, "title": {"text": "Date"}},
            "yaxis": {"title": {"text": "Number of Bookings"}},
            "noData": {"text": NO_DATA_TEXT},
        },
    )


def _pie_config(agg: Aggregates) -> ChartConfig:
    countries = agg.countries
    return ChartConfig(
        kind="pie",
        series=[{"name": "Bookings", "data": countries.values}] if countries.values else [],
        options={
            "chart": {"type": "pie", "height": CHART_HEIGHT},
            "labels": countries.labels,
            "title": {"text": "Bookings by Country", "align": "center"},
            "noData": {"text": NO_DATA_TEXT},
        },
    )


def _area_config(agg: Aggregates) -> ChartConfig:
    monthly = agg.monthly
    return ChartConfig(
        kind="area",
        series=[{"name": "Monthly Bookings", "data": monthly.values}] if monthly.values else [],
        options={
            "chart": {"type": "area", "height": CHART_HEIGHT},
            "xaxis": {"categories": monthly.categories, "title": {"text": "Month"}},
            "yaxis": {"title": {"text": "Number of Bookings"}},
            "title": {"text": "Monthly Booking Trend", "align": "center"},
            "noData": {"text": NO_DATA_TEXT},
        },
    )


def _bar_config(agg: Aggregates) -> ChartConfig:
    return ChartConfig(
        kind="bar",
        series=[{"name": name, "data": [total]} for name, total in agg.travelers.series],
        options={
            "chart": {"type": "bar", "height": CHART_HEIGHT},
            "plotOptions": {"bar": {"horizontal": False, "columnWidth": "55%"}},
            "xaxis": {"categories": ["Traveler Types"], "title": {"text": "Traveler Category"}},
            "yaxis": {"title": {"text": "Number of Travelers"}},
            "title": {"text": "Traveler Demographics", "align": "center"},
            "noData": {"text": NO_DATA_TEXT},
            "dataLabels": {"enabled": True},
            "legend": {"position": "top"},
        },
    )


_BUILDERS = {
    "line": _line_config,
    "pie": _pie_config,
    "area": _area_config,
    "bar": _bar_config,
}


def build_chart_configs(agg: Aggregates) -> List[ChartConfig]:
    """One config per chart kind, in carousel order."""
    return [_BUILDERS[kind](agg) for kind in CHART_KINDS]


def _axis_title(options: Dict[str, Any], axis: str) -> str:
    return options.get(axis, {}).get("title", {}).get("text", "")


def build_figure(config: ChartConfig) -> go.Figure:
    """Render a ChartConfig as a plotly figure. Empty configs get a 'no data' annotation."""
    opts = config.options
    fig = go.Figure()

    if config.is_empty:
        fig.add_annotation(
            text=opts.get("noData", {}).get("text", NO_DATA_TEXT),
            showarrow=False, font=dict(size=16),
            xref="paper", yref="paper", x=0.5, y=0.5,
        )
        fig.update_layout(
            xaxis=dict(visible=False), yaxis=dict(visible=False),
            height=CHART_HEIGHT,
        )
        return fig

    if config.kind in ("line", "area"):
        categories = opts["xaxis"]["categories"]
        for s in config.series:
            fig.add_trace(go.Scatter(
                x=categories, y=s["data"], name=s["name"],
                mode="lines+markers" if config.kind == "line" else "lines",
                fill="tozeroy" if config.kind == "area" else None,
                line=dict(color=ACCENT, width=3),
                fillcolor="rgba(108,92,231,.25)" if config.kind == "area" else None,
            ))
        fig.update_layout(
            xaxis_title=_axis_title(opts, "xaxis"),
            yaxis_title=_axis_title(opts, "yaxis"),
        )

    elif config.kind == "pie":
        fig.add_trace(go.Pie(
            labels=opts["labels"], values=config.series[0]["data"],
            textinfo="label+percent",
        ))

    elif config.kind == "bar":
        categories = opts["xaxis"]["categories"]
        bar_opts = opts.get("plotOptions", {}).get("bar", {})
        show_labels = opts.get("dataLabels", {}).get("enabled", False)
        for i, s in enumerate(config.series):
            fig.add_trace(go.Bar(
                x=categories, y=s["data"], name=s["name"],
                marker_color=BAR_COLORS[i % len(BAR_COLORS)],
                text=s["data"] if show_labels else None,
                textposition="outside" if show_labels else None,
            ))
        fig.update_layout(
            barmode="group",
            bargap=1 - float(bar_opts.get("columnWidth", "55%").rstrip("%")) / 100,
            xaxis_title=_axis_title(opts, "xaxis"),
            yaxis_title=_axis_title(opts, "yaxis"),
        )
        if opts.get("legend", {}).get("position") == "top":
            fig.update_layout(legend=dict(orientation="h", yanchor="bottom", y=1.02))

    else:
        raise ValueError(f"Unknown chart kind: {config.kind!r}")

    if config.title:
        fig.update_layout(title=dict(text=config.title, x=0.5))
    fig.update_layout(
        height=opts.get("chart", {}).get("height", CHART_HEIGHT),
        margin=dict(t=50),
    )
    return fig
