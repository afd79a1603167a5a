"""Tests for the KPI chart builders."""

from src.dashboard.charts import average_time_figure, performance_figure, to_fragment, trend_figure
from src.dashboard.models import TechnicianPerformance, TrendPoint


def sample_performance():
    return [
        TechnicianPerformance(technician_name="Alice", jobs_completed=14, average_time=2.35),
        TechnicianPerformance(technician_name="Bob", jobs_completed=9, average_time=3.0),
    ]


def test_trend_figure_has_total_and_completed_lines():
    trends = [
        TrendPoint(date="2024-05-01", total_jobs=10, completed_jobs=7),
        TrendPoint(date="2024-05-02", total_jobs=12, completed_jobs=11),
    ]

    fig = trend_figure(trends)

    assert [trace.name for trace in fig.data] == ["Total Jobs", "Completed Jobs"]
    assert list(fig.data[0].x) == ["2024-05-01", "2024-05-02"]
    assert list(fig.data[0].y) == [10, 12]
    assert list(fig.data[1].y) == [7, 11]


def test_performance_figure():
    fig = performance_figure(sample_performance())

    assert fig.data[0].type == "bar"
    assert list(fig.data[0].x) == ["Alice", "Bob"]
    assert list(fig.data[0].y) == [14, 9]


def test_average_time_figure_labels():
    fig = average_time_figure(sample_performance())

    assert fig.data[0].type == "pie"
    assert list(fig.data[0].labels) == ["Alice: 2.4h", "Bob: 3.0h"]
    assert list(fig.data[0].values) == [2.35, 3.0]


def test_empty_figures_still_render():
    for fig in (trend_figure([]), performance_figure([]), average_time_figure([])):
        html = to_fragment(fig)
        assert html.startswith("<div")
        assert "<html" not in html
