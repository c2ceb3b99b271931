"""Tests for the highlighted scatter chart."""
from __future__ import annotations

import numpy as np
import pytest

from sba_plots import chart_scatter, fit_line, SUBSET_PALETTE
from sba_shared import PlottingError

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_fit_line_recovers_slope():
    x = np.array([0.0, 10.0, 20.0, 30.0, np.nan])
    y = np.array([80.0, 70.0, 60.0, 50.0, 10.0])
    slope, intercept, r2 = fit_line(x, y)
    assert slope == pytest.approx(-1.0)
    assert intercept == pytest.approx(80.0)
    assert r2 == pytest.approx(1.0)


def test_fit_line_needs_two_distinct_x():
    assert fit_line(np.array([5.0]), np.array([5.0])) is None
    assert fit_line(np.array([5.0, 5.0]), np.array([1.0, 2.0])) is None


def test_palette_covers_a_full_page():
    assert len(SUBSET_PALETTE) >= 38


def test_chart_scatter_writes_png(tmp_path):
    out = tmp_path / "charts" / "SBA Test Schools 8th Grade Math 2015.png"
    result = chart_scatter(
        [10.0, 40.0, 70.0, 90.0], [80.0, 60.0, np.nan, 30.0],
        title="Title \n second line", x_label="x", y_label="y",
        subset_x=[40.0], subset_y=[60.0], show_subset=True,
        show_legend=True, legend=["Test Middle"], show_fitted_line=True,
        save_plot_filename=out, save_plot=True,
    )
    assert result == out
    assert out.read_bytes()[:8] == PNG_MAGIC


def test_chart_scatter_without_fit_points(tmp_path, capsys):
    out = tmp_path / "one.png"
    chart_scatter([50.0], [50.0], "t", "x", "y", show_fitted_line=True,
                  save_plot_filename=out, save_plot=True)
    assert out.exists()
    assert "[WARN]" in capsys.readouterr().out


def test_mismatched_population_raises(tmp_path):
    with pytest.raises(PlottingError):
        chart_scatter([1.0, 2.0], [1.0], "t", "x", "y",
                      save_plot_filename=tmp_path / "a.png", save_plot=True)


def test_mismatched_legend_raises(tmp_path):
    with pytest.raises(PlottingError):
        chart_scatter([1.0, 2.0], [1.0, 2.0], "t", "x", "y",
                      subset_x=[1.0, 2.0], subset_y=[1.0, 2.0], show_subset=True,
                      show_legend=True, legend=["only one"],
                      save_plot_filename=tmp_path / "a.png", save_plot=True)


def test_save_without_filename_raises():
    with pytest.raises(PlottingError):
        chart_scatter([1.0], [1.0], "t", "x", "y", save_plot=True)


def test_unwritable_path_raises(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(PlottingError):
        chart_scatter([1.0, 2.0], [1.0, 2.0], "t", "x", "y",
                      save_plot_filename=blocker / "chart.png", save_plot=True)
