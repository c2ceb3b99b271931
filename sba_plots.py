"""
Scatter chart with a highlighted subset of points.

The full population is drawn in a muted color, the highlighted schools on
top with one color and legend entry each, and an OLS fitted line over the
full population.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.lines import Line2D
from scipy import stats

from sba_shared import HIGHLIGHT_COLOR, PlottingError

# 40 distinct colors, so a full page of schools never repeats one
SUBSET_PALETTE = list(matplotlib.colormaps["tab20"].colors) + list(matplotlib.colormaps["tab20b"].colors)
FIT_LINE_COLOR = "#DC143C"  # Crimson


def fit_line(x: np.ndarray, y: np.ndarray):
    """OLS fit over finite points; returns (slope, intercept, r_squared) or None."""
    mask = np.isfinite(x) & np.isfinite(y)
    xs, ys = x[mask], y[mask]
    if len(xs) < 2 or np.ptp(xs) == 0:
        return None
    res = stats.linregress(xs, ys)
    return float(res.slope), float(res.intercept), float(res.rvalue ** 2)


def chart_scatter(
    x: Sequence[float],
    y: Sequence[float],
    title: str,
    x_label: str,
    y_label: str,
    subset_x: Optional[Sequence[float]] = None,
    subset_y: Optional[Sequence[float]] = None,
    show_subset: bool = False,
    color: str = HIGHLIGHT_COLOR,
    show_legend: bool = False,
    legend: Optional[Sequence[str]] = None,
    show_fitted_line: bool = False,
    save_plot_filename: Optional[Path] = None,
    save_plot: bool = False,
) -> Optional[Path]:
    """
    Draw a percentage-vs-percentage scatter chart.

    Args:
        x, y: Full population coordinates (background points)
        title: Chart title
        x_label, y_label: Axis labels
        subset_x, subset_y: Coordinates of the highlighted points
        show_subset: Draw the highlighted points
        color: Color of the background points
        show_legend: Add one legend entry per highlighted point
        legend: Labels for the highlighted points
        show_fitted_line: Draw the OLS line fitted over the full population
        save_plot_filename: PNG output path
        save_plot: Save to ``save_plot_filename`` instead of showing the figure

    Returns:
        The written path when saving, otherwise None

    Raises:
        PlottingError: On mismatched inputs or if the image can't be written
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if x.shape != y.shape:
        raise PlottingError(f"x and y lengths differ ({len(x)} vs {len(y)})")

    sx = np.asarray(subset_x if subset_x is not None else [], dtype=float)
    sy = np.asarray(subset_y if subset_y is not None else [], dtype=float)
    labels = list(legend) if legend is not None else []
    if show_subset:
        if sx.shape != sy.shape:
            raise PlottingError(f"subset x and y lengths differ ({len(sx)} vs {len(sy)})")
        if show_legend and labels and len(labels) != len(sx):
            raise PlottingError(f"{len(labels)} legend labels for {len(sx)} highlighted points")
    if save_plot and save_plot_filename is None:
        raise PlottingError("save_plot requested without a filename")

    fig, ax = plt.subplots(figsize=(14, 8))
    try:
        ax.scatter(x, y, c=color, s=40, alpha=0.8, edgecolors="none", zorder=2)

        handles = []
        if show_fitted_line:
            fit = fit_line(x, y)
            if fit is None:
                print("[WARN] Not enough points to fit a trend line")
            else:
                slope, intercept, r2 = fit
                xs = np.array([0.0, 100.0])
                ax.plot(xs, intercept + slope * xs, color=FIT_LINE_COLOR, linestyle="--",
                        linewidth=1.5, zorder=3)
                handles.append(Line2D([0], [0], color=FIT_LINE_COLOR, linestyle="--",
                                      linewidth=1.5, label=f"Fitted line (R² = {r2:.2f})"))

        if show_subset:
            for i, (px, py) in enumerate(zip(sx, sy)):
                c = SUBSET_PALETTE[i % len(SUBSET_PALETTE)]
                ax.scatter([px], [py], color=c, s=90, edgecolors="black", linewidth=0.6, zorder=4)
                if show_legend and labels:
                    handles.append(Line2D([0], [0], marker="o", linestyle="", markerfacecolor=c,
                                          markeredgecolor="black", markersize=8, label=str(labels[i])))

        ax.set_xlim(0, 100)
        ax.set_ylim(0, 100)
        ax.set_title(title, fontsize=13)
        ax.set_xlabel(x_label, fontsize=11)
        ax.set_ylabel(y_label, fontsize=11)
        ax.grid(True, alpha=0.3)
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)

        if show_legend and handles:
            ax.legend(handles=handles, loc="upper left", bbox_to_anchor=(1.01, 1.0),
                      fontsize=8, frameon=False)

        plt.tight_layout()

        if not save_plot:
            plt.show()
            return None

        out_path = Path(save_plot_filename)
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(out_path, dpi=150, bbox_inches="tight")
        except (OSError, ValueError) as e:
            raise PlottingError(f"Could not write {out_path}: {e}") from e
        return out_path
    finally:
        plt.close(fig)
