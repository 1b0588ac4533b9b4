"""Plotting helpers for trajectories and enrichment experiments."""

from __future__ import annotations

from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
import pandas as pd

if TYPE_CHECKING:
    from collections.abc import Sequence

    from befw.simulate import Solution

__all__ = ["plot_enrichment", "plot_trajectory"]

ENRICHMENT_PANELS = (
    ("B", "Total Biomass"),
    ("G", "Total Net Growth G\n(mean over the last steps)"),
    ("P", "Persistence"),
)


def plot_trajectory(
    solution: Solution,
    ax: plt.Axes | None = None,
    ylims: tuple[float, float] | None = None,
    title: str | None = None,
    labels: Sequence[str] | None = None,
) -> plt.Axes:
    """
    Plot species biomass against time.

    Parameters
    ----------
    solution
        Simulated trajectory
    ax
        Axes to draw on (a new figure is created if omitted)
    ylims
        y-axis limits
    title
        Axes title
    labels
        Legend labels (default: species names)

    Returns
    -------
    plt.Axes
        The axes drawn on
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 4))

    labels = list(labels) if labels is not None else list(solution.species)
    for column, label in zip(solution.B.T, labels):
        ax.plot(solution.t, column, label=label)

    ax.set_xlabel("Time")
    ax.set_ylabel("Species biomass")
    if ylims is not None:
        ax.set_ylim(*ylims)
    if title is not None:
        ax.set_title(title)
    ax.legend(loc="center left", bbox_to_anchor=(1.0, 0.5))
    return ax


def plot_enrichment(
    df: pd.DataFrame, axes: Sequence[plt.Axes] | None = None
) -> plt.Figure:
    """
    Scatter total biomass, total net growth and persistence against K.

    Rows with NaN statistics (failed runs) are left out of the panels.

    Parameters
    ----------
    df
        Sweep table with columns ``K``, ``B``, ``G`` and ``P``
    axes
        Three axes to draw on (a new 1 x 3 figure is created if omitted)

    Returns
    -------
    plt.Figure
        The figure drawn on
    """
    missing = {"K", "B", "G", "P"} - set(df.columns)
    if missing:
        msg = f"Sweep table is missing columns: {sorted(missing)}"
        raise KeyError(msg)

    if axes is None:
        fig, axes = plt.subplots(1, 3, figsize=(12, 3.5))
    else:
        fig = axes[0].figure

    for ax, (column, title) in zip(axes, ENRICHMENT_PANELS):
        ax.scatter(df["K"], df[column], c="grey", s=9, linewidths=0)
        ax.set_title(title, fontsize=8)
        ax.set_xlabel("$K$")
        ax.grid(True, alpha=0.3)
        if column == "P":
            ax.set_ylim(0, 1)

    fig.tight_layout()
    return fig
