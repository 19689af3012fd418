import os
from typing import IO, List, Optional

import matplotlib.pyplot as plt

from .sir import TimeSeries


def _save_or_show(save_path: Optional[str]) -> None:
    if save_path:
        directory = os.path.dirname(str(save_path))
        if directory:
            os.makedirs(directory, exist_ok=True)
        plt.savefig(save_path, dpi=300, bbox_inches="tight")
        plt.close()
    else:
        plt.show()
        plt.close()


def _plot_sir_curves(ax, result: TimeSeries, title: str = None, linestyle: str = "-") -> None:
    """
    Helper function to plot SIR curves on a given axes.
    """
    colors = {"S": "blue", "I": "red", "R": "green"}
    suffix = f" - {result.label}" if result.label else ""

    ax.plot(result.t, result.S, color=colors["S"], linestyle=linestyle,
            label=f"Susceptible (S){suffix}", linewidth=2)
    ax.plot(result.t, result.I, color=colors["I"], linestyle=linestyle,
            label=f"Infected (I){suffix}", linewidth=2)
    ax.plot(result.t, result.R, color=colors["R"], linestyle=linestyle,
            label=f"Recovered (R){suffix}", linewidth=2)

    if title:
        ax.set_title(title, fontsize=12, fontweight="bold")

    ax.set_xlabel("Time (days)")
    ax.set_ylabel("Number of people")
    ax.legend()
    ax.grid(True, alpha=0.3)


def _info_text(result: TimeSeries) -> str:
    info_text = f"Peak I: {result.peak_infected:.1f}\n"
    info_text += f"Total infected: {result.total_infected:.1f}\n"
    info_text += f"Duration: {result.epidemic_duration:.1f} days"
    return info_text


def plot_single_result(
    result: TimeSeries, title: str = None, save_path: str = None
) -> None:
    """
    Creates a simple plot of a single SIR time series.

    :param result: TimeSeries to visualize
    :param title: Optional custom title
    :param save_path: Optional path to save the plot. If None, displays the plot.
    """
    if title is None:
        title = f"SIR Model - {result.label}" if result.label else "SIR Model"

    fig, ax = plt.subplots(figsize=(10, 6))
    _plot_sir_curves(ax, result, title)

    ax.text(
        0.98,
        0.98,
        _info_text(result),
        transform=ax.transAxes,
        ha="right",
        va="top",
        bbox=dict(boxstyle="round", facecolor="wheat", alpha=0.5),
        fontsize=9,
    )

    _save_or_show(save_path)


def plot_comparison(
    results: List[TimeSeries],
    title: str = "Deterministic vs Stochastic SIR",
    save_path: Optional[str] = None,
) -> None:
    """
    Overlays several time series on one axes, e.g. a stochastic run against
    the ODE solution. Series after the first are drawn dashed.

    :param results: Time series to compare
    :param title: Figure title
    :param save_path: Optional path to save the plot. If None, displays the plot.
    """
    fig, ax = plt.subplots(figsize=(10, 6))

    linestyles = ["-", "--", ":", "-."]
    for idx, result in enumerate(results):
        _plot_sir_curves(ax, result, linestyle=linestyles[idx % len(linestyles)])

    ax.set_title(title, fontsize=14, fontweight="bold")

    _save_or_show(save_path)


def plot_replicates(
    results: List[TimeSeries],
    deterministic: Optional[TimeSeries] = None,
    save_path: Optional[str] = None,
) -> None:
    """
    Plots infected curves of replicate runs, optionally against the ODE solution.

    :param results: Replicate stochastic runs
    :param deterministic: Optional deterministic TimeSeries drawn on top
    :param save_path: Optional path to save the plot. If None, displays the plot.
    """
    fig, ax = plt.subplots(figsize=(10, 6))

    for result in results:
        ax.plot(result.t, result.I, color="red", alpha=0.15, linewidth=1)

    if deterministic is not None:
        ax.plot(
            deterministic.t,
            deterministic.I,
            color="black",
            linestyle="--",
            linewidth=2,
            label="Infected (I) - Deterministic",
        )
        ax.legend()

    ax.set_title(f"Infected over {len(results)} stochastic runs", fontsize=14, fontweight="bold")
    ax.set_xlabel("Time (days)")
    ax.set_ylabel("Number of people")
    ax.grid(True, alpha=0.3)

    _save_or_show(save_path)


def log_results(result: TimeSeries, log_path: str) -> None:
    """
    Logs a time series to a text file with table format.

    :param result: TimeSeries to log
    :param log_path: Path of the log file
    """
    directory = os.path.dirname(str(log_path))
    if directory:
        os.makedirs(directory, exist_ok=True)

    name = result.label or "SIR"

    with open(log_path, "w", encoding="utf-8") as f:
        f.write(f"Simulation Log: {name}\n")
        f.write("=" * 90 + "\n\n")

        header = (
            f"{'Time':<10} {'S':<12} {'I':<12} {'R':<12} {'New I':<12} {'New R':<12}\n"
        )
        f.write(header)
        f.write("-" * 90 + "\n")

        for record in result:
            row = (
                f"{record.t:<10.2f} {record.S:<12.2f} {record.I:<12.2f} {record.R:<12.2f} "
                f"{record.new_infections:<12.2f} {record.new_recoveries:<12.2f}\n"
            )
            f.write(row)

        f.write("\n" + "=" * 90 + "\n")
        f.write("Summary Statistics:\n")
        f.write(f"  Peak Infected: {result.peak_infected:.2f}\n")
        f.write(f"  Peak Time: {result.peak_time:.2f}\n")
        f.write(f"  Total Infected: {result.total_infected:.2f}\n")
        f.write(f"  Epidemic Duration: {result.epidemic_duration:.2f} days\n")
        f.write(f"  Number of Records: {len(result)}\n")


def write_csv(result: TimeSeries, stream: IO[str]) -> None:
    """Writes t,S,I,R,new_infections,new_recoveries rows to an open text stream."""
    result.to_csv(stream)
