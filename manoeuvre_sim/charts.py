"""Chart generation for simulated ledgers."""

from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as ticker

from manoeuvre_sim.comparison import BaselineYear, calc_manoeuvre_payoff
from manoeuvre_sim.simulation import Ledger

SERIES_COLORS = {
    "mortgage": "#d62728",     # red
    "heloc": "#ff7f0e",        # orange
    "portfolio": "#2ca02c",    # green
    "net_wealth": "#1f77b4",   # blue
    "baseline": "#7f7f7f",     # grey
}

ACCOUNT_COLORS = {
    "tax_free": "#66c2a5",
    "tax_deferred": "#8da0cb",
    "taxable": "#fc8d62",
}


def _format_dollar_axis(ax: plt.Axes):
    """Dollar tick labels on the left, millions on the right."""
    ax.yaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"${x:,.0f}")
    )
    ax_right = ax.secondary_yaxis("right")
    ax_right.yaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"{x / 1_000_000:.1f}M" if x != 0 else "0")
    )


def _output_file(output_path: Path, stem: str, name: str) -> Path:
    output_path.mkdir(parents=True, exist_ok=True)
    suffix = f"-{name}" if name else ""
    return output_path / f"{stem}{suffix}.png"


def plot_trajectory(
    ledger: Ledger,
    output_path: Path,
    name: str = "",
    baseline: tuple[BaselineYear, ...] | None = None,
    title: str = "Mortgage, HELOC and portfolio",
) -> Path:
    """Line chart of the year-end balances.

    Args:
        ledger: result of simulate().
        output_path: directory to save the PNG.
        name: optional suffix for the output filename (e.g. "20" → "trajectory-20.png").
        baseline: no-manoeuvre years, drawn as a dashed portfolio line.

    Returns:
        Path to the generated PNG file.
    """
    if not ledger:
        raise ValueError("No ledger entries for trajectory chart")

    fig, ax = plt.subplots(figsize=(14, 8))

    years = [s.year for s in ledger]
    ax.plot(years, [s.ending.mortgage for s in ledger],
            label="Mortgage", color=SERIES_COLORS["mortgage"], linewidth=2)
    ax.plot(years, [s.ending.line_of_credit for s in ledger],
            label="HELOC", color=SERIES_COLORS["heloc"], linewidth=2)
    ax.plot(years, [s.ending.portfolio for s in ledger],
            label="Portfolio", color=SERIES_COLORS["portfolio"], linewidth=2)
    ax.plot(years, [s.ending.net_wealth for s in ledger],
            label="Net wealth (portfolio - HELOC)", color=SERIES_COLORS["net_wealth"], linewidth=2)
    if baseline:
        ax.plot([b.year for b in baseline], [b.portfolio for b in baseline],
                label="Portfolio without manoeuvre", color=SERIES_COLORS["baseline"],
                linewidth=1.8, linestyle="--")

    payoff = calc_manoeuvre_payoff(ledger)
    if payoff.paid_off:
        ax.axvline(payoff.year, color="#888888", linewidth=0.8, linestyle=":", alpha=0.6)
        y_lo, y_hi = ax.get_ylim()
        ax.annotate(
            f"Mortgage paid off (year {payoff.year})",
            xy=(payoff.year, y_lo + (y_hi - y_lo) * 0.9),
            fontsize=11, ha="right", va="bottom",
            bbox=dict(boxstyle="round,pad=0.4", fc="white", ec="#888888", alpha=0.9, linewidth=0.8),
        )

    ax.set_xlabel("Year")
    ax.set_ylabel("Balance ($)")
    ax.set_title(title)
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_dollar_axis(ax)

    filepath = _output_file(output_path, "trajectory", name)
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath


def plot_account_stack(ledger: Ledger, output_path: Path, name: str = "") -> Path:
    """Stacked area of TFSA / RRSP / non-registered balances with the HELOC overlaid."""
    if not ledger:
        raise ValueError("No ledger entries for account chart")

    fig, ax = plt.subplots(figsize=(14, 8))
    years = [s.year for s in ledger]
    ax.stackplot(
        years,
        [s.ending.tax_free for s in ledger],
        [s.ending.tax_deferred for s in ledger],
        [s.ending.taxable for s in ledger],
        labels=["TFSA", "RRSP", "Non-registered"],
        colors=[ACCOUNT_COLORS["tax_free"], ACCOUNT_COLORS["tax_deferred"], ACCOUNT_COLORS["taxable"]],
        alpha=0.75,
    )
    ax.plot(years, [s.ending.line_of_credit for s in ledger],
            color=SERIES_COLORS["heloc"], linewidth=2, linestyle="--", label="HELOC")
    ax.plot(years, [s.ending.adjusted_cost_base for s in ledger],
            color="#444444", linewidth=1.2, linestyle=":", label="Non-registered book value")

    ax.set_xlabel("Year")
    ax.set_ylabel("Balance ($)")
    ax.set_title("Account composition")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_dollar_axis(ax)

    filepath = _output_file(output_path, "accounts", name)
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath
