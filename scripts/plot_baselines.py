"""Chart the baseline benchmark CSV produced by run_baselines.py.

Three panels per figure:
    - interest paid per strategy (mean with std error bars)
    - days to payoff, over finished games only
    - share of games finished before the payday cap, with late fees annotated

Usage:
    python scripts/plot_baselines.py
    python scripts/plot_baselines.py --input results/baselines_per_episode.csv --output results/baselines.png
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt
import pandas as pd


STRATEGY_ORDER = ["MinimumOnly", "Random", "Snowball", "Avalanche"]

COLORS = {
    "MinimumOnly": "#e53e3e",
    "Random": "#a0aec0",
    "Snowball": "#3182ce",
    "Avalanche": "#38a169",
}


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """Per-strategy aggregates in display order."""
    finished = df[df["all_paid"]]
    summary = pd.DataFrame({
        "interest_mean": df.groupby("strategy")["total_interest"].mean(),
        "interest_std": df.groupby("strategy")["total_interest"].std().fillna(0.0),
        "late_fees_mean": df.groupby("strategy")["total_late_fees"].mean(),
        "days_median": finished.groupby("strategy")["days"].median(),
        "finished_share": df.groupby("strategy")["all_paid"].mean(),
    })
    order = [s for s in STRATEGY_ORDER if s in summary.index]
    order += [s for s in summary.index if s not in order]
    return summary.loc[order]


def make_charts(df: pd.DataFrame, output_path: str = "results/baselines.png") -> None:
    summary = summarize(df)
    strategies = list(summary.index)
    colors = [COLORS.get(s, "#333333") for s in strategies]

    fig, (ax_int, ax_days, ax_done) = plt.subplots(1, 3, figsize=(16, 5))
    fig.suptitle("Repayment Strategies on Sampled Games", fontsize=15, fontweight="bold")

    ax_int.bar(strategies, summary["interest_mean"], yerr=summary["interest_std"],
               color=colors, alpha=0.8, capsize=4)
    ax_int.set_title("Interest Paid ($)")

    finished = df[df["all_paid"]]
    day_data = [finished.loc[finished["strategy"] == s, "days"].values for s in strategies]
    ax_days.violinplot([d if len(d) else [0] for d in day_data], showmedians=True)
    ax_days.set_xticks(range(1, len(strategies) + 1), labels=strategies)
    ax_days.set_title("Days to Payoff (finished games)")

    bars = ax_done.bar(strategies, summary["finished_share"] * 100, color=colors, alpha=0.8)
    for bar, fees in zip(bars, summary["late_fees_mean"]):
        ax_done.annotate(f"fees ${fees:,.0f}", (bar.get_x() + bar.get_width() / 2, bar.get_height()),
                         ha="center", va="bottom", fontsize=9)
    ax_done.set_ylim(0, 110)
    ax_done.set_title("Games Finished (%)")

    for ax in (ax_int, ax_days, ax_done):
        ax.tick_params(axis="x", rotation=30)
        ax.grid(axis="y", alpha=0.3)

    plt.tight_layout()

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(str(out), dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"Charts saved to {out}")


def main():
    parser = argparse.ArgumentParser(description="Chart baseline benchmark results")
    parser.add_argument("--input", type=str, default="results/baselines_per_episode.csv")
    parser.add_argument("--output", type=str, default="results/baselines.png")
    args = parser.parse_args()

    csv_path = Path(args.input)
    if not csv_path.exists():
        print(f"Error: {csv_path} not found. Run run_baselines.py first.")
        sys.exit(1)

    df = pd.read_csv(csv_path)
    print(f"Loaded {len(df)} rows from {csv_path}")
    print(summarize(df).round(2).to_string())

    make_charts(df, args.output)


if __name__ == "__main__":
    main()
