"""Sanity check: play games with rendered output and review the ledger.

Each strategy plays one game; afterwards the run is scored, compared to the
optimal avalanche payer on the same paychecks, and (optionally) its debt
progress is plotted from the daily snapshots.

Usage:
    python scripts/sanity_check.py
    python scripts/sanity_check.py --config configs/game/tight_budget.yaml --plot results/progress.png
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt

from src.baselines import AvalanchePolicy, MinimumOnlyPolicy, SnowballPolicy
from src.envs.debt_env import DebtAvalancheEnv
from src.evaluation.comparator import compare_to_optimal
from src.evaluation.ledger_frames import milestones_frame, snapshots_frame
from src.evaluation.metrics import analyze_player_strategy, calculate_efficiency_score, score_grade
from src.utils.config import load_game_config


def plot_progress(runs: dict, output_path: str) -> None:
    """Plot total remaining debt over game days, one line per strategy."""
    fig, ax = plt.subplots(figsize=(10, 5))
    for name, state in runs.items():
        df = snapshots_frame(state)
        ax.plot(df["day"], df["total_balance"], marker="o", markersize=3, label=name)

    ax.set_title("Debt Payoff Progress", fontsize=14, fontweight="bold")
    ax.set_xlabel("Game day")
    ax.set_ylabel("Total remaining debt ($)")
    ax.grid(alpha=0.3)
    ax.legend()

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(str(out), dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"\nProgress chart saved to {out}")


def main():
    parser = argparse.ArgumentParser(description="Sanity check: walk through games")
    parser.add_argument("--config", type=str, default="configs/game/default.yaml")
    parser.add_argument("--episodes", type=int, default=3)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--plot", type=str, default=None, help="Save a progress chart here")
    args = parser.parse_args()

    game_config = load_game_config(args.config)
    policies = [MinimumOnlyPolicy(), SnowballPolicy(), AvalanchePolicy()]
    runs = {}

    for ep, policy in enumerate(policies[:args.episodes]):
        print(f"\n{'#'*60}")
        print(f"  GAME {ep + 1}: Strategy = {policy.name}")
        print(f"{'#'*60}")

        env = DebtAvalancheEnv(config=game_config, render_mode="human")
        obs, info = env.reset(seed=args.seed + ep)

        terminated = truncated = False
        while not (terminated or truncated):
            action = policy.allocate(env)
            obs, reward, terminated, truncated, info = env.step(action)
            env.render()

        state = env.state
        runs[policy.name] = state

        status = "✓ ALL PAID OFF" if state.is_complete else "✗ TIMED OUT"
        score = calculate_efficiency_score(state)
        print(f"\n  Result: {status} on day {state.current_day}")
        print(f"  Final debt: ${state.total_balance:,.2f}")
        print(f"  Efficiency score: {score:.0f} ({score_grade(score)})")

        comparison = compare_to_optimal(state, game_config)
        print(
            f"  Interest: ${comparison['player_interest']:,.0f} "
            f"(optimal ${comparison['optimal_interest']:,.0f}), "
            f"late fees: ${comparison['player_late_fees']:,.0f} "
            f"(optimal ${comparison['optimal_late_fees']:,.0f})"
        )

        for mistake in analyze_player_strategy(state).mistakes:
            print(f"  ⚠️ {mistake}")

        milestones = milestones_frame(state)
        if not milestones.empty:
            print("\n  Payoff order:")
            print(milestones.to_string(index=False))

    if args.plot:
        plot_progress(runs, args.plot)


if __name__ == "__main__":
    main()
