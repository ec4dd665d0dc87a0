"""Benchmark the scripted repayment strategies on sampled debt games.

Every strategy plays the same games per seed. Each finished game is scored
with the efficiency score and replayed by the optimal avalanche payer on the
same paychecks, so the CSV records how far each strategy is from the best
achievable interest and late fees.

Usage:
    python scripts/run_baselines.py                          # Full: 500 eps × 5 seeds
    python scripts/run_baselines.py --quick                  # Dev:  50 eps × 1 seed
    python scripts/run_baselines.py --preset tight_budget    # One fixed game, every seed
"""

import argparse
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import numpy as np
import pandas as pd

from src.baselines import ALL_BASELINES
from src.envs.debt_env import DebtAvalancheEnv
from src.envs.scenario_sampler import ScenarioSampler
from src.evaluation.comparator import compare_to_optimal
from src.evaluation.metrics import calculate_efficiency_score, score_grade
from src.utils.config import GameConfig, load_eval_config


def play_game(policy, scenario: GameConfig, seed: int) -> dict:
    """One game, scored and measured against the optimal payer."""
    env = DebtAvalancheEnv(config=scenario)
    result = policy.run_episode(env, seed=seed)
    gap = compare_to_optimal(env.state, scenario)
    score = calculate_efficiency_score(env.state)

    return {
        "strategy": result["strategy"],
        "total_interest": round(result["total_interest"], 2),
        "total_late_fees": round(result["total_late_fees"], 2),
        "days": result["days"],
        "paydays": result["paydays"],
        "final_debt": round(result["final_debt"], 2),
        "all_paid": result["all_paid"],
        "interest_gap": round(gap["interest_saved_possible"], 2),
        "fee_gap": round(gap["fees_saved_possible"], 2),
        "score": round(score, 1),
        "grade": score_grade(score),
    }


def run_benchmark(
    num_episodes: int = 500,
    seeds: list[int] | None = None,
    preset: str | None = None,
    output_dir: str = "results",
) -> pd.DataFrame:
    """Play every baseline on ``num_episodes`` games per seed.

    Args:
        num_episodes: Games per (policy, seed) pair.
        seeds: RNG seeds; each seed draws its own set of games.
        preset: Play this named preset every time instead of sampling.
        output_dir: Directory for the per-episode CSV.

    Returns:
        DataFrame with one row per (strategy, seed, episode).
    """
    seeds = seeds or [42]
    sampler = ScenarioSampler()
    rows: list[dict] = []

    total_runs = len(ALL_BASELINES) * len(seeds) * num_episodes
    done = 0
    t0 = time.time()

    for seed in seeds:
        if preset:
            scenarios = [ScenarioSampler.preset(preset)] * num_episodes
        else:
            rng = np.random.default_rng(seed)
            scenarios = [sampler.sample(rng) for _ in range(num_episodes)]

        for PolicyClass in ALL_BASELINES:
            policy = PolicyClass()
            for ep_idx, scenario in enumerate(scenarios):
                row = play_game(policy, scenario, seed + ep_idx)
                rows.append({"seed": seed, "episode": ep_idx, **row})

                done += 1
                if done % 500 == 0:
                    elapsed = time.time() - t0
                    eta = (total_runs - done) * elapsed / done
                    print(f"  [{done}/{total_runs}] {elapsed:.0f}s elapsed, ~{eta:.0f}s remaining")

    df = pd.DataFrame(rows)

    out_path = Path(output_dir)
    out_path.mkdir(parents=True, exist_ok=True)
    csv_path = out_path / "baselines_per_episode.csv"
    df.to_csv(csv_path, index=False)
    print(f"\nPer-episode results saved to {csv_path}")

    return df


def print_summary(df: pd.DataFrame) -> None:
    """Mean outcome per strategy, best score first."""
    summary = (
        df.groupby("strategy", sort=False)
        .agg(
            interest=("total_interest", "mean"),
            interest_gap=("interest_gap", "mean"),
            late_fees=("total_late_fees", "mean"),
            days=("days", "mean"),
            finished=("all_paid", "mean"),
            score=("score", "mean"),
        )
        .sort_values("score", ascending=False)
    )
    summary["finished"] = (summary["finished"] * 100).map("{:.1f}%".format)
    summary["grade"] = summary["score"].map(score_grade)

    print("\n" + "=" * 90)
    print("  STRATEGY COMPARISON (means per game)")
    print("=" * 90)
    print(summary.round(1).to_string())
    print()


def sanity_checks(df: pd.DataFrame) -> None:
    """Flag results that contradict the avalanche method."""
    print("Sanity checks:")
    means = df.groupby("strategy")["total_interest"].mean()

    if means.get("Avalanche", 0) <= means.get("Snowball", 0):
        print(f"  [PASS] Avalanche (${means['Avalanche']:,.0f}) <= Snowball (${means['Snowball']:,.0f}) on interest")
    else:
        print("  [FAIL] Avalanche pays more interest than Snowball. Possible engine bug.")

    if means.idxmax() == "MinimumOnly":
        print(f"  [PASS] MinimumOnly (${means['MinimumOnly']:,.0f}) has highest interest")
    else:
        print(f"  [NOTE] {means.idxmax()} has highest interest, not MinimumOnly")

    aval_gap = df.loc[df["strategy"] == "Avalanche", "interest_gap"].mean()
    print(f"  [INFO] Avalanche is ${aval_gap:,.2f} of interest away from optimal on average")
    print()


def main():
    parser = argparse.ArgumentParser(description="Run baseline strategies benchmark")
    parser.add_argument("--config", type=str, default="configs/eval/eval_protocol.yaml",
                        help="Path to eval protocol YAML")
    parser.add_argument("--quick", action="store_true", help="Quick run: 50 eps, 1 seed")
    parser.add_argument("--preset", type=str, default=None, help="Play a named preset game")
    parser.add_argument("--output", type=str, default="results", help="Output directory")
    args = parser.parse_args()

    eval_cfg = load_eval_config(args.config)

    if args.quick:
        num_episodes, seeds = 50, [42]
    else:
        num_episodes = eval_cfg.get("num_episodes", 500)
        seeds = eval_cfg.get("seeds", [42])
    print(f"Running {len(ALL_BASELINES)} baselines: {num_episodes} episodes × {len(seeds)} seeds\n")

    df = run_benchmark(num_episodes=num_episodes, seeds=seeds, preset=args.preset,
                       output_dir=args.output)
    print_summary(df)
    sanity_checks(df)


if __name__ == "__main__":
    main()
