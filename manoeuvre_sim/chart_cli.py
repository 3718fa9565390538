"""CLI entry point for chart generation."""

import sys
from pathlib import Path

from manoeuvre_sim.charts import plot_account_stack, plot_trajectory
from manoeuvre_sim.comparison import simulate_baseline
from manoeuvre_sim.config import build_params, create_parser, load_config, resolve
from manoeuvre_sim.scenarios import get_scenario
from manoeuvre_sim.simulation import simulate


def _build_parser():
    parser = create_parser("Smith Manoeuvre chart generation")
    parser.add_argument(
        "--output", type=Path, default=Path("reports/charts"),
        help="output directory (default: reports/charts)",
    )
    parser.add_argument(
        "--name", type=str, default="",
        help="output filename suffix (e.g. 20 → trajectory-20.png)",
    )
    return parser


def main():
    parser = _build_parser()
    args = parser.parse_args()
    config_file = load_config(args.config)
    r = resolve(args, config_file)

    try:
        params = build_params(r)
        scenario = get_scenario(r["scenario"])
        ledger = simulate(params, r["years"], overrides=scenario.year_overrides)
        baseline = simulate_baseline(params, r["years"])
    except (KeyError, ValueError) as e:
        print(f"error: {e.args[0]}", file=sys.stderr)
        raise SystemExit(1)

    title = f"Mortgage, HELOC and portfolio ({scenario.name})"
    path = plot_trajectory(ledger, args.output, name=args.name, baseline=baseline, title=title)
    print(f"  saved: {path}", file=sys.stderr)
    path = plot_account_stack(ledger, args.output, name=args.name)
    print(f"  saved: {path}", file=sys.stderr)


if __name__ == "__main__":
    main()
