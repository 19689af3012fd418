import argparse
import sys
from typing import List, Optional

from sirsim.config import ConfigurationError, SimulationConfig, get_config, PRESETS
from sirsim.deterministic import DeterministicSIRModel
from sirsim.experiment import RunDirectory
from sirsim.logger import setup_logger
from sirsim.replicates import run_replicates, summarize_replicates
from sirsim.sir import run_stochastic_sir
from sirsim.utils import (
    log_results,
    plot_comparison,
    plot_replicates,
    plot_single_result,
    write_csv,
)

# CLI option -> SimulationConfig field
OVERRIDES = {
    "N": "N",
    "I0": "I0",
    "R0": "R0",
    "r0_param": "R0_param",
    "d_inf": "D_inf",
    "dt": "dt",
    "T": "T",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulate a discrete-time stochastic SIR epidemic and emit the time series as CSV."
    )
    parser.add_argument(
        "--config",
        type=str,
        default="default",
        choices=sorted(PRESETS),
        help="Which preset configuration to start from",
    )
    parser.add_argument("--N", type=int, help="Population size")
    parser.add_argument("--I0", type=int, help="Initial infected")
    parser.add_argument("--R0", type=int, help="Initial recovered")
    parser.add_argument("--r0-param", type=float, help="Basic reproduction number")
    parser.add_argument("--d-inf", type=float, help="Mean infectious duration")
    parser.add_argument("--dt", type=float, help="Time step")
    parser.add_argument("--T", type=float, help="Time horizon")
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed (fresh entropy if omitted)"
    )
    parser.add_argument(
        "--deterministic",
        action="store_true",
        help="Emit the ODE solution instead of a stochastic run",
    )
    parser.add_argument(
        "--replicates",
        type=int,
        default=0,
        help="Also run this many independent replicates and print their summary",
    )
    parser.add_argument("--output", type=str, help="Write the CSV table here instead of stdout")
    parser.add_argument("--plot", type=str, help="Save a stochastic vs deterministic plot here")
    parser.add_argument(
        "--output-dir",
        type=str,
        help="Save config, summary, logs and plots under this directory",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    config = get_config(args.config)
    changes = {
        field: getattr(args, option)
        for option, field in OVERRIDES.items()
        if getattr(args, option) is not None
    }
    return config.replace(**changes) if changes else config


def print_replicate_summary(stats: dict) -> None:
    print(f"Replicates: {stats['n_runs']}", file=sys.stderr)
    for key in ("peak_infected", "peak_time", "final_size"):
        s = stats[key]
        print(
            f"  {key:<14} mean={s['mean']:.2f} std={s['std']:.2f} "
            f"95% CI=[{s['ci_low']:.2f}, {s['ci_high']:.2f}]",
            file=sys.stderr,
        )
    print(
        f"  outbreak probability (final size > {stats['outbreak_threshold']:.1f}): "
        f"{stats['outbreak_probability']:.3f}",
        file=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        if args.replicates < 0:
            raise ConfigurationError("n_runs", f"must be non-negative, got {args.replicates}")
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    deterministic = DeterministicSIRModel(config).integrate()
    stochastic = run_stochastic_sir(config, seed=args.seed)
    primary = deterministic if args.deterministic else stochastic

    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as f:
            write_csv(primary, f)
    else:
        write_csv(primary, sys.stdout)

    replicates, stats = [], None
    if args.replicates > 0:
        replicates = run_replicates(config, args.replicates, seed=args.seed)
        stats = summarize_replicates(replicates)
        print_replicate_summary(stats)

    if args.plot:
        plot_comparison([stochastic, deterministic], save_path=args.plot)

    if args.output_dir:
        run_dir = RunDirectory(config, name=args.config, base_dir=args.output_dir)
        run_dir.save_config(seed=args.seed)
        run_dir.save_summary([stochastic, deterministic], replicate_stats=stats)
        for series in (stochastic, deterministic):
            log_results(series, log_path=str(run_dir.get_log_path(series.label)))
            with open(run_dir.get_table_path(series.label), "w", encoding="utf-8", newline="") as f:
                write_csv(series, f)
            plot_single_result(series, save_path=str(run_dir.get_plot_path(series.label)))
        plot_comparison(
            [stochastic, deterministic], save_path=str(run_dir.get_plot_path("comparison"))
        )
        if replicates:
            plot_replicates(
                replicates,
                deterministic=deterministic,
                save_path=str(run_dir.get_plot_path("replicates")),
            )
        print(f"Outputs saved to: {run_dir.root}", file=sys.stderr)

    return 0


def run() -> int:
    setup_logger()
    return main()


if __name__ == "__main__":
    sys.exit(run())
