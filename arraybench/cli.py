"""
arraybench CLI

Usage:
    arraybench run --preset roundtrip
    arraybench run --preset aggregate --ceiling 100 --chart
    arraybench run --backend memory --ceiling 100 --random-seed 7
    arraybench sweep --ceiling 10000 --seed 0 1
    arraybench presets
    arraybench status --run-id 20250101_120000
    arraybench chart --run-id 20250101_120000
"""
import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from arraybench.config import PRESETS, HarnessConfig, ReportingMode
from arraybench.errors import ConfigError, HarnessError, log_error
from arraybench.logging_config import setup_logging
from arraybench.sweep import DEFAULT_SEED, generate_sweep

logger = logging.getLogger("arraybench")

EXIT_OK = 0
EXIT_RUN_FAILED = 1
EXIT_CONFIG_ERROR = 2


def _build_config(args) -> HarnessConfig:
    """Build HarnessConfig from CLI args (preset first, then overrides)."""
    overrides = {}
    if getattr(args, "run_id", None):
        overrides["run_id"] = args.run_id
    if getattr(args, "output", None):
        overrides["output_base"] = args.output
    if getattr(args, "ceiling", None) is not None:
        overrides["ceiling"] = args.ceiling
    if getattr(args, "seed", None):
        overrides["seed_pair"] = tuple(args.seed)
    if getattr(args, "repetitions", None) is not None:
        overrides["repetitions_per_size"] = args.repetitions
    if getattr(args, "mode", None):
        overrides["reporting_mode"] = ReportingMode(args.mode)
    if getattr(args, "read_iterations", None) is not None:
        overrides["read_iterations"] = args.read_iterations
    if getattr(args, "delete_after_read", False):
        overrides["delete_after_read"] = True
    if getattr(args, "no_read_back", False):
        overrides["read_back"] = False
    if getattr(args, "no_persist", False):
        overrides["persist_retrieval_time"] = False
    if getattr(args, "collection_per_size", False):
        overrides["collection_per_size"] = True
    if getattr(args, "backend", None):
        overrides["backend"] = args.backend
    if getattr(args, "uri", None):
        overrides["connection_uri"] = args.uri
    if getattr(args, "database", None):
        overrides["database"] = args.database
    if getattr(args, "random_seed", None) is not None:
        overrides["random_seed"] = args.random_seed

    preset = getattr(args, "preset", None)
    if preset:
        return HarnessConfig.from_preset(preset, **overrides)
    return HarnessConfig(**overrides)


def cmd_run(args) -> int:
    """Run one sweep and print CSV lines to stdout."""
    from arraybench.runner import RoundTripRunner
    from arraybench.storage import get_store

    config = _build_config(args).validate()
    store = get_store(config.backend, config)
    try:
        runner = RoundTripRunner(config, store, emit=lambda line: print(line, flush=True))
        result = runner.run()
    finally:
        store.close()

    if not args.no_save:
        result.save(Path(config.output_dir))
        if args.chart:
            from arraybench.visualizations import chart_sweep
            path = chart_sweep(result, Path(config.output_dir) / "chart_sweep.png")
            if path:
                logger.info(f"Chart written to {path}")

    if not result.ok:
        error = result.error or {}
        print(
            f"Run failed at N={error.get('object_count')}: {error.get('message')}"
            + (f" - {error['details']}" if error.get("details") else ""),
            file=sys.stderr,
        )
        return EXIT_RUN_FAILED
    return EXIT_OK


def cmd_sweep(args) -> int:
    """Print the sweep sizes, one per line."""
    for n in generate_sweep(args.ceiling, tuple(args.seed)):
        print(n)
    return EXIT_OK


def cmd_presets(args) -> int:
    """List the named presets."""
    for name, values in PRESETS.items():
        print(f"{name}:")
        for key, value in values.items():
            if isinstance(value, ReportingMode):
                value = value.value
            print(f"  {key} = {value}")
    return EXIT_OK


def _load_run(args):
    from arraybench.report import RunResult

    config = _build_config(args)
    output_dir = Path(config.output_dir)
    result = RunResult.load(output_dir)
    if result is None:
        print(f"Run not found: {config.run_id}", file=sys.stderr)
    return config, result


def cmd_status(args) -> int:
    """Summarize a saved run."""
    config, result = _load_run(args)
    if result is None:
        return EXIT_RUN_FAILED

    print(f"\nRun: {result.run_id}")
    print(f"Output: {config.output_dir}")
    print(f"  Mode: {result.mode}")
    print(f"  Status: {result.status} ({result.sizes_completed}/{result.sizes_total} sizes)")
    print(f"  Duration: {result.duration_seconds:.1f}s")
    if result.rows:
        last = result.rows[-1]
        print(f"  Largest N: {last.object_count} ({last.size_in_bytes:.0f} bytes, "
              f"{last.retrieval_time_ms:.3f} ms)")
    if result.error:
        print(f"  Error: {result.error.get('code')}: {result.error.get('message')}")
    return EXIT_OK


def cmd_chart(args) -> int:
    """Render the sweep chart for a saved run."""
    config, result = _load_run(args)
    if result is None:
        return EXIT_RUN_FAILED

    from arraybench.visualizations import chart_sweep

    path = chart_sweep(result, Path(config.output_dir) / "chart_sweep.png")
    if not path:
        print("No rows to chart", file=sys.stderr)
        return EXIT_RUN_FAILED
    print(path)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arraybench",
        description="Embedded array size impact benchmark for MongoDB",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    def add_sweep_args(sp):
        sp.add_argument("--ceiling", type=int, help="Largest array size to test")
        sp.add_argument(
            "--seed", type=int, nargs=2, metavar=("A", "B"),
            help=f"Fibonacci seed pair (default: {DEFAULT_SEED[0]} {DEFAULT_SEED[1]})",
        )

    def add_output_args(sp):
        sp.add_argument("--run-id", help="Run ID (default: timestamp)")
        sp.add_argument("--output", help="Output base directory (env ARRAYBENCH_OUTPUT)")

    # Run
    pr = subparsers.add_parser("run", help="Run a sweep")
    add_sweep_args(pr)
    add_output_args(pr)
    pr.add_argument("--preset", choices=sorted(PRESETS), help="Start from a named preset")
    pr.add_argument("--repetitions", type=int,
                    help="Documents per swept size (default 1, or 35 in aggregate mode)")
    pr.add_argument("--mode", choices=[m.value for m in ReportingMode], help="Reporting mode")
    pr.add_argument("--read-iterations", type=int, help="Bulk reads per size (aggregate mode)")
    pr.add_argument("--delete-after-read", action="store_true")
    pr.add_argument("--no-read-back", action="store_true", help="Skip the timed read-back")
    pr.add_argument("--no-persist", action="store_true", help="Do not store retrievalTime back")
    pr.add_argument("--collection-per-size", action="store_true",
                    help="One collection per size (always on in aggregate mode)")
    pr.add_argument("--backend", choices=["mongo", "memory"], help="Storage backend")
    pr.add_argument("--uri", help="MongoDB connection string (env MONGODB_URI)")
    pr.add_argument("--database", help="Database name (env ARRAYBENCH_DATABASE)")
    pr.add_argument("--random-seed", type=int, help="Seed document content for repeatable runs")
    pr.add_argument("--chart", action="store_true", help="Write chart_sweep.png with the results")
    pr.add_argument("--no-save", action="store_true", help="Do not write result files")
    pr.set_defaults(func=cmd_run)

    # Sweep
    ps = subparsers.add_parser("sweep", help="Print the sweep sizes")
    ps.add_argument("--ceiling", type=int, default=10000)
    ps.add_argument("--seed", type=int, nargs=2, metavar=("A", "B"), default=list(DEFAULT_SEED))
    ps.set_defaults(func=cmd_sweep)

    # Presets
    pp = subparsers.add_parser("presets", help="List presets")
    pp.set_defaults(func=cmd_presets)

    # Status
    pst = subparsers.add_parser("status", help="Show a saved run")
    add_output_args(pst)
    pst.set_defaults(func=cmd_status)

    # Chart
    pc = subparsers.add_parser("chart", help="Chart a saved run")
    add_output_args(pc)
    pc.set_defaults(func=cmd_chart)

    return parser


def main(argv=None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    if not args.command:
        parser.print_help()
        return EXIT_RUN_FAILED

    try:
        return args.func(args)
    except ConfigError as e:
        log_error(logger, e, include_traceback=False)
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except HarnessError as e:
        log_error(logger, e, include_traceback=False)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUN_FAILED


if __name__ == "__main__":
    sys.exit(main())
