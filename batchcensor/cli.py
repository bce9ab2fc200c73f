import argparse
import sys
import os
from pathlib import Path
from typing import List, Optional

from .constants import ENV_CONFIG_DIR, ENV_JOBS, ENV_OUTPUT, ENV_ROOT
from .core.config import dump_configs, load_configs, resolve_config_paths
from .core.console import console
from .core.initializer import initialize_missing
from .core.manifest import write_manifest
from .core.reconcile import Reconciler
from .core.reporting import CensorReporter
from .errors import CensorError
from .pipeline import TaskRunner, create_generator

# Logger will be initialized after arguments are parsed
logger = None


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def _env_jobs(name: str) -> Optional[int]:
    value = os.environ.get(name)
    if not value:
        return None
    try:
        return _positive_int(value)
    except argparse.ArgumentTypeError as e:
        raise CensorError(f"{name}: {e}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batchcensor",
        description="Batch censor audio files using timed transcripts.",
    )
    parser.add_argument("-c", "--config", action="append", default=[], help="Configuration file to load. Can be given multiple times.")
    parser.add_argument("-d", "--config-dir", default=os.environ.get(ENV_CONFIG_DIR), help="Load every configuration file below this directory.")
    parser.add_argument("-r", "--root", default=os.environ.get(ENV_ROOT), help="Root directory of the audio files (default: next to each configuration).")
    parser.add_argument("-o", "--output", default=os.environ.get(ENV_OUTPUT), help="Output directory (default: <root>/output).")
    parser.add_argument("--list", action="store_true", help="List every file that will be silenced.")
    parser.add_argument("--stats", action="store_true", help="Print word statistics instead of processing.")
    parser.add_argument("--init", nargs="?", const="-", metavar="FILE", help="Write configuration completed with missing files to FILE (default: stdout).")
    parser.add_argument("--oiv-manifest", metavar="FILE", help="Write a package manifest for modified directories to FILE, or - for stdout.")
    parser.add_argument("--tone", action="store_true", help="Replace censored ranges with a tone instead of silence.")
    parser.add_argument("-j", "--jobs", type=_positive_int, default=None, help="Number of parallel workers (default: CPU count).")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Suppress console output; --init, --stats and manifests still go to stdout.")
    return parser


def run(args: argparse.Namespace) -> int:
    paths = resolve_config_paths(args.config, args.config_dir)
    root = Path(args.root) if args.root else None
    output = Path(args.output) if args.output else None

    configs = load_configs(paths, root=root)
    logger.debug(f"Loaded {len(configs)} configuration file(s)")

    with console.status(f"Reconciling {len(configs)} configuration file(s)"):
        state = Reconciler(output=output).reconcile(configs)

    if args.init is not None:
        if not state.unaccounted:
            console.print("nothing to initialize: there are no missing files!")
            return 0

        updated = initialize_missing(state, configs)
        if args.init == "-":
            dump_configs(updated, sys.stdout)
        else:
            with open(args.init, "w", encoding="utf-8") as f:
                dump_configs(updated, f)
            console.success(f"Wrote configuration for {len(state.unaccounted)} missing file(s) to {args.init}")
        return 0

    reporter = CensorReporter(state)
    reporter.report_silenced(list_files=args.list)
    reporter.print_summary()

    if args.stats:
        reporter.print_stats()
        return 0

    jobs = args.jobs if args.jobs is not None else _env_jobs(ENV_JOBS)
    runner = TaskRunner(create_generator(tone=args.tone), jobs=jobs)
    report = runner.run(state.tasks)

    if not report.ok:
        for failure in report.failures:
            console.error_panel(str(failure), title="Task failed")
        return 1

    if args.oiv_manifest:
        write_manifest(state.modified, args.oiv_manifest)

    return 0


def main(argv: Optional[List[str]] = None) -> None:
    global logger

    parser = build_parser()
    args = parser.parse_args(argv)

    output_mode = "silent" if args.quiet else "standard"
    console.configure(output_mode=output_mode, debug=args.verbose)

    from .utils import setup_logging
    logger = setup_logging(debug=args.verbose, output_mode=output_mode)

    try:
        code = run(args)
    except CensorError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted.")
        sys.exit(130)

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
