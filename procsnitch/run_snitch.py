#!/usr/bin/env python3
"""
procsnitch entry point.

Loads the configuration, runs the configured number of supervised
sessions, and writes the series of every run as CSV, JSON and charts.
"""
import logging
import sys
from pathlib import Path
from typing import List, Optional

from procsnitch.cli.cli import parse_snitch_args
from procsnitch.config.config_loader import ConfigLoader
from procsnitch.config.snitch_config import SnitchConfig
from procsnitch.exceptions import SnitchError
from procsnitch.models.session_outcome import SessionResult
from procsnitch.service.plot.series_plotter import plot_series
from procsnitch.service.runner.runner import AttachRunner, CommandRunner, Runner
from procsnitch.service.sampler.sampler_factory import build_sampler
from procsnitch.service.supervisor.process_supervisor import ProcessSupervisor
from procsnitch.util.export_utils import export_series_csv, export_session_json, format_summary_table
from procsnitch.util.log_config import set_package_level, setup_logger

logger = setup_logger(__name__)


def build_runner(config: SnitchConfig, results_dir: Path) -> Runner:
    if config.process_name:
        return AttachRunner(process_name=config.process_name)
    return CommandRunner(
        command=config.command,
        arguments=config.arguments,
        directory=config.directory or None,
        results_dir=results_dir,
    )


def run_session(config: SnitchConfig, run_dir: Path, plot: bool = True) -> SessionResult:
    """Run one supervised session and write its artifacts into run_dir."""
    runner = build_runner(config, run_dir)
    sampler = build_sampler(config.sampler, logger=logger)
    supervisor = ProcessSupervisor(
        runner=runner,
        duration=config.duration,
        sampling=config.sampling,
        sampler=sampler,
        logger=logger,
    )
    result = supervisor.run()

    outcome = result.outcome
    logger.info(f"✓ pid {outcome.pid} {outcome.state.value} after {outcome.elapsed:.2f}s "
                f"(returncode={outcome.returncode}, samples={len(result.series)})")
    logger.info("\n" + format_summary_table(result.series))

    csv_path = export_series_csv(result.series, run_dir / "series.csv")
    json_path = export_session_json(result, run_dir / "session.json")
    logger.info(f"✓ Series exported to: {csv_path.resolve()}")
    logger.info(f"✓ Session exported to: {json_path.resolve()}")

    if plot:
        charts = plot_series(result.series, config.sampling, run_dir, prefix=runner.name)
        logger.info(f"✓ {len(charts)} chart(s) written to: {run_dir.resolve()}")

    return result


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_snitch_args(argv, "Run a process for a bounded time and chart its resource usage")
    if args.verbose:
        set_package_level(logging.DEBUG)

    try:
        config = ConfigLoader(args.config_dir, env=args.env).config_data
    except SnitchError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    if args.env:
        logger.info(f"Loaded configuration with environment override: {args.env}")

    output_dir = args.output_dir or config.output_dir

    results = []
    for idx in range(1, config.executions + 1):
        logger.info("-" * 60)
        logger.info(f"Execution {idx}/{config.executions}")
        logger.info("-" * 60)
        try:
            results.append(run_session(config, output_dir / f"run_{idx}", plot=not args.no_plot))
        except SnitchError as e:
            logger.error(f"Execution {idx}/{config.executions} aborted: {e}")
            return 1

    killed = sum(1 for r in results if r.outcome.killed)
    logger.info(f"All {len(results)} execution(s) completed ({killed} killed after {config.duration}s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
