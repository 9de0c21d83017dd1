"""
Command-line entry point.

Usage::

    python -m shearmd -c run.yaml -i cnf.inp -o results/

Reads run parameters (YAML) and a starting configuration, runs the
isokinetic SLLOD simulation with the Lennard-Jones model, prints block
averages to stdout and writes ``cnf.NNN`` / ``cnf.out`` snapshots.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_run_config
from .engines import BlockAverageReporter, ConfigurationReporter, ShearFlowEngine, StateReporter
from .errors import ConfigurationError, SimulationError
from .forcefields import LennardJonesForce
from .io import CNF_PREFIX, INPUT_TAG, read_configuration
from .logging_config import setup_logging
from .system import LeesEdwardsBox, ShearFlowState

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    ap = argparse.ArgumentParser(
        prog="shearmd",
        description="Molecular dynamics, constant-NVT ensemble, Lees-Edwards boundaries",
    )
    ap.add_argument("-c", "--config", help="YAML file with run parameters")
    ap.add_argument(
        "-i",
        "--input",
        default=f"{CNF_PREFIX}{INPUT_TAG}",
        help="Starting configuration file (default: %(default)s)",
    )
    ap.add_argument(
        "-o", "--output-dir", default=".", help="Directory for configuration snapshots"
    )
    ap.add_argument("--nblock", type=int, help="Number of blocks")
    ap.add_argument("--nstep", type=int, help="Number of steps per block")
    ap.add_argument("--r-cut", type=float, help="Potential cutoff distance")
    ap.add_argument("--dt", type=float, help="Time step")
    ap.add_argument("--strain-rate", type=float, help="Strain rate dv_x/dr_y")
    ap.add_argument(
        "--report-every",
        type=int,
        default=0,
        help="Also print instantaneous observables every N steps (0: never)",
    )
    ap.add_argument("--log-file", help="Also write the log to this file")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def run(args: argparse.Namespace) -> ShearFlowState:
    """
    Run a simulation from parsed arguments.

    Raises:
        SimulationError: On any fatal configuration, overlap or numerical error.
    """
    config = load_run_config(
        args.config,
        nblock=args.nblock,
        nstep=args.nstep,
        r_cut=args.r_cut,
        dt=args.dt,
        strain_rate=args.strain_rate,
    )

    frame = read_configuration(args.input)
    box = LeesEdwardsBox(frame["box"])
    state = ShearFlowState.from_configuration(frame["positions"], frame["velocities"], box)

    output_dir = Path(args.output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot create output directory {output_dir}: {exc}"
        ) from exc

    engine = ShearFlowEngine(state, box, config, LennardJonesForce())
    engine.add_reporter(BlockAverageReporter(file=sys.stdout))
    engine.add_reporter(ConfigurationReporter(box, config.nblock, output_dir))
    if args.report_every > 0:
        engine.add_reporter(StateReporter(frequency=args.report_every, file=sys.stdout))

    return engine.run()


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run, and return a process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    logger.info("shearmd: molecular dynamics, constant-NVT ensemble, Lees-Edwards")
    logger.info("Particle mass=1 throughout")

    try:
        run(args)
    except SimulationError as exc:
        logger.error("%s", exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
