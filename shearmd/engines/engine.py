"""Sheared isokinetic simulation engine."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ..analysis import BlockAverages, ObservableCalculator
from ..integrators import IsokineticSLLODIntegrator
from .reporters import Reporter, ReporterGroup

if TYPE_CHECKING:
    from ..analysis import Observables
    from ..config import RunConfig
    from ..forcefields import ForceProvider, Interaction
    from ..system import LeesEdwardsBox, ShearFlowState

logger = logging.getLogger(__name__)


class ShearFlowEngine:
    """
    Run controller for SLLOD simulations under Lees-Edwards boundaries.

    Orchestrates a run of ``nblock`` blocks of ``nstep`` steps:
    - Initial force evaluation and overlap check
    - Per-step integration and observable calculation
    - Block averaging
    - Reporting (tables, configuration snapshots)
    - Final force evaluation and overlap check

    Any SimulationError raised along the way propagates to the caller;
    no further steps run and ``finalize`` is not called on
    the reporters, so no final configuration is written.

    Example usage:
        engine = ShearFlowEngine(state, box, config, LennardJonesForce())
        engine.add_reporter(BlockAverageReporter())
        engine.add_reporter(ConfigurationReporter(box, config.nblock))
        engine.run()

    Attributes:
        state: Current simulation state.
        box: Simulation box.
        config: Run parameters.
        force_provider: Force evaluator.
        integrator: Step driver.
        calculator: Observable calculator.
        averages: Block averager.
    """

    def __init__(
        self,
        state: ShearFlowState,
        box: LeesEdwardsBox,
        config: RunConfig,
        force_provider: ForceProvider,
    ) -> None:
        """
        Initialize the engine and evaluate initial forces.

        Args:
            state: Initial state, owned by the engine from now on.
            box: Simulation box.
            config: Run parameters.
            force_provider: Force evaluator.

        Raises:
            ConfigurationError: If the cutoff does not fit the box.
            OverlapError: If the initial configuration overlaps.
        """
        force_provider.check_cutoff(box, config.r_cut)

        self._state = state
        self._box = box
        self._config = config
        self._force_provider = force_provider
        self._integrator = IsokineticSLLODIntegrator(config, box, force_provider)
        self._calculator = ObservableCalculator(box, config.r_cut, force_provider)
        self._averages = BlockAverages(self._calculator.names)
        self._reporters = ReporterGroup()

        self._running = False
        self._total_steps = 0
        self._wall_time = 0.0

        for line in force_provider.describe():
            logger.info(line)
        logger.info("Number of particles %d", state.n_atoms)
        logger.info("Simulation box length %.6f", box.length)
        logger.info("Density %.6f", box.density(state.n_atoms))

        self._total = self._integrator.compute_forces(self._state, "initial")
        self._observables = self._calculator.compute(self._state, self._total)

    @property
    def state(self) -> ShearFlowState:
        """Return current simulation state."""
        return self._state

    @property
    def box(self) -> LeesEdwardsBox:
        """Return simulation box."""
        return self._box

    @property
    def config(self) -> RunConfig:
        """Return run parameters."""
        return self._config

    @property
    def force_provider(self) -> ForceProvider:
        """Return force provider."""
        return self._force_provider

    @property
    def integrator(self) -> IsokineticSLLODIntegrator:
        """Return integrator."""
        return self._integrator

    @property
    def calculator(self) -> ObservableCalculator:
        """Return observable calculator."""
        return self._calculator

    @property
    def averages(self) -> BlockAverages:
        """Return block averager."""
        return self._averages

    @property
    def interaction(self) -> Interaction:
        """Return interaction totals from the last force evaluation."""
        return self._total

    @property
    def observables(self) -> Observables:
        """Return observables of the last completed step."""
        return dict(self._observables)

    @property
    def performance(self) -> dict[str, float]:
        """Return performance statistics."""
        if self._wall_time == 0:
            return {"steps_per_second": 0.0}
        return {
            "steps_per_second": self._total_steps / self._wall_time,
            "wall_time": self._wall_time,
            "total_steps": self._total_steps,
        }

    def add_reporter(self, reporter: Reporter) -> None:
        """Add a reporter."""
        self._reporters.add(reporter)

    def remove_reporter(self, reporter: Reporter) -> None:
        """Remove a reporter."""
        self._reporters.remove(reporter)

    def step(self) -> Observables:
        """
        Perform a single integration step and compute its observables.

        Returns:
            Observables after the step.
        """
        self._total = self._integrator.step(self._state)
        self._observables = self._calculator.compute(self._state, self._total)
        self._total_steps += 1
        return self._observables

    def run(
        self,
        callback: Callable[[ShearFlowEngine], bool] | None = None,
    ) -> ShearFlowState:
        """
        Run all blocks of the simulation.

        Args:
            callback: Optional callback called each step.
                     Return True to stop simulation early; the final
                     checks and reports still run.

        Returns:
            Final simulation state.

        Raises:
            OverlapError: On overlap mid-run or in the final configuration.
            NumericalDegeneracyError: If a thermostat update is undefined.
        """
        config = self._config
        logger.info("Number of blocks %d", config.nblock)
        logger.info("Number of steps per block %d", config.nstep)
        logger.info("Potential cutoff distance %.6f", config.r_cut)
        logger.info("Time step %.6f", config.dt)
        logger.info("Strain rate %.6f", config.strain_rate)

        self._running = True
        self._averages.reset()
        self._reporters.initialize(self._state, self._observables)

        start_time = time.perf_counter()
        try:
            for block in range(1, config.nblock + 1):
                self._averages.begin_block()
                for _ in range(config.nstep):
                    observables = self.step()
                    self._averages.update(observables)
                    self._reporters.report(self._state, observables)
                    if callback is not None and callback(self):
                        self._running = False
                    if not self._running:
                        break

                if self._averages.block_samples > 0:
                    block_means = self._averages.end_block()
                    self._reporters.end_block(block, self._state, block_means)
                    logger.info("Block %d complete, strain %.6f", block, self._state.strain)

                if not self._running:
                    break
        finally:
            self._wall_time += time.perf_counter() - start_time
            self._running = False

        self._total = self._integrator.compute_forces(self._state, "final")
        self._observables = self._calculator.compute(self._state, self._total)

        run_statistics = (
            self._averages.end_run() if self._averages.n_blocks > 0 else None
        )
        self._reporters.finalize(self._state, self._observables, run_statistics)
        logger.info(
            "Run complete: %d steps, final strain %.6f",
            self._state.step,
            self._state.strain,
        )
        return self._state

    def stop(self) -> None:
        """Signal simulation to stop after the current step."""
        self._running = False

    def summary(self) -> dict[str, Any]:
        """
        Summarize the run so far.

        Returns:
            Dictionary with step, time, strain, last observables and
            block statistics.
        """
        return {
            "step": self._state.step,
            "time": self._state.time,
            "strain": self._state.strain,
            "observables": dict(self._observables),
            "averages": self._averages.result(),
        }
