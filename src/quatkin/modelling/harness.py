"""Error-analysis harness.

:class:`Modelling` runs an algorithm against an artificial input and
compares the output with the exact solution sampled on the same grid.
:func:`convergence_study` repeats that over a sequence of step sizes and
:func:`observed_orders` estimates the empirical accuracy order from the
result.

Example:
    ```python
    from quatkin.algorithms import AverageSpeedAlgorithm
    from quatkin.modelling import (
        HarmonicPlaneAnglesInput, Modelling, convergence_study, observed_orders,
    )

    modelling = Modelling(HarmonicPlaneAnglesInput((0.1, 0.2, 0.3), (1.0, 2.0, 3.0)))
    points = convergence_study(modelling, AverageSpeedAlgorithm, [0.1, 0.05, 0.025], 10.0)
    observed_orders(points)  # close to 2
    ```
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import NamedTuple

import jax
from jax import Array

from quatkin.algorithms._types import ConfigurationError, Trajectory
from quatkin.algorithms.base import Algorithm
from quatkin.modelling.artificial_input import ArtificialInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModellingResult:
    """Outcome of one modelling run.

    Attributes:
        algorithm_title: Title of the algorithm that produced the output.
        algorithm_output: Trajectory computed by the algorithm.
        exact_solution: Exact trajectory on the same grid.
        differences: Pointwise distance between the two, shape ``(N,)``.
        max_difference: Largest entry of ``differences``.
    """

    algorithm_title: str
    algorithm_output: Trajectory
    exact_solution: Trajectory
    differences: Array
    max_difference: float

    def __post_init__(self) -> None:
        if self.differences.shape[0] != len(self.algorithm_output):
            raise ValueError(
                f"Modelling result has {self.differences.shape[0]} differences "
                f"for {len(self.algorithm_output)} orientations"
            )

    @classmethod
    def from_trajectories(
        cls,
        algorithm_title: str,
        algorithm_output: Trajectory,
        exact_solution: Trajectory,
        distance: Callable[[Array, Array], Array],
    ) -> ModellingResult:
        """Compare two trajectories sampled on the same grid.

        Args:
            algorithm_title: Title of the algorithm.
            algorithm_output: Computed trajectory.
            exact_solution: Reference trajectory.
            distance: Metric between two orientations.

        Returns:
            ModellingResult: Pointwise and maximum differences.

        Raises:
            ValueError: If the trajectories have different lengths.
        """
        if len(algorithm_output) != len(exact_solution):
            raise ValueError(
                f"Cannot compare trajectories of {len(algorithm_output)} and "
                f"{len(exact_solution)} samples"
            )
        differences = jax.vmap(distance)(algorithm_output.orientations, exact_solution.orientations)
        return cls(
            algorithm_title=algorithm_title,
            algorithm_output=algorithm_output,
            exact_solution=exact_solution,
            differences=differences,
            max_difference=float(differences.max()),
        )


class Modelling:
    """Runs algorithms against an artificial input.

    Args:
        generator: Artificial input to use; may also be set later with
            :meth:`set_data`.
    """

    def __init__(self, generator: ArtificialInput | None = None) -> None:
        self._generator = generator

    def set_data(self, generator: ArtificialInput) -> None:
        """Assign the artificial input.  Mandatory before :meth:`run`."""
        self._generator = generator

    def get_data(self) -> ArtificialInput | None:
        return self._generator

    def run(self, algorithm: Algorithm) -> ModellingResult:
        """Execute *algorithm* on the artificial input and measure its error.

        The algorithm's input source is replaced by the generator's; its
        step and last time must already be set.

        Args:
            algorithm: Configured algorithm.

        Returns:
            ModellingResult: Output, exact solution and their differences.

        Raises:
            ConfigurationError: If no artificial input is set, or the
                algorithm is not fully configured.
            UnsupportedCapabilityError: If the generator cannot provide the
                input the algorithm requires.
        """
        if self._generator is None:
            raise ConfigurationError("Modelling: artificial input data has not been set")

        algorithm.set_input_data(self._generator.get_input_data())
        output = algorithm.execute()
        exact = self._generator.exact_solution(algorithm.get_step(), algorithm.get_last_time())

        result = ModellingResult.from_trajectories(
            algorithm.get_title(), output, exact, algorithm.algebra.distance,
        )
        logger.info(
            "%s: step=%g, last_time=%g, max difference=%.6e",
            result.algorithm_title, algorithm.get_step(), algorithm.get_last_time(),
            result.max_difference,
        )
        return result


# ---------------------------------------------------------------------------
# Convergence study
# ---------------------------------------------------------------------------

class ConvergencePoint(NamedTuple):
    """Maximum error of one algorithm run at one step size.

    Attributes:
        step: Output step of the run.
        max_difference: Maximum distance to the exact solution.
        title: Title of the algorithm.
    """

    step: float
    max_difference: float
    title: str


def convergence_study(
    modelling: Modelling,
    algorithm_factory: Callable[[], Algorithm],
    steps: Iterable[float],
    last_time: float,
) -> list[ConvergencePoint]:
    """Run a fresh algorithm for each step size.

    Args:
        modelling: Harness with its artificial input set.
        algorithm_factory: Zero-argument callable returning a new algorithm,
            e.g. the algorithm class itself.
        steps: Output steps to try, usually decreasing.
        last_time: Inclusive upper time bound of every run.

    Returns:
        list[ConvergencePoint]: One point per step, in the order given.
    """
    points = []
    for step in steps:
        algorithm = algorithm_factory()
        algorithm.set_step(step)
        algorithm.set_last_time(last_time)
        result = modelling.run(algorithm)
        points.append(ConvergencePoint(float(step), result.max_difference, result.algorithm_title))
    return points


def observed_orders(points: Sequence[ConvergencePoint]) -> list[float]:
    """Empirical accuracy order between consecutive convergence points.

    For points ``k`` and ``k + 1`` the order is
    ``log(e_k / e_{k+1}) / log(h_k / h_{k+1})``.

    Args:
        points: Result of :func:`convergence_study`.

    Returns:
        list[float]: ``len(points) - 1`` order estimates.  ``nan`` where an
        error is zero or two steps coincide.
    """
    orders = []
    for prev, curr in zip(points, points[1:]):
        if prev.max_difference <= 0.0 or curr.max_difference <= 0.0 or prev.step == curr.step:
            orders.append(math.nan)
            continue
        orders.append(
            math.log(prev.max_difference / curr.max_difference) / math.log(prev.step / curr.step)
        )
    return orders
