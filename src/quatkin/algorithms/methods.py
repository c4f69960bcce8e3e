"""Concrete orientation-integration methods.

Each class binds one formula from :mod:`quatkin.algorithms.formulas` to the
iterative engine, declaring how many segments it needs and how they are
gathered.  :data:`ALGORITHMS` maps a short slug to each class, for use by
drivers such as ``examples/convergence.py``.

Example:
    ```python
    from quatkin.algorithms import PanovAlgorithm
    from quatkin.modelling import HarmonicPlaneAnglesInput, Modelling

    modelling = Modelling()
    modelling.set_data(HarmonicPlaneAnglesInput((0.1, 0.2, 0.3), (1.0, 2.0, 3.0)))

    algorithm = PanovAlgorithm()
    algorithm.set_step(0.1)
    algorithm.set_last_time(10.0)
    result = modelling.run(algorithm)
    print(result.max_difference)
    ```
"""

from __future__ import annotations

import jax

from quatkin.algorithms import formulas
from quatkin.algorithms.base import Algorithm
from quatkin.algorithms.iterative import IterativeAlgorithm, WindowPolicy
from quatkin.algorithms.riccati import IterativeRiccatiAlgorithm


# ---------------------------------------------------------------------------
# One-step methods
# ---------------------------------------------------------------------------

class AverageSpeedAlgorithm(IterativeAlgorithm):
    """Exact rotation by the integrated rate over each output interval."""

    order = 2

    def get_title(self) -> str:
        return "Average speed method (1-step, 2nd order, integrated input)"

    def get_local_solution(self, t: float, segments: jax.Array) -> jax.Array:
        return formulas.average_speed_increment(segments[0])


class AverageSpeedRiccatiAlgorithm(IterativeRiccatiAlgorithm):
    """Average speed method expressed in the Riccati variable."""

    order = 2

    def get_title(self) -> str:
        return "Average speed method, Riccati form (1-step, 2nd order, integrated input)"

    def get_local_riccati_solution(self, t: float, segments: jax.Array) -> jax.Array:
        return formulas.average_speed_riccati(segments[0])


# ---------------------------------------------------------------------------
# Two-step methods
# ---------------------------------------------------------------------------

class AutoGeneratedTwoStepAlgorithm(IterativeAlgorithm):
    """Two-step series over the previous and the current output interval.

    The first step, which has no previous interval, is taken with the
    average speed formula.  The series stops before the cubic terms, so the
    observed global order is 2.
    """

    order = 2
    window = WindowPolicy.HISTORY

    def get_algorithm_steps_count(self) -> int:
        return 2

    def get_title(self) -> str:
        return "Auto-generated 2-step method (integrated input)"

    def get_local_solution(self, t: float, segments: jax.Array) -> jax.Array:
        return formulas.auto_two_step_increment(segments)

    def get_bootstrap_solution(self, t: float, segments: jax.Array) -> jax.Array:
        return formulas.average_speed_increment(segments[-1])


class TwoStep4DegreeAlgorithm(IterativeAlgorithm):
    """Two-step 4th-degree formula on the halves of each output interval.

    The scalar part omits the ``|s|^4 / 384`` term of the exponential, which
    limits the observed global order to 3.  The Riccati forms carry the full
    4th-degree expansion.
    """

    order = 3

    def get_algorithm_steps_count(self) -> int:
        return 2

    def get_title(self) -> str:
        return "2-step 4th degree method (integrated input)"

    def get_local_solution(self, t: float, segments: jax.Array) -> jax.Array:
        return formulas.two_step_4degree_increment(segments)


class TwoStep4DegreeRiccatiAlgorithm(IterativeRiccatiAlgorithm):
    order = 4

    def get_algorithm_steps_count(self) -> int:
        return 2

    def get_title(self) -> str:
        return "2-step 4th degree method, Riccati form (integrated input)"

    def get_local_riccati_solution(self, t: float, segments: jax.Array) -> jax.Array:
        return formulas.two_step_4degree_riccati(segments)


class TwoStep4DegreeRiccati2Algorithm(IterativeRiccatiAlgorithm):
    order = 4

    def get_algorithm_steps_count(self) -> int:
        return 2

    def get_title(self) -> str:
        return "2-step 4th degree method, Riccati form 2 (integrated input)"

    def get_local_riccati_solution(self, t: float, segments: jax.Array) -> jax.Array:
        return formulas.two_step_4degree_riccati_2(segments)


# ---------------------------------------------------------------------------
# Panov methods
# ---------------------------------------------------------------------------

class PanovAlgorithm(IterativeAlgorithm):
    """Panov's 6th-order rotation vector from four quarter-interval segments."""

    order = 6

    def get_algorithm_steps_count(self) -> int:
        return 4

    def get_title(self) -> str:
        return "Panov method (4-step, 6th order, integrated input)"

    def get_local_solution(self, t: float, segments: jax.Array) -> jax.Array:
        return formulas.panov_increment(segments)


class Panov4DegreeAlgorithm(IterativeAlgorithm):
    """Panov's rotation vector truncated to 4th order."""

    order = 4

    def get_algorithm_steps_count(self) -> int:
        return 4

    def get_title(self) -> str:
        return "Panov method (4-step, 4th order, integrated input)"

    def get_local_solution(self, t: float, segments: jax.Array) -> jax.Array:
        return formulas.panov_4degree_increment(segments)


class PanovRiccatiAlgorithm(IterativeRiccatiAlgorithm):
    order = 6

    def get_algorithm_steps_count(self) -> int:
        return 4

    def get_title(self) -> str:
        return "Panov method, Riccati form (4-step, 6th order, integrated input)"

    def get_local_riccati_solution(self, t: float, segments: jax.Array) -> jax.Array:
        return formulas.panov_riccati(segments)


ALGORITHMS: dict[str, type[Algorithm]] = {
    "average-speed": AverageSpeedAlgorithm,
    "average-speed-riccati": AverageSpeedRiccatiAlgorithm,
    "auto-two-step": AutoGeneratedTwoStepAlgorithm,
    "two-step-4degree": TwoStep4DegreeAlgorithm,
    "two-step-4degree-riccati": TwoStep4DegreeRiccatiAlgorithm,
    "two-step-4degree-riccati-2": TwoStep4DegreeRiccati2Algorithm,
    "panov": PanovAlgorithm,
    "panov-4degree": Panov4DegreeAlgorithm,
    "panov-riccati": PanovRiccatiAlgorithm,
}
"""Registry of the concrete methods, keyed by short slug."""
