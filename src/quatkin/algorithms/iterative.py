"""Iterative multi-step integration engine.

An iterative algorithm advances the orientation one output interval at a
time, composing the previous orientation with a locally computed increment:

.. math::

    q_i = q_{i-1} \\circ \\lambda_i

The order of the factors is significant: the increment multiplies from the
right.  Subclasses provide the increment through
:meth:`IterativeAlgorithm.get_local_solution`, which receives ``K``
integrated-rate segments (oldest first), where ``K`` is the
algorithm's step count.  How those segments are gathered is declared by the
algorithm's :class:`WindowPolicy`.
"""

from __future__ import annotations

import abc
import enum
import logging
from collections import deque

import jax
import jax.numpy as jnp

from quatkin.algorithms._types import ConfigurationError, Trajectory, require
from quatkin.algorithms.base import Algorithm

logger = logging.getLogger(__name__)


class WindowPolicy(enum.Enum):
    """How an algorithm with step count ``K > 1`` obtains its segments.

    Attributes:
        SUBDIVISION: Integrated rate over ``K`` equal sub-intervals of the
            current output interval.
        HISTORY: Integrated rate over the ``K`` most recent whole output
            intervals, the current one last.  The oldest segment is evicted
            as the window advances.
    """

    SUBDIVISION = "subdivision"
    HISTORY = "history"


class IterativeAlgorithm(Algorithm):
    """Algorithm that composes per-interval orientation increments.

    Subclasses implement :meth:`get_local_solution` and may override
    :meth:`get_algorithm_steps_count` and :attr:`window`.  Algorithms using
    :attr:`WindowPolicy.HISTORY` must also override
    :meth:`get_bootstrap_solution`, which answers the first steps while the
    history window is not yet full.
    """

    window: WindowPolicy = WindowPolicy.SUBDIVISION

    def get_algorithm_steps_count(self) -> int:
        """Number of input segments the local solver needs per output step."""
        return 1

    @abc.abstractmethod
    def get_local_solution(self, t: float, segments: jax.Array) -> jax.Array:
        """Compute the orientation increment for the interval ending at *t*.

        Args:
            t: Output time the increment leads to.
            segments: Integrated-rate segments of shape ``(K, 3)`` in time
                order, oldest first.

        Returns:
            The increment, an element of :attr:`algebra`.
        """

    def get_bootstrap_solution(self, t: float, segments: jax.Array) -> jax.Array:
        """Increment for a step taken before the history window is full.

        Args:
            t: Output time the increment leads to.
            segments: The segments gathered so far, fewer than ``K``.

        Raises:
            ConfigurationError: Always, unless overridden.
        """
        raise ConfigurationError(
            f"{type(self).__name__} needs {self.get_algorithm_steps_count()} segments "
            f"but only {segments.shape[0]} are available at t={t} and no bootstrap "
            f"formula is defined"
        )

    def execute(self) -> Trajectory:
        result = self._init_trajectory()
        k = self.get_algorithm_steps_count()
        compose = jax.jit(self.algebra.multiply)
        history: deque[jax.Array] = deque(maxlen=k)

        logger.debug("Executing %s (K=%d, window=%s)", self.get_title(), k, self.window.value)

        for i in range(1, len(result)):
            t_prev = result.time(i - 1)
            t = result.time(i)

            if self.window is WindowPolicy.HISTORY:
                history.append(self._integrated(t_prev, t))
                segments = jnp.stack(list(history))
                if len(history) < k:
                    increment = self.get_bootstrap_solution(t, segments)
                else:
                    increment = self.get_local_solution(t, segments)
            else:
                segments = self._subdivided(t_prev, t, k)
                increment = self.get_local_solution(t, segments)

            result[i] = compose(result[i - 1], increment)

        trajectory = result.finalize()
        logger.debug("Finished %s: %d orientations", self.get_title(), len(trajectory))
        return trajectory

    def _integrated(self, t1: float, t2: float) -> jax.Array:
        """Integrated rate over ``[t1, t2]`` from the input source."""
        return require(
            self._input_data.integrated(t1, t2),
            f"integrated input data on [{t1:g}, {t2:g}]",
        )

    def _subdivided(self, t1: float, t2: float, k: int) -> jax.Array:
        """Integrated rate over ``k`` equal sub-intervals of ``[t1, t2]``."""
        h = (t2 - t1) / k
        bounds = [t1 + j * h for j in range(k)] + [t2]
        return jnp.stack([self._integrated(bounds[j], bounds[j + 1]) for j in range(k)])
