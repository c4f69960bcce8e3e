"""Algorithm abstraction and shared trajectory initialisation.

Every integration method is an :class:`Algorithm`: it is configured with an
input source, an output step and a last time, and ``execute()`` returns the
orientation :class:`~quatkin.algorithms._types.Trajectory` on the grid
``0, step, 2*step, ..., last_time``.
"""

from __future__ import annotations

import abc
import logging
import math

import jax
import jax.numpy as jnp

from quatkin.algebra import QUATERNION, Algebra
from quatkin.algorithms._types import ConfigurationError, InputSource, Trajectory
from quatkin.config import get_dtype, get_grid_tolerance

logger = logging.getLogger(__name__)


def make_time_grid(step: float, last_time: float) -> jax.Array:
    """Build the output time grid ``0, step, 2*step, ...`` up to ``last_time``.

    A point is kept when it does not exceed ``last_time`` by more than
    :func:`~quatkin.config.get_grid_tolerance`, so the grid has
    ``floor((last_time + eps) / step) + 1`` points.  When ``step`` is larger
    than ``last_time`` the grid is ``[0, last_time]``: the single interval is
    truncated at the last time rather than dropped.

    Args:
        step: Sampling interval, positive.
        last_time: Inclusive upper time bound, positive.

    Returns:
        jnp.ndarray: Strictly increasing times of shape ``(N,)`` with ``N >= 2``.

    Raises:
        ConfigurationError: If *step* or *last_time* is not positive.
    """
    if step is None or not step > 0.0:
        raise ConfigurationError(f"Algorithm step must be positive, got {step}")
    if last_time is None or not last_time > 0.0:
        raise ConfigurationError(f"Algorithm last time must be positive, got {last_time}")

    dtype = get_dtype()
    eps = get_grid_tolerance()

    if step > last_time + eps:
        return jnp.array([0.0, last_time], dtype=dtype)

    n = int(math.floor((last_time + eps) / step))
    return step * jnp.arange(n + 1, dtype=dtype)


class TrajectoryBuffer:
    """Pre-sized, write-once storage for a trajectory under construction.

    Index 0 is seeded with the initial orientation; every other index must
    be written exactly once before :meth:`finalize`.

    Args:
        times: Time grid of shape ``(N,)``.
        initial: Orientation at ``times[0]``.
    """

    def __init__(self, times: jax.Array, initial: jax.Array) -> None:
        self._times = times
        self._time_values = [float(t) for t in times.tolist()]
        self._orientations: list[jax.Array | None] = [None] * len(self._time_values)
        self._orientations[0] = initial

    @property
    def times(self) -> jax.Array:
        """Time grid of shape ``(N,)``."""
        return self._times

    def time(self, idx: int) -> float:
        """Time of grid point *idx* as a Python float."""
        self._check_index(idx)
        return self._time_values[idx]

    def __len__(self) -> int:
        return len(self._time_values)

    def __getitem__(self, idx: int) -> jax.Array:
        self._check_index(idx)
        q = self._orientations[idx]
        if q is None:
            raise ValueError(f"Orientation at index {idx} has not been computed yet")
        return q

    def __setitem__(self, idx: int, q: jax.Array) -> None:
        self._check_index(idx)
        if self._orientations[idx] is not None:
            raise ValueError(f"Orientation at index {idx} has already been written")
        self._orientations[idx] = q

    def finalize(self) -> Trajectory:
        """Freeze the buffer into a :class:`Trajectory`.

        Raises:
            ValueError: If any orientation is still missing.
        """
        missing = [i for i, q in enumerate(self._orientations) if q is None]
        if missing:
            raise ValueError(f"Trajectory is incomplete: {len(missing)} orientations missing")
        return Trajectory(times=self._times, orientations=jnp.stack(self._orientations))

    def _check_index(self, idx: int) -> None:
        if not 0 <= idx < len(self._time_values):
            raise IndexError(f"Index {idx} out of range for {len(self._time_values)} grid points")


class Algorithm(abc.ABC):
    """Interface of every orientation-integration method.

    The input source, the step and the last time must be set before
    :meth:`execute` is called.  The algorithm then finds solutions at
    ``0, step, 2*step, ..., last_time``.

    Attributes:
        algebra: Orientation algebra the method works in.
        order: Intended asymptotic accuracy order, for reporting.
    """

    algebra: Algebra = QUATERNION
    order: int | None = None

    def __init__(self) -> None:
        self._input_data: InputSource | None = None
        self._step: float | None = None
        self._last_time: float | None = None

    def set_input_data(self, input_data: InputSource) -> None:
        """Assign the input source.  Mandatory before :meth:`execute`."""
        self._input_data = input_data

    def set_step(self, step: float) -> None:
        """Assign the output sampling interval.  Mandatory before :meth:`execute`."""
        self._step = step

    def get_step(self) -> float | None:
        """Return the output sampling interval."""
        return self._step

    def set_last_time(self, last_time: float) -> None:
        """Assign the inclusive upper time bound.  Mandatory before :meth:`execute`."""
        self._last_time = last_time

    def get_last_time(self) -> float | None:
        """Return the inclusive upper time bound."""
        return self._last_time

    @abc.abstractmethod
    def execute(self) -> Trajectory:
        """Run the algorithm and return the computed trajectory."""

    @abc.abstractmethod
    def get_title(self) -> str:
        """Return the human-readable name of the method."""

    def _init_trajectory(self) -> TrajectoryBuffer:
        """Build the time grid and seed index 0 with the initial solution.

        Every concrete algorithm calls this before filling in the
        remaining indices.

        Raises:
            ConfigurationError: If the input source is missing, or the step
                or last time is missing or not positive.
        """
        if self._input_data is None:
            raise ConfigurationError(f"{type(self).__name__}: input data has not been set")

        times = make_time_grid(self._step, self._last_time)
        initial = jnp.asarray(self._input_data.initial_solution(), dtype=get_dtype())

        logger.debug(
            "%s: %d grid points, step=%g, last_time=%g",
            type(self).__name__, times.shape[0], self._step, self._last_time,
        )
        return TrajectoryBuffer(times, initial)
