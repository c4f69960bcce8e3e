"""Synthetic input generators with closed-form exact orientation laws.

An :class:`ArtificialInput` knows the exact orientation at any time and,
optionally, the angular rate it implies.  It plays two roles in an
experiment:

- through :meth:`ArtificialInput.get_input_data` it is the input source of
  an integration algorithm;
- through :meth:`ArtificialInput.exact_solution` it provides the reference
  trajectory the algorithm output is compared against.

:class:`PlaneAnglesInput` derives everything from a law for the plane
angles ``(psi, teta, gamma)`` and their rates.  The body angular velocity
follows from :func:`~quatkin.algebra.plane_angle_rates_to_body_rate` and is
integrated with a quadrature rule, so the integrated input carries the
quadrature error of that rule.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Sequence

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from quatkin.algebra import (
    QUATERNION,
    Algebra,
    PlaneAngles,
    plane_angle_rates_to_body_rate,
    plane_angles_to_quaternion,
)
from quatkin.algorithms._types import Capability, Supported, Trajectory, Unsupported
from quatkin.algorithms.base import make_time_grid
from quatkin.config import get_dtype
from quatkin.quadrature import Integrator, get_default_integrator

logger = logging.getLogger(__name__)


class ArtificialInput(abc.ABC):
    """Generator of input data together with the exact solution it implies.

    Subclasses implement :meth:`exact_solution_at` as a JAX-traceable
    function of time, and override :meth:`instantaneous_rate` and
    :meth:`integrated_rate` for the capabilities they support.

    Attributes:
        algebra: Orientation algebra of the exact solution.
    """

    algebra: Algebra = QUATERNION

    @abc.abstractmethod
    def exact_solution_at(self, t: ArrayLike) -> jax.Array:
        """Exact orientation at time *t*."""

    def instantaneous_rate(self, t: float) -> Capability:
        """Angular rate at time *t*, or :class:`Unsupported`."""
        return Unsupported(f"{type(self).__name__} does not provide instantaneous rates")

    def integrated_rate(self, t1: float, t2: float) -> Capability:
        """Angular rate integrated over ``[t1, t2]``, or :class:`Unsupported`."""
        return Unsupported(f"{type(self).__name__} does not provide integrated rates")

    def exact_solution(self, step: float, last_time: float) -> Trajectory:
        """Sample the exact orientation on the grid ``0, step, ..., last_time``.

        The grid is the one an algorithm configured with the same *step*
        and *last_time* produces (see
        :func:`~quatkin.algorithms.base.make_time_grid`).

        Args:
            step: Sampling interval, positive.
            last_time: Inclusive upper time bound, positive.

        Returns:
            Trajectory: Exact orientations on the grid.

        Raises:
            ConfigurationError: If *step* or *last_time* is not positive.
        """
        times = make_time_grid(step, last_time)
        orientations = jax.vmap(self.exact_solution_at)(times)
        return Trajectory(times=times, orientations=orientations)

    def get_input_data(self) -> ArtificialInputSource:
        """Return the input source view of this generator."""
        return ArtificialInputSource(self)


class ArtificialInputSource:
    """Input source backed by an :class:`ArtificialInput`.

    The initial solution is the exact orientation at ``t = 0``; rate queries
    are forwarded to the generator.

    Args:
        generator: The wrapped generator.
    """

    def __init__(self, generator: ArtificialInput) -> None:
        self._generator = generator

    def initial_solution(self) -> jax.Array:
        return self._generator.exact_solution_at(0.0)

    def instantaneous(self, t: float) -> Capability:
        return self._generator.instantaneous_rate(t)

    def integrated(self, t1: float, t2: float) -> Capability:
        return self._generator.integrated_rate(t1, t2)


class PlaneAnglesInput(ArtificialInput):
    """Artificial input defined by a law for the plane angles.

    Subclasses implement :meth:`orientation_law` and
    :meth:`orientation_law_rate`, both JAX-traceable functions of time
    returning ``[psi, teta, gamma]`` and its derivative.

    Args:
        integrator: Quadrature rule for the integrated rate.  Defaults to
            :func:`~quatkin.quadrature.get_default_integrator` at
            construction time.
    """

    def __init__(self, integrator: Integrator | None = None) -> None:
        self._integrator = integrator if integrator is not None else get_default_integrator()
        self._rate = jax.jit(self.body_rate)
        logger.debug("%s integrates rates with %s", type(self).__name__, self._integrator.name)

    @property
    def integrator(self) -> Integrator:
        """Quadrature rule used by :meth:`integrated_rate`."""
        return self._integrator

    @abc.abstractmethod
    def orientation_law(self, t: ArrayLike) -> jax.Array:
        """Plane angles ``[psi, teta, gamma]`` at time *t*."""

    @abc.abstractmethod
    def orientation_law_rate(self, t: ArrayLike) -> jax.Array:
        """Time derivative of :meth:`orientation_law` at *t*."""

    def body_rate(self, t: ArrayLike) -> jax.Array:
        """Body angular velocity at time *t*, shape ``(3,)``."""
        return plane_angle_rates_to_body_rate(self.orientation_law(t), self.orientation_law_rate(t))

    def exact_solution_at(self, t: ArrayLike) -> jax.Array:
        return plane_angles_to_quaternion(self.orientation_law(t))

    def instantaneous_rate(self, t: float) -> Capability:
        return Supported(self._rate(t))

    def integrated_rate(self, t1: float, t2: float) -> Capability:
        return Supported(self._integrator.integrate(self.body_rate, t1, t2))


class HarmonicPlaneAnglesInput(PlaneAnglesInput):
    """Plane angles oscillating harmonically.

    Each angle follows ``A sin(w t + s)`` with its own amplitude ``A``,
    angular frequency ``w`` and phase shift ``s``.

    Args:
        amplitude: Amplitudes ``(psi, teta, gamma)`` in radians.
        frequency: Angular frequencies ``(psi, teta, gamma)`` in rad/s.
        shift: Phase shifts ``(psi, teta, gamma)`` in radians.
            Default: zero.
        integrator: Quadrature rule for the integrated rate.

    Examples:
        ```python
        from quatkin.modelling import HarmonicPlaneAnglesInput
        from quatkin.quadrature import SimpsonIntegrator
        source = HarmonicPlaneAnglesInput(
            (0.1, 0.2, 0.3), (1.0, 2.0, 3.0), integrator=SimpsonIntegrator(1e-4),
        )
        source.exact_solution_at(1.0)
        ```
    """

    def __init__(
        self,
        amplitude: Sequence[float],
        frequency: Sequence[float],
        shift: Sequence[float] = PlaneAngles(),
        integrator: Integrator | None = None,
    ) -> None:
        dtype = get_dtype()
        self._amplitude = jnp.asarray(tuple(amplitude), dtype=dtype)
        self._frequency = jnp.asarray(tuple(frequency), dtype=dtype)
        self._shift = jnp.asarray(tuple(shift), dtype=dtype)
        for name, value in (("amplitude", self._amplitude), ("frequency", self._frequency),
                            ("shift", self._shift)):
            if value.shape != (3,):
                raise ValueError(f"Harmonic {name} must have 3 components, got shape {value.shape}")
        super().__init__(integrator)

    @property
    def amplitude(self) -> PlaneAngles:
        return PlaneAngles(*(float(a) for a in self._amplitude))

    @property
    def frequency(self) -> PlaneAngles:
        return PlaneAngles(*(float(w) for w in self._frequency))

    @property
    def shift(self) -> PlaneAngles:
        return PlaneAngles(*(float(s) for s in self._shift))

    def orientation_law(self, t: ArrayLike) -> jax.Array:
        return self._amplitude * jnp.sin(self._frequency * t + self._shift)

    def orientation_law_rate(self, t: ArrayLike) -> jax.Array:
        return self._amplitude * self._frequency * jnp.cos(self._frequency * t + self._shift)
