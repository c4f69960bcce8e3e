"""Type definitions for quadrature rules."""

from __future__ import annotations

import abc
from collections.abc import Callable

from jax import Array
from jax.typing import ArrayLike


class Integrator(abc.ABC):
    """Definite-integral rule for functions of one real variable.

    Subclasses implement :meth:`integrate` for functions ``f(x) -> Array``
    whose value may be a scalar or an array of any fixed shape.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Human-readable name of the rule."""

    @abc.abstractmethod
    def integrate(self, f: Callable[[ArrayLike], Array], x0: float, x1: float) -> Array:
        """Integrate ``f`` over ``[x0, x1]``.

        Args:
            f: Integrand, mapping a scalar to an array.
            x0: Lower bound.
            x1: Upper bound.

        Returns:
            Approximation of the integral, with the shape of ``f(x)``.
        """
