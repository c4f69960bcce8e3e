"""Composite Simpson rule.

The interval ``[x0, x1]`` is split into an even number ``N`` of panels of
width about ``step`` (never fewer than 10) and the integral is approximated
by

.. math::

    \\int_{x_0}^{x_1} f(x)\\,dx \\approx \\frac{x_1 - x_0}{3N}
        \\left(f_0 + 4 f_1 + 2 f_2 + \\dots + 4 f_{N-1} + f_N\\right)

The rule is exact for cubic polynomials and its error is :math:`O(h^4)`.

The node evaluation and the weighted sum run as one jitted kernel with the
integrand as a static argument.  The kernel is compiled once per integrand
and panel count; the weights for each panel count are built once and cached.
Integrands must therefore be hashable (plain functions and bound methods
are).
"""

from __future__ import annotations

import functools
from collections.abc import Callable

import jax
import jax.numpy as jnp
import numpy as np
from jax import Array
from jax.typing import ArrayLike

from quatkin.config import get_dtype
from quatkin.quadrature._types import Integrator

_MIN_PANELS = 10


@functools.lru_cache(maxsize=None)
def _weights(n: int, dtype) -> np.ndarray:
    weights = np.where(np.arange(n + 1) % 2 == 1, 4.0, 2.0)
    weights[0] = weights[n] = 1.0
    weights = weights.astype(dtype)
    weights.flags.writeable = False
    return weights


def simpson_weights(n: int) -> Array:
    """Return the Simpson weights ``[1, 4, 2, 4, ..., 2, 4, 1]`` for ``n`` panels.

    Args:
        n: Even number of panels.

    Returns:
        Array of shape ``(n + 1,)`` in the configured dtype.
    """
    return jnp.asarray(_weights(n, get_dtype()))


@functools.partial(jax.jit, static_argnames=("f",))
def _simpson_sum(f: Callable[[ArrayLike], Array], weights: Array, x0: ArrayLike, x1: ArrayLike) -> Array:
    # Panel count is static through the shape of weights.
    n = weights.shape[0] - 1
    h = (x1 - x0) / n
    xs = x0 + h * jnp.arange(n + 1, dtype=weights.dtype)
    values = jax.vmap(f)(xs)
    return jnp.tensordot(weights, values, axes=1) * (h / 3.0)


class SimpsonIntegrator(Integrator):
    """Composite Simpson rule with a fixed target panel width.

    Args:
        step: Target panel width; a smaller step gives a more accurate
            result.  Default: ``1e-4``.

    Raises:
        ValueError: If *step* is not positive.

    Examples:
        ```python
        import jax.numpy as jnp
        from quatkin.quadrature import SimpsonIntegrator
        simpson = SimpsonIntegrator(1e-3)
        simpson.integrate(lambda x: jnp.array([x**2, x**3]), 0.0, 1.0)
        ```
    """

    def __init__(self, step: float = 1e-4) -> None:
        if not step > 0.0:
            raise ValueError(f"Simpson step must be positive, got {step}")
        self._step = float(step)

    @property
    def step(self) -> float:
        """Target panel width."""
        return self._step

    @property
    def name(self) -> str:
        return f"Simpson rule (step = {self._step:g})"

    def panels(self, x0: float, x1: float) -> int:
        """Number of panels used for ``[x0, x1]``: even and at least 10."""
        n = max(int((x1 - x0) / self._step), _MIN_PANELS)
        if n % 2:
            n += 1
        return n

    def integrate(self, f: Callable[[ArrayLike], Array], x0: float, x1: float) -> Array:
        x0 = float(x0)
        x1 = float(x1)
        n = self.panels(x0, x1)
        return _simpson_sum(f, _weights(n, get_dtype()), x0, x1)

    def __repr__(self) -> str:
        return f"SimpsonIntegrator(step={self._step!r})"
