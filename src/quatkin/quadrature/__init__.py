"""Numerical quadrature for integrated angular-rate inputs.

Available rules:

- :class:`SimpsonIntegrator` -- Composite Simpson rule (fixed panel width)

All rules share a common interface::

    value = integrator.integrate(f, x0, x1)

where ``f(x) -> Array`` is a hashable, JAX-traceable function of a scalar.
:class:`SimpsonIntegrator` compiles one kernel per integrand and panel count.
A process-wide default rule is available through
:func:`get_default_integrator` / :func:`set_default_integrator`.
"""

from quatkin.quadrature._default import (
    DEFAULT_SIMPSON_STEP,
    get_default_integrator,
    set_default_integrator,
)
from quatkin.quadrature._types import Integrator
from quatkin.quadrature.simpson import SimpsonIntegrator, simpson_weights

__all__ = [
    "Integrator",
    "SimpsonIntegrator",
    "simpson_weights",
    "DEFAULT_SIMPSON_STEP",
    "get_default_integrator",
    "set_default_integrator",
]
