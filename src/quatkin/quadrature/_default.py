"""Process-wide default quadrature rule.

Artificial inputs accept an explicit ``integrator`` argument; when it is
omitted they fall back to the rule returned by
:func:`get_default_integrator`.  The first call installs
``SimpsonIntegrator(DEFAULT_SIMPSON_STEP)`` unless another rule was set.

This is module-level mutable state.  Configure it once, before any
concurrent use.
"""

from __future__ import annotations

import logging

from quatkin.quadrature._types import Integrator
from quatkin.quadrature.simpson import SimpsonIntegrator

logger = logging.getLogger(__name__)

DEFAULT_SIMPSON_STEP: float = 1e-4
"""Panel width of the lazily installed default Simpson rule."""

_selected: Integrator | None = None


def get_default_integrator() -> Integrator:
    """Return the selected quadrature rule, installing Simpson if none is set.

    Returns:
        Integrator: The process-wide default rule.
    """
    global _selected
    if _selected is None:
        _selected = SimpsonIntegrator(DEFAULT_SIMPSON_STEP)
        logger.debug("Installed default integrator: %s", _selected.name)
    return _selected


def set_default_integrator(integrator: Integrator | None) -> None:
    """Select the process-wide quadrature rule.

    Passing ``None`` clears the selection; the next
    :func:`get_default_integrator` call installs Simpson again.

    Args:
        integrator: New default rule, or ``None``.

    Raises:
        TypeError: If *integrator* is not an :class:`Integrator`.
    """
    global _selected
    if integrator is not None and not isinstance(integrator, Integrator):
        raise TypeError(
            f"Default integrator must be an Integrator instance, got {type(integrator).__name__}"
        )
    _selected = integrator
    if integrator is not None:
        logger.info("Default integrator set to %s", integrator.name)
