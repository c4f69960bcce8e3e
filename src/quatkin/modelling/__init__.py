"""Artificial inputs and the error-analysis harness."""

from quatkin.modelling.artificial_input import (
    ArtificialInput,
    ArtificialInputSource,
    HarmonicPlaneAnglesInput,
    PlaneAnglesInput,
)
from quatkin.modelling.harness import (
    ConvergencePoint,
    Modelling,
    ModellingResult,
    convergence_study,
    observed_orders,
)

__all__ = [
    "ArtificialInput",
    "ArtificialInputSource",
    "PlaneAnglesInput",
    "HarmonicPlaneAnglesInput",
    "Modelling",
    "ModellingResult",
    "ConvergencePoint",
    "convergence_study",
    "observed_orders",
]
