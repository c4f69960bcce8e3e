"""Orientation-integration algorithms.

The :class:`Algorithm` abstraction, the iterative multi-step engine, its
Riccati reformulation and the concrete local-solution methods.
"""

from quatkin.algorithms._types import (
    Capability,
    ConfigurationError,
    InputSource,
    Supported,
    Trajectory,
    Unsupported,
    UnsupportedCapabilityError,
    require,
)
from quatkin.algorithms.base import Algorithm, TrajectoryBuffer, make_time_grid
from quatkin.algorithms.iterative import IterativeAlgorithm, WindowPolicy
from quatkin.algorithms.methods import (
    ALGORITHMS,
    AutoGeneratedTwoStepAlgorithm,
    AverageSpeedAlgorithm,
    AverageSpeedRiccatiAlgorithm,
    Panov4DegreeAlgorithm,
    PanovAlgorithm,
    PanovRiccatiAlgorithm,
    TwoStep4DegreeAlgorithm,
    TwoStep4DegreeRiccati2Algorithm,
    TwoStep4DegreeRiccatiAlgorithm,
)
from quatkin.algorithms.riccati import (
    IterativeRiccatiAlgorithm,
    quaternion_to_riccati,
    riccati_to_quaternion,
)

__all__ = [
    # Types and errors
    "Capability",
    "ConfigurationError",
    "InputSource",
    "Supported",
    "Trajectory",
    "Unsupported",
    "UnsupportedCapabilityError",
    "require",
    # Engine
    "Algorithm",
    "TrajectoryBuffer",
    "make_time_grid",
    "IterativeAlgorithm",
    "WindowPolicy",
    "IterativeRiccatiAlgorithm",
    "riccati_to_quaternion",
    "quaternion_to_riccati",
    # Methods
    "ALGORITHMS",
    "AverageSpeedAlgorithm",
    "AverageSpeedRiccatiAlgorithm",
    "AutoGeneratedTwoStepAlgorithm",
    "TwoStep4DegreeAlgorithm",
    "TwoStep4DegreeRiccatiAlgorithm",
    "TwoStep4DegreeRiccati2Algorithm",
    "PanovAlgorithm",
    "Panov4DegreeAlgorithm",
    "PanovRiccatiAlgorithm",
]
