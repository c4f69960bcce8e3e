"""
quatkin integrates rigid-body orientation kinematics in quaternion algebra, implemented in JAX.
"""

from .config import set_dtype, get_dtype, get_grid_tolerance

from .algebra import (
    Algebra,
    QUATERNION,
    BIQUATERNION,
    PlaneAngles,
    quaternion,
    identity_quaternion,
    quaternion_multiply,
    quaternion_distance,
    plane_angles_to_quaternion,
    quaternion_to_plane_angles,
)

from .quadrature import (
    Integrator,
    SimpsonIntegrator,
    get_default_integrator,
    set_default_integrator,
)

from .algorithms import (
    ALGORITHMS,
    Algorithm,
    ConfigurationError,
    IterativeAlgorithm,
    IterativeRiccatiAlgorithm,
    Supported,
    Trajectory,
    Unsupported,
    UnsupportedCapabilityError,
    WindowPolicy,
    AverageSpeedAlgorithm,
    AverageSpeedRiccatiAlgorithm,
    AutoGeneratedTwoStepAlgorithm,
    TwoStep4DegreeAlgorithm,
    TwoStep4DegreeRiccatiAlgorithm,
    TwoStep4DegreeRiccati2Algorithm,
    PanovAlgorithm,
    Panov4DegreeAlgorithm,
    PanovRiccatiAlgorithm,
)

from .modelling import (
    ArtificialInput,
    PlaneAnglesInput,
    HarmonicPlaneAnglesInput,
    Modelling,
    ModellingResult,
    ConvergencePoint,
    convergence_study,
    observed_orders,
)
