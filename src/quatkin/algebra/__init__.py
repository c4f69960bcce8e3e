"""Algebraic primitives for orientation integration.

All kernels operate on raw JAX arrays:

- quaternions, shape ``(4,)`` scalar-first ``[w, x, y, z]``
- 3-vectors, shape ``(3,)``
- biquaternions ``a + s b`` (``s^2 = 0``), shape ``(2, 4)``
- plane angles ``[psi, teta, gamma]``, shape ``(3,)``

:class:`Algebra` bundles composition and distance for the quaternion and
biquaternion algebras (:data:`QUATERNION`, :data:`BIQUATERNION`).
"""

from quatkin.algebra._types import BIQUATERNION, QUATERNION, Algebra
from quatkin.algebra.biquaternion import (
    biquaternion,
    biquaternion_distance,
    biquaternion_multiply,
    identity_biquaternion,
)
from quatkin.algebra.plane_angles import (
    PlaneAngles,
    plane_angle_rates_to_body_rate,
    plane_angles_to_quaternion,
    quaternion_to_plane_angles,
)
from quatkin.algebra.quaternion import (
    identity_quaternion,
    pure_quaternion,
    quaternion,
    quaternion_conjugate,
    quaternion_distance,
    quaternion_inverse,
    quaternion_length,
    quaternion_multiply,
    quaternion_norm,
    scalar_part,
    scalar_quaternion,
    vector_part,
)
from quatkin.algebra.vector import cross, dot, skew_matrix, vector_length, vector_norm

__all__ = [
    # Algebras
    "Algebra",
    "QUATERNION",
    "BIQUATERNION",
    # Quaternion
    "quaternion",
    "pure_quaternion",
    "scalar_quaternion",
    "identity_quaternion",
    "scalar_part",
    "vector_part",
    "quaternion_multiply",
    "quaternion_conjugate",
    "quaternion_inverse",
    "quaternion_norm",
    "quaternion_length",
    "quaternion_distance",
    # Vector
    "vector_norm",
    "vector_length",
    "cross",
    "dot",
    "skew_matrix",
    # Biquaternion
    "biquaternion",
    "identity_biquaternion",
    "biquaternion_multiply",
    "biquaternion_distance",
    # Plane angles
    "PlaneAngles",
    "plane_angles_to_quaternion",
    "quaternion_to_plane_angles",
    "plane_angle_rates_to_body_rate",
]
