"""Local-solution formulas.

Pure, JIT-compiled kernels computing the orientation increment (or its
Riccati variable) for one output interval from integrated angular-rate
segments.  Multi-segment formulas take an array of shape ``(K, 3)`` with
the segments in time order, oldest first.

================================  ===  =====  ==========================
Formula                           K    Order  Segments
================================  ===  =====  ==========================
average speed                     1    2      current interval
average speed (Riccati)           1    2      current interval
auto-generated 2-step             2    ~4     previous + current interval
2-step 4th degree (+ Riccati)     2    4      halves of current interval
Panov                             4    6      quarters of current interval
Panov 4th degree                  4    4      quarters of current interval
Panov (Riccati)                   4    6      quarters of current interval
================================  ===  =====  ==========================

A zero rotation segment maps to the identity increment (and to a zero
Riccati variable) instead of dividing by zero.
"""

from __future__ import annotations

import functools

import jax
import jax.numpy as jnp

from quatkin.algebra.quaternion import pure_quaternion, quaternion, quaternion_multiply
from quatkin.algebra.vector import cross, dot, skew_matrix, vector_length, vector_norm


# ---------------------------------------------------------------------------
# Rotation-vector mappings
# ---------------------------------------------------------------------------

@jax.jit
def average_speed_increment(phi: jax.Array) -> jax.Array:
    """Exact increment of a rotation by the vector ``phi``.

    ``(cos(|phi| / 2), phi / |phi| * sin(|phi| / 2))``.

    Args:
        phi (jax.Array): Rotation vector (integrated rate) of shape ``(3,)``.

    Returns:
        jnp.ndarray: Unit quaternion of shape ``(4,)``.
    """
    m = vector_length(phi)
    safe_m = jnp.where(m > 0.0, m, 1.0)
    scale = jnp.where(m > 0.0, jnp.sin(m / 2.0) / safe_m, 0.5)
    return quaternion(jnp.cos(m / 2.0), phi * scale)


@jax.jit
def average_speed_riccati(phi: jax.Array) -> jax.Array:
    """Riccati variable of a rotation by the vector ``phi``.

    ``phi / |phi| * tan(|phi| / 4)``.

    Args:
        phi (jax.Array): Rotation vector of shape ``(3,)``.

    Returns:
        jnp.ndarray: Riccati variable of shape ``(3,)``.
    """
    m = vector_length(phi)
    safe_m = jnp.where(m > 0.0, m, 1.0)
    scale = jnp.where(m > 0.0, jnp.tan(m / 4.0) / safe_m, 0.25)
    return phi * scale


# ---------------------------------------------------------------------------
# Two-step formulas
# ---------------------------------------------------------------------------

@jax.jit
def auto_two_step_increment(segments: jax.Array) -> jax.Array:
    """Auto-generated two-step increment over consecutive output intervals.

    With ``omega2`` the previous interval's segment and ``omega1`` the
    current one, both read as pure quaternions:

    .. math::

        \\lambda = 1 + \\tfrac12\\omega_1 + \\tfrac{17}{192}\\omega_1^2
            + \\tfrac{1}{64}\\omega_1\\omega_2 + \\tfrac{1}{64}\\omega_2\\omega_1
            + \\tfrac{1}{192}\\omega_2^2

    Args:
        segments (jax.Array): ``[omega2, omega1]`` of shape ``(2, 3)``.

    Returns:
        jnp.ndarray: Increment quaternion of shape ``(4,)``.
    """
    omega2 = pure_quaternion(segments[0])
    omega1 = pure_quaternion(segments[1])
    one = quaternion(1.0, jnp.zeros(3))

    return (
        one
        + 0.5 * omega1
        + 17.0 / 192.0 * quaternion_multiply(omega1, omega1)
        + 1.0 / 64.0 * quaternion_multiply(omega1, omega2)
        + 1.0 / 64.0 * quaternion_multiply(omega2, omega1)
        + 1.0 / 192.0 * quaternion_multiply(omega2, omega2)
    )


@jax.jit
def two_step_4degree_increment(segments: jax.Array) -> jax.Array:
    """Two-step 4th-degree increment from the two halves of the interval.

    With ``s = g0 + g1``: scalar part ``1 - |s|^2 / 8``, vector part
    ``(1/2 - |s|^2 / 48) * (s + 2/3 g0 x g1)``.

    Args:
        segments (jax.Array): ``[g0, g1]`` of shape ``(2, 3)``.

    Returns:
        jnp.ndarray: Increment quaternion of shape ``(4,)``.
    """
    g0, g1 = segments[0], segments[1]
    s = g0 + g1
    s_sq = vector_norm(s)

    return quaternion(
        1.0 - s_sq / 8.0,
        (0.5 - s_sq / 48.0) * (s + cross(g0, g1) * 2.0 / 3.0),
    )


@jax.jit
def two_step_4degree_riccati(segments: jax.Array) -> jax.Array:
    """Two-step 4th-degree formula in the Riccati variable.

    ``(g0 + g1) / 4 + g0 x g1 / 6 - vec(g0^3 + g1^3) / 48`` with the cubes
    taken in quaternion algebra.

    Args:
        segments (jax.Array): ``[g0, g1]`` of shape ``(2, 3)``.

    Returns:
        jnp.ndarray: Riccati variable of shape ``(3,)``.
    """
    g0, g1 = segments[0], segments[1]
    q0 = pure_quaternion(g0)
    q1 = pure_quaternion(g1)

    cubes = (
        quaternion_multiply(quaternion_multiply(q0, q0), q0)
        + quaternion_multiply(quaternion_multiply(q1, q1), q1)
    )
    return (g0 + g1) / 4.0 + cross(g0, g1) / 6.0 - cubes[1:] / 48.0


@jax.jit
def two_step_4degree_riccati_2(segments: jax.Array) -> jax.Array:
    """Two-step 4th-degree formula rewritten in the Riccati variable.

    Derived from :func:`two_step_4degree_increment`; with ``s = g0 + g1``:
    ``s / 4 + g0 x g1 / 6 + s |s|^2 / 192``.

    Args:
        segments (jax.Array): ``[g0, g1]`` of shape ``(2, 3)``.

    Returns:
        jnp.ndarray: Riccati variable of shape ``(3,)``.
    """
    g0, g1 = segments[0], segments[1]
    s = g0 + g1
    return s / 4.0 + cross(g0, g1) / 6.0 + s * vector_norm(s) / 192.0


# ---------------------------------------------------------------------------
# Panov formulas
# ---------------------------------------------------------------------------

@functools.partial(jax.jit, static_argnames=("sixth_order",))
def panov_rotation_vector(segments: jax.Array, sixth_order: bool = True) -> jax.Array:
    """Panov's rotation vector from four quarter-interval segments.

    .. math::

        \\varphi = \\sum_j \\gamma_j
            + \\tfrac{22}{45}(\\Gamma_1 + \\Gamma_2)(\\gamma_3 + \\gamma_4)
            + \\tfrac{32}{45}(\\Gamma_1\\gamma_2 + \\Gamma_3\\gamma_4)

    where :math:`\\Gamma_j` is the skew matrix of :math:`\\gamma_j`.  The
    6th-order version adds

    .. math::

        \\tfrac{32}{45}(\\Gamma_1\\Gamma_2\\gamma_4 - \\Gamma_4\\Gamma_1\\gamma_3)
            + \\tfrac{64}{45}(\\gamma_2 \\cdot \\gamma_3)\\,\\Gamma_2\\gamma_3

    Args:
        segments (jax.Array): ``[g1, g2, g3, g4]`` of shape ``(4, 3)``.
        sixth_order (bool): Include the 6th-order correction. Default: ``True``.

    Returns:
        jnp.ndarray: Rotation vector of shape ``(3,)``.
    """
    g1, g2, g3, g4 = segments[0], segments[1], segments[2], segments[3]
    G1, G2, G3, G4 = (skew_matrix(g) for g in (g1, g2, g3, g4))

    phi = (
        22.0 / 45.0 * (G1 + G2) @ (g3 + g4)
        + 32.0 / 45.0 * (G1 @ g2 + G3 @ g4)
    )
    phi = phi + jnp.sum(segments, axis=0)

    if sixth_order:
        phi = phi + (
            32.0 / 45.0 * (G1 @ G2 @ g4 - G4 @ G1 @ g3)
            + 64.0 / 45.0 * dot(g2, g3) * (G2 @ g3)
        )

    return phi


@jax.jit
def panov_increment(segments: jax.Array) -> jax.Array:
    """Panov 6th-order increment: the exact rotation by Panov's vector."""
    return average_speed_increment(panov_rotation_vector(segments, sixth_order=True))


@jax.jit
def panov_4degree_increment(segments: jax.Array) -> jax.Array:
    """Panov increment without the 6th-order correction term."""
    return average_speed_increment(panov_rotation_vector(segments, sixth_order=False))


@jax.jit
def panov_riccati(segments: jax.Array) -> jax.Array:
    """Riccati variable of the rotation by Panov's 6th-order vector."""
    return average_speed_riccati(panov_rotation_vector(segments, sixth_order=True))
