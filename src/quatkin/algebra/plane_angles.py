"""Aircraft ("plane") angles: heading ``psi``, pitch ``teta``, roll ``gamma``.

Provides the ``PlaneAngles`` named tuple used to configure artificial
inputs, and array kernels converting an angle triple to a quaternion, a
quaternion back to angles, and angle rates to the body angular velocity.

Arrays of plane angles have shape ``(3,)`` and order ``[psi, teta, gamma]``.
"""

from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp

from quatkin.config import get_dtype


class PlaneAngles(NamedTuple):
    """Heading, pitch and roll in radians.

    Attributes:
        psi: Heading angle.
        teta: Pitch angle.
        gamma: Roll angle.
    """

    psi: float = 0.0
    teta: float = 0.0
    gamma: float = 0.0

    def to_array(self) -> jax.Array:
        """Return ``[psi, teta, gamma]`` as an array of shape ``(3,)``."""
        return jnp.array([self.psi, self.teta, self.gamma], dtype=get_dtype())


def plane_angles_to_quaternion(angles: jax.Array) -> jax.Array:
    """Convert plane angles to the orientation quaternion.

    Args:
        angles (jax.Array): ``[psi, teta, gamma]`` of shape ``(3,)``.

    Returns:
        jnp.ndarray: Unit quaternion of shape ``(4,)`` in scalar-first order.
    """
    half = angles / 2.0
    cp, ct, cg = jnp.cos(half[0]), jnp.cos(half[1]), jnp.cos(half[2])
    sp, st, sg = jnp.sin(half[0]), jnp.sin(half[1]), jnp.sin(half[2])

    return jnp.array([
        cp * ct * cg - sp * st * sg,
        sp * st * cg + cp * ct * sg,
        sp * ct * cg + cp * st * sg,
        cp * st * cg - sp * ct * sg,
    ])


def quaternion_to_plane_angles(q: jax.Array) -> jax.Array:
    """Recover plane angles from a unit quaternion.

    Inverse of :func:`plane_angles_to_quaternion` for pitch in
    ``(-pi/2, pi/2)``.

    Args:
        q (jax.Array): Unit quaternion of shape ``(4,)``.

    Returns:
        jnp.ndarray: ``[psi, teta, gamma]`` of shape ``(3,)``.
    """
    l0, l1, l2, l3 = q[0], q[1], q[2], q[3]

    psi = jnp.arctan2(l0 * l2 - l1 * l3, l0 * l0 + l1 * l1 - 0.5)
    teta = jnp.arcsin(jnp.clip(2.0 * (l1 * l2 + l0 * l3), -1.0, 1.0))
    gamma = jnp.arctan2(l0 * l1 - l2 * l3, l0 * l0 + l2 * l2 - 0.5)

    return jnp.array([psi, teta, gamma])


def plane_angle_rates_to_body_rate(angles: jax.Array, rates: jax.Array) -> jax.Array:
    """Body angular velocity from plane angles and their time derivatives.

    .. math::

        \\omega_x = \\dot\\gamma + \\dot\\psi \\sin\\theta

        \\omega_y = \\dot\\theta \\sin\\gamma + \\dot\\psi \\cos\\theta \\cos\\gamma

        \\omega_z = \\dot\\theta \\cos\\gamma - \\dot\\psi \\cos\\theta \\sin\\gamma

    Args:
        angles (jax.Array): ``[psi, teta, gamma]`` of shape ``(3,)``.
        rates (jax.Array): ``[psi', teta', gamma']`` of shape ``(3,)``.

    Returns:
        jnp.ndarray: Angular velocity of shape ``(3,)``.
    """
    teta, gamma = angles[1], angles[2]
    d_psi, d_teta, d_gamma = rates[0], rates[1], rates[2]

    return jnp.array([
        d_gamma + d_psi * jnp.sin(teta),
        d_teta * jnp.sin(gamma) + d_psi * jnp.cos(teta) * jnp.cos(gamma),
        d_teta * jnp.cos(gamma) - d_psi * jnp.cos(teta) * jnp.sin(gamma),
    ])
