"""Biquaternion kernels.

A biquaternion is ``a + s b`` where ``a`` and ``b`` are quaternions and
``s`` is the dual unit (``s^2 = 0``).  It is stored as an array of shape
``(2, 4)`` with ``a`` in row 0 and ``b`` in row 1.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from quatkin.algebra.quaternion import (
    identity_quaternion,
    quaternion_distance,
    quaternion_multiply,
)
from quatkin.config import get_dtype


def biquaternion(a: ArrayLike, b: ArrayLike) -> jax.Array:
    """Stack the two quaternion parts into a ``(2, 4)`` array."""
    dtype = get_dtype()
    return jnp.stack([jnp.asarray(a, dtype=dtype), jnp.asarray(b, dtype=dtype)])


def identity_biquaternion() -> jax.Array:
    """Return ``1 + s 0``."""
    return biquaternion(identity_quaternion(), jnp.zeros(4))


def biquaternion_multiply(p: jax.Array, q: jax.Array) -> jax.Array:
    """Biquaternion product.

    Computes ``(p.a q.a, p.a q.b + p.b q.a)``; the ``p.b q.b`` term
    vanishes because ``s^2 = 0``.

    Args:
        p (jax.Array): Left factor of shape ``(2, 4)``.
        q (jax.Array): Right factor of shape ``(2, 4)``.

    Returns:
        jnp.ndarray: Product of shape ``(2, 4)``.
    """
    a = quaternion_multiply(p[0], q[0])
    b = quaternion_multiply(p[0], q[1]) + quaternion_multiply(p[1], q[0])
    return jnp.stack([a, b])


def biquaternion_distance(p: jax.Array, q: jax.Array) -> jax.Array:
    """Distance between biquaternions: the larger of the two part distances."""
    return jnp.maximum(quaternion_distance(p[0], q[0]), quaternion_distance(p[1], q[1]))
