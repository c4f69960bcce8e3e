"""Quaternion algebra kernels.

All functions operate on raw JAX arrays of shape ``(4,)`` in scalar-first
order ``[w, x, y, z]``.  Unlike an attitude representation, nothing here
normalizes: orientation increments produced by truncated series are not
unit quaternions, and the error-analysis harness has to see that drift.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from quatkin.config import get_dtype


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def quaternion(s: ArrayLike, v: ArrayLike) -> jax.Array:
    """Build a quaternion from its scalar and vector parts.

    Args:
        s (ArrayLike): Scalar part.
        v (ArrayLike): Vector part of shape ``(3,)``.

    Returns:
        jnp.ndarray: Quaternion of shape ``(4,)``.
    """
    dtype = get_dtype()
    s = jnp.asarray(s, dtype=dtype)
    v = jnp.asarray(v, dtype=dtype)
    return jnp.concatenate([s[None], v])


def pure_quaternion(v: ArrayLike) -> jax.Array:
    """Embed a 3-vector as a quaternion with zero scalar part."""
    return quaternion(0.0, v)


def scalar_quaternion(s: ArrayLike) -> jax.Array:
    """Embed a real number as a quaternion with zero vector part."""
    return quaternion(s, jnp.zeros(3))


def identity_quaternion() -> jax.Array:
    """Return the multiplicative identity ``[1, 0, 0, 0]``."""
    return scalar_quaternion(1.0)


def scalar_part(q: jax.Array) -> jax.Array:
    """Scalar part ``w``."""
    return q[0]


def vector_part(q: jax.Array) -> jax.Array:
    """Vector part ``[x, y, z]``."""
    return q[1:]


# ---------------------------------------------------------------------------
# Products and norms
# ---------------------------------------------------------------------------

def quaternion_multiply(q1: jax.Array, q2: jax.Array) -> jax.Array:
    """Hamilton product ``q1 * q2``.

    The product does not commute; ``quaternion_multiply(a, b)`` rotates by
    ``a`` first in the body-frame composition convention used by the
    integration engine (``q_new = q_old * increment``).

    Args:
        q1 (jax.Array): Left factor of shape ``(4,)``.
        q2 (jax.Array): Right factor of shape ``(4,)``.

    Returns:
        jnp.ndarray: Product quaternion of shape ``(4,)``, not normalized.
    """
    s1, v1 = q1[0], q1[1:]
    s2, v2 = q2[0], q2[1:]

    s = s1 * s2 - jnp.dot(v1, v2)
    v = s1 * v2 + s2 * v1 + jnp.cross(v1, v2)

    return jnp.concatenate([jnp.array([s]), v])


def quaternion_conjugate(q: jax.Array) -> jax.Array:
    """Return the conjugate ``[w, -x, -y, -z]``."""
    return q * jnp.array([1.0, -1.0, -1.0, -1.0], dtype=q.dtype)


def quaternion_norm(q: jax.Array) -> jax.Array:
    """Return the norm of a quaternion: the sum of squared components."""
    return jnp.sum(q * q)


def quaternion_length(q: jax.Array) -> jax.Array:
    """Return the length (tensor) of a quaternion: the square root of its norm."""
    return jnp.sqrt(quaternion_norm(q))


def quaternion_inverse(q: jax.Array) -> jax.Array:
    """Return the multiplicative inverse ``conj(q) / norm(q)``."""
    return quaternion_conjugate(q) / quaternion_norm(q)


def quaternion_distance(a: jax.Array, b: jax.Array) -> jax.Array:
    """Distance between two quaternions: the length of their difference.

    Args:
        a (jax.Array): Quaternion of shape ``(4,)``.
        b (jax.Array): Quaternion of shape ``(4,)``.

    Returns:
        jax.Array: Non-negative scalar.
    """
    return quaternion_length(a - b)
