"""3-vector kernels used by the local-solution formulas."""

from __future__ import annotations

import jax
import jax.numpy as jnp


def vector_norm(v: jax.Array) -> jax.Array:
    """Return the norm of a vector: the sum of squared components."""
    return jnp.sum(v * v)


def vector_length(v: jax.Array) -> jax.Array:
    """Return the Euclidean length of a vector."""
    return jnp.sqrt(vector_norm(v))


def cross(a: jax.Array, b: jax.Array) -> jax.Array:
    """Cross product ``a x b``."""
    return jnp.cross(a, b)


def dot(a: jax.Array, b: jax.Array) -> jax.Array:
    """Dot product ``a . b``."""
    return jnp.dot(a, b)


def skew_matrix(v: jax.Array) -> jax.Array:
    """Return the skew-symmetric cross-product matrix of ``v``.

    ``skew_matrix(a) @ b`` equals ``cross(a, b)``.

    Args:
        v (jax.Array): Vector of shape ``(3,)``.

    Returns:
        jnp.ndarray: Matrix of shape ``(3, 3)``.
    """
    return jnp.array([
        [0.0,   -v[2],  v[1]],
        [v[2],   0.0,  -v[0]],
        [-v[1],  v[0],  0.0],
    ])
