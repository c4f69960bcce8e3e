"""Riccati-type iterative algorithms.

A Riccati algorithm does not produce the orientation increment directly.
It produces a vector-like variable ``x`` (magnitude ``tan(angle / 4)`` for an
exact rotation) and recovers the increment with the Cayley-type transform

.. math::

    \\lambda = \\frac{1 - \\|x\\| + 2x}{1 + \\|x\\|}

where :math:`\\|x\\|` is the quaternion norm (sum of squared components).
The transform maps ``x`` to a unit quaternion only as accurately as ``x``
itself; the result is not renormalized.
"""

from __future__ import annotations

import abc

import jax
import jax.numpy as jnp

from quatkin.algorithms.iterative import IterativeAlgorithm


@jax.jit
def riccati_to_quaternion(x: jax.Array) -> jax.Array:
    """Map a Riccati variable to the orientation increment.

    Args:
        x (jax.Array): Riccati variable, either a 3-vector (read as a pure
            quaternion) or a quaternion of shape ``(4,)``.

    Returns:
        jnp.ndarray: Increment quaternion of shape ``(4,)``.
    """
    if x.shape[-1] == 3:
        x = jnp.concatenate([jnp.zeros(1, dtype=x.dtype), x])

    norm = jnp.sum(x * x)
    one = jnp.zeros(4, dtype=x.dtype).at[0].set(1.0)

    return (one * (1.0 - norm) + 2.0 * x) / (1.0 + norm)


@jax.jit
def quaternion_to_riccati(q: jax.Array) -> jax.Array:
    """Recover the Riccati variable of a unit quaternion.

    Inverse of :func:`riccati_to_quaternion` for unit quaternions with
    ``w > -1``: ``x = vec(q) / (1 + w)``.

    Args:
        q (jax.Array): Unit quaternion of shape ``(4,)``.

    Returns:
        jnp.ndarray: Riccati variable of shape ``(3,)``.
    """
    return q[1:] / (1.0 + q[0])


class IterativeRiccatiAlgorithm(IterativeAlgorithm):
    """Iterative algorithm whose local solver works in the Riccati variable.

    Subclasses implement :meth:`get_local_riccati_solution`;
    :meth:`get_local_solution` applies :func:`riccati_to_quaternion` to it.
    """

    @abc.abstractmethod
    def get_local_riccati_solution(self, t: float, segments: jax.Array) -> jax.Array:
        """Compute the Riccati variable for the interval ending at *t*.

        Args:
            t: Output time the increment leads to.
            segments: Integrated-rate segments of shape ``(K, 3)``, oldest first.

        Returns:
            Riccati variable of shape ``(3,)``.
        """

    def get_local_solution(self, t: float, segments: jax.Array) -> jax.Array:
        return riccati_to_quaternion(self.get_local_riccati_solution(t, segments))
