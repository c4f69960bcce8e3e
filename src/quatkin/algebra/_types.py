"""Algebra descriptors.

An :class:`Algebra` bundles the operations the integration engine and the
error-analysis harness need from an orientation algebra: composition,
distance and the identity element.  Algorithms select their algebra with a
class attribute instead of being parametrized over a type.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import jax

from quatkin.algebra.biquaternion import (
    biquaternion_distance,
    biquaternion_multiply,
    identity_biquaternion,
)
from quatkin.algebra.quaternion import (
    identity_quaternion,
    quaternion_distance,
    quaternion_multiply,
)


@dataclass(frozen=True)
class Algebra:
    """Operations of an orientation algebra.

    Attributes:
        name: Human-readable name.
        multiply: Product ``(p, q) -> p * q``.
        distance: Metric ``(p, q) -> scalar``.
        identity: Factory of the multiplicative identity.
        shape: Array shape of one element.
    """

    name: str
    multiply: Callable[[jax.Array, jax.Array], jax.Array]
    distance: Callable[[jax.Array, jax.Array], jax.Array]
    identity: Callable[[], jax.Array]
    shape: tuple[int, ...]


QUATERNION = Algebra(
    name="quaternion",
    multiply=quaternion_multiply,
    distance=quaternion_distance,
    identity=identity_quaternion,
    shape=(4,),
)

BIQUATERNION = Algebra(
    name="biquaternion",
    multiply=biquaternion_multiply,
    distance=biquaternion_distance,
    identity=identity_biquaternion,
    shape=(2, 4),
)
