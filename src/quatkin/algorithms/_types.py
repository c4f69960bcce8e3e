"""Type definitions shared by all integration algorithms.

Provides the data contracts between algorithms, their input sources and
the error-analysis harness:

- :class:`Supported` / :class:`Unsupported`: result of querying an optional
  capability of an input source.
- :class:`InputSource`: protocol every input source implements.
- :class:`Trajectory`: time grid and orientations produced by a run.
- :class:`ConfigurationError`, :class:`UnsupportedCapabilityError`:
  failures surfaced to the caller of ``execute()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Union

from jax import Array


class ConfigurationError(ValueError):
    """An algorithm or harness was run before being fully configured."""


class UnsupportedCapabilityError(NotImplementedError):
    """An input source cannot provide the data an algorithm requires."""


@dataclass(frozen=True)
class Supported:
    """A capability query that produced a value.

    Attributes:
        value: The requested data (angular rate or integrated rate).
    """

    value: Any


@dataclass(frozen=True)
class Unsupported:
    """A capability query the source cannot answer.

    Attributes:
        reason: Human-readable explanation.
    """

    reason: str


Capability = Union[Supported, Unsupported]


class InputSource(Protocol):
    """Source of input data for an integration algorithm.

    Instantaneous and integrated angular rates are optional: a source that
    cannot compute one returns :class:`Unsupported` instead of a value.
    """

    def initial_solution(self) -> Array:
        """Orientation at time ``0``."""
        ...

    def instantaneous(self, t: float) -> Capability:
        """Angular rate at time ``t``."""
        ...

    def integrated(self, t1: float, t2: float) -> Capability:
        """Angular rate integrated over ``[t1, t2]``."""
        ...


def require(result: Capability, what: str) -> Any:
    """Unwrap a capability result.

    Args:
        result: Result returned by an :class:`InputSource` query.
        what: Description of the queried data, used in the error message.

    Returns:
        The supported value.

    Raises:
        UnsupportedCapabilityError: If *result* is :class:`Unsupported`.
    """
    if isinstance(result, Unsupported):
        raise UnsupportedCapabilityError(f"Not implemented: {what} is not available ({result.reason})")
    return result.value


@dataclass(frozen=True)
class Trajectory:
    """Orientations sampled on an increasing time grid.

    Attributes:
        times: Sample times of shape ``(N,)``, strictly increasing from 0.
        orientations: Orientations of shape ``(N, *algebra.shape)``; row ``i``
            belongs to ``times[i]``.
    """

    times: Array
    orientations: Array

    def __post_init__(self) -> None:
        if self.times.shape[0] != self.orientations.shape[0]:
            raise ValueError(
                f"Trajectory has {self.times.shape[0]} times but "
                f"{self.orientations.shape[0]} orientations"
            )

    def __len__(self) -> int:
        return int(self.times.shape[0])

    def __getitem__(self, idx: int) -> tuple[float, Array]:
        """Return ``(time, orientation)`` at index *idx*.

        Raises:
            IndexError: If *idx* is out of range.
        """
        n = len(self)
        if not -n <= idx < n:
            raise IndexError(f"Trajectory index {idx} out of range for {n} samples")
        return float(self.times[idx]), self.orientations[idx]
