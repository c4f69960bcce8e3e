# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "quatkin"]
#
# [tool.uv.sources]
# quatkin = { path = ".." }
# ///
"""Measure the convergence of orientation-integration methods.

Drives an algorithm with harmonically varying plane angles, compares its
output with the exact orientation and prints the maximum error for a
sequence of decreasing step sizes, together with the observed accuracy
order between consecutive steps.

Requires quatkin to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/convergence.py [OPTIONS]

Examples:
    # Auto-generated 2-step method, steps 0.1 down to 0.0001
    uv run examples/convergence.py --algorithm auto-two-step

    # Compare against Panov's 6th-order method on a shorter run
    uv run examples/convergence.py --algorithm panov --last-time 2 --count 3

    # Finer quadrature of the input rates
    uv run examples/convergence.py --simpson-step 1e-5
"""

import time
from typing import Annotated

import jax.numpy as jnp
import typer

from quatkin import set_dtype
from quatkin.algorithms import ALGORITHMS
from quatkin.modelling import (
    HarmonicPlaneAnglesInput,
    Modelling,
    convergence_study,
    observed_orders,
)
from quatkin.quadrature import SimpsonIntegrator

set_dtype(jnp.float64)  # Must be before any JIT compilation


def main(
    algorithm: Annotated[
        str, typer.Option(help=f"Method to run, one of: {', '.join(ALGORITHMS)}")
    ] = "auto-two-step",
    initial_step: Annotated[float, typer.Option(help="Largest output step in seconds")] = 0.1,
    ratio: Annotated[float, typer.Option(help="Factor between consecutive steps")] = 10.0,
    count: Annotated[int, typer.Option(help="Number of step sizes to try")] = 4,
    last_time: Annotated[float, typer.Option(help="Modelling duration in seconds")] = 10.0,
    amplitude: Annotated[
        tuple[float, float, float], typer.Option(help="Amplitudes of psi, teta, gamma (rad)")
    ] = (0.1, 0.2, 0.3),
    frequency: Annotated[
        tuple[float, float, float], typer.Option(help="Frequencies of psi, teta, gamma (rad/s)")
    ] = (1.0, 2.0, 3.0),
    simpson_step: Annotated[
        float, typer.Option(help="Panel width of the Simpson rule for input rates")
    ] = 1e-4,
) -> None:
    """Print the maximum error of a method for decreasing step sizes."""
    if algorithm not in ALGORITHMS:
        print(f"ERROR: Unknown algorithm '{algorithm}'. Choose from: {', '.join(ALGORITHMS)}")
        raise typer.Exit(code=1)
    if count < 1 or ratio <= 1.0:
        print("ERROR: --count must be at least 1 and --ratio greater than 1.")
        raise typer.Exit(code=1)

    generator = HarmonicPlaneAnglesInput(
        amplitude, frequency, integrator=SimpsonIntegrator(simpson_step),
    )
    modelling = Modelling(generator)
    steps = [initial_step / ratio**k for k in range(count)]

    algorithm_cls = ALGORITHMS[algorithm]
    print(f"\n── {algorithm_cls().get_title()} ──")
    print(f"  amplitude={amplitude}, frequency={frequency}, last_time={last_time:g}")

    t0 = time.perf_counter()
    points = convergence_study(modelling, algorithm_cls, steps, last_time)
    orders = observed_orders(points)

    print(f"\n  {'step':>12}  {'max difference':>16}  {'order':>7}")
    for k, point in enumerate(points):
        order = f"{orders[k - 1]:7.3f}" if k > 0 else f"{'-':>7}"
        print(f"  {point.step:12.6g}  {point.max_difference:16.6e}  {order}")

    print(f"\n  Completed {len(points)} runs in {time.perf_counter() - t0:.1f}s")


if __name__ == "__main__":
    typer.run(main)
