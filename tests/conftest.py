import jax.numpy as jnp
import pytest

from quatkin.config import set_dtype
from quatkin.quadrature import set_default_integrator


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    Tests that change the dtype (e.g. test_config.py) would otherwise leak
    their setting into later tests.
    """
    set_dtype(jnp.float64)


@pytest.fixture(autouse=True)
def _reset_default_integrator():
    """Clear the process-wide default integrator around every test."""
    set_default_integrator(None)
    yield
    set_default_integrator(None)
