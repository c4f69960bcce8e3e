"""Tests for the quatkin.modelling.artificial_input module."""

import jax.numpy as jnp
import pytest

from quatkin.algebra import (
    PlaneAngles,
    plane_angles_to_quaternion,
    pure_quaternion,
    quaternion_length,
    quaternion_multiply,
)
from quatkin.algorithms import Supported, Unsupported, make_time_grid
from quatkin.modelling import (
    ArtificialInput,
    ArtificialInputSource,
    HarmonicPlaneAnglesInput,
    PlaneAnglesInput,
)
from quatkin.quadrature import SimpsonIntegrator, set_default_integrator

_AMPLITUDE = (0.1, 0.2, 0.3)
_FREQUENCY = (1.0, 2.0, 3.0)


class _StaticInput(ArtificialInput):
    """Exact solution only; no rate capabilities."""

    def exact_solution_at(self, t):
        return jnp.array([1.0, 0.0, 0.0, 0.0]) + 0.0 * t


class _RollingInput(PlaneAnglesInput):
    """Constant roll rate: gamma = rate * t."""

    def __init__(self, rate, integrator=None):
        self.rate = rate
        super().__init__(integrator)

    def orientation_law(self, t):
        return jnp.array([0.0, 0.0, self.rate * t])

    def orientation_law_rate(self, t):
        return jnp.array([0.0, 0.0, self.rate + 0.0 * t])


@pytest.fixture
def harmonic():
    return HarmonicPlaneAnglesInput(_AMPLITUDE, _FREQUENCY, integrator=SimpsonIntegrator(1e-4))


# ──────────────────────────────────────────────
# Base generator
# ──────────────────────────────────────────────

class TestArtificialInput:
    def test_rates_unsupported_by_default(self):
        generator = _StaticInput()
        assert isinstance(generator.instantaneous_rate(0.0), Unsupported)
        result = generator.integrated_rate(0.0, 1.0)
        assert isinstance(result, Unsupported)
        assert "_StaticInput" in result.reason

    def test_input_source(self):
        source = _StaticInput().get_input_data()
        assert isinstance(source, ArtificialInputSource)
        assert jnp.allclose(source.initial_solution(), jnp.array([1.0, 0.0, 0.0, 0.0]))
        assert isinstance(source.integrated(0.0, 0.1), Unsupported)

    def test_exact_solution_grid(self):
        trajectory = _StaticInput().exact_solution(0.25, 1.0)
        assert len(trajectory) == 5
        assert jnp.allclose(trajectory.times, make_time_grid(0.25, 1.0))
        assert trajectory.orientations.shape == (5, 4)


# ──────────────────────────────────────────────
# Plane-angle generators
# ──────────────────────────────────────────────

class TestPlaneAnglesInput:
    def test_constant_roll_rate(self):
        generator = _RollingInput(0.5, integrator=SimpsonIntegrator(1e-3))
        rate = generator.instantaneous_rate(0.7)
        assert isinstance(rate, Supported)
        assert jnp.allclose(rate.value, jnp.array([0.5, 0.0, 0.0]))

        integrated = generator.integrated_rate(0.2, 0.6)
        assert jnp.allclose(integrated.value, jnp.array([0.2, 0.0, 0.0]), atol=1e-14)

    def test_exact_solution_is_roll(self):
        generator = _RollingInput(0.5)
        q = generator.exact_solution_at(2.0)
        assert jnp.allclose(q, jnp.array([jnp.cos(0.5), jnp.sin(0.5), 0.0, 0.0]))

    def test_explicit_integrator(self):
        simpson = SimpsonIntegrator(1e-3)
        assert _RollingInput(0.5, integrator=simpson).integrator is simpson

    def test_default_integrator_fallback(self):
        simpson = SimpsonIntegrator(5e-4)
        set_default_integrator(simpson)
        assert _RollingInput(0.5).integrator is simpson


class TestHarmonicPlaneAnglesInput:
    def test_parameters(self, harmonic):
        assert harmonic.amplitude == PlaneAngles(*_AMPLITUDE)
        assert harmonic.frequency == PlaneAngles(*_FREQUENCY)
        assert harmonic.shift == PlaneAngles()

    def test_orientation_law(self, harmonic):
        t = 0.8
        expected = jnp.array(_AMPLITUDE) * jnp.sin(jnp.array(_FREQUENCY) * t)
        assert jnp.allclose(harmonic.orientation_law(t), expected)

    def test_orientation_law_rate_matches_derivative(self, harmonic):
        t, h = 1.3, 1e-6
        numeric = (harmonic.orientation_law(t + h) - harmonic.orientation_law(t - h)) / (2 * h)
        assert jnp.allclose(harmonic.orientation_law_rate(t), numeric, atol=1e-8)

    def test_shift(self):
        generator = HarmonicPlaneAnglesInput(_AMPLITUDE, _FREQUENCY, shift=(0.5, 0.0, -0.5))
        expected = jnp.array(_AMPLITUDE) * jnp.sin(jnp.array([0.5, 0.0, -0.5]))
        assert jnp.allclose(generator.orientation_law(0.0), expected)

    def test_initial_solution_zero_shift(self, harmonic):
        source = harmonic.get_input_data()
        assert jnp.allclose(source.initial_solution(), jnp.array([1.0, 0.0, 0.0, 0.0]))

    def test_exact_solution_at(self, harmonic):
        t = 2.1
        expected = plane_angles_to_quaternion(harmonic.orientation_law(t))
        q = harmonic.exact_solution_at(t)
        assert jnp.allclose(q, expected)
        assert float(quaternion_length(q)) == pytest.approx(1.0)

    @pytest.mark.parametrize("t", [0.3, 1.7, 4.2])
    def test_kinematics(self, harmonic, t):
        # q' = 1/2 q * omega
        h = 1e-6
        dq = (harmonic.exact_solution_at(t + h) - harmonic.exact_solution_at(t - h)) / (2 * h)
        q = harmonic.exact_solution_at(t)
        omega = harmonic.instantaneous_rate(t).value
        assert jnp.allclose(dq, 0.5 * quaternion_multiply(q, pure_quaternion(omega)), atol=1e-8)

    def test_integrated_rate_additive(self, harmonic):
        whole = harmonic.integrated_rate(0.0, 0.2).value
        first = harmonic.integrated_rate(0.0, 0.1).value
        second = harmonic.integrated_rate(0.1, 0.2).value
        assert whole.shape == (3,)
        assert jnp.allclose(whole, first + second, atol=1e-13)

    def test_integrated_rate_small_interval(self, harmonic):
        t, h = 1.0, 1e-3
        integrated = harmonic.integrated_rate(t, t + h).value
        midpoint = harmonic.instantaneous_rate(t + h / 2).value * h
        assert jnp.allclose(integrated, midpoint, atol=1e-8)

    def test_input_source_forwards_rates(self, harmonic):
        source = harmonic.get_input_data()
        assert jnp.array_equal(source.instantaneous(0.4).value, harmonic.instantaneous_rate(0.4).value)
        assert jnp.array_equal(source.integrated(0.4, 0.5).value, harmonic.integrated_rate(0.4, 0.5).value)

    def test_integrated_rate_compiled_once(self, harmonic):
        traces = []
        body_rate = harmonic.body_rate

        def counting_rate(t):
            traces.append(t)
            return body_rate(t)

        harmonic.body_rate = counting_rate
        for k in range(20):
            harmonic.integrated_rate(k * 1e-3, (k + 1) * 1e-3)
        assert len(traces) == 1

    def test_exact_solution_trajectory(self, harmonic):
        trajectory = harmonic.exact_solution(0.5, 2.0)
        assert len(trajectory) == 5
        for i in range(len(trajectory)):
            t, q = trajectory[i]
            assert jnp.allclose(q, harmonic.exact_solution_at(t), atol=1e-14)

    def test_invalid_shape(self):
        with pytest.raises(ValueError, match="amplitude"):
            HarmonicPlaneAnglesInput((0.1, 0.2), _FREQUENCY)
