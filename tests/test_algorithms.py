"""Tests for the quatkin.algorithms engine.

Tests cover:
- Time grid construction and its degenerate case
- Write-once trajectory buffer and Trajectory access
- Capability results
- Composition order of the iterative engine
- Segment gathering for subdivision and history windows
- Bootstrap of history-window methods
- Configuration and capability errors
- Registry of concrete methods
"""

import logging

import jax.numpy as jnp
import numpy as np
import pytest

from quatkin.algebra import (
    BIQUATERNION,
    biquaternion,
    identity_biquaternion,
    quaternion_multiply,
)
from quatkin.algorithms import (
    ALGORITHMS,
    Algorithm,
    AutoGeneratedTwoStepAlgorithm,
    AverageSpeedAlgorithm,
    AverageSpeedRiccatiAlgorithm,
    ConfigurationError,
    IterativeAlgorithm,
    IterativeRiccatiAlgorithm,
    PanovAlgorithm,
    Supported,
    Trajectory,
    TrajectoryBuffer,
    TwoStep4DegreeAlgorithm,
    Unsupported,
    UnsupportedCapabilityError,
    WindowPolicy,
    make_time_grid,
    require,
)
from quatkin.algorithms.formulas import (
    auto_two_step_increment,
    average_speed_increment,
)

_ONE = jnp.array([1.0, 0.0, 0.0, 0.0])


# ──────────────────────────────────────────────
# Helper input sources
# ──────────────────────────────────────────────

class _ConstantRateSource:
    """Constant angular rate; records every integrated-rate query."""

    def __init__(self, rate, initial=_ONE):
        self.rate = jnp.asarray(rate)
        self.initial = initial
        self.calls = []

    def initial_solution(self):
        return self.initial

    def instantaneous(self, t):
        return Supported(self.rate)

    def integrated(self, t1, t2):
        self.calls.append((t1, t2))
        return Supported(self.rate * (t2 - t1))


class _PiecewiseSource:
    """Integrated rate given per whole interval ``[k, k + 1]``."""

    def __init__(self, segments):
        self.segments = [jnp.asarray(s) for s in segments]

    def initial_solution(self):
        return _ONE

    def instantaneous(self, t):
        return Unsupported("piecewise source has no instantaneous rate")

    def integrated(self, t1, t2):
        return Supported(self.segments[int(round(t1))])


class _NoIntegratedSource:
    def initial_solution(self):
        return _ONE

    def instantaneous(self, t):
        return Supported(jnp.zeros(3))

    def integrated(self, t1, t2):
        return Unsupported("sensor only provides instantaneous rates")


def _exact_rotation(phi):
    m = float(jnp.linalg.norm(phi))
    return jnp.concatenate([jnp.array([np.cos(m / 2)]), np.sin(m / 2) * phi / m])


def _bounds(calls):
    """Flatten recorded (t1, t2) queries."""
    return [bound for call in calls for bound in call]


def _configured(algorithm, source, step=0.1, last_time=1.0):
    algorithm.set_input_data(source)
    algorithm.set_step(step)
    algorithm.set_last_time(last_time)
    return algorithm


# ──────────────────────────────────────────────
# Time grid
# ──────────────────────────────────────────────

class TestTimeGrid:
    def test_count_and_bounds(self):
        times = make_time_grid(0.1, 1.0)
        assert times.shape == (11,)
        assert float(times[0]) == 0.0
        assert float(times[-1]) == pytest.approx(1.0)

    def test_last_time_not_multiple_of_step(self):
        times = make_time_grid(0.3, 1.0)
        assert jnp.allclose(times, jnp.array([0.0, 0.3, 0.6, 0.9]))

    def test_strictly_increasing(self):
        times = make_time_grid(0.01, 10.0)
        assert times.shape == (1001,)
        assert bool(jnp.all(jnp.diff(times) > 0.0))

    def test_step_larger_than_last_time(self):
        times = make_time_grid(5.0, 2.0)
        assert jnp.allclose(times, jnp.array([0.0, 2.0]))

    def test_step_equal_last_time(self):
        assert jnp.allclose(make_time_grid(2.0, 2.0), jnp.array([0.0, 2.0]))

    @pytest.mark.parametrize("step, last_time", [(0.0, 1.0), (-0.1, 1.0), (0.1, 0.0), (0.1, -1.0)])
    def test_non_positive_raises(self, step, last_time):
        with pytest.raises(ConfigurationError, match="positive"):
            make_time_grid(step, last_time)

    def test_none_raises(self):
        with pytest.raises(ConfigurationError):
            make_time_grid(None, 1.0)


# ──────────────────────────────────────────────
# Trajectory buffer and Trajectory
# ──────────────────────────────────────────────

class TestTrajectoryBuffer:
    def test_seeded_with_initial(self):
        buffer = TrajectoryBuffer(make_time_grid(0.5, 1.0), _ONE)
        assert len(buffer) == 3
        assert jnp.allclose(buffer[0], _ONE)
        assert buffer.time(1) == pytest.approx(0.5)

    def test_read_unset_raises(self):
        buffer = TrajectoryBuffer(make_time_grid(0.5, 1.0), _ONE)
        with pytest.raises(ValueError, match="not been computed"):
            buffer[1]

    def test_write_once(self):
        buffer = TrajectoryBuffer(make_time_grid(0.5, 1.0), _ONE)
        buffer[1] = _ONE
        with pytest.raises(ValueError, match="already been written"):
            buffer[1] = _ONE
        with pytest.raises(ValueError, match="already been written"):
            buffer[0] = _ONE

    def test_out_of_range(self):
        buffer = TrajectoryBuffer(make_time_grid(0.5, 1.0), _ONE)
        with pytest.raises(IndexError):
            buffer[3] = _ONE
        with pytest.raises(IndexError):
            buffer.time(-1)

    def test_finalize_incomplete(self):
        buffer = TrajectoryBuffer(make_time_grid(0.5, 1.0), _ONE)
        buffer[1] = _ONE
        with pytest.raises(ValueError, match="incomplete"):
            buffer.finalize()

    def test_finalize(self):
        buffer = TrajectoryBuffer(make_time_grid(0.5, 1.0), _ONE)
        buffer[1] = 2.0 * _ONE
        buffer[2] = 3.0 * _ONE
        trajectory = buffer.finalize()
        assert isinstance(trajectory, Trajectory)
        assert trajectory.orientations.shape == (3, 4)
        assert float(trajectory.orientations[2, 0]) == 3.0


class TestTrajectory:
    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="times"):
            Trajectory(times=jnp.zeros(3), orientations=jnp.zeros((2, 4)))

    def test_indexing(self):
        trajectory = Trajectory(times=jnp.array([0.0, 0.5]), orientations=jnp.stack([_ONE, -_ONE]))
        t, q = trajectory[1]
        assert isinstance(t, float)
        assert t == 0.5
        assert jnp.allclose(q, -_ONE)
        assert trajectory[-1][0] == 0.5

    def test_index_out_of_range(self):
        trajectory = Trajectory(times=jnp.array([0.0, 0.5]), orientations=jnp.stack([_ONE, _ONE]))
        with pytest.raises(IndexError):
            trajectory[2]


# ──────────────────────────────────────────────
# Capability results
# ──────────────────────────────────────────────

class TestCapability:
    def test_require_supported(self):
        assert require(Supported(42), "answer") == 42

    def test_require_unsupported(self):
        with pytest.raises(UnsupportedCapabilityError, match="no sensor"):
            require(Unsupported("no sensor"), "integrated input data")

    def test_unsupported_is_not_implemented(self):
        assert issubclass(UnsupportedCapabilityError, NotImplementedError)
        assert issubclass(ConfigurationError, ValueError)


# ──────────────────────────────────────────────
# Iterative engine
# ──────────────────────────────────────────────

class TestComposition:
    def test_right_multiplication(self):
        # Two 90 degree rotations about different axes
        half = np.pi / 2
        source = _PiecewiseSource([[half, 0.0, 0.0], [0.0, half, 0.0]])
        trajectory = _configured(AverageSpeedAlgorithm(), source, step=1.0, last_time=2.0).execute()

        q_x = jnp.array([np.cos(np.pi / 4), np.sin(np.pi / 4), 0.0, 0.0])
        q_y = jnp.array([np.cos(np.pi / 4), 0.0, np.sin(np.pi / 4), 0.0])
        expected = quaternion_multiply(q_x, q_y)
        swapped = quaternion_multiply(q_y, q_x)

        _, q = trajectory[2]
        assert jnp.allclose(q, expected, atol=1e-14)
        assert not jnp.allclose(q, swapped, atol=1e-3)

    def test_initial_solution_kept(self):
        initial = jnp.array([0.0, 1.0, 0.0, 0.0])
        source = _ConstantRateSource([0.1, 0.2, 0.3], initial=initial)
        trajectory = _configured(AverageSpeedAlgorithm(), source).execute()
        assert jnp.allclose(trajectory.orientations[0], initial)

    def test_constant_rate_is_exact(self):
        rate = jnp.array([0.3, -0.4, 1.2])
        source = _ConstantRateSource(rate)
        trajectory = _configured(AverageSpeedAlgorithm(), source, step=0.1, last_time=1.0).execute()
        for i in range(len(trajectory)):
            t, q = trajectory[i]
            expected = _ONE if t == 0.0 else _exact_rotation(rate * t)
            assert jnp.allclose(q, expected, atol=1e-12)

    def test_riccati_constant_rate_is_exact(self):
        rate = jnp.array([0.3, -0.4, 1.2])
        source = _ConstantRateSource(rate)
        trajectory = _configured(AverageSpeedRiccatiAlgorithm(), source, step=0.1, last_time=1.0).execute()
        t, q = trajectory[-1]
        assert jnp.allclose(q, _exact_rotation(rate * t), atol=1e-12)

    def test_degenerate_grid_integrates_whole_interval(self):
        source = _ConstantRateSource([0.0, 0.0, 0.5])
        trajectory = _configured(AverageSpeedAlgorithm(), source, step=5.0, last_time=2.0).execute()
        assert len(trajectory) == 2
        assert source.calls == [(0.0, 2.0)]
        assert jnp.allclose(trajectory.orientations[1], _exact_rotation(jnp.array([0.0, 0.0, 1.0])))

    def test_grid_length(self):
        source = _ConstantRateSource([0.1, 0.0, 0.0])
        trajectory = _configured(AverageSpeedAlgorithm(), source, step=0.3, last_time=1.0).execute()
        assert len(trajectory) == 4
        assert trajectory.orientations.shape == (4, 4)

    def test_execute_logs(self, caplog):
        source = _ConstantRateSource([0.1, 0.0, 0.0])
        with caplog.at_level(logging.DEBUG, logger="quatkin.algorithms"):
            _configured(AverageSpeedAlgorithm(), source, step=0.5, last_time=1.0).execute()
        assert "Average speed" in caplog.text


class TestSubdivision:
    def test_panov_quarter_intervals(self):
        source = _ConstantRateSource([0.1, 0.2, 0.3])
        _configured(PanovAlgorithm(), source, step=1.0, last_time=1.0).execute()
        assert _bounds(source.calls) == pytest.approx([0.0, 0.25, 0.25, 0.5, 0.5, 0.75, 0.75, 1.0])

    def test_two_step_halves(self):
        source = _ConstantRateSource([0.1, 0.2, 0.3])
        _configured(TwoStep4DegreeAlgorithm(), source, step=0.5, last_time=1.0).execute()
        assert _bounds(source.calls) == pytest.approx([0.0, 0.25, 0.25, 0.5, 0.5, 0.75, 0.75, 1.0])

    def test_last_bound_is_grid_point(self):
        source = _ConstantRateSource([0.1, 0.2, 0.3])
        _configured(PanovAlgorithm(), source, step=0.1, last_time=0.3).execute()
        ends = [call[1] for call in source.calls[3::4]]
        assert ends == [float(t) for t in make_time_grid(0.1, 0.3)[1:]]


class TestHistoryWindow:
    def test_one_segment_per_step(self):
        source = _ConstantRateSource([0.1, 0.2, 0.3])
        _configured(AutoGeneratedTwoStepAlgorithm(), source, step=0.5, last_time=1.5).execute()
        assert _bounds(source.calls) == pytest.approx([0.0, 0.5, 0.5, 1.0, 1.0, 1.5])

    def test_bootstrap_then_two_step(self):
        segments = [[0.01, 0.02, 0.0], [0.0, 0.03, -0.01], [0.02, 0.0, 0.01]]
        source = _PiecewiseSource(segments)
        trajectory = _configured(
            AutoGeneratedTwoStepAlgorithm(), source, step=1.0, last_time=3.0,
        ).execute()
        segments = jnp.asarray(segments)

        q1 = quaternion_multiply(_ONE, average_speed_increment(segments[0]))
        q2 = quaternion_multiply(q1, auto_two_step_increment(segments[0:2]))
        q3 = quaternion_multiply(q2, auto_two_step_increment(segments[1:3]))

        assert jnp.allclose(trajectory.orientations[1], q1, atol=1e-15)
        assert jnp.allclose(trajectory.orientations[2], q2, atol=1e-15)
        assert jnp.allclose(trajectory.orientations[3], q3, atol=1e-15)

    def test_missing_bootstrap_raises(self):
        class _HistoryWithoutBootstrap(IterativeAlgorithm):
            window = WindowPolicy.HISTORY

            def get_algorithm_steps_count(self):
                return 2

            def get_title(self):
                return "history without bootstrap"

            def get_local_solution(self, t, segments):
                return _ONE

        algorithm = _configured(_HistoryWithoutBootstrap(), _ConstantRateSource([0.1, 0.0, 0.0]))
        with pytest.raises(ConfigurationError, match="bootstrap"):
            algorithm.execute()


class TestAlgebraSelection:
    def test_biquaternion_composition(self):
        class _BiquaternionAverageSpeed(IterativeAlgorithm):
            algebra = BIQUATERNION

            def get_title(self):
                return "biquaternion average speed"

            def get_local_solution(self, t, segments):
                return biquaternion(average_speed_increment(segments[0]), jnp.zeros(4))

        rate = jnp.array([0.0, 0.4, 0.0])
        source = _ConstantRateSource(rate, initial=identity_biquaternion())
        trajectory = _configured(_BiquaternionAverageSpeed(), source, step=0.25, last_time=1.0).execute()

        assert trajectory.orientations.shape == (5, 2, 4)
        _, q = trajectory[-1]
        assert jnp.allclose(q[0], _exact_rotation(rate), atol=1e-14)
        assert jnp.allclose(q[1], jnp.zeros(4))


# ──────────────────────────────────────────────
# Errors
# ──────────────────────────────────────────────

class TestConfigurationErrors:
    def test_missing_input(self):
        algorithm = AverageSpeedAlgorithm()
        algorithm.set_step(0.1)
        algorithm.set_last_time(1.0)
        with pytest.raises(ConfigurationError, match="input data"):
            algorithm.execute()

    def test_missing_step(self):
        algorithm = AverageSpeedAlgorithm()
        algorithm.set_input_data(_ConstantRateSource([0.1, 0.0, 0.0]))
        algorithm.set_last_time(1.0)
        with pytest.raises(ConfigurationError, match="step"):
            algorithm.execute()

    def test_missing_last_time(self):
        algorithm = AverageSpeedAlgorithm()
        algorithm.set_input_data(_ConstantRateSource([0.1, 0.0, 0.0]))
        algorithm.set_step(0.1)
        with pytest.raises(ConfigurationError, match="last time"):
            algorithm.execute()

    def test_negative_step(self):
        source = _ConstantRateSource([0.1, 0.0, 0.0])
        with pytest.raises(ConfigurationError):
            _configured(AverageSpeedAlgorithm(), source, step=-0.1).execute()
        assert source.calls == []

    def test_unsupported_integrated_input(self):
        algorithm = _configured(AverageSpeedAlgorithm(), _NoIntegratedSource())
        with pytest.raises(UnsupportedCapabilityError, match="instantaneous rates"):
            algorithm.execute()

    def test_getters(self):
        algorithm = AverageSpeedAlgorithm()
        assert algorithm.get_step() is None
        algorithm.set_step(0.2)
        algorithm.set_last_time(3.0)
        assert algorithm.get_step() == 0.2
        assert algorithm.get_last_time() == 3.0


# ──────────────────────────────────────────────
# Registry
# ──────────────────────────────────────────────

class TestRegistry:
    def test_nine_methods(self):
        assert len(ALGORITHMS) == 9

    @pytest.mark.parametrize("slug", sorted(ALGORITHMS))
    def test_method_declares_order_and_title(self, slug):
        algorithm = ALGORITHMS[slug]()
        assert isinstance(algorithm, Algorithm)
        assert algorithm.order in (2, 3, 4, 6)
        assert algorithm.get_title()

    def test_titles_unique(self):
        titles = {cls().get_title() for cls in ALGORITHMS.values()}
        assert len(titles) == len(ALGORITHMS)

    def test_riccati_methods(self):
        riccati = {slug for slug, cls in ALGORITHMS.items() if issubclass(cls, IterativeRiccatiAlgorithm)}
        assert riccati == {
            "average-speed-riccati",
            "two-step-4degree-riccati",
            "two-step-4degree-riccati-2",
            "panov-riccati",
        }

    def test_window_policies(self):
        assert ALGORITHMS["auto-two-step"].window is WindowPolicy.HISTORY
        assert ALGORITHMS["panov"].window is WindowPolicy.SUBDIVISION
