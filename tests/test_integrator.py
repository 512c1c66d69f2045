import math

import numpy as np
import pytest

from lorenzviz.core.errors import InvalidParameterError, NumericalInstabilityError
from lorenzviz.core.system.lorenz import LorenzParams
from lorenzviz.core.trajectory.integrator import TrajectoryIntegrator, TrajectoryParams


def _integrator(capacity=5000, dt=0.005, on_tick=None, **kwargs):
    return TrajectoryIntegrator(
        lorenz=LorenzParams(sigma=10.0, rho=28.0, beta=8.0 / 3.0, dt=dt),
        trajectory=TrajectoryParams(capacity=capacity, scale=0.3, initial=(0.1, 0.0, 0.0), **kwargs),
        on_tick=on_tick,
    )


def test_first_step_matches_euler_formulas():
    integrator = _integrator()
    scaled = integrator.step()

    # dx = 10 * (0 - 0.1), dy = 0.1 * (28 - 0) - 0, dz = 0.1 * 0 - 8/3 * 0
    expected = (0.1 + 10.0 * (0.0 - 0.1) * 0.005, 0.0 + 2.8 * 0.005, 0.0)
    assert integrator.state == pytest.approx(expected, abs=1e-12)
    assert integrator.state == pytest.approx((0.095, 0.014, 0.0), abs=1e-12)
    assert scaled == pytest.approx(tuple(v * 0.3 for v in expected), abs=1e-12)


def test_second_step_uses_pre_step_state():
    integrator = _integrator()
    integrator.step()
    integrator.step()
    x, y, z = 0.095, 0.014, 0.0
    expected = (
        x + 10.0 * (y - x) * 0.005,
        y + (x * (28.0 - z) - y) * 0.005,
        z + (x * y - 8.0 / 3.0 * z) * 0.005,
    )
    assert integrator.state == pytest.approx(expected, abs=1e-12)


def test_step_does_not_touch_buffer():
    integrator = _integrator()
    integrator.step()
    assert len(integrator) == 0
    assert integrator.ticks == 1


def test_length_grows_then_stays_at_capacity():
    integrator = _integrator(capacity=10)
    lengths = []
    for _ in range(25):
        before = len(integrator)
        integrator.tick()
        assert len(integrator) == min(before + 1, 10)
        lengths.append(len(integrator))
    assert lengths[:10] == list(range(1, 11))
    assert lengths[10:] == [10] * 15


def test_fifo_eviction_and_newest_point():
    integrator = _integrator(capacity=10)
    integrator.run(10)
    for _ in range(5):
        oldest = integrator.buffer.oldest
        second = list(integrator.buffer)[1]
        scaled = integrator.tick()
        assert integrator.buffer.oldest == second
        assert oldest not in list(integrator.buffer)
        points = integrator.render_points()
        assert tuple(points[-1]) == scaled


def test_default_capacity_boundary():
    integrator = _integrator()
    integrator.tick()
    first = integrator.buffer.oldest
    integrator.run(4999)
    assert len(integrator) == 5000
    assert integrator.buffer.oldest == first

    integrator.tick()
    assert len(integrator) == 5000
    assert integrator.buffer.oldest != first
    assert first not in list(integrator.buffer)


def test_determinism_across_runs():
    a = _integrator().run(2000)
    b = _integrator().run(2000)
    assert np.array_equal(a, b)


def test_buffer_holds_display_points_state_stays_unscaled():
    integrator = _integrator(capacity=100)
    integrator.run(50)
    x, y, z = integrator.state
    assert integrator.buffer.newest == (x * 0.3, y * 0.3, z * 0.3)
    assert np.array_equal(integrator.render_points(), integrator.buffer.as_array())


def test_append_and_evict_accepts_step_result():
    integrator = _integrator(capacity=3)
    returned = []
    for _ in range(5):
        point = integrator.step()
        integrator.append_and_evict(point)
        returned.append(point)
        assert tuple(integrator.render_points()[-1]) == point
    assert len(integrator) == 3
    assert [tuple(p) for p in integrator.render_points()] == returned[-3:]


def test_step_and_append_matches_tick():
    manual = _integrator(capacity=10)
    for _ in range(25):
        manual.append_and_evict(manual.step())
    assert np.array_equal(manual.render_points(), _integrator(capacity=10).run(25))


@pytest.mark.parametrize("initial", [("a", 0.0, 0.0), (None, 0.0, 0.0), (0.0, float("inf"), 0.0)])
def test_rejects_non_numeric_initial_state(initial):
    with pytest.raises(InvalidParameterError):
        TrajectoryIntegrator(trajectory=TrajectoryParams(initial=initial), on_tick=None)


def test_render_points_empty_before_first_tick():
    points = _integrator().render_points()
    assert points.shape == (0, 3)


@pytest.mark.parametrize("dt", [0.0, -0.005])
def test_rejects_non_positive_dt(dt):
    with pytest.raises(InvalidParameterError):
        _integrator(dt=dt)


@pytest.mark.parametrize("capacity", [0, -1, 2.5, True])
def test_rejects_invalid_capacity(capacity):
    with pytest.raises(InvalidParameterError):
        _integrator(capacity=capacity)


def test_rejects_non_finite_parameters():
    with pytest.raises(InvalidParameterError):
        TrajectoryIntegrator(lorenz=LorenzParams(sigma=float("nan")), on_tick=None)
    with pytest.raises(InvalidParameterError):
        TrajectoryIntegrator(trajectory=TrajectoryParams(scale=0.0), on_tick=None)


def test_blow_up_is_reported_and_not_buffered():
    integrator = _integrator(dt=1.0)
    with pytest.raises(NumericalInstabilityError) as info:
        integrator.run(10_000)
    assert info.value.ticks == integrator.ticks
    assert len(integrator) == integrator.ticks - 1
    assert np.all(np.isfinite(integrator.render_points()))
    assert not all(math.isfinite(v) for v in info.value.state)


def test_hook_fires_every_log_every_points():
    calls = []
    integrator = _integrator(capacity=1000, on_tick=lambda it: calls.append(len(it)), log_every=100)
    integrator.run(250)
    assert calls == [0, 100, 200]


def test_hook_disabled_with_zero_log_every():
    calls = []
    integrator = _integrator(on_tick=lambda it: calls.append(1), log_every=0)
    integrator.run(300)
    assert calls == []


def test_default_hook_logs_progress(caplog):
    integrator = TrajectoryIntegrator()
    with caplog.at_level("DEBUG", logger="lorenzviz.core.trajectory.integrator"):
        integrator.run(101)
    messages = [r.getMessage() for r in caplog.records]
    assert "Number of points: 0" in messages
    assert "Number of points: 100" in messages
