import numpy as np
import pytest

from lorenzviz.core.errors import NumericalInstabilityError
from lorenzviz.core.scene.axes import Arrow
from lorenzviz.core.scene.view import ViewParams
from lorenzviz.core.system.lorenz import LorenzParams
from lorenzviz.core.trajectory.integrator import TrajectoryIntegrator, TrajectoryParams
from lorenzviz.render.viewer import AttractorViewer, cone_mesh


@pytest.fixture
def viewer():
    integrator = TrajectoryIntegrator(trajectory=TrajectoryParams(capacity=50), on_tick=None)
    v = AttractorViewer(integrator, ViewParams(fps=30))
    yield v
    v.close()


def test_update_advances_and_redraws(viewer):
    azim = viewer.ax.azim
    for frame in range(60):
        viewer.update(frame)
    assert viewer.integrator.ticks == 60
    assert len(viewer.integrator) == 50
    xs, ys, zs = viewer.line.get_data_3d()
    assert len(xs) == 50
    assert np.allclose(np.column_stack([xs, ys, zs]), viewer.integrator.render_points())
    assert viewer.ax.azim == pytest.approx(azim + 60 * np.degrees(0.002))


def test_initial_camera(viewer):
    assert viewer.ax.elev == pytest.approx(35.2643896828)
    assert viewer.ax.azim == pytest.approx(45.0)


def test_snapshot(tmp_path, viewer):
    out = tmp_path / "snap.png"
    viewer.snapshot(out, ticks=25, dpi=40)
    assert out.exists()
    assert viewer.integrator.ticks == 25


def test_animate_creates_animation(viewer):
    anim = viewer.animate()
    assert anim is viewer.animation
    anim.event_source.stop()


def test_cone_mesh_apex_and_rim():
    arrow = Arrow(tip=(10.0, 0.0, 0.0), direction=(1.0, 0.0, 0.0), radius=0.2, height=0.5)
    xs, ys, zs = cone_mesh(arrow, resolution=8)
    assert xs.shape == (2, 8)
    assert np.allclose(xs[0], 10.0)
    assert np.allclose(ys[0], 0.0) and np.allclose(zs[0], 0.0)
    assert np.allclose(xs[1], 9.5)
    assert np.allclose(np.hypot(ys[1], zs[1]), 0.2)


def _unstable_viewer():
    integrator = TrajectoryIntegrator(lorenz=LorenzParams(dt=1.0), on_tick=None)
    return AttractorViewer(integrator, ViewParams())


def test_update_stops_on_blow_up():
    viewer = _unstable_viewer()
    try:
        viewer.animate()
        for frame in range(10_000):
            viewer.update(frame)
            if viewer.failure is not None:
                break
        assert isinstance(viewer.failure, NumericalInstabilityError)
        ticks = viewer.integrator.ticks
        viewer.update(frame + 1)
        assert viewer.integrator.ticks == ticks
        assert np.all(np.isfinite(viewer.integrator.render_points()))
    finally:
        viewer.close()


def test_show_reraises_blow_up_after_window_closes(monkeypatch):
    viewer = _unstable_viewer()

    def fake_show():
        for frame in range(10_000):
            viewer.update(frame)

    monkeypatch.setattr("lorenzviz.render.viewer.plt.show", fake_show)
    try:
        with pytest.raises(NumericalInstabilityError):
            viewer.show()
    finally:
        viewer.close()
