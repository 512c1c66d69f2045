from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.animation import FuncAnimation

from lorenzviz.core.errors import NumericalInstabilityError
from lorenzviz.core.scene.axes import Arrow, AxisSpec, build_axes
from lorenzviz.core.scene.view import ViewParams, azimuth_step, camera_angles
from lorenzviz.core.trajectory.integrator import TrajectoryIntegrator
from lorenzviz.utils.logging import get_logger

logger = get_logger(__name__)

# World-unit glyph height to matplotlib font points.
FONT_POINTS_PER_UNIT = 30.0


def cone_mesh(arrow: Arrow, resolution: int = 16) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Surface grid of a cone whose apex is ``arrow.tip``."""
    direction = np.asarray(arrow.direction, dtype=float)
    direction = direction / np.linalg.norm(direction)
    helper = np.array([0.0, 0.0, 1.0]) if abs(direction[2]) < 0.9 else np.array([1.0, 0.0, 0.0])
    u = np.cross(direction, helper)
    u /= np.linalg.norm(u)
    v = np.cross(direction, u)

    theta = np.linspace(0.0, 2.0 * np.pi, resolution)
    along = np.linspace(0.0, 1.0, 2)
    theta, along = np.meshgrid(theta, along)
    radius = arrow.radius * along
    base = np.asarray(arrow.tip, dtype=float) - direction * arrow.height

    # along=0 is the apex, along=1 the rim of the base
    points = (
        base[:, None, None]
        + direction[:, None, None] * arrow.height * (1.0 - along)
        + u[:, None, None] * radius * np.cos(theta)
        + v[:, None, None] * radius * np.sin(theta)
    )
    return points[0], points[1], points[2]


def draw_axis(ax, axis: AxisSpec) -> List:
    artists = []
    (line,) = ax.plot(*zip(axis.line.start, axis.line.end), color=axis.color, linewidth=1.0)
    artists.append(line)
    for arrow in axis.arrows:
        artists.append(ax.plot_surface(*cone_mesh(arrow), color=axis.color, linewidth=0, shade=False))
    for tick in axis.ticks:
        (mark,) = ax.plot(*zip(tick.mark.start, tick.mark.end), color=axis.color, linewidth=1.0)
        artists.append(mark)
        artists.append(
            ax.text(
                *tick.label.position,
                tick.label.text,
                color=axis.color,
                fontsize=tick.label.size * FONT_POINTS_PER_UNIT,
            )
        )
    if axis.label is not None:
        artists.append(
            ax.text(
                *axis.label.position,
                axis.label.text,
                color=axis.color,
                fontsize=axis.label.size * FONT_POINTS_PER_UNIT,
            )
        )
    return artists


class AttractorViewer:
    """
    3D figure showing the labeled coordinate system and the growing trajectory.

    The integrator is advanced once per animation frame; window handling, mouse
    orbiting and resizing are left to the matplotlib backend.
    """

    def __init__(self, integrator: TrajectoryIntegrator, view: ViewParams | None = None):
        self.integrator = integrator
        self.view = view or ViewParams()
        self.animation: FuncAnimation | None = None
        self.failure: NumericalInstabilityError | None = None

        self.fig = plt.figure(facecolor=self.view.background)
        self.ax = self.fig.add_subplot(projection="3d")
        self._style_axes()
        self.axes = build_axes(extent=self.view.extent, tick_size=self.view.tick_size)
        for axis in self.axes:
            draw_axis(self.ax, axis)

        (self.line,) = self.ax.plot(
            [], [], [], color=self.view.line_color, linewidth=self.view.line_width
        )
        elev, azim = camera_angles(self.view.camera)
        self.ax.view_init(elev=elev, azim=azim)
        self._azim_step = azimuth_step(self.view.rotation_speed)
        self.fig.canvas.mpl_connect("close_event", self._on_close)

    def _style_axes(self) -> None:
        bound = self.view.extent + 1
        self.ax.set_facecolor(self.view.background)
        self.ax.set_xlim(-bound, bound)
        self.ax.set_ylim(-bound, bound)
        self.ax.set_zlim(-bound, bound)
        self.ax.set_box_aspect((1, 1, 1))
        self.ax.set_axis_off()

    def refresh(self) -> None:
        """Push the integrator's current points into the line artist."""
        points = self.integrator.render_points()
        self.line.set_data_3d(points[:, 0], points[:, 1], points[:, 2])

    def update(self, frame: int):
        if self.failure is not None:
            return (self.line,)
        try:
            self.integrator.tick()
        except NumericalInstabilityError as exc:
            # backends swallow timer callback errors; stop and report after show()
            logger.error("Stopping animation: %s", exc)
            self.failure = exc
            if self.animation is not None:
                self.animation.event_source.stop()
            return (self.line,)
        self.refresh()
        # keep whatever orientation the user dragged to, then rotate further
        self.ax.view_init(elev=self.ax.elev, azim=self.ax.azim + self._azim_step)
        return (self.line,)

    def animate(self) -> FuncAnimation:
        interval_ms = 1000.0 / self.view.fps
        logger.info("Starting animation fps=%d interval=%.1fms", self.view.fps, interval_ms)
        self.animation = FuncAnimation(
            self.fig,
            self.update,
            interval=interval_ms,
            blit=False,
            cache_frame_data=False,
        )
        return self.animation

    def show(self) -> None:
        self.animate()
        plt.show()
        if self.failure is not None:
            raise self.failure

    def snapshot(self, path: Path, ticks: int = 0, dpi: int = 150) -> Path:
        """Advance ``ticks`` frames headless and save the figure as an image."""
        if ticks:
            self.integrator.run(ticks)
        self.refresh()
        path.parent.mkdir(parents=True, exist_ok=True)
        self.fig.savefig(path, dpi=dpi, facecolor=self.view.background, bbox_inches="tight")
        logger.info("Saved snapshot with %d points to %s", len(self.integrator), path)
        return path

    def close(self) -> None:
        plt.close(self.fig)

    def _on_close(self, event) -> None:
        logger.info("Viewer closed after %d ticks", self.integrator.ticks)
        if self.animation is not None:
            self.animation.event_source.stop()
