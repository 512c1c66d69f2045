from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from lorenzviz.core import constants
from lorenzviz.core.errors import InvalidParameterError, NumericalInstabilityError
from lorenzviz.core.system.base import require_finite
from lorenzviz.core.system.lorenz import LorenzParams, LorenzSystem
from lorenzviz.core.trajectory.buffer import Point3D, TrajectoryBuffer
from lorenzviz.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TrajectoryParams:
    """Buffer size, display scale and starting point of a trajectory."""

    capacity: int = constants.DEFAULT_CAPACITY
    scale: float = constants.DEFAULT_DISPLAY_SCALE
    initial: Tuple[float, float, float] = constants.DEFAULT_INITIAL_STATE
    log_every: int = constants.DEFAULT_LOG_EVERY


TickHook = Callable[["TrajectoryIntegrator"], None]


def log_progress(integrator: "TrajectoryIntegrator") -> None:
    """Default observability hook: current position and number of points."""
    x, y, z = integrator.state
    logger.debug("Current position x=%.6f y=%.6f z=%.6f", x, y, z)
    logger.debug("Number of points: %d", len(integrator.buffer))


class TrajectoryIntegrator:
    """
    Owns the Lorenz state and the bounded history of visited points.

    The Lorenz state is never scaled; ``step`` returns it at display scale and
    the buffer keeps those display points exactly as returned.
    """

    def __init__(
        self,
        lorenz: LorenzParams | None = None,
        trajectory: TrajectoryParams | None = None,
        on_tick: Optional[TickHook] = log_progress,
    ):
        self.lorenz = lorenz or LorenzParams()
        self.params = trajectory or TrajectoryParams()
        _validate(self.lorenz, self.params)

        self.system = LorenzSystem.from_params(self.lorenz, self.params.initial)
        self.buffer = TrajectoryBuffer(self.params.capacity)
        self.scale = float(self.params.scale)
        self.on_tick = on_tick
        self.ticks = 0
        logger.debug(
            "Integrator ready sigma=%s rho=%s beta=%.6f dt=%s capacity=%d scale=%s",
            self.lorenz.sigma,
            self.lorenz.rho,
            self.lorenz.beta,
            self.lorenz.dt,
            self.params.capacity,
            self.scale,
        )

    @property
    def state(self) -> Point3D:
        return self.system.state

    def __len__(self) -> int:
        return len(self.buffer)

    def step(self) -> Point3D:
        """Advance one Euler step and return the new state at display scale."""
        x, y, z = self.system.step()
        self.ticks += 1
        if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(z)):
            raise NumericalInstabilityError((x, y, z), self.ticks)
        return x * self.scale, y * self.scale, z * self.scale

    def append_and_evict(self, point: Point3D) -> None:
        """Append a point returned by ``step``, dropping the oldest one when over capacity."""
        self.buffer.append_and_evict(point)

    def tick(self) -> Point3D:
        """One animation frame: step, notify the hook, then record the new point."""
        scaled = self.step()
        log_every = self.params.log_every
        if self.on_tick is not None and log_every and len(self.buffer) % log_every == 0:
            self.on_tick(self)
        self.append_and_evict(scaled)
        return scaled

    def render_points(self) -> np.ndarray:
        """Buffer contents as handed to the renderer."""
        return self.buffer.as_array()

    def run(self, ticks: int) -> np.ndarray:
        if ticks < 0:
            raise InvalidParameterError(f"ticks must be >= 0, got {ticks}")
        for _ in range(ticks):
            self.tick()
        return self.render_points()


def _validate(lorenz: LorenzParams, params: TrajectoryParams) -> None:
    for name in ("sigma", "rho", "beta", "dt"):
        require_finite(name, getattr(lorenz, name))
    if float(lorenz.dt) <= 0:
        raise InvalidParameterError(f"dt must be > 0, got {lorenz.dt}")
    capacity = params.capacity
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
        raise InvalidParameterError(f"capacity must be a positive integer, got {capacity!r}")
    if require_finite("scale", params.scale) <= 0:
        raise InvalidParameterError(f"scale must be > 0, got {params.scale!r}")
    if len(params.initial) != 3:
        raise InvalidParameterError(f"initial state needs three coordinates, got {params.initial!r}")
    for name, value in zip("xyz", params.initial):
        require_finite(f"initial {name}", value)
    if params.log_every < 0:
        raise InvalidParameterError(f"log_every must be >= 0, got {params.log_every}")
