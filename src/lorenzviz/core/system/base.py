from __future__ import annotations

import math
from abc import ABC, abstractmethod

from lorenzviz.core.errors import InvalidParameterError


def require_finite(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(value):
        raise InvalidParameterError(f"{name} must be finite, got {value!r}")
    return value


class DynamicalSystem(ABC):
    """Base class for 3D systems advanced by explicit Euler steps."""

    def __init__(self, x: float, y: float, z: float, dt: float):
        self.x = require_finite("x", x)
        self.y = require_finite("y", y)
        self.z = require_finite("z", z)
        self.dt = require_finite("dt", dt)
        if self.dt <= 0:
            raise InvalidParameterError(f"dt must be > 0, got {self.dt}")

    @property
    def state(self) -> tuple[float, float, float]:
        return self.x, self.y, self.z

    @abstractmethod
    def derivative(self) -> tuple[float, float, float]:
        """Vector field evaluated at the current state."""
        ...

    def step(self) -> tuple[float, float, float]:
        """Advance one step and return the new state."""
        dx, dy, dz = self.derivative()

        self.x += dx * self.dt
        self.y += dy * self.dt
        self.z += dz * self.dt
        return self.x, self.y, self.z
