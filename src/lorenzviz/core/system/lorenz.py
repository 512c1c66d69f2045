from __future__ import annotations

from dataclasses import dataclass

from lorenzviz.core import constants

from .base import DynamicalSystem, require_finite


@dataclass(frozen=True)
class LorenzParams:
    """Vector field constants and integration granularity."""

    sigma: float = constants.LORENZ_SIGMA
    rho: float = constants.LORENZ_RHO
    beta: float = constants.LORENZ_BETA
    dt: float = constants.DEFAULT_DT


class LorenzSystem(DynamicalSystem):
    """Explicit Euler integration of the Lorenz system."""

    def __init__(
        self,
        x: float,
        y: float,
        z: float,
        dt: float,
        sigma: float,
        rho: float,
        beta: float,
    ):
        super().__init__(x, y, z, dt)
        self.sigma = require_finite("sigma", sigma)
        self.rho = require_finite("rho", rho)
        self.beta = require_finite("beta", beta)

    @classmethod
    def from_params(
        cls, params: LorenzParams, initial: tuple[float, float, float]
    ) -> "LorenzSystem":
        return cls(
            x=initial[0],
            y=initial[1],
            z=initial[2],
            dt=params.dt,
            sigma=params.sigma,
            rho=params.rho,
            beta=params.beta,
        )

    def derivative(self) -> tuple[float, float, float]:
        dx = self.sigma * (self.y - self.x)
        dy = self.x * (self.rho - self.z) - self.y
        dz = self.x * self.y - self.beta * self.z
        return dx, dy, dz
