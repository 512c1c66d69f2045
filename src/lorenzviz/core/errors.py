from __future__ import annotations


class InvalidParameterError(ValueError):
    """Raised when integrator or system parameters are rejected at construction."""


class NumericalInstabilityError(ArithmeticError):
    """Raised when an integration step leaves the state non-finite."""

    def __init__(self, state: tuple[float, float, float], ticks: int):
        self.state = state
        self.ticks = ticks
        super().__init__(
            f"State became non-finite after {ticks} steps: "
            f"x={state[0]!r} y={state[1]!r} z={state[2]!r} (is dt too large?)"
        )
