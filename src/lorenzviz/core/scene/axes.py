from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from lorenzviz.core import constants

Vec3 = Tuple[float, float, float]

_UNIT = {
    "x": (1.0, 0.0, 0.0),
    "y": (0.0, 1.0, 0.0),
    "z": (0.0, 0.0, 1.0),
}

# Direction along which tick marks extend for each axis.
_TICK_NORMAL = {
    "x": (0.0, 1.0, 0.0),
    "y": (1.0, 0.0, 0.0),
    "z": (0.0, 1.0, 0.0),
}


@dataclass(frozen=True)
class Segment:
    start: Vec3
    end: Vec3


@dataclass(frozen=True)
class Arrow:
    """Cone head; ``direction`` is a unit vector pointing away from the origin."""

    tip: Vec3
    direction: Vec3
    radius: float = constants.ARROW_RADIUS
    height: float = constants.ARROW_HEIGHT


@dataclass(frozen=True)
class Label:
    text: str
    position: Vec3
    size: float


@dataclass(frozen=True)
class Tick:
    value: int
    mark: Segment
    label: Label


@dataclass
class AxisSpec:
    name: str
    color: str
    line: Segment
    arrows: List[Arrow] = field(default_factory=list)
    ticks: List[Tick] = field(default_factory=list)
    label: Label | None = None


def _scaled(unit: Vec3, value: float) -> Vec3:
    return (unit[0] * value, unit[1] * value, unit[2] * value)


def _add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def build_axis(
    name: str,
    extent: int = constants.AXIS_EXTENT,
    tick_size: float = constants.TICK_SIZE,
    color: str | None = None,
) -> AxisSpec:
    """Line, arrow heads, integer ticks and letter for one coordinate axis."""
    if name not in _UNIT:
        raise ValueError(f"Unknown axis '{name}'. Available: {sorted(_UNIT)}")
    if extent <= 0:
        raise ValueError(f"extent must be > 0, got {extent}")
    unit = _UNIT[name]
    normal = _TICK_NORMAL[name]
    color = color or constants.AXIS_COLORS[name]

    axis = AxisSpec(
        name=name,
        color=color,
        line=Segment(_scaled(unit, -extent), _scaled(unit, extent)),
        arrows=[
            Arrow(tip=_scaled(unit, extent), direction=unit),
            Arrow(tip=_scaled(unit, -extent), direction=_scaled(unit, -1.0)),
        ],
    )

    offset = constants.AXIS_LABEL_OFFSET
    for i in range(-extent, extent + 1):
        if i == 0:
            continue
        center = _scaled(unit, i)
        mark = Segment(
            _add(center, _scaled(normal, -tick_size)),
            _add(center, _scaled(normal, tick_size)),
        )
        # numbers sit slightly before the tick and below the axis
        position = _add(_scaled(unit, i - 0.1), _scaled(normal, -offset))
        axis.ticks.append(
            Tick(
                value=i,
                mark=mark,
                label=Label(str(abs(i)), position, constants.TICK_LABEL_SIZE),
            )
        )

    axis.label = Label(name, _scaled(unit, extent + offset), constants.AXIS_LABEL_SIZE)
    return axis


def build_axes(
    extent: int = constants.AXIS_EXTENT, tick_size: float = constants.TICK_SIZE
) -> List[AxisSpec]:
    return [build_axis(name, extent=extent, tick_size=tick_size) for name in ("x", "y", "z")]
