from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from lorenzviz.core import constants


@dataclass(frozen=True)
class ViewParams:
    """Presentation settings for the animated viewer."""

    fps: int = constants.DEFAULT_FPS
    rotation_speed: float = constants.DEFAULT_ROTATION_SPEED
    extent: int = constants.AXIS_EXTENT
    tick_size: float = constants.TICK_SIZE
    background: str = constants.DEFAULT_BACKGROUND
    line_color: str = constants.DEFAULT_LINE_COLOR
    line_width: float = constants.DEFAULT_LINE_WIDTH
    camera: Tuple[float, float, float] = constants.CAMERA_POSITION


def camera_angles(position: Tuple[float, float, float]) -> Tuple[float, float]:
    """Elevation and azimuth (degrees) of a camera at ``position`` looking at the origin."""
    x, y, z = position
    horizontal = math.hypot(x, y)
    if horizontal == 0 and z == 0:
        raise ValueError("camera position must not be the origin")
    elev = math.degrees(math.atan2(z, horizontal))
    azim = math.degrees(math.atan2(y, x))
    return elev, azim


def azimuth_step(rotation_speed: float) -> float:
    """Per-frame azimuth increment in degrees for a rotation speed in radians."""
    return math.degrees(rotation_speed)
