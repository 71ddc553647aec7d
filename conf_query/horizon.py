from __future__ import annotations

from typing import NamedTuple


class HorizonLine(NamedTuple):
    """Image line a*x + b*y + c = 0 separating sky from ground."""
    a: float
    b: float
    c: float


def horizon_line(camera) -> HorizonLine:
    """Horizon of `camera` in image coordinates (delegates to the camera model)."""
    return HorizonLine(*camera.horizon())


def line_coord(line: HorizonLine, x: float) -> float:
    """
    y of `line` at column x. A line with b == 0 has no usable y and evaluates
    to 0, which leaves every vertex at y >= 0 on the ground side.
    """
    a, b, c = line
    if b == 0:
        return 0.0
    return -a / b * x - c / b
