from __future__ import annotations

from typing import Sequence, Tuple
import math
import numpy as np


# -------------------------
# Spherical coordinates
# -------------------------
def spherical_coord(v: Sequence[float]) -> Tuple[float, float, float]:
    """
    Cartesian (x, y, z) to spherical (radius, theta, phi).

    theta is the polar angle from +z in [0, pi]; phi is the azimuth
    atan2(y, x) in (-pi, pi]. A zero vector maps to (0, 0, 0).
    """
    x, y, z = (float(c) for c in v)
    r = math.sqrt(x * x + y * y + z * z)
    if r == 0.0:
        return (0.0, 0.0, 0.0)
    theta = math.acos(max(-1.0, min(1.0, z / r)))
    phi = math.atan2(y, x)
    return (r, theta, phi)


def ground_distance(theta: float, altitude: float) -> float:
    """
    Horizontal distance to where a ray with polar angle `theta` meets flat
    ground `altitude` below the camera: tan(pi - theta) * altitude.
    """
    return math.tan(math.pi - theta) * altitude


def polar_to_xy(distance: float, bearing: float) -> Tuple[float, float]:
    """(distance, bearing) → (x, y) in the ground plane, bearing from +x counter-clockwise."""
    return (distance * math.cos(bearing), distance * math.sin(bearing))


# -------------------------
# Rotations
# -------------------------
def rotation_from_angles(heading_deg: float, tilt_deg: float, roll_deg: float = 0.0) -> np.ndarray:
    """
    World→camera rotation for a camera with x right, y down, z forward.

    World frame is x east, y north, z up. Heading is clockwise from north,
    tilt is measured from nadir (0 looks straight down, 90 is horizontal),
    roll turns the image about the optical axis.
    """
    hd = math.radians(heading_deg)
    tl = math.radians(tilt_deg)
    rl = math.radians(roll_deg)

    horiz = np.array([math.sin(hd), math.cos(hd), 0.0])
    forward = math.cos(tl) * np.array([0.0, 0.0, -1.0]) + math.sin(tl) * horiz
    right = np.array([math.cos(hd), -math.sin(hd), 0.0])
    down = np.cross(forward, right)

    right_r = math.cos(rl) * right + math.sin(rl) * down
    down_r = -math.sin(rl) * right + math.cos(rl) * down
    return np.vstack([right_r, down_r, forward]).astype(float)
