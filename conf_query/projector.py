from __future__ import annotations

from typing import Sequence, Tuple

from common.geo import ground_distance, spherical_coord
from common.logging_setup import get_logger
from common.types import UNSET_PROJECTION, SceneRegion, VertexProjection
from conf_query.horizon import HorizonLine, line_coord


log = get_logger("conf_query.projector")


def project(
    camera,
    cam_center: Sequence[float],
    horizon: HorizonLine,
    polygon,
    altitude: float,
) -> VertexProjection:
    """
    Project the ground-side vertices of a region's outer boundary and keep the
    one nearest to the camera.

    Args:
        camera: object with backproject(u, v) -> (origin, direction)
        cam_center: camera center (diagnostics only; rays carry their own origin)
        horizon: image horizon line of `camera`
        polygon: SceneRegion, or a sequence of sheets of (x, y) points
        altitude: camera height above the flat ground

    Returns:
        VertexProjection(distance, bearing, i, j), or UNSET_PROJECTION when
        no vertex qualifies. A vertex qualifies when it is on or below the
        horizon and its ray meets the ground (distance >= 0). On equal
        distances the earlier vertex in boundary order is kept.
    """
    boundary = _outer_boundary(polygon)
    best = UNSET_PROJECTION
    found = False
    for x, y in boundary:
        if y < line_coord(horizon, x):  # above the horizon
            continue
        _, direction = camera.backproject(x, y)
        _, theta, phi = spherical_coord(direction)
        dist = ground_distance(theta, altitude)
        if dist < 0.0:  # ray points above the ground plane
            continue
        if not found or dist < best.distance:
            best = VertexProjection(float(dist), float(phi), int(x), int(y))
            found = True

    log.debug(
        "Projected region boundary",
        extra={"extra": {
            "vertices": len(boundary),
            "center": [float(c) for c in cam_center],
            "min_dist": best.distance,
            "phi": best.bearing,
            "pixel": [best.i, best.j],
        }},
    )
    return best


def _outer_boundary(polygon) -> Tuple[Tuple[float, float], ...]:
    if isinstance(polygon, SceneRegion):
        return polygon.outer_boundary
    if not polygon:
        return ()
    return tuple((float(p[0]), float(p[1])) for p in polygon[0])
