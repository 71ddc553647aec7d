from __future__ import annotations

import math
from pathlib import Path
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from common.config import VisualizeParams
from common.geo import polar_to_xy
from common.logging_setup import get_logger
from conf_query.horizon import horizon_line, line_coord
from conf_query.land_classes import land_color
from conf_query.raster import plot_dot_into_image, plot_line_into_image


log = get_logger("conf_query.visualize")


class ImageIO:
    """OpenCV-backed image load/save; images are HxWx3 uint8 in BGR order."""

    def load(self, path: str) -> Optional[np.ndarray]:
        if not Path(path).exists():
            return None
        img = cv2.imread(str(path), cv2.IMREAD_COLOR)
        return img

    def save(self, image: np.ndarray, path: str) -> bool:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        return bool(cv2.imwrite(str(path), image))


def bgr(rgb: Sequence[int]) -> Tuple[int, int, int]:
    r, g, b = rgb
    return (int(b), int(g), int(r))


def _style(query, name: str, land_id: int, width: float, ref_width: float, params: VisualizeParams):
    if query.is_ref(name):
        return bgr(params.ref_color), ref_width
    return bgr(land_color(land_id)), width


def visualize_ref_objs(
    query,
    in_file: str,
    out_folder: str,
    io: Optional[ImageIO] = None,
    params: Optional[VisualizeParams] = None,
) -> bool:
    """
    For every camera, draw the horizon, the scene region boundaries and a dot
    at each configurational object's source pixel over the query image.

    Writes `<out_folder>/<in_file stem>_<camera id>.tif`. Returns False if the
    input image is missing or any write fails.
    """
    io = io or ImageIO()
    params = params or VisualizeParams()
    src = io.load(in_file)
    if src is None:
        log.warning("Query image not found", extra={"extra": {"path": str(in_file)}})
        return False

    regions = query.scene.scene_regions
    stem = Path(in_file).stem
    ni = query.scene.ni
    ok = True
    for record in query.records:
        img = src.copy()

        h_line = horizon_line(record.camera)
        h_pixels = [(float(x), math.floor(line_coord(h_line, x))) for x in range(ni)]
        plot_line_into_image(img, h_pixels, bgr(params.horizon_color), params.horizon_width)

        for region in regions:
            boundary = list(region.outer_boundary)
            boundary.append(boundary[0])
            color, width = _style(query, region.name, region.land_id, params.boundary_width, params.ref_boundary_width, params)
            plot_line_into_image(img, boundary, color, width)

        for name, (i, j) in record.conf_pixels.items():
            land_id = record.conf_objects[name].land
            color, radius = _style(query, name, land_id, params.dot_radius, params.ref_dot_radius, params)
            plot_dot_into_image(img, (float(i), float(j)), color, radius)

        out_file = str(Path(out_folder) / f"{stem}_{record.name}.tif")
        saved = io.save(img, out_file)
        ok = ok and saved
        log.info("Saved reference overlay", extra={"extra": {"path": out_file, "ok": saved}})
    return ok


def top_view_size(query) -> Tuple[int, int]:
    """Half width / half height that bound every object's ground position over all cameras (at least 1)."""
    half_ni, half_nj = 1, 1
    for objects in query.conf_objects:
        for obj in objects.values():
            x, y = polar_to_xy(obj.distance, obj.bearing)
            half_ni = max(half_ni, math.ceil(abs(x)))
            half_nj = max(half_nj, math.ceil(abs(y)))
    return half_ni, half_nj


def generate_top_views(
    query,
    out_folder: str,
    filename_pre: str,
    io: Optional[ImageIO] = None,
    params: Optional[VisualizeParams] = None,
) -> bool:
    """
    Plot each camera's configurational objects on a top-down canvas with the
    camera at the centre and north (+y) up.

    Writes `<out_folder>/<filename_pre>_<camera id>.tif`.
    """
    io = io or ImageIO()
    params = params or VisualizeParams()
    half_ni, half_nj = top_view_size(query)
    ni, nj = 2 * half_ni, 2 * half_nj
    log.info("Top view image size", extra={"extra": {"ni": ni, "nj": nj}})

    xo, yo = float(half_ni), float(half_nj)
    ok = True
    for record in query.records:
        img = np.full((nj, ni, 3), int(params.top_view_background), dtype=np.uint8)
        plot_dot_into_image(img, (xo, yo), (0, 0, 0), params.top_view_camera_radius)
        for name, obj in record.conf_objects.items():
            xc, yc = polar_to_xy(obj.distance, obj.bearing)
            color, radius = _style(
                query, name, obj.land, params.top_view_dot_radius, params.top_view_ref_dot_radius, params
            )
            plot_dot_into_image(img, (xc + xo, yo - yc), color, radius)

        out_file = str(Path(out_folder) / f"{filename_pre}_{record.name}.tif")
        saved = io.save(img, out_file)
        ok = ok and saved
        log.info("Saved top view", extra={"extra": {"path": out_file, "ok": saved}})
    return ok
