#!/usr/bin/env python3
"""
Render debug images for a synthetic configurational object query.

Builds a query scene by projecting the configured world boxes through a
"truth" camera, paints a labeled query image from it, then constructs the
query over the configured camera space and writes:
- <out>/query_<camera id>.tif  (overlay of horizon, regions and objects)
- <out>/top_<camera id>.tif    (top-down view of each camera's objects)

Examples:
  python scripts/render_demo_query.py --config config/params.yaml --out out/demo
  python scripts/render_demo_query.py --workers 4
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Dict, List, Tuple

import cv2
import numpy as np

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.config import QueryParams, VisualizeParams, load_yaml
from common.logging_setup import get_logger, setup_logging
from common.types import CameraAngles, DepthScene, SceneRegion
from conf_query import ConfQuery, ConfQueryError, GridCameraSpace, PerspectiveCamera
from conf_query.horizon import line_coord
from conf_query.land_classes import land_color
from conf_query.raster import scan_fill
from conf_query.visualize import ImageIO, bgr


log = get_logger("render_demo_query")

SKY_BGR = (235, 206, 135)


def box_region(cam: PerspectiveCamera, box: Dict) -> SceneRegion:
    """Image polygon (convex hull of the projected corners) of an upright box."""
    cx, cy = (float(v) for v in box["center"])
    sx, sy = (float(v) for v in box["size"])
    h = float(box["height"])
    corners = [
        (cx + dx * sx / 2.0, cy + dy * sy / 2.0, z)
        for dx in (-1, 1) for dy in (-1, 1) for z in (0.0, h)
    ]
    pts = np.float32([cam.project(c) for c in corners])
    hull = cv2.convexHull(pts).reshape(-1, 2)
    return SceneRegion.from_points(
        box["name"], hull.tolist(), land_id=int(box.get("land_id", 0)), is_ref=bool(box.get("is_ref", False))
    )


def ground_regions(cam: PerspectiveCamera, ni: int, nj: int, ground: List[Dict]) -> List[SceneRegion]:
    """Each configured ground entry covers the image below the truth horizon."""
    h_line = cam.horizon()
    y_left = max(0.0, line_coord(h_line, 0.0))
    y_right = max(0.0, line_coord(h_line, float(ni - 1)))
    pts = [(0.0, y_left), (ni - 1.0, y_right), (ni - 1.0, nj - 1.0), (0.0, nj - 1.0)]
    return [
        SceneRegion.from_points(g["name"], pts, land_id=int(g.get("land_id", 0)), is_ref=bool(g.get("is_ref", False)))
        for g in ground
    ]


def build_scene(P: Dict) -> Tuple[DepthScene, PerspectiveCamera]:
    cs = P["camera_space"]
    demo = P["demo_scene"]
    ni, nj = int(cs["ni"]), int(cs["nj"])
    angles = CameraAngles(**{k: float(v) for k, v in demo["truth_camera"].items()})
    cam = PerspectiveCamera.from_angles(ni, nj, float(cs["altitude"]), angles)
    scene = DepthScene(
        ni=ni,
        nj=nj,
        ground_plane=ground_regions(cam, ni, nj, demo.get("ground", [])),
        scene_regions=[box_region(cam, b) for b in demo.get("boxes", [])],
    )
    return scene, cam


def paint_query_image(scene: DepthScene) -> np.ndarray:
    img = np.full((scene.nj, scene.ni, 3), SKY_BGR, dtype=np.uint8)
    # far boxes first so nearer ones cover them
    for region in [*scene.ground_plane, *reversed(scene.scene_regions)]:
        scan_fill(img, [region.outer_boundary], bgr(land_color(region.land_id)))
    return img


def main() -> None:
    ap = argparse.ArgumentParser(description="Configurational object query — demo renderer")
    ap.add_argument("--config", default="config/params.yaml")
    ap.add_argument("--out", default="out/demo")
    ap.add_argument("--workers", type=int, default=None, help="Override query.workers")
    args = ap.parse_args()

    P = load_yaml(args.config)
    setup_logging(P.get("logging", {}).get("level", "INFO"), force=True)

    qp = P.get("query", {}) or {}
    if args.workers is not None:
        qp = {**qp, "workers": args.workers}
    vis = VisualizeParams.from_dict(P.get("visualize"))

    scene, _ = build_scene(P)
    out = Path(args.out)
    io = ImageIO()
    query_path = str(out / "query.png")
    io.save(paint_query_image(scene), query_path)

    camera_space = GridCameraSpace.from_dict(P["camera_space"])
    try:
        query = ConfQuery.from_scene(camera_space, scene, QueryParams.from_dict(qp))
    except ConfQueryError as e:
        log.error("Query construction failed", extra={"extra": {"kind": e.kind.value, "error": str(e)}})
        raise SystemExit(1)

    ok = query.visualize_ref_objs(query_path, str(out), io=io, params=vis)
    ok = query.generate_top_views(str(out), "top", io=io, params=vis) and ok
    log.info("Demo finished", extra={"extra": {"out": str(out), "ok": ok, "ncam": query.ncam}})
    if not ok:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
