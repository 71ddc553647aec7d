"""
Polygon rasterization used by the debug renderings.

All stamps clip to the image: pixels outside the buffer are dropped, never
written, and never raise.
"""
from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from common.utils import as_points


Color = Tuple[int, ...]

# 36 points every 10 degrees plus the diagonals
DOT_ANGLES_DEG: Tuple[float, ...] = tuple(sorted({10.0 * k for k in range(36)} | {45.0, 135.0, 225.0, 315.0}))


def scan_fill(image: np.ndarray, sheets: Iterable[Sequence[Sequence[float]]], color: Color) -> int:
    """
    Even-odd scanline fill of a (possibly multi-sheet) polygon with float vertices.

    Each integer row y is intersected with every non-horizontal edge using the
    half-open rule min(y0, y1) <= y < max(y0, y1); pixels whose centres fall in
    [x_left, x_right] are written. A span narrower than one pixel still writes
    its nearest pixel so thin shapes stay visible. Horizontal edges lying on a
    row are written as well.

    Returns the number of pixel writes (after clipping).
    """
    edges = _edges(sheets)
    if edges.shape[0] == 0:
        return 0
    H, W = image.shape[:2]
    x0, y0, x1, y1 = edges.T

    ymin = float(min(y0.min(), y1.min()))
    ymax = float(max(y0.max(), y1.max()))
    row_lo = max(0, math.ceil(ymin))
    row_hi = min(H - 1, math.floor(ymax))

    horizontal = y0 == y1
    slanted = ~horizontal
    written = 0
    for y in range(row_lo, row_hi + 1):
        crosses = slanted & (((y0 <= y) & (y < y1)) | ((y1 <= y) & (y < y0)))
        if crosses.any():
            xa, ya, xb, yb = x0[crosses], y0[crosses], x1[crosses], y1[crosses]
            xs = np.sort(xa + (y - ya) * (xb - xa) / (yb - ya))
            for k in range(0, len(xs) - 1, 2):
                written += _write_span(image, y, float(xs[k]), float(xs[k + 1]), color)
        on_row = horizontal & (y0 == y)
        for xa, xb in zip(x0[on_row], x1[on_row]):
            written += _write_span(image, y, float(min(xa, xb)), float(max(xa, xb)), color)
    return written


def _edges(sheets: Iterable[Sequence[Sequence[float]]]) -> np.ndarray:
    rows: List[np.ndarray] = []
    for sheet in sheets:
        pts = as_points(sheet)
        pts = pts[np.isfinite(pts).all(axis=1)]
        if len(pts) < 3:
            continue
        nxt = np.roll(pts, -1, axis=0)
        rows.append(np.hstack([pts, nxt]))
    if not rows:
        return np.zeros((0, 4), dtype=float)
    return np.vstack(rows)


def _write_span(image: np.ndarray, y: int, xl: float, xr: float, color: Color) -> int:
    W = image.shape[1]
    start = math.ceil(xl)
    end = math.floor(xr)
    if start > end:
        start = end = int(math.floor(0.5 * (xl + xr) + 0.5))
    start = max(0, start)
    end = min(W - 1, end)
    if start > end:
        return 0
    image[y, start:end + 1] = color
    return end - start + 1


def expand_line(points: Sequence[Sequence[float]], width: float) -> List[List[Tuple[float, float]]]:
    """
    Width-buffered envelope of a polyline: one rectangle per segment, extending
    width/2 to each side of it. A polyline that collapses to one point gives a
    width x width square.
    """
    pts = as_points(points)
    pts = pts[np.isfinite(pts).all(axis=1)]
    half = 0.5 * float(width)
    bands: List[List[Tuple[float, float]]] = []
    for p, q in zip(pts[:-1], pts[1:]):
        d = q - p
        n = float(np.hypot(d[0], d[1]))
        if n == 0.0:
            continue
        off = np.array([-d[1], d[0]]) / n * half
        bands.append([tuple(p + off), tuple(q + off), tuple(q - off), tuple(p - off)])
    if not bands and len(pts):
        cx, cy = pts[0]
        bands.append([(cx - half, cy - half), (cx + half, cy - half), (cx + half, cy + half), (cx - half, cy + half)])
    return bands


def circle_polygon(center: Sequence[float], radius: float) -> List[Tuple[float, float]]:
    """40-vertex approximation of a circle, counter-clockwise from angle 0."""
    cx, cy = float(center[0]), float(center[1])
    return [
        (cx + radius * math.cos(math.radians(a)), cy + radius * math.sin(math.radians(a)))
        for a in DOT_ANGLES_DEG
    ]


def plot_line_into_image(image: np.ndarray, line: Sequence[Sequence[float]], color: Color, width: float) -> int:
    """Stamp a thick polyline. Segments are filled one by one so joints overlap instead of cancelling."""
    return sum(scan_fill(image, [band], color) for band in expand_line(line, width))


def plot_dot_into_image(image: np.ndarray, pt: Sequence[float], color: Color, radius: float) -> int:
    return scan_fill(image, [circle_polygon(pt, radius)], color)
