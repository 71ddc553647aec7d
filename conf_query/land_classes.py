"""
Land-cover classes used to label scene regions, with their display colours (RGB).
"""
from __future__ import annotations

from typing import Dict, NamedTuple, Tuple


RGB = Tuple[int, int, int]


class LandClass(NamedTuple):
    id: int
    name: str
    color: RGB


LAND_CLASSES: Dict[int, LandClass] = {c.id: c for c in (
    LandClass(0, "invalid", (0, 0, 0)),
    LandClass(1, "building", (255, 0, 0)),
    LandClass(2, "road", (128, 128, 128)),
    LandClass(3, "water", (0, 0, 255)),
    LandClass(4, "vegetation", (0, 160, 0)),
    LandClass(5, "sand", (230, 200, 120)),
    LandClass(6, "grass", (120, 220, 80)),
    LandClass(7, "parking", (180, 180, 60)),
    LandClass(8, "pier", (150, 90, 40)),
    LandClass(9, "fort", (200, 80, 200)),
    LandClass(10, "tower", (255, 140, 0)),
    LandClass(11, "bridge", (90, 60, 160)),
    LandClass(12, "beach", (250, 230, 170)),
)}

UNKNOWN_COLOR: RGB = (255, 255, 0)


def land_color(land_id: int) -> RGB:
    c = LAND_CLASSES.get(int(land_id))
    return c.color if c else UNKNOWN_COLOR


def land_name(land_id: int) -> str:
    c = LAND_CLASSES.get(int(land_id))
    return c.name if c else f"land_{int(land_id)}"
