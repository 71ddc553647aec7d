from __future__ import annotations

from typing import List, Optional

from common.types import DepthScene


def parse_ref_objects(scene: Optional[DepthScene]) -> Optional[List[str]]:
    """
    Names of the regions flagged as reference, ground plane first, then the
    non-ground scene regions, each in declaration order.

    Sky regions are never consulted. Returns None when there is no scene or
    no reference region, since matching needs at least one anchor.
    """
    if scene is None:
        return None
    names = [r.name for r in scene.ground_plane if r.is_ref]
    names += [r.name for r in scene.scene_regions if r.is_ref]
    if not names:
        return None
    return names
