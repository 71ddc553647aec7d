from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, NamedTuple, Sequence, Tuple


Point2 = Tuple[float, float]
Sheet = Tuple[Point2, ...]


@dataclass(frozen=True, slots=True)
class ConfObject:
    """
    Configurational object: a landmark as seen from one camera.

    Attributes:
        bearing: azimuth of the back-projected ray (radians, atan2(y, x)).
        distance: ground distance from the camera footprint, altitude units.
        land: land-cover class id (0..255).
    """
    bearing: float
    distance: float
    land: int

    def __post_init__(self) -> None:
        if not 0 <= int(self.land) <= 255:
            raise ValueError("land must fit in a byte (0..255)")


@dataclass(frozen=True, slots=True)
class CameraAngles:
    """Camera orientation in degrees; tilt is measured from nadir (90 = horizontal)."""
    heading: float
    tilt: float
    roll: float = 0.0
    top_fov: float = 45.0

    def get_string(self) -> str:
        return (
            f"heading_{self.heading:.2f}_tilt_{self.tilt:.2f}"
            f"_roll_{self.roll:.2f}_top_fov_{self.top_fov:.2f}"
        )


class VertexProjection(NamedTuple):
    """Nearest ground projection of a region: distance, bearing and source pixel (i, j)."""
    distance: float
    bearing: float
    i: int
    j: int

    @property
    def is_valid(self) -> bool:
        return self.distance >= 0.0


UNSET_PROJECTION = VertexProjection(-1.0, -1.0, 0, 0)


def _as_sheet(points: Sequence[Sequence[float]]) -> Sheet:
    return tuple((float(p[0]), float(p[1])) for p in points)


@dataclass(frozen=True)
class SceneRegion:
    """
    A labeled image region of the query scene.

    `polygon` is a sequence of sheets; the first sheet is the outer boundary and
    is the only one used for projection. Inner sheets (holes) are kept for
    callers that need them but are otherwise ignored.
    """
    name: str
    polygon: Tuple[Sheet, ...]
    land_id: int = 0
    is_ref: bool = False

    def __post_init__(self) -> None:
        sheets = tuple(_as_sheet(s) for s in self.polygon)
        if not sheets or not sheets[0]:
            raise ValueError(f"region {self.name!r} needs a non-empty outer boundary")
        if not 0 <= int(self.land_id) <= 255:
            raise ValueError("land_id must fit in a byte (0..255)")
        object.__setattr__(self, "polygon", sheets)

    @classmethod
    def from_points(cls, name: str, points: Sequence[Sequence[float]], land_id: int = 0, is_ref: bool = False) -> "SceneRegion":
        return cls(name=name, polygon=(_as_sheet(points),), land_id=land_id, is_ref=is_ref)

    @property
    def outer_boundary(self) -> Sheet:
        return self.polygon[0]


@dataclass
class DepthScene:
    """
    Labeled query scene: image size plus ground, non-ground and sky regions.

    Region names are expected to be unique across all lists.
    """
    ni: int
    nj: int
    ground_plane: List[SceneRegion] = field(default_factory=list)
    scene_regions: List[SceneRegion] = field(default_factory=list)
    sky: List[SceneRegion] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.ni <= 0 or self.nj <= 0:
            raise ValueError("scene image size must be positive")
