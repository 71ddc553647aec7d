from __future__ import annotations

import enum
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from common.config import QueryParams, VisualizeParams
from common.logging_setup import get_logger
from common.types import CameraAngles, ConfObject, DepthScene
from common.utils import timer_ms
from conf_query.horizon import horizon_line
from conf_query.projector import project
from conf_query.reference import parse_ref_objects
from conf_query import visualize


log = get_logger("conf_query")


class ErrorKind(enum.Enum):
    NO_REFERENCE = "no_reference"
    CAMERA_BUILD = "camera_build"
    CONF_OBJECT_BUILD = "conf_object_build"


class ConfQueryError(RuntimeError):
    """Query construction failed; `kind` tells which build step refused the input."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class CameraRecord:
    """
    Everything the query knows about one valid camera.

    conf_objects: region name → ConfObject for the regions observable from it
    conf_pixels: region name → (i, j) image pixel the object was taken from
    """
    camera: object
    name: str
    angles: CameraAngles
    conf_objects: Mapping[str, ConfObject] = field(default_factory=lambda: MappingProxyType({}))
    conf_pixels: Mapping[str, Tuple[int, int]] = field(default_factory=lambda: MappingProxyType({}))


class ConfQuery:
    """
    Configurational objects of a labeled query scene, for every valid camera of
    a camera space.

    Use `ConfQuery.from_scene` to build a ready query. The three build steps
    (`parse_ref_objects`, `create_cameras`, `create_conf_objects`) can be run
    again; each overwrites what it produced before and reports success as a bool.
    """

    def __init__(self, camera_space, scene: DepthScene, params: Optional[QueryParams] = None):
        self.camera_space = camera_space
        self.scene = scene
        self.params = params or QueryParams()
        self.ni = scene.ni if scene is not None else 0
        self.nj = scene.nj if scene is not None else 0
        self.altitude = float(camera_space.altitude) if camera_space is not None else 0.0
        self._ref_obj_names: Tuple[str, ...] = ()
        self._records: Tuple[CameraRecord, ...] = ()

    @classmethod
    def from_scene(cls, camera_space, scene: DepthScene, params: Optional[QueryParams] = None) -> "ConfQuery":
        """Build reference names, cameras and configurational objects; raise ConfQueryError on failure."""
        q = cls(camera_space, scene, params)
        if not q.parse_ref_objects():
            raise ConfQueryError(ErrorKind.NO_REFERENCE, "no reference object found in the query scene")
        if not q.create_cameras():
            raise ConfQueryError(ErrorKind.CAMERA_BUILD, "cannot construct cameras from the camera space")
        if not q.create_conf_objects():
            raise ConfQueryError(ErrorKind.CONF_OBJECT_BUILD, "cannot construct configurational objects")
        return q

    # -------- accessors --------

    @property
    def ref_obj_names(self) -> Tuple[str, ...]:
        return self._ref_obj_names

    @property
    def nref(self) -> int:
        return len(self._ref_obj_names)

    @property
    def records(self) -> Tuple[CameraRecord, ...]:
        return self._records

    @property
    def ncam(self) -> int:
        return len(self._records)

    @property
    def camera_strings(self) -> List[str]:
        return [r.name for r in self._records]

    @property
    def conf_objects(self) -> List[Mapping[str, ConfObject]]:
        return [r.conf_objects for r in self._records]

    @property
    def conf_pixels(self) -> List[Mapping[str, Tuple[int, int]]]:
        return [r.conf_pixels for r in self._records]

    def is_ref(self, name: str) -> bool:
        return name in self._ref_obj_names

    # -------- build steps --------

    def parse_ref_objects(self) -> bool:
        names = parse_ref_objects(self.scene)
        if names is None:
            self._ref_obj_names = ()
            return False
        self._ref_obj_names = tuple(names)
        log.info(
            "Reference configurational objects loaded",
            extra={"extra": {"nref": self.nref, "names": list(self._ref_obj_names)}},
        )
        return True

    def create_cameras(self) -> bool:
        if self.camera_space is None:
            self._records = ()
            return False
        records = []
        for idx in self.camera_space.valid_indices():
            records.append(CameraRecord(
                camera=self.camera_space.camera(idx),
                name=self.camera_space.camera_string(idx),
                angles=self.camera_space.camera_angles(idx),
            ))
        self._records = tuple(records)
        log.info("Cameras created", extra={"extra": {"ncam": self.ncam, "cameras": self.camera_strings}})
        return True

    def create_conf_objects(self) -> bool:
        """
        Project every non-ground scene region for every camera. Regions with no
        vertex below the horizon are left out of that camera's map.
        """
        if self.params.workers > 1 and len(self._records) > 1:
            with ThreadPoolExecutor(max_workers=self.params.workers) as pool:
                built = list(pool.map(self._build_record, self._records))
        else:
            built = [self._build_record(r) for r in self._records]
        self._records = tuple(built)
        return True

    def _build_record(self, record: CameraRecord) -> CameraRecord:
        (objects, pixels), dt_ms = _project_regions(record, self.scene.scene_regions, self.altitude)
        log.info(
            "Configurational objects created",
            extra={"extra": {"camera": record.name, "nobj": len(objects), "ms": round(dt_ms, 3)}},
        )
        return replace(record, conf_objects=MappingProxyType(objects), conf_pixels=MappingProxyType(pixels))

    # -------- visualization --------

    def visualize_ref_objs(self, in_file: str, out_folder: str, io=None, params: Optional[VisualizeParams] = None) -> bool:
        return visualize.visualize_ref_objs(self, in_file, out_folder, io=io, params=params)

    def generate_top_views(self, out_folder: str, filename_pre: str, io=None, params: Optional[VisualizeParams] = None) -> bool:
        return visualize.generate_top_views(self, out_folder, filename_pre, io=io, params=params)


@timer_ms
def _project_regions(
    record: CameraRecord, regions: Sequence, altitude: float
) -> Tuple[Dict[str, ConfObject], Dict[str, Tuple[int, int]]]:
    cam = record.camera
    cam_center = cam.center
    h_line = horizon_line(cam)
    log.debug(
        "Projecting scene regions",
        extra={"extra": {"camera": record.name, "center": cam_center, "horizon": list(h_line)}},
    )
    objects: Dict[str, ConfObject] = {}
    pixels: Dict[str, Tuple[int, int]] = {}
    for region in regions:
        p = project(cam, cam_center, h_line, region, altitude)
        if not p.is_valid:
            log.debug("Region not observable", extra={"extra": {"camera": record.name, "region": region.name}})
            continue
        objects[region.name] = ConfObject(bearing=p.bearing, distance=p.distance, land=region.land_id)
        pixels[region.name] = (p.i, p.j)
    return objects, pixels
