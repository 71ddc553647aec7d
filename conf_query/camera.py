from __future__ import annotations

import itertools
import math
from dataclasses import dataclass, field
from typing import List, Protocol, Sequence, Tuple

import numpy as np

from common.geo import rotation_from_angles
from common.types import CameraAngles
from common.utils import to_numpy_3, to_numpy_3x3
from conf_query.horizon import HorizonLine


class Camera(Protocol):
    """What the query needs from a calibrated camera."""

    @property
    def center(self) -> np.ndarray: ...

    def backproject(self, u: float, v: float) -> Tuple[np.ndarray, np.ndarray]: ...

    def horizon(self) -> HorizonLine: ...


class CameraSpace(Protocol):
    """Set of hypothesis cameras; only `valid_indices()` are turned into query cameras."""

    altitude: float

    def valid_indices(self) -> Sequence[int]: ...

    def camera(self, index: int) -> Camera: ...

    def camera_angles(self, index: int) -> CameraAngles: ...

    def camera_string(self, index: int) -> str: ...


@dataclass
class PerspectiveCamera:
    """
    Pinhole camera P = K [R | t] with t = -R C.

    Args:
        K: 3x3 intrinsics
        R: 3x3 world→camera rotation (camera x right, y down, z forward)
        C: camera center in world coordinates
    """
    K: np.ndarray
    R: np.ndarray
    C: np.ndarray
    _K_inv: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.K = to_numpy_3x3(self.K)
        self.R = to_numpy_3x3(self.R)
        self.C = to_numpy_3(self.C)
        if abs(np.linalg.det(self.K)) < 1e-12:
            raise ValueError("K must be invertible")
        self._K_inv = np.linalg.inv(self.K)

    @classmethod
    def from_angles(cls, ni: int, nj: int, altitude: float, angles: CameraAngles) -> "PerspectiveCamera":
        """
        Camera at (0, 0, altitude) with principal point at the image centre and
        square pixels; focal length follows from the vertical field of view.
        """
        if altitude <= 0:
            raise ValueError("altitude must be > 0")
        if not 0.0 < angles.top_fov < 180.0:
            raise ValueError("top_fov must be in (0, 180) degrees")
        f = (nj / 2.0) / math.tan(math.radians(angles.top_fov) / 2.0)
        K = np.array([[f, 0.0, ni / 2.0], [0.0, f, nj / 2.0], [0.0, 0.0, 1.0]])
        R = rotation_from_angles(angles.heading, angles.tilt, angles.roll)
        return cls(K=K, R=R, C=np.array([0.0, 0.0, float(altitude)]))

    @property
    def center(self) -> np.ndarray:
        return self.C.copy()

    def project(self, X: Sequence[float]) -> Tuple[float, float]:
        """World point → pixel (u, v). Points behind the camera still project (no culling)."""
        x = self.K @ (self.R @ (to_numpy_3(X) - self.C))
        return float(x[0] / x[2]), float(x[1] / x[2])

    def backproject(self, u: float, v: float) -> Tuple[np.ndarray, np.ndarray]:
        """Pixel → ray (origin, unit direction) in world coordinates."""
        d = self.R.T @ (self._K_inv @ np.array([u, v, 1.0]))
        return self.center, d / np.linalg.norm(d)

    def horizon(self) -> HorizonLine:
        """Image of the ground plane's line at infinity: l = K^-T R n with n = +z."""
        a, b, c = self._K_inv.T @ (self.R @ np.array([0.0, 0.0, 1.0]))
        return HorizonLine(float(a), float(b), float(c))


class GridCameraSpace:
    """
    Cartesian product of heading/tilt/roll/top-fov hypotheses at one altitude.

    A camera is valid when the ray through the bottom-centre pixel points
    downward, i.e. the camera sees some ground.
    """

    def __init__(
        self,
        ni: int,
        nj: int,
        altitude: float,
        headings: Sequence[float],
        tilts: Sequence[float],
        rolls: Sequence[float] = (0.0,),
        top_fovs: Sequence[float] = (45.0,),
    ):
        if altitude <= 0:
            raise ValueError("altitude must be > 0")
        self.ni = int(ni)
        self.nj = int(nj)
        self.altitude = float(altitude)
        self._angles: List[CameraAngles] = [
            CameraAngles(heading=float(h), tilt=float(t), roll=float(r), top_fov=float(f))
            for f, t, r, h in itertools.product(top_fovs, tilts, rolls, headings)
        ]
        self._cameras: List[PerspectiveCamera] = [
            PerspectiveCamera.from_angles(self.ni, self.nj, self.altitude, a) for a in self._angles
        ]
        self._valid = [i for i, cam in enumerate(self._cameras) if self._sees_ground(cam)]

    @classmethod
    def from_dict(cls, d: dict) -> "GridCameraSpace":
        return cls(
            ni=int(d["ni"]),
            nj=int(d["nj"]),
            altitude=float(d["altitude"]),
            headings=d.get("headings", [0.0]),
            tilts=d.get("tilts", [90.0]),
            rolls=d.get("rolls", [0.0]),
            top_fovs=d.get("top_fovs", [45.0]),
        )

    def _sees_ground(self, cam: PerspectiveCamera) -> bool:
        _, d = cam.backproject(self.ni / 2.0, float(self.nj - 1))
        return bool(d[2] < 0.0)

    def __len__(self) -> int:
        return len(self._cameras)

    def valid_indices(self) -> List[int]:
        return list(self._valid)

    def camera(self, index: int) -> PerspectiveCamera:
        return self._cameras[index]

    def camera_angles(self, index: int) -> CameraAngles:
        return self._angles[index]

    def camera_string(self, index: int) -> str:
        return self._angles[index].get_string()
