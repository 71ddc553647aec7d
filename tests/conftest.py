import math
import os
import sys

import numpy as np
import pytest

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from common.types import CameraAngles, DepthScene, SceneRegion
from conf_query.horizon import HorizonLine


def ray_for(distance, bearing, altitude):
    """Unit direction whose ground distance at `altitude` is `distance` along `bearing`."""
    a = math.atan2(distance, altitude)  # angle from nadir
    return np.array([math.sin(a) * math.cos(bearing), math.sin(a) * math.sin(bearing), -math.cos(a)])


class FakeCamera:
    """
    Camera stub with a fixed horizon and a lookup table of rays per pixel.
    Pixels missing from the table back-project straight down.
    """

    def __init__(self, rays=None, horizon=HorizonLine(0.0, 1.0, -100.0), center=(0.0, 0.0, 10.0)):
        self.rays = dict(rays or {})
        self._horizon = horizon
        self.center = np.array(center, dtype=float)
        self.calls = []

    def backproject(self, u, v):
        self.calls.append((u, v))
        d = self.rays.get((u, v), np.array([0.0, 0.0, -1.0]))
        return self.center, d

    def horizon(self):
        return self._horizon


class FakeCameraSpace:
    def __init__(self, cameras, altitude=10.0, valid=None):
        self.cameras = list(cameras)
        self.altitude = altitude
        self._valid = list(range(len(self.cameras))) if valid is None else list(valid)

    def valid_indices(self):
        return self._valid

    def camera(self, index):
        return self.cameras[index]

    def camera_angles(self, index):
        return CameraAngles(heading=float(index), tilt=90.0)

    def camera_string(self, index):
        return f"cam{index}"


@pytest.fixture
def make_ray():
    return ray_for


@pytest.fixture
def fake_camera():
    return FakeCamera


@pytest.fixture
def fake_camera_space():
    return FakeCameraSpace


@pytest.fixture
def simple_scene():
    """640x480 scene: one ground region, one reference and one target below y=100, one region above it."""
    return DepthScene(
        ni=640,
        nj=480,
        ground_plane=[SceneRegion.from_points("ground", [(0, 200), (639, 200), (639, 479), (0, 479)], land_id=2)],
        scene_regions=[
            SceneRegion.from_points("house", [(100, 150), (140, 150), (140, 180), (100, 180)], land_id=1, is_ref=True),
            SceneRegion.from_points("tree", [(300, 120), (320, 120), (320, 160)], land_id=4),
            SceneRegion.from_points("cloud_like", [(10, 10), (50, 10), (50, 40)], land_id=4),
        ],
    )
