"""
Unit tests for reference parsing, camera set construction and the
configurational object builder
"""

import math

import pytest

from common.config import QueryParams
from common.types import ConfObject, DepthScene, SceneRegion
from conf_query import ConfQuery, ConfQueryError, ErrorKind, GridCameraSpace
from conf_query.reference import parse_ref_objects


class TestReferenceObjects:
    """Test cases for parse_ref_objects"""

    def test_collects_ground_then_scene_in_order(self):
        scene = DepthScene(
            ni=10,
            nj=10,
            ground_plane=[
                SceneRegion.from_points("g1", [(0, 5), (9, 5), (9, 9)], is_ref=True),
                SceneRegion.from_points("g2", [(0, 5), (9, 5), (9, 9)]),
            ],
            scene_regions=[
                SceneRegion.from_points("s1", [(1, 1), (2, 2), (1, 2)], is_ref=True),
                SceneRegion.from_points("s2", [(1, 1), (2, 2), (1, 2)], is_ref=True),
            ],
        )
        assert parse_ref_objects(scene) == ["g1", "s1", "s2"]

    def test_no_reference_fails(self):
        scene = DepthScene(ni=10, nj=10, scene_regions=[SceneRegion.from_points("s", [(1, 1), (2, 2), (1, 2)])])
        assert parse_ref_objects(scene) is None
        assert parse_ref_objects(None) is None

    def test_sky_is_never_reference(self):
        scene = DepthScene(
            ni=10,
            nj=10,
            scene_regions=[SceneRegion.from_points("s", [(1, 1), (2, 2), (1, 2)], is_ref=True)],
            sky=[SceneRegion.from_points("sky", [(0, 0), (9, 0), (9, 2)], is_ref=True)],
        )
        assert parse_ref_objects(scene) == ["s"]


class TestQueryConstruction:
    """Factory and build steps"""

    def test_from_scene_builds_everything(self, simple_scene, fake_camera, fake_camera_space, make_ray):
        cam = fake_camera(rays={
            (100.0, 150.0): make_ray(4.0, 0.5, 10.0),
            (140.0, 150.0): make_ray(5.0, 0.5, 10.0),
            (140.0, 180.0): make_ray(3.0, 0.6, 10.0),
            (100.0, 180.0): make_ray(6.0, 0.4, 10.0),
        })
        q = ConfQuery.from_scene(fake_camera_space([cam]), simple_scene)
        assert q.ref_obj_names == ("house",)
        assert q.ncam == 1
        assert q.camera_strings == ["cam0"]
        house = q.conf_objects[0]["house"]
        assert house.bearing == pytest.approx(0.6)
        assert house.distance == pytest.approx(3.0)
        assert house.land == 1
        assert q.conf_pixels[0]["house"] == (140, 180)

    def test_no_reference_raises(self, fake_camera, fake_camera_space):
        scene = DepthScene(ni=10, nj=10, scene_regions=[SceneRegion.from_points("s", [(1, 1), (2, 2), (1, 2)])])
        with pytest.raises(ConfQueryError) as ei:
            ConfQuery.from_scene(fake_camera_space([fake_camera()]), scene)
        assert ei.value.kind is ErrorKind.NO_REFERENCE

    def test_missing_camera_space_raises(self, simple_scene):
        with pytest.raises(ConfQueryError) as ei:
            ConfQuery.from_scene(None, simple_scene)
        assert ei.value.kind is ErrorKind.CAMERA_BUILD

    def test_step_methods_return_bools(self, simple_scene, fake_camera_space):
        q = ConfQuery(fake_camera_space([]), simple_scene)
        assert q.parse_ref_objects() is True
        assert q.create_cameras() is True
        assert q.create_conf_objects() is True
        assert q.ncam == 0
        assert ConfQuery(None, simple_scene).create_cameras() is False

    def test_cameras_follow_valid_index_order(self, simple_scene, fake_camera, fake_camera_space):
        cams = [fake_camera() for _ in range(4)]
        space = fake_camera_space(cams, valid=[3, 0, 2])
        q = ConfQuery.from_scene(space, simple_scene)
        assert q.camera_strings == ["cam3", "cam0", "cam2"]
        assert [r.camera for r in q.records] == [cams[3], cams[0], cams[2]]
        assert [r.angles.heading for r in q.records] == [3.0, 0.0, 2.0]

    def test_ground_regions_never_become_objects(self, simple_scene, fake_camera, fake_camera_space):
        """Fake rays point straight down, so every region below y=100 projects"""
        q = ConfQuery.from_scene(fake_camera_space([fake_camera()]), simple_scene)
        keys = set(q.conf_objects[0])
        assert "ground" not in keys
        assert keys <= {r.name for r in simple_scene.scene_regions}
        assert keys == {"house", "tree"}  # cloud_like sits above the horizon

    def test_records_are_read_only(self, simple_scene, fake_camera, fake_camera_space):
        q = ConfQuery.from_scene(fake_camera_space([fake_camera()]), simple_scene)
        with pytest.raises(TypeError):
            q.conf_objects[0]["new"] = ConfObject(0.0, 1.0, 0)


class TestBuilderDeterminism:
    """Repeated and parallel builds"""

    @pytest.fixture
    def grid_query_inputs(self, simple_scene):
        space = GridCameraSpace(
            ni=640, nj=480, altitude=10.0, headings=[0.0, 90.0, 180.0], tilts=[80.0, 85.0], top_fovs=[60.0]
        )
        return space, simple_scene

    def test_rebuild_is_idempotent(self, grid_query_inputs):
        space, scene = grid_query_inputs
        q = ConfQuery.from_scene(space, scene)
        first = [dict(m) for m in q.conf_objects]
        first_px = [dict(m) for m in q.conf_pixels]
        assert q.parse_ref_objects() and q.create_cameras() and q.create_conf_objects()
        assert [dict(m) for m in q.conf_objects] == first
        assert [dict(m) for m in q.conf_pixels] == first_px
        assert q.ncam == len(space.valid_indices())

    def test_parallel_matches_sequential(self, grid_query_inputs):
        space, scene = grid_query_inputs
        seq = ConfQuery.from_scene(space, scene)
        par = ConfQuery.from_scene(space, scene, QueryParams(workers=3))
        assert par.camera_strings == seq.camera_strings
        assert [dict(m) for m in par.conf_objects] == [dict(m) for m in seq.conf_objects]

    def test_objects_are_on_the_ground_side(self, grid_query_inputs):
        """Real cameras: every object has a finite non-negative distance"""
        space, scene = grid_query_inputs
        q = ConfQuery.from_scene(space, scene)
        for objects in q.conf_objects:
            for obj in objects.values():
                assert obj.distance >= 0.0
                assert math.isfinite(obj.distance)
                assert -math.pi <= obj.bearing <= math.pi
