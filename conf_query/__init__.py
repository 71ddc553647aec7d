"""
Configurational object query

Turns a labeled query scene (image regions with land-cover classes) and a set
of hypothesis cameras into per-camera configurational objects: for every
observable region, the (bearing, ground distance, land class) of its nearest
ground-side boundary point.

Also renders debug images: the scene overlay per camera and a top-down view
of each camera's objects.

Usage:
    from conf_query import ConfQuery, GridCameraSpace
    q = ConfQuery.from_scene(camera_space, scene)
    q.generate_top_views("out", "top")
"""
from .camera import GridCameraSpace, PerspectiveCamera
from .query import CameraRecord, ConfQuery, ConfQueryError, ErrorKind

__all__ = [
    "CameraRecord",
    "ConfQuery",
    "ConfQueryError",
    "ErrorKind",
    "GridCameraSpace",
    "PerspectiveCamera",
]
