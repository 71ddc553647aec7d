from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml


DEFAULT_PARAMS_PATH = Path(__file__).resolve().parent.parent / "config" / "params.yaml"


def load_yaml(path: Optional[str] = None) -> Dict:
    """Load a YAML parameter file; missing path falls back to config/params.yaml."""
    p = Path(path) if path else DEFAULT_PARAMS_PATH
    with open(p, "r") as f:
        data = yaml.safe_load(f)
    return data or {}


def _pick(cls, d: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    d = d or {}
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in d.items() if k in names}


@dataclass(frozen=True)
class QueryParams:
    """
    Query construction knobs.

    workers: >1 builds per-camera configuration maps on a thread pool.
    """
    workers: int = 1

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "QueryParams":
        kw = _pick(cls, d)
        if "workers" in kw:
            kw["workers"] = max(1, int(kw["workers"]))
        return cls(**kw)


@dataclass(frozen=True)
class VisualizeParams:
    """Line widths, dot radii and colours used by the debug renderings (pixels / RGB)."""
    horizon_width: float = 6.0
    horizon_color: Tuple[int, int, int] = (0, 0, 0)
    boundary_width: float = 5.0
    ref_boundary_width: float = 7.0
    dot_radius: float = 20.0
    ref_dot_radius: float = 30.0
    ref_color: Tuple[int, int, int] = (255, 255, 255)
    top_view_background: int = 127
    top_view_camera_radius: float = 5.0
    top_view_dot_radius: float = 10.0
    top_view_ref_dot_radius: float = 25.0

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "VisualizeParams":
        kw = _pick(cls, d)
        for k in ("horizon_color", "ref_color"):
            if k in kw:
                kw[k] = tuple(int(c) for c in kw[k])
        return cls(**kw)
