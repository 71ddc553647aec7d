from __future__ import annotations

from typing import Iterable, Sequence
import time
import numpy as np


def to_numpy_3x3(x) -> np.ndarray:
    """Ensure input is a 3x3 float64 numpy array (copy if necessary)."""
    a = np.asarray(x, dtype=float)
    if a.shape != (3, 3):
        raise ValueError("Expected 3x3")
    return a.copy()


def to_numpy_3(x) -> np.ndarray:
    """Ensure input is a length-3 float64 vector (copy)."""
    a = np.asarray(x, dtype=float).reshape(-1)
    if a.shape != (3,):
        raise ValueError("Expected 3-vector")
    return a.copy()


def as_points(points: Iterable[Sequence[float]]) -> np.ndarray:
    """Stack 2D points into an (N, 2) float array; empty input gives shape (0, 2)."""
    a = np.asarray([(float(p[0]), float(p[1])) for p in points], dtype=float)
    return a.reshape(-1, 2)


def timer_ms(func):
    """
    Decorator that returns (result, elapsed_ms) for benchmarking small functions.
    """
    def wrapper(*args, **kwargs):
        t0 = time.perf_counter()
        out = func(*args, **kwargs)
        dt_ms = (time.perf_counter() - t0) * 1e3
        return out, dt_ms
    return wrapper
