"""
Camera Framing
==============

The first frame fits every node in the viewport. Later frames keep the
camera the caller threads back in, so a data refresh never undoes the
user's pan and zoom.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple
import math


@dataclass(frozen=True)
class Camera:
    """Camera centre in graph coordinates and zoom ratio (higher = further out)."""
    x: float
    y: float
    ratio: float

    @property
    def is_valid(self) -> bool:
        return (
            math.isfinite(self.x)
            and math.isfinite(self.y)
            and math.isfinite(self.ratio)
            and self.ratio > 0
        )


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError("viewport dimensions must be positive")


@dataclass
class CameraConfig:
    """Camera framing parameters."""
    viewport_width: float = 1280.0
    viewport_height: float = 800.0
    zoom_padding: float = 1.2
    min_ratio: float = 1.2

    @property
    def viewport(self) -> Viewport:
        return Viewport(self.viewport_width, self.viewport_height)


def bounding_box(points: Iterable[Tuple[float, float]]) -> Optional[Tuple[float, float, float, float]]:
    """(min_x, min_y, max_x, max_y), or None for no points."""
    xs = []
    ys = []
    for x, y in points:
        xs.append(x)
        ys.append(y)
    if not xs:
        return None
    return min(xs), min(ys), max(xs), max(ys)


def frame_camera(
    points: Iterable[Tuple[float, float]],
    viewport: Viewport,
    config: Optional[CameraConfig] = None
) -> Optional[Camera]:
    """Centre on the bounding box and zoom out until it fits, padded."""
    config = config or CameraConfig()
    box = bounding_box(points)
    if box is None:
        return None
    min_x, min_y, max_x, max_y = box

    ratio = max((max_x - min_x) / viewport.width, (max_y - min_y) / viewport.height)
    return Camera(
        x=(min_x + max_x) / 2,
        y=(min_y + max_y) / 2,
        ratio=max(ratio * config.zoom_padding, config.min_ratio),
    )


def resolve_camera(
    points: Iterable[Tuple[float, float]],
    previous: Optional[Camera],
    viewport: Viewport,
    config: Optional[CameraConfig] = None
) -> Tuple[Optional[Camera], bool]:
    """
    Camera for the next frame, and whether the previous one was kept.

    An invalid previous camera is treated as absent.
    """
    if previous is not None and previous.is_valid:
        return previous, True
    return frame_camera(points, viewport, config), False
