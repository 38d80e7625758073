"""Wireframe ground-grid renderer used as a camera sink by the demos."""

from __future__ import annotations

from typing import List, Optional, Tuple

import cv2
import numpy as np

from .rig import Pose

Color = Tuple[int, int, int]

# Converts camera space (+Y up, looking down -Z) into OpenCV's (+Y down, +Z forward).
_GL_TO_CV = np.diag([1.0, -1.0, -1.0])


class GridRenderer:
    """Project a ground grid through the latest pose into an RGB frame.

    The grid lies on the ``y = 0`` plane around the world origin. A marker is
    drawn at the rig's pivot so pan and tilt are easy to follow.
    """

    def __init__(
        self,
        *,
        output_size: Tuple[int, int],
        fov_y_deg: float = 60.0,
        grid_extent: float = 200.0,
        grid_step: float = 10.0,
        near: float = 0.1,
        background: Color = (24, 28, 34),
        grid_color: Color = (90, 110, 130),
        axis_color: Color = (200, 120, 60),
        pivot_color: Color = (240, 220, 80),
    ) -> None:
        if output_size[0] <= 0 or output_size[1] <= 0:
            raise ValueError("output_size must be positive")
        if not 0 < fov_y_deg < 180:
            raise ValueError("fov_y_deg must lie in (0, 180)")
        if grid_extent <= 0 or grid_step <= 0:
            raise ValueError("grid_extent and grid_step must be positive")
        if near <= 0:
            raise ValueError("near must be positive")

        self.output_height, self.output_width = output_size
        self.fov_y_deg = float(fov_y_deg)
        self.grid_extent = float(grid_extent)
        self.grid_step = float(grid_step)
        self.near = float(near)
        self.background = background
        self.grid_color = grid_color
        self.axis_color = axis_color
        self.pivot_color = pivot_color

        focal = (self.output_height / 2.0) / np.tan(np.deg2rad(self.fov_y_deg) / 2.0)
        self._camera_matrix = np.array(
            [
                [focal, 0.0, self.output_width / 2.0],
                [0.0, focal, self.output_height / 2.0],
                [0.0, 0.0, 1.0],
            ]
        )
        self._grid_segments = self._build_grid()
        self._pose: Optional[Pose] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def pose(self) -> Optional[Pose]:
        return self._pose

    def apply_pose(self, pose: Pose) -> None:
        self._pose = pose

    def render(self) -> np.ndarray:
        """Render the scene seen from the last applied pose as ``(H, W, 3)`` uint8."""

        frame = np.empty((self.output_height, self.output_width, 3), dtype=np.uint8)
        frame[:] = self.background
        if self._pose is None:
            return frame

        world_to_camera = np.linalg.inv(self._pose.camera_to_world())
        for start, end, color in self._segments_for(self._pose):
            self._draw_segment(frame, world_to_camera, start, end, color)
        return frame

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _build_grid(self) -> List[Tuple[np.ndarray, np.ndarray, Color]]:
        extent = self.grid_extent
        count = int(np.floor(extent / self.grid_step))
        segments = []
        for index in range(-count, count + 1):
            offset = index * self.grid_step
            color = self.axis_color if index == 0 else self.grid_color
            segments.append((np.array([offset, 0.0, -extent]), np.array([offset, 0.0, extent]), color))
            segments.append((np.array([-extent, 0.0, offset]), np.array([extent, 0.0, offset]), color))
        return segments

    def _segments_for(self, pose: Pose) -> List[Tuple[np.ndarray, np.ndarray, Color]]:
        pivot = np.asarray(pose.position, dtype=float)
        size = self.grid_step / 2.0
        marker = [
            (pivot - (size, 0.0, 0.0), pivot + (size, 0.0, 0.0), self.pivot_color),
            (pivot - (0.0, 0.0, size), pivot + (0.0, 0.0, size), self.pivot_color),
            (pivot, pivot + (0.0, size, 0.0), self.pivot_color),
        ]
        return self._grid_segments + marker

    def _draw_segment(
        self,
        frame: np.ndarray,
        world_to_camera: np.ndarray,
        start: np.ndarray,
        end: np.ndarray,
        color: Color,
    ) -> None:
        a = (world_to_camera @ np.append(start, 1.0))[:3]
        b = (world_to_camera @ np.append(end, 1.0))[:3]
        clipped = self._clip_near(a, b)
        if clipped is None:
            return

        points = np.stack(clipped) @ _GL_TO_CV
        projected, _ = cv2.projectPoints(points, np.zeros(3), np.zeros(3), self._camera_matrix, None)
        (x0, y0), (x1, y1) = np.clip(projected.reshape(2, 2), -1e7, 1e7).round().astype(int)

        inside, p0, p1 = cv2.clipLine(
            (0, 0, self.output_width, self.output_height), (int(x0), int(y0)), (int(x1), int(y1))
        )
        if inside:
            cv2.line(frame, p0, p1, color, 1, cv2.LINE_AA)

    def _clip_near(self, a: np.ndarray, b: np.ndarray) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        limit = -self.near
        a_visible = a[2] <= limit
        b_visible = b[2] <= limit
        if not (a_visible or b_visible):
            return None
        if a_visible and b_visible:
            return a, b
        t = (limit - a[2]) / (b[2] - a[2])
        crossing = a + (b - a) * t
        return (a, crossing) if a_visible else (crossing, b)


__all__ = ["GridRenderer"]
