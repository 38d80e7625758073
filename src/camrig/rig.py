"""Strategy-style camera rig driven by per-frame input snapshots.

The rig is a pivot (position + yaw) carrying a camera arm. The arm's length
is the zoom distance and its pitch follows the tilt angle, biased further
downward as the camera zooms out. Coordinates are right-handed with +Y up;
at zero yaw the camera looks along -Z.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Protocol, Tuple

import numpy as np

from .axis import MOUSE_SENSITIVITY_SCALE, resolve_axis
from .config import RigConfig
from .input_handler import MOVE_ACTIONS, Action, InputSource
from .logging_setup import get_logger

logger = get_logger(__name__)

Vec3 = Tuple[float, float, float]


class InteractionMode(Enum):
    """Which mouse gesture, if any, currently owns mouse motion."""

    IDLE = "idle"
    MOVE_AND_DRAG = "move_and_drag"
    PAN_AND_TILT = "pan_and_tilt"


def next_mode(current: InteractionMode, source: InputSource) -> InteractionMode:
    """Return the interaction mode for this frame.

    Holding both the middle and the right button matches no rule, so the
    previous mode is kept.
    """

    right = source.is_held(Action.MOUSE_BTN_RIGHT)
    middle = source.is_held(Action.MOUSE_BTN_MIDDLE)

    if right and not middle:
        return InteractionMode.MOVE_AND_DRAG
    if middle and not right:
        return InteractionMode.PAN_AND_TILT
    if source.just_released(Action.MOUSE_BTN_RIGHT) or source.just_released(Action.MOUSE_BTN_MIDDLE):
        return InteractionMode.IDLE
    return current


@dataclass(frozen=True)
class Pose:
    """Pivot transform plus the camera arm attached to it.

    ``yaw`` and ``pitch`` are in radians. ``arm_position`` is the camera's
    offset in the pivot's local frame.
    """

    position: Vec3
    yaw: float
    arm_position: Vec3
    pitch: float

    @property
    def yaw_deg(self) -> float:
        return float(np.rad2deg(self.yaw))

    @property
    def pitch_deg(self) -> float:
        return float(np.rad2deg(self.pitch))

    def pivot_to_world(self) -> np.ndarray:
        return _translation(self.position) @ _rotation_y(self.yaw)

    def camera_to_world(self) -> np.ndarray:
        """Return the 4x4 transform of the camera lens in world space."""

        return self.pivot_to_world() @ _translation(self.arm_position) @ _rotation_x(self.pitch)

    def camera_world_position(self) -> np.ndarray:
        return self.camera_to_world()[:3, 3].copy()


@dataclass
class MotionState:
    """Mutable per-frame state owned by :class:`CameraRig`."""

    mode: InteractionMode
    zoom_distance: float
    tilt_angle: float
    previous_zoom_distance: float
    zoom_speed: float = 0.0
    move_speed: float = 0.0
    pan_speed: float = 0.0
    tilt_speed: float = 0.0


@dataclass(frozen=True)
class RigDiagnostics:
    """Read-only telemetry for a debug overlay."""

    fps: float
    move_speed: float
    zoom_distance: float
    previous_zoom_distance: float
    yaw_deg: float
    tilt_angle: float
    pitch_deg: float
    mouse_left: bool
    mouse_middle: bool
    mouse_right: bool


class CameraSink(Protocol):
    """Receives the rig's pose after every tick."""

    def apply_pose(self, pose: Pose) -> None: ...


class CameraRig:
    """Turns keyboard, mouse and wheel input into camera motion.

    Call :meth:`tick` once per rendered frame with the elapsed time and the
    frame's input. The resulting :class:`Pose` is returned and, if a sink is
    attached, written to it.
    """

    def __init__(self, config: RigConfig | None = None, *, sink: CameraSink | None = None) -> None:
        self.sink = sink
        self.initialize(config or RigConfig())

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def config(self) -> RigConfig:
        return self._config

    @property
    def pose(self) -> Pose:
        return self._pose

    @property
    def motion(self) -> MotionState:
        return replace(self._motion)

    @property
    def mode(self) -> InteractionMode:
        return self._motion.mode

    @property
    def diagnostics(self) -> Optional[RigDiagnostics]:
        """Telemetry from the last tick, or ``None`` when debug info is off."""

        if not self._config.show_debug_info:
            return None
        return self._diagnostics

    def initialize(self, config: RigConfig | None = None) -> Pose:
        """(Re)build the pose from ``config``; the current config is reused if omitted."""

        if config is not None:
            self._config = config
        cfg = self._config

        distance = float(cfg.zoom_init_distance)
        tilt = float(cfg.tilt_init_angle)
        pitch = -float(np.deg2rad(tilt))

        self._motion = MotionState(
            mode=InteractionMode.IDLE,
            zoom_distance=distance,
            tilt_angle=tilt,
            previous_zoom_distance=distance,
        )
        self._pose = Pose(
            position=(0.0, 0.0, 0.0),
            yaw=0.0,
            arm_position=self._arm_position(distance, pitch),
            pitch=pitch,
        )
        self._diagnostics: Optional[RigDiagnostics] = None

        logger.info("Camera rig initialised: distance=%.2f tilt=%.2f°", distance, tilt)
        return self._pose

    def tick(self, delta: float, source: InputSource) -> Pose:
        """Advance the rig by ``delta`` seconds using ``source`` for input."""

        if delta < 0:
            raise ValueError("delta must be non-negative")

        cfg = self._config
        motion = self._motion
        sensitivity = MOUSE_SENSITIVITY_SCALE * cfg.mouse_sensitivity
        velocity = source.mouse_velocity

        mode = next_mode(motion.mode, source)
        if mode is not motion.mode:
            logger.debug("Interaction mode %s -> %s", motion.mode.value, mode.value)
            motion.mode = mode

        self._update_zoom(delta, source)
        distance = motion.zoom_distance

        # Negative so a mouse drag pulls the scene along with the cursor; the
        # move keys are therefore passed to the resolver in reverse order.
        move_speed = (
            -cfg.move_speed
            * 10.0
            * ((distance * cfg.zoom_max_out) / (cfg.zoom_max_in * cfg.zoom_max_out))
            * delta
        )
        motion.move_speed = move_speed
        dragging = mode is InteractionMode.MOVE_AND_DRAG
        strafe, _ = resolve_axis(
            move_speed,
            source.is_held(Action.RIGHT),
            source.is_held(Action.LEFT),
            invert=cfg.move_invert_direction,
            mouse_active=dragging,
            mouse_sensitivity=sensitivity,
            mouse_velocity=velocity,
        )
        _, forward = resolve_axis(
            move_speed,
            source.is_held(Action.DOWN),
            source.is_held(Action.UP),
            invert=cfg.move_invert_direction,
            mouse_active=dragging,
            mouse_sensitivity=sensitivity,
            mouse_velocity=velocity,
        )
        edge_strafe, edge_forward = self._edge_scroll(move_speed, source)
        strafe += edge_strafe
        forward += edge_forward

        orbiting = mode is InteractionMode.PAN_AND_TILT
        motion.pan_speed = cfg.pan_speed * 1.5 * delta
        pan, _ = resolve_axis(
            motion.pan_speed,
            source.is_held(Action.PAN_RIGHT),
            source.is_held(Action.PAN_LEFT),
            invert=cfg.pan_invert_direction,
            mouse_active=orbiting,
            mouse_sensitivity=sensitivity,
            mouse_velocity=velocity,
        )

        motion.tilt_speed = cfg.tilt_speed * 100.0 * delta
        _, tilt_delta = resolve_axis(
            motion.tilt_speed,
            source.is_held(Action.TILT_BACKWARD),
            source.is_held(Action.TILT_FORWARD),
            invert=cfg.tilt_invert_direction,
            mouse_active=orbiting,
            mouse_sensitivity=sensitivity,
            mouse_velocity=velocity,
        )
        motion.tilt_angle = self._clamp(motion.tilt_angle + tilt_delta, cfg.tilt_min_angle, cfg.tilt_max_angle)

        # Translation uses the yaw from before this frame's pan.
        yaw = self._pose.yaw
        x, y, z = self._pose.position
        x += strafe * np.cos(yaw) + forward * np.sin(yaw)
        z += -strafe * np.sin(yaw) + forward * np.cos(yaw)

        pitch = self._pitch_for(motion.tilt_angle, distance)
        self._pose = Pose(
            position=(float(x), float(y), float(z)),
            yaw=self._wrap_angle(yaw + pan),
            arm_position=self._arm_position(distance, pitch),
            pitch=pitch,
        )

        if cfg.show_debug_info:
            self._diagnostics = self._collect_diagnostics(delta, source)
        if self.sink is not None:
            self.sink.apply_pose(self._pose)
        return self._pose

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _update_zoom(self, delta: float, source: InputSource) -> None:
        cfg = self._config
        motion = self._motion
        distance = motion.zoom_distance
        motion.previous_zoom_distance = distance

        speed = cfg.zoom_speed * 10.0 * (distance / cfg.zoom_max_in) * delta
        if cfg.zoom_invert_direction:
            speed = -speed
        motion.zoom_speed = speed

        zoom_in = source.is_held(Action.ZOOM_IN)
        zoom_out = source.is_held(Action.ZOOM_OUT)
        wheel_up = source.just_released(Action.WHEEL_UP)
        wheel_down = source.just_released(Action.WHEEL_DOWN)

        if wheel_up and not zoom_out:
            distance -= speed * cfg.zoom_scroll_factor
        if zoom_in and not (zoom_out or wheel_down):
            distance -= speed
        if wheel_down and not zoom_in:
            distance += speed * cfg.zoom_scroll_factor
        if zoom_out and not (zoom_in or wheel_up):
            distance += speed

        motion.zoom_distance = self._clamp(distance, cfg.zoom_max_in, cfg.zoom_max_out)

    def _edge_scroll(self, move_speed: float, source: InputSource) -> Tuple[float, float]:
        cfg = self._config
        if not cfg.move_enable_side_moving or self._motion.mode is not InteractionMode.IDLE:
            return 0.0, 0.0
        if any(source.is_held(action) for action in MOVE_ACTIONS):
            return 0.0, 0.0

        cursor = source.cursor_position
        width, height = source.viewport_size
        if cursor is None or width <= 0 or height <= 0:
            return 0.0, 0.0

        threshold = cfg.move_side_moving_threshold
        cursor_x, cursor_y = cursor
        strafe = forward = 0.0
        if cursor_x < threshold:
            strafe += move_speed
        if cursor_x > width - threshold:
            strafe -= move_speed
        if cursor_y < threshold:
            forward += move_speed
        if cursor_y > height - threshold:
            forward -= move_speed
        return strafe, forward

    def _pitch_for(self, tilt_angle: float, distance: float) -> float:
        cfg = self._config
        zoom_bias = ((cfg.tilt_max_angle - cfg.tilt_min_angle) / 2.0) * (distance / cfg.zoom_max_out)
        pitch = -float(np.deg2rad(tilt_angle + zoom_bias))
        return self._clamp(
            pitch,
            -float(np.deg2rad(cfg.tilt_max_angle)),
            -float(np.deg2rad(cfg.tilt_min_angle)),
        )

    def _collect_diagnostics(self, delta: float, source: InputSource) -> RigDiagnostics:
        motion = self._motion
        return RigDiagnostics(
            fps=1.0 / delta if delta > 0 else 0.0,
            move_speed=abs(motion.move_speed),
            zoom_distance=abs(motion.zoom_distance),
            previous_zoom_distance=motion.previous_zoom_distance,
            yaw_deg=self._pose.yaw_deg,
            tilt_angle=motion.tilt_angle,
            pitch_deg=abs(self._pose.pitch_deg),
            mouse_left=source.is_held(Action.MOUSE_BTN_LEFT),
            mouse_middle=source.is_held(Action.MOUSE_BTN_MIDDLE),
            mouse_right=source.is_held(Action.MOUSE_BTN_RIGHT),
        )

    @staticmethod
    def _arm_position(distance: float, pitch: float) -> Vec3:
        return (0.0, float(-distance * np.sin(pitch)), float(distance * np.cos(pitch)))

    @staticmethod
    def _clamp(value: float, min_value: float, max_value: float) -> float:
        return float(np.clip(value, min_value, max_value))

    @staticmethod
    def _wrap_angle(angle_rad: float) -> float:
        return (float(angle_rad) + np.pi) % (2.0 * np.pi) - np.pi


def _translation(offset: Vec3) -> np.ndarray:
    matrix = np.eye(4)
    matrix[:3, 3] = offset
    return matrix


def _rotation_x(angle: float) -> np.ndarray:
    c, s = np.cos(angle), np.sin(angle)
    matrix = np.eye(4)
    matrix[1:3, 1:3] = [[c, -s], [s, c]]
    return matrix


def _rotation_y(angle: float) -> np.ndarray:
    c, s = np.cos(angle), np.sin(angle)
    matrix = np.eye(4)
    matrix[0, 0], matrix[0, 2] = c, s
    matrix[2, 0], matrix[2, 2] = -s, c
    return matrix


__all__ = [
    "CameraRig",
    "CameraSink",
    "InteractionMode",
    "MotionState",
    "Pose",
    "RigDiagnostics",
    "next_mode",
]
