"""Configuration for the camera rig.

The configuration is explicit and never reads environment variables. Callers
construct a :class:`RigConfig` with concrete values (or build one from a flat
mapping of option names) and hand it to the rig once.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

_NUMERIC_OPTIONS = (
    "mouse_sensitivity",
    "zoom_speed",
    "zoom_scroll_factor",
    "zoom_init_distance",
    "zoom_max_in",
    "zoom_max_out",
    "move_speed",
    "move_side_moving_threshold",
    "pan_speed",
    "tilt_speed",
    "tilt_init_angle",
    "tilt_min_angle",
    "tilt_max_angle",
)


class InvalidConfiguration(ValueError):
    """Raised when a :class:`RigConfig` violates one of its invariants."""


@dataclass(frozen=True)
class RigConfig:
    """Immutable tuning values for :class:`~camrig.rig.CameraRig`.

    Angles are expressed in degrees, distances in scene units and the side
    moving threshold in pixels.
    """

    mouse_sensitivity: float = 1.0

    zoom_speed: float = 1.0
    zoom_invert_direction: bool = False
    zoom_scroll_factor: float = 4.0
    zoom_init_distance: float = 20.0
    zoom_max_in: float = 5.0
    zoom_max_out: float = 100.0

    move_speed: float = 1.0
    move_invert_direction: bool = False
    move_enable_side_moving: bool = True
    move_side_moving_threshold: int = 20

    pan_speed: float = 1.0
    pan_invert_direction: bool = False

    tilt_speed: float = 1.0
    tilt_invert_direction: bool = False
    tilt_init_angle: float = 35.0
    tilt_min_angle: float = 10.0
    tilt_max_angle: float = 80.0

    show_debug_info: bool = False

    def __post_init__(self) -> None:
        for name in _NUMERIC_OPTIONS:
            if not math.isfinite(getattr(self, name)):
                raise InvalidConfiguration(f"{name} must be a finite number")
        for name in ("zoom_speed", "move_speed", "pan_speed", "tilt_speed"):
            if not getattr(self, name) > 0:
                raise InvalidConfiguration(f"{name} must be positive")
        if not self.mouse_sensitivity >= 0:
            raise InvalidConfiguration("mouse_sensitivity must be non-negative")
        if not self.zoom_scroll_factor > 0:
            raise InvalidConfiguration("zoom_scroll_factor must be positive")
        if not self.zoom_max_in > 0:
            raise InvalidConfiguration("zoom_max_in must be positive")
        if self.zoom_max_in > self.zoom_max_out:
            raise InvalidConfiguration("zoom_max_in must not exceed zoom_max_out")
        if not self.zoom_max_in <= self.zoom_init_distance <= self.zoom_max_out:
            raise InvalidConfiguration(
                "zoom_init_distance must lie within [zoom_max_in, zoom_max_out]"
            )
        if self.tilt_min_angle > self.tilt_max_angle:
            raise InvalidConfiguration("tilt_min_angle must not exceed tilt_max_angle")
        if not self.tilt_min_angle <= self.tilt_init_angle <= self.tilt_max_angle:
            raise InvalidConfiguration(
                "tilt_init_angle must lie within [tilt_min_angle, tilt_max_angle]"
            )
        if self.move_side_moving_threshold < 0:
            raise InvalidConfiguration("move_side_moving_threshold must be non-negative")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "RigConfig":
        """Build a config from a flat mapping of option names to values."""

        known = {field.name for field in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise InvalidConfiguration(f"Unknown configuration option(s): {', '.join(unknown)}")
        return cls(**dict(options))

    def with_overrides(self, **changes: Any) -> "RigConfig":
        """Return a validated copy with ``changes`` applied."""

        try:
            return replace(self, **changes)
        except TypeError as exc:
            raise InvalidConfiguration(str(exc)) from exc


__all__ = ["InvalidConfiguration", "RigConfig"]
