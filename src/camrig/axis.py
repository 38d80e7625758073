"""Resolution of one bidirectional control axis from keys or mouse motion."""

from __future__ import annotations

from typing import Tuple

# Scales mouse velocity (pixels per second) into axis units.
MOUSE_SENSITIVITY_SCALE = 0.0025


def resolve_axis(
    magnitude: float,
    negative_held: bool,
    positive_held: bool,
    *,
    invert: bool,
    mouse_active: bool,
    mouse_sensitivity: float,
    mouse_velocity: Tuple[float, float] = (0.0, 0.0),
) -> Tuple[float, float]:
    """Return the ``(x, y)`` contribution of an axis for the current frame.

    Mouse motion wins when it is active and neither key is held. Otherwise a
    single held key yields ``-magnitude`` or ``+magnitude`` on both
    components, and opposing keys cancel out. ``invert`` negates the result.
    Callers keep whichever component is meaningful for the axis.
    """

    if mouse_active and not (negative_held or positive_held):
        x = magnitude * mouse_velocity[0] * mouse_sensitivity
        y = magnitude * mouse_velocity[1] * mouse_sensitivity
    elif negative_held and not (mouse_active or positive_held):
        x = y = -magnitude
    elif positive_held and not (mouse_active or negative_held):
        x = y = magnitude
    else:
        x = y = 0.0

    if invert:
        return -x, -y
    return x, y


__all__ = ["MOUSE_SENSITIVITY_SCALE", "resolve_axis"]
