"""Input handling for the camera rig.

The rig never listens to events itself. Each frame it queries an
:class:`InputSource`, normally an :class:`InputSnapshot` produced by
:meth:`InputHandler.poll`, which freezes held state, one-frame release edges,
mouse velocity and cursor position for the duration of a tick.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Protocol, Tuple

import pygame

from .logging_setup import get_logger

logger = get_logger(__name__)


class Action(str, Enum):
    """Logical actions the rig understands."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ZOOM_IN = "zoom_in"
    ZOOM_OUT = "zoom_out"
    WHEEL_UP = "wheel_up"
    WHEEL_DOWN = "wheel_down"
    PAN_LEFT = "pan_left"
    PAN_RIGHT = "pan_right"
    TILT_FORWARD = "tilt_forward"
    TILT_BACKWARD = "tilt_backward"
    MOUSE_BTN_LEFT = "mouse_btn_left"
    MOUSE_BTN_MIDDLE = "mouse_btn_middle"
    MOUSE_BTN_RIGHT = "mouse_btn_right"


MOVE_ACTIONS: FrozenSet[Action] = frozenset({Action.UP, Action.DOWN, Action.LEFT, Action.RIGHT})


class InputSource(Protocol):
    """Per-frame input queries consumed by :class:`~camrig.rig.CameraRig`."""

    def is_held(self, action: Action) -> bool: ...

    def just_released(self, action: Action) -> bool: ...

    @property
    def mouse_velocity(self) -> Tuple[float, float]: ...

    @property
    def cursor_position(self) -> Optional[Tuple[float, float]]: ...

    @property
    def viewport_size(self) -> Tuple[int, int]: ...


@dataclass(frozen=True)
class InputSnapshot:
    """Immutable view of the input state for a single frame.

    ``mouse_velocity`` is in pixels per second. ``cursor_position`` is
    ``None`` when the cursor is outside the window, which disables edge
    scrolling for that frame.
    """

    held: FrozenSet[Action] = frozenset()
    released: FrozenSet[Action] = frozenset()
    mouse_velocity: Tuple[float, float] = (0.0, 0.0)
    cursor_position: Optional[Tuple[float, float]] = None
    viewport_size: Tuple[int, int] = (0, 0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "held", frozenset(self.held))
        object.__setattr__(self, "released", frozenset(self.released))

    def is_held(self, action: Action) -> bool:
        return action in self.held

    def just_released(self, action: Action) -> bool:
        return action in self.released


def _default_key_bindings() -> Dict[Action, Tuple[int, ...]]:
    return {
        Action.UP: (pygame.K_w, pygame.K_UP),
        Action.DOWN: (pygame.K_s, pygame.K_DOWN),
        Action.LEFT: (pygame.K_a, pygame.K_LEFT),
        Action.RIGHT: (pygame.K_d, pygame.K_RIGHT),
        Action.ZOOM_IN: (pygame.K_EQUALS, pygame.K_KP_PLUS),
        Action.ZOOM_OUT: (pygame.K_MINUS, pygame.K_KP_MINUS),
        Action.PAN_LEFT: (pygame.K_q,),
        Action.PAN_RIGHT: (pygame.K_e,),
        Action.TILT_FORWARD: (pygame.K_r,),
        Action.TILT_BACKWARD: (pygame.K_f,),
    }


# Index into pygame.mouse.get_pressed(num_buttons=3).
_MOUSE_BUTTONS: Tuple[Tuple[Action, int], ...] = (
    (Action.MOUSE_BTN_LEFT, 0),
    (Action.MOUSE_BTN_MIDDLE, 1),
    (Action.MOUSE_BTN_RIGHT, 2),
)


@dataclass
class KeyBindings:
    """Maps keyboard-driven actions to pygame key codes."""

    keys: Dict[Action, Tuple[int, ...]] = field(default_factory=_default_key_bindings)

    def __post_init__(self) -> None:
        for action in (Action.WHEEL_UP, Action.WHEEL_DOWN, *(a for a, _ in _MOUSE_BUTTONS)):
            if action in self.keys:
                raise ValueError(f"{action.value} is driven by the mouse and cannot be bound to keys")

    @classmethod
    def from_mapping(cls, mapping: Mapping[Action, Iterable[int]]) -> "KeyBindings":
        keys = _default_key_bindings()
        keys.update({Action(action): tuple(codes) for action, codes in mapping.items()})
        return cls(keys=keys)


@dataclass
class InputCommand:
    """Everything the frame loop needs from one call to :meth:`InputHandler.poll`."""

    snapshot: InputSnapshot
    toggle_debug: bool = False
    quit_requested: bool = False


class InputHandler:
    """Translate pygame events and device state into :class:`InputSnapshot` objects.

    pygame reports held state only, so release edges are synthesised by
    comparing against the previous poll. Wheel notches have no held state
    and surface as a one-frame release of ``wheel_up``/``wheel_down``.
    """

    def __init__(
        self,
        *,
        bindings: KeyBindings | None = None,
        viewport_size: Tuple[int, int] | None = None,
    ) -> None:
        if viewport_size is not None and (viewport_size[0] <= 0 or viewport_size[1] <= 0):
            raise ValueError("viewport_size must be positive")

        self.bindings = bindings or KeyBindings()
        self.viewport_size = viewport_size
        self._previous_held: FrozenSet[Action] = frozenset()

    def reset(self) -> None:
        """Forget the previous frame so no release edges fire on the next poll."""

        self._previous_held = frozenset()

    def poll(self, delta: float) -> InputCommand:
        """Consume pending pygame events and snapshot the device state."""

        toggle_debug = False
        quit_requested = False
        wheel_up = False
        wheel_down = False
        motion_x = 0.0
        motion_y = 0.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                quit_requested = True
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    quit_requested = True
                elif event.key == pygame.K_F3:
                    toggle_debug = True
            elif event.type == pygame.MOUSEMOTION:
                dx, dy = event.rel
                motion_x += float(dx)
                motion_y += float(dy)
            elif event.type == pygame.MOUSEWHEEL:
                if event.y > 0:
                    wheel_up = True
                elif event.y < 0:
                    wheel_down = True

        if quit_requested:
            logger.debug("Quit requested")

        pressed = pygame.key.get_pressed()
        held = {
            action
            for action, codes in self.bindings.keys.items()
            if any(pressed[code] for code in codes)
        }
        buttons = pygame.mouse.get_pressed(num_buttons=3)
        held.update(action for action, index in _MOUSE_BUTTONS if buttons[index])
        held_frozen = frozenset(held)

        released = set(self._previous_held - held_frozen)
        if wheel_up:
            released.add(Action.WHEEL_UP)
        if wheel_down:
            released.add(Action.WHEEL_DOWN)
        self._previous_held = held_frozen

        if delta > 0:
            velocity = (motion_x / delta, motion_y / delta)
        else:
            velocity = (0.0, 0.0)

        cursor: Optional[Tuple[float, float]] = None
        if pygame.mouse.get_focused():
            cursor_x, cursor_y = pygame.mouse.get_pos()
            cursor = (float(cursor_x), float(cursor_y))

        snapshot = InputSnapshot(
            held=held_frozen,
            released=frozenset(released),
            mouse_velocity=velocity,
            cursor_position=cursor,
            viewport_size=self._resolve_viewport_size(),
        )
        return InputCommand(snapshot=snapshot, toggle_debug=toggle_debug, quit_requested=quit_requested)

    def _resolve_viewport_size(self) -> Tuple[int, int]:
        if self.viewport_size is not None:
            return self.viewport_size
        surface = pygame.display.get_surface()
        if surface is None:
            return (0, 0)
        return surface.get_size()


__all__ = [
    "Action",
    "InputCommand",
    "InputHandler",
    "InputSnapshot",
    "InputSource",
    "KeyBindings",
    "MOVE_ACTIONS",
]
