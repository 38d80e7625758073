from __future__ import annotations

import pathlib
import sys
import types

import pygame
import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from camrig.input_handler import Action, InputHandler, InputSnapshot, KeyBindings
from camrig.rig import CameraRig, InteractionMode


class _Pressed:
    def __init__(self, codes) -> None:
        self._codes = set(codes)

    def __getitem__(self, code: int) -> bool:
        return code in self._codes


class _FakeDevices:
    """Stands in for the pygame event queue, keyboard and mouse."""

    def __init__(self) -> None:
        self.events: list[types.SimpleNamespace] = []
        self.keys: set[int] = set()
        self.buttons = (False, False, False)
        self.focused = True
        self.cursor = (10, 20)

    def install(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(pygame.event, "get", self._drain)
        monkeypatch.setattr(pygame.key, "get_pressed", lambda: _Pressed(self.keys))
        monkeypatch.setattr(pygame.mouse, "get_pressed", lambda num_buttons=3: self.buttons)
        monkeypatch.setattr(pygame.mouse, "get_focused", lambda: self.focused)
        monkeypatch.setattr(pygame.mouse, "get_pos", lambda: self.cursor)

    def _drain(self) -> list[types.SimpleNamespace]:
        events, self.events = self.events, []
        return events


@pytest.fixture
def devices(monkeypatch: pytest.MonkeyPatch) -> _FakeDevices:
    fake = _FakeDevices()
    fake.install(monkeypatch)
    return fake


@pytest.fixture
def handler() -> InputHandler:
    return InputHandler(viewport_size=(640, 480))


def test_held_key_and_release_edge(devices: _FakeDevices, handler: InputHandler) -> None:
    devices.keys = {pygame.K_w}
    snapshot = handler.poll(0.016).snapshot
    assert snapshot.is_held(Action.UP)
    assert not snapshot.just_released(Action.UP)

    devices.keys = set()
    snapshot = handler.poll(0.016).snapshot
    assert not snapshot.is_held(Action.UP)
    assert snapshot.just_released(Action.UP)

    snapshot = handler.poll(0.016).snapshot
    assert not snapshot.just_released(Action.UP)


def test_alternate_bindings_share_an_action(devices: _FakeDevices, handler: InputHandler) -> None:
    devices.keys = {pygame.K_LEFT}
    assert handler.poll(0.016).snapshot.is_held(Action.LEFT)


def test_wheel_events_are_single_frame_releases(devices: _FakeDevices, handler: InputHandler) -> None:
    devices.events = [types.SimpleNamespace(type=pygame.MOUSEWHEEL, y=1)]
    snapshot = handler.poll(0.016).snapshot
    assert snapshot.just_released(Action.WHEEL_UP)
    assert not snapshot.just_released(Action.WHEEL_DOWN)
    assert not snapshot.is_held(Action.WHEEL_UP)

    devices.events = [types.SimpleNamespace(type=pygame.MOUSEWHEEL, y=-2)]
    snapshot = handler.poll(0.016).snapshot
    assert snapshot.just_released(Action.WHEEL_DOWN)
    assert not snapshot.just_released(Action.WHEEL_UP)

    assert not handler.poll(0.016).snapshot.released


def test_mouse_motion_becomes_velocity(devices: _FakeDevices, handler: InputHandler) -> None:
    devices.events = [
        types.SimpleNamespace(type=pygame.MOUSEMOTION, rel=(5, -3)),
        types.SimpleNamespace(type=pygame.MOUSEMOTION, rel=(5, -3)),
    ]
    snapshot = handler.poll(0.5).snapshot
    assert snapshot.mouse_velocity == pytest.approx((20.0, -12.0))


def test_zero_delta_reports_no_velocity(devices: _FakeDevices, handler: InputHandler) -> None:
    devices.events = [types.SimpleNamespace(type=pygame.MOUSEMOTION, rel=(5, 5))]
    assert handler.poll(0.0).snapshot.mouse_velocity == (0.0, 0.0)


def test_mouse_buttons_and_release(devices: _FakeDevices, handler: InputHandler) -> None:
    devices.buttons = (False, True, False)
    snapshot = handler.poll(0.016).snapshot
    assert snapshot.is_held(Action.MOUSE_BTN_MIDDLE)
    assert not snapshot.is_held(Action.MOUSE_BTN_LEFT)
    assert not snapshot.is_held(Action.MOUSE_BTN_RIGHT)

    devices.buttons = (False, False, False)
    assert handler.poll(0.016).snapshot.just_released(Action.MOUSE_BTN_MIDDLE)


def test_cursor_and_viewport(devices: _FakeDevices, handler: InputHandler) -> None:
    snapshot = handler.poll(0.016).snapshot
    assert snapshot.cursor_position == (10.0, 20.0)
    assert snapshot.viewport_size == (640, 480)

    devices.focused = False
    assert handler.poll(0.016).snapshot.cursor_position is None


def test_quit_and_debug_toggle(devices: _FakeDevices, handler: InputHandler) -> None:
    devices.events = [types.SimpleNamespace(type=pygame.KEYDOWN, key=pygame.K_F3)]
    command = handler.poll(0.016)
    assert command.toggle_debug
    assert not command.quit_requested

    devices.events = [types.SimpleNamespace(type=pygame.QUIT)]
    assert handler.poll(0.016).quit_requested

    devices.events = [types.SimpleNamespace(type=pygame.KEYDOWN, key=pygame.K_ESCAPE)]
    assert handler.poll(0.016).quit_requested


def test_reset_suppresses_release_edges(devices: _FakeDevices, handler: InputHandler) -> None:
    devices.keys = {pygame.K_q}
    handler.poll(0.016)
    handler.reset()
    devices.keys = set()
    assert not handler.poll(0.016).snapshot.just_released(Action.PAN_LEFT)


def test_custom_bindings(devices: _FakeDevices) -> None:
    bindings = KeyBindings.from_mapping({Action.PAN_LEFT: [pygame.K_z]})
    handler = InputHandler(bindings=bindings, viewport_size=(640, 480))
    devices.keys = {pygame.K_z}
    snapshot = handler.poll(0.016).snapshot
    assert snapshot.is_held(Action.PAN_LEFT)
    assert bindings.keys[Action.PAN_RIGHT] == (pygame.K_e,)


def test_mouse_driven_actions_cannot_be_bound_to_keys() -> None:
    with pytest.raises(ValueError):
        KeyBindings.from_mapping({Action.WHEEL_UP: [pygame.K_PAGEUP]})
    with pytest.raises(ValueError):
        KeyBindings(keys={Action.MOUSE_BTN_RIGHT: (pygame.K_SPACE,)})


def test_invalid_viewport_size_is_rejected() -> None:
    with pytest.raises(ValueError):
        InputHandler(viewport_size=(0, 480))


def test_snapshot_normalises_collections() -> None:
    snapshot = InputSnapshot(held=[Action.UP], released=(Action.DOWN,))
    assert isinstance(snapshot.held, frozenset)
    assert snapshot.is_held(Action.UP)
    assert snapshot.just_released(Action.DOWN)


def test_polled_snapshots_drive_the_rig(devices: _FakeDevices, handler: InputHandler) -> None:
    rig = CameraRig()

    devices.buttons = (False, False, True)
    rig.tick(0.016, handler.poll(0.016).snapshot)
    assert rig.mode is InteractionMode.MOVE_AND_DRAG

    devices.buttons = (False, False, False)
    rig.tick(0.016, handler.poll(0.016).snapshot)
    assert rig.mode is InteractionMode.IDLE
