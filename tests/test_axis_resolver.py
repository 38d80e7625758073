from __future__ import annotations

import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from camrig.axis import resolve_axis


def _resolve(magnitude, negative, positive, *, invert=False, mouse_active=False, velocity=(0.0, 0.0)):
    return resolve_axis(
        magnitude,
        negative,
        positive,
        invert=invert,
        mouse_active=mouse_active,
        mouse_sensitivity=0.0025,
        mouse_velocity=velocity,
    )


def test_negative_key_with_invert_is_negated() -> None:
    assert _resolve(2.0, True, False, invert=True) == (2.0, 2.0)
    assert _resolve(2.0, True, False) == (-2.0, -2.0)


def test_positive_key_yields_magnitude() -> None:
    assert _resolve(1.5, False, True) == (1.5, 1.5)


@pytest.mark.parametrize("mouse_active", [False, True])
@pytest.mark.parametrize("invert", [False, True])
def test_opposing_keys_interlock(mouse_active: bool, invert: bool) -> None:
    x, y = _resolve(3.0, True, True, invert=invert, mouse_active=mouse_active, velocity=(50.0, 50.0))
    assert x == 0.0 and y == 0.0


def test_no_input_yields_zero() -> None:
    x, y = _resolve(3.0, False, False)
    assert x == 0.0 and y == 0.0


def test_mouse_motion_scales_by_magnitude_and_sensitivity() -> None:
    x, y = _resolve(2.0, False, False, mouse_active=True, velocity=(100.0, -40.0))
    assert x == pytest.approx(2.0 * 100.0 * 0.0025)
    assert y == pytest.approx(2.0 * -40.0 * 0.0025)


def test_held_key_blocks_mouse_and_mouse_blocks_key() -> None:
    # A single held key while the mouse owns the axis cancels both sources.
    x, y = _resolve(2.0, True, False, mouse_active=True, velocity=(100.0, 100.0))
    assert x == 0.0 and y == 0.0


@pytest.mark.parametrize(
    "negative, positive, mouse_active",
    [
        (True, False, False),
        (False, True, False),
        (False, False, True),
        (False, False, False),
    ],
)
def test_invert_is_exact_negation(negative: bool, positive: bool, mouse_active: bool) -> None:
    base = _resolve(1.25, negative, positive, mouse_active=mouse_active, velocity=(80.0, -20.0))
    inverted = _resolve(1.25, negative, positive, invert=True, mouse_active=mouse_active, velocity=(80.0, -20.0))
    assert inverted == (-base[0], -base[1])
