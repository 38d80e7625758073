"""Heads-up display (HUD) helpers for the debug overlay."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import pygame

from .rig import RigDiagnostics


@dataclass(slots=True)
class HUDStyle:
    """Visual configuration for :class:`HUDRenderer`."""

    crosshair_color: Tuple[int, int, int] = (255, 255, 255)
    crosshair_thickness: int = 1
    crosshair_length_ratio: float = 0.05
    text_color: Tuple[int, int, int] = (255, 255, 255)
    text_bg_color: Tuple[int, int, int, int] = (0, 0, 0, 160)
    font_name: str | None = None
    font_size: int = 16
    text_padding: int = 6


def _flag(value: bool) -> str:
    return "ON " if value else "off"


def format_diagnostics(diagnostics: RigDiagnostics) -> List[str]:
    """Render rig telemetry as the text lines shown by the overlay."""

    return [
        "FPS {:6.1f}  MOVE {:8.3f}".format(diagnostics.fps, diagnostics.move_speed),
        "ZOOM {:7.2f}  PREV {:7.2f}".format(diagnostics.zoom_distance, diagnostics.previous_zoom_distance),
        "YAW {:+07.2f}°  TILT {:06.2f}°  PITCH {:06.2f}°".format(
            diagnostics.yaw_deg, diagnostics.tilt_angle, diagnostics.pitch_deg
        ),
        "MOUSE L {}  M {}  R {}".format(
            _flag(diagnostics.mouse_left),
            _flag(diagnostics.mouse_middle),
            _flag(diagnostics.mouse_right),
        ),
    ]


class HUDRenderer:
    """Render overlays (crosshair + telemetry text) on top of the viewport."""

    def __init__(
        self,
        window_size: Tuple[int, int],
        style: HUDStyle | None = None,
        *,
        visible: bool = True,
    ) -> None:
        if window_size[0] <= 0 or window_size[1] <= 0:
            raise ValueError("window_size must be positive")

        self.window_width, self.window_height = window_size
        self.style = style or HUDStyle()
        self.visible = visible

        pygame.font.init()
        if self.style.font_name:
            self.font = pygame.font.SysFont(self.style.font_name, self.style.font_size)
        else:
            self.font = pygame.font.SysFont("monospace", self.style.font_size)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def toggle(self) -> None:
        self.visible = not self.visible

    def draw(
        self,
        screen: pygame.Surface,
        frame_surface: pygame.Surface,
        diagnostics: RigDiagnostics | None,
    ) -> None:
        """Draw the viewport and, when visible, the HUD overlays to ``screen``."""

        screen.blit(frame_surface, (0, 0))
        if not self.visible:
            return
        self._draw_crosshair(screen)
        if diagnostics is not None:
            self._draw_text(screen, format_diagnostics(diagnostics))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _draw_crosshair(self, screen: pygame.Surface) -> None:
        for start, end in crosshair_segments(
            (self.window_width, self.window_height), self.style.crosshair_length_ratio
        ):
            pygame.draw.line(screen, self.style.crosshair_color, start, end, self.style.crosshair_thickness)

    def _draw_text(self, screen: pygame.Surface, lines: List[str]) -> None:
        padding = self.style.text_padding
        rendered = [self.font.render(line, True, self.style.text_color) for line in lines]
        size, offsets = panel_layout([surface.get_size() for surface in rendered], padding)

        panel = pygame.Surface(size, pygame.SRCALPHA)
        panel.fill(self.style.text_bg_color)
        for surface, offset in zip(rendered, offsets):
            panel.blit(surface, offset)
        screen.blit(panel, (padding, padding))


Point = Tuple[int, int]


def crosshair_segments(window_size: Tuple[int, int], length_ratio: float) -> List[Tuple[Point, Point]]:
    """Horizontal and vertical strokes of a crosshair centred in the window."""

    width, height = window_size
    half = int(min(width, height) * length_ratio) // 2
    cx, cy = width // 2, height // 2
    return [((cx - half, cy), (cx + half, cy)), ((cx, cy - half), (cx, cy + half))]


def panel_layout(line_sizes: List[Tuple[int, int]], padding: int) -> Tuple[Point, List[Point]]:
    """Return the panel size and the top-left offset of each stacked text line."""

    offsets = []
    y_cursor = padding
    for _, line_height in line_sizes:
        offsets.append((padding, y_cursor))
        y_cursor += line_height + padding
    width = max((line_width for line_width, _ in line_sizes), default=0) + padding * 2
    return (width, y_cursor), offsets


__all__ = ["HUDRenderer", "HUDStyle", "crosshair_segments", "format_diagnostics", "panel_layout"]
