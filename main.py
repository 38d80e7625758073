"""Interactive viewer for the camera rig.

Right-drag moves, middle-drag pans and tilts, the wheel zooms. WASD/arrows
move, Q/E pan, R/F tilt, +/- zoom. F3 toggles the debug overlay.
"""

from __future__ import annotations

import os, sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

import argparse
import logging
from typing import Optional

import numpy as np
import pygame

from camrig import CameraRig, GridRenderer, HUDRenderer, InputHandler, RigConfig, setup_logging


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--width", type=int, default=960, help="Window width in pixels")
    parser.add_argument("--height", type=int, default=540, help="Window height in pixels")
    parser.add_argument("--fps", type=int, default=60, help="Frame rate cap")
    parser.add_argument("--mouse-sensitivity", type=float, default=1.0)
    parser.add_argument("--zoom-speed", type=float, default=1.0)
    parser.add_argument("--move-speed", type=float, default=1.0)
    parser.add_argument("--pan-speed", type=float, default=1.0)
    parser.add_argument("--tilt-speed", type=float, default=1.0)
    parser.add_argument("--invert-zoom", action=argparse.BooleanOptionalAction, default=False)
    parser.add_argument("--invert-move", action=argparse.BooleanOptionalAction, default=False)
    parser.add_argument("--invert-pan", action=argparse.BooleanOptionalAction, default=False)
    parser.add_argument("--invert-tilt", action=argparse.BooleanOptionalAction, default=False)
    parser.add_argument(
        "--edge-scroll",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Move the camera when the cursor rests near a window edge.",
    )
    parser.add_argument(
        "--edge-threshold", type=int, default=20, help="Width in pixels of the edge-scroll strips"
    )
    parser.add_argument(
        "--telemetry",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Collect rig diagnostics for the overlay. Use --no-telemetry to skip them.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show the overlay on start-up (F3 toggles it at runtime).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log mode transitions")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RigConfig:
    """Translate CLI arguments into a validated :class:`RigConfig`."""

    return RigConfig(
        mouse_sensitivity=args.mouse_sensitivity,
        zoom_speed=args.zoom_speed,
        zoom_invert_direction=args.invert_zoom,
        move_speed=args.move_speed,
        move_invert_direction=args.invert_move,
        move_enable_side_moving=args.edge_scroll,
        move_side_moving_threshold=args.edge_threshold,
        pan_speed=args.pan_speed,
        pan_invert_direction=args.invert_pan,
        tilt_speed=args.tilt_speed,
        tilt_invert_direction=args.invert_tilt,
        show_debug_info=args.telemetry,
    )


def frame_to_surface(frame: np.ndarray) -> pygame.Surface:
    """Convert an RGB numpy frame into a pygame surface."""

    if frame.dtype != np.uint8:
        frame = np.clip(frame, 0, 255).astype(np.uint8)
    if frame.ndim != 3 or frame.shape[2] != 3:
        raise ValueError("Expected frame with shape (H, W, 3)")

    frame = np.transpose(frame, (1, 0, 2))
    return pygame.surfarray.make_surface(frame)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logger = setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    config = build_config(args)

    pygame.init()
    try:
        window_size = (args.width, args.height)
        screen = pygame.display.set_mode(window_size)
        pygame.display.set_caption("camrig viewer")

        renderer = GridRenderer(output_size=(args.height, args.width))
        rig = CameraRig(config, sink=renderer)
        renderer.apply_pose(rig.pose)
        input_handler = InputHandler(viewport_size=window_size)
        hud = HUDRenderer(window_size, visible=args.debug)

        clock = pygame.time.Clock()
        frames = 0
        while True:
            delta = clock.tick(args.fps) / 1000.0
            command = input_handler.poll(delta)
            if command.quit_requested:
                break
            if command.toggle_debug:
                hud.toggle()

            rig.tick(delta, command.snapshot)
            frame_surface = frame_to_surface(renderer.render())

            screen.fill((0, 0, 0))
            hud.draw(screen, frame_surface, rig.diagnostics)
            pygame.display.flip()
            frames += 1
    finally:
        pygame.quit()

    logger.info("Viewer closed after %d frame(s)", frames)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
