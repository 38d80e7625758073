"""Headless demonstration of the camera rig driven by scripted input."""

from __future__ import annotations

import os, sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

import argparse
from pathlib import Path
from typing import Iterable, List, Tuple

import imageio.v3 as imageio

from camrig import Action, CameraRig, GridRenderer, InputSnapshot, RigConfig, setup_logging


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--out_dir",
        type=Path,
        default=Path("rig_demo_outputs"),
        help="Directory where demo frames will be written",
    )
    parser.add_argument("--width", type=int, default=320, help="Output width in pixels")
    parser.add_argument("--height", type=int, default=240, help="Output height in pixels")
    parser.add_argument("--dt", type=float, default=1.0 / 30.0, help="Simulated frame time in seconds")
    parser.add_argument("--steps", type=int, default=10, help="Frames simulated per scripted phase")
    return parser.parse_args(argv)


def generate_sample_inputs(viewport_size: Tuple[int, int]) -> List[Tuple[str, InputSnapshot]]:
    """Return labelled per-phase input snapshots for demonstration purposes."""

    width, height = viewport_size
    centre = (width / 2.0, height / 2.0)

    def frame(held=(), released=(), velocity=(0.0, 0.0), cursor=centre) -> InputSnapshot:
        return InputSnapshot(
            held=frozenset(held),
            released=frozenset(released),
            mouse_velocity=velocity,
            cursor_position=cursor,
            viewport_size=viewport_size,
        )

    return [
        ("forward", frame(held={Action.UP})),
        ("pan-left", frame(held={Action.PAN_LEFT})),
        ("tilt-forward", frame(held={Action.TILT_FORWARD})),
        ("zoom-out", frame(held={Action.ZOOM_OUT})),
        ("edge-scroll-right", frame(cursor=(width - 1.0, height / 2.0))),
        ("drag", frame(held={Action.MOUSE_BTN_RIGHT}, velocity=(120.0, -60.0))),
        ("wheel-in", frame(released={Action.WHEEL_UP, Action.MOUSE_BTN_RIGHT})),
    ]


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging()

    viewport_size = (args.width, args.height)
    renderer = GridRenderer(output_size=(args.height, args.width))
    rig = CameraRig(RigConfig(show_debug_info=True), sink=renderer)
    renderer.apply_pose(rig.pose)

    args.out_dir.mkdir(parents=True, exist_ok=True)
    imageio.imwrite(args.out_dir / "frame_000.png", renderer.render())

    for index, (label, snapshot) in enumerate(generate_sample_inputs(viewport_size), start=1):
        for _ in range(args.steps):
            rig.tick(args.dt, snapshot)
        output_path = args.out_dir / f"frame_{index:03d}_{label}.png"
        imageio.imwrite(output_path, renderer.render())
        pose = rig.pose
        motion = rig.motion
        print(
            "Frame {idx:03d} [{label}]: pos=({x:+.2f}, {z:+.2f}), yaw={yaw:+.2f}°, "
            "tilt={tilt:.2f}°, zoom={zoom:.2f} → {path}".format(
                idx=index,
                label=label,
                x=pose.position[0],
                z=pose.position[2],
                yaw=pose.yaw_deg,
                tilt=motion.tilt_angle,
                zoom=motion.zoom_distance,
                path=output_path,
            )
        )

    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
