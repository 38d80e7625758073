"""Strategy-style 3D camera rig driven by keyboard, mouse and wheel input."""

from .axis import resolve_axis
from .config import InvalidConfiguration, RigConfig
from .hud import HUDRenderer, HUDStyle, format_diagnostics
from .input_handler import Action, InputCommand, InputHandler, InputSnapshot, InputSource, KeyBindings
from .logging_setup import get_logger, setup_logging
from .rig import CameraRig, CameraSink, InteractionMode, MotionState, Pose, RigDiagnostics, next_mode
from .viewport import GridRenderer

__all__ = [
    "Action",
    "CameraRig",
    "CameraSink",
    "GridRenderer",
    "HUDRenderer",
    "HUDStyle",
    "InputCommand",
    "InputHandler",
    "InputSnapshot",
    "InputSource",
    "InteractionMode",
    "InvalidConfiguration",
    "KeyBindings",
    "MotionState",
    "Pose",
    "RigConfig",
    "RigDiagnostics",
    "format_diagnostics",
    "get_logger",
    "next_mode",
    "resolve_axis",
    "setup_logging",
]
