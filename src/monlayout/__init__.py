"""
monlayout - Save and restore Wayland monitor layouts.

Matches saved settings to connected displays by make, model and serial
instead of connector name, and can leave out the built-in panel while the
laptop lid is closed.
"""

__version__ = "0.1.0"

from .config import Config
from .models import (
    Mode,
    Output,
    IdentityKey,
    SavedEntry,
    SavedConfiguration,
    LidRule,
    RestoreAction,
    Apply,
    Skip,
    Unmatched,
)
from .identity import resolve
from .lid import excluded_heads
from .planner import plan
from .capture import capture
from .store import LayoutStore
from .backends import Backend, WlrRandrBackend, HyprctlBackend, create_backend

__all__ = [
    "Config",
    "Mode",
    "Output",
    "IdentityKey",
    "SavedEntry",
    "SavedConfiguration",
    "LidRule",
    "RestoreAction",
    "Apply",
    "Skip",
    "Unmatched",
    "resolve",
    "excluded_heads",
    "plan",
    "capture",
    "LayoutStore",
    "Backend",
    "WlrRandrBackend",
    "HyprctlBackend",
    "create_backend",
]
