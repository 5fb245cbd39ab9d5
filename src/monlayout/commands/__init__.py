"""CLI commands module."""

from .save import save_layout
from .restore import restore_layout, RestoreResult
from .info import show_info, get_info_json

__all__ = [
    "save_layout",
    "restore_layout",
    "RestoreResult",
    "show_info",
    "get_info_json",
]
