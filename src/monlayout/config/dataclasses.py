"""
Configuration dataclasses for monlayout.
"""

from pathlib import Path
from typing import Any, List, Optional
from dataclasses import dataclass

from ..exceptions import ConfigParseError
from ..models import LidRule


@dataclass
class BackendConfig:
    """Compositor backend settings."""
    type: str = "wlr-randr"  # "wlr-randr" or "hyprctl"
    executable: Optional[str] = None  # Defaults to the backend's own tool name
    timeout: int = 10  # Seconds per compositor command


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"


@dataclass
class StoreConfig:
    """Saved layout location."""
    path: Optional[str] = None  # Defaults to $XDG_STATE_HOME/monlayout/layout.json

    def get_path(self, state_dir: Path) -> Path:
        """Get absolute path of the layout file."""
        if self.path:
            return Path(self.path).expanduser()
        return state_dir / "layout.json"


@dataclass
class RestoreConfig:
    """Restore behaviour."""
    disable_lid_closed: bool = False  # Turn off heads skipped for a closed lid
    fallback_to_default: bool = False  # Use preferred modes when nothing is saved


def parse_lid_rules(entries: List[Any], config_file: Path) -> List[LidRule]:
    """
    Parse the [[lid]] array of tables.

    Expects format:
    [
        {"file": "/proc/acpi/button/lid/LID0/state", "head": "eDP-1"},
    ]

    Raises:
        ConfigParseError: If an entry is missing 'file' or 'head'
    """
    rules = []
    for index, entry in enumerate(entries):
        where = f"lid entry {index} in {config_file}"
        if not isinstance(entry, dict):
            raise ConfigParseError(f"{where} must be a table")

        unknown = [k for k in entry if k not in ("file", "head")]
        if unknown:
            raise ConfigParseError(f"Unknown keys {unknown} in {where}. Valid keys: ['file', 'head']")

        file = entry.get("file")
        head = entry.get("head")
        if not isinstance(file, str) or not file:
            raise ConfigParseError(f"{where} needs a 'file' string")
        if not isinstance(head, str) or not head:
            raise ConfigParseError(f"{where} needs a 'head' string")

        rules.append(LidRule(file=Path(file).expanduser(), head=head))
    return rules

