"""
Persistent layout store.

The saved layout is a single JSON file that is replaced wholesale on every
save. Writes go through a temp file in the same directory followed by a
rename, so an interrupted save never leaves a truncated store behind.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Any, List

from .exceptions import ConfigParseError, StoreNotFoundError, StoreWriteError
from .identity import make_key
from .models import Mode, SavedConfiguration, SavedEntry

FORMAT_VERSION = 1

_MODE_FIELDS = {
    'width': int,
    'height': int,
    'refresh_rate': (int, float),
    'x': int,
    'y': int,
    'scale': (int, float),
    'transform': int,
    'enabled': bool,
    'vrr': bool,
}


class LayoutStore:
    """Reads and writes the saved layout file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.logger = logging.getLogger(__name__)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> SavedConfiguration:
        """
        Load the saved layout.

        Returns:
            SavedConfiguration in save order

        Raises:
            StoreNotFoundError: If no layout has been saved yet
            ConfigParseError: If the file is malformed or contains duplicate identities
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise StoreNotFoundError(
                f"No saved layout at {self.path}. Run 'monlayout save' first."
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigParseError(f"Saved layout {self.path} is not valid JSON: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigParseError(f"Cannot read saved layout {self.path}: {e}") from e

        config = self._parse(data)
        self.logger.debug(f"Loaded {len(config)} saved entries from {self.path}")
        return config

    def save(self, config: SavedConfiguration) -> None:
        """
        Replace the saved layout atomically.

        Raises:
            StoreWriteError: If the layout cannot be written
        """
        data = {
            'version': FORMAT_VERSION,
            'entries': [self._entry_to_dict(entry) for entry in config],
        }

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.stem}-", suffix=".json"
            )
        except OSError as e:
            raise StoreWriteError(f"Failed to prepare layout file {self.path}: {e}") from e

        replaced = False
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())

            os.replace(temp_path, self.path)
            replaced = True
        except OSError as e:
            raise StoreWriteError(f"Failed to save layout to {self.path}: {e}") from e
        finally:
            # Also runs on KeyboardInterrupt
            if not replaced and Path(temp_path).exists():
                os.unlink(temp_path)

        self.logger.info(f"Saved {len(config)} outputs to {self.path}")

    @staticmethod
    def _entry_to_dict(entry: SavedEntry) -> Dict[str, Any]:
        return {
            'make': entry.make,
            'model': entry.model,
            'serial': entry.serial,
            'mode': entry.mode.to_dict(),
        }

    def _parse(self, data: Any) -> SavedConfiguration:
        if not isinstance(data, dict):
            raise ConfigParseError(f"Saved layout {self.path} must be a JSON object")

        version = data.get('version')
        if version != FORMAT_VERSION:
            raise ConfigParseError(
                f"Unsupported layout format version {version!r} in {self.path}, "
                f"expected {FORMAT_VERSION}"
            )

        entries = data.get('entries')
        if not isinstance(entries, list):
            raise ConfigParseError(f"Saved layout {self.path} has no 'entries' list")

        config = SavedConfiguration()
        for index, raw in enumerate(entries):
            entry = self._parse_entry(raw, index)
            if entry.identity in config:
                raise ConfigParseError(
                    f"Duplicate identity '{entry.identity}' in saved layout {self.path} "
                    f"(entry {index})"
                )
            config.add(entry)
        return config

    def _parse_entry(self, raw: Any, index: int) -> SavedEntry:
        where = f"entry {index} of {self.path}"
        if not isinstance(raw, dict):
            raise ConfigParseError(f"{where} must be an object")

        for key in ('make', 'model', 'serial'):
            if not isinstance(raw.get(key), str):
                raise ConfigParseError(f"{where}: '{key}' must be a string")

        mode_data = raw.get('mode')
        if not isinstance(mode_data, dict):
            raise ConfigParseError(f"{where}: 'mode' must be an object")

        return SavedEntry(
            identity=make_key(raw['make'], raw['model'], raw['serial']),
            mode=self._parse_mode(mode_data, where),
            make=raw['make'],
            model=raw['model'],
            serial=raw['serial'],
        )

    @staticmethod
    def _parse_mode(data: Dict[str, Any], where: str) -> Mode:
        unknown: List[str] = [k for k in data if k not in _MODE_FIELDS]
        if unknown:
            raise ConfigParseError(f"{where}: unknown mode keys {unknown}")

        for key, expected in _MODE_FIELDS.items():
            if key not in data:
                raise ConfigParseError(f"{where}: mode is missing '{key}'")
            value = data[key]
            # bool is an int subclass; only accept it where a bool is expected
            if isinstance(value, bool) and expected is not bool:
                raise ConfigParseError(f"{where}: mode '{key}' must be a number")
            if not isinstance(value, expected):
                raise ConfigParseError(
                    f"{where}: mode '{key}' has wrong type {type(value).__name__}"
                )

        return Mode.from_dict(dict(
            data,
            refresh_rate=float(data['refresh_rate']),
            scale=float(data['scale']),
        ))
