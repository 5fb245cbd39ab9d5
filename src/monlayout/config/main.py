"""
Main Config class for monlayout.
"""

import os
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional

try:
    import tomli
except ImportError:
    raise ImportError("Required package 'tomli' not found. Install with: pip install tomli")

from ..exceptions import ConfigError, ConfigParseError, ConfigValidationError
from ..models import LidRule

from .dataclasses import (
    BackendConfig,
    LoggingConfig,
    StoreConfig,
    RestoreConfig,
    parse_lid_rules,
)
from .validation import (
    VALID_LOG_LEVELS,
    validate_toml_structure,
)

APP_NAME = "monlayout"
VALID_BACKENDS = ["wlr-randr", "hyprctl"]


@dataclass
class Config:
    """
    Main configuration class for monlayout.

    Loaded once per invocation and passed explicitly to every command;
    nothing is cached at module level.
    """

    backend: BackendConfig = field(default_factory=BackendConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    restore: RestoreConfig = field(default_factory=RestoreConfig)
    lid: List[LidRule] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.backend.type not in VALID_BACKENDS:
            raise ConfigValidationError(
                f"Invalid backend: {self.backend.type}\n"
                f"Must be one of: {VALID_BACKENDS}"
            )

        if self.backend.timeout <= 0:
            raise ConfigValidationError(
                f"Backend timeout ({self.backend.timeout}s) must be positive."
            )

        if self.logging.level.upper() not in VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"Invalid log level: {self.logging.level}\n"
                f"Must be one of: {VALID_LOG_LEVELS}"
            )

    def with_overrides(
        self,
        backend: Optional[str] = None,
        executable: Optional[str] = None,
    ) -> 'Config':
        """
        Return a copy with command-line overrides applied.

        Changing the backend type drops a configured executable, since it
        belongs to the other tool.
        """
        backend_config = self.backend
        if backend and backend != backend_config.type:
            backend_config = replace(backend_config, type=backend, executable=None)
        if executable:
            backend_config = replace(backend_config, executable=executable)
        return replace(self, backend=backend_config)

    def get_store_path(self) -> Path:
        """Get path of the saved layout."""
        return self.store.get_path(self.get_state_dir())

    @classmethod
    def get_config_dir(cls) -> Path:
        """
        Get user configuration directory.

        Uses XDG_CONFIG_HOME if set, otherwise defaults to ~/.config.
        """
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / APP_NAME
        return Path.home() / ".config" / APP_NAME

    @classmethod
    def get_state_dir(cls) -> Path:
        """
        Get user state directory.

        Uses XDG_STATE_HOME if set, otherwise defaults to ~/.local/state.
        """
        xdg_state = os.environ.get("XDG_STATE_HOME")
        if xdg_state:
            return Path(xdg_state) / APP_NAME
        return Path.home() / ".local" / "state" / APP_NAME

    @classmethod
    def get_config_file(cls) -> Path:
        """Get default config file path."""
        return cls.get_config_dir() / "config.toml"

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> 'Config':
        """
        Load configuration from TOML file.

        A missing default config file yields the defaults; an explicitly
        requested file must exist.

        Args:
            config_file: Optional path to config TOML file

        Returns:
            Config instance with loaded settings

        Raises:
            ConfigError: If an explicitly given config file does not exist
            ConfigParseError: If the file is not valid TOML or has an invalid structure
            ConfigValidationError: If a value is out of range
        """
        logger = logging.getLogger(__name__)

        explicit = config_file is not None
        if not config_file:
            config_file = cls.get_config_file()

        if not config_file.exists():
            if explicit:
                raise ConfigError(f"Config file not found: {config_file}")
            logger.debug(f"No config file at {config_file}, using defaults")
            return cls()

        try:
            with open(config_file, 'rb') as f:
                config_dict = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigParseError(f"Invalid TOML in {config_file}: {e}") from e
        except OSError as e:
            raise ConfigParseError(f"Cannot read config file {config_file}: {e}") from e

        validate_toml_structure(config_dict, config_file)
        logger.debug(f"Loaded config from {config_file}")

        return cls(
            backend=BackendConfig(**config_dict.get('backend', {})),
            logging=LoggingConfig(**config_dict.get('logging', {})),
            store=StoreConfig(**config_dict.get('store', {})),
            restore=RestoreConfig(**config_dict.get('restore', {})),
            lid=parse_lid_rules(config_dict.get('lid', []), config_file),
        )
