"""
Configuration validation for monlayout.
"""

from pathlib import Path
from typing import Dict, Any

from ..exceptions import ConfigParseError


VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def validate_toml_structure(config_dict: Dict[str, Any], config_file: Path) -> None:
    """
    Validate TOML structure before creating dataclasses.

    Checks for unknown sections and keys, providing helpful error messages.

    Args:
        config_dict: Loaded TOML configuration dictionary
        config_file: Path to config file for error messages

    Raises:
        ConfigParseError: If structure validation fails
    """
    # Define valid sections and their keys
    valid_structure = {
        'backend': {
            'type': str,
            'executable': str,
            'timeout': int,
        },
        'logging': {
            'level': str,
        },
        'store': {
            'path': str,
        },
        'restore': {
            'disable_lid_closed': bool,
            'fallback_to_default': bool,
        },
        'lid': list,  # [[lid]] array of tables, checked by parse_lid_rules()
    }

    # Check for unknown sections
    for section in config_dict:
        if section not in valid_structure:
            raise ConfigParseError(
                f"Unknown config section '{section}' in {config_file}. "
                f"Valid sections: {list(valid_structure.keys())}"
            )

    # Check each section for unknown keys and type validation
    for section_name, section_config in config_dict.items():
        valid_keys = valid_structure[section_name]

        if valid_keys == list:
            if not isinstance(section_config, list):
                raise ConfigParseError(
                    f"'{section_name}' must be an array of tables ([[{section_name}]]) in {config_file}"
                )
            continue

        if not isinstance(section_config, dict):
            raise ConfigParseError(
                f"Section '{section_name}' must be a dictionary in {config_file}"
            )

        for key, value in section_config.items():
            if key not in valid_keys:
                raise ConfigParseError(
                    f"Unknown key '{key}' in section '{section_name}' in {config_file}. "
                    f"Valid keys: {list(valid_keys.keys())}"
                )

            # Basic type checking; bool is an int subclass, so reject it for ints
            expected_type = valid_keys[key]
            if not isinstance(value, expected_type) or (
                expected_type is int and isinstance(value, bool)
            ):
                raise ConfigParseError(
                    f"Key '{section_name}.{key}' must be of type {expected_type.__name__} "
                    f"in {config_file}, got {type(value).__name__}"
                )
