"""
Common exception classes for monlayout.

Provides domain-specific exceptions for consistent error handling across modules.
All exceptions inherit from MonLayoutError for unified catching at CLI level.
"""


class MonLayoutError(Exception):
    """
    Base exception for all monlayout errors.

    All domain-specific exceptions inherit from this class, allowing
    callers to catch all monlayout errors with a single except clause.
    """
    pass


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigError(MonLayoutError):
    """
    Configuration-related errors.

    Raised when:
    - Config file or layout store is malformed or missing required fields
    - Config validation fails
    - The layout store is missing or ambiguous
    """
    pass


class ConfigParseError(ConfigError):
    """
    Config file or layout store could not be parsed.

    Raised for invalid TOML/JSON, unknown sections or keys, wrong value
    types, malformed lid rules and duplicate identities in a saved layout.
    Always fatal: no output is touched after this is raised.
    """
    pass


class ConfigValidationError(ConfigError):
    """
    Config value validation failed.

    Raised when a config value is present but invalid (e.g., out of range,
    unknown backend name, unknown log level).
    """
    pass


class StoreNotFoundError(ConfigError):
    """No saved layout exists at the expected path."""
    pass


class DuplicateIdentityError(ConfigError):
    """
    Two connected outputs resolve to the same identity key.

    Happens with identical displays that report no serial number. Saving
    such a layout is refused because it could not be restored unambiguously.
    """
    pass


# ============================================================================
# Store Errors
# ============================================================================

class StoreError(MonLayoutError):
    """
    Layout store errors.

    Raised when reading/writing the saved layout fails at the filesystem level.
    """
    pass


class StoreWriteError(StoreError):
    """Layout could not be written to disk. Any previous layout is left intact."""
    pass


# ============================================================================
# Lid Errors
# ============================================================================

class LidFileReadError(MonLayoutError):
    """
    Lid state file is missing or unreadable.

    Never fatal: the affected rule is treated as "lid open".
    """
    pass


# ============================================================================
# Command Errors
# ============================================================================

class CommandError(MonLayoutError):
    """
    Command execution errors (compositor tools).

    Raised when external commands fail to execute or return errors.
    """
    pass


class ApplyError(CommandError):
    """
    Applying a mode to a single output failed.

    Recoverable: remaining outputs are still configured, but the process
    exits non-zero so callers can detect the partial failure.
    """
    pass


# ============================================================================
# Enumeration Errors
# ============================================================================

class EnumerationError(MonLayoutError):
    """
    Output enumeration errors.

    Base class for errors while querying the compositor for its outputs.
    """
    pass


class CompositorNotFoundError(EnumerationError):
    """
    The compositor tool is not available.

    Raised when the configured wlr-randr/hyprctl executable is not in PATH.
    """
    pass


class CompositorCommunicationError(EnumerationError):
    """
    Failed to communicate with compositor.

    Raised when compositor commands fail, time out or return unparsable output.
    """
    pass
