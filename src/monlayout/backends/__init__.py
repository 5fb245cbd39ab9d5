"""Compositor backends."""

from typing import Dict, Type

from ..config import BackendConfig
from ..exceptions import ConfigValidationError
from .base import Backend
from .hyprctl import HyprctlBackend
from .wlr_randr import WlrRandrBackend

BACKENDS: Dict[str, Type[Backend]] = {
    "wlr-randr": WlrRandrBackend,
    "hyprctl": HyprctlBackend,
}


def create_backend(config: BackendConfig) -> Backend:
    """
    Create the backend selected in the configuration.

    Args:
        config: Backend section of the configuration

    Returns:
        Backend instance
    """
    if config.type not in BACKENDS:
        raise ConfigValidationError(
            f"Unknown backend: {config.type}. Available: {list(BACKENDS.keys())}"
        )
    return BACKENDS[config.type](executable=config.executable or "", timeout=config.timeout)


__all__ = ["Backend", "WlrRandrBackend", "HyprctlBackend", "BACKENDS", "create_backend"]
