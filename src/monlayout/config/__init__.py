"""
Configuration package for monlayout.
"""

from .main import Config
from .dataclasses import (
    BackendConfig,
    LoggingConfig,
    StoreConfig,
    RestoreConfig,
)
