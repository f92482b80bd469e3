"""Core components: types, configuration, logging and exceptions."""

from .types import (
    OptimizationMode,
    PatternMode,
    OptimizationPhase,
    DocumentType,
    Impact,
)
from .exceptions import (
    ClavixError,
    PatternError,
    ConfigurationError,
    WorkspaceError,
)
from .config import Settings, get_settings, reload_settings
from .logging_config import setup_logging

__all__ = [
    # Types
    "OptimizationMode",
    "PatternMode",
    "OptimizationPhase",
    "DocumentType",
    "Impact",
    # Exceptions
    "ClavixError",
    "PatternError",
    "ConfigurationError",
    "WorkspaceError",
    # Config
    "Settings",
    "get_settings",
    "reload_settings",
    "setup_logging",
]
