"""Project workspace: the .clavix directory, its files and integration commands."""

from .adapters import Adapter, AdapterConfig, CommandTemplate, detect_integrations, get_adapter, list_adapters
from .config import UserConfig
from .manager import BLOCK_END, BLOCK_START, SavedPrompt, Workspace

__all__ = [
    "UserConfig",
    "Workspace",
    "SavedPrompt",
    "BLOCK_START",
    "BLOCK_END",
    "Adapter",
    "AdapterConfig",
    "CommandTemplate",
    "get_adapter",
    "list_adapters",
    "detect_integrations",
]
