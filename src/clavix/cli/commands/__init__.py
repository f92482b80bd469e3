"""CLI commands."""

from .optimize import fast, deep, prd, summarize, optimize, analyze, validate_answer
from .workspace import init, prompts, list_integrations

__all__ = [
    "fast",
    "deep",
    "prd",
    "summarize",
    "optimize",
    "analyze",
    "validate_answer",
    "init",
    "prompts",
    "list_integrations",
]
