"""Custom exceptions for Clavix."""

from typing import Optional, Dict, Any


class ClavixError(Exception):
    """Base exception for all Clavix errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class PatternError(ClavixError):
    """Error raised while applying a single optimization pattern."""

    def __init__(
        self,
        message: str,
        pattern_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message, details, cause)
        self.pattern_id = pattern_id
        if pattern_id:
            self.details["pattern_id"] = pattern_id


class ConfigurationError(ClavixError):
    """Error in configuration or registry setup."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message, details, cause)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


class WorkspaceError(ClavixError):
    """Error reading or writing the .clavix workspace."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message, details, cause)
        self.path = path
        if path:
            self.details["path"] = path
