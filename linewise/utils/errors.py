"""Custom exceptions used across Linewise."""
from __future__ import annotations


class LinewiseError(Exception):
    """Base exception for all Linewise errors."""


class ConfigurationError(LinewiseError):
    """Raised when configuration loading or validation fails."""


class ProviderError(LinewiseError):
    """Raised when the remote model provider reports an issue."""


class InputError(LinewiseError):
    """Raised when the code handed to the explainer is empty or blank."""


class FallbackError(LinewiseError):
    """Raised when the local explanation path itself fails."""


__all__ = [
    "LinewiseError",
    "ConfigurationError",
    "ProviderError",
    "InputError",
    "FallbackError",
]
