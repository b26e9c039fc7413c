"""
Core pipeline: configuration, token loading, and reference resolution.

Submodules are imported directly (tokenpipe.core.processor,
tokenpipe.core.resolver); only the error types are re-exported here.
"""

from tokenpipe.core.errors import (
    ConfigError,
    ModeNotAvailableError,
    RuntimeNotReadyError,
    TokenPipeError,
    TokenProcessingError,
    TokenResolutionError,
    TokenValidationError,
)

__all__ = [
    "TokenPipeError",
    "TokenProcessingError",
    "TokenResolutionError",
    "TokenValidationError",
    "ConfigError",
    "RuntimeNotReadyError",
    "ModeNotAvailableError",
]
