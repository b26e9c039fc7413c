"""
Error types for token loading, resolution, and CSS generation.
"""

from __future__ import annotations

from typing import Literal

ProcessingStage = Literal["loading", "resolving", "generating", "writing"]


class TokenPipeError(Exception):
    """Base exception for all tokenpipe errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TokenProcessingError(TokenPipeError):
    """
    Raised when the pipeline itself cannot continue.

    Examples:
    - $metadata.json missing or malformed
    - Theme layer missing from the data directory
    - Output directory not writable

    Always fatal to the current build.
    """

    def __init__(self, message: str, stage: ProcessingStage):
        self.stage = stage
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"


class TokenResolutionError(TokenPipeError):
    """
    Raised when a token path has no definition in any cascade layer
    for the requested mode.
    """

    def __init__(self, message: str, token_path: str, mode: str):
        self.token_path = token_path
        self.mode = mode
        super().__init__(message)


class TokenValidationError(TokenPipeError):
    """
    Raised when a reference chain revisits a token it is already resolving.

    ``cycle_chain`` holds the visited paths in visitation order, ending with
    the path that closed the cycle.
    """

    def __init__(
        self,
        message: str,
        token_path: str | None = None,
        cycle_chain: list[str] | None = None,
    ):
        self.token_path = token_path
        self.cycle_chain = cycle_chain or []
        super().__init__(message)


class ConfigError(TokenPipeError):
    """Raised when tokenpipe.toml cannot be read or has invalid values."""

    pass


class RuntimeNotReadyError(TokenPipeError):
    """Raised when the runtime manager is used before its tokens are loaded."""

    pass


class ModeNotAvailableError(TokenPipeError):
    """Raised when the runtime manager has no resolved tokens for a mode."""

    def __init__(self, mode: str, available: list[str]):
        self.mode = mode
        self.available = available
        listing = ", ".join(available) or "none"
        super().__init__(f"No tokens found for mode: {mode} (available: {listing})")
