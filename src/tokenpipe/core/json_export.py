"""
Resolved token JSON export.

Writes the per-mode variable maps produced by a build so the runtime
mode manager can load them without re-running resolution:

    {
      "theme": "dive-theme",
      "generated": "2024-01-01T00:00:00+00:00",
      "modes": {
        "light-mode": {"--Color-Primary-Background-default": "#2c72e0"}
      }
    }
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .errors import TokenProcessingError

RESOLVED_TOKENS_FILE = "resolved-tokens.json"


def build_resolved_document(
    theme: str,
    resolved: Mapping[str, Mapping[str, str]],
) -> dict[str, Any]:
    """Assemble the JSON document for a set of resolved modes."""
    return {
        "theme": theme,
        "generated": datetime.now(UTC).isoformat(),
        "modes": {mode: dict(variables) for mode, variables in resolved.items()},
    }


def export_resolved_tokens(
    theme: str,
    resolved: Mapping[str, Mapping[str, str]],
    output_path: Path,
) -> Path:
    """
    Write resolved variables to a JSON file.

    Args:
        theme: Theme name recorded in the document
        resolved: mode -> CSS variable name -> CSS value
        output_path: Destination file

    Returns:
        Path to the written file.
    """
    document = build_resolved_document(theme, resolved)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return output_path


def load_resolved_tokens(path: Path) -> dict[str, dict[str, str]]:
    """
    Read a resolved-tokens document back into mode -> variables.

    Raises:
        TokenProcessingError: If the file is missing or not a resolved-tokens document
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise TokenProcessingError(f"Failed to read {path}: {e}", stage="loading") from e

    modes = data.get("modes") if isinstance(data, dict) else None
    if not isinstance(modes, dict):
        raise TokenProcessingError(f"{path} has no 'modes' object", stage="loading")

    result: dict[str, dict[str, str]] = {}
    for mode, variables in modes.items():
        if not isinstance(variables, dict):
            raise TokenProcessingError(
                f"{path}: variables for mode {mode!r} must be an object", stage="loading"
            )
        result[mode] = {str(name): str(value) for name, value in variables.items()}
    return result
