"""
JSON content loading shared by the context loader, the settings store and
the localization service.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from rolltree.core.error_handling import ContentLoadError
from rolltree.core.logging import log_debug

T = TypeVar("T")


def _load_json_file(
    filepath: Path,
    loader_func: Callable[[dict[str, Any]], T],
    description: str,
) -> T:
    """Helper to load and validate a JSON object file"""
    try:
        log_debug(
            f"Loading {description} using {loader_func.__name__}",
            {"path": filepath},
        )
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        if not filepath.is_file():
            raise ValueError(f"Not a file: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(
                f"Expected object in {filepath}, got {type(data).__name__}"
            )
        return loader_func(data)
    except (json.JSONDecodeError, FileNotFoundError, ValueError) as e:
        raise ContentLoadError(f"File {filepath} raised an error: {e}") from e
