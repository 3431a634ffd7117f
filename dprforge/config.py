"""Typed accessors for DPRFORGE_* environment settings."""

import os
from pathlib import Path
from typing import Tuple

_PACKAGE_DATA = Path(__file__).resolve().parent / "data"

# Ability score slider bounds per editor.
ABILITY_RANGES = {
    "form": (8, 20),
    "deep": (3, 20),
}


def data_dir() -> Path:
    """Directory holding weapons.json and styles.json."""
    override = os.getenv("DPRFORGE_DATA_DIR")
    if override:
        return Path(override).expanduser()
    return _PACKAGE_DATA


def log_level() -> str:
    return os.getenv("DPRFORGE_LOG_LEVEL", "WARNING").upper()


def strict_catalog() -> bool:
    """Return True if unknown catalog ids should raise instead of falling back."""
    return os.getenv("DPRFORGE_STRICT_CATALOG", "false").lower() == "true"


def ability_range(editor: str | None = None) -> Tuple[int, int]:
    editor = editor or os.getenv("DPRFORGE_ABILITY_EDITOR", "form")
    return ABILITY_RANGES.get(editor, ABILITY_RANGES["form"])
