from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from dprforge.config import data_dir, strict_catalog
from dprforge.logging import get_logger

log = get_logger(__name__)

STYLE_TAGS = ("defense", "melee-1h", "melee-2h", "ranged", "twf")


@dataclass(frozen=True)
class FightingStyle:
    id: str
    name: str
    tag: str    # one of STYLE_TAGS


class StyleIndex:
    def __init__(self, styles: Dict[str, FightingStyle]):
        self.by_id = styles

    @classmethod
    def load(cls, path: Path) -> "StyleIndex":
        raw = json.loads(path.read_text(encoding="utf-8"))
        styles: Dict[str, FightingStyle] = {}
        errors: list[str] = []
        for s in raw:
            if s.get("tag") not in STYLE_TAGS:
                errors.append(f"{s.get('name', '<unnamed>')}: unknown style tag '{s.get('tag')}'")
                continue
            style = FightingStyle(**s)
            styles[style.id.lower()] = style
        if errors:
            raise ValueError("; ".join(errors))
        return cls(styles)

    def __iter__(self):
        return iter(self.by_id.values())

    def get(self, style_id: str) -> FightingStyle:
        return self.by_id[style_id.lower()]

    def resolve(self, style_id: Optional[str]) -> Optional[FightingStyle]:
        """Return the style for ``style_id``; unknown ids mean no style."""
        if not style_id:
            return None
        try:
            return self.get(style_id)
        except KeyError:
            if strict_catalog():
                raise
            log.warning("unknown fighting style %r, ignoring", style_id)
            return None


@lru_cache(maxsize=None)
def _load_cached(path: str) -> StyleIndex:
    return StyleIndex.load(Path(path))


def default_styles() -> StyleIndex:
    return _load_cached(str(data_dir() / "styles.json"))
