from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional, Tuple
import json
from pathlib import Path

from dprforge.config import data_dir, strict_catalog
from dprforge.logging import get_logger
from dprforge.rules.dice import is_dice
from dprforge.types import DAMAGE_TYPES

log = get_logger(__name__)

# Allowed weapon property keys
_ALLOWED_PROP_KEYS = {
    "finesse",
    "light",
    "heavy",
    "two-handed",
    "reach",
    "loading",
    "ammunition",
    "thrown",
    "special",
    "versatile",
    "ranged",
}

# Feat qualification tags
_ALLOWED_TAGS = {"gwm", "ss", "pam", "cbe"}


def _validate_weapon_dict(w: dict) -> list[str]:
    errs: list[str] = []
    name = w.get("name", "<unnamed>")
    for p in w.get("properties", []):
        if p not in _ALLOWED_PROP_KEYS:
            errs.append(f"{name}: unknown property '{p}'")
    for t in w.get("tags", []):
        if t not in _ALLOWED_TAGS:
            errs.append(f"{name}: unknown feat tag '{t}'")
    if not is_dice(w.get("damage", "")):
        errs.append(f"{name}: bad damage '{w.get('damage')}', expected XdY")
    v = w.get("versatile")
    if v is not None:
        if not is_dice(v):
            errs.append(f"{name}: bad versatile '{v}', expected XdY")
        if w.get("handed") != "1h":
            errs.append(f"{name}: versatile die on a two-handed weapon")
    if w.get("damage_type") not in DAMAGE_TYPES:
        errs.append(f"{name}: unknown damage type '{w.get('damage_type')}'")
    if w.get("handed") not in {"1h", "2h"}:
        errs.append(f"{name}: handed must be '1h' or '2h'")
    return errs


@dataclass(frozen=True)
class Weapon:
    id: str
    name: str
    damage: str             # "1d8" etc.
    damage_type: str        # "slashing" | "piercing" | "bludgeoning" | ...
    handed: str             # "1h" | "2h"
    ranged: bool = False
    versatile: Optional[str] = None
    properties: Tuple[str, ...] = ()   # e.g. ("finesse", "light")
    tags: Tuple[str, ...] = ()         # feat qualification, e.g. ("gwm", "pam")

    @property
    def melee(self) -> bool:
        return not self.ranged

    @property
    def finesse(self) -> bool:
        return "finesse" in self.properties

    @property
    def light(self) -> bool:
        return "light" in self.properties

    @property
    def one_handed(self) -> bool:
        return self.handed == "1h"

    def qualifies(self, tag: str) -> bool:
        return tag in self.tags

    def damage_die(self, use_versatile: bool = False) -> str:
        if use_versatile and self.versatile:
            return self.versatile
        return self.damage


class WeaponIndex:
    def __init__(self, weapons: Dict[str, Weapon]):
        self.by_id = weapons

    @classmethod
    def load(cls, path: Path) -> "WeaponIndex":
        raw = json.loads(path.read_text(encoding="utf-8"))
        weapons: Dict[str, Weapon] = {}
        errors: list[str] = []
        for w in raw:
            errs = _validate_weapon_dict(w)
            if errs:
                errors.extend(errs)
                continue
            weapon = Weapon(
                **{
                    **w,
                    "properties": tuple(w.get("properties", [])),
                    "tags": tuple(w.get("tags", [])),
                }
            )
            weapons[weapon.id.lower()] = weapon
        if errors:
            raise ValueError("; ".join(errors))
        if not weapons:
            raise ValueError(f"{path}: weapon catalog is empty")
        return cls(weapons)

    def __iter__(self):
        return iter(self.by_id.values())

    def __len__(self) -> int:
        return len(self.by_id)

    @property
    def default(self) -> Weapon:
        return next(iter(self.by_id.values()))

    def get(self, weapon_id: str) -> Weapon:
        return self.by_id[weapon_id.lower()]

    def resolve(self, weapon_id: str) -> Weapon:
        """Look up ``weapon_id``, falling back to the first catalog entry."""
        try:
            return self.get(weapon_id)
        except KeyError:
            if strict_catalog():
                raise
            log.warning("unknown weapon id %r, using %r", weapon_id, self.default.id)
            return self.default


@lru_cache(maxsize=None)
def _load_cached(path: str) -> WeaponIndex:
    return WeaponIndex.load(Path(path))


def default_weapons() -> WeaponIndex:
    return _load_cached(str(data_dir() / "weapons.json"))
