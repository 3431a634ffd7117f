from .styles import FightingStyle, StyleIndex, default_styles
from .weapons import DAMAGE_TYPES, Weapon, WeaponIndex, default_weapons

__all__ = [
    "DAMAGE_TYPES",
    "FightingStyle",
    "StyleIndex",
    "Weapon",
    "WeaponIndex",
    "default_styles",
    "default_weapons",
]
