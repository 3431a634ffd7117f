from typing import Literal

AdvMode = Literal["normal", "adv", "dis"]
FinesseChoice = Literal["dex", "str", "best"]

DAMAGE_TYPES = (
    "acid",
    "bludgeoning",
    "cold",
    "fire",
    "force",
    "lightning",
    "necrotic",
    "piercing",
    "poison",
    "psychic",
    "radiant",
    "slashing",
    "thunder",
)
