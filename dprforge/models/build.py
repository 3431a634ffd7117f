from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dprforge.types import DAMAGE_TYPES, AdvMode, FinesseChoice

ABILITY_ORDER: Tuple[str, ...] = ("str", "dex", "con", "int", "wis", "cha")

# Field names below shadow builtins, so scores are annotated through an alias.
Score = int


class AbilityScores(BaseModel):
    model_config = ConfigDict(frozen=True)

    str: Score = 10
    dex: Score = 10
    con: Score = 10
    int: Score = 10
    wis: Score = 10
    cha: Score = 10

    def modifier(self, name):
        v = getattr(self, name.lower())
        return (v - 10) // 2


class Feats(BaseModel):
    model_config = ConfigDict(frozen=True)

    gwm: bool = False   # Great Weapon Master
    ss: bool = False    # Sharpshooter
    pam: bool = False   # Polearm Master
    cbe: bool = False   # Crossbow Expert


class Features(BaseModel):
    model_config = ConfigDict(frozen=True)

    sneak: bool = False
    rage: bool = False
    smite: bool = False
    smite_dice: int = 2
    smites_per_round: int = 1


class Buffs(BaseModel):
    model_config = ConfigDict(frozen=True)

    bless: bool = False
    d6_on_hit: bool = False   # Hex / Hunter's Mark


class BuildConfiguration(BaseModel):
    """Everything the evaluator needs to price one weapon build.

    Numeric fields are taken as given; range clamping belongs to the
    adapters (see :func:`dprforge.adapters.form.clamp_build`).
    """

    model_config = ConfigDict(frozen=True)

    abilities: AbilityScores = Field(default_factory=AbilityScores)
    level: int = 5
    target_ac: int = 16
    adv_mode: AdvMode = "normal"
    style_id: Optional[str] = None
    weapon_id: str = "longsword"
    use_versatile: bool = False
    finesse_ability: FinesseChoice = "dex"
    feats: Feats = Field(default_factory=Feats)
    features: Features = Field(default_factory=Features)
    buffs: Buffs = Field(default_factory=Buffs)
    resist: Optional[str] = None
    vuln: Optional[str] = None

    @field_validator("style_id", "resist", "vuln", mode="before")
    @classmethod
    def _none_string(cls, v):
        if isinstance(v, str) and v.strip().lower() in {"", "none"}:
            return None
        return v

    @field_validator("resist", "vuln")
    @classmethod
    def _damage_type(cls, v):
        if v is None:
            return v
        v = v.lower()
        if v not in DAMAGE_TYPES:
            raise ValueError(f"unknown damage type '{v}'")
        return v


__all__ = [
    "ABILITY_ORDER",
    "AbilityScores",
    "Buffs",
    "BuildConfiguration",
    "Features",
    "Feats",
    "FinesseChoice",
]
