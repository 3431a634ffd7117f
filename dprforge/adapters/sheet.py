"""Character sheet attack-options table: one priced row per carried weapon."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from dprforge.codex.weapons import WeaponIndex, default_weapons
from dprforge.models.build import AbilityScores, BuildConfiguration, Features
from dprforge.rules.evaluator import evaluate, governing_ability
from dprforge.types import AdvMode


@dataclass(frozen=True)
class AttackOption:
    id: str
    label: str
    attack_bonus: int
    ability_mod: int
    avg_normal: float
    avg_crit: float
    hit_chance: float   # includes crit chance
    expected: float
    notes: str = ""


def round2(v: float) -> float:
    return round(v * 100) / 100


def attack_options(
    abilities: AbilityScores,
    level: int,
    loadout: Iterable[str],
    *,
    target_ac: int = 15,
    adv_mode: AdvMode = "normal",
    include_rage: bool = False,
    weapons: Optional[WeaponIndex] = None,
) -> List[AttackOption]:
    """Price a single swing with each weapon in ``loadout``, best first.

    Finesse weapons use the higher of STR and DEX. Styles and feats are not
    applied; Rage is, for melee weapons, when ``include_rage`` is set.
    Weapon ids missing from the catalog are skipped.
    """
    weapons = weapons or default_weapons()
    out: List[AttackOption] = []
    for weapon_id in loadout:
        try:
            w = weapons.get(weapon_id)
        except KeyError:
            continue
        build = BuildConfiguration(
            abilities=abilities,
            level=level,
            target_ac=target_ac,
            adv_mode=adv_mode,
            weapon_id=w.id,
            finesse_ability="best",
            features=Features(rage=include_rage),
        )
        summary = evaluate(build, weapons=weapons)
        ability = governing_ability(build, w)
        raged = include_rage and w.melee
        out.append(
            AttackOption(
                id=w.id,
                label=w.name,
                attack_bonus=summary.to_hit,
                ability_mod=abilities.modifier(ability),
                avg_normal=round2(summary.avg_hit),
                avg_crit=round2(summary.avg_crit),
                hit_chance=summary.p_hit,
                expected=round2(summary.per_attack),
                notes=ability.upper() + (" +Rage" if raged else ""),
            )
        )
    out.sort(key=lambda o: o.expected, reverse=True)
    return out
