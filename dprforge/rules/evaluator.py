"""Expected damage-per-round for a single weapon build."""
from __future__ import annotations

import math
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from dprforge.codex.styles import StyleIndex, default_styles
from dprforge.codex.weapons import Weapon, WeaponIndex, default_weapons
from dprforge.logging import get_logger
from dprforge.models.build import BuildConfiguration
from dprforge.models.summary import DPRSummary
from dprforge.rules.attack_math import hit_and_crit
from dprforge.rules.dice import dice_average, die_average
from dprforge.rules.modifiers import Accumulator, AttackContext, Modifier, modifiers_for
from dprforge.rules.progression import attacks_per_round, proficiency_bonus

log = get_logger(__name__)

SMITE_DIE_AVG = die_average(8)


def governing_ability(build: BuildConfiguration, weapon: Weapon) -> str:
    """Ranged weapons use DEX; finesse follows ``build.finesse_ability``."""
    if weapon.ranged:
        return "dex"
    if weapon.finesse:
        choice = build.finesse_ability
        if choice == "best":
            a = build.abilities
            return "dex" if a.dex >= a.str else "str"
        return choice
    return "str"


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def _blend(p_noncrit: float, p_crit: float, avg_hit: float, crit_extra: float) -> float:
    """Expected damage of one swing; a crit adds ``crit_extra`` on top of a hit."""
    return p_noncrit * avg_hit + p_crit * (avg_hit + crit_extra)


def evaluate(
    build: BuildConfiguration,
    *,
    weapons: Optional[WeaponIndex] = None,
    styles: Optional[StyleIndex] = None,
    modifiers: Optional[Sequence[Modifier]] = None,
) -> DPRSummary:
    """Price ``build`` as expected damage per round.

    ``modifiers`` replaces the list derived from the build's flags when given.
    Never raises for in-catalog weapons: modifiers that don't fit the weapon
    contribute nothing.
    """
    weapons = weapons or default_weapons()
    styles = styles or default_styles()
    weapon = weapons.resolve(build.weapon_id)
    if modifiers is None:
        modifiers = modifiers_for(build, styles)
    log.debug("modifiers: %s", ", ".join(f"{m.category}:{type(m).__name__}" for m in modifiers))

    level = build.level
    ability = governing_ability(build, weapon)
    mod = build.abilities.modifier(ability)
    ctx = AttackContext(weapon=weapon, level=level, ability_mod=mod)
    acc = Accumulator(to_hit=proficiency_bonus(level) + mod)

    for m in modifiers:
        m.to_hit(ctx, acc)
    p_hit, p_crit = hit_and_crit(acc.to_hit, build.target_ac, build.adv_mode)
    # Clamped for riders and bonus attacks only; the primary swing blends the raw difference.
    p_noncrit = max(p_hit - p_crit, 0.0)

    for m in modifiers:
        m.dice(ctx, acc)
    dice = weapon.damage_die(build.use_versatile)
    dice_avg = dice_average(dice, reroll_low=acc.reroll_low)

    for m in modifiers:
        m.damage(ctx, acc)

    avg_hit = dice_avg + ctx.ability_mod + acc.flat_damage + acc.rider
    per_attack = _blend(p_hit - p_crit, p_crit, avg_hit, dice_avg)

    base_attacks = attacks_per_round(level)
    attacks = base_attacks + acc.extra_attacks
    dpr = per_attack * attacks

    if acc.sneak_dice:
        p_any = 1 - (1 - p_noncrit) ** max(1, base_attacks)
        dpr += p_any * dice_average(f"{acc.sneak_dice}d6")

    if acc.smite_dice and acc.smites_per_round:
        smite = acc.smite_dice * SMITE_DIE_AVG
        dpr += acc.smites_per_round * (p_noncrit * smite + p_crit * smite * 2)

    for die in acc.bonus_attack_dice:
        bonus_dice = dice_average(die)
        bonus_hit = bonus_dice + ctx.ability_mod + acc.rage_bonus + acc.rider
        dpr += _blend(p_noncrit, p_crit, bonus_hit, bonus_dice)

    # Resistance and vulnerability to the same type compound (x0.5 then x2).
    if build.resist and build.resist == weapon.damage_type:
        dpr *= 0.5
        acc.note(f"Target resists {weapon.damage_type} damage.")
    if build.vuln and build.vuln == weapon.damage_type:
        dpr *= 2
        acc.note(f"Target vulnerable to {weapon.damage_type} damage.")

    dpr = max(dpr, 0.0)
    log.debug("%s vs AC %s: to-hit %.1f dpr %.3f", weapon.id, build.target_ac, acc.to_hit, dpr)

    return DPRSummary(
        to_hit=_round_half_up(acc.to_hit),
        adv_mode=build.adv_mode,
        target_ac=build.target_ac,
        p_hit=p_hit,
        p_crit=p_crit,
        attacks=attacks,
        dpr=dpr,
        notes=tuple(acc.notes),
        avg_hit=avg_hit,
        avg_crit=avg_hit + dice_avg,
        per_attack=per_attack,
    )


Builds = Union[Mapping[str, BuildConfiguration], Iterable[Tuple[str, BuildConfiguration]]]


def compare_builds(builds: Builds, **kwargs) -> List[Tuple[str, DPRSummary]]:
    """Evaluate labelled builds, best DPR first (ties keep input order)."""
    items = builds.items() if isinstance(builds, Mapping) else builds
    ranked = [(label, evaluate(b, **kwargs)) for label, b in items]
    ranked.sort(key=lambda pair: pair[1].dpr, reverse=True)
    return ranked
