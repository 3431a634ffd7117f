"""Build modifiers as tagged variants folded into an :class:`Accumulator`.

Each modifier belongs to a category (style, feat, feature or buff) and may
act in three phases, run in this order over the whole list:

``to_hit``
    adjust the attack bonus before hit chances are computed
``dice``
    adjust how the weapon dice are averaged
``damage``
    flat per-hit damage, extra attacks, bonus attacks and once-per-turn riders

Notes are appended as each modifier fires: phase by phase, then list order.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional, Type

from dprforge.codex.styles import FightingStyle, StyleIndex
from dprforge.codex.weapons import Weapon
from dprforge.rules.dice import dice_average
from dprforge.rules.progression import rage_damage_bonus, sneak_attack_dice


@dataclass(frozen=True)
class AttackContext:
    weapon: Weapon
    level: int
    ability_mod: int

    @property
    def ranged(self) -> bool:
        return self.weapon.ranged

    @property
    def melee(self) -> bool:
        return self.weapon.melee


@dataclass
class Accumulator:
    to_hit: float
    reroll_low: bool = False
    flat_damage: float = 0.0
    rider: float = 0.0
    extra_attacks: int = 0
    rage_bonus: int = 0
    bonus_attack_dice: List[str] = field(default_factory=list)
    sneak_dice: int = 0
    smite_dice: int = 0
    smites_per_round: int = 0
    notes: List[str] = field(default_factory=list)

    def note(self, text: str) -> None:
        self.notes.append(text)


class Modifier:
    category: ClassVar[str] = ""

    def to_hit(self, ctx: AttackContext, acc: Accumulator) -> None:
        pass

    def dice(self, ctx: AttackContext, acc: Accumulator) -> None:
        pass

    def damage(self, ctx: AttackContext, acc: Accumulator) -> None:
        pass


# ---------- Fighting styles ---------------------------------------------------

@dataclass(frozen=True)
class Defense(Modifier):
    category: ClassVar[str] = "style"

    def to_hit(self, ctx, acc):
        acc.note("Defense: +1 AC (not factored into DPR).")


@dataclass(frozen=True)
class Archery(Modifier):
    category: ClassVar[str] = "style"

    def to_hit(self, ctx, acc):
        if ctx.ranged:
            acc.to_hit += 2
            acc.note("Archery: +2 to hit applied.")


@dataclass(frozen=True)
class GreatWeaponFighting(Modifier):
    category: ClassVar[str] = "style"

    def dice(self, ctx, acc):
        if not ctx.weapon.one_handed and ctx.melee:
            acc.reroll_low = True
            acc.note("Great Weapon Fighting: reroll 1s & 2s estimated.")


@dataclass(frozen=True)
class Dueling(Modifier):
    category: ClassVar[str] = "style"

    def damage(self, ctx, acc):
        if ctx.weapon.one_handed and ctx.melee:
            acc.flat_damage += 2
            acc.note("Dueling: +2 damage with 1H melee.")


@dataclass(frozen=True)
class TwoWeaponFighting(Modifier):
    category: ClassVar[str] = "style"

    def damage(self, ctx, acc):
        if ctx.weapon.light and ctx.melee:
            acc.extra_attacks += 1
            acc.note("Two-Weapon Fighting: includes offhand attack (adds mod).")


STYLE_MODIFIERS: Dict[str, Type[Modifier]] = {
    "defense": Defense,
    "melee-1h": Dueling,
    "melee-2h": GreatWeaponFighting,
    "ranged": Archery,
    "twf": TwoWeaponFighting,
}


def style_modifier(style: Optional[FightingStyle]) -> Optional[Modifier]:
    if style is None:
        return None
    cls = STYLE_MODIFIERS.get(style.tag)
    return cls() if cls else None


# ---------- Feats -------------------------------------------------------------

@dataclass(frozen=True)
class GreatWeaponMaster(Modifier):
    category: ClassVar[str] = "feat"

    @staticmethod
    def applies(ctx: AttackContext) -> bool:
        return ctx.weapon.qualifies("gwm") and ctx.melee

    def to_hit(self, ctx, acc):
        if self.applies(ctx):
            acc.to_hit -= 5
            acc.note("GWM: -5 to hit/+10 dmg.")

    def damage(self, ctx, acc):
        if self.applies(ctx):
            acc.flat_damage += 10


@dataclass(frozen=True)
class Sharpshooter(Modifier):
    category: ClassVar[str] = "feat"

    @staticmethod
    def applies(ctx: AttackContext) -> bool:
        return ctx.weapon.qualifies("ss") and ctx.ranged

    def to_hit(self, ctx, acc):
        if self.applies(ctx):
            acc.to_hit -= 5
            acc.note("Sharpshooter: -5 to hit/+10 dmg.")

    def damage(self, ctx, acc):
        if self.applies(ctx):
            acc.flat_damage += 10


@dataclass(frozen=True)
class PolearmMaster(Modifier):
    category: ClassVar[str] = "feat"
    die: str = "1d4"

    def damage(self, ctx, acc):
        if ctx.weapon.qualifies("pam") and ctx.melee:
            acc.bonus_attack_dice.append(self.die)
            acc.note(f"Polearm Master: bonus {self.die} attack added.")


@dataclass(frozen=True)
class CrossbowExpert(Modifier):
    category: ClassVar[str] = "feat"

    def damage(self, ctx, acc):
        if ctx.ranged and "crossbow" in ctx.weapon.id:
            acc.extra_attacks += 1
            acc.note("Crossbow Expert: bonus attack added.")


# ---------- Buffs -------------------------------------------------------------

@dataclass(frozen=True)
class Bless(Modifier):
    category: ClassVar[str] = "buff"
    # mean of a d4
    bonus: float = 2.5

    def to_hit(self, ctx, acc):
        acc.to_hit += self.bonus
        acc.note(f"Bless: +≈{self.bonus:g} to hit EV.")


@dataclass(frozen=True)
class OnHitRider(Modifier):
    category: ClassVar[str] = "buff"
    die: str = "1d6"
    label: str = "Hex/Hunter's Mark"

    def damage(self, ctx, acc):
        acc.rider += dice_average(self.die)
        acc.note(f"{self.label}: +{self.die} on hit.")


# ---------- Class features ----------------------------------------------------

@dataclass(frozen=True)
class Rage(Modifier):
    category: ClassVar[str] = "feature"

    def damage(self, ctx, acc):
        bonus = rage_damage_bonus(ctx.level)
        acc.rage_bonus = bonus
        if ctx.melee:
            acc.flat_damage += bonus
            acc.note(f"Rage: +{bonus} melee damage per hit.")


@dataclass(frozen=True)
class SneakAttack(Modifier):
    category: ClassVar[str] = "feature"

    def damage(self, ctx, acc):
        n = sneak_attack_dice(ctx.level)
        if n:
            acc.sneak_dice = n
            acc.note(f"Sneak Attack: {n}d6 once per turn.")


@dataclass(frozen=True)
class DivineSmite(Modifier):
    category: ClassVar[str] = "feature"
    count: int = 2
    per_round: int = 1

    def damage(self, ctx, acc):
        if self.count and self.per_round:
            acc.smite_dice = self.count
            acc.smites_per_round = self.per_round
            acc.note(f"Divine Smite: {self.count}d8 x{self.per_round} per round.")


def modifiers_for(build, styles: StyleIndex) -> List[Modifier]:
    """Translate the flags on ``build`` into an ordered modifier list.

    The order follows the optimizer panel's note trail rather than the
    evaluator step numbering; see "Decisions on open questions" in DESIGN.md.
    """
    out: List[Modifier] = []
    style = style_modifier(styles.resolve(build.style_id))
    if style is not None:
        out.append(style)
    if build.buffs.bless:
        out.append(Bless())
    if build.feats.gwm:
        out.append(GreatWeaponMaster())
    if build.feats.ss:
        out.append(Sharpshooter())
    if build.feats.pam:
        out.append(PolearmMaster())
    if build.feats.cbe:
        out.append(CrossbowExpert())
    if build.buffs.d6_on_hit:
        out.append(OnHitRider())
    if build.features.rage:
        out.append(Rage())
    if build.features.sneak:
        out.append(SneakAttack())
    if build.features.smite:
        out.append(
            DivineSmite(
                count=build.features.smite_dice,
                per_round=build.features.smites_per_round,
            )
        )
    return out
