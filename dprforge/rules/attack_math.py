from __future__ import annotations
from typing import Tuple

from dprforge.types import AdvMode

# Natural 20 only, regardless of attack bonus.
BASE_CRIT_CHANCE = 0.05


def chance_to_hit(attack_bonus: float, target_ac: float) -> float:
    """
    Probability that ``d20 + attack_bonus >= target_ac``.
    Successful faces are ``21 - (target_ac - attack_bonus)``, clamped to [0, 20].
    """
    needed = target_ac - attack_bonus
    success = min(20.0, max(0.0, 21 - needed))
    return success / 20


def apply_advantage(p: float, mode: AdvMode) -> float:
    """Roll-twice transform: adv keeps the better roll, dis the worse."""
    if mode == "adv":
        return 1 - (1 - p) ** 2
    if mode == "dis":
        return p ** 2
    return p


def hit_and_crit(attack_bonus: float, target_ac: float, mode: AdvMode = "normal") -> Tuple[float, float]:
    """Return ``(p_hit, p_crit)`` with the advantage transform applied to both.

    Transforming the flat crit baseline is an approximation kept for parity
    with the optimizer panels.
    """
    p_hit = apply_advantage(chance_to_hit(attack_bonus, target_ac), mode)
    p_crit = apply_advantage(BASE_CRIT_CHANCE, mode)
    return p_hit, p_crit


def combine_modes(a: AdvMode, b: AdvMode) -> AdvMode:
    """Combine two advantage states.

    Advantage and disadvantage cancel to "normal". If one side is "normal",
    the other side wins.
    """
    if a == b:
        return a
    if a == "normal":
        return b
    if b == "normal":
        return a
    return "normal"
