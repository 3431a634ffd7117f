from .attack_math import (
    BASE_CRIT_CHANCE,
    AdvMode,
    apply_advantage,
    chance_to_hit,
    combine_modes,
    hit_and_crit,
)
from .dice import (
    DiceTerm,
    RollResult,
    dice_average,
    expand_template,
    parse_dice,
    roll_expression,
)
from .evaluator import compare_builds, evaluate, governing_ability
from .modifiers import Accumulator, AttackContext, Modifier, modifiers_for
from .progression import (
    ability_mod,
    attacks_per_round,
    proficiency_bonus,
    rage_damage_bonus,
    sneak_attack_dice,
)

__all__ = [
    # Dice
    "DiceTerm",
    "RollResult",
    "dice_average",
    "parse_dice",
    "roll_expression",
    "expand_template",
    # Progression
    "ability_mod",
    "proficiency_bonus",
    "attacks_per_round",
    "rage_damage_bonus",
    "sneak_attack_dice",
    # Probability
    "AdvMode",
    "BASE_CRIT_CHANCE",
    "chance_to_hit",
    "apply_advantage",
    "hit_and_crit",
    "combine_modes",
    # Evaluator
    "Accumulator",
    "AttackContext",
    "Modifier",
    "modifiers_for",
    "governing_ability",
    "evaluate",
    "compare_builds",
]
