from .build import (
    ABILITY_ORDER,
    AbilityScores,
    Buffs,
    BuildConfiguration,
    Features,
    Feats,
)
from .summary import DPRSummary

__all__ = [
    "ABILITY_ORDER",
    "AbilityScores",
    "Buffs",
    "BuildConfiguration",
    "DPRSummary",
    "Features",
    "Feats",
]
