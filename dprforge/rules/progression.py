import math


def ability_mod(score: int) -> int:
    """5e ability modifier from ability score."""
    return (score - 10) // 2


def proficiency_bonus(level: int) -> int:
    """5e proficiency bonus by level; levels below 1 count as level 1."""
    if level >= 17:
        return 6
    if level >= 13:
        return 5
    if level >= 9:
        return 4
    if level >= 5:
        return 3
    return 2


def attacks_per_round(level: int) -> int:
    # Fighter Extra Attack progression.
    if level >= 20:
        return 4
    if level >= 11:
        return 3
    if level >= 5:
        return 2
    return 1


def rage_damage_bonus(level: int) -> int:
    if level >= 16:
        return 4
    if level >= 9:
        return 3
    return 2


def sneak_attack_dice(level: int) -> int:
    return max(0, min(10, math.ceil(level / 2)))
